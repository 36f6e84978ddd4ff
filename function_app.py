import azure.functions as func

from streamcatalog_recommendation_service.blueprints.history_bp import bp as history_bp
from streamcatalog_recommendation_service.blueprints.recommendations_bp import bp as recommendations_bp
from streamcatalog_recommendation_service.blueprints.tmdb_proxy_bp import bp as tmdb_proxy_bp
from streamcatalog_recommendation_service.models.database import init_db

init_db()

app = func.FunctionApp()

app.register_blueprint(recommendations_bp)
app.register_blueprint(history_bp)
app.register_blueprint(tmdb_proxy_bp)
