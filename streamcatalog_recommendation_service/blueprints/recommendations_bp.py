"""Get personalized movie recommendations."""
import azure.functions as func
import logging
import json

from streamcatalog_recommendation_service.services import (
    HybridRecommendationService,
    WatchHistoryStore,
)
from streamcatalog_recommendation_service.utils.device import detect_device_profile, profile_for_request
from streamcatalog_recommendation_service.utils.images import get_backdrop_url, get_image_url

# Initialize blueprint
bp = func.Blueprint()

# Initialize services (singleton pattern)
history_store = WatchHistoryStore()
recommendation_service = HybridRecommendationService(history_store=history_store)
device_profile = detect_device_profile()

logger = logging.getLogger(__name__)


def serialize_movie(movie, profile=None) -> dict:
    """Movie JSON with ready-to-use image URLs for the requesting device."""
    profile = profile or device_profile
    data = movie.model_dump()
    data["poster_url"] = get_image_url(movie.poster_path, profile=profile)
    data["backdrop_url"] = get_backdrop_url(movie.backdrop_path, profile=profile)
    return data


@bp.route(route="recommendations", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_recommendations(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get recommendations based on the watch history.

    Query Parameters:
        - limit: Maximum number of results (optional, 1-100)

    Headers:
        - Device-Memory, Sec-CH-Hardware-Concurrency: client hints used to
          pick image sizes
    """
    try:
        limit = req.params.get('limit')
        if limit is not None:
            try:
                limit = int(limit)
            except ValueError:
                return func.HttpResponse(
                    json.dumps({"error": "limit must be an integer"}),
                    status_code=400,
                    mimetype="application/json"
                )
            if limit < 1 or limit > 100:
                return func.HttpResponse(
                    json.dumps({"error": "limit must be between 1 and 100"}),
                    status_code=400,
                    mimetype="application/json"
                )

        movies = recommendation_service.get_recommendations()
        if limit is not None:
            movies = movies[:limit]

        profile = profile_for_request(req.headers, device_profile)
        response = {
            "count": len(movies),
            "results": [serialize_movie(movie, profile) for movie in movies]
        }

        return func.HttpResponse(
            json.dumps(response),
            status_code=200,
            mimetype="application/json"
        )

    except Exception as e:
        logger.error(f"Error getting recommendations: {str(e)}", exc_info=True)
        return func.HttpResponse(
            json.dumps({"error": "Internal server error"}),
            status_code=500,
            mimetype="application/json"
        )


# noinspection PyUnusedLocal
@bp.route(route="recommendations/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return func.HttpResponse(
        json.dumps({
            "status": "healthy",
            "service": "streamcatalog-recommendation-service",
            "version": "1.0.0",
            "lite_mode": device_profile.is_low_end
        }),
        status_code=200,
        mimetype="application/json"
    )
