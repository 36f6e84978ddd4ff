"""Allow-listed proxy to the movie metadata API."""
import azure.functions as func
import logging
import json

import requests

from streamcatalog_recommendation_service.services.tmdb_client import (
    TMDBClient,
    is_endpoint_allowed,
)

bp = func.Blueprint()

tmdb_client = TMDBClient()

logger = logging.getLogger(__name__)


def _error(message: str, status_code: int) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps({"error": message}),
        status_code=status_code,
        mimetype="application/json"
    )


@bp.route(route="tmdb", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def proxy_tmdb(req: func.HttpRequest) -> func.HttpResponse:
    """
    Forward a metadata request.

    Body:
        - endpoint: API path, must be allow-listed
        - params: Optional query parameters
    """
    if not tmdb_client.api_key:
        logger.error("TMDB_API_KEY not configured")
        return _error("TMDB_API_KEY not configured", 500)

    try:
        body = req.get_json()
    except ValueError:
        return _error("Request body must be JSON", 400)

    if not isinstance(body, dict):
        return _error("Request body must be a JSON object", 400)

    endpoint = body.get('endpoint')
    params = body.get('params') or {}
    if not isinstance(params, dict):
        return _error("params must be an object", 400)

    if not is_endpoint_allowed(endpoint):
        logger.error(f"Blocked unauthorized endpoint access: {endpoint}")
        return _error("Endpoint not allowed", 403)

    try:
        data = tmdb_client.get_raw(endpoint, params)
    except requests.RequestException as e:
        logger.error(f"TMDB API error: {str(e)}")
        return _error("Upstream request failed", 500)

    return func.HttpResponse(
        json.dumps(data),
        status_code=200,
        mimetype="application/json"
    )
