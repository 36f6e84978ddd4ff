"""Read and update the watch history."""
import azure.functions as func
import logging
import json

from streamcatalog_recommendation_service.blueprints.recommendations_bp import history_store
from streamcatalog_recommendation_service.models.media import to_media_summary
from streamcatalog_recommendation_service.models.watch_event import MediaType

bp = func.Blueprint()

logger = logging.getLogger(__name__)

MEDIA_TYPES = {media_type.value for media_type in MediaType}


def _json_response(body, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body),
        status_code=status_code,
        mimetype="application/json"
    )


def _error(message: str, status_code: int = 400) -> func.HttpResponse:
    return _json_response({"error": message}, status_code=status_code)


def _parse_media_key(req: func.HttpRequest):
    """Return (media_id, media_type, error_response)."""
    media_type = req.route_params.get('media_type')
    media_id = req.route_params.get('media_id')

    if media_type not in MEDIA_TYPES:
        return None, None, _error("media_type must be 'movie' or 'tv'")

    try:
        media_id = int(media_id)
    except (TypeError, ValueError):
        return None, None, _error("media_id must be an integer")

    if media_id < 1:
        return None, None, _error("media_id must be positive")

    return media_id, media_type, None


def _read_body(req: func.HttpRequest):
    try:
        body = req.get_json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@bp.route(route="history", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def list_history(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get the watch history, most recent first.

    Query Parameters:
        - view: 'events' (default) or 'summary' for media-card shaped entries
    """
    try:
        view = req.params.get('view', 'events')
        if view not in ('events', 'summary'):
            return _error("view must be 'events' or 'summary'")

        events = history_store.list()
        if view == 'summary':
            results = [to_media_summary(event).model_dump(mode="json") for event in events]
        else:
            results = [event.to_storage() for event in events]

        return _json_response({"count": len(results), "results": results})

    except Exception as e:
        logger.error(f"Error listing history: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)


@bp.route(route="history", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def record_history(req: func.HttpRequest) -> func.HttpResponse:
    """Record a watch event. Invalid events are dropped silently."""
    try:
        body = _read_body(req)
        if body is None:
            return _error("Request body must be a JSON object")

        history_store.record(body)
        return _json_response({"status": "accepted"}, status_code=202)

    except Exception as e:
        logger.error(f"Error recording history: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)


@bp.route(route="history/playback", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def record_playback(req: func.HttpRequest) -> func.HttpResponse:
    """
    Record playback that ended or was interrupted.

    Body: watch event fields plus elapsedSeconds and durationSeconds.
    """
    try:
        body = _read_body(req)
        if body is None:
            return _error("Request body must be a JSON object")

        event = dict(body)
        try:
            elapsed = float(event.pop('elapsedSeconds'))
            duration = float(event.pop('durationSeconds'))
        except KeyError:
            return _error("elapsedSeconds and durationSeconds are required")
        except (TypeError, ValueError):
            return _error("elapsedSeconds and durationSeconds must be numbers")

        history_store.record_playback(event, elapsed=elapsed, duration=duration)
        return _json_response({"status": "accepted"}, status_code=202)

    except Exception as e:
        logger.error(f"Error recording playback: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)


@bp.route(route="history/{media_type}/{media_id}", methods=["DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def remove_history_item(req: func.HttpRequest) -> func.HttpResponse:
    """Remove one entry from the history."""
    try:
        media_id, media_type, error = _parse_media_key(req)
        if error:
            return error

        removed = history_store.remove(media_id, media_type)
        return _json_response({"removed": removed})

    except Exception as e:
        logger.error(f"Error removing history item: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)


# noinspection PyUnusedLocal
@bp.route(route="history", methods=["DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
def clear_history(req: func.HttpRequest) -> func.HttpResponse:
    """Remove all history."""
    try:
        history_store.clear()
        return func.HttpResponse(status_code=204)

    except Exception as e:
        logger.error(f"Error clearing history: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)


@bp.route(route="history/{media_type}/{media_id}/progress", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_progress(req: func.HttpRequest) -> func.HttpResponse:
    """Get the stored progress for one title (0 when never watched)."""
    try:
        media_id, media_type, error = _parse_media_key(req)
        if error:
            return error

        progress = history_store.progress_for(media_id, media_type)
        return _json_response({
            "mediaId": media_id,
            "mediaType": media_type,
            "progress": progress
        })

    except Exception as e:
        logger.error(f"Error getting progress: {str(e)}", exc_info=True)
        return _error("Internal server error", status_code=500)
