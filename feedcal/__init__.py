import logging

from flask import Blueprint, Flask, Response, jsonify, request, url_for
from pydantic import ValidationError

from .auth import check_auth
from .config import FeedConfig
from .constants import COMBINED_FEED_NAME, FEED_EXTENSION
from .exceptions import FeedError, FeedNotFoundError
from .models.notifications import ScheduleRequest
from .processing.event_mapper import from_tool_call
from .storage.feed_paths import safe_feed_name
from .storage.feed_router import FeedRouter

logger = logging.getLogger(__name__)


def serve_ics(document: str, filename: str) -> Response:
    return Response(
        document,
        content_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


def create_app(router: FeedRouter | None = None, config: FeedConfig | None = None):
    config = config or (router.config if router else FeedConfig())
    router = router or FeedRouter(config)

    app = Flask(__name__)
    app.extensions["feedcal.router"] = router
    if not config.enabled:
        logger.info("Feeds disabled, no routes registered")
        return app

    feeds = Blueprint("feedcal", __name__, url_prefix=config.server.url_prefix or None)

    @feeds.before_request
    def authenticate():
        decision = check_auth(request.headers, config.auth)
        if not decision.allowed:
            return Response(
                decision.message, status=decision.status, headers=decision.headers
            )
        return None

    @feeds.route("/feed.ics", methods=["GET"])
    def combined_feed():
        """Serve the combined document."""
        if router.combined is None:
            return ("Combined feed not enabled", 404)
        return serve_ics(router.render_feed(), f"{COMBINED_FEED_NAME}{FEED_EXTENSION}")

    @feeds.route("/feed/<source>.ics", methods=["GET"])
    def source_feed(source: str):
        """Serve one per-source document."""
        try:
            document = router.render_feed(source)
        except FeedNotFoundError:
            return (f'No feed found for source "{source}"', 404)
        return serve_ics(document, f"{safe_feed_name(source)}{FEED_EXTENSION}")

    @feeds.route("/feeds", methods=["GET"])
    def list_feeds():
        """Directory of available feeds."""
        combined = url_for(".combined_feed") if router.combined is not None else None
        return jsonify(
            {
                "combined": combined,
                "sources": [
                    {"id": source, "url": url_for(".source_feed", source=source)}
                    for source in router.source_ids()
                ],
            }
        )

    @feeds.route("/events", methods=["POST"])
    def schedule_event():
        """Schedule tool: add one event from a JSON body."""
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return (jsonify({"success": False, "error": "JSON object required"}), 400)
        try:
            schedule = ScheduleRequest.model_validate(payload)
        except ValidationError as e:
            return (
                jsonify({"success": False, "error": e.errors(include_url=False, include_context=False)}),
                400,
            )

        event = router.add_event(from_tool_call(schedule, config.defaults))
        return (
            jsonify(
                {
                    "success": True,
                    "uid": event.uid,
                    "message": f'Added "{event.title}" to calendar',
                }
            ),
            201,
        )

    @feeds.errorhandler(FeedError)
    def feed_error(e: FeedError):
        logger.error(f"Request failed: {e}")
        return (jsonify({"success": False, "error": str(e)}), 500)

    app.register_blueprint(feeds)
    return app
