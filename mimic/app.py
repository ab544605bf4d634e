import logging

from fastapi import FastAPI

from mimic.cache import ModelCache
from mimic.config import Settings
from mimic.events import DedupGate, EventHandler
from mimic.pipeline import GenerationPipeline
from mimic.routes import router
from mimic.slack import SlackClient
from mimic.storage import Storage

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    storage = Storage(settings.data_dir)
    cache = ModelCache(storage, max_line_tokens=settings.max_line_tokens)
    pipeline = GenerationPipeline(cache)
    slack = SlackClient(settings.slack_bot_token, api_url=settings.slack_api_url)

    app = FastAPI(title="Mimic")
    app.state.settings = settings
    app.state.storage = storage
    app.state.cache = cache
    app.state.pipeline = pipeline
    app.state.dedup = DedupGate()
    app.state.events = EventHandler(
        storage, pipeline, notifier=slack, profiles=slack,
        self_id=settings.slack_bot_user_id,
    )
    app.include_router(router)

    if not settings.slack_bot_user_id:
        logger.warning("SLACK_BOT_USER_ID is not set; mentions will never resolve")
    if not settings.slack_signing_secret:
        logger.warning("SLACK_SIGNING_SECRET is not set; /slack/events requests are not verified")
    return app
