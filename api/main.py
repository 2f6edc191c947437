from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core import db
from core.config import Settings
from core.errors import install_error_handlers
from core.logs import configure_logging, log_requests
from tutorials import router as tutorials_router
from tutorials.repository import TutorialRepository
from tutorials.seed import seed_if_empty
from weather import router as weather_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # Initialize the DB pool once per process.
        await db.init_pool(settings)
        try:
            repo = TutorialRepository()
            if settings.db_auto_migrate:
                await repo.ensure_schema()
            if settings.seed_demo_data:
                await seed_if_empty(repo)
            logger.info("Synced & Connected to the database!")
            yield
        finally:
            await db.close_pool()

    app = FastAPI(title="tutorial-stack api", lifespan=lifespan)
    app.state.settings = settings

    # The browser frontend is served from another origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    install_error_handlers(app)

    app.include_router(tutorials_router.router, tags=["tutorials"])
    app.include_router(weather_router.router, tags=["weather"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "Welcome to tutorial application."}

    return app


app = create_app()
