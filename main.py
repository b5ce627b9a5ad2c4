import logging
import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn

from config import Settings, load_settings
from logger import ServiceLogging
from models.database import create_engine, create_session_maker, init_db
from repository.base import Repository
from repository.sql import SqlRepository
from routes import users, teams, pull_request, stats
from routes.errors import install_error_handlers
from schemas import HealthResponse


logger = logging.getLogger(__name__)


def create_app(repository: Optional[Repository] = None,
               settings: Optional[Settings] = None,
               rng: Optional[random.Random] = None) -> FastAPI:
    """Build the application.

    With an explicit repository nothing is opened on startup; otherwise the
    lifespan connects to the database from settings and creates the schema.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if app.state.repository is None:
            app_settings = settings
            if app_settings is None:
                app_settings = load_settings()
                ServiceLogging(app_settings).setup()
            engine = create_engine(app_settings.db_url)
            await init_db(engine)
            app.state.repository = SqlRepository(create_session_maker(engine))
            logger.info("connected to database, schema is ready")

        yield

        if engine is not None:
            await engine.dispose()
            logger.info("database connections closed")

    app = FastAPI(title="PR Reviewer Assignment Service", lifespan=lifespan)
    app.state.repository = repository
    app.state.rng = rng or random.Random()

    install_error_handlers(app)

    app.include_router(users.router)
    app.include_router(teams.router)
    app.include_router(pull_request.router)
    app.include_router(stats.router)

    @app.get("/health", summary="Проверка работоспособности сервиса", response_model=HealthResponse)
    async def health():
        return HealthResponse(status="ok")

    return app


app = create_app()


def main() -> None:
    settings = load_settings()
    ServiceLogging(settings).setup()
    logger.info("starting server on port %d", settings.port)
    uvicorn.run(create_app(settings=settings), host="0.0.0.0", port=settings.port, timeout_graceful_shutdown=5)


if __name__ == "__main__":
    main()
