# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from jobboard.config import settings
from jobboard.config import build_sqlalchemy_db_url
from jobboard.database import Base, engine, mask_db_url
from jobboard.models import Job, User  # noqa: F401  (registers tables on Base.metadata)
from jobboard.routers import ai, auth, health, jobs, users
from jobboard.routers.dependencies import build_skill_vocabulary


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def create_app() -> FastAPI:
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Skill vocabulary is immutable for the life of the process.
        app.state.skill_vocabulary = build_skill_vocabulary()
        logger.info("skill vocabulary loaded size=%d", len(app.state.skill_vocabulary))
        yield

    application = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints (do not depend on API_PREFIX)
    application.include_router(health.router)

    application.include_router(auth.router, prefix="/auth", tags=["auth"])
    application.include_router(users.router, prefix="/users", tags=["users"])
    application.include_router(jobs.router, prefix=settings.api_prefix)
    application.include_router(ai.router, prefix=settings.api_prefix)

    db_url = build_sqlalchemy_db_url(settings)
    logger.info("SQLAlchemy ORM db_url=%s", mask_db_url(db_url))
    # Only auto-create tables on sqlite; shared MySQL schemas are managed out of band.
    if db_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    return application


app = create_app()
