from __future__ import annotations

# src/personapi/api/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from personapi import __version__
from personapi.api.routes.persons import router as persons_router
from personapi.config import Settings, get_settings
from personapi.db import PersonStore, get_engine, make_session_factory
from personapi.enrichment import EnrichmentService
from personapi.logging import get_logger
from personapi.services import PersonService

logger = get_logger(__file__)


def build_person_service(settings: Settings | None = None) -> PersonService:
    settings = settings or get_settings()
    store = PersonStore(make_session_factory(get_engine(settings.db_path)))
    return PersonService(EnrichmentService.from_settings(settings), store)


def create_app(
    service: PersonService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    ``service`` defaults to one wired from ``settings`` (SQL store plus the
    public classifiers); tests pass their own.
    """

    settings = settings or get_settings()
    app = FastAPI(title="personapi", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.state.person_service = service or build_person_service(settings)

    @app.get("/status")
    def status():
        return {"ok": True}

    app.include_router(persons_router)
    app.include_router(persons_router, prefix="/api")
    logger.info("personapi app created (enrichment policy: %s)", settings.enrich_policy)
    return app


def __getattr__(name: str):
    # ``uvicorn personapi.api.main:app`` builds the app on first access only
    if name == "app":
        app = create_app()
        globals()["app"] = app
        return app
    raise AttributeError(name)
