"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from liftlog_importer.api.routes import router
from liftlog_importer.config import Settings, settings
from liftlog_importer.services.credentials import InMemorySecretStore
from liftlog_importer.services.import_service import ImportService
from liftlog_importer.services.store import InMemoryObjectStore, StoreWriter

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    writer = StoreWriter(InMemoryObjectStore())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await writer.close()

    app = FastAPI(title="LiftLog Importer", lifespan=lifespan)

    # Configure CORS to allow requests from the UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://localhost:3001"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.writer = writer
    app.state.import_service = ImportService(
        app_settings,
        writer,
        secret_store=InMemorySecretStore(),
    )
    app.include_router(router)

    logger.info(f"LiftLog importer configured for {app_settings.ENVIRONMENT}")
    return app


app = create_app()
