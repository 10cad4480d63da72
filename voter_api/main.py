# voter_api/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .errors import (
    ConflictError,
    LoadFailureError,
    NotFoundError,
    SaveFailureError,
    StorageError,
    ValidationError,
)
from .provider import get_repository
from .repository import VoterRepository
from .routes.voter_routes import router as voter_router
from .services import VoterService

logger = logging.getLogger(__name__)


def _error_response(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})

    return handler


def create_app(repository: Optional[VoterRepository] = None) -> FastAPI:
    """Build the HTTP adapter around one repository (the configured one by default)."""
    if repository is None:
        settings = get_settings()
        logging.basicConfig(level=settings.log_level)
        repository = get_repository(settings)

    app = FastAPI(title="Voter API", version=__version__)
    app.state.voter_service = VoterService(repository)

    app.add_exception_handler(ValidationError, _error_response(400))
    app.add_exception_handler(NotFoundError, _error_response(404))
    app.add_exception_handler(ConflictError, _error_response(409))
    # Load/save failures are ours; a bare StorageError means the store is unreachable
    app.add_exception_handler(LoadFailureError, _error_response(500))
    app.add_exception_handler(SaveFailureError, _error_response(500))
    app.add_exception_handler(StorageError, _error_response(503))

    app.include_router(voter_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Welcome to the Voter API", "version": __version__}

    return app
