"""
Repository provider.

Builds the backend selected by configuration. Callers depend on
``VoterRepository`` only:

    from voter_api.provider import get_repository

    repository = get_repository()
    repository.get_single_voter(1)
"""
import logging
from typing import Optional

from .clock import Clock
from .config import Settings, get_settings
from .repository import VoterRepository
from .storage import JsonVoterStore
from .storage_mongo import MongoVoterStore

logger = logging.getLogger(__name__)

BACKENDS = ("json", "mongo")


def get_repository(settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> VoterRepository:
    settings = settings or get_settings()

    if settings.backend == "json":
        logger.info(f"Using snapshot-file voter store at {settings.db_path}")
        return JsonVoterStore(settings.db_path, clock=clock)
    if settings.backend == "mongo":
        return MongoVoterStore.connect(
            settings.mongo_uri,
            settings.mongo_db,
            settings.voters_collection,
            clock=clock,
        )
    raise ValueError(f"Unknown VOTER_BACKEND {settings.backend!r}; expected one of {', '.join(BACKENDS)}")
