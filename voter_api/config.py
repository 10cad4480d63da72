# voter_api/config.py
# Central place for storage settings and constants
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

# Load environment variables from a local .env if present
load_dotenv()

# Which backend serves the repository contract: "json" or "mongo"
DEFAULT_BACKEND = "json"

# Snapshot file (JSON array of voters) and its administrative backup
DEFAULT_DB_PATH = "data/voters.json"
DEFAULT_BACKUP_PATH = "data/voters.json.bak"

# MongoDB configuration
DEFAULT_MONGO_URI = "mongodb://localhost:27017"
DEFAULT_MONGO_DB = "voting_system"
DEFAULT_VOTERS_COLLECTION = "voters"

# HTTP server started by `voter-api start`
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000

# Document ids look like voter:<id>
VOTER_KEY_PREFIX = "voter:"


@dataclass(frozen=True)
class Settings:
    backend: str
    db_path: str
    backup_path: str
    mongo_uri: str
    mongo_db: str
    voters_collection: str
    log_level: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    return Settings(
        backend=(os.getenv("VOTER_BACKEND") or DEFAULT_BACKEND).strip().lower(),
        db_path=os.getenv("VOTER_DB_PATH", DEFAULT_DB_PATH),
        backup_path=os.getenv("VOTER_BACKUP_PATH", DEFAULT_BACKUP_PATH),
        mongo_uri=os.getenv("MONGO_URI", DEFAULT_MONGO_URI),
        mongo_db=os.getenv("MONGO_DB", DEFAULT_MONGO_DB),
        voters_collection=os.getenv("VOTERS_COLLECTION", DEFAULT_VOTERS_COLLECTION),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("VOTER_HOST", DEFAULT_HOST),
        port=int(os.getenv("VOTER_PORT", DEFAULT_PORT)),
    )
