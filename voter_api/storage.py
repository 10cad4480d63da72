# voter_api/storage.py
"""
Snapshot-file voter store.

The whole voter collection lives in one JSON array on disk. Every call
re-reads and re-decodes the file, and every mutation rewrites it in full,
so the file stays the single source of truth.

The read-modify-write cycle is not atomic: run at most one mutating call at
a time against the same file, otherwise the last writer wins.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import ValidationError as SchemaError
from pydantic_core import PydanticSerializationError

from .clock import Clock, SystemClock
from .errors import (
    HistoryAlreadyExistsError,
    HistoryNotFoundError,
    LoadFailureError,
    NoHistoryError,
    SaveFailureError,
    VoterAlreadyExistsError,
    VoterNotFoundError,
)
from .models.voter_model import Voter, voters_from_json, voters_to_json
from .schemas import (
    VoterHistoryIn,
    VoterHistoryOut,
    VoterIn,
    VoterOut,
    new_poll_record,
    new_voter,
)

logger = logging.getLogger(__name__)

EMPTY_DB = b"[]"


class JsonVoterStore:
    def __init__(self, db_path: Union[str, Path], clock: Optional[Clock] = None):
        self.db_path = Path(db_path)
        self.clock = clock or SystemClock()
        self.voters: Dict[int, Voter] = {}
        self._ensure_db()

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------

    def _ensure_db(self) -> None:
        """Seed a missing or empty file with an empty collection."""
        try:
            if self.db_path.exists() and self.db_path.stat().st_size > 0:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.db_path.write_bytes(EMPTY_DB)
        except OSError as e:
            logger.error(f"Failed to initialise voter DB {self.db_path}: {e}")
            raise SaveFailureError() from e
        logger.info(f"Initialised empty voter DB at {self.db_path}")

    def _read_db(self) -> None:
        self._ensure_db()
        try:
            voters = voters_from_json(self.db_path.read_bytes())
        except (OSError, SchemaError) as e:
            logger.error(f"Failed to load voter DB {self.db_path}: {e}")
            raise LoadFailureError() from e
        by_id = {voter.id: voter for voter in voters}
        if len(by_id) != len(voters):
            logger.error(f"Voter DB {self.db_path} lists the same voter id more than once")
            raise LoadFailureError()
        self.voters = by_id

    def _write_db(self) -> None:
        ordered = [self.voters[voter_id] for voter_id in sorted(self.voters)]
        try:
            self.db_path.write_bytes(voters_to_json(ordered))
        except (OSError, PydanticSerializationError) as e:
            logger.error(f"Failed to save voter DB {self.db_path}: {e}")
            raise SaveFailureError() from e

    def restore(self, backup_path: Union[str, Path]) -> None:
        """Overwrite the live file byte-for-byte with a backup file."""
        backup = Path(backup_path)
        try:
            data = backup.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read backup {backup}: {e}")
            raise LoadFailureError(f"failed to open {backup}") from e
        try:
            self.db_path.write_bytes(data)
        except OSError as e:
            logger.error(f"Failed to write {self.db_path}: {e}")
            raise SaveFailureError(f"failed to write to {self.db_path}") from e
        logger.info(f"Finished copying from {backup} to {self.db_path}")

    # ------------------------------------------------------------------
    # Voters
    # ------------------------------------------------------------------

    def create_voter(self, voter: VoterIn) -> None:
        self._read_db()
        if voter.id in self.voters:
            logger.warning(f"Voter {voter.id} already exists")
            raise VoterAlreadyExistsError()

        self.voters[voter.id] = new_voter(voter, self.clock.now())
        self._write_db()
        logger.info(f"Voter {voter.id} saved successfully")

    def update_voter_info(self, voter: VoterIn) -> None:
        self._read_db()
        previous = self.voters.get(voter.id)
        if previous is None:
            raise VoterNotFoundError()

        previous.name = voter.name
        previous.email = voter.email
        previous.modified = self.clock.now()
        self._write_db()
        logger.info(f"Voter {voter.id} updated successfully")

    def delete_single_voter(self, voter_id: int) -> None:
        self._read_db()
        if voter_id not in self.voters:
            raise VoterNotFoundError()

        del self.voters[voter_id]
        self._write_db()
        logger.info(f"Voter {voter_id} deleted successfully")

    def delete_all_voters(self) -> int:
        self._read_db()
        removed = len(self.voters)
        self.voters = {}
        self._write_db()
        logger.info(f"Deleted {removed} voters")
        return removed

    # ------------------------------------------------------------------
    # Poll history
    # ------------------------------------------------------------------

    def create_voter_history(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        records = voter.history or {}
        if poll_id in records:
            raise HistoryAlreadyExistsError()

        now = self.clock.now()
        records[poll_id] = new_poll_record(poll_id, history, created=now, modified=now)
        voter.history = records
        voter.modified = now
        self._write_db()
        logger.info(f"Poll {poll_id} registered for voter {voter_id}")

    def update_voter_history_info(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None or poll_id not in (voter.history or {}):
            raise HistoryNotFoundError()

        now = self.clock.now()
        previous = voter.history[poll_id]
        voter.history[poll_id] = new_poll_record(poll_id, history, created=previous.created, modified=now)
        voter.modified = now
        self._write_db()
        logger.info(f"Poll {poll_id} updated for voter {voter_id}")

    def delete_single_voter_poll(self, voter_id: int, poll_id: int) -> None:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None or poll_id not in (voter.history or {}):
            raise HistoryNotFoundError()

        del voter.history[poll_id]
        if not voter.history:
            voter.history = None
        voter.modified = self.clock.now()
        self._write_db()
        logger.info(f"Poll {poll_id} deleted for voter {voter_id}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_voters(self) -> List[VoterOut]:
        self._read_db()
        return [VoterOut.from_voter(self.voters[voter_id]) for voter_id in sorted(self.voters)]

    def get_single_voter(self, voter_id: int) -> VoterOut:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        return VoterOut.from_voter(voter)

    def get_voter_history(self, voter_id: int) -> List[VoterHistoryOut]:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        if not voter.has_history():
            raise NoHistoryError()
        return [VoterHistoryOut.from_record(record) for record in voter.history_items()]

    def get_single_event(self, voter_id: int, poll_id: int) -> VoterHistoryOut:
        self._read_db()
        voter = self.voters.get(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        record = (voter.history or {}).get(poll_id)
        if record is None:
            raise HistoryNotFoundError()
        return VoterHistoryOut.from_record(record)
