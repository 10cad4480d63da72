# voter_api/storage_mongo.py
"""
MongoDB voter store.

One document per voter, keyed ``voter:<id>``, holding the same JSON object a
snapshot file stores for that voter. Poll history is embedded in the voter
document, so history mutations read the document, change the map in memory
and write the whole document back. Two concurrent history mutations on the
same voter can therefore overwrite each other; mutations on different voters
do not interfere.
"""
import logging
import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from bson.errors import InvalidDocument
from pydantic import ValidationError as SchemaError
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from .clock import Clock, SystemClock
from .config import (
    DEFAULT_MONGO_DB,
    DEFAULT_MONGO_URI,
    DEFAULT_VOTERS_COLLECTION,
    VOTER_KEY_PREFIX,
)
from .errors import (
    HistoryAlreadyExistsError,
    HistoryNotFoundError,
    LoadFailureError,
    NoHistoryError,
    StorageError,
    VoterAlreadyExistsError,
    VoterNotFoundError,
)
from .models.voter_model import PollRecord, Voter, encode_timestamp, history_from_document
from .schemas import (
    VoterHistoryIn,
    VoterHistoryOut,
    VoterIn,
    VoterOut,
    new_poll_record,
    new_voter,
)

logger = logging.getLogger(__name__)


def voter_key(voter_id: int) -> str:
    return f"{VOTER_KEY_PREFIX}{voter_id}"


ALL_VOTERS = {"_id": {"$regex": f"^{re.escape(VOTER_KEY_PREFIX)}"}}


class MongoVoterStore:
    def __init__(self, collection: Collection, clock: Optional[Clock] = None, client: Optional[MongoClient] = None):
        self.collection = collection
        self.client = client
        self.clock = clock or SystemClock()

    @classmethod
    def connect(
        cls,
        uri: str = DEFAULT_MONGO_URI,
        database: str = DEFAULT_MONGO_DB,
        collection: str = DEFAULT_VOTERS_COLLECTION,
        clock: Optional[Clock] = None,
    ) -> "MongoVoterStore":
        """Open a client and make sure the server answers before using it."""
        try:
            client = MongoClient(uri)
            client.server_info()
        except PyMongoError as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise StorageError(f"Could not connect to MongoDB at {uri}") from e
        logger.info(f"Connected to MongoDB at {uri}, database: {database}")
        return cls(client[database][collection], clock=clock, client=client)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB connection closed")

    # ------------------------------------------------------------------
    # Document helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _transport(self, action: str):
        try:
            yield
        except (PyMongoError, InvalidDocument, OverflowError) as e:
            logger.error(f"Error {action}: {e}")
            raise StorageError(f"Document store failure while {action}") from e

    def _exists(self, voter_id: int) -> bool:
        with self._transport(f"checking voter {voter_id}"):
            return self.collection.count_documents({"_id": voter_key(voter_id)}, limit=1) > 0

    @staticmethod
    def _decode(document: Dict[str, Any]) -> Voter:
        document = dict(document)
        document.pop("_id", None)
        try:
            return Voter.model_validate(document)
        except SchemaError as e:
            logger.error(f"Stored voter document does not decode: {e}")
            raise LoadFailureError() from e

    @staticmethod
    def _encode(voter: Voter) -> Dict[str, Any]:
        document = voter.to_document()
        document["_id"] = voter_key(voter.id)
        return document

    def _get_voter(self, voter_id: int) -> Optional[Voter]:
        with self._transport(f"retrieving voter {voter_id}"):
            document = self.collection.find_one({"_id": voter_key(voter_id)})
        if document is None:
            return None
        return self._decode(document)

    def _get_history(self, voter_id: int) -> Optional[Dict[int, PollRecord]]:
        """Fetch only the history map; None when the voter does not exist."""
        with self._transport(f"retrieving history for voter {voter_id}"):
            document = self.collection.find_one({"_id": voter_key(voter_id)}, {"history": 1})
        if document is None:
            return None
        try:
            return history_from_document(document.get("history"))
        except SchemaError as e:
            logger.error(f"Stored history for voter {voter_id} does not decode: {e}")
            raise LoadFailureError() from e

    def _replace_voter(self, voter: Voter, missing_error: type) -> None:
        with self._transport(f"saving voter {voter.id}"):
            result = self.collection.replace_one({"_id": voter_key(voter.id)}, self._encode(voter))
        if result.matched_count == 0:
            # deleted between our read and our write
            raise missing_error()

    # ------------------------------------------------------------------
    # Voters
    # ------------------------------------------------------------------

    def create_voter(self, voter: VoterIn) -> None:
        if self._exists(voter.id):
            logger.warning(f"Voter {voter.id} already exists")
            raise VoterAlreadyExistsError()

        document = self._encode(new_voter(voter, self.clock.now()))
        with self._transport(f"saving voter {voter.id}"):
            try:
                self.collection.insert_one(document)
            except DuplicateKeyError as e:
                logger.warning(f"Voter {voter.id} already exists")
                raise VoterAlreadyExistsError() from e
        logger.info(f"Voter {voter.id} saved successfully")

    def update_voter_info(self, voter: VoterIn) -> None:
        if not self._exists(voter.id):
            raise VoterNotFoundError()

        changes = {
            "name": voter.name,
            "email": voter.email,
            "modified": encode_timestamp(self.clock.now()),
        }
        with self._transport(f"updating voter {voter.id}"):
            result = self.collection.update_one({"_id": voter_key(voter.id)}, {"$set": changes})
        if result.matched_count == 0:
            raise VoterNotFoundError()
        logger.info(f"Voter {voter.id} updated successfully")

    def delete_single_voter(self, voter_id: int) -> None:
        if not self._exists(voter_id):
            raise VoterNotFoundError()

        with self._transport(f"deleting voter {voter_id}"):
            result = self.collection.delete_one({"_id": voter_key(voter_id)})
        if result.deleted_count == 0:
            raise VoterNotFoundError()
        logger.info(f"Voter {voter_id} deleted successfully")

    def delete_all_voters(self) -> int:
        with self._transport("deleting all voters"):
            removed = self.collection.delete_many(ALL_VOTERS).deleted_count
        logger.info(f"Deleted {removed} voters")
        return removed

    # ------------------------------------------------------------------
    # Poll history
    # ------------------------------------------------------------------

    def create_voter_history(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        voter = self._get_voter(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        records = voter.history or {}
        if poll_id in records:
            raise HistoryAlreadyExistsError()

        now = self.clock.now()
        records[poll_id] = new_poll_record(poll_id, history, created=now, modified=now)
        voter.history = records
        voter.modified = now
        self._replace_voter(voter, VoterNotFoundError)
        logger.info(f"Poll {poll_id} registered for voter {voter_id}")

    def update_voter_history_info(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        voter = self._get_voter(voter_id)
        if voter is None or poll_id not in (voter.history or {}):
            raise HistoryNotFoundError()

        now = self.clock.now()
        previous = voter.history[poll_id]
        voter.history[poll_id] = new_poll_record(poll_id, history, created=previous.created, modified=now)
        voter.modified = now
        self._replace_voter(voter, HistoryNotFoundError)
        logger.info(f"Poll {poll_id} updated for voter {voter_id}")

    def delete_single_voter_poll(self, voter_id: int, poll_id: int) -> None:
        voter = self._get_voter(voter_id)
        if voter is None or poll_id not in (voter.history or {}):
            raise HistoryNotFoundError()

        del voter.history[poll_id]
        if not voter.history:
            voter.history = None
        voter.modified = self.clock.now()
        self._replace_voter(voter, HistoryNotFoundError)
        logger.info(f"Poll {poll_id} deleted for voter {voter_id}")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_voters(self) -> List[VoterOut]:
        with self._transport("listing voters"):
            documents = list(self.collection.find(ALL_VOTERS))
        voters = sorted((self._decode(document) for document in documents), key=lambda voter: voter.id)
        logger.info(f"Retrieved {len(voters)} voters")
        return [VoterOut.from_voter(voter) for voter in voters]

    def get_single_voter(self, voter_id: int) -> VoterOut:
        voter = self._get_voter(voter_id)
        if voter is None:
            raise VoterNotFoundError()
        return VoterOut.from_voter(voter)

    def get_voter_history(self, voter_id: int) -> List[VoterHistoryOut]:
        records = self._get_history(voter_id)
        if records is None:
            raise VoterNotFoundError()
        if not records:
            raise NoHistoryError()
        return [VoterHistoryOut.from_record(record) for record in records.values()]

    def get_single_event(self, voter_id: int, poll_id: int) -> VoterHistoryOut:
        records = self._get_history(voter_id)
        if records is None:
            raise VoterNotFoundError()
        record = records.get(poll_id)
        if record is None:
            raise HistoryNotFoundError()
        return VoterHistoryOut.from_record(record)
