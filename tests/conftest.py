from datetime import datetime, timezone

import mongomock
import pytest

from voter_api.clock import FixedClock
from voter_api.schemas import VoterHistoryIn, VoterIn
from voter_api.storage import JsonVoterStore
from voter_api.storage_mongo import MongoVoterStore

START = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def make_voter(voter_id: int = 1, name: str = "Sam", email: str = "sam@example.com") -> VoterIn:
    return VoterIn(id=voter_id, name=name, email=email)


def make_history(poll_id: int = 1, vote_id: int = 10, vote_date: datetime = None) -> VoterHistoryIn:
    return VoterHistoryIn(
        poll_id=poll_id,
        vote_id=vote_id,
        vote_date=vote_date or datetime(2023, 11, 7, 9, 30, tzinfo=timezone.utc),
    )


@pytest.fixture()
def clock():
    return FixedClock(START)


@pytest.fixture()
def db_file(tmp_path):
    return tmp_path / "data" / "voters.json"


@pytest.fixture()
def json_store(db_file, clock):
    return JsonVoterStore(db_file, clock=clock)


@pytest.fixture()
def mongo_collection():
    client = mongomock.MongoClient()
    return client["voting_system"]["voters"]


@pytest.fixture()
def mongo_store(mongo_collection, clock):
    return MongoVoterStore(mongo_collection, clock=clock)


@pytest.fixture(params=["json", "mongo"])
def store(request):
    """Runs a test once per backend to check both honour the same contract."""
    return request.getfixturevalue(f"{request.param}_store")
