import json
from pathlib import Path

import pytest

from conftest import make_history, make_voter
from voter_api.errors import LoadFailureError, SaveFailureError
from voter_api.storage import JsonVoterStore

VOTER_FIELDS = {"id", "name", "email", "history", "created", "modified"}
POLL_FIELDS = {"poll_id", "vote_id", "vote_date", "created", "modified"}


def test_missing_file_is_seeded(db_file, clock):
    assert not db_file.exists()
    JsonVoterStore(db_file, clock=clock)
    assert db_file.read_text() == "[]"


def test_empty_file_is_seeded(db_file, clock):
    db_file.parent.mkdir(parents=True)
    db_file.write_text("")
    store = JsonVoterStore(db_file, clock=clock)
    assert db_file.read_text() == "[]"

    # emptied behind our back: reseeded before the next read
    db_file.write_text("")
    assert store.get_all_voters() == []
    assert db_file.read_text() == "[]"


def test_existing_file_is_kept(db_file, clock):
    JsonVoterStore(db_file, clock=clock).create_voter(make_voter(1))
    store = JsonVoterStore(db_file, clock=clock)
    assert store.get_single_voter(1).name == "Sam"


def test_snapshot_file_format(json_store, db_file):
    json_store.create_voter(make_voter(1))
    json_store.create_voter(make_voter(2, "Alex", "alex@example.com"))
    json_store.create_voter_history(1, 5, make_history(5, vote_id=50))

    document = json.loads(db_file.read_text())
    assert isinstance(document, list)
    assert [voter["id"] for voter in document] == [1, 2]
    for voter in document:
        assert set(voter) == VOTER_FIELDS

    first, second = document
    assert first["created"] == "2024-01-01T12:00:00Z"
    assert second["history"] is None
    assert list(first["history"]) == ["5"]
    record = first["history"]["5"]
    assert set(record) == POLL_FIELDS
    assert record["vote_id"] == 50
    assert record["vote_date"] == "2023-11-07T09:30:00Z"


def test_reads_snapshot_written_elsewhere(db_file, clock):
    db_file.parent.mkdir(parents=True)
    db_file.write_text(json.dumps([
        {
            "id": 4,
            "name": "Jo",
            "email": "jo@example.com",
            "history": {
                "2": {
                    "poll_id": 2,
                    "vote_id": 3,
                    "vote_date": "2023-10-10T10:00:00-05:00",
                    "created": "2023-10-10T15:00:00.123456Z",
                    "modified": "2023-10-10T15:00:00.123456Z",
                },
            },
            "created": "2023-10-01T00:00:00Z",
            "modified": "2023-10-10T15:00:00Z",
        },
        {"id": 5, "name": "Lee", "email": "lee@example.com", "created": "2023-10-01T00:00:00Z", "modified": "2023-10-01T00:00:00Z"},
    ]))
    store = JsonVoterStore(db_file, clock=clock)

    event = store.get_single_event(4, 2)
    assert event.vote_id == 3
    assert event.vote_date.utcoffset().total_seconds() == -5 * 3600
    assert store.get_single_voter(5).history == {}


def test_every_call_reloads_the_file(json_store, db_file, clock):
    json_store.create_voter(make_voter(1))
    other = JsonVoterStore(db_file, clock=clock)
    other.create_voter(make_voter(2, "Alex", "alex@example.com"))
    other.delete_single_voter(1)

    assert [voter.id for voter in json_store.get_all_voters()] == [2]


def test_reads_do_not_write(json_store, db_file):
    json_store.create_voter(make_voter(1))
    stamp = db_file.stat().st_mtime_ns

    json_store.get_all_voters()
    json_store.get_single_voter(1)

    assert db_file.stat().st_mtime_ns == stamp


@pytest.mark.parametrize("content", ["not json", '{"id": 1}', '[{"id": "x"}]'])
def test_undecodable_file_is_a_load_failure(json_store, db_file, content):
    db_file.write_text(content)
    with pytest.raises(LoadFailureError):
        json_store.get_all_voters()
    with pytest.raises(LoadFailureError):
        json_store.create_voter(make_voter(1))
    assert db_file.read_text() == content


def test_write_error_is_a_save_failure(json_store, monkeypatch):
    json_store.create_voter(make_voter(1))

    def broken_write(self, data):
        raise OSError("disk full")

    with monkeypatch.context() as patched:
        patched.setattr(Path, "write_bytes", broken_write)
        with pytest.raises(SaveFailureError):
            json_store.create_voter(make_voter(2, "Alex", "alex@example.com"))

    assert [voter.id for voter in json_store.get_all_voters()] == [1]


def test_unwritable_location_fails_at_construction(tmp_path, clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    with pytest.raises(SaveFailureError):
        JsonVoterStore(blocker / "voters.json", clock=clock)


def test_restore_makes_live_file_identical_to_backup(json_store, db_file, tmp_path):
    json_store.create_voter(make_voter(1))
    backup = tmp_path / "voters.json.bak"
    backup.write_bytes(
        b'[\n    {"id": 7, "name": "Backup", "email": "backup@example.com", "history": null,\n'
        b'     "created": "2023-01-01T00:00:00Z", "modified": "2023-01-01T00:00:00Z"}\n]\n'
    )

    json_store.restore(backup)

    assert db_file.read_bytes() == backup.read_bytes()
    assert [voter.id for voter in json_store.get_all_voters()] == [7]


def test_restore_from_missing_backup(json_store, db_file, tmp_path):
    json_store.create_voter(make_voter(1))
    before = db_file.read_bytes()

    with pytest.raises(LoadFailureError):
        json_store.restore(tmp_path / "nope.bak")
    assert db_file.read_bytes() == before


def test_repeated_voter_id_is_a_load_failure(json_store, db_file):
    voter = {"name": "Sam", "email": "sam@example.com", "created": "2024-01-01T00:00:00Z", "modified": "2024-01-01T00:00:00Z"}
    content = json.dumps([{"id": 1, **voter}, {"id": 1, **voter, "name": "Sam again"}])
    db_file.write_text(content)

    with pytest.raises(LoadFailureError):
        json_store.get_all_voters()
    with pytest.raises(LoadFailureError):
        json_store.create_voter(make_voter(2, "Alex", "alex@example.com"))
    assert db_file.read_text() == content


def test_history_key_must_match_poll_id(json_store, db_file):
    record = {"poll_id": 3, "vote_id": 1, "vote_date": "2023-11-07T09:30:00Z",
              "created": "2024-01-01T00:00:00Z", "modified": "2024-01-01T00:00:00Z"}
    db_file.write_text(json.dumps([
        {"id": 1, "name": "Sam", "email": "sam@example.com", "history": {"2": record},
         "created": "2024-01-01T00:00:00Z", "modified": "2024-01-01T00:00:00Z"},
    ]))

    with pytest.raises(LoadFailureError):
        json_store.get_single_event(1, 2)
    with pytest.raises(LoadFailureError):
        json_store.get_single_voter(1)
