from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from conftest import make_history, make_voter
from voter_api.errors import InvalidDateError, InvalidEmailError, InvalidIdError, InvalidNameError
from voter_api.repository import VoterRepository
from voter_api.schemas import VoterHistoryIn
from voter_api.services import VoterService


@pytest.fixture()
def repository():
    return MagicMock(spec=VoterRepository)


@pytest.fixture()
def service(repository):
    return VoterService(repository)


@pytest.mark.parametrize(
    "voter,error",
    [
        (make_voter(0), InvalidIdError),
        (make_voter(-1), InvalidIdError),
        (make_voter(1, name=""), InvalidNameError),
        (make_voter(1, email="badEmail"), InvalidEmailError),
    ],
)
def test_invalid_voter_never_reaches_storage(service, repository, voter, error):
    with pytest.raises(error):
        service.create_voter(voter)
    with pytest.raises(error):
        service.update_voter_info(voter)
    repository.create_voter.assert_not_called()
    repository.update_voter_info.assert_not_called()


def test_valid_voter_is_delegated(service, repository):
    voter = make_voter(3)
    service.create_voter(voter)
    service.update_voter_info(voter)
    repository.create_voter.assert_called_once_with(voter)
    repository.update_voter_info.assert_called_once_with(voter)


def test_invalid_history_never_reaches_storage(service, repository):
    missing_date = VoterHistoryIn(poll_id=1, vote_id=1)
    with pytest.raises(InvalidDateError):
        service.create_voter_history(1, 1, missing_date)
    with pytest.raises(InvalidIdError):
        service.update_voter_history_info(0, 1, make_history())
    with pytest.raises(InvalidIdError):
        service.create_voter_history(1, -2, make_history())
    repository.create_voter_history.assert_not_called()
    repository.update_voter_history_info.assert_not_called()


def test_valid_history_is_delegated(service, repository):
    history = make_history(2, vote_id=5, vote_date=datetime(2024, 3, 3, tzinfo=timezone.utc))
    service.create_voter_history(1, 2, history)
    service.update_voter_history_info(1, 2, history)
    repository.create_voter_history.assert_called_once_with(1, 2, history)
    repository.update_voter_history_info.assert_called_once_with(1, 2, history)


@pytest.mark.parametrize(
    "call",
    [
        lambda service: service.delete_single_voter(0),
        lambda service: service.delete_single_voter_poll(1, 0),
        lambda service: service.delete_single_voter_poll(-1, 1),
        lambda service: service.get_single_voter(-4),
        lambda service: service.get_voter_history(0),
        lambda service: service.get_single_event(0, 1),
        lambda service: service.get_single_event(1, 0),
    ],
)
def test_id_checks_on_lookups_and_deletes(service, repository, call):
    with pytest.raises(InvalidIdError):
        call(service)
    assert repository.method_calls == []


def test_reads_return_repository_results(service, repository):
    repository.get_all_voters.return_value = []
    repository.get_single_voter.return_value = "voter"
    repository.delete_all_voters.return_value = 4

    assert service.get_all_voters() == []
    assert service.get_single_voter(1) == "voter"
    assert service.delete_all_voters() == 4
    service.delete_single_voter(1)
    repository.delete_single_voter.assert_called_once_with(1)


def test_history_for_another_poll_never_reaches_storage(service, repository):
    with pytest.raises(InvalidIdError):
        service.create_voter_history(1, 2, make_history(3))
    with pytest.raises(InvalidIdError):
        service.update_voter_history_info(1, 2, make_history(3))
    assert repository.method_calls == []
