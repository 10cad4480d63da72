"""Caller-facing voter operations: validate first, then one repository call."""
from typing import List

from .repository import VoterRepository
from .schemas import VoterHistoryIn, VoterHistoryOut, VoterIn, VoterOut
from .validation import validate_history, validate_ids, validate_voter


class VoterService:
    def __init__(self, repository: VoterRepository):
        self.repository = repository

    # --- mutations ---

    def create_voter(self, voter: VoterIn) -> None:
        validate_voter(voter)
        self.repository.create_voter(voter)

    def update_voter_info(self, voter: VoterIn) -> None:
        validate_voter(voter)
        self.repository.update_voter_info(voter)

    def delete_single_voter(self, voter_id: int) -> None:
        validate_ids(voter_id)
        self.repository.delete_single_voter(voter_id)

    def delete_all_voters(self) -> int:
        return self.repository.delete_all_voters()

    def create_voter_history(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        validate_history(voter_id, poll_id, history)
        self.repository.create_voter_history(voter_id, poll_id, history)

    def update_voter_history_info(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
        validate_history(voter_id, poll_id, history)
        self.repository.update_voter_history_info(voter_id, poll_id, history)

    def delete_single_voter_poll(self, voter_id: int, poll_id: int) -> None:
        validate_ids(voter_id, poll_id)
        self.repository.delete_single_voter_poll(voter_id, poll_id)

    # --- reads ---

    def get_all_voters(self) -> List[VoterOut]:
        return self.repository.get_all_voters()

    def get_single_voter(self, voter_id: int) -> VoterOut:
        validate_ids(voter_id)
        return self.repository.get_single_voter(voter_id)

    def get_voter_history(self, voter_id: int) -> List[VoterHistoryOut]:
        validate_ids(voter_id)
        return self.repository.get_voter_history(voter_id)

    def get_single_event(self, voter_id: int, poll_id: int) -> VoterHistoryOut:
        validate_ids(voter_id, poll_id)
        return self.repository.get_single_event(voter_id, poll_id)
