"""
Storage contract shared by every voter backend.

Backends satisfy ``VoterRepository`` structurally; they do not inherit from
it or from each other. Each one owns its full read/write cycle and must
raise the same error kinds for the same inputs:

    create_voter              VoterAlreadyExistsError | LoadFailureError | SaveFailureError
    update_voter_info         VoterNotFoundError | LoadFailureError | SaveFailureError
    delete_single_voter       VoterNotFoundError | LoadFailureError | SaveFailureError
    create_voter_history      VoterNotFoundError | HistoryAlreadyExistsError | ...
    update_voter_history_info HistoryNotFoundError | ...
    delete_single_voter_poll  HistoryNotFoundError | ...
    get_all_voters            LoadFailureError
    get_single_voter          VoterNotFoundError | LoadFailureError
    get_voter_history         VoterNotFoundError | NoHistoryError | LoadFailureError
    get_single_event          VoterNotFoundError | HistoryNotFoundError | LoadFailureError

Every successful mutation stamps ``modified`` on the voter (and on the
touched poll record); ``created`` is stamped once by the matching create.

No call is atomic with respect to another call. Mutations are
read-modify-write cycles, so concurrent writers can lose updates.
"""

from typing import List, Protocol, runtime_checkable

from .schemas import VoterHistoryIn, VoterHistoryOut, VoterIn, VoterOut


@runtime_checkable
class VoterRepository(Protocol):
    """Protocol defining voter storage operations."""

    def create_voter(self, voter: VoterIn) -> None: ...
    def update_voter_info(self, voter: VoterIn) -> None: ...
    def delete_single_voter(self, voter_id: int) -> None: ...
    def delete_all_voters(self) -> int: ...

    def create_voter_history(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None: ...
    def update_voter_history_info(self, voter_id: int, poll_id: int, history: VoterHistoryIn) -> None: ...
    def delete_single_voter_poll(self, voter_id: int, poll_id: int) -> None: ...

    def get_all_voters(self) -> List[VoterOut]: ...
    def get_single_voter(self, voter_id: int) -> VoterOut: ...
    def get_voter_history(self, voter_id: int) -> List[VoterHistoryOut]: ...
    def get_single_event(self, voter_id: int, poll_id: int) -> VoterHistoryOut: ...
