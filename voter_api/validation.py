# voter_api/validation.py
# Pure checks run before any repository call. Order of checks is fixed so the
# same bad request always reports the same error.
import re
from datetime import datetime
from typing import Optional

from .errors import InvalidDateError, InvalidEmailError, InvalidIdError, InvalidNameError
from .schemas import VoterHistoryIn, VoterIn

# Ids are stored as signed 64-bit integers by the document store
MAX_ID = 2**63 - 1

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.match(email or "") is not None


def is_blank(value: str) -> bool:
    return not (value or "").strip()


def is_unset_date(value: Optional[datetime]) -> bool:
    # datetime.min is what a zero RFC 3339 timestamp (0001-01-01T00:00:00Z) decodes to
    if value is None:
        return True
    return value.replace(tzinfo=None) == datetime.min


def validate_ids(*ids: int) -> None:
    for value in ids:
        if value < 1 or value > MAX_ID:
            raise InvalidIdError()


def validate_voter(voter: VoterIn) -> None:
    """
    Check a caller-supplied voter.

    Raises InvalidIdError, then InvalidNameError, then InvalidEmailError.
    """
    validate_ids(voter.id)
    if is_blank(voter.name):
        raise InvalidNameError()
    if not is_valid_email(voter.email):
        raise InvalidEmailError()


def validate_history(voter_id: int, poll_id: int, history: VoterHistoryIn) -> None:
    """
    Check a caller-supplied poll record for a voter.

    Raises InvalidIdError for the voter id, then the poll id (including a
    record that names a different poll, or a vote id outside 64 bits),
    then InvalidDateError when the vote date is unset.
    """
    validate_ids(voter_id)
    validate_ids(poll_id)
    if history.poll_id != poll_id:
        raise InvalidIdError()
    if not -MAX_ID - 1 <= history.vote_id <= MAX_ID:
        raise InvalidIdError()
    if is_unset_date(history.vote_date):
        raise InvalidDateError()
