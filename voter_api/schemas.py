from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel

from .models.voter_model import PollRecord, Voter


# --- Write side: only the fields a caller may supply ---

class VoterIn(BaseModel):
    id: int
    name: str
    email: str


class VoterHistoryIn(BaseModel):
    poll_id: int
    vote_id: int
    # Left optional so an unset date is reported by validation, not by parsing
    vote_date: Optional[datetime] = None


# --- Read side: the full persisted record ---

class VoterHistoryOut(BaseModel):
    poll_id: int
    vote_id: int
    vote_date: datetime
    created: datetime
    modified: datetime

    @classmethod
    def from_record(cls, record: PollRecord) -> "VoterHistoryOut":
        return cls(
            poll_id=record.poll_id,
            vote_id=record.vote_id,
            vote_date=record.vote_date,
            created=record.created,
            modified=record.modified,
        )


class VoterOut(BaseModel):
    id: int
    name: str
    email: str
    history: Dict[int, VoterHistoryOut] = {}
    created: datetime
    modified: datetime

    @classmethod
    def from_voter(cls, voter: Voter) -> "VoterOut":
        return cls(
            id=voter.id,
            name=voter.name,
            email=voter.email,
            history={
                record.poll_id: VoterHistoryOut.from_record(record)
                for record in voter.history_items()
            },
            created=voter.created,
            modified=voter.modified,
        )


# --- HTTP request bodies (ids come from the path) ---

class VoterBody(BaseModel):
    name: str = ""
    email: str = ""


class VoterHistoryBody(BaseModel):
    vote_id: int
    vote_date: Optional[datetime] = None


# --- Write-side translation into stored records ---

def new_voter(voter: VoterIn, now: datetime) -> Voter:
    return Voter(
        id=voter.id,
        name=voter.name,
        email=voter.email,
        history=None,
        created=now,
        modified=now,
    )


def new_poll_record(poll_id: int, history: VoterHistoryIn, created: datetime, modified: datetime) -> PollRecord:
    return PollRecord(
        poll_id=poll_id,
        vote_id=history.vote_id,
        vote_date=history.vote_date,
        created=created,
        modified=modified,
    )
