import json
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, BaseModel, TypeAdapter


class PollRecord(BaseModel):
    poll_id: int
    vote_id: int
    vote_date: datetime
    created: datetime
    modified: datetime


def check_poll_keys(records: Dict[int, PollRecord]) -> Dict[int, PollRecord]:
    for poll_id, record in records.items():
        if record.poll_id != poll_id:
            raise ValueError(f"history key {poll_id} holds a record for poll {record.poll_id}")
    return records


PollHistory = Annotated[Dict[int, PollRecord], AfterValidator(check_poll_keys)]


class Voter(BaseModel):
    id: int
    name: str
    email: str
    # None and {} both mean "no history"; keys are poll ids (strings on the wire)
    history: Optional[PollHistory] = None
    created: datetime
    modified: datetime

    def history_items(self) -> List[PollRecord]:
        return list((self.history or {}).values())

    def has_history(self) -> bool:
        return bool(self.history)

    def to_document(self) -> Dict[str, Any]:
        """JSON-compatible dict: RFC 3339 timestamps and string poll-id keys."""
        return json.loads(self.model_dump_json())


VoterList = TypeAdapter(List[Voter])


def voters_from_json(data: bytes) -> List[Voter]:
    return VoterList.validate_json(data)


def voters_to_json(voters: List[Voter]) -> bytes:
    return VoterList.dump_json(voters, indent=2)


HistoryMap = TypeAdapter(Optional[PollHistory])
Timestamp = TypeAdapter(datetime)


def history_from_document(value: Any) -> Dict[int, PollRecord]:
    return HistoryMap.validate_python(value) or {}


def encode_timestamp(value: datetime) -> str:
    """Render a timestamp exactly as it appears inside a stored voter."""
    return Timestamp.dump_python(value, mode="json")
