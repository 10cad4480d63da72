import time
from typing import List

from fastapi import APIRouter, Depends, Request, status

from ..schemas import (
    VoterBody,
    VoterHistoryBody,
    VoterHistoryIn,
    VoterHistoryOut,
    VoterIn,
    VoterOut,
)
from ..services import VoterService

router = APIRouter(prefix="/voters", tags=["Voters"])

START_TIME = time.monotonic()


def get_voter_service(request: Request) -> VoterService:
    return request.app.state.voter_service


# ------------------------------
# Health
# ------------------------------
@router.get("/health")
def health_check(request: Request):
    return {
        "status": "ok",
        "uptime_seconds": round(time.monotonic() - START_TIME, 3),
        "backend": type(request.app.state.voter_service.repository).__name__,
    }


# ------------------------------
# Voters
# ------------------------------
@router.get("", response_model=List[VoterOut])
def get_all_voters(service: VoterService = Depends(get_voter_service)):
    return service.get_all_voters()


@router.delete("")
def delete_all_voters(service: VoterService = Depends(get_voter_service)):
    removed = service.delete_all_voters()
    return {"message": "All voters deleted.", "deleted": removed}


@router.get("/{voter_id}", response_model=VoterOut)
def get_single_voter(voter_id: int, service: VoterService = Depends(get_voter_service)):
    return service.get_single_voter(voter_id)


@router.post("/{voter_id}", status_code=status.HTTP_201_CREATED)
def create_voter(voter_id: int, body: VoterBody, service: VoterService = Depends(get_voter_service)):
    service.create_voter(VoterIn(id=voter_id, name=body.name, email=body.email))
    return {"message": "Voter registration successful."}


@router.put("/{voter_id}")
def update_voter(voter_id: int, body: VoterBody, service: VoterService = Depends(get_voter_service)):
    service.update_voter_info(VoterIn(id=voter_id, name=body.name, email=body.email))
    return {"message": "Voter updated."}


@router.delete("/{voter_id}")
def delete_voter(voter_id: int, service: VoterService = Depends(get_voter_service)):
    service.delete_single_voter(voter_id)
    return {"message": "Voter deleted."}


# ------------------------------
# Poll history
# ------------------------------
@router.get("/{voter_id}/polls", response_model=List[VoterHistoryOut])
def get_voter_history(voter_id: int, service: VoterService = Depends(get_voter_service)):
    return service.get_voter_history(voter_id)


@router.get("/{voter_id}/polls/{poll_id}", response_model=VoterHistoryOut)
def get_single_event(voter_id: int, poll_id: int, service: VoterService = Depends(get_voter_service)):
    return service.get_single_event(voter_id, poll_id)


@router.post("/{voter_id}/polls/{poll_id}", status_code=status.HTTP_201_CREATED)
def create_voter_history(
    voter_id: int,
    poll_id: int,
    body: VoterHistoryBody,
    service: VoterService = Depends(get_voter_service),
):
    history = VoterHistoryIn(poll_id=poll_id, vote_id=body.vote_id, vote_date=body.vote_date)
    service.create_voter_history(voter_id, poll_id, history)
    return {"message": "Poll registered."}


@router.put("/{voter_id}/polls/{poll_id}")
def update_voter_history(
    voter_id: int,
    poll_id: int,
    body: VoterHistoryBody,
    service: VoterService = Depends(get_voter_service),
):
    history = VoterHistoryIn(poll_id=poll_id, vote_id=body.vote_id, vote_date=body.vote_date)
    service.update_voter_history_info(voter_id, poll_id, history)
    return {"message": "Poll updated."}


@router.delete("/{voter_id}/polls/{poll_id}")
def delete_voter_poll(voter_id: int, poll_id: int, service: VoterService = Depends(get_voter_service)):
    service.delete_single_voter_poll(voter_id, poll_id)
    return {"message": "Poll deleted."}
