# backend/tmsdb/apps/participants/router.py

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import integrity_errors, server_errors
from ...schemas import MessageResponse, PagedList
from ...security import get_current_active_user
from ..accounts import models as account_models
from . import models as participant_models
from . import schemas as participant_schemas
from . import services as participant_services

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/participants",
    tags=["participants"],
    dependencies=[Depends(get_current_active_user)],
)

_DUPLICATE_ID_NO = "A participant with this ID number already exists"


def _get_or_404(db: Session, participant_id: int) -> participant_models.Participant:
    participant = participant_services.get_participant(db, participant_id)
    if participant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    return participant


def _paged(db: Session, page: int, page_size: int, search_term: Optional[str]):
    result = participant_services.search_participants(
        db,
        page=page,
        page_size=page_size,
        search_term=search_term,
    )
    data = [participant_services.to_read(row) for row in result.items]
    return PagedList[participant_schemas.ParticipantRead](**result.envelope(data, total_key="total"))


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=PagedList[participant_schemas.ParticipantRead],
    summary="List participants ordered by name",
)
def list_participants(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving participants"):
        return _paged(db, page, page_size, search_term)


@router.get(
    "/search",
    response_model=PagedList[participant_schemas.ParticipantRead],
    summary="Search participants by name or ID number",
)
def search_participants(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while searching participants", search_term=search_term):
        return _paged(db, page, page_size, search_term)


@router.get(
    "/{participant_id}",
    response_model=participant_schemas.ParticipantRead,
    summary="Get a participant by id",
)
def get_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving the participant", participant_id=participant_id):
        return participant_services.to_read(_get_or_404(db, participant_id))


@router.get(
    "/{participant_id}/enrollments",
    response_model=participant_schemas.ParticipantWithEnrollments,
    summary="Get a participant together with their enrollments",
)
def get_participant_with_enrollments(participant_id: int, db: Session = Depends(get_db)):
    with server_errors(
        "An error occurred while retrieving the participant with enrollments",
        participant_id=participant_id,
    ):
        participant = participant_services.get_participant_with_enrollments(db, participant_id)
        if participant is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
        return participant_services.to_read_with_enrollments(participant)


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=participant_schemas.ParticipantRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a participant",
)
def create_participant(
    payload: participant_schemas.ParticipantCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while creating the participant", db):
        if participant_services.id_number_taken(db, payload.id_no):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE_ID_NO)

        participant = participant_services.build_participant(payload)
        participant.stamp_created(current_user.full_name)
        db.add(participant)
        with integrity_errors(db, _DUPLICATE_ID_NO, status.HTTP_409_CONFLICT):
            db.commit()
        db.refresh(participant)

        logger.info("Participant created", extra={"participant_id": participant.pk})
        response.headers["Location"] = router.url_path_for("get_participant", participant_id=participant.pk)
        return participant_services.to_read(participant)


@router.put(
    "/{participant_id}",
    response_model=participant_schemas.ParticipantRead,
    summary="Update a participant (only supplied, non-empty fields change)",
)
def update_participant(
    participant_id: int,
    payload: participant_schemas.ParticipantUpdate,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while updating the participant", db, participant_id=participant_id):
        participant = _get_or_404(db, participant_id)

        update_data = participant_services.changed_fields(payload)
        if "id_no" in update_data:
            update_data["id_no"] = update_data["id_no"].strip()
            if participant_services.id_number_taken(db, update_data["id_no"], exclude_id=participant.pk):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_DUPLICATE_ID_NO)

        for field, value in update_data.items():
            setattr(participant, field, value)
        participant.stamp_updated(current_user.full_name)

        with integrity_errors(db, _DUPLICATE_ID_NO, status.HTTP_409_CONFLICT):
            db.commit()
        db.refresh(participant)
        return participant_services.to_read(participant)


@router.delete(
    "/{participant_id}",
    response_model=MessageResponse,
    summary="Delete a participant that has no enrollments or allowances",
)
def delete_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while deleting the participant", db, participant_id=participant_id):
        participant = _get_or_404(db, participant_id)

        if participant_services.has_enrollments(db, participant.pk):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete participant with existing enrollments",
            )
        if participant_services.has_allowances(db, participant.pk):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete participant with existing allowances",
            )

        db.delete(participant)
        with integrity_errors(db, "Cannot delete participant with existing related records"):
            db.commit()
        logger.info("Participant deleted", extra={"participant_id": participant_id})
        return MessageResponse(message="Participant deleted successfully")
