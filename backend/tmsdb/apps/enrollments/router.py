# backend/tmsdb/apps/enrollments/router.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import integrity_errors, server_errors
from ...schemas import MessageResponse, PaginatedResponse
from ...security import get_current_active_user
from ..accounts import models as account_models
from . import models as enrollment_models
from . import schemas as enrollment_schemas
from . import services as enrollment_services

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/trainingenrollment",
    tags=["enrollments"],
    dependencies=[Depends(get_current_active_user)],
)

_ALREADY_ENROLLED = "Participant is already enrolled in this training"


def _get_or_404(db: Session, enrollment_id: int) -> enrollment_models.ParticipantEnrollment:
    enrollment = enrollment_services.get_enrollment(db, enrollment_id)
    if enrollment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found")
    return enrollment


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _read_list(rows) -> List[enrollment_schemas.EnrollmentRead]:
    return [enrollment_services.to_read(row) for row in rows]


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=PaginatedResponse[enrollment_schemas.EnrollmentRead],
    summary="List enrollments, newest first",
)
def list_enrollments(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving enrollments"):
        result = enrollment_services.search_enrollments(
            db,
            page=page,
            page_size=page_size,
            search_term=search_term,
        )
        return PaginatedResponse[enrollment_schemas.EnrollmentRead](
            **result.envelope(_read_list(result.items))
        )


@router.get(
    "/participant/{participant_id}",
    response_model=List[enrollment_schemas.EnrollmentRead],
    summary="Enrollments of a participant",
)
def list_for_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors(
        "An error occurred while retrieving enrollments for the participant",
        participant_id=participant_id,
    ):
        return _read_list(enrollment_services.list_for_participant(db, participant_id))


@router.get(
    "/training/{training_id}",
    response_model=List[enrollment_schemas.EnrollmentRead],
    summary="Enrollments on a training",
)
def list_for_training(training_id: int, db: Session = Depends(get_db)):
    with server_errors(
        "An error occurred while retrieving enrollments for the training",
        training_id=training_id,
    ):
        return _read_list(enrollment_services.list_for_training(db, training_id))


@router.get(
    "/{enrollment_id}",
    response_model=enrollment_schemas.EnrollmentRead,
    summary="Get an enrollment by id",
)
def get_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving the enrollment", enrollment_id=enrollment_id):
        return enrollment_services.to_read(_get_or_404(db, enrollment_id))


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=enrollment_schemas.EnrollmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll a participant on a training",
)
def create_enrollment(
    payload: enrollment_schemas.EnrollmentCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while creating the enrollment", db):
        missing = enrollment_services.missing_party(
            db,
            participant_fk=payload.participant_fk,
            training_fk=payload.training_fk,
        )
        if missing:
            raise _bad_request(missing)

        if enrollment_services.is_enrolled(db, payload.participant_fk, payload.training_fk):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_ALREADY_ENROLLED)

        data = payload.model_dump()
        missing = enrollment_services.missing_lookup(db, data)
        if missing:
            raise _bad_request(missing)

        data["registration_date"] = data["registration_date"] or datetime.utcnow()
        enrollment = enrollment_models.ParticipantEnrollment(**data)
        enrollment.stamp_created(current_user.full_name)
        db.add(enrollment)
        with integrity_errors(db, _ALREADY_ENROLLED, status.HTTP_409_CONFLICT):
            db.commit()

        logger.info(
            "Participant enrolled",
            extra={"participant_id": enrollment.participant_fk, "training_id": enrollment.training_fk},
        )
        response.headers["Location"] = router.url_path_for("get_enrollment", enrollment_id=enrollment.pk)
        return enrollment_services.to_read(_get_or_404(db, enrollment.pk))


@router.put(
    "/{enrollment_id}",
    response_model=enrollment_schemas.EnrollmentRead,
    summary="Update an enrollment (only supplied fields change)",
)
def update_enrollment(
    enrollment_id: int,
    payload: enrollment_schemas.EnrollmentUpdate,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while updating the enrollment", db, enrollment_id=enrollment_id):
        enrollment = _get_or_404(db, enrollment_id)

        update_data = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None and value != ""
        }

        if "participant_fk" in update_data or "training_fk" in update_data:
            missing = enrollment_services.missing_party(
                db,
                participant_fk=update_data.get("participant_fk"),
                training_fk=update_data.get("training_fk"),
            )
            if missing:
                raise _bad_request(missing)
            if enrollment_services.is_enrolled(
                db,
                update_data.get("participant_fk", enrollment.participant_fk),
                update_data.get("training_fk", enrollment.training_fk),
                exclude_id=enrollment.pk,
            ):
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_ALREADY_ENROLLED)

        missing = enrollment_services.missing_lookup(db, update_data)
        if missing:
            raise _bad_request(missing)

        for field, value in update_data.items():
            setattr(enrollment, field, value)
        enrollment.stamp_updated(current_user.full_name)

        with integrity_errors(db, _ALREADY_ENROLLED, status.HTTP_409_CONFLICT):
            db.commit()

        db.expire(enrollment)
        return enrollment_services.to_read(_get_or_404(db, enrollment_id))


@router.delete(
    "/{enrollment_id}",
    response_model=MessageResponse,
    summary="Delete an enrollment",
)
def delete_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while deleting the enrollment", db, enrollment_id=enrollment_id):
        enrollment = _get_or_404(db, enrollment_id)
        db.delete(enrollment)
        db.commit()
        return MessageResponse(message="Enrollment deleted successfully")
