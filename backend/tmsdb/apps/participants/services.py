# backend/tmsdb/apps/participants/services.py

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session, selectinload

from ...models import get_live, not_deleted
from ...pagination import Page, paginate, search_filter
from ..allowances import models as allowance_models
from ..enrollments import models as enrollment_models
from . import models, schemas


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


def search_participants(
    db: Session,
    *,
    page: int,
    page_size: int,
    search_term: Optional[str] = None,
) -> Page:
    m = models.Participant
    q = db.query(m).filter(not_deleted(m))
    clause = search_filter(search_term, m.firstname, m.lastname, m.id_no)
    if clause is not None:
        q = q.filter(clause)
    return paginate(q.order_by(m.lastname.asc(), m.firstname.asc(), m.pk.asc()), page, page_size)


def get_participant(db: Session, participant_id: int) -> Optional[models.Participant]:
    return get_live(db, models.Participant, participant_id)


def get_participant_with_enrollments(db: Session, participant_id: int) -> Optional[models.Participant]:
    return (
        db.query(models.Participant)
        .options(
            selectinload(models.Participant.enrollments).joinedload(
                enrollment_models.ParticipantEnrollment.training
            )
        )
        .filter(models.Participant.pk == participant_id, not_deleted(models.Participant))
        .first()
    )


def id_number_taken(db: Session, id_no: str, exclude_id: Optional[int] = None) -> bool:
    q = db.query(models.Participant.pk).filter(models.Participant.id_no == id_no.strip())
    if exclude_id is not None:
        q = q.filter(models.Participant.pk != exclude_id)
    return q.first() is not None


def has_enrollments(db: Session, participant_id: int) -> bool:
    e = enrollment_models.ParticipantEnrollment
    return db.query(e.pk).filter(e.participant_fk == participant_id).first() is not None


def has_allowances(db: Session, participant_id: int) -> bool:
    # Soft-deleted allowances still hold the RESTRICT foreign key.
    a = allowance_models.Allowance
    return db.query(a.pk).filter(a.participant_fk == participant_id).first() is not None


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


def build_participant(payload: schemas.ParticipantCreate) -> models.Participant:
    data = payload.model_dump()
    data["id_no"] = data["id_no"].strip()
    data["email"] = data["email"] or ""
    return models.Participant(**data)


def changed_fields(payload: schemas.ParticipantUpdate) -> Dict[str, Any]:
    """
    Fields to overwrite on update: present in the body, not null and, for
    text fields, not an empty string.
    """
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None and value != ""
    }


# ---------------------------------------------------------------------------
# PROJECTIONS
# ---------------------------------------------------------------------------


def to_read(participant: models.Participant) -> schemas.ParticipantRead:
    return schemas.ParticipantRead(
        id=participant.pk,
        title=participant.title,
        firstname=participant.firstname,
        lastname=participant.lastname,
        middlename=participant.middlename,
        id_no=participant.id_no,
        sex=participant.sex,
        dob=participant.dob,
        id_type=participant.id_type,
        phone=participant.phone,
        email=participant.email,
        full_name=participant.full_name,
        created_at=participant.created_at,
        updated_at=participant.updated_at,
    )


def to_read_with_enrollments(participant: models.Participant) -> schemas.ParticipantWithEnrollments:
    enrollments = [
        schemas.EnrollmentSummary(
            id=enrollment.pk,
            training_id=enrollment.training_fk,
            training_program=enrollment.training.program if enrollment.training else "",
            institution=enrollment.training.institution if enrollment.training else "",
            training_status=enrollment.training_status,
            start_date=enrollment.start_date,
            end_date=enrollment.end_date,
        )
        for enrollment in participant.enrollments
        if not enrollment.deleted
    ]
    return schemas.ParticipantWithEnrollments(
        **to_read(participant).model_dump(),
        enrollments=enrollments,
    )
