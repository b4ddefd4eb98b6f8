# backend/tmsdb/apps/trainings/services.py

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import get_live, not_deleted
from ...pagination import Page, paginate, search_filter
from ..allowances import models as allowance_models
from ..enrollments import models as enrollment_models
from ..lookups import models as lookup_models
from ..participants import models as participant_models
from . import models, schemas

# ---------------------------------------------------------------------------
# TRAININGS
# ---------------------------------------------------------------------------


def _newest_first(q):
    return q.order_by(models.Training.start_date.desc(), models.Training.pk.desc())


def search_trainings(
    db: Session,
    *,
    page: int,
    page_size: int,
    search_term: Optional[str] = None,
) -> Page:
    t = models.Training
    q = db.query(t).filter(not_deleted(t))
    clause = search_filter(search_term, t.institution, t.program, t.country_of_study)
    if clause is not None:
        q = q.filter(clause)
    return paginate(_newest_first(q), page, page_size)


def list_active_trainings(db: Session, now: Optional[datetime] = None) -> List[models.Training]:
    now = now or datetime.utcnow()
    t = models.Training
    return _newest_first(db.query(t).filter(not_deleted(t), t.end_date > now)).all()


def list_trainings_for_year(db: Session, financial_year: str) -> List[models.Training]:
    t = models.Training
    return _newest_first(
        db.query(t).filter(not_deleted(t), t.financial_year == financial_year.strip())
    ).all()


def get_training(db: Session, training_id: int) -> Optional[models.Training]:
    return get_live(db, models.Training, training_id)


def get_training_with_participants(db: Session, training_id: int) -> Optional[models.Training]:
    return (
        db.query(models.Training)
        .options(
            selectinload(models.Training.enrollments).joinedload(
                enrollment_models.ParticipantEnrollment.participant
            )
        )
        .filter(models.Training.pk == training_id, not_deleted(models.Training))
        .first()
    )


def sponsor_exists(db: Session, sponsor_id: int) -> bool:
    return get_live(db, lookup_models.Sponsor, sponsor_id) is not None


def has_enrollments(db: Session, training_id: int) -> bool:
    e = enrollment_models.ParticipantEnrollment
    return db.query(e.pk).filter(e.training_fk == training_id).first() is not None


def has_allowances(db: Session, training_id: int) -> bool:
    # Soft-deleted allowances still hold the RESTRICT foreign key.
    a = allowance_models.Allowance
    return db.query(a.pk).filter(a.training_fk == training_id).first() is not None


def changed_fields(payload: schemas.TrainingUpdate) -> Dict[str, Any]:
    return {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None and value != ""
    }


def to_read(training: models.Training) -> schemas.TrainingRead:
    return schemas.TrainingRead(
        id=training.pk,
        institution=training.institution,
        program=training.program,
        country_of_study=training.country_of_study,
        start_date=training.start_date,
        end_date=training.end_date,
        duration=training.duration,
        departure_date=training.departure_date,
        arrival_date=training.arrival_date,
        vacation_employment_period=training.vacation_employment_period,
        resumption_date=training.resumption_date,
        extension_period=training.extension_period,
        date_bond_signed=training.date_bond_signed,
        bond_serving_period=training.bond_serving_period,
        sponsor_fk=training.sponsor_fk,
        mode_of_study=training.mode_of_study,
        registration_date=training.registration_date,
        training_status=training.training_status,
        financial_year=training.financial_year,
        campus_type=training.campus_type,
        created_at=training.created_at,
        updated_at=training.updated_at,
    )


def to_read_with_participants(training: models.Training) -> schemas.TrainingWithParticipants:
    participants = [
        schemas.TrainingParticipantSummary(
            id=enrollment.participant.pk,
            full_name=enrollment.participant.full_name,
            id_no=enrollment.participant.id_no,
            email=enrollment.participant.email,
            phone=enrollment.participant.phone,
            enrollment_date=enrollment.created_at,
        )
        for enrollment in training.enrollments
        if not enrollment.deleted
        and enrollment.participant is not None
        and not enrollment.participant.deleted
    ]
    return schemas.TrainingWithParticipants(
        **to_read(training).model_dump(),
        participants=participants,
    )


# ---------------------------------------------------------------------------
# TRANSFERS
# ---------------------------------------------------------------------------


def _transfer_query(db: Session):
    tt = models.TrainingTransfer
    return (
        db.query(tt)
        .options(joinedload(tt.participant), joinedload(tt.training))
        .filter(not_deleted(tt))
    )


def _by_start(q):
    return q.order_by(models.TrainingTransfer.start_date.asc(), models.TrainingTransfer.pk.asc())


def transfers_for_participant(db: Session, participant_id: int) -> List[models.TrainingTransfer]:
    return _by_start(
        _transfer_query(db).filter(models.TrainingTransfer.participant_fk == participant_id)
    ).all()


def transfers_for_training(db: Session, training_id: int) -> List[models.TrainingTransfer]:
    return _by_start(
        _transfer_query(db).filter(models.TrainingTransfer.training_fk == training_id)
    ).all()


def transfers_to_country(db: Session, country: str) -> List[models.TrainingTransfer]:
    return _by_start(
        _transfer_query(db).filter(models.TrainingTransfer.country == country)
    ).all()


def active_transfers(db: Session, now: Optional[datetime] = None) -> List[models.TrainingTransfer]:
    """Transfers in progress at `now`: started, not yet ended."""
    now = now or datetime.utcnow()
    tt = models.TrainingTransfer
    return _by_start(_transfer_query(db).filter(tt.start_date <= now, tt.end_date > now)).all()


def get_transfer(db: Session, transfer_id: int) -> Optional[models.TrainingTransfer]:
    return _transfer_query(db).filter(models.TrainingTransfer.pk == transfer_id).first()


def missing_transfer_reference(db: Session, *, participant_fk: int, training_fk: int) -> Optional[str]:
    if get_live(db, participant_models.Participant, participant_fk) is None:
        return "Participant not found"
    if get_live(db, models.Training, training_fk) is None:
        return "Training not found"
    return None


def transfer_to_read(transfer: models.TrainingTransfer) -> schemas.TransferRead:
    participant = transfer.participant
    training = transfer.training
    return schemas.TransferRead(
        pk=transfer.pk,
        participant_fk=transfer.participant_fk,
        training_fk=transfer.training_fk,
        start_date=transfer.start_date,
        end_date=transfer.end_date,
        institution=transfer.institution,
        country=transfer.country,
        transfer_reason=transfer.transfer_reason,
        transfer_status=transfer.transfer_status,
        participant_name=participant.full_name if participant is not None else None,
        training_program=training.program if training is not None else None,
        created_at=transfer.created_at,
        updated_at=transfer.updated_at,
        created_by=transfer.created_by,
        updated_by=transfer.updated_by,
    )
