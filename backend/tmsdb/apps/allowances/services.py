# backend/tmsdb/apps/allowances/services.py

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Type, Union

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, joinedload

from ...models import get_live, not_deleted
from ...pagination import Page, paginate, search_filter
from ..participants import models as participant_models
from ..trainings import models as training_models
from . import models, schemas

NamedModel = Union[Type[models.AllowanceType], Type[models.AllowanceStatus]]


# ---------------------------------------------------------------------------
# ALLOWANCE TYPES / STATUSES
# ---------------------------------------------------------------------------


def list_named(
    db: Session,
    model: NamedModel,
    *,
    page: int,
    page_size: int,
    search_term: Optional[str] = None,
) -> Page:
    q = db.query(model).filter(not_deleted(model))
    clause = search_filter(search_term, model.name, model.description)
    if clause is not None:
        q = q.filter(clause)
    return paginate(q.order_by(model.name.asc()), page, page_size)


def search_named(db: Session, model: NamedModel, search_term: Optional[str]) -> List:
    """All live rows matching `search_term`, in storage order."""
    q = db.query(model).filter(not_deleted(model))
    clause = search_filter(search_term, model.name, model.description)
    if clause is not None:
        q = q.filter(clause)
    return q.order_by(model.pk.asc()).all()


def get_named(db: Session, model: NamedModel, pk: int):
    return get_live(db, model, pk)


def is_name_unique(
    db: Session,
    model: NamedModel,
    name: str,
    exclude_id: Optional[int] = None,
) -> bool:
    # Soft-deleted rows still hold their slot in the unique index.
    q = db.query(model).filter(func.lower(model.name) == name.strip().lower())
    if exclude_id is not None:
        q = q.filter(model.pk != exclude_id)
    return q.first() is None


def has_allowances(db: Session, model: NamedModel, pk: int) -> bool:
    fk_column = (
        models.Allowance.allowance_type_fk
        if model is models.AllowanceType
        else models.Allowance.status_fk
    )
    return (
        db.query(models.Allowance.pk)
        .filter(fk_column == pk, not_deleted(models.Allowance))
        .first()
        is not None
    )


# ---------------------------------------------------------------------------
# ALLOWANCES
# ---------------------------------------------------------------------------


def _allowance_query(db: Session) -> Query:
    return (
        db.query(models.Allowance)
        .options(
            joinedload(models.Allowance.participant),
            joinedload(models.Allowance.training),
            joinedload(models.Allowance.allowance_type),
            joinedload(models.Allowance.allowance_status),
        )
        .filter(not_deleted(models.Allowance))
    )


def search_allowances(
    db: Session,
    *,
    page: int,
    page_size: int,
    search_term: Optional[str] = None,
) -> Page:
    q = _allowance_query(db)
    if search_term and search_term.strip():
        p = participant_models.Participant
        t = training_models.Training
        q = (
            q.join(p, models.Allowance.participant_fk == p.pk)
            .join(t, models.Allowance.training_fk == t.pk)
            .join(models.AllowanceType, models.Allowance.allowance_type_fk == models.AllowanceType.pk)
            .join(models.AllowanceStatus, models.Allowance.status_fk == models.AllowanceStatus.pk)
            .filter(
                search_filter(
                    search_term,
                    models.Allowance.comments,
                    p.firstname,
                    p.lastname,
                    t.program,
                    models.AllowanceType.name,
                    models.AllowanceStatus.name,
                )
            )
        )
    q = q.order_by(models.Allowance.created_at.desc(), models.Allowance.pk.desc())
    return paginate(q, page, page_size)


def get_allowance(db: Session, allowance_id: int) -> Optional[models.Allowance]:
    return _allowance_query(db).filter(models.Allowance.pk == allowance_id).first()


def list_allowances_by(db: Session, column, value: int) -> List[models.Allowance]:
    return (
        _allowance_query(db)
        .filter(column == value)
        .order_by(models.Allowance.start_date.asc(), models.Allowance.pk.asc())
        .all()
    )


def list_allowances_in_range(db: Session, start_date: datetime, end_date: datetime) -> List[models.Allowance]:
    return (
        _allowance_query(db)
        .filter(
            models.Allowance.start_date >= start_date,
            models.Allowance.end_date <= end_date,
        )
        .order_by(models.Allowance.start_date.asc(), models.Allowance.pk.asc())
        .all()
    )


def total_for_participant(db: Session, participant_id: int) -> Decimal:
    total = (
        db.query(func.coalesce(func.sum(models.Allowance.amount), 0))
        .filter(
            models.Allowance.participant_fk == participant_id,
            not_deleted(models.Allowance),
        )
        .scalar()
    )
    return Decimal(str(total or 0))


def missing_reference(
    db: Session,
    *,
    participant_fk: Optional[int] = None,
    training_fk: Optional[int] = None,
    allowance_type_fk: Optional[int] = None,
    status_fk: Optional[int] = None,
) -> Optional[str]:
    """
    Return the message for the first supplied reference that does not
    resolve to a live row, or None when all of them exist.
    """
    checks = (
        (participant_fk, participant_models.Participant, "Participant"),
        (training_fk, training_models.Training, "Training"),
        (allowance_type_fk, models.AllowanceType, "Allowance type"),
        (status_fk, models.AllowanceStatus, "Allowance status"),
    )
    for value, model, label in checks:
        if value is not None and get_live(db, model, value) is None:
            return f"{label} with ID {value} not found"
    return None


def to_read(allowance: models.Allowance) -> schemas.AllowanceRead:
    participant = allowance.participant
    training = allowance.training
    allowance_type = allowance.allowance_type
    allowance_status = allowance.allowance_status
    return schemas.AllowanceRead(
        pk=allowance.pk,
        amount=allowance.amount,
        start_date=allowance.start_date,
        end_date=allowance.end_date,
        comments=allowance.comments,
        training_fk=allowance.training_fk,
        status_fk=allowance.status_fk,
        participant_fk=allowance.participant_fk,
        allowance_type_fk=allowance.allowance_type_fk,
        created_at=allowance.created_at,
        updated_at=allowance.updated_at,
        created_by=allowance.created_by,
        updated_by=allowance.updated_by,
        participant=(
            schemas.ParticipantLookup(
                pk=participant.pk,
                first_name=participant.firstname,
                last_name=participant.lastname,
                email=participant.email,
            )
            if participant is not None
            else None
        ),
        training=(
            schemas.TrainingLookup(
                pk=training.pk,
                title=training.program,
                program=training.program,
                venue=training.institution,
            )
            if training is not None
            else None
        ),
        allowance_type=(
            schemas.AllowanceTypeLookup.model_validate(allowance_type)
            if allowance_type is not None
            else None
        ),
        allowance_status=(
            schemas.AllowanceStatusLookup.model_validate(allowance_status)
            if allowance_status is not None
            else None
        ),
    )
