# backend/tmsdb/apps/enrollments/services.py

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Query, Session, joinedload

from ...models import get_live, not_deleted
from ...pagination import Page, paginate, search_filter
from ..lookups import models as lookup_models
from ..lookups import services as lookup_services
from ..participants import models as participant_models
from ..trainings import models as training_models
from . import models, schemas

# Optional lookup references, checked in this order on create/update.
_LOOKUP_REFERENCES = (
    ("designation_fk", lookup_models.Designation, "Designation"),
    ("salary_scale_fk", lookup_models.SalaryScale, "Salary scale"),
    ("department_fk", lookup_models.Department, "Department"),
    ("facility_fk", lookup_models.Facility, "Facility"),
    ("sponsor_fk", lookup_models.Sponsor, "Sponsor"),
)


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


def _enrollment_query(db: Session) -> Query:
    e = models.ParticipantEnrollment
    return (
        db.query(e)
        .options(
            joinedload(e.participant),
            joinedload(e.training),
            joinedload(e.designation),
            joinedload(e.salary_scale),
            joinedload(e.department),
            joinedload(e.facility),
            joinedload(e.sponsor),
        )
        .filter(not_deleted(e))
    )


def _newest_first(q: Query) -> Query:
    e = models.ParticipantEnrollment
    return q.order_by(e.created_at.desc(), e.pk.desc())


def search_enrollments(
    db: Session,
    *,
    page: int,
    page_size: int,
    search_term: Optional[str] = None,
) -> Page:
    q = _enrollment_query(db)
    if search_term and search_term.strip():
        e = models.ParticipantEnrollment
        p = participant_models.Participant
        t = training_models.Training
        q = (
            q.join(p, e.participant_fk == p.pk)
            .join(t, e.training_fk == t.pk)
            .filter(
                search_filter(
                    search_term,
                    p.firstname,
                    p.lastname,
                    p.id_no,
                    t.program,
                    t.institution,
                    e.training_status,
                    e.financial_year,
                )
            )
        )
    return paginate(_newest_first(q), page, page_size)


def list_for_participant(db: Session, participant_id: int) -> List[models.ParticipantEnrollment]:
    q = _enrollment_query(db).filter(models.ParticipantEnrollment.participant_fk == participant_id)
    return _newest_first(q).all()


def list_for_training(db: Session, training_id: int) -> List[models.ParticipantEnrollment]:
    q = _enrollment_query(db).filter(models.ParticipantEnrollment.training_fk == training_id)
    return _newest_first(q).all()


def get_enrollment(db: Session, enrollment_id: int) -> Optional[models.ParticipantEnrollment]:
    return _enrollment_query(db).filter(models.ParticipantEnrollment.pk == enrollment_id).first()


def is_enrolled(
    db: Session,
    participant_fk: int,
    training_fk: int,
    exclude_id: Optional[int] = None,
) -> bool:
    e = models.ParticipantEnrollment
    q = db.query(e.pk).filter(e.participant_fk == participant_fk, e.training_fk == training_fk)
    if exclude_id is not None:
        q = q.filter(e.pk != exclude_id)
    return q.first() is not None


# ---------------------------------------------------------------------------
# VALIDATION
# ---------------------------------------------------------------------------


def missing_party(
    db: Session,
    *,
    participant_fk: Optional[int] = None,
    training_fk: Optional[int] = None,
) -> Optional[str]:
    if participant_fk is not None and get_live(db, participant_models.Participant, participant_fk) is None:
        return "Participant not found"
    if training_fk is not None and get_live(db, training_models.Training, training_fk) is None:
        return "Training not found"
    return None


def missing_lookup(db: Session, values: Dict[str, Any]) -> Optional[str]:
    """
    Message for the first non-null lookup key in `values` that does not
    resolve to a live row.
    """
    for field, model, label in _LOOKUP_REFERENCES:
        value = values.get(field)
        if value is not None and get_live(db, model, value) is None:
            return f"{label} not found"
    return None


# ---------------------------------------------------------------------------
# PROJECTIONS
# ---------------------------------------------------------------------------


def _participant_summary(row: Optional[participant_models.Participant]) -> Optional[schemas.ParticipantSummary]:
    if row is None:
        return None
    return schemas.ParticipantSummary(
        pk=row.pk,
        title=row.title,
        firstname=row.firstname,
        lastname=row.lastname,
        middlename=row.middlename,
        id_no=row.id_no,
        email=row.email,
        phone=row.phone,
        full_name=row.full_name,
    )


def _training_summary(row: Optional[training_models.Training]) -> Optional[schemas.TrainingSummary]:
    if row is None:
        return None
    return schemas.TrainingSummary(
        pk=row.pk,
        institution=row.institution,
        program=row.program,
        country_of_study=row.country_of_study,
        start_date=row.start_date,
        end_date=row.end_date,
        duration=row.duration,
        financial_year=row.financial_year,
    )


def to_read(enrollment: models.ParticipantEnrollment) -> schemas.EnrollmentRead:
    columns = {
        column.key: getattr(enrollment, column.key)
        for column in models.ParticipantEnrollment.__table__.columns
        if column.key != "deleted"
    }
    return schemas.EnrollmentRead(
        **columns,
        participant=_participant_summary(enrollment.participant),
        training=_training_summary(enrollment.training),
        designation=lookup_services.optional_lookup(enrollment.designation, lookup_services.designation_lookup),
        salary_scale=lookup_services.optional_lookup(enrollment.salary_scale, lookup_services.salary_scale_lookup),
        department=lookup_services.optional_lookup(enrollment.department, lookup_services.department_lookup),
        facility=lookup_services.optional_lookup(enrollment.facility, lookup_services.facility_lookup),
        sponsor=lookup_services.optional_lookup(enrollment.sponsor, lookup_services.sponsor_lookup),
    )
