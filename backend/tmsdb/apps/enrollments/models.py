# backend/tmsdb/apps/enrollments/models.py

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from ...database import Base
from ...models import AuditMixin


def _lookup_fk(table: str) -> Column:
    return Column(
        Integer,
        ForeignKey(f"{table}.pk", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )


class ParticipantEnrollment(AuditMixin, Base):
    """
    A participant's place on a training programme.

    Carries the employment, travel and bond details captured by the
    enrollment form. A participant can be enrolled in a given training once.
    """

    __tablename__ = "participant_enrollments"
    __table_args__ = (
        UniqueConstraint(
            "participant_fk",
            "training_fk",
            name="uq_participant_enrollments_participant_training",
        ),
    )

    participant_fk = Column(
        Integer,
        ForeignKey("participants.pk", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    training_fk = Column(
        Integer,
        ForeignKey("trainings.pk", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Employment
    designation_fk = _lookup_fk("designations")
    salary_scale_fk = _lookup_fk("salary_scales")
    department_fk = _lookup_fk("departments")
    facility_fk = _lookup_fk("facilities")
    payroll_date = Column(DateTime, nullable=True)
    study_leave_date = Column(DateTime, nullable=True)
    allowance_stoppage_date = Column(DateTime, nullable=True)

    # Study
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)
    needing_travel = Column(Boolean, nullable=False, default=False)
    departure_date = Column(DateTime, nullable=True)
    arrival_date = Column(DateTime, nullable=True)

    # Bond
    date_bond_signed = Column(DateTime, nullable=True)
    bond_serving_period = Column(String(50), nullable=True)

    # Others
    sponsor_fk = _lookup_fk("sponsors")
    mode_of_study = Column(String(50), nullable=False, default="")
    registration_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    training_status = Column(String(50), nullable=False, default="")
    financial_year = Column(String(20), nullable=False, default="")
    campus_type = Column(String(50), nullable=False, default="")

    participant = relationship("Participant", back_populates="enrollments")
    training = relationship("Training", back_populates="enrollments")
    designation = relationship("Designation")
    salary_scale = relationship("SalaryScale")
    department = relationship("Department")
    facility = relationship("Facility")
    sponsor = relationship("Sponsor")
    bonds = relationship(
        "Bond",
        back_populates="enrollment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Bond(AuditMixin, Base):
    """Service bond signed against an enrollment."""

    __tablename__ = "bonds"

    bond_start_date = Column(DateTime, nullable=False)
    bond_end_date = Column(DateTime, nullable=False)
    bond_period_months = Column(Integer, nullable=False)
    bond_status = Column(String(50), nullable=False, default="")
    bond_amount = Column(Numeric(18, 2), nullable=False, default=0)
    bond_conditions = Column(String(1000), nullable=True)
    completion_date = Column(DateTime, nullable=True)

    participant_enrollment_fk = Column(
        Integer,
        ForeignKey("participant_enrollments.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    enrollment = relationship("ParticipantEnrollment", back_populates="bonds")


class ParticipantTraining(AuditMixin, Base):
    """Lightweight attendance/status record of a participant on a training."""

    __tablename__ = "participant_trainings"
    __table_args__ = (
        Index("ix_participant_trainings_participant_training", "participant_fk", "training_fk"),
    )

    participant_fk = Column(
        Integer,
        ForeignKey("participants.pk", ondelete="RESTRICT"),
        nullable=False,
    )
    training_fk = Column(
        Integer,
        ForeignKey("trainings.pk", ondelete="RESTRICT"),
        nullable=False,
    )
    enrollment_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    status = Column(String(50), nullable=False, default="")
    completion_date = Column(DateTime, nullable=True)
    notes = Column(String(500), nullable=True)

    participant = relationship("Participant")
    training = relationship("Training")
