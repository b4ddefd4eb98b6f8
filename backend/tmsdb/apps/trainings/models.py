# backend/tmsdb/apps/trainings/models.py

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ...database import Base
from ...models import AuditMixin


class Training(AuditMixin, Base):
    """
    A training programme offering at an institution.

    Duration is expressed in whole months (1..240).
    """

    __tablename__ = "trainings"

    institution = Column(String(200), nullable=False, index=True)
    program = Column(String(200), nullable=False, index=True)
    country_of_study = Column(String(100), nullable=False)

    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    duration = Column(Integer, nullable=False)

    departure_date = Column(DateTime, nullable=True)
    arrival_date = Column(DateTime, nullable=True)
    vacation_employment_period = Column(String(100), nullable=True)
    resumption_date = Column(DateTime, nullable=True)
    extension_period = Column(String(100), nullable=True)
    date_bond_signed = Column(DateTime, nullable=True)
    bond_serving_period = Column(String(100), nullable=True)

    sponsor_fk = Column(
        Integer,
        ForeignKey("sponsors.pk", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    mode_of_study = Column(String(50), nullable=False)
    registration_date = Column(DateTime, nullable=False, default=datetime.utcnow)
    training_status = Column(String(50), nullable=False)
    financial_year = Column(String(20), nullable=False, index=True)
    campus_type = Column(String(50), nullable=False)

    sponsor = relationship("Sponsor")
    enrollments = relationship(
        "ParticipantEnrollment",
        back_populates="training",
        passive_deletes="all",
    )
    allowances = relationship(
        "Allowance",
        back_populates="training",
        passive_deletes="all",
    )
    budgets = relationship(
        "TrainingBudget",
        back_populates="training",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reports = relationship(
        "TrainingReport",
        back_populates="training",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class TrainingTransfer(AuditMixin, Base):
    """A participant moving to another institution/country mid-programme."""

    __tablename__ = "training_transfers"
    __table_args__ = (
        Index("ix_training_transfers_participant_training", "participant_fk", "training_fk"),
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
        index=True,
    )
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    institution = Column(String(200), nullable=False)
    country = Column(String(100), nullable=False, index=True)
    transfer_reason = Column(String(500), nullable=True)
    transfer_status = Column(String(50), nullable=False, default="")

    participant = relationship("Participant")
    training = relationship("Training")


class TrainingBudget(AuditMixin, Base):
    __tablename__ = "training_budgets"

    allocated_amount = Column(Numeric(18, 2), nullable=False, default=0)
    spent_amount = Column(Numeric(18, 2), nullable=False, default=0)
    financial_year = Column(String(20), nullable=False, default="")
    budget_category = Column(String(100), nullable=False, default="")
    notes = Column(String(500), nullable=True)

    training_fk = Column(
        Integer,
        ForeignKey("trainings.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    training = relationship("Training", back_populates="budgets")

    @property
    def remaining_amount(self) -> Decimal:
        return Decimal(self.allocated_amount or 0) - Decimal(self.spent_amount or 0)


class TrainingReport(AuditMixin, Base):
    __tablename__ = "training_reports"

    report_title = Column(String(200), nullable=False)
    report_type = Column(String(50), nullable=False, default="")
    report_date = Column(DateTime, nullable=False, index=True)
    report_content = Column(String(2000), nullable=False, default="")
    file_path = Column(String(500), nullable=True)
    report_status = Column(String(50), nullable=False, default="")

    training_fk = Column(
        Integer,
        ForeignKey("trainings.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    training = relationship("Training", back_populates="reports")
