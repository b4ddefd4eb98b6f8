# backend/tmsdb/apps/participants/models.py

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ...database import Base
from ...models import AuditMixin


class Participant(AuditMixin, Base):
    """
    A person who attends (or is nominated for) training.

    `id_no` is the national ID / passport number and is the business key.
    """

    __tablename__ = "participants"

    title = Column(String(10), nullable=False, default="")
    firstname = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    middlename = Column(String(100), nullable=True)
    id_no = Column(String(20), nullable=False, unique=True, index=True)
    sex = Column(String(10), nullable=False, default="")
    dob = Column(DateTime, nullable=False)
    id_type = Column(String(20), nullable=False, default="")
    phone = Column(String(15), nullable=False, default="")
    email = Column(String(100), nullable=False, default="", index=True)

    enrollments = relationship(
        "ParticipantEnrollment",
        back_populates="participant",
        passive_deletes="all",
    )
    allowances = relationship(
        "Allowance",
        back_populates="participant",
        passive_deletes="all",
    )
    next_of_kin = relationship(
        "NextOfKin",
        back_populates="participant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"


class NextOfKin(AuditMixin, Base):
    __tablename__ = "next_of_kin"

    firstname = Column(String(100), nullable=False)
    lastname = Column(String(100), nullable=False)
    phone = Column(String(15), nullable=False, default="")
    email = Column(String(100), nullable=False, default="")
    id_no = Column(String(20), nullable=False, default="")

    participant_fk = Column(
        Integer,
        ForeignKey("participants.pk", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    participant = relationship("Participant", back_populates="next_of_kin")

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"
