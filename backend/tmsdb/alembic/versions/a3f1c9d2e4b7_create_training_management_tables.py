"""
Create the training management schema: identity, reference data,
participants, trainings, enrollments and allowances.

Revision ID: a3f1c9d2e4b7
Revises:
Create Date: 2025-08-29
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "a3f1c9d2e4b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column("pk", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by", sa.String(length=100), nullable=False, server_default="System"),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_by", sa.String(length=100), nullable=False, server_default="System"),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def _fk(name: str, table: str, ondelete: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.Integer(),
        sa.ForeignKey(f"{table}.pk", ondelete=ondelete),
        nullable=nullable,
        index=True,
    )


def upgrade() -> None:
    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
    )
    op.create_index("ix_roles_name", "roles", ["name"], unique=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("date_of_birth", sa.DateTime(), nullable=True),
        sa.Column("profile_picture_url", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
    )

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------
    op.create_table(
        "departments",
        *_audit_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_departments_name", "departments", ["name"], unique=True)
    op.create_index("ix_departments_code", "departments", ["code"], unique=True)

    op.create_table(
        "facilities",
        *_audit_columns(),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=True),
        sa.Column("location", sa.String(length=100), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_facilities_name", "facilities", ["name"])
    op.create_index("ix_facilities_code", "facilities", ["code"], unique=True)

    op.create_table(
        "designations",
        *_audit_columns(),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=10), nullable=True),
        sa.Column("level", sa.String(length=50), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_designations_title", "designations", ["title"])
    op.create_index("ix_designations_code", "designations", ["code"], unique=True)

    op.create_table(
        "salary_scales",
        *_audit_columns(),
        sa.Column("scale", sa.String(length=20), nullable=False),
        sa.Column("grade", sa.String(length=50), nullable=True),
        sa.Column("min_salary", sa.Numeric(18, 2), nullable=True),
        sa.Column("max_salary", sa.Numeric(18, 2), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_salary_scales_scale", "salary_scales", ["scale"], unique=True)

    op.create_table(
        "sponsors",
        *_audit_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=True),
        sa.Column("contact_person", sa.String(length=100), nullable=True),
        sa.Column("email", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=15), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_sponsors_name", "sponsors", ["name"])
    op.create_index("ix_sponsors_email", "sponsors", ["email"])

    op.create_table(
        "allowance_types",
        *_audit_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_allowance_types_name", "allowance_types", ["name"], unique=True)

    op.create_table(
        "allowance_statuses",
        *_audit_columns(),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
    )
    op.create_index("ix_allowance_statuses_name", "allowance_statuses", ["name"], unique=True)

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------
    op.create_table(
        "participants",
        *_audit_columns(),
        sa.Column("title", sa.String(length=10), nullable=False, server_default=""),
        sa.Column("firstname", sa.String(length=100), nullable=False),
        sa.Column("lastname", sa.String(length=100), nullable=False),
        sa.Column("middlename", sa.String(length=100), nullable=True),
        sa.Column("id_no", sa.String(length=20), nullable=False),
        sa.Column("sex", sa.String(length=10), nullable=False, server_default=""),
        sa.Column("dob", sa.DateTime(), nullable=False),
        sa.Column("id_type", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("phone", sa.String(length=15), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=100), nullable=False, server_default=""),
    )
    op.create_index("ix_participants_id_no", "participants", ["id_no"], unique=True)
    op.create_index("ix_participants_email", "participants", ["email"])

    op.create_table(
        "next_of_kin",
        *_audit_columns(),
        sa.Column("firstname", sa.String(length=100), nullable=False),
        sa.Column("lastname", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=15), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("id_no", sa.String(length=20), nullable=False, server_default=""),
        _fk("participant_fk", "participants", "CASCADE"),
    )

    # ------------------------------------------------------------------
    # Trainings
    # ------------------------------------------------------------------
    op.create_table(
        "trainings",
        *_audit_columns(),
        sa.Column("institution", sa.String(length=200), nullable=False, index=True),
        sa.Column("program", sa.String(length=200), nullable=False, index=True),
        sa.Column("country_of_study", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("departure_date", sa.DateTime(), nullable=True),
        sa.Column("arrival_date", sa.DateTime(), nullable=True),
        sa.Column("vacation_employment_period", sa.String(length=100), nullable=True),
        sa.Column("resumption_date", sa.DateTime(), nullable=True),
        sa.Column("extension_period", sa.String(length=100), nullable=True),
        sa.Column("date_bond_signed", sa.DateTime(), nullable=True),
        sa.Column("bond_serving_period", sa.String(length=100), nullable=True),
        _fk("sponsor_fk", "sponsors", "SET NULL", nullable=True),
        sa.Column("mode_of_study", sa.String(length=50), nullable=False),
        sa.Column("registration_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("training_status", sa.String(length=50), nullable=False),
        sa.Column("financial_year", sa.String(length=20), nullable=False, index=True),
        sa.Column("campus_type", sa.String(length=50), nullable=False),
    )

    op.create_table(
        "training_transfers",
        *_audit_columns(),
        sa.Column("participant_fk", sa.Integer(), sa.ForeignKey("participants.pk", ondelete="RESTRICT"), nullable=False),
        _fk("training_fk", "trainings", "RESTRICT"),
        sa.Column("start_date", sa.DateTime(), nullable=False, index=True),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("institution", sa.String(length=200), nullable=False),
        sa.Column("country", sa.String(length=100), nullable=False, index=True),
        sa.Column("transfer_reason", sa.String(length=500), nullable=True),
        sa.Column("transfer_status", sa.String(length=50), nullable=False, server_default=""),
    )
    op.create_index(
        "ix_training_transfers_participant_training",
        "training_transfers",
        ["participant_fk", "training_fk"],
    )

    op.create_table(
        "training_budgets",
        *_audit_columns(),
        sa.Column("allocated_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("spent_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("financial_year", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("budget_category", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("notes", sa.String(length=500), nullable=True),
        _fk("training_fk", "trainings", "CASCADE"),
    )

    op.create_table(
        "training_reports",
        *_audit_columns(),
        sa.Column("report_title", sa.String(length=200), nullable=False),
        sa.Column("report_type", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("report_date", sa.DateTime(), nullable=False, index=True),
        sa.Column("report_content", sa.String(length=2000), nullable=False, server_default=""),
        sa.Column("file_path", sa.String(length=500), nullable=True),
        sa.Column("report_status", sa.String(length=50), nullable=False, server_default=""),
        _fk("training_fk", "trainings", "CASCADE"),
    )

    # ------------------------------------------------------------------
    # Enrollments
    # ------------------------------------------------------------------
    op.create_table(
        "participant_enrollments",
        *_audit_columns(),
        _fk("participant_fk", "participants", "RESTRICT"),
        _fk("training_fk", "trainings", "RESTRICT"),
        _fk("designation_fk", "designations", "SET NULL", nullable=True),
        _fk("salary_scale_fk", "salary_scales", "SET NULL", nullable=True),
        _fk("department_fk", "departments", "SET NULL", nullable=True),
        _fk("facility_fk", "facilities", "SET NULL", nullable=True),
        sa.Column("payroll_date", sa.DateTime(), nullable=True),
        sa.Column("study_leave_date", sa.DateTime(), nullable=True),
        sa.Column("allowance_stoppage_date", sa.DateTime(), nullable=True),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("needing_travel", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("departure_date", sa.DateTime(), nullable=True),
        sa.Column("arrival_date", sa.DateTime(), nullable=True),
        sa.Column("date_bond_signed", sa.DateTime(), nullable=True),
        sa.Column("bond_serving_period", sa.String(length=50), nullable=True),
        _fk("sponsor_fk", "sponsors", "SET NULL", nullable=True),
        sa.Column("mode_of_study", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("registration_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("training_status", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("financial_year", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("campus_type", sa.String(length=50), nullable=False, server_default=""),
        sa.UniqueConstraint(
            "participant_fk",
            "training_fk",
            name="uq_participant_enrollments_participant_training",
        ),
    )

    op.create_table(
        "bonds",
        *_audit_columns(),
        sa.Column("bond_start_date", sa.DateTime(), nullable=False),
        sa.Column("bond_end_date", sa.DateTime(), nullable=False),
        sa.Column("bond_period_months", sa.Integer(), nullable=False),
        sa.Column("bond_status", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("bond_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("bond_conditions", sa.String(length=1000), nullable=True),
        sa.Column("completion_date", sa.DateTime(), nullable=True),
        _fk("participant_enrollment_fk", "participant_enrollments", "CASCADE"),
    )

    op.create_table(
        "participant_trainings",
        *_audit_columns(),
        sa.Column("participant_fk", sa.Integer(), sa.ForeignKey("participants.pk", ondelete="RESTRICT"), nullable=False),
        sa.Column("training_fk", sa.Integer(), sa.ForeignKey("trainings.pk", ondelete="RESTRICT"), nullable=False),
        sa.Column("enrollment_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("completion_date", sa.DateTime(), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
    )
    op.create_index(
        "ix_participant_trainings_participant_training",
        "participant_trainings",
        ["participant_fk", "training_fk"],
    )

    # ------------------------------------------------------------------
    # Allowances
    # ------------------------------------------------------------------
    op.create_table(
        "allowances",
        *_audit_columns(),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("comments", sa.String(length=1000), nullable=True),
        _fk("training_fk", "trainings", "RESTRICT"),
        _fk("status_fk", "allowance_statuses", "RESTRICT"),
        _fk("participant_fk", "participants", "RESTRICT"),
        _fk("allowance_type_fk", "allowance_types", "RESTRICT"),
        sa.CheckConstraint("amount > 0", name="ck_allowances_amount_positive"),
        sa.CheckConstraint("end_date > start_date", name="ck_allowances_date_order"),
    )


def downgrade() -> None:
    op.drop_table("allowances")
    op.drop_index("ix_participant_trainings_participant_training", table_name="participant_trainings")
    op.drop_table("participant_trainings")
    op.drop_table("bonds")
    op.drop_table("participant_enrollments")
    op.drop_table("training_reports")
    op.drop_table("training_budgets")
    op.drop_index("ix_training_transfers_participant_training", table_name="training_transfers")
    op.drop_table("training_transfers")
    op.drop_table("trainings")
    op.drop_table("next_of_kin")
    op.drop_index("ix_participants_email", table_name="participants")
    op.drop_index("ix_participants_id_no", table_name="participants")
    op.drop_table("participants")
    op.drop_index("ix_allowance_statuses_name", table_name="allowance_statuses")
    op.drop_table("allowance_statuses")
    op.drop_index("ix_allowance_types_name", table_name="allowance_types")
    op.drop_table("allowance_types")
    op.drop_index("ix_sponsors_email", table_name="sponsors")
    op.drop_index("ix_sponsors_name", table_name="sponsors")
    op.drop_table("sponsors")
    op.drop_index("ix_salary_scales_scale", table_name="salary_scales")
    op.drop_table("salary_scales")
    op.drop_index("ix_designations_code", table_name="designations")
    op.drop_index("ix_designations_title", table_name="designations")
    op.drop_table("designations")
    op.drop_index("ix_facilities_code", table_name="facilities")
    op.drop_index("ix_facilities_name", table_name="facilities")
    op.drop_table("facilities")
    op.drop_index("ix_departments_code", table_name="departments")
    op.drop_index("ix_departments_name", table_name="departments")
    op.drop_table("departments")
    op.drop_table("user_roles")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_index("ix_roles_name", table_name="roles")
    op.drop_table("roles")
