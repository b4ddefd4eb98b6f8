from __future__ import annotations

from tmsdb.apps.accounts import services as account_services
from tmsdb.apps.allowances import models as allowance_models
from tmsdb.apps.lookups import models as lookup_models
from tmsdb.scripts import seed_reference_data as seed
from tmsdb.security import verify_password


def test_seed_lookups_fills_empty_tables(db_session):
    counts = seed.seed_lookups(db_session)

    assert counts["departments"] == len(seed.DEPARTMENTS)
    assert counts["sponsors"] == len(seed.SPONSORS)
    assert db_session.query(lookup_models.SalaryScale).count() == len(seed.SALARY_SCALES)
    assert (
        db_session.query(allowance_models.AllowanceType)
        .filter(allowance_models.AllowanceType.name == "Tuition Fee")
        .count()
        == 1
    )

    scale = db_session.query(lookup_models.SalaryScale).filter_by(scale="Scale C").one()
    assert scale.created_by == "System"
    assert int(scale.max_salary) == 10000


def test_seed_lookups_is_idempotent(db_session):
    seed.seed_lookups(db_session)
    again = seed.seed_lookups(db_session)

    assert set(again.values()) == {0}
    assert db_session.query(lookup_models.Department).count() == len(seed.DEPARTMENTS)


def test_seed_lookups_leaves_populated_tables_alone(db_session):
    db_session.add(lookup_models.Facility(name="Existing Clinic", code="EXC"))
    db_session.commit()

    counts = seed.seed_lookups(db_session)

    assert counts["facilities"] == 0
    assert counts["designations"] == len(seed.DESIGNATIONS)
    assert db_session.query(lookup_models.Facility).count() == 1


def test_seed_roles_and_users_creates_default_accounts_once(db_session):
    created = seed.seed_roles_and_users(db_session)
    assert created == ["admin@learning.com", "test@learning.com", "trainer@learning.com"]

    admin = account_services.get_user_by_email(db_session, "admin@learning.com")
    assert admin.role_names == ["Admin", "Manager"]
    assert verify_password("Admin123!", admin.hashed_password)

    trainer = account_services.get_user_by_email(db_session, "trainer@learning.com")
    assert trainer.role_names == ["Trainer", "User"]

    assert seed.seed_roles_and_users(db_session) == []
