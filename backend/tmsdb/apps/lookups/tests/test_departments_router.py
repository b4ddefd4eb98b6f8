from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import HTTPException, Response

from tmsdb.apps.accounts import models as account_models
from tmsdb.apps.enrollments import models as enrollment_models
from tmsdb.apps.lookups import router_departments as departments_router
from tmsdb.apps.lookups import schemas as lookup_schemas
from tmsdb.apps.participants import models as participant_models
from tmsdb.apps.trainings import models as training_models


@pytest.fixture()
def manager(db_session) -> account_models.User:
    user = account_models.User(
        email="manager@example.com",
        hashed_password="hashed",
        first_name="Mara",
        last_name="Manager",
        is_active=True,
    )
    user.roles = [account_models.Role(name=account_models.RoleName.MANAGER.value)]
    db_session.add(user)
    db_session.commit()
    return user


def _create(db_session, user, name: str, code: str = None):
    response = Response()
    department = departments_router.create_department(
        lookup_schemas.DepartmentCreate(name=name, code=code),
        response=response,
        db=db_session,
        current_user=user,
    )
    return department, response


def test_create_department_stamps_manager(db_session, manager):
    department, response = _create(db_session, manager, "Ministry of Health", "MOH")

    assert department.created_by == "Mara Manager"
    assert response.headers["Location"] == f"/api/departments/{department.pk}"


def test_duplicate_name_or_code_is_rejected(db_session, manager):
    _create(db_session, manager, "Ministry of Health", "MOH")

    with pytest.raises(HTTPException) as exc:
        _create(db_session, manager, "ministry of health", "XYZ")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Department with name 'ministry of health' already exists"

    with pytest.raises(HTTPException) as exc:
        _create(db_session, manager, "Ministry of Wellness", "moh")
    assert exc.value.detail == "Department with code 'moh' already exists"


def test_update_changes_supplied_fields_only(db_session, manager):
    department, _ = _create(db_session, manager, "Ministry of Trade", "MITI")

    updated = departments_router.update_department(
        department.pk,
        lookup_schemas.DepartmentUpdate(description="Trade and Industry", name=""),
        db=db_session,
        current_user=manager,
    )
    assert updated.name == "Ministry of Trade"
    assert updated.code == "MITI"
    assert updated.description == "Trade and Industry"


def test_blank_code_and_description_keep_stored_values(db_session, manager):
    department, _ = _create(db_session, manager, "Ministry of Lands", "MLH")
    departments_router.update_department(
        department.pk,
        lookup_schemas.DepartmentUpdate(description="Land and Housing"),
        db=db_session,
        current_user=manager,
    )

    updated = departments_router.update_department(
        department.pk,
        lookup_schemas.DepartmentUpdate(name="", code="", description=""),
        db=db_session,
        current_user=manager,
    )
    assert updated.name == "Ministry of Lands"
    assert updated.code == "MLH"
    assert updated.description == "Land and Housing"


def test_blank_codes_do_not_collide(db_session, manager):
    first, _ = _create(db_session, manager, "Ministry of Sport", "")
    second, _ = _create(db_session, manager, "Ministry of Arts", "")

    assert first.code is None
    assert second.code is None


def test_list_is_paginated_by_name(db_session, manager):
    for name in ("Ministry of Youth", "Ministry of Agriculture", "Ministry of Finance"):
        _create(db_session, manager, name)

    page = departments_router.list_departments(page=1, page_size=2, search_term=None, db=db_session)

    assert [d.name for d in page.data] == ["Ministry of Agriculture", "Ministry of Finance"]
    assert page.total_count == 3
    assert page.has_next_page is True


def test_deleted_department_keeps_its_name_and_code(db_session, manager):
    department, _ = _create(db_session, manager, "Ministry of Tourism", "MOT")
    departments_router.delete_department(department.pk, db=db_session, current_user=manager)

    with pytest.raises(HTTPException) as exc:
        _create(db_session, manager, "Ministry of Tourism", "NEW")
    assert exc.value.status_code == 400
    assert exc.value.detail == "Department with name 'Ministry of Tourism' already exists"

    with pytest.raises(HTTPException) as exc:
        _create(db_session, manager, "Ministry of Environment", "mot")
    assert exc.value.detail == "Department with code 'mot' already exists"


def test_delete_blocked_while_enrollments_reference_it(db_session, manager):
    department, _ = _create(db_session, manager, "Ministry of Health", "MOH")
    participant = participant_models.Participant(
        firstname="Tebogo", lastname="Kgari", id_no="D-1", dob=datetime(1990, 1, 1)
    )
    training = training_models.Training(
        institution="UB",
        program="MSc Epidemiology",
        country_of_study="Botswana",
        start_date=datetime(2025, 1, 1),
        end_date=datetime(2027, 1, 1),
        duration=24,
        mode_of_study="Part time",
        training_status="Active",
        financial_year="2024/25",
        campus_type="On campus",
    )
    db_session.add_all([participant, training])
    db_session.commit()
    enrollment = enrollment_models.ParticipantEnrollment(
        participant_fk=participant.pk,
        training_fk=training.pk,
        department_fk=department.pk,
        start_date=training.start_date,
        end_date=training.end_date,
        duration=24,
    )
    db_session.add(enrollment)
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        departments_router.delete_department(department.pk, db=db_session, current_user=manager)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot delete department with existing enrollments"

    db_session.delete(enrollment)
    db_session.commit()

    result = departments_router.delete_department(department.pk, db=db_session, current_user=manager)
    assert result.status_code == 204

    with pytest.raises(HTTPException) as exc:
        departments_router.get_department(department.pk, db=db_session)
    assert exc.value.status_code == 404


def test_plain_user_cannot_edit_departments(staff_user):
    check = departments_router._require_reference_editor

    with pytest.raises(HTTPException) as exc:
        check(current_user=staff_user)
    assert exc.value.status_code == 403


def test_manager_passes_role_check(manager):
    assert departments_router._require_reference_editor(current_user=manager) is manager
