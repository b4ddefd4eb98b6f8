from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi import HTTPException, Response

from tmsdb.apps.allowances import models as allowance_models
from tmsdb.apps.enrollments import models as enrollment_models
from tmsdb.apps.participants import models as participant_models
from tmsdb.apps.participants import router as participants_router
from tmsdb.apps.participants import schemas as participant_schemas
from tmsdb.apps.trainings import models as training_models


def _payload(**overrides) -> participant_schemas.ParticipantCreate:
    values = dict(
        title="Ms",
        firstname="Lesedi",
        lastname="Dube",
        id_no="123456789",
        sex="Female",
        dob=datetime(1991, 4, 12),
        id_type="Omang",
        phone="71234567",
        email="lesedi@example.com",
    )
    values.update(overrides)
    return participant_schemas.ParticipantCreate(**values)


def _create(db_session, user, **overrides):
    response = Response()
    created = participants_router.create_participant(
        _payload(**overrides),
        response=response,
        db=db_session,
        current_user=user,
    )
    return created, response


def _create_training(db_session):
    training = training_models.Training(
        institution="University of Botswana",
        program="Diploma in Midwifery",
        country_of_study="Botswana",
        start_date=datetime(2025, 1, 1),
        end_date=datetime(2026, 1, 1),
        duration=12,
        mode_of_study="Full time",
        training_status="Active",
        financial_year="2024/25",
        campus_type="On campus",
    )
    db_session.add(training)
    db_session.commit()
    return training


def _enroll(db_session, participant_id: int, training: training_models.Training):
    enrollment = enrollment_models.ParticipantEnrollment(
        participant_fk=participant_id,
        training_fk=training.pk,
        start_date=training.start_date,
        end_date=training.end_date,
        duration=training.duration,
        training_status="Enrolled",
    )
    db_session.add(enrollment)
    db_session.commit()
    return enrollment


def test_create_participant_stamps_user_and_sets_location(db_session, staff_user):
    created, response = _create(db_session, staff_user)

    assert created.id > 0
    assert created.full_name == "Lesedi Dube"
    assert response.headers["Location"] == f"/api/participants/{created.id}"

    row = db_session.get(participant_models.Participant, created.id)
    assert row.created_by == "Clerk User"
    assert row.updated_by == "Clerk User"


def test_blank_email_is_stored_as_empty_string(db_session, staff_user):
    created, _ = _create(db_session, staff_user, email="")
    assert created.email == ""


def test_duplicate_id_number_conflicts(db_session, staff_user):
    _create(db_session, staff_user)

    with pytest.raises(HTTPException) as exc:
        _create(db_session, staff_user, firstname="Other", email="other@example.com")
    assert exc.value.status_code == 409
    assert exc.value.detail == "A participant with this ID number already exists"


def test_list_orders_by_name_and_uses_total_envelope(db_session, staff_user):
    _create(db_session, staff_user, firstname="Zola", lastname="Banda", id_no="A1")
    _create(db_session, staff_user, firstname="Anna", lastname="Banda", id_no="A2")
    _create(db_session, staff_user, firstname="Tumi", lastname="Akinola", id_no="A3")

    page = participants_router.list_participants(page=1, page_size=2, search_term=None, db=db_session)

    assert [p.full_name for p in page.data] == ["Tumi Akinola", "Anna Banda"]
    assert page.total == 3
    assert page.total_pages == 2
    assert page.has_next_page is True
    body = page.model_dump(by_alias=True)
    assert "total" in body
    assert "totalCount" not in body


def test_search_matches_names_and_id_number(db_session, staff_user):
    _create(db_session, staff_user, firstname="Kagiso", lastname="Sello", id_no="BW-778")
    _create(db_session, staff_user, firstname="Mpho", lastname="Ramotswe", id_no="BW-123")

    by_name = participants_router.search_participants(page=1, page_size=10, search_term="kagi", db=db_session)
    assert [p.firstname for p in by_name.data] == ["Kagiso"]

    by_id = participants_router.search_participants(page=1, page_size=10, search_term="123", db=db_session)
    assert [p.firstname for p in by_id.data] == ["Mpho"]


def test_out_of_range_paging_is_clamped(db_session, staff_user):
    _create(db_session, staff_user)

    page = participants_router.list_participants(page=0, page_size=0, search_term=None, db=db_session)
    assert page.page == 1
    assert page.page_size == 10

    big = participants_router.list_participants(page=1, page_size=500, search_term=None, db=db_session)
    assert big.page_size == 100


def test_update_keeps_omitted_and_blank_fields(db_session, staff_user):
    created, _ = _create(db_session, staff_user)

    updated = participants_router.update_participant(
        created.id,
        participant_schemas.ParticipantUpdate(phone="72000000", lastname=""),
        db=db_session,
        current_user=staff_user,
    )

    assert updated.phone == "72000000"
    assert updated.lastname == "Dube"
    assert updated.email == "lesedi@example.com"


def test_update_to_taken_id_number_conflicts(db_session, staff_user):
    _create(db_session, staff_user, id_no="TAKEN-1")
    second, _ = _create(db_session, staff_user, id_no="FREE-2")

    with pytest.raises(HTTPException) as exc:
        participants_router.update_participant(
            second.id,
            participant_schemas.ParticipantUpdate(id_no="TAKEN-1"),
            db=db_session,
            current_user=staff_user,
        )
    assert exc.value.status_code == 409


def test_get_missing_participant_is_404(db_session):
    with pytest.raises(HTTPException) as exc:
        participants_router.get_participant(999, db=db_session)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Participant not found"


def test_participant_with_enrollments_lists_training(db_session, staff_user):
    created, _ = _create(db_session, staff_user)
    training = _create_training(db_session)
    _enroll(db_session, created.id, training)

    result = participants_router.get_participant_with_enrollments(created.id, db=db_session)

    assert result.id == created.id
    assert len(result.enrollments) == 1
    assert result.enrollments[0].training_id == training.pk
    assert result.enrollments[0].training_program == "Diploma in Midwifery"


def test_delete_is_blocked_by_enrollment_then_succeeds(db_session, staff_user):
    created, _ = _create(db_session, staff_user)
    training = _create_training(db_session)
    enrollment = _enroll(db_session, created.id, training)

    with pytest.raises(HTTPException) as exc:
        participants_router.delete_participant(created.id, db=db_session)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot delete participant with existing enrollments"

    db_session.delete(enrollment)
    db_session.commit()

    result = participants_router.delete_participant(created.id, db=db_session)
    assert result.message == "Participant deleted successfully"

    with pytest.raises(HTTPException) as exc:
        participants_router.get_participant(created.id, db=db_session)
    assert exc.value.status_code == 404


def test_delete_is_blocked_by_soft_deleted_allowance(db_session, staff_user):
    created, _ = _create(db_session, staff_user)
    training = _create_training(db_session)
    allowance_type = allowance_models.AllowanceType(name="Transport")
    allowance_status = allowance_models.AllowanceStatus(name="Paid")
    db_session.add_all([allowance_type, allowance_status])
    db_session.commit()
    db_session.add(
        allowance_models.Allowance(
            amount=Decimal("80.00"),
            start_date=datetime(2025, 1, 1),
            end_date=datetime(2025, 1, 2),
            participant_fk=created.id,
            training_fk=training.pk,
            allowance_type_fk=allowance_type.pk,
            status_fk=allowance_status.pk,
            deleted=True,
        )
    )
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        participants_router.delete_participant(created.id, db=db_session)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Cannot delete participant with existing allowances"


def test_soft_deleted_participant_is_hidden(db_session, staff_user):
    created, _ = _create(db_session, staff_user)
    row = db_session.get(participant_models.Participant, created.id)
    row.soft_delete()
    db_session.commit()

    page = participants_router.list_participants(page=1, page_size=10, search_term=None, db=db_session)
    assert page.total == 0
    with pytest.raises(HTTPException):
        participants_router.get_participant(created.id, db=db_session)


def test_routes_require_an_authenticated_user():
    dependency_calls = [dep.dependency.__name__ for dep in participants_router.router.dependencies]
    assert "get_current_active_user" in dependency_calls


def test_create_requires_identity_number():
    with pytest.raises(ValueError):
        participant_schemas.ParticipantCreate(firstname="A", lastname="B", dob=datetime(2000, 1, 1))
