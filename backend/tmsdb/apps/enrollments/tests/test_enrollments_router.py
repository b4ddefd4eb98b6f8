from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import HTTPException, Response

from tmsdb.apps.enrollments import models as enrollment_models
from tmsdb.apps.enrollments import router as enrollments_router
from tmsdb.apps.enrollments import schemas as enrollment_schemas
from tmsdb.apps.lookups import models as lookup_models
from tmsdb.apps.participants import models as participant_models
from tmsdb.apps.trainings import models as training_models


def _create_participant(db_session, *, id_no: str, firstname: str = "Naledi", lastname: str = "Moyo"):
    participant = participant_models.Participant(
        firstname=firstname,
        lastname=lastname,
        id_no=id_no,
        dob=datetime(1990, 2, 2),
        email=f"{id_no.lower()}@example.com",
    )
    db_session.add(participant)
    db_session.commit()
    return participant


def _create_training(db_session, *, program: str = "BSc Radiography", institution: str = "Wits"):
    training = training_models.Training(
        institution=institution,
        program=program,
        country_of_study="South Africa",
        start_date=datetime(2025, 2, 1),
        end_date=datetime(2028, 2, 1),
        duration=36,
        mode_of_study="Full time",
        training_status="Active",
        financial_year="2024/25",
        campus_type="On campus",
    )
    db_session.add(training)
    db_session.commit()
    return training


@pytest.fixture()
def pair(db_session):
    return _create_participant(db_session, id_no="E-1"), _create_training(db_session)


def _enroll(db_session, user, participant_fk: int, training_fk: int, **overrides):
    values = dict(
        participant_fk=participant_fk,
        training_fk=training_fk,
        start_date=datetime(2025, 2, 1),
        end_date=datetime(2028, 2, 1),
        duration=36,
        training_status="Enrolled",
        financial_year="2024/25",
    )
    values.update(overrides)
    response = Response()
    created = enrollments_router.create_enrollment(
        enrollment_schemas.EnrollmentCreate(**values),
        response=response,
        db=db_session,
        current_user=user,
    )
    return created, response


def test_create_enrollment_embeds_participant_training_and_lookups(db_session, staff_user, pair):
    participant, training = pair
    department = lookup_models.Department(name="Ministry of Health", code="MOH")
    designation = lookup_models.Designation(title="Radiographer", code="RAD", level="Senior")
    db_session.add_all([department, designation])
    db_session.commit()

    created, response = _enroll(
        db_session,
        staff_user,
        participant.pk,
        training.pk,
        department_fk=department.pk,
        designation_fk=designation.pk,
    )

    assert response.headers["Location"] == f"/api/trainingenrollment/{created.pk}"
    assert created.participant.full_name == "Naledi Moyo"
    assert created.training.program == "BSc Radiography"
    assert created.department.name == "Ministry of Health"
    assert created.designation.name == "Radiographer"
    assert created.designation.level == "Senior"
    assert created.facility is None
    assert created.registration_date is not None
    assert created.created_by == "Clerk User"


def test_create_rejects_missing_participant_or_training(db_session, staff_user, pair):
    participant, training = pair

    with pytest.raises(HTTPException) as exc:
        _enroll(db_session, staff_user, 999, training.pk)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Participant not found"

    with pytest.raises(HTTPException) as exc:
        _enroll(db_session, staff_user, participant.pk, 999)
    assert exc.value.detail == "Training not found"


def test_create_rejects_unknown_lookup(db_session, staff_user, pair):
    participant, training = pair

    with pytest.raises(HTTPException) as exc:
        _enroll(db_session, staff_user, participant.pk, training.pk, salary_scale_fk=77)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Salary scale not found"


def test_second_enrollment_in_same_training_conflicts(db_session, staff_user, pair):
    participant, training = pair
    _enroll(db_session, staff_user, participant.pk, training.pk)

    with pytest.raises(HTTPException) as exc:
        _enroll(db_session, staff_user, participant.pk, training.pk)
    assert exc.value.status_code == 409
    assert exc.value.detail == "Participant is already enrolled in this training"


def test_list_newest_first_with_search(db_session, staff_user, pair):
    participant, training = pair
    other = _create_participant(db_session, id_no="E-2", firstname="Kefilwe", lastname="Phiri")
    nursing = _create_training(db_session, program="Nursing Science", institution="UB")

    first, _ = _enroll(db_session, staff_user, participant.pk, training.pk)
    second, _ = _enroll(db_session, staff_user, other.pk, nursing.pk)
    db_session.get(enrollment_models.ParticipantEnrollment, first.pk).created_at = datetime(2025, 1, 1)
    db_session.get(enrollment_models.ParticipantEnrollment, second.pk).created_at = datetime(2025, 2, 1)
    db_session.commit()

    page = enrollments_router.list_enrollments(page=1, page_size=10, search_term=None, db=db_session)
    assert [e.pk for e in page.data] == [second.pk, first.pk]
    assert page.total_count == 2

    searched = enrollments_router.list_enrollments(page=1, page_size=10, search_term="phiri", db=db_session)
    assert [e.pk for e in searched.data] == [second.pk]

    by_program = enrollments_router.list_enrollments(page=1, page_size=10, search_term="radio", db=db_session)
    assert [e.pk for e in by_program.data] == [first.pk]


def test_lists_for_participant_and_training(db_session, staff_user, pair):
    participant, training = pair
    created, _ = _enroll(db_session, staff_user, participant.pk, training.pk)

    assert [e.pk for e in enrollments_router.list_for_participant(participant.pk, db=db_session)] == [created.pk]
    assert [e.pk for e in enrollments_router.list_for_training(training.pk, db=db_session)] == [created.pk]
    assert enrollments_router.list_for_training(training.pk + 1, db=db_session) == []


def test_update_is_partial_and_validates_lookups(db_session, staff_user, pair):
    participant, training = pair
    created, _ = _enroll(db_session, staff_user, participant.pk, training.pk, campus_type="On campus")

    updated = enrollments_router.update_enrollment(
        created.pk,
        enrollment_schemas.EnrollmentUpdate(training_status="Completed", needing_travel=True),
        db=db_session,
        current_user=staff_user,
    )
    assert updated.training_status == "Completed"
    assert updated.needing_travel is True
    assert updated.campus_type == "On campus"
    assert updated.duration == 36

    with pytest.raises(HTTPException) as exc:
        enrollments_router.update_enrollment(
            created.pk,
            enrollment_schemas.EnrollmentUpdate(facility_fk=123),
            db=db_session,
            current_user=staff_user,
        )
    assert exc.value.status_code == 400
    assert exc.value.detail == "Facility not found"


def test_update_ignores_blank_strings(db_session, staff_user, pair):
    participant, training = pair
    created, _ = _enroll(
        db_session, staff_user, participant.pk, training.pk, campus_type="On campus", mode_of_study="Part time"
    )

    updated = enrollments_router.update_enrollment(
        created.pk,
        enrollment_schemas.EnrollmentUpdate.model_validate(
            {"trainingStatus": "", "financialYear": "", "modeOfStudy": "", "campusType": "Online"}
        ),
        db=db_session,
        current_user=staff_user,
    )
    assert updated.training_status == "Enrolled"
    assert updated.financial_year == "2024/25"
    assert updated.mode_of_study == "Part time"
    assert updated.campus_type == "Online"


def test_moving_enrollment_onto_existing_pair_conflicts(db_session, staff_user, pair):
    participant, training = pair
    other_training = _create_training(db_session, program="Dental Therapy")
    _enroll(db_session, staff_user, participant.pk, training.pk)
    second, _ = _enroll(db_session, staff_user, participant.pk, other_training.pk)

    with pytest.raises(HTTPException) as exc:
        enrollments_router.update_enrollment(
            second.pk,
            enrollment_schemas.EnrollmentUpdate(training_fk=training.pk),
            db=db_session,
            current_user=staff_user,
        )
    assert exc.value.status_code == 409


def test_delete_removes_enrollment(db_session, staff_user, pair):
    participant, training = pair
    created, _ = _enroll(db_session, staff_user, participant.pk, training.pk)

    result = enrollments_router.delete_enrollment(created.pk, db=db_session)
    assert result.message == "Enrollment deleted successfully"
    assert db_session.get(enrollment_models.ParticipantEnrollment, created.pk) is None

    with pytest.raises(HTTPException) as exc:
        enrollments_router.get_enrollment(created.pk, db=db_session)
    assert exc.value.status_code == 404
    assert exc.value.detail == "Enrollment not found"


def test_wire_names_use_upper_case_fk_suffix(db_session, staff_user, pair):
    participant, training = pair
    created, _ = _enroll(db_session, staff_user, participant.pk, training.pk)

    body = created.model_dump(by_alias=True)
    assert body["participantFK"] == participant.pk
    assert body["trainingFK"] == training.pk
    assert "needingTravel" in body
