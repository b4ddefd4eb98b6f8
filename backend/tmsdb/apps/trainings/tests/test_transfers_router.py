from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi import HTTPException, Response

from tmsdb.apps.participants import models as participant_models
from tmsdb.apps.trainings import models as training_models
from tmsdb.apps.trainings import router_transfers as transfers_router
from tmsdb.apps.trainings import schemas as training_schemas


@pytest.fixture()
def parties(db_session):
    participant = participant_models.Participant(
        firstname="Boitumelo",
        lastname="Nkwe",
        id_no="T-100",
        dob=datetime(1989, 9, 9),
    )
    training = training_models.Training(
        institution="University of Zambia",
        program="MPH",
        country_of_study="Zambia",
        start_date=datetime(2024, 1, 1),
        end_date=datetime(2026, 1, 1),
        duration=24,
        mode_of_study="Full time",
        training_status="Active",
        financial_year="2023/24",
        campus_type="On campus",
    )
    db_session.add_all([participant, training])
    db_session.commit()
    return participant, training


def _transfer(db_session, user, participant, training, **overrides):
    values = dict(
        participant_fk=participant.pk,
        training_fk=training.pk,
        start_date=datetime(2025, 1, 1),
        end_date=datetime(2025, 12, 31),
        institution="University of Ghana",
        country="Ghana",
        transfer_reason="Programme moved",
        transfer_status="Approved",
    )
    values.update(overrides)
    response = Response()
    created = transfers_router.create_transfer(
        training_schemas.TransferCreate(**values),
        response=response,
        db=db_session,
        current_user=user,
    )
    return created, response


def test_create_transfer_returns_names_and_location(db_session, staff_user, parties):
    participant, training = parties
    created, response = _transfer(db_session, staff_user, participant, training)

    assert created.participant_name == "Boitumelo Nkwe"
    assert created.training_program == "MPH"
    assert created.created_by == "Clerk User"
    assert response.headers["Location"] == f"/api/trainingtransfers/participant/{participant.pk}"


def test_create_transfer_validates_dates_and_parties(db_session, staff_user, parties):
    participant, training = parties

    with pytest.raises(HTTPException) as exc:
        _transfer(db_session, staff_user, participant, training, end_date=datetime(2024, 6, 1))
    assert exc.value.status_code == 400
    assert exc.value.detail == "End date must be after start date"

    with pytest.raises(HTTPException) as exc:
        _transfer(db_session, staff_user, participant, training, participant_fk=999)
    assert exc.value.detail == "Participant not found"

    with pytest.raises(HTTPException) as exc:
        _transfer(db_session, staff_user, participant, training, training_fk=999)
    assert exc.value.detail == "Training not found"


def test_create_transfer_normalises_mixed_offsets_to_utc(db_session, staff_user, parties):
    participant, training = parties
    payload = training_schemas.TransferCreate.model_validate(
        {
            "participantFK": participant.pk,
            "trainingFK": training.pk,
            "startDate": "2025-06-01T01:00:00+02:00",
            "endDate": "2025-05-31T23:30:00",
            "institution": "University of Nairobi",
            "country": "Kenya",
        }
    )

    created = transfers_router.create_transfer(
        payload, response=Response(), db=db_session, current_user=staff_user
    )

    assert created.start_date == datetime(2025, 5, 31, 23, 0)
    assert created.end_date == datetime(2025, 5, 31, 23, 30)


def test_listings_filter_by_participant_training_and_country(db_session, staff_user, parties):
    participant, training = parties
    later, _ = _transfer(db_session, staff_user, participant, training, start_date=datetime(2025, 3, 1))
    earlier, _ = _transfer(
        db_session,
        staff_user,
        participant,
        training,
        start_date=datetime(2024, 6, 1),
        country="Kenya",
    )

    by_participant = transfers_router.list_by_participant(participant.pk, db=db_session)
    assert [t.pk for t in by_participant] == [earlier.pk, later.pk]

    by_training = transfers_router.list_by_training(training.pk, db=db_session)
    assert len(by_training) == 2

    to_kenya = transfers_router.list_by_country("Kenya", db=db_session)
    assert [t.pk for t in to_kenya] == [earlier.pk]


def test_active_lists_only_transfers_in_progress(db_session, staff_user, parties):
    participant, training = parties
    now = datetime.utcnow()
    running, _ = _transfer(
        db_session,
        staff_user,
        participant,
        training,
        start_date=now - timedelta(days=10),
        end_date=now + timedelta(days=10),
    )
    _transfer(
        db_session,
        staff_user,
        participant,
        training,
        start_date=now + timedelta(days=5),
        end_date=now + timedelta(days=50),
    )
    _transfer(
        db_session,
        staff_user,
        participant,
        training,
        start_date=now - timedelta(days=50),
        end_date=now - timedelta(days=5),
    )

    active = transfers_router.list_active(db=db_session)
    assert [t.pk for t in active] == [running.pk]
