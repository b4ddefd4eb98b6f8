# backend/tmsdb/apps/trainings/router.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import integrity_errors, server_errors
from ...schemas import MessageResponse, PagedList
from ...security import get_current_active_user
from ..accounts import models as account_models
from . import models as training_models
from . import schemas as training_schemas
from . import services as training_services

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/trainings",
    tags=["trainings"],
    dependencies=[Depends(get_current_active_user)],
)


def _get_or_404(db: Session, training_id: int) -> training_models.Training:
    training = training_services.get_training(db, training_id)
    if training is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training not found")
    return training


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _check_sponsor(db: Session, sponsor_fk: Optional[int]) -> None:
    if sponsor_fk is not None and not training_services.sponsor_exists(db, sponsor_fk):
        raise _bad_request("Sponsor not found")


def _paged(db: Session, page: int, page_size: int, search_term: Optional[str]):
    result = training_services.search_trainings(
        db,
        page=page,
        page_size=page_size,
        search_term=search_term,
    )
    data = [training_services.to_read(row) for row in result.items]
    return PagedList[training_schemas.TrainingRead](**result.envelope(data, total_key="total"))


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=PagedList[training_schemas.TrainingRead],
    summary="List trainings, latest start date first",
)
def list_trainings(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving trainings"):
        return _paged(db, page, page_size, search_term)


@router.get(
    "/search",
    response_model=PagedList[training_schemas.TrainingRead],
    summary="Search trainings by institution, program or country",
)
def search_trainings(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while searching trainings", search_term=search_term):
        return _paged(db, page, page_size, search_term)


@router.get(
    "/active",
    response_model=List[training_schemas.TrainingRead],
    summary="Trainings that have not yet ended",
)
def list_active_trainings(db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving active trainings"):
        return [training_services.to_read(row) for row in training_services.list_active_trainings(db)]


@router.get(
    "/financial-year/{financial_year}",
    response_model=List[training_schemas.TrainingRead],
    summary="Trainings booked against a financial year",
)
def list_trainings_for_year(financial_year: str, db: Session = Depends(get_db)):
    with server_errors(
        "An error occurred while retrieving trainings for the specified financial year",
        financial_year=financial_year,
    ):
        if not financial_year or not financial_year.strip():
            raise _bad_request("Financial year cannot be empty")
        rows = training_services.list_trainings_for_year(db, financial_year)
        return [training_services.to_read(row) for row in rows]


@router.get(
    "/{training_id}",
    response_model=training_schemas.TrainingRead,
    summary="Get a training by id",
)
def get_training(training_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving the training", training_id=training_id):
        return training_services.to_read(_get_or_404(db, training_id))


@router.get(
    "/{training_id}/participants",
    response_model=training_schemas.TrainingWithParticipants,
    summary="Get a training together with its enrolled participants",
)
def get_training_with_participants(training_id: int, db: Session = Depends(get_db)):
    with server_errors(
        "An error occurred while retrieving the training with participants",
        training_id=training_id,
    ):
        training = training_services.get_training_with_participants(db, training_id)
        if training is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training not found")
        return training_services.to_read_with_participants(training)


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=training_schemas.TrainingRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a training",
)
def create_training(
    payload: training_schemas.TrainingCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while creating the training", db):
        _check_sponsor(db, payload.sponsor_fk)

        training = training_models.Training(**payload.model_dump())
        training.registration_date = datetime.utcnow()
        training.stamp_created(current_user.full_name)
        db.add(training)
        db.commit()
        db.refresh(training)

        logger.info("Training created", extra={"training_id": training.pk, "program": training.program})
        response.headers["Location"] = router.url_path_for("get_training", training_id=training.pk)
        return training_services.to_read(training)


@router.put(
    "/{training_id}",
    response_model=training_schemas.TrainingRead,
    summary="Update a training (only supplied fields change)",
)
def update_training(
    training_id: int,
    payload: training_schemas.TrainingUpdate,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while updating the training", db, training_id=training_id):
        training = _get_or_404(db, training_id)

        update_data = training_services.changed_fields(payload)
        if "sponsor_fk" in update_data:
            _check_sponsor(db, update_data["sponsor_fk"])

        for field, value in update_data.items():
            setattr(training, field, value)
        training.stamp_updated(current_user.full_name)
        db.commit()
        db.refresh(training)
        return training_services.to_read(training)


@router.delete(
    "/{training_id}",
    response_model=MessageResponse,
    summary="Delete a training that has no participants or allowances",
)
def delete_training(training_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while deleting the training", db, training_id=training_id):
        training = _get_or_404(db, training_id)

        if training_services.has_enrollments(db, training.pk):
            raise _bad_request("Cannot delete training with existing participants")
        if training_services.has_allowances(db, training.pk):
            raise _bad_request("Cannot delete training with existing allowances")

        db.delete(training)
        with integrity_errors(db, "Cannot delete training with existing related records"):
            db.commit()
        logger.info("Training deleted", extra={"training_id": training_id})
        return MessageResponse(message="Training deleted successfully")
