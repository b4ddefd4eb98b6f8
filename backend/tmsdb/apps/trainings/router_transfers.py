# backend/tmsdb/apps/trainings/router_transfers.py
"""
Read and record participant transfers between institutions or countries.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import server_errors
from ...security import get_current_active_user
from ..accounts import models as account_models
from . import models as training_models
from . import schemas as training_schemas
from . import services as training_services

router = APIRouter(
    prefix="/api/trainingtransfers",
    tags=["training-transfers"],
    dependencies=[Depends(get_current_active_user)],
)


def _read_list(rows) -> List[training_schemas.TransferRead]:
    return [training_services.transfer_to_read(row) for row in rows]


@router.get(
    "/participant/{participant_id}",
    response_model=List[training_schemas.TransferRead],
    summary="Transfers of a participant",
)
def list_by_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving transfers", participant_id=participant_id):
        return _read_list(training_services.transfers_for_participant(db, participant_id))


@router.get(
    "/training/{training_id}",
    response_model=List[training_schemas.TransferRead],
    summary="Transfers out of a training",
)
def list_by_training(training_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving transfers", training_id=training_id):
        return _read_list(training_services.transfers_for_training(db, training_id))


@router.get(
    "/country/{country}",
    response_model=List[training_schemas.TransferRead],
    summary="Transfers to a country",
)
def list_by_country(country: str, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving transfers", country=country):
        return _read_list(training_services.transfers_to_country(db, country))


@router.get(
    "/active",
    response_model=List[training_schemas.TransferRead],
    summary="Transfers currently in progress",
)
def list_active(db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving active transfers"):
        return _read_list(training_services.active_transfers(db))


@router.post(
    "",
    response_model=training_schemas.TransferRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a transfer",
)
def create_transfer(
    payload: training_schemas.TransferCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(get_current_active_user),
):
    with server_errors("An error occurred while creating the transfer", db):
        if payload.end_date <= payload.start_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="End date must be after start date",
            )
        missing = training_services.missing_transfer_reference(
            db,
            participant_fk=payload.participant_fk,
            training_fk=payload.training_fk,
        )
        if missing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=missing)

        transfer = training_models.TrainingTransfer(**payload.model_dump())
        transfer.stamp_created(current_user.full_name)
        db.add(transfer)
        db.commit()

        response.headers["Location"] = router.url_path_for(
            "list_by_participant", participant_id=transfer.participant_fk
        )
        return training_services.transfer_to_read(training_services.get_transfer(db, transfer.pk))
