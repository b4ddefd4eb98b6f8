# backend/tmsdb/apps/allowances/router.py

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import server_errors
from ...schemas import PaginatedResponse, to_naive_utc
from . import models as allowance_models
from . import schemas as allowance_schemas
from . import services as allowance_services

router = APIRouter(prefix="/api/allowances", tags=["allowances"])


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _get_or_404(db: Session, allowance_id: int) -> allowance_models.Allowance:
    allowance = allowance_services.get_allowance(db, allowance_id)
    if allowance is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Allowance with ID {allowance_id} not found",
        )
    return allowance


def _check_date_order(start_date: datetime, end_date: datetime) -> None:
    if end_date <= start_date:
        raise _bad_request("End date must be after start date")


def _read_list(rows: List[allowance_models.Allowance]) -> List[allowance_schemas.AllowanceRead]:
    return [allowance_services.to_read(row) for row in rows]


# ---------------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------------


@router.get(
    "",
    response_model=PaginatedResponse[allowance_schemas.AllowanceRead],
    summary="List allowances, newest first",
)
def list_allowances(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving allowances"):
        result = allowance_services.search_allowances(
            db,
            page=page,
            page_size=page_size,
            search_term=search_term,
        )
        return PaginatedResponse[allowance_schemas.AllowanceRead](
            **result.envelope(_read_list(result.items))
        )


@router.get(
    "/participant/{participant_id}",
    response_model=List[allowance_schemas.AllowanceRead],
    summary="Allowances paid to a participant",
)
def list_by_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving allowances", participant_id=participant_id):
        rows = allowance_services.list_allowances_by(db, allowance_models.Allowance.participant_fk, participant_id)
        return _read_list(rows)


@router.get(
    "/participant/{participant_id}/total",
    response_model=allowance_schemas.ParticipantAllowanceTotal,
    summary="Sum of a participant's allowances",
)
def total_by_participant(participant_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while calculating total allowances", participant_id=participant_id):
        total = allowance_services.total_for_participant(db, participant_id)
        return allowance_schemas.ParticipantAllowanceTotal(participant_id=participant_id, total=total)


@router.get(
    "/training/{training_id}",
    response_model=List[allowance_schemas.AllowanceRead],
    summary="Allowances for a training",
)
def list_by_training(training_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving allowances", training_id=training_id):
        rows = allowance_services.list_allowances_by(db, allowance_models.Allowance.training_fk, training_id)
        return _read_list(rows)


@router.get(
    "/status/{status_id}",
    response_model=List[allowance_schemas.AllowanceRead],
    summary="Allowances in a given status",
)
def list_by_status(status_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving allowances", status_id=status_id):
        rows = allowance_services.list_allowances_by(db, allowance_models.Allowance.status_fk, status_id)
        return _read_list(rows)


@router.get(
    "/type/{type_id}",
    response_model=List[allowance_schemas.AllowanceRead],
    summary="Allowances of a given type",
)
def list_by_type(type_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving allowances", type_id=type_id):
        rows = allowance_services.list_allowances_by(db, allowance_models.Allowance.allowance_type_fk, type_id)
        return _read_list(rows)


@router.get(
    "/date-range",
    response_model=List[allowance_schemas.AllowanceRead],
    summary="Allowances falling entirely inside a date range",
)
def list_in_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving allowances"):
        start_date, end_date = to_naive_utc(start_date), to_naive_utc(end_date)
        if end_date < start_date:
            raise _bad_request("End date must be after start date")
        rows = allowance_services.list_allowances_in_range(db, start_date, end_date)
        return _read_list(rows)


@router.get(
    "/{allowance_id}",
    response_model=allowance_schemas.AllowanceRead,
    summary="Get an allowance by id",
)
def get_allowance(allowance_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving the allowance", allowance_id=allowance_id):
        return allowance_services.to_read(_get_or_404(db, allowance_id))


# ---------------------------------------------------------------------------
# WRITES
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=allowance_schemas.AllowanceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record an allowance",
)
def create_allowance(
    payload: allowance_schemas.AllowanceCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while creating the allowance", db):
        _check_date_order(payload.start_date, payload.end_date)

        missing = allowance_services.missing_reference(
            db,
            participant_fk=payload.participant_fk,
            training_fk=payload.training_fk,
            allowance_type_fk=payload.allowance_type_fk,
            status_fk=payload.status_fk,
        )
        if missing:
            raise _bad_request(missing)

        allowance = allowance_models.Allowance(**payload.model_dump())
        allowance.stamp_created()
        db.add(allowance)
        db.commit()

        response.headers["Location"] = router.url_path_for("get_allowance", allowance_id=allowance.pk)
        return allowance_services.to_read(_get_or_404(db, allowance.pk))


@router.put(
    "/{allowance_id}",
    response_model=allowance_schemas.AllowanceRead,
    summary="Update an allowance (only supplied fields change)",
)
def update_allowance(
    allowance_id: int,
    payload: allowance_schemas.AllowanceUpdate,
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while updating the allowance", db, allowance_id=allowance_id):
        allowance = _get_or_404(db, allowance_id)

        update_data = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if "start_date" in update_data or "end_date" in update_data:
            _check_date_order(
                update_data.get("start_date", allowance.start_date),
                update_data.get("end_date", allowance.end_date),
            )

        missing = allowance_services.missing_reference(
            db,
            participant_fk=update_data.get("participant_fk"),
            training_fk=update_data.get("training_fk"),
            allowance_type_fk=update_data.get("allowance_type_fk"),
            status_fk=update_data.get("status_fk"),
        )
        if missing:
            raise _bad_request(missing)

        for field, value in update_data.items():
            setattr(allowance, field, value)
        allowance.stamp_updated()
        db.commit()

        db.expire(allowance)
        return allowance_services.to_read(_get_or_404(db, allowance_id))


@router.delete(
    "/{allowance_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete an allowance",
)
def delete_allowance(allowance_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while deleting the allowance", db, allowance_id=allowance_id):
        allowance = _get_or_404(db, allowance_id)
        allowance.soft_delete()
        db.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)
