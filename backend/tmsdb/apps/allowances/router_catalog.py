# backend/tmsdb/apps/allowances/router_catalog.py
"""
CRUD for the two name-keyed allowance catalogues.

AllowanceTypes and AllowanceStatuses behave identically apart from their
labels, field lengths and the shape of their `/lookup` response, so both
routers are built by `build_catalog_router`.
"""

import logging
from typing import List, Optional, Type

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import integrity_errors, server_errors
from ...schemas import LookupRead, PaginatedResponse, WireModel
from ..lookups.services import named_lookup
from . import models, schemas, services

logger = logging.getLogger(__name__)


def build_catalog_router(
    *,
    prefix: str,
    tag: str,
    model: services.NamedModel,
    label: str,
    create_schema: Type[WireModel],
    update_schema: Type[WireModel],
    lookup_returns_entities: bool = False,
) -> APIRouter:
    """
    `label` is the human name used in messages ("Allowance type").

    With `lookup_returns_entities` the `/lookup` endpoint serves the stored
    rows rather than the LookupDto projection; existing AllowanceTypes
    clients read that shape.
    """
    router = APIRouter(prefix=prefix, tags=[tag])
    plural = f"{label.lower()}s" if not label.endswith("s") else f"{label.lower()}es"

    def _get_or_404(db: Session, item_id: int):
        row = services.get_named(db, model, item_id)
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{label} with ID {item_id} not found",
            )
        return row

    def _duplicate_name(name: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{label} with name '{name}' already exists",
        )

    @router.get(
        "",
        response_model=PaginatedResponse[schemas.NamedLookupRead],
        summary=f"List {plural}",
    )
    def list_items(
        page: int = 1,
        page_size: int = Query(10, alias="pageSize"),
        search_term: Optional[str] = Query(None, alias="searchTerm"),
        db: Session = Depends(get_db),
    ):
        with server_errors(f"An error occurred while retrieving {plural}"):
            result = services.list_named(
                db,
                model,
                page=page,
                page_size=page_size,
                search_term=search_term,
            )
            data = [schemas.NamedLookupRead.model_validate(row) for row in result.items]
            return PaginatedResponse[schemas.NamedLookupRead](**result.envelope(data))

    if lookup_returns_entities:

        @router.get(
            "/lookup",
            response_model=List[schemas.NamedLookupEntity],
            summary=f"{label} rows for dropdowns",
        )
        def lookup(
            search_term: Optional[str] = Query(None, alias="searchTerm"),
            db: Session = Depends(get_db),
        ):
            with server_errors(f"An error occurred while retrieving {plural}"):
                rows = services.search_named(db, model, search_term)
                return [schemas.NamedLookupEntity.model_validate(row) for row in rows]

    else:

        @router.get(
            "/lookup",
            response_model=List[LookupRead],
            summary=f"{label} lookup list for dropdowns",
        )
        def lookup(
            search_term: Optional[str] = Query(None, alias="searchTerm"),
            db: Session = Depends(get_db),
        ):
            with server_errors(f"An error occurred while retrieving {plural}"):
                rows = services.search_named(db, model, search_term)
                return sorted((named_lookup(row) for row in rows), key=lambda item: item.name)

    @router.get(
        "/{item_id}",
        response_model=schemas.NamedLookupRead,
        summary=f"Get a {label.lower()} by id",
    )
    def get_item(item_id: int, db: Session = Depends(get_db)):
        with server_errors(f"An error occurred while retrieving the {label.lower()}"):
            return _get_or_404(db, item_id)

    @router.post(
        "",
        response_model=schemas.NamedLookupRead,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create a {label.lower()}",
    )
    def create_item(
        response: Response,
        payload: create_schema = Body(...),
        db: Session = Depends(get_db),
    ):
        with server_errors(f"An error occurred while creating the {label.lower()}", db):
            if not services.is_name_unique(db, model, payload.name):
                raise _duplicate_name(payload.name)

            row = model(name=payload.name.strip(), description=payload.description)
            row.stamp_created()
            db.add(row)
            with integrity_errors(db, f"{label} with name '{payload.name}' already exists"):
                db.commit()
            db.refresh(row)

            logger.info("Catalogue entry created", extra={"catalogue": label, "pk": row.pk, "item_name": row.name})
            response.headers["Location"] = router.url_path_for("get_item", item_id=row.pk)
            return row

    @router.put(
        "/{item_id}",
        response_model=schemas.NamedLookupRead,
        summary=f"Update a {label.lower()}",
    )
    def update_item(
        item_id: int,
        payload: update_schema = Body(...),
        db: Session = Depends(get_db),
    ):
        with server_errors(f"An error occurred while updating the {label.lower()}", db):
            row = _get_or_404(db, item_id)

            if payload.name is not None and payload.name.strip():
                if not services.is_name_unique(db, model, payload.name, exclude_id=row.pk):
                    raise _duplicate_name(payload.name)
                row.name = payload.name.strip()
            if payload.description is not None:
                row.description = payload.description
            row.stamp_updated()

            with integrity_errors(db, f"{label} with name '{payload.name}' already exists"):
                db.commit()
            db.refresh(row)
            return row

    @router.delete(
        "/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary=f"Soft-delete a {label.lower()} that no allowance uses",
    )
    def delete_item(item_id: int, db: Session = Depends(get_db)):
        with server_errors(f"An error occurred while deleting the {label.lower()}", db):
            row = _get_or_404(db, item_id)

            if services.has_allowances(db, model, row.pk):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Cannot delete {label.lower()} as it is being used by existing allowances",
                )

            row.soft_delete()
            db.commit()
            return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


allowance_types_router = build_catalog_router(
    prefix="/api/allowancetypes",
    tag="allowance-types",
    model=models.AllowanceType,
    label="Allowance type",
    create_schema=schemas.AllowanceTypeCreate,
    update_schema=schemas.AllowanceTypeUpdate,
    lookup_returns_entities=True,
)

allowance_statuses_router = build_catalog_router(
    prefix="/api/allowancestatuses",
    tag="allowance-statuses",
    model=models.AllowanceStatus,
    label="Allowance status",
    create_schema=schemas.AllowanceStatusCreate,
    update_schema=schemas.AllowanceStatusUpdate,
)
