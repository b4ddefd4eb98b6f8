# backend/tmsdb/apps/lookups/router.py

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import server_errors
from ...schemas import LookupRead
from . import schemas as lookup_schemas
from . import services as lookup_services

router = APIRouter(prefix="/api/lookup", tags=["lookup"])


@router.get("/departments", response_model=List[LookupRead], summary="Departments for dropdowns")
def get_departments(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving departments"):
        return lookup_services.list_departments(db, search_term)


@router.get("/facilities", response_model=List[LookupRead], summary="Facilities for dropdowns")
def get_facilities(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving facilities"):
        return lookup_services.list_facilities(db, search_term)


@router.get("/designations", response_model=List[LookupRead], summary="Designations for dropdowns")
def get_designations(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving designations"):
        return lookup_services.list_designations(db, search_term)


@router.get("/salary-scales", response_model=List[LookupRead], summary="Salary scales for dropdowns")
def get_salary_scales(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving salary scales"):
        return lookup_services.list_salary_scales(db, search_term)


@router.get("/sponsors", response_model=List[LookupRead], summary="Sponsors for dropdowns")
def get_sponsors(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving sponsors"):
        return lookup_services.list_sponsors(db, search_term)


@router.get("/allowance-types", response_model=List[LookupRead], summary="Allowance types for dropdowns")
def get_allowance_types(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving allowance types"):
        return lookup_services.list_allowance_types(db, search_term)


@router.get("/allowance-statuses", response_model=List[LookupRead], summary="Allowance statuses for dropdowns")
def get_allowance_statuses(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving allowance statuses"):
        return lookup_services.list_allowance_statuses(db, search_term)


@router.get("/all", response_model=lookup_schemas.LookupCatalog, summary="Every lookup list in one call")
def get_all(db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving lookup data"):
        return lookup_schemas.LookupCatalog(
            departments=lookup_services.list_departments(db),
            facilities=lookup_services.list_facilities(db),
            designations=lookup_services.list_designations(db),
            salary_scales=lookup_services.list_salary_scales(db),
            sponsors=lookup_services.list_sponsors(db),
            allowance_types=lookup_services.list_allowance_types(db),
            allowance_statuses=lookup_services.list_allowance_statuses(db),
        )
