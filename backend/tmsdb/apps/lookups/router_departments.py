# backend/tmsdb/apps/lookups/router_departments.py

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import integrity_errors, server_errors
from ...models import not_deleted
from ...pagination import paginate, search_filter
from ...schemas import PaginatedResponse
from ...security import require_roles
from ..accounts import models as account_models
from ..accounts.models import RoleName
from . import models as lookup_models
from . import schemas as lookup_schemas
from . import services as lookup_services

router = APIRouter(prefix="/api/departments", tags=["departments"])

_require_reference_editor = require_roles(RoleName.ADMIN, RoleName.MANAGER)


def _get_or_404(db: Session, department_id: int) -> lookup_models.Department:
    department = lookup_services.get_department(db, department_id)
    if department is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Department with ID {department_id} not found",
        )
    return department


def _check_unique(
    db: Session,
    *,
    name: Optional[str],
    code: Optional[str],
    exclude_id: Optional[int] = None,
) -> None:
    if name and not lookup_services.is_department_name_unique(db, name, exclude_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with name '{name}' already exists",
        )
    if code and not lookup_services.is_department_code_unique(db, code, exclude_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Department with code '{code}' already exists",
        )


@router.get(
    "",
    response_model=PaginatedResponse[lookup_schemas.DepartmentRead],
    summary="List departments",
)
def list_departments(
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: Session = Depends(get_db),
):
    with server_errors("An error occurred while retrieving departments"):
        m = lookup_models.Department
        q = db.query(m).filter(not_deleted(m))
        clause = search_filter(search_term, m.name, m.code)
        if clause is not None:
            q = q.filter(clause)
        result = paginate(q.order_by(m.name.asc()), page, page_size)
        data = [lookup_schemas.DepartmentRead.model_validate(row) for row in result.items]
        return PaginatedResponse[lookup_schemas.DepartmentRead](**result.envelope(data))


@router.get(
    "/{department_id}",
    response_model=lookup_schemas.DepartmentRead,
    summary="Get a department by id",
)
def get_department(department_id: int, db: Session = Depends(get_db)):
    with server_errors("An error occurred while retrieving the department"):
        return _get_or_404(db, department_id)


@router.post(
    "",
    response_model=lookup_schemas.DepartmentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a department",
)
def create_department(
    payload: lookup_schemas.DepartmentCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(_require_reference_editor),
):
    with server_errors("An error occurred while creating the department", db):
        _check_unique(db, name=payload.name, code=payload.code)

        data = payload.model_dump()
        # Blank codes are stored as NULL so they never collide on the unique index.
        data["code"] = data["code"] or None
        department = lookup_models.Department(**data)
        department.stamp_created(current_user.full_name)
        db.add(department)
        with integrity_errors(db, f"Department with name '{payload.name}' already exists"):
            db.commit()
        db.refresh(department)

        response.headers["Location"] = router.url_path_for("get_department", department_id=department.pk)
        return department


@router.put(
    "/{department_id}",
    response_model=lookup_schemas.DepartmentRead,
    summary="Update a department (only supplied fields change)",
)
def update_department(
    department_id: int,
    payload: lookup_schemas.DepartmentUpdate,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(_require_reference_editor),
):
    with server_errors("An error occurred while updating the department", db):
        department = _get_or_404(db, department_id)

        update_data = {
            k: v
            for k, v in payload.model_dump(exclude_unset=True).items()
            if v is not None and v != ""
        }
        _check_unique(
            db,
            name=update_data.get("name"),
            code=update_data.get("code"),
            exclude_id=department.pk,
        )

        for field, value in update_data.items():
            setattr(department, field, value)
        department.stamp_updated(current_user.full_name)

        with integrity_errors(db, "Department name or code already exists"):
            db.commit()
        db.refresh(department)
        return department


@router.delete(
    "/{department_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete a department that has no enrollments",
)
def delete_department(
    department_id: int,
    db: Session = Depends(get_db),
    current_user: account_models.User = Depends(_require_reference_editor),
):
    with server_errors("An error occurred while deleting the department", db):
        department = _get_or_404(db, department_id)

        if lookup_services.department_has_enrollments(db, department.pk):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete department with existing enrollments",
            )

        department.soft_delete(current_user.full_name)
        db.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)
