from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.exceptions import BadRequestError, ConflictError, NotFoundError
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailResponse,
    CompanyFilter,
    CompanyResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new company.

    Returns 400 if the handle is already taken, 409 if the insert raced
    another request for the same handle or name.
    """
    try:
        return company_crud.create(db, request)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/", response_model=List[CompanyResponse])
def list_companies(
    name: Optional[str] = None,
    min_employees: Optional[str] = Query(None, alias="minEmployees"),
    max_employees: Optional[str] = Query(None, alias="maxEmployees"),
    db: Session = Depends(get_db)
):
    """
    List companies, ordered by name.

    Args:
        name: Case-insensitive substring of the company name
        minEmployees: At least this many employees
        maxEmployees: At most this many employees
    """
    filters = CompanyFilter(
        name=name,
        min_employees=min_employees,
        max_employees=max_employees
    )
    if filters.is_empty():
        return company_crud.find_all(db)

    try:
        return company_crud.filter(db, filters)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company and its jobs.
    """
    try:
        return company_crud.get(db, handle)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a company. Only the fields sent are changed.
    """
    data = request.model_dump(exclude_unset=True, by_alias=True)

    try:
        return company_crud.update(db, handle, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/{handle}", status_code=204)
def delete_company(handle: str, db: Session = Depends(get_db)):
    """
    Delete a company and, through the foreign key, its jobs.
    """
    try:
        company_crud.remove(db, handle)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return None
