from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.exceptions import BadRequestError, ConflictError, NotFoundError
from jobly.crud import job as job_crud
from jobly.schemas.job import JobCreateRequest, JobFilter, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db)
):
    """
    Create a new job at an existing company.

    Returns 400 if the company doesn't exist or already lists a job with
    this title.
    """
    try:
        return job_crud.create(db, request)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[str] = Query(None, alias="minSalary"),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    db: Session = Depends(get_db)
):
    """
    List jobs, ordered by salary.

    Args:
        title: Case-insensitive substring of the job title
        minSalary: Salary strictly above this amount
        hasEquity: If true, only jobs offering non-zero equity
    """
    filters = JobFilter(title=title, min_salary=min_salary, has_equity=has_equity)
    if filters.is_empty():
        return job_crud.find_all(db)

    try:
        return job_crud.filter(db, filters)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.
    """
    try:
        return job_crud.get(db, job_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db)
):
    """
    Partially update a job's title, salary or equity.
    """
    data = request.model_dump(exclude_unset=True)

    try:
        return job_crud.update(db, job_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except BadRequestError as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: int, db: Session = Depends(get_db)):
    """
    Delete a job by ID.
    """
    try:
        job_crud.remove(db, job_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return None
