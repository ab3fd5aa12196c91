from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Any, Optional


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    title: str = Field(..., min_length=1, max_length=200)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str = Field(..., min_length=1, max_length=25)

    class Config:
        extra = "forbid"


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    A job can't move to another company and its id is assigned by the
    database, so only title, salary and equity are accepted.
    """
    title: str = Field(None, min_length=1, max_length=200)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

    class Config:
        extra = "forbid"


class JobFilter(BaseModel):
    """
    Optional search criteria for listing jobs.

    ``min_salary`` is kept as received and checked by the search builder.
    """
    title: Optional[str] = None
    min_salary: Any = None
    has_equity: Optional[bool] = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class JobSummary(BaseModel):
    """Job as listed on its company's detail page"""
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[str] = None


class JobResponse(JobSummary):
    """Schema for job response"""
    company_handle: str
