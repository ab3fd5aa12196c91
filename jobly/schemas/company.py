from pydantic import BaseModel, Field
from typing import Any, List, Optional

from jobly.schemas.job import JobSummary


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    handle: str = Field(..., min_length=1, max_length=25, pattern=r"^[a-z0-9-]+$")
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, max_length=2048, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyUpdateRequest(BaseModel):
    """
    Schema for a partial company update.

    Only fields the client actually sends are changed. The handle is not
    accepted here; it is fixed at creation.
    """
    name: str = Field(None, min_length=1)
    description: str = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, max_length=2048, alias="logoUrl")

    class Config:
        populate_by_name = True
        extra = "forbid"


class CompanyFilter(BaseModel):
    """
    Optional search criteria for listing companies.

    Employee bounds are kept as received; the search builder turns them
    into integers and rejects anything that is not one.
    """
    name: Optional[str] = None
    min_employees: Any = None
    max_employees: Any = None

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class CompanyResponse(BaseModel):
    """Schema for company response"""
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")

    class Config:
        populate_by_name = True


class CompanyDetailResponse(CompanyResponse):
    """Company together with the jobs it has posted"""
    jobs: List[JobSummary] = []
