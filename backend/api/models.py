"""
Pydantic request/response models for the company and job endpoints.

JSON field names are camelCase (numEmployees, logoUrl, companyHandle);
Python attributes are snake_case and line up with the ORM models, so
responses are built with model_validate(orm_object).
"""
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from models import INT_MAX


def _format_equity(value: Decimal) -> str:
    # NUMERIC(4,3) comes back as e.g. 0.100; send "0.1"
    return str(value.normalize())


Equity = Annotated[Decimal, PlainSerializer(_format_equity, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    """Base: camelCase JSON, snake_case attributes."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Base for request bodies: unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Companies
# =============================================================================

class CompanyCreate(RequestModel):
    """Request for POST /companies."""
    handle: str = Field(min_length=1, max_length=25)
    name: str = Field(min_length=1)
    description: str
    num_employees: Optional[int] = Field(default=None, ge=0, le=INT_MAX)
    logo_url: Optional[str] = None


class CompanyUpdate(RequestModel):
    """Request for PATCH /companies/{handle}. handle cannot be changed."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(default=None, ge=0, le=INT_MAX)
    logo_url: Optional[str] = None

    @field_validator("name", "description")
    @classmethod
    def _not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class CompanyInfo(CamelModel):
    """Company summary (list items and job detail)."""
    handle: str
    name: str
    description: str
    num_employees: Optional[int]
    logo_url: Optional[str]


class CompanyJobInfo(CamelModel):
    """Job as listed under its company."""
    id: int
    title: str
    salary: Optional[int]
    equity: Optional[Equity]


class CompanyDetail(CompanyInfo):
    """Company with its jobs."""
    jobs: list[CompanyJobInfo]


class CompanyResponse(BaseModel):
    company: CompanyInfo


class CompanyDetailResponse(BaseModel):
    company: CompanyDetail


class CompaniesListResponse(BaseModel):
    """Response for GET /companies."""
    companies: list[CompanyInfo]


class CompanyDeletedResponse(BaseModel):
    deleted: str


# =============================================================================
# Jobs
# =============================================================================

class JobCreate(RequestModel):
    """Request for POST /jobs."""
    title: str = Field(min_length=1)
    salary: Optional[int] = Field(default=None, ge=0, le=INT_MAX)
    equity: Optional[Decimal] = Field(default=None, ge=0, le=1, max_digits=4, decimal_places=3)
    company_handle: str = Field(min_length=1, max_length=25)


class JobUpdate(RequestModel):
    """Request for PATCH /jobs/{job_id}. id and companyHandle cannot be changed."""
    title: Optional[str] = Field(default=None, min_length=1)
    salary: Optional[int] = Field(default=None, ge=0, le=INT_MAX)
    equity: Optional[Decimal] = Field(default=None, ge=0, le=1, max_digits=4, decimal_places=3)

    @field_validator("title")
    @classmethod
    def _not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class JobInfo(CamelModel):
    """Job as stored."""
    id: int
    title: str
    salary: Optional[int]
    equity: Optional[Equity]
    company_handle: str


class JobListItem(JobInfo):
    """Job in GET /jobs, with its company's name."""
    company_name: str


class JobDetail(CamelModel):
    """Job with its company summary."""
    id: int
    title: str
    salary: Optional[int]
    equity: Optional[Equity]
    company: CompanyInfo


class JobResponse(BaseModel):
    job: JobInfo


class JobDetailResponse(BaseModel):
    job: JobDetail


class JobsListResponse(BaseModel):
    """Response for GET /jobs."""
    jobs: list[JobListItem]


class JobDeletedResponse(BaseModel):
    deleted: int
