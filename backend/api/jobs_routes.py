"""
API routes for job postings.

Endpoints:
- GET    /jobs             List jobs (filters: titleLike, minSalary, hasEquity)
- GET    /jobs/{job_id}    Get a job with its company
- POST   /jobs             Create a job (admin)
- PATCH  /jobs/{job_id}    Partially update a job (admin)
- DELETE /jobs/{job_id}    Delete a job (admin)

Service errors (ValidationError, NotFoundError, ConflictError) are turned
into responses by the handlers in main.py.
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from api.models import (
    JobCreate,
    JobDeletedResponse,
    JobDetailResponse,
    JobResponse,
    JobsListResponse,
    JobUpdate,
)
from auth.dependencies import ensure_admin
from db.session import get_db
from db.filters import parse_job_filter
from db.jobs_service import create_job, delete_job, get_job, list_jobs, update_job

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=JobsListResponse)
async def list_job_postings(
    request: Request,
    db: Session = Depends(get_db),
):
    """
    List jobs, optionally filtered.

    Query parameters (all optional, combined with AND):
    - titleLike: case-insensitive partial match on title
    - minSalary: salary >= minSalary
    - hasEquity: true -> only jobs with equity > 0

    Any other query parameter is a 400.
    Auth: none

    Example:
        GET /jobs?titleLike=engineer&hasEquity=true

        Response:
        {
            "jobs": [
                {"id": 7, "title": "Engineer", "salary": 120000, "equity": "0.02",
                 "companyHandle": "acme", "companyName": "Acme"}
            ]
        }
    """
    criteria = parse_job_filter(request.query_params)
    jobs = list_jobs(db, criteria)
    return JobsListResponse(jobs=jobs)


@router.get("/{job_id}", response_model=JobDetailResponse)
async def get_job_details(
    job_id: int,
    db: Session = Depends(get_db),
):
    """
    Get a job with its company summary.

    Auth: none
    """
    return JobDetailResponse(job=get_job(db, job_id))


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job_posting(
    request: JobCreate,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """
    Create a job.

    Body: {title, salary?, equity?, companyHandle}
    Auth: admin JWT required
    """
    job = create_job(
        db,
        title=request.title,
        company_handle=request.company_handle,
        salary=request.salary,
        equity=request.equity,
    )
    return JobResponse(job=job)


@router.patch("/{job_id}", response_model=JobResponse)
async def update_job_posting(
    job_id: int,
    request: JobUpdate,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """
    Partially update a job.

    Body: any of {title, salary, equity}; null clears salary/equity.
    An empty body is a 400.
    Auth: admin JWT required
    """
    # Only fields the client actually sent
    update_data = request.model_dump(exclude_unset=True, by_alias=True)
    job = update_job(db, job_id, update_data)
    return JobResponse(job=job)


@router.delete("/{job_id}", response_model=JobDeletedResponse)
async def delete_job_posting(
    job_id: int,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """Delete a job. Auth: admin JWT required"""
    delete_job(db, job_id)
    return JobDeletedResponse(deleted=job_id)
