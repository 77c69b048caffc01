"""
API routes for companies.

Endpoints:
- GET    /companies            List companies (filters: nameLike, minEmployees, maxEmployees)
- GET    /companies/{handle}   Get a company with its jobs
- POST   /companies            Create a company (admin)
- PATCH  /companies/{handle}   Partially update a company (admin)
- DELETE /companies/{handle}   Delete a company and its jobs (admin)
"""

import logging
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from api.models import (
    CompaniesListResponse,
    CompanyCreate,
    CompanyDeletedResponse,
    CompanyDetailResponse,
    CompanyResponse,
    CompanyUpdate,
)
from auth.dependencies import ensure_admin
from db.session import get_db
from db.filters import parse_company_filter
from db.company_service import (
    create_company,
    delete_company,
    get_company,
    list_companies,
    update_company,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CompaniesListResponse)
async def list_all_companies(
    request: Request,
    db: Session = Depends(get_db),
):
    """
    List companies, optionally filtered.

    Query parameters (all optional, combined with AND):
    - nameLike: case-insensitive partial match on name
    - minEmployees / maxEmployees: inclusive head-count bounds
      (minEmployees > maxEmployees is a 400)

    Auth: none
    """
    criteria = parse_company_filter(request.query_params)
    companies = list_companies(db, criteria)
    return CompaniesListResponse(companies=companies)


@router.get("/{handle}", response_model=CompanyDetailResponse)
async def get_company_details(
    handle: str,
    db: Session = Depends(get_db),
):
    """
    Get a company and its jobs [{id, title, salary, equity}, ...].

    Auth: none
    """
    return CompanyDetailResponse(company=get_company(db, handle))


@router.post("", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_new_company(
    request: CompanyCreate,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """
    Create a company.

    Body: {handle, name, description, numEmployees?, logoUrl?}
    Auth: admin JWT required
    """
    company = create_company(db, **request.model_dump())
    return CompanyResponse(company=company)


@router.patch("/{handle}", response_model=CompanyResponse)
async def update_existing_company(
    handle: str,
    request: CompanyUpdate,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """
    Partially update a company.

    Body: any of {name, description, numEmployees, logoUrl}
    Auth: admin JWT required
    """
    update_data = request.model_dump(exclude_unset=True, by_alias=True)
    company = update_company(db, handle, update_data)
    return CompanyResponse(company=company)


@router.delete("/{handle}", response_model=CompanyDeletedResponse)
async def delete_existing_company(
    handle: str,
    current_user: dict = Depends(ensure_admin),
    db: Session = Depends(get_db),
):
    """Delete a company (its jobs go with it). Auth: admin JWT required"""
    delete_company(db, handle)
    return CompanyDeletedResponse(deleted=handle)
