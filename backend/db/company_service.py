"""Company service layer - CRUD and filtered listing for companies."""
import logging
from typing import Any, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from db.exceptions import ConflictError, NotFoundError, ValidationError
from db.filters import CompanyFilter
from db.sql import execute_positional, sql_for_partial_update, is_unique_violation
from models.company import Company

logger = logging.getLogger(__name__)

# External (API) field name -> column name, where they differ
COMPANY_FIELD_MAP: Mapping[str, str] = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

# handle is the natural key and cannot be changed
COMPANY_UPDATABLE_FIELDS = frozenset({"name", "description", "numEmployees", "logoUrl"})


def create_company(
    db: Session,
    handle: str,
    name: str,
    description: str,
    num_employees: Optional[int] = None,
    logo_url: Optional[str] = None,
) -> Company:
    """
    Create a company.

    Args:
        db: Database session
        handle: Unique company handle (natural key)
        name: Display name (unique)
        description: Company description
        num_employees: Head count (optional)
        logo_url: Logo URL (optional)

    Returns:
        Created Company

    Raises:
        ConflictError: If a company with this handle or name already exists
    """
    if db.get(Company, handle) is not None:
        raise ConflictError(f"Duplicate company: {handle}")

    company = Company(
        handle=handle,
        name=name,
        description=description,
        num_employees=num_employees,
        logo_url=logo_url,
    )
    db.add(company)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(f"Duplicate company: {handle}") from e
        raise

    db.refresh(company)
    logger.info(f"Created company {handle}")
    return company


def list_companies(db: Session, criteria: Optional[CompanyFilter] = None) -> list[Company]:
    """
    List companies ordered by name, optionally filtered.

    An empty result is not an error.
    """
    query = db.query(Company)
    if criteria is not None:
        query = query.filter(*criteria.clauses())
    return query.order_by(Company.name).all()


def get_company(db: Session, handle: str) -> Company:
    """
    Get a company with its jobs loaded (ordered by job id).

    Raises:
        NotFoundError: If no company has this handle
    """
    company = db.query(Company).options(
        selectinload(Company.jobs)
    ).filter(
        Company.handle == handle
    ).first()

    if not company:
        raise NotFoundError(f"No company: {handle}")

    return company


def find_companies_by_name(db: Session, name: str) -> list[Company]:
    """
    Exact (case-insensitive) name lookup.

    Raises:
        NotFoundError: If nothing matches
    """
    companies = db.query(Company).filter(
        func.lower(Company.name) == name.lower()
    ).order_by(Company.handle).all()

    if not companies:
        raise NotFoundError(f"No company named: {name}")

    return companies


def update_company(db: Session, handle: str, data: Mapping[str, Any]) -> Company:
    """
    Partially update a company.

    Only keys present in data are written; a key with value None clears the
    column.

    Args:
        db: Database session
        handle: Company handle
        data: Fields to change, API names: {name, description, numEmployees, logoUrl}

    Returns:
        Updated Company

    Raises:
        ValidationError: If data is empty or names a field that can't be updated
        NotFoundError: If no company has this handle
        ConflictError: If the new name belongs to another company
    """
    update = sql_for_partial_update(data, COMPANY_FIELD_MAP)

    unknown = sorted(set(data) - COMPANY_UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update company fields: {', '.join(unknown)}")

    handle_idx = len(update.values) + 1
    statement = f"UPDATE companies SET {update.set_cols} WHERE handle = ${handle_idx}"

    columns = Company.__table__.c
    types = [columns[name].type for name in update.columns] + [columns.handle.type]
    try:
        result = execute_positional(db, statement, [*update.values, handle], types)
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(f"Duplicate company name: {data.get('name')}") from e
        raise

    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {', '.join(data)}")

    return get_company(db, handle)


def delete_company(db: Session, handle: str) -> None:
    """
    Delete a company. Its jobs are removed by the foreign key cascade.

    Raises:
        NotFoundError: If no company has this handle
    """
    deleted_count = db.query(Company).filter(
        Company.handle == handle
    ).delete(synchronize_session=False)

    if deleted_count == 0:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
