"""
Database service functions for job records.

Provides create / get / list / update / delete for jobs. Listing takes a
JobFilter (see db/filters.py); partial updates go through
sql_for_partial_update (see db/sql.py).
"""

import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from db.exceptions import ConflictError, NotFoundError, ValidationError
from db.filters import JobFilter
from db.sql import execute_positional, sql_for_partial_update, is_unique_violation
from models.company import Company
from models.job import Job

logger = logging.getLogger(__name__)

# External (API) field name -> column name, where they differ
JOB_FIELD_MAP: Mapping[str, str] = {
    "companyHandle": "company_handle",
}

# id and companyHandle identify the job and cannot be changed
JOB_UPDATABLE_FIELDS = frozenset({"title", "salary", "equity"})


def create_job(
    db: Session,
    title: str,
    company_handle: str,
    salary: Optional[int] = None,
    equity: Optional[Decimal] = None,
) -> Job:
    """
    Create a job posting for an existing company.

    Args:
        db: Database session
        title: Job title
        company_handle: Owning company's handle
        salary: Yearly salary (optional)
        equity: Equity fraction 0..1 (optional)

    Returns:
        Created Job with its generated id

    Raises:
        ValidationError: If the company does not exist
        ConflictError: If the company already has a job with this title
    """
    if db.get(Company, company_handle) is None:
        raise ValidationError(f"No company: {company_handle}")

    duplicate = db.query(Job).filter(
        Job.title == title,
        Job.company_handle == company_handle,
    ).first()

    if duplicate:
        raise ConflictError(f"Duplicate job: {title} & {company_handle}")

    job = Job(
        title=title,
        salary=salary,
        equity=equity,
        company_handle=company_handle,
    )
    db.add(job)

    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same title+company
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(f"Duplicate job: {title} & {company_handle}") from e
        raise

    db.refresh(job)
    logger.info(f"Created job {job.id} ({title}) for {company_handle}")
    return job


def list_jobs(db: Session, criteria: Optional[JobFilter] = None) -> list[Job]:
    """
    List jobs ordered by title, optionally filtered.

    All filters run in one query. The owning company is loaded with each job
    (for companyName). An empty result is not an error.
    """
    query = db.query(Job).options(joinedload(Job.company))
    if criteria is not None:
        query = query.filter(*criteria.clauses())
    return query.order_by(Job.title, Job.id).all()


def get_job(db: Session, job_id: int) -> Job:
    """
    Get a job with its company loaded.

    Raises:
        NotFoundError: If no job has this id
    """
    job = db.query(Job).options(
        joinedload(Job.company)
    ).filter(
        Job.id == job_id
    ).first()

    if not job:
        raise NotFoundError(f"No job with id: {job_id}")

    return job


def find_jobs_by_title(db: Session, title: str) -> list[Job]:
    """
    Exact (case-insensitive) title lookup across companies.

    Unlike list_jobs, zero matches is an error here.

    Raises:
        NotFoundError: If nothing matches
    """
    jobs = db.query(Job).filter(
        func.lower(Job.title) == title.lower()
    ).order_by(Job.id).all()

    if not jobs:
        raise NotFoundError(f"No job titled: {title}")

    return jobs


def update_job(db: Session, job_id: int, data: Mapping[str, Any]) -> Job:
    """
    Partially update a job.

    Only keys present in data are written; a key with value None clears the
    column. Values are passed through as given (equity stays a Decimal).

    Args:
        db: Database session
        job_id: Job ID
        data: Fields to change, API names: {title, salary, equity}

    Returns:
        Updated Job

    Raises:
        ValidationError: If data is empty or names a field that can't be updated
        NotFoundError: If no job has this id
        ConflictError: If the new title is already used by a job at the same company
    """
    update = sql_for_partial_update(data, JOB_FIELD_MAP)

    unknown = sorted(set(data) - JOB_UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update job fields: {', '.join(unknown)}")

    id_idx = len(update.values) + 1
    statement = f"UPDATE jobs SET {update.set_cols} WHERE id = ${id_idx}"

    columns = Job.__table__.c
    types = [columns[name].type for name in update.columns] + [columns.id.type]
    try:
        result = execute_positional(db, statement, [*update.values, job_id], types)
    except IntegrityError as e:
        db.rollback()
        if is_unique_violation(e):
            raise ConflictError(f"Duplicate job: {data.get('title')}") from e
        raise

    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {', '.join(data)}")

    return get_job(db, job_id)


def delete_job(db: Session, job_id: int) -> None:
    """
    Delete a job.

    Raises:
        NotFoundError: If no job has this id
    """
    deleted_count = db.query(Job).filter(
        Job.id == job_id
    ).delete(synchronize_session=False)

    if deleted_count == 0:
        db.rollback()
        raise NotFoundError(f"No job with id: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
