"""
Filter criteria for the company and job list endpoints.

A query string is parsed into one criteria record (JobFilter or
CompanyFilter). Each record can produce:
- clauses(): SQLAlchemy predicates, AND-combined by the caller's query
- matches(record): the same predicate evaluated in Python

Both forms select the same rows. Omitted filters impose no constraint.

Usage:
    criteria = parse_job_filter(request.query_params)
    jobs = db.query(Job).filter(*criteria.clauses()).all()
"""
from abc import abstractmethod
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import ColumnElement

from db.exceptions import ValidationError
from models import INT_MAX
from models.company import Company
from models.job import Job

# Escape character for LIKE patterns built from user input
LIKE_ESCAPE = "/"

T = TypeVar("T")
FilterT = TypeVar("FilterT", bound="ListFilter")


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def _contains(value: Optional[str], term: str) -> bool:
    return value is not None and term.lower() in value.lower()


def _at_least(value: Optional[Any], bound: int) -> bool:
    return value is not None and value >= bound


def _at_most(value: Optional[Any], bound: int) -> bool:
    return value is not None and value <= bound


def _as_decimal(value: Any) -> Optional[Decimal]:
    # Drivers hand back Decimal (psycopg2) or str/float depending on how the
    # row was produced; str() keeps floats from leaking binary rounding in
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class ListFilter(BaseModel):
    """
    Abstract base for list criteria: aliases are the accepted query-string
    keys. Subclasses supply clauses() and matches() over the same fields.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @classmethod
    def accepted_keys(cls) -> set[str]:
        return {field.alias or name for name, field in cls.model_fields.items()}

    @abstractmethod
    def clauses(self) -> list[ColumnElement[bool]]:
        """SQLAlchemy predicates for the store query."""

    @abstractmethod
    def matches(self, record: Any) -> bool:
        """The same predicate evaluated on one loaded record."""

    def apply(self, records: Iterable[T]) -> list[T]:
        """Filter already-loaded records in memory."""
        return [record for record in records if self.matches(record)]


class JobFilter(ListFilter):
    """
    Criteria for GET /jobs.

    - titleLike: case-insensitive substring of title
    - minSalary: salary >= minSalary
    - hasEquity: true -> equity > 0; false/absent -> no constraint
    """
    title_like: Optional[str] = Field(default=None, alias="titleLike")
    min_salary: Optional[int] = Field(default=None, alias="minSalary", ge=0, le=INT_MAX)
    has_equity: Optional[bool] = Field(default=None, alias="hasEquity")

    @field_validator("title_like")
    @classmethod
    def _blank_title_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    def clauses(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if self.title_like is not None:
            clauses.append(Job.title.ilike(f"%{escape_like(self.title_like)}%", escape=LIKE_ESCAPE))
        if self.min_salary is not None:
            clauses.append(Job.salary >= self.min_salary)
        if self.has_equity:
            clauses.append(Job.equity > 0)
        return clauses

    def matches(self, record: Any) -> bool:
        if self.title_like is not None and not _contains(record.title, self.title_like):
            return False
        if self.min_salary is not None and not _at_least(record.salary, self.min_salary):
            return False
        if self.has_equity:
            equity = _as_decimal(record.equity)
            if equity is None or equity <= 0:
                return False
        return True


class CompanyFilter(ListFilter):
    """
    Criteria for GET /companies.

    - nameLike: case-insensitive substring of name
    - minEmployees / maxEmployees: inclusive bounds on numEmployees
    """
    name_like: Optional[str] = Field(default=None, alias="nameLike")
    min_employees: Optional[int] = Field(default=None, alias="minEmployees", ge=0, le=INT_MAX)
    max_employees: Optional[int] = Field(default=None, alias="maxEmployees", ge=0, le=INT_MAX)

    @field_validator("name_like")
    @classmethod
    def _blank_name_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v if v and v.strip() else None

    @model_validator(mode="after")
    def _check_bounds(self) -> "CompanyFilter":
        if (
            self.min_employees is not None
            and self.max_employees is not None
            and self.min_employees > self.max_employees
        ):
            raise ValueError("minEmployees cannot be greater than maxEmployees")
        return self

    def clauses(self) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if self.name_like is not None:
            clauses.append(Company.name.ilike(f"%{escape_like(self.name_like)}%", escape=LIKE_ESCAPE))
        if self.min_employees is not None:
            clauses.append(Company.num_employees >= self.min_employees)
        if self.max_employees is not None:
            clauses.append(Company.num_employees <= self.max_employees)
        return clauses

    def matches(self, record: Any) -> bool:
        if self.name_like is not None and not _contains(record.name, self.name_like):
            return False
        if self.min_employees is not None and not _at_least(record.num_employees, self.min_employees):
            return False
        if self.max_employees is not None and not _at_most(record.num_employees, self.max_employees):
            return False
        return True


def _format_error(err: dict) -> str:
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def parse_filter(model: type[FilterT], query: Mapping[str, Any]) -> FilterT:
    """
    Validate a flat query mapping into a criteria record.

    Unknown keys are rejected before any value is looked at.

    Raises:
        ValidationError: Unknown key, unparseable value, or min > max
    """
    accepted = model.accepted_keys()
    unknown = sorted(set(query) - accepted)
    if unknown:
        raise ValidationError(
            f"Unrecognized filter: {', '.join(unknown)}",
            details={"allowed": sorted(accepted)},
        )

    try:
        return model.model_validate(dict(query))
    except PydanticValidationError as e:
        errors = [_format_error(err) for err in e.errors()]
        raise ValidationError("; ".join(errors), details={"errors": errors}) from e


def parse_job_filter(query: Mapping[str, Any]) -> JobFilter:
    return parse_filter(JobFilter, query)


def parse_company_filter(query: Mapping[str, Any]) -> CompanyFilter:
    return parse_filter(CompanyFilter, query)
