"""
Test suite for jobs service (create / get / list / update / delete).

Uses the seeded companies c1-c3 and jobs j1-j4 (see db_test_utils).

Run: pytest backend/db/__tests__/test_jobs_service.py -v
"""
import pytest
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from db.exceptions import ConflictError, NotFoundError, ValidationError
from db.filters import JobFilter
from db.jobs_service import (
    create_job,
    delete_job,
    find_jobs_by_title,
    get_job,
    list_jobs,
    update_job,
)
from models.job import Job


class TestCreateJob:
    """Test job creation."""

    def test_create(self, test_db, job_ids):
        job = create_job(
            test_db,
            title="New",
            company_handle="c1",
            salary=999999,
            equity=Decimal("0.1"),
        )

        assert job.id is not None
        assert job.id not in job_ids
        assert job.title == "New"
        assert job.salary == 999999
        assert job.equity == Decimal("0.1")
        assert job.company_handle == "c1"

    def test_create_minimal(self, test_db, job_ids):
        job = create_job(test_db, title="Minimal", company_handle="c2")

        assert job.salary is None
        assert job.equity is None

    def test_create_duplicate_fails(self, test_db, job_ids):
        """Same title + company twice is a conflict."""
        create_job(test_db, title="Twice", company_handle="c2")

        with pytest.raises(ConflictError, match="Duplicate job: Twice & c2"):
            create_job(test_db, title="Twice", company_handle="c2")

    def test_same_title_other_company_allowed(self, test_db, job_ids):
        job = create_job(test_db, title="j1", company_handle="c2")
        assert job.company_handle == "c2"

    def test_unknown_company_fails(self, test_db, job_ids):
        with pytest.raises(ValidationError, match="No company: nope"):
            create_job(test_db, title="Orphan", company_handle="nope")


class TestListJobs:
    """Test filtered listing."""

    def test_no_filter(self, test_db, job_ids):
        jobs = list_jobs(test_db)

        assert [job.id for job in jobs] == job_ids
        assert all(job.company_name == "C1" for job in jobs)

    def test_min_salary(self, test_db, job_ids):
        jobs = list_jobs(test_db, JobFilter(min_salary=999999))
        assert [job.title for job in jobs] == ["j1"]

    def test_has_equity(self, test_db, job_ids):
        jobs = list_jobs(test_db, JobFilter(has_equity=True))
        assert [job.title for job in jobs] == ["j1", "j2"]

    def test_min_salary_and_equity(self, test_db, job_ids):
        jobs = list_jobs(test_db, JobFilter(min_salary=999999, has_equity=True))
        assert [job.title for job in jobs] == ["j1"]

    def test_title(self, test_db, job_ids):
        jobs = list_jobs(test_db, JobFilter(title_like="j1"))
        assert [job.title for job in jobs] == ["j1"]

    def test_title_with_numeric_filters(self, test_db, job_ids):
        """Title narrowing combines with the other filters (no default minimum)."""
        jobs = list_jobs(test_db, JobFilter(title_like="J", has_equity=True))
        assert [job.title for job in jobs] == ["j1", "j2"]

    def test_no_match_is_empty(self, test_db, job_ids):
        assert list_jobs(test_db, JobFilter(title_like="nothing-like-this")) == []


class TestGetJob:
    """Test single job lookup."""

    def test_get_with_company(self, test_db, job_ids):
        job = get_job(test_db, job_ids[0])

        assert job.title == "j1"
        assert job.company.handle == "c1"
        assert job.company.name == "C1"
        assert job.company.num_employees == 1
        assert job.company.logo_url == "http://c1.img"

    def test_not_found(self, test_db, job_ids):
        with pytest.raises(NotFoundError):
            get_job(test_db, 0)


class TestFindJobsByTitle:
    """Test exact title lookup."""

    def test_found(self, test_db, job_ids):
        jobs = find_jobs_by_title(test_db, "J3")
        assert [job.id for job in jobs] == [job_ids[2]]

    def test_substring_is_not_a_match(self, test_db, job_ids):
        with pytest.raises(NotFoundError):
            find_jobs_by_title(test_db, "j")


class TestUpdateJob:
    """Test partial updates."""

    def test_update(self, test_db, job_ids):
        job = update_job(test_db, job_ids[0], {"title": "new job", "salary": 999999})

        assert job.id == job_ids[0]
        assert job.title == "new job"
        assert job.salary == 999999
        assert job.equity == Decimal("0.1")
        assert job.company_handle == "c1"

    def test_update_set_nulls(self, test_db, job_ids):
        """Explicit None clears the column; other columns are untouched."""
        job = update_job(test_db, job_ids[0], {"title": "New", "salary": None, "equity": None})

        assert job.title == "New"
        assert job.salary is None
        assert job.equity is None
        assert job.company_handle == "c1"

        stored = test_db.query(Job).filter(Job.id == job_ids[0]).one()
        assert (stored.title, stored.salary, stored.equity) == ("New", None, None)

    def test_update_equity_keeps_decimal(self, test_db, job_ids):
        job = update_job(test_db, job_ids[3], {"equity": Decimal("0.25")})

        assert isinstance(job.equity, Decimal)
        assert job.equity == Decimal("0.25")
        assert job.title == "j4"

    def test_update_only_touches_target(self, test_db, job_ids):
        update_job(test_db, job_ids[0], {"salary": 1})

        assert get_job(test_db, job_ids[1]).salary == 888888

    def test_not_found(self, test_db, job_ids):
        with pytest.raises(NotFoundError):
            update_job(test_db, 0, {"title": "X"})

    def test_no_data(self, test_db, job_ids):
        with pytest.raises(ValidationError, match="No data"):
            update_job(test_db, job_ids[0], {})

    def test_company_handle_not_updatable(self, test_db, job_ids):
        with pytest.raises(ValidationError, match="companyHandle"):
            update_job(test_db, job_ids[0], {"companyHandle": "c2"})

    def test_rename_to_existing_title(self, test_db, job_ids):
        with pytest.raises(ConflictError):
            update_job(test_db, job_ids[0], {"title": "j2"})

        assert get_job(test_db, job_ids[0]).title == "j1"

    def test_negative_equity_rejected_by_store(self, test_db, job_ids):
        """ck_jobs_equity holds equity between 0 and 1 even without request validation."""
        with pytest.raises(IntegrityError):
            update_job(test_db, job_ids[0], {"equity": Decimal("-0.5")})

        assert get_job(test_db, job_ids[0]).equity == Decimal("0.1")


class TestDeleteJob:
    """Test deletion."""

    def test_delete(self, test_db, job_ids):
        delete_job(test_db, job_ids[0])

        assert test_db.query(Job).filter(Job.id == job_ids[0]).first() is None

    def test_not_found(self, test_db, job_ids):
        with pytest.raises(NotFoundError):
            delete_job(test_db, 0)
