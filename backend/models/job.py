from decimal import Decimal
from typing import TYPE_CHECKING
from sqlalchemy import Integer, Numeric, String, Text, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models import Base

if TYPE_CHECKING:
    from models.company import Company


class Job(Base):
    """
    Model for job postings.

    Unique constraint: (title, company_handle)
    Equity is a fixed-point fraction of the company, 0 <= equity <= 1.
    """
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    salary: Mapped[int] = mapped_column(Integer, nullable=True)
    equity: Mapped[Decimal] = mapped_column(Numeric(4, 3), nullable=True)

    company_handle: Mapped[str] = mapped_column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False
    )

    company: Mapped["Company"] = relationship(back_populates="jobs")

    __table_args__ = (
        UniqueConstraint("title", "company_handle", name="uq_job_title_company"),
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity >= 0 AND equity <= 1.0", name="ck_jobs_equity"),
    )

    @property
    def company_name(self) -> str:
        return self.company.name

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
