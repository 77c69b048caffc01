"""Company model. Natural key: handle."""
from typing import TYPE_CHECKING
from sqlalchemy import Integer, String, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from models import Base

if TYPE_CHECKING:
    from models.job import Job


class Company(Base):
    """
    Model for companies posting jobs.

    Schema matches migration: 3c1d9a7e5b20_companies.py
    """
    __tablename__ = "companies"

    handle: Mapped[str] = mapped_column(String(25), primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    num_employees: Mapped[int] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    logo_url: Mapped[str] = mapped_column(Text, nullable=True)

    # Jobs are removed by the database (ON DELETE CASCADE), not by the ORM
    jobs: Mapped[list["Job"]] = relationship(
        back_populates="company",
        order_by="Job.id",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="ck_companies_num_employees"),
    )

    def __repr__(self) -> str:
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
