from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    """Base class for all database models"""
    pass

# Largest value an INTEGER column holds (PostgreSQL int4)
INT_MAX = 2**31 - 1

# Import all models here for Alembic autogenerate
from models.company import Company
from models.job import Job

__all__ = ["Base", "INT_MAX", "Company", "Job"]
