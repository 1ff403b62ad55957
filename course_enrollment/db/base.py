# course_enrollment/db/base.py
from course_enrollment.db.base_class import Base

# registers every table in Base.metadata (alembic, create_all)
import course_enrollment.models  # noqa: F401

__all__ = ["Base"]
