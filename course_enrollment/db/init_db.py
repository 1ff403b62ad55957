# course_enrollment/db/init_db.py
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from course_enrollment.core.config import settings
from course_enrollment.core.enums import UserRole
from course_enrollment.core.security_password import hash_password
from course_enrollment.crud.user import normalize_email
from course_enrollment.models.user import User

logger = logging.getLogger(__name__)

def init_db(db: Session) -> User:
    """Seed the administrator account; safe to run on every startup."""
    email = normalize_email(settings.ADMIN_EMAIL)
    admin = db.scalar(select(User).where(User.email == email))
    if not admin:
        admin = User(
            name=settings.ADMIN_NAME,
            email=email,
            hashed_password=hash_password(settings.ADMIN_PASSWORD),
            role=UserRole.admin,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info("Seeded admin account %s", email)
    return admin
