from sqlalchemy.orm import Session
from sqlalchemy import select
from course_enrollment.core.enums import UserRole
from course_enrollment.crud.base import CRUDBase
from course_enrollment.models.user import User
from course_enrollment.schemas.user import RegisterIn

from course_enrollment.core.security_password import hash_password

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

class CRUDUser(CRUDBase[User]):
    def create(self, db: Session, obj_in: RegisterIn) -> User:
        data = obj_in.model_dump(exclude={"password", "password_confirmation"})
        data["email"] = normalize_email(data["email"])
        data["hashed_password"] = hash_password(obj_in.password)
        data.setdefault("role", UserRole.student)
        user = User(**data)
        db.add(user); db.commit(); db.refresh(user)
        return user

    def get_by_email(self, db: Session, email: str) -> User | None:
        return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()

user_crud = CRUDUser(User)
