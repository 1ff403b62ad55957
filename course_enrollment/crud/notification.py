from typing import List
from sqlalchemy import select
from sqlalchemy.orm import Session
from course_enrollment.crud.base import CRUDBase
from course_enrollment.models.notification import Notification

class CRUDNotification(CRUDBase[Notification]):
    def list_for_user(self, db: Session, user_id: int) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id).order_by(Notification.created_at.desc())
        return list(db.scalars(stmt).all())

notification_crud = CRUDNotification(Notification)
