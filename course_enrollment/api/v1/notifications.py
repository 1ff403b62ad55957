from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from course_enrollment.api.deps import get_db
from course_enrollment.core.rbac import require_student
from course_enrollment.crud.notification import notification_crud
from course_enrollment.schemas.notification import Notification

router = APIRouter()

@router.get("/notifications", response_model=List[Notification])
def list_notifications(db: Session = Depends(get_db), user=Depends(require_student)):
    return notification_crud.list_for_user(db, user.id)
