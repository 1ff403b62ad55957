# course_enrollment/services/notifications.py
import logging

from sqlalchemy.orm import Session

from course_enrollment.models.enrollment import Enrollment
from course_enrollment.models.notification import Notification

logger = logging.getLogger(__name__)

ENROLLMENT_STATUS_CHANGED = "enrollment_status_changed"

def notify_enrollment_decision(db: Session, enrollment: Enrollment) -> Notification:
    """Queue the student's notification in the caller's transaction (no commit here)."""
    status = enrollment.status.value
    title = enrollment.course.title if enrollment.course else f"course #{enrollment.course_id}"
    note = Notification(
        user_id=enrollment.user_id,
        type=ENROLLMENT_STATUS_CHANGED,
        data={
            "status": status,
            "course": title,
            "message": f"Your enrollment request for {title} has been {status}.",
        },
    )
    db.add(note)
    logger.info("Notification queued for user=%s enrollment=%s status=%s", enrollment.user_id, enrollment.id, status)
    return note
