import logging
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select
from course_enrollment.core.config import settings
from course_enrollment.crud.base import CRUDBase
from course_enrollment.models.course import Course
from course_enrollment.models.enrollment import Enrollment
from course_enrollment.schemas.enrollment import EnrollmentCreate
from course_enrollment.services import enrollment_workflow as workflow
from course_enrollment.services.notifications import notify_enrollment_decision

logger = logging.getLogger(__name__)

class EnrollmentRejected(ValueError):
    """A request the server refuses with 400; the message goes back to the student."""

def _with_relations(stmt):
    return stmt.options(
        selectinload(Enrollment.course).selectinload(Course.sessions),
        selectinload(Enrollment.user),
    )

class CRUDEnrollment(CRUDBase[Enrollment]):
    def list_all(self, db: Session) -> List[Enrollment]:
        return list(db.scalars(_with_relations(select(Enrollment)).order_by(Enrollment.id.desc())).all())

    def list_for_user(self, db: Session, user_id: int) -> List[Enrollment]:
        stmt = _with_relations(select(Enrollment)).where(Enrollment.user_id == user_id).order_by(Enrollment.id.desc())
        return list(db.scalars(stmt).all())

    def request(self, db: Session, *, user_id: int, course: Course, body: EnrollmentCreate) -> Enrollment:
        mine = db.scalars(select(Enrollment).where(Enrollment.user_id == user_id)).all()

        cap = settings.MAX_ACTIVE_ENROLLMENTS
        if workflow.count_active(mine) >= cap:
            raise EnrollmentRejected(f"You can only enroll in a maximum of {cap} courses.")
        if any(e.course_id == course.id and workflow.is_active(e.status) for e in mine):
            raise EnrollmentRejected("You already have an enrollment request for this course.")

        error = workflow.selection_error(
            start=course.start_date,
            end=course.end_date,
            session_ids=[s.id for s in course.sessions],
            selected_date=body.selected_date,
            selected_session_id=body.selected_session_id,
            date_required=False,
        )
        if error:
            raise EnrollmentRejected(error)

        enr = Enrollment(
            user_id=user_id,
            course_id=course.id,
            selected_date=body.selected_date,
            selected_session_id=body.selected_session_id,
        )
        db.add(enr); db.commit(); db.refresh(enr)
        logger.info("Created enrollment id=%s user=%s course=%s status=pending", enr.id, user_id, course.id)
        return enr

    def decide(self, db: Session, enr: Enrollment, action: str) -> Enrollment:
        """Apply approve/reject; raises ``TransitionNotAllowed`` on a terminal enrollment."""
        enr.status = workflow.transition(enr.status, action)
        notify_enrollment_decision(db, enr)
        db.add(enr); db.commit(); db.refresh(enr)
        logger.info("Enrollment id=%s %s", enr.id, enr.status.value)
        return enr

    def get_full(self, db: Session, id: int) -> Optional[Enrollment]:
        return db.scalars(_with_relations(select(Enrollment)).where(Enrollment.id == id)).first()

enrollment_crud = CRUDEnrollment(Enrollment)
