from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload
from course_enrollment.crud.base import CRUDBase
from course_enrollment.models.course import Course
from course_enrollment.models.course_session import CourseSession
from course_enrollment.models.enrollment import Enrollment
from course_enrollment.schemas.course import CourseIn, SessionIn

def _new_session(item: SessionIn) -> CourseSession:
    return CourseSession(**item.model_dump(exclude={"id"}))

class CRUDCourse(CRUDBase[Course]):
    def get_with_sessions(self, db: Session, id: int) -> Optional[Course]:
        stmt = select(Course).options(selectinload(Course.sessions)).where(Course.id == id)
        return db.scalars(stmt).first()

    def list_with_sessions(self, db: Session) -> List[Course]:
        stmt = select(Course).options(selectinload(Course.sessions)).order_by(Course.id)
        return list(db.scalars(stmt).all())

    def create(self, db: Session, obj_in: CourseIn) -> Course:
        course = Course(**obj_in.model_dump(exclude={"sessions"}))
        course.sessions = [_new_session(s) for s in obj_in.sessions]
        db.add(course); db.commit(); db.refresh(course)
        return course

    def update(self, db: Session, db_obj: Course, obj_in: CourseIn) -> Course:
        """Apply the edit form: sessions matched by id are changed in place,
        the rest are added, and sessions left out are deleted."""
        for f, v in obj_in.model_dump(exclude={"sessions"}).items():
            setattr(db_obj, f, v)

        existing = {s.id: s for s in db_obj.sessions}
        kept: List[CourseSession] = []
        for item in obj_in.sessions:
            # unknown or repeated ids become new sessions
            current = existing.pop(item.id, None) if item.id is not None else None
            if current is None:
                kept.append(_new_session(item))
                continue
            for f, v in item.model_dump(exclude={"id"}).items():
                setattr(current, f, v)
            kept.append(current)

        if existing:
            # enrollments on a removed session fall back to "all sessions"
            db.execute(
                update(Enrollment)
                .where(Enrollment.course_id == db_obj.id, Enrollment.selected_session_id.in_(list(existing)))
                .values(selected_session_id=None)
            )
        db_obj.sessions = kept
        db.add(db_obj); db.commit(); db.refresh(db_obj)
        return db_obj

course_crud = CRUDCourse(Course)
