import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from course_enrollment.api.deps import get_db, get_current_user
from course_enrollment.core.rbac import require_admin
from course_enrollment.crud.course import course_crud
from course_enrollment.schemas.course import Course, CourseIn

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/courses", response_model=List[Course])
def list_courses(db: Session = Depends(get_db), _=Depends(get_current_user)):
    return course_crud.list_with_sessions(db)

@router.post("/courses", response_model=Course, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
def create_course(body: CourseIn, db: Session = Depends(get_db)):
    c = course_crud.create(db, body)
    logger.info("Created course id=%s sessions=%s", c.id, len(c.sessions))
    return c

@router.put("/courses/{course_id}", response_model=Course, dependencies=[Depends(require_admin)])
def update_course(course_id: int, body: CourseIn, db: Session = Depends(get_db)):
    c = course_crud.get_with_sessions(db, course_id)
    if not c:
        raise HTTPException(status_code=404, detail="Course not found")
    c = course_crud.update(db, c, body)
    logger.info("Updated course id=%s sessions=%s", c.id, len(c.sessions))
    return c

@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(require_admin)])
def delete_course(course_id: int, db: Session = Depends(get_db)):
    # sessions and enrollments of the course go with it (ORM cascade)
    if not course_crud.remove(db, course_id):
        raise HTTPException(status_code=404, detail="Course not found")
    logger.info("Deleted course id=%s", course_id)
    return None  # 204
