# course_enrollment/api/v1/enrollments.py
from __future__ import annotations

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from course_enrollment.api.deps import get_db
from course_enrollment.core.rbac import require_admin, require_student
from course_enrollment.crud.course import course_crud
from course_enrollment.crud.enrollment import enrollment_crud, EnrollmentRejected
from course_enrollment.models.user import User
from course_enrollment.schemas.enrollment import Enrollment as EnrollmentOut, EnrollmentCreate
from course_enrollment.services.enrollment_workflow import TransitionNotAllowed

router = APIRouter()

@router.get("/enrollments", response_model=List[EnrollmentOut], dependencies=[Depends(require_admin)])
def list_enrollments(db: Session = Depends(get_db)):
    return enrollment_crud.list_all(db)

@router.get("/my-enrollments", response_model=List[EnrollmentOut])
def my_enrollments(db: Session = Depends(get_db), user: User = Depends(require_student)):
    return enrollment_crud.list_for_user(db, user.id)

@router.post("/enrollments", response_model=EnrollmentOut, status_code=status.HTTP_201_CREATED)
def request_enrollment(
    body: EnrollmentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_student),
):
    course = course_crud.get_with_sessions(db, body.course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    try:
        enr = enrollment_crud.request(db, user_id=user.id, course=course, body=body)
    except EnrollmentRejected as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return enrollment_crud.get_full(db, enr.id)

def _decide(enrollment_id: int, action: str, db: Session):
    enr = enrollment_crud.get_full(db, enrollment_id)
    if not enr:
        raise HTTPException(status_code=404, detail="Enrollment not found")
    try:
        enrollment_crud.decide(db, enr, action)
    except TransitionNotAllowed as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return enrollment_crud.get_full(db, enrollment_id)

@router.post("/enrollments/{enrollment_id}/approve", response_model=EnrollmentOut,
             dependencies=[Depends(require_admin)])
def approve_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    return _decide(enrollment_id, "approve", db)

@router.post("/enrollments/{enrollment_id}/reject", response_model=EnrollmentOut,
             dependencies=[Depends(require_admin)])
def reject_enrollment(enrollment_id: int, db: Session = Depends(get_db)):
    return _decide(enrollment_id, "reject", db)
