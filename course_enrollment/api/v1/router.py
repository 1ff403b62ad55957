# course_enrollment/api/v1/router.py
from fastapi import APIRouter
from course_enrollment.api.v1 import (
    auth,
    courses,
    enrollments,
    notifications,
)

api_router = APIRouter()

# -------- public --------
api_router.include_router(auth.router, tags=["auth"])

# -------- bearer token --------
api_router.include_router(courses.router, tags=["courses"])
api_router.include_router(enrollments.router, tags=["enrollments"])
api_router.include_router(notifications.router, tags=["notifications"])
