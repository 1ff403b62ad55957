# course_enrollment/api/v1/auth.py
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from course_enrollment.api.deps import get_db
from course_enrollment.core.tokens import create_access_token
from course_enrollment.core.security_password import password_policy_error, verify_and_maybe_upgrade
from course_enrollment.crud.user import user_crud
from course_enrollment.models.user import User
from course_enrollment.schemas.user import AuthResponse, LoginIn, RegisterIn, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- helpers ----------
def _auth_response(user: User, message: str) -> AuthResponse:
    token = create_access_token(sub=user.id, role=user.role.value)
    return AuthResponse(message=message, user=UserOut.model_validate(user), token=token)

# ---------- endpoints ----------
@router.post("/login", response_model=AuthResponse)
def login(body: LoginIn, db: Session = Depends(get_db)):
    user = user_crud.get_by_email(db, body.email)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    ok, new_hash = verify_and_maybe_upgrade(body.password, user.hashed_password)
    if not ok:
        raise HTTPException(status_code=401, detail="Invalid credentials.")
    if new_hash:
        user.hashed_password = new_hash
        db.add(user); db.commit(); db.refresh(user)

    logger.info("User id=%s logged in", user.id)
    return _auth_response(user, "Login successful")

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterIn, db: Session = Depends(get_db)):
    problem = password_policy_error(body.password, body.password_confirmation)
    if problem:
        raise HTTPException(status_code=400, detail=problem)
    if user_crud.get_by_email(db, body.email):
        raise HTTPException(status_code=400, detail="The email has already been taken.")

    # self-registration always yields a student; admins are seeded
    user = user_crud.create(db, body)
    logger.info("Registered student id=%s", user.id)
    return _auth_response(user, "Registration successful")
