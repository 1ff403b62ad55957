# course_enrollment/schemas/user.py
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field

from course_enrollment.core.enums import UserRole

class LoginIn(BaseModel):
    email: EmailStr
    password: str

class RegisterIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str
    password_confirmation: str

class UserOut(BaseModel):
    id: int
    name: str
    email: str          # not EmailStr: seeded admin addresses are not re-validated on the way out
    role: UserRole
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class AuthResponse(BaseModel):
    message: str
    user: UserOut
    token: str
