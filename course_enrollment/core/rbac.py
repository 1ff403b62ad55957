# course_enrollment/core/rbac.py
from fastapi import Depends, HTTPException, status
from course_enrollment.api.deps import get_current_user
from course_enrollment.core.enums import UserRole

ROLE_ADMIN = UserRole.admin.value
ROLE_STUDENT = UserRole.student.value

def require_roles(*roles: str):
    allowed = set(roles)
    for r in allowed:
        if r not in {ROLE_ADMIN, ROLE_STUDENT}:
            raise RuntimeError(f"Unknown role: {r}")
    def dep(user = Depends(get_current_user)):
        if user.role.value not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="This action is not allowed for your role.")
        return user
    return dep

require_admin = require_roles(ROLE_ADMIN)
require_student = require_roles(ROLE_STUDENT)
