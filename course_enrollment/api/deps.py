from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from course_enrollment.db.session import get_db
from course_enrollment.crud.user import user_crud
from course_enrollment.models.user import User
from course_enrollment.core.tokens import decode_access

# ----------------------------------------------------------------------
# Reads the Bearer from the Authorization header (no OAuth2PasswordBearer)
# ----------------------------------------------------------------------
def get_bearer_token(authorization: str = Header(None, alias="Authorization")) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Unauthenticated.")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")
    return parts[1]

# ----------------------------------------------------------------------
# Current user from the access token; a stale token for a deleted user is a 401
# ----------------------------------------------------------------------
def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    payload = decode_access(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = user_crud.get(db, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user

__all__ = ["get_db", "get_bearer_token", "get_current_user"]
