"""Auth dependencies for FastAPI route injection."""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request

from chatdesk.auth.jwt import verify_token
from chatdesk.db.models import ROLE_ADMIN, ROLE_MEMBER
from chatdesk.users import repository as users


@dataclass
class CurrentUser:
    id: str
    email: str
    role: str = ROLE_MEMBER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def extract_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth[7:]
    return None


async def get_current_user(request: Request) -> CurrentUser:
    """FastAPI dependency: authenticate via Bearer JWT."""
    token = extract_bearer_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing authentication credentials")

    try:
        payload = verify_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if payload.get("type") != "access":
        raise HTTPException(status_code=401, detail="Invalid token type")

    request.state.user_id = payload["sub"]
    return CurrentUser(
        id=payload["sub"],
        email=payload.get("email", ""),
        role=payload.get("role", ROLE_MEMBER),
    )


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency: the caller's stored role must be admin.

    The role is read from the database rather than the token, so a demotion
    takes effect before the access token expires.
    """
    row = users.get_by_id(user.id)
    if not row or row.get("role") != ROLE_ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return CurrentUser(id=row["id"], email=row["email"], role=ROLE_ADMIN)
