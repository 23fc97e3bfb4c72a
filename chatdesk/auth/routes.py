"""Auth endpoints: register, login, refresh, logout."""

import hashlib
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr, Field

from chatdesk.auth.dependencies import CurrentUser, get_current_user
from chatdesk.auth.jwt import create_access_token, create_refresh_token, verify_token
from chatdesk.auth.passwords import hash_password, verify_password
from chatdesk.db.client import get_supabase
from chatdesk.db.models import REFRESH_TOKENS, ROLE_MEMBER
from chatdesk.runtime_settings import store
from chatdesk.users import repository as users

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# --- Request / Response schemas ---

class RegisterRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    email: EmailStr
    password: str = Field(min_length=1)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class RefreshRequest(BaseModel):
    refresh_token: str

class TokenResponse(BaseModel):
    status: str = "success"
    data: dict


# --- Helpers ---

def _hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _epoch_to_iso(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat()


def _issue_tokens(user: dict) -> dict:
    tokens = {
        "access_token": create_access_token(user["id"], user["email"], user.get("role") or ROLE_MEMBER),
        "refresh_token": create_refresh_token(user["id"]),
        "token_type": "bearer",
    }

    # Store refresh token hash
    db = get_supabase()
    db.table(REFRESH_TOKENS).insert({
        "user_id": user["id"],
        "token_hash": _hash_refresh_token(tokens["refresh_token"]),
        "expires_at": _epoch_to_iso(verify_token(tokens["refresh_token"])["exp"]),
    }).execute()

    return tokens


# --- Endpoints ---

@router.post("/register", status_code=201, response_model=TokenResponse, summary="Register a new user", description="Create a new user account and return JWT tokens. Disabled when the allow_registrations setting is false.")
async def register(body: RegisterRequest):
    if not store.get_bool(store.ALLOW_REGISTRATIONS):
        raise HTTPException(status_code=403, detail="Registrations are disabled")

    if users.get_by_email(body.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    user = users.create({
        "name": body.name,
        "email": body.email,
        "password_hash": hash_password(body.password),
        "role": ROLE_MEMBER,
    })

    return TokenResponse(data=_issue_tokens(user))


@router.post("/login", response_model=TokenResponse, summary="Login", description="Authenticate with email and password, returns JWT access and refresh tokens.")
async def login(body: LoginRequest):
    user = users.get_by_email(body.email)
    if not user or not verify_password(body.password, user.get("password_hash")):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return TokenResponse(data=_issue_tokens(user))


@router.post("/refresh", response_model=TokenResponse, summary="Refresh access token", description="Exchange a valid refresh token for a new token pair. Old refresh token is revoked.")
async def refresh(body: RefreshRequest):
    # Verify the refresh token JWT
    try:
        payload = verify_token(body.refresh_token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")

    if payload.get("type") != "refresh":
        raise HTTPException(status_code=401, detail="Invalid token type")

    db = get_supabase()
    token_hash = _hash_refresh_token(body.refresh_token)

    # Check refresh token in DB
    stored = db.table(REFRESH_TOKENS).select("id, is_revoked").eq("token_hash", token_hash).execute()
    if not stored.data or stored.data[0]["is_revoked"]:
        raise HTTPException(status_code=401, detail="Refresh token revoked or not found")

    # Revoke old refresh token
    db.table(REFRESH_TOKENS).update({"is_revoked": True}).eq("id", stored.data[0]["id"]).execute()

    user = users.get_by_id(payload["sub"])
    if not user:
        raise HTTPException(status_code=401, detail="User no longer exists")

    return TokenResponse(data=_issue_tokens(user))


@router.post("/logout", summary="Logout", description="Revoke the refresh token. Requires a valid access token.")
async def logout(body: RefreshRequest, user: CurrentUser = Depends(get_current_user)):
    db = get_supabase()
    token_hash = _hash_refresh_token(body.refresh_token)

    db.table(REFRESH_TOKENS).update({"is_revoked": True}).eq("token_hash", token_hash).eq("user_id", user.id).execute()

    return {"status": "success", "data": {"message": "Logged out successfully"}}
