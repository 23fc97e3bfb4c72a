"""Endpoints for the authenticated user's own profile and statistics."""

from fastapi import APIRouter, Depends

from chatdesk.auth.dependencies import CurrentUser, get_current_user
from chatdesk.users import repository
from chatdesk.users.schemas import UpdateProfileRequest, UserProfile
from chatdesk.users.service import get_user_or_404, update_profile, user_stats

router = APIRouter(prefix="/api/v1/user", tags=["User"])


@router.get("/me", summary="Current user profile")
async def me(user: CurrentUser = Depends(get_current_user)):
    profile = UserProfile(**repository.public_view(get_user_or_404(user.id)))
    return {"status": "success", "data": profile.model_dump()}


@router.put("/profile", summary="Update profile", description="Change the display name and, when new_password is given, the password (the current password is required).")
async def update(body: UpdateProfileRequest, user: CurrentUser = Depends(get_current_user)):
    updated = update_profile(user.id, body.name, body.password, body.new_password)
    return {"status": "success", "data": {"message": "Profile updated", "user": updated}}


@router.get("/stats", summary="Activity statistics", description="Chat and message counts, hourly and weekday distributions, monthly chat creation and recent activity.")
async def stats(user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": user_stats(user.id)}
