"""Admin endpoints: users, chats and dashboard statistics."""

from typing import Literal

from fastapi import APIRouter, Depends, Query

from chatdesk.admin import service
from chatdesk.admin.stats import dashboard_stats
from chatdesk.auth.dependencies import CurrentUser, require_admin

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"])

UserSort = Literal["created_at", "updated_at", "name", "email", "role"]


@router.get("/users", summary="List users", description="Search, sort and paginate users with their chat and message counts.")
async def list_users(
    search: str = "",
    sort: UserSort = "created_at",
    order: Literal["asc", "desc"] = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: CurrentUser = Depends(require_admin),
):
    return {"status": "success", "data": service.list_users(search, sort, order, page, limit)}


@router.get("/users/{user_id}", summary="User details", description="Profile, activity stats and the five most recently updated chats.")
async def get_user(user_id: str, admin: CurrentUser = Depends(require_admin)):
    return {"status": "success", "data": service.user_detail(user_id)}


@router.delete("/users/{user_id}", status_code=204, summary="Delete a user", description="Delete a non-admin user with all of their chats and messages.")
async def delete_user(user_id: str, admin: CurrentUser = Depends(require_admin)):
    service.delete_user(user_id, admin.id)


@router.get("/chats", summary="List all chats", description="Every chat, most recently updated first, with owner and message count.")
async def list_chats(admin: CurrentUser = Depends(require_admin)):
    return {"status": "success", "data": service.list_all_chats()}


@router.get("/chats/{chat_id}", summary="Chat details", description="A chat with its owner and full message history.")
async def get_chat(chat_id: str, admin: CurrentUser = Depends(require_admin)):
    return {"status": "success", "data": service.chat_detail(chat_id)}


@router.delete("/chats/{chat_id}", status_code=204, summary="Delete a chat")
async def delete_chat(chat_id: str, admin: CurrentUser = Depends(require_admin)):
    service.delete_chat(chat_id, admin.id)


@router.get("/stats", summary="Dashboard statistics", description="Totals, trends bucketed over the time range, messages by role and the most active users.")
async def stats(
    time_range: str = Query("week", description="day, week, month or year; anything else is treated as week"),
    admin: CurrentUser = Depends(require_admin),
):
    return {"status": "success", "data": dashboard_stats(time_range)}
