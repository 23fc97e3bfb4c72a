"""Chat CRUD endpoints for the authenticated user."""

from fastapi import APIRouter, Depends

from chatdesk.auth.dependencies import CurrentUser, get_current_user
from chatdesk.chats.schemas import ChatListResponse, CreateChatRequest, RenameChatRequest
from chatdesk.chats.service import create_chat, delete_chat, get_chat, list_chats, rename_chat

router = APIRouter(prefix="/api/v1/chats", tags=["Chats"])


@router.get("", response_model=ChatListResponse, summary="List chats", description="List the authenticated user's chats, newest first, with message counts.")
async def list_all(user: CurrentUser = Depends(get_current_user)):
    return ChatListResponse(data=list_chats(user.id))


@router.post("", status_code=201, summary="Create a chat", description="Create a new chat. Limited by the max_chats_per_user setting.")
async def create(body: CreateChatRequest, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": create_chat(user, body.title)}


@router.get("/{chat_id}", summary="Get a chat", description="Retrieve a chat with its messages in chronological order.")
async def get(chat_id: str, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": get_chat(chat_id, user.id)}


@router.patch("/{chat_id}", summary="Rename a chat")
async def rename(chat_id: str, body: RenameChatRequest, user: CurrentUser = Depends(get_current_user)):
    return {"status": "success", "data": rename_chat(chat_id, user.id, body.title)}


@router.delete("/{chat_id}", status_code=204, summary="Delete a chat", description="Delete a chat and all of its messages.")
async def delete(chat_id: str, user: CurrentUser = Depends(get_current_user)):
    delete_chat(chat_id, user.id)
