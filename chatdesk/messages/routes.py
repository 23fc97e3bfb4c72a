"""Message endpoints: list, send, stream."""

from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import StreamingResponse

from chatdesk.auth.dependencies import CurrentUser, get_current_user
from chatdesk.chats.service import get_owned_chat
from chatdesk.messages import repository
from chatdesk.messages.schemas import MessageListResponse, SendMessageRequest
from chatdesk.messages.service import prepare_turn, send_message, stream_reply

router = APIRouter(prefix="/api/v1/chats/{chat_id}", tags=["Messages"])


@router.get("/messages", response_model=MessageListResponse, summary="List messages", description="Paginated messages of a chat in chronological order.")
async def list_messages(
    chat_id: str,
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    user: CurrentUser = Depends(get_current_user),
):
    get_owned_chat(chat_id, user.id)
    data, total = repository.list_page(chat_id, page, per_page)
    return MessageListResponse(data=data, page=page, per_page=per_page, total=total)


@router.post("/messages", summary="Send a message", description="Save the message, title the chat on its first message, and return the assistant reply.")
async def send(chat_id: str, body: SendMessageRequest, user: CurrentUser = Depends(get_current_user)):
    result = await send_message(chat_id, user, body.message, model=body.model)
    return {"status": "success", "data": result}


@router.post("/messages/stream", tags=["Streaming"], summary="Send a message (streaming)", description="Same as sending a message, but the reply is delivered as Server-Sent Events.")
async def stream(chat_id: str, body: SendMessageRequest, request: Request, user: CurrentUser = Depends(get_current_user)):
    # Checks and the user message happen before the response starts
    turn = await prepare_turn(chat_id, user, body.message, model=body.model)
    return StreamingResponse(
        stream_reply(turn, request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive", "X-Accel-Buffering": "no"},
    )
