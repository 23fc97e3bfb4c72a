"""Send-message flow: persist the turn, title new chats, call the LLM."""

import logging
import time
import uuid
from collections.abc import AsyncGenerator
from dataclasses import dataclass

from fastapi import HTTPException, Request

from chatdesk.auth.dependencies import CurrentUser
from chatdesk.chats import repository as chats
from chatdesk.chats.service import get_owned_chat
from chatdesk.config.settings import get_settings
from chatdesk.db.models import DEFAULT_CHAT_TITLE, ROLE_ASSISTANT, ROLE_SYSTEM, ROLE_USER
from chatdesk.llm.client import get_llm_client
from chatdesk.llm.context import build_context
from chatdesk.llm.prompts import EMPTY_REPLY_FALLBACK, TITLE_GENERATION_PROMPT, clean_title
from chatdesk.llm.token_counter import count_tokens
from chatdesk.messages import repository as messages
from chatdesk.messages.streaming import (
    format_chat_title,
    format_content_block_delta,
    format_content_block_start,
    format_content_block_stop,
    format_error,
    format_message_delta,
    format_message_start,
    format_message_stop,
)
from chatdesk.runtime_settings import store

logger = logging.getLogger(__name__)

PRIMARY_PROVIDER = "groq"
FALLBACK_PROVIDER = "google"


@dataclass
class PreparedTurn:
    chat_id: str
    api_key: str
    model: str
    context: list[dict]
    title: str | None = None


def _check_preconditions(chat_id: str, user: CurrentUser, content: str) -> str:
    """Run every check that must pass before anything is persisted. Returns the LLM API key."""
    get_owned_chat(chat_id, user.id)

    if not content.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    if not user.is_admin and store.get_bool(store.MAINTENANCE_MODE):
        raise HTTPException(status_code=503, detail="The service is under maintenance, try again later")

    api_key = store.resolve_llm_api_key()
    if not api_key:
        raise HTTPException(status_code=500, detail="LLM API key is not configured. Set it in the admin settings.")

    limit = store.get_int(store.MAX_MESSAGES_PER_CHAT)
    if messages.count_by_chat(chat_id) >= limit:
        raise HTTPException(status_code=403, detail=f"Message limit reached ({limit} messages per chat)")

    return api_key


async def generate_title(api_key: str, first_message: str) -> str:
    settings = get_settings()
    client = get_llm_client(PRIMARY_PROVIDER, api_key)
    result = await client.generate(
        [
            {"role": ROLE_SYSTEM, "content": TITLE_GENERATION_PROMPT},
            {"role": ROLE_USER, "content": first_message[:500]},
        ],
        settings.TITLE_MODEL,
    )
    return clean_title(result["content"]) or DEFAULT_CHAT_TITLE


async def _title_if_first_message(chat_id: str, api_key: str, content: str) -> str | None:
    if messages.count_by_chat(chat_id) != 1:
        return None
    try:
        title = await generate_title(api_key, content)
    except Exception:
        logger.exception("Failed to generate title for chat %s", chat_id)
        return None
    chats.update(chat_id, {"title": title})
    logger.info("Titled chat %s: %s", chat_id, title)
    return title


async def prepare_turn(chat_id: str, user: CurrentUser, content: str, model: str | None = None) -> PreparedTurn:
    """Validate, persist the user message, title the chat and build the LLM context."""
    api_key = _check_preconditions(chat_id, user, content)

    messages.save(chat_id, ROLE_USER, content, token_count=count_tokens(content))
    title = await _title_if_first_message(chat_id, api_key, content)

    context = build_context(messages.list_by_chat(chat_id), store.get_system_prompt())
    return PreparedTurn(
        chat_id=chat_id,
        api_key=api_key,
        model=model or get_settings().DEFAULT_MODEL,
        context=context,
        title=title,
    )


def _fallback_client():
    settings = get_settings()
    if not settings.GOOGLE_AI_API_KEY:
        return None
    return get_llm_client(FALLBACK_PROVIDER, settings.GOOGLE_AI_API_KEY)


async def _generate_with_fallback(turn: PreparedTurn) -> tuple[dict, str]:
    try:
        client = get_llm_client(PRIMARY_PROVIDER, turn.api_key)
        return await client.generate(turn.context, turn.model), turn.model
    except Exception:
        fallback = _fallback_client()
        if fallback is None:
            logger.exception("LLM request failed for chat %s", turn.chat_id)
            raise HTTPException(status_code=502, detail="The language model request failed")
        logger.warning("Primary LLM failed, falling back to Google AI", exc_info=True)

    model = get_settings().FALLBACK_MODEL
    try:
        return await fallback.generate(turn.context, model), model
    except Exception:
        logger.exception("Fallback LLM request failed for chat %s", turn.chat_id)
        raise HTTPException(status_code=502, detail="The language model request failed")


def _save_reply(turn: PreparedTurn, content: str, model: str, **extra) -> dict:
    reply = content if content.strip() else EMPTY_REPLY_FALLBACK
    if not extra.get("token_count"):
        extra["token_count"] = count_tokens(reply)
    saved = messages.save(turn.chat_id, ROLE_ASSISTANT, reply, model=model, **extra)
    chats.touch(turn.chat_id)
    return saved


async def send_message(chat_id: str, user: CurrentUser, content: str, model: str | None = None) -> dict:
    """Run a full turn and return ``{"message": <assistant message>, "title": <new title or None>}``."""
    turn = await prepare_turn(chat_id, user, content, model)

    start = time.time()
    result, used_model = await _generate_with_fallback(turn)
    latency_ms = int((time.time() - start) * 1000)

    assistant_msg = _save_reply(
        turn, result["content"], used_model,
        token_count=result.get("output_tokens") or None,
        finish_reason=result.get("finish_reason", "stop"),
        latency_ms=latency_ms,
        metadata={"input_tokens": result.get("input_tokens", 0)},
    )
    return {"message": assistant_msg, "title": turn.title}


async def _stream_with_fallback(turn: PreparedTurn, state: dict) -> AsyncGenerator[dict, None]:
    """Stream from the primary provider, switching to the fallback if it fails before any output."""
    try:
        client = get_llm_client(PRIMARY_PROVIDER, turn.api_key)
        async for chunk in client.generate_stream(turn.context, turn.model):
            state["emitted"] = True
            yield chunk
        return
    except Exception:
        fallback = _fallback_client()
        if state.get("emitted") or fallback is None:
            raise
        logger.warning("Primary LLM stream failed, falling back to Google AI", exc_info=True)

    state["model"] = get_settings().FALLBACK_MODEL
    async for chunk in fallback.generate_stream(turn.context, state["model"]):
        yield chunk


async def stream_reply(turn: PreparedTurn, request: Request) -> AsyncGenerator[str, None]:
    """SSE events for one assistant reply; the reply is saved once the stream ends."""
    message_id = str(uuid.uuid4())
    state = {"model": turn.model, "emitted": False}
    full_content = ""
    output_tokens = 0
    finish_reason = "stop"
    start = time.time()

    yield format_message_start(message_id, turn.model)
    if turn.title:
        yield format_chat_title(turn.chat_id, turn.title)
    yield format_content_block_start()

    try:
        async for chunk in _stream_with_fallback(turn, state):
            if await request.is_disconnected():
                logger.info("Client disconnected during stream for chat %s", turn.chat_id)
                break

            if chunk["type"] == "delta":
                full_content += chunk["content"]
                yield format_content_block_delta(chunk["content"])
            elif chunk["type"] == "finish":
                finish_reason = chunk.get("finish_reason") or "stop"
                output_tokens = chunk.get("usage", {}).get("output_tokens", 0)
    except Exception as e:
        logger.exception("Error during streaming for chat %s", turn.chat_id)
        yield format_error("stream_error", str(e))
        return

    if not full_content.strip():
        full_content = EMPTY_REPLY_FALLBACK
        yield format_content_block_delta(full_content)

    yield format_content_block_stop()
    yield format_message_delta(finish_reason, output_tokens)

    saved = _save_reply(
        turn, full_content, state["model"],
        token_count=output_tokens or None,
        finish_reason=finish_reason,
        latency_ms=int((time.time() - start) * 1000),
    )
    yield format_message_stop(saved["id"])
