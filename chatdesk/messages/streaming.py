"""SSE event formatting for streamed assistant replies."""

import json


def _sse(event: str, data: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(data)}\n\n"


def format_message_start(message_id: str, model: str) -> str:
    return _sse("message_start", {"type": "message_start", "message": {"id": message_id, "model": model}})


def format_chat_title(chat_id: str, title: str) -> str:
    return _sse("chat_title", {"type": "chat_title", "chat_id": chat_id, "title": title})


def format_content_block_start(index: int = 0) -> str:
    return _sse("content_block_start", {"type": "content_block_start", "index": index, "content_block": {"type": "text", "text": ""}})


def format_content_block_delta(text: str, index: int = 0) -> str:
    return _sse("content_block_delta", {"type": "content_block_delta", "index": index, "delta": {"type": "text_delta", "text": text}})


def format_content_block_stop(index: int = 0) -> str:
    return _sse("content_block_stop", {"type": "content_block_stop", "index": index})


def format_message_delta(stop_reason: str, output_tokens: int = 0) -> str:
    return _sse("message_delta", {"type": "message_delta", "delta": {"stop_reason": stop_reason}, "usage": {"output_tokens": output_tokens}})


def format_message_stop(message_id: str | None = None) -> str:
    data = {"type": "message_stop"}
    if message_id:
        data["message_id"] = message_id
    return _sse("message_stop", data)


def format_error(error_type: str, message: str) -> str:
    return _sse("error", {"type": "error", "error": {"type": error_type, "message": message}})
