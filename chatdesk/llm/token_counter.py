"""Approximate token counting using tiktoken."""

import logging
from functools import lru_cache

import tiktoken

logger = logging.getLogger(__name__)

# Per-message overhead of the chat format
MESSAGE_OVERHEAD = 4


@lru_cache()
def _get_encoding() -> tiktoken.Encoding | None:
    # cl100k_base as a reasonable approximation for most models
    try:
        return tiktoken.get_encoding("cl100k_base")
    except Exception:
        # The BPE file is fetched on first use; offline hosts fall back to a length estimate
        logger.warning("tiktoken encoding unavailable, estimating token counts from length")
        return None


def count_tokens(text: str) -> int:
    encoding = _get_encoding()
    if encoding is None:
        return (len(text) + 3) // 4
    return len(encoding.encode(text))


def count_message_tokens(message: dict) -> int:
    return count_tokens(message.get("content", "")) + MESSAGE_OVERHEAD


def truncate_to_tokens(text: str, max_tokens: int) -> str:
    """Cut ``text`` down to roughly ``max_tokens`` tokens."""
    if max_tokens <= 0:
        return ""
    encoding = _get_encoding()
    if encoding is None:
        return text[:max_tokens * 4]
    tokens = encoding.encode(text)
    if len(tokens) <= max_tokens:
        return text
    return encoding.decode(tokens[:max_tokens])
