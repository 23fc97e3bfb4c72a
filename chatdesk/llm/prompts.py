"""Prompt templates for title generation and fallback replies."""

TITLE_GENERATION_PROMPT = (
    "Generate a short, descriptive title (at most 6 words) for a conversation that starts "
    "with the following message. Reply with ONLY the title, without trailing punctuation."
)

EMPTY_REPLY_FALLBACK = "Sorry, I couldn't process your message."

TITLE_MAX_LENGTH = 200
TITLE_MAX_WORDS = 6


def clean_title(raw: str) -> str:
    """Strip quotes and trailing punctuation from a generated title, keeping at most six words."""
    title = raw.strip().strip('"\'').strip()
    title = " ".join(title.split()[:TITLE_MAX_WORDS])
    title = title.rstrip(".!?;:,").strip()
    return title[:TITLE_MAX_LENGTH]
