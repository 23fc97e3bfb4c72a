"""Build the message list sent to the LLM within a token budget."""

from chatdesk.db.models import ROLE_SYSTEM
from chatdesk.llm.token_counter import MESSAGE_OVERHEAD, count_message_tokens, truncate_to_tokens

# Conservative budget for the smaller default models
DEFAULT_MAX_TOKENS = 6000


def build_context(
    history: list[dict],
    system_prompt: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> list[dict]:
    """Return ``[system, first?, ...most recent]`` fitting in ``max_tokens``.

    The system prompt and the newest turn are always sent; a newest turn larger
    than the budget is truncated. Older turns are added newest-first until the
    budget runs out. The opening message is kept too when it fits alongside
    the newest turn, since it usually states what the chat is about.
    """
    system_msg = {"role": ROLE_SYSTEM, "content": system_prompt}
    turns = [{"role": m["role"], "content": m["content"]} for m in history]
    if not turns:
        return [system_msg]

    budget = max_tokens - count_message_tokens(system_msg)
    newest = turns[-1]
    newest_cost = count_message_tokens(newest)
    if newest_cost > budget:
        newest["content"] = truncate_to_tokens(newest["content"], budget - MESSAGE_OVERHEAD)
        return [system_msg, newest]
    if len(turns) == 1:
        return [system_msg, newest]

    first, middle = turns[0], turns[1:-1]
    first_cost = count_message_tokens(first)
    reserved = first_cost if first_cost + newest_cost <= budget else 0

    recent = [newest]
    used = newest_cost
    for turn in reversed(middle):
        cost = count_message_tokens(turn)
        if used + cost + reserved > budget:
            break
        recent.append(turn)
        used += cost
    recent.reverse()

    if reserved:
        return [system_msg, first] + recent
    return [system_msg] + recent
