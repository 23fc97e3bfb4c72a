"""Dashboard statistics: totals, bucketed trends, role split and top users."""

from datetime import datetime

from chatdesk.admin.service import top_users
from chatdesk.chats import repository as chats
from chatdesk.messages import repository as messages
from chatdesk.users import repository as users
from chatdesk.utils.time_buckets import DEFAULT_TIME_RANGE, TIME_RANGES, bucket_counts, window_start

TOP_USERS = 5


def dashboard_stats(time_range: str, now: datetime | None = None) -> dict:
    if time_range not in TIME_RANGES:
        time_range = DEFAULT_TIME_RANGE
    since = window_start(time_range, now).isoformat()

    return {
        "time_range": time_range,
        "counts": {
            "users": users.count(),
            "chats": chats.count(),
            "messages": messages.count(),
        },
        "trends": {
            "user_growth": bucket_counts(users.list_created_since(since), time_range),
            "message_activity": bucket_counts(messages.list_created_since(since), time_range),
            "chat_creation": bucket_counts(chats.list_created_since(since), time_range),
        },
        "messages_by_role": [
            {"role": role, "count": count} for role, count in messages.counts_by_role().items()
        ],
        "top_users": top_users(TOP_USERS),
    }
