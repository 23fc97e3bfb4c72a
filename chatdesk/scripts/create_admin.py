"""Create an administrator account.

Usage::

    python -m chatdesk.scripts.create_admin --email admin@example.com --password <secret> [--name Administrator]
"""

import argparse
import logging
import sys

from chatdesk.auth.passwords import hash_password
from chatdesk.db.models import ROLE_ADMIN
from chatdesk.users import repository as users

logger = logging.getLogger(__name__)


def create_admin_user(email: str, password: str, name: str = "Administrator") -> tuple[dict, bool]:
    """Return ``(user, created)``; an existing account is left untouched."""
    existing = users.get_by_email(email)
    if existing:
        return existing, False
    user = users.create({
        "name": name,
        "email": email,
        "password_hash": hash_password(password),
        "role": ROLE_ADMIN,
    })
    logger.info("Created admin user %s", user["id"])
    return user, True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a chatdesk administrator account.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args(argv)

    try:
        user, created = create_admin_user(args.email, args.password, args.name)
    except Exception:
        logger.exception("Failed to create admin user")
        print("Error creating admin user, see the log for details.", file=sys.stderr)
        return 1

    if created:
        print(f"Admin user created: {user['email']} (id {user['id']})")
    else:
        print(f"User already exists: {user['email']}")
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
