"""Password hashing with bcrypt."""

import bcrypt as _bcrypt

from chatdesk.config.settings import get_settings


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    return _bcrypt.hashpw(password.encode(), _bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return _bcrypt.checkpw(password.encode(), password_hash.encode())
