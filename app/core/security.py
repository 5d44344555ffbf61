import functools
import secrets
from asyncio import get_event_loop

import bcrypt


# bcrypt is slow on purpose, so keep it off the event loop
async def hash_password(password: str) -> str:
    loop = get_event_loop()
    hashed: bytes = await loop.run_in_executor(None, _bcrypt_hash, password)
    return hashed.decode()


async def verify_password(password: str, password_hash: str) -> bool:
    """Return whether the password matches the stored bcrypt hash."""
    loop = get_event_loop()
    return await loop.run_in_executor(None, functools.partial(_bcrypt_check, password, password_hash))


def new_session_token() -> str:
    """Return an unguessable, URL-safe bearer token."""
    return secrets.token_urlsafe(32)


def _bcrypt_hash(password: str) -> bytes:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt())


def _bcrypt_check(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Stored value isn't a bcrypt hash
        return False
