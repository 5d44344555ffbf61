from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, Request

from app.core.errors import NotAuthenticatedError
from app.core.types import UserId
from app.features.stores import get_user_store
from app.features.users.user_store import UserStore


@dataclass
class AuthenticatedUser:
    user_id: UserId


def get_client_key(request: Request) -> str:
    """Used for rate limiting."""
    return request.client.host if request.client else "default"


async def get_caller(
    authorization: Optional[str] = Header(None),
    user_store: UserStore = Depends(get_user_store),
) -> AuthenticatedUser:
    """Resolve the caller from the session token in the authorization header."""
    if authorization is None or not authorization.startswith("Bearer "):
        raise NotAuthenticatedError("Authentication failed.")
    user_id: Optional[UserId] = await user_store.get_user_id_by_token(authorization[7:])
    if user_id is None:
        raise NotAuthenticatedError("Authentication failed.")
    return AuthenticatedUser(user_id=user_id)
