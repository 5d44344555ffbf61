from app.core.errors import NotAuthorizedError
from app.core.types import UserId
from app.utils import get_logger

log = get_logger(__name__)


def authorize(resource_owner_id: UserId, caller_id: UserId) -> None:
    """Raise NotAuthorizedError unless the caller owns the resource."""
    if resource_owner_id != caller_id:
        log.info("Denied %s access to resource owned by %s", caller_id, resource_owner_id)
        raise NotAuthorizedError("You are not allowed to modify this place.")
