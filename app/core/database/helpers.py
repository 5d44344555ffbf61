from sqlalchemy.orm import selectinload

from app.core.database.models import UserRow


def eager_load_user_options():
    """Return the options to eagerly load a user's owned places (lazy loading doesn't work under asyncio)."""
    return (selectinload(UserRow.places),)
