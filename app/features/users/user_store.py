from datetime import datetime, timedelta, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.helpers import eager_load_user_options
from app.core.database.models import PlaceRow, SessionRow, UserRow
from app.core.errors import EmailTakenError, PersistenceError
from app.core.security import new_session_token
from app.core.types import UserId
from app.features.users.entities import InternalUser
from app.utils import get_logger

log = get_logger(__name__)


class UserStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def user_exists(self, user_id: Optional[UserId] = None, email: Optional[str] = None) -> bool:
        """Return whether or not a user with the given attributes exists."""
        query = sa.select(UserRow.id)
        if user_id:
            query = query.where(UserRow.id == user_id)
        if email:
            query = query.where(UserRow.email == email.lower())
        result = await self.db.execute(query.exists().select())
        user_exists: bool = result.scalar()  # type: ignore
        return user_exists

    async def get_user(self, user_id: Optional[UserId] = None, email: Optional[str] = None) -> Optional[InternalUser]:
        query = sa.select(UserRow).options(*eager_load_user_options())
        if user_id:
            query = query.where(UserRow.id == user_id)
        if email:
            query = query.where(UserRow.email == email.lower())
        result = await self.db.execute(query)
        user: Optional[UserRow] = result.scalars().first()
        return InternalUser.model_validate(user) if user else None

    async def get_users(self) -> list[InternalUser]:
        query = sa.select(UserRow).options(*eager_load_user_options()).order_by(UserRow.id)
        result = await self.db.execute(query)
        users = result.scalars().all()
        return [InternalUser.model_validate(user) for user in users]

    # Operations
    async def create_user(self, name: str, email: str, password_hash: str, image: str) -> InternalUser:
        """Create a new user with the given details, raising EmailTakenError if the email is in use."""
        if await self.user_exists(email=email):
            raise EmailTakenError("User exists already, please login instead.")
        new_user = UserRow(name=name, email=email.lower(), password_hash=password_hash, image=image)
        try:
            self.db.add(new_user)
            await self.db.flush()
            user_id = new_user.id
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            # Lost a race with another signup for the same email
            if await self.user_exists(email=email):
                raise EmailTakenError("User exists already, please login instead.")
            log.exception("Could not create user")
            raise PersistenceError("Signing up failed, please try again later.") from e
        created = await self.get_user(user_id=user_id)
        if created is None:
            raise PersistenceError("Signing up failed, please try again later.")
        return created

    # Atomic unit participants, these flush but never commit
    async def get_user_row_for_update(self, user_id: UserId) -> Optional[UserRow]:
        """
        Load the user row with its places collection and lock it until the surrounding transaction ends.

        Concurrent creates/deletes for the same user serialize on this lock, so the collection they modify is
        always the committed one.
        """
        query = (
            sa.select(UserRow)
            .options(*eager_load_user_options())
            .where(UserRow.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalars().first()

    async def add_place_reference(self, user: UserRow, place: PlaceRow) -> None:
        user.places.append(place)
        await self.db.flush()

    async def remove_place_reference(self, user: UserRow, place: PlaceRow) -> None:
        if place in user.places:
            user.places.remove(place)
        await self.db.flush()

    # Sessions
    async def create_session(self, user_id: UserId, ttl: timedelta) -> str:
        """Issue a new session token for the given user."""
        token = new_session_token()
        session = SessionRow(user_id=user_id, token=token, expires_at=datetime.now(timezone.utc) + ttl)
        self.db.add(session)
        await self.db.commit()
        return token

    async def get_user_id_by_token(self, token: str) -> Optional[UserId]:
        """Return the user the given unexpired session token belongs to."""
        query = sa.select(SessionRow.user_id).where(
            SessionRow.token == token,
            SessionRow.expires_at > datetime.now(timezone.utc),
        )
        result = await self.db.execute(query)
        return result.scalars().first()

