from typing import Awaitable, Optional, TypeVar

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.authorization import authorize
from app.core.database.transaction import atomic_unit
from app.core.errors import (
    CreatorNotFoundError,
    PersistenceError,
    PlaceNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from app.core.geocoding import GeocoderProtocol
from app.core.storage import ImageStorageProtocol
from app.core.types import PlaceId, UserId
from app.features.places.entities import Place
from app.features.places.place_store import PlaceStore
from app.features.users.user_store import UserStore
from app.utils import get_logger

log = get_logger(__name__)
T = TypeVar("T")


class PlaceLifecycle:
    """
    Creates, updates and deletes places while keeping each place and its creator's places collection consistent.

    Writes that touch both a place and its creator run inside a single atomic unit, so other requests never see a
    place without its owner's back-reference (or the reverse). Uploaded images that end up unreferenced are
    removed after the response has been sent; failing to remove them is logged and never reported to the caller.
    """

    def __init__(
        self,
        db: AsyncSession,
        place_store: PlaceStore,
        user_store: UserStore,
        geocoder: GeocoderProtocol,
        image_storage: ImageStorageProtocol,
        background_tasks: BackgroundTasks,
    ):
        self.db = db
        self.place_store = place_store
        self.user_store = user_store
        self.geocoder = geocoder
        self.image_storage = image_storage
        self.background_tasks = background_tasks

    # Reads
    async def get_place(self, place_id: PlaceId) -> Place:
        place = await self._read(self.place_store.get_place(place_id))
        if place is None:
            raise PlaceNotFoundError("Could not find a place for the provided id.")
        return place

    async def get_places_by_user(self, user_id: UserId) -> list[Place]:
        if not await self._read(self.user_store.user_exists(user_id=user_id)):
            raise UserNotFoundError("Could not find a user for the provided id.")
        return await self._read(self.place_store.get_places_by_creator(user_id))

    # Operations
    async def create_place(
        self,
        title: Optional[str],
        description: Optional[str],
        address: Optional[str],
        creator_id: Optional[UserId],
        image: Optional[str],
    ) -> Place:
        """
        Geocode the address and create a place owned by the given creator.

        Nothing is written unless every step succeeds. If anything fails, the uploaded image is scheduled for
        removal since no place will reference it.
        """
        try:
            place = await self._create_place(title, description, address, creator_id, image)
        except Exception:
            # Nothing was committed, so no place references the image
            if image:
                self._schedule_image_removal(image)
            raise
        log.info("User %s created place %s", creator_id, place.id)
        return place

    async def update_place(
        self,
        place_id: PlaceId,
        caller_id: UserId,
        title: Optional[str],
        description: Optional[str],
    ) -> Place:
        """Update the title and description of a place owned by the caller."""
        fields = _require(title=title, description=description)
        place = await self.get_place(place_id)
        authorize(place.creator_id, caller_id)
        try:
            updated = await self.place_store.update_place(place_id, fields["title"], fields["description"])
        except SQLAlchemyError as e:
            await self.db.rollback()
            log.exception("Could not update place %s", place_id)
            raise PersistenceError("Something went wrong, could not update place.") from e
        if updated is None:
            raise PlaceNotFoundError("Could not find a place for the provided id.")
        return updated

    async def delete_place(self, place_id: PlaceId, caller_id: UserId) -> None:
        """Delete a place owned by the caller and detach it from the caller's places."""
        place = await self.get_place(place_id)
        authorize(place.creator_id, caller_id)
        async with atomic_unit(self.db):
            # Same lock order as create: user, then place
            creator = await self.user_store.get_user_row_for_update(place.creator_id)
            place_row = await self.place_store.get_place_row_for_update(place_id)
            if creator is None or place_row is None:
                # Deleted by a concurrent request since it was read
                raise PlaceNotFoundError("Could not find a place for the provided id.")
            await self.place_store.delete_place(place_row)
            await self.user_store.remove_place_reference(creator, place_row)
        log.info("Deleted place %s", place_id)
        self._schedule_image_removal(place.image)

    async def _create_place(
        self,
        title: Optional[str],
        description: Optional[str],
        address: Optional[str],
        creator_id: Optional[UserId],
        image: Optional[str],
    ) -> Place:
        fields = _require(title=title, description=description, address=address, image=image)
        if creator_id is None:
            raise ValidationError("Invalid inputs passed, please check your data: creator is required.")
        creator = await self._read(self.user_store.get_user(user_id=creator_id))
        if creator is None:
            raise CreatorNotFoundError("Could not find user for provided id.")

        # Network call happens before any write so a geocoding failure leaves nothing behind
        location = await self.geocoder.resolve(fields["address"])

        async with atomic_unit(self.db):
            creator_row = await self.user_store.get_user_row_for_update(creator.id)
            if creator_row is None:
                raise CreatorNotFoundError("Could not find user for provided id.")
            place_row = await self.place_store.add_place(
                title=fields["title"],
                description=fields["description"],
                address=fields["address"],
                location=location,
                image=fields["image"],
                creator_id=creator_row.id,
            )
            await self.user_store.add_place_reference(creator_row, place_row)
            # Built before commit, rows expire once it succeeds
            place = Place.model_validate(place_row)
        return place

    async def _read(self, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except SQLAlchemyError as e:
            log.exception("Store lookup failed")
            raise PersistenceError("Something went wrong, please try again later.") from e

    def _schedule_image_removal(self, path: str) -> None:
        self.background_tasks.add_task(self._remove_image, path)

    async def _remove_image(self, path: str) -> None:
        try:
            await self.image_storage.delete_image(path)
        except Exception:  # noqa
            log.exception("Failed to remove image %s", path)


def _require(**fields: Optional[str]) -> dict[str, str]:
    """Return the given fields stripped, raising ValidationError if any of them is missing or blank."""
    stripped = {name: value.strip() for name, value in fields.items() if value is not None and value.strip()}
    missing = [name for name in fields if name not in stripped]
    if missing:
        raise ValidationError(f"Invalid inputs passed, please check your data: {', '.join(missing)} required.")
    return stripped
