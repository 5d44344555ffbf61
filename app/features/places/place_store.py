from typing import Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.models import PlaceRow
from app.core.types import Location, PlaceId, UserId
from app.features.places.entities import Place
from app.features.places.place_query import PlaceQuery


class PlaceStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_place(self, place_id: PlaceId) -> Optional[Place]:
        place_row = await PlaceQuery().place_id(place_id).execute_one(self.db)
        return Place.model_validate(place_row) if place_row else None

    async def get_places_by_creator(self, user_id: UserId) -> list[Place]:
        place_rows = await PlaceQuery().creator(user_id).order_by_id().execute_many(self.db)
        return [Place.model_validate(row) for row in place_rows]

    async def update_place(self, place_id: PlaceId, title: str, description: str) -> Optional[Place]:
        """Update the mutable fields of the given place. Returns None if the place doesn't exist."""
        query = sa.update(PlaceRow).where(PlaceRow.id == place_id).values(title=title, description=description)
        result = await self.db.execute(query)
        await self.db.commit()
        if result.rowcount == 0:  # type: ignore
            return None
        return await self.get_place(place_id)

    # Atomic unit participants, these flush but never commit
    async def add_place(
        self,
        title: str,
        description: str,
        address: str,
        location: Location,
        image: str,
        creator_id: UserId,
    ) -> PlaceRow:
        """Stage a new place; the caller links it to its creator and commits."""
        place = PlaceRow(
            title=title,
            description=description,
            address=address,
            latitude=location.lat,
            longitude=location.lng,
            image=image,
            creator_id=creator_id,
        )
        self.db.add(place)
        await self.db.flush()
        return place

    async def get_place_row_for_update(self, place_id: PlaceId) -> Optional[PlaceRow]:
        """Note: This locks the place row until the surrounding transaction ends."""
        return await PlaceQuery().place_id(place_id).for_update().execute_one(self.db)

    async def delete_place(self, place: PlaceRow) -> None:
        """Mark the place for deletion, the DELETE is issued on the next flush."""
        await self.db.delete(place)
