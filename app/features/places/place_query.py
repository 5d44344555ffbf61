import typing

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.models import PlaceRow
from app.core.types import PlaceId, UserId

PlaceQueryT = typing.TypeVar("PlaceQueryT", bound="PlaceQuery")


class PlaceQuery:
    def __init__(self):
        self.query = sa.select(PlaceRow)

    def place_id(self: PlaceQueryT, place_id: PlaceId) -> PlaceQueryT:
        self.query = self.query.where(PlaceRow.id == place_id)
        return self

    def creator(self: PlaceQueryT, user_id: UserId) -> PlaceQueryT:
        self.query = self.query.where(PlaceRow.creator_id == user_id)
        return self

    def order_by_id(self: PlaceQueryT) -> PlaceQueryT:
        self.query = self.query.order_by(PlaceRow.id)
        return self

    def for_update(self: PlaceQueryT) -> PlaceQueryT:
        self.query = self.query.with_for_update().execution_options(populate_existing=True)
        return self

    async def execute_many(self: PlaceQueryT, session: AsyncSession) -> typing.Sequence[PlaceRow]:
        result = await session.execute(self.query)
        return result.scalars().all()

    async def execute_one(self: PlaceQueryT, session: AsyncSession) -> typing.Optional[PlaceRow]:
        result = await session.execute(self.query)
        return result.scalars().first()
