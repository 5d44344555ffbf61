from functools import cached_property

from pydantic import Field, computed_field

from app.core.types import Base, Location, PlaceId, UserId


class Place(Base):
    id: PlaceId
    title: str
    description: str
    address: str
    image: str
    creator_id: UserId = Field(serialization_alias="creator")
    latitude: float = Field(exclude=True)
    longitude: float = Field(exclude=True)

    @computed_field
    @cached_property
    def location(self) -> Location:
        return Location(lat=self.latitude, lng=self.longitude)
