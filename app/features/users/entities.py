from pydantic import Field

from app.core.types import Base, InternalBase, UserId, PlaceId


class PublicUser(Base):
    id: UserId
    name: str
    email: str
    image: str
    places: list[PlaceId] = Field(validation_alias="place_ids")


class InternalUser(InternalBase):
    id: UserId
    name: str
    email: str
    password_hash: str
    image: str
    place_ids: list[PlaceId]

    def to_public(self) -> PublicUser:
        return PublicUser(id=self.id, name=self.name, email=self.email, image=self.image, place_ids=self.place_ids)
