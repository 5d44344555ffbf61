from app.core.types import Base
from app.features.places.entities import Place


class UpdatePlaceRequest(Base):
    title: str
    description: str


# Response types
class PlaceResponse(Base):
    place: Place


class PlacesResponse(Base):
    places: list[Place]
