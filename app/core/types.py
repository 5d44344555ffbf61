from uuid import UUID

from pydantic import BaseModel, field_validator


def to_camel_case(snake_case: str) -> str:
    if not snake_case:
        return snake_case
    parts = snake_case.split("_")
    return parts[0] + "".join(part.title() for part in parts[1:])


class InternalBase(BaseModel):
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }


class Base(BaseModel):
    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
        "alias_generator": to_camel_case,
        "validate_default": True,
    }


class SimpleResponse(Base):
    success: bool


class Location(Base):
    lat: float
    lng: float

    @field_validator("lat")
    @classmethod
    def validate_lat(cls, lat):
        if lat < -90 or lat > 90:
            raise ValueError("Invalid latitude")
        return lat

    @field_validator("lng")
    @classmethod
    def validate_lng(cls, lng):
        if lng < -180 or lng > 180:
            raise ValueError("Invalid longitude")
        return lng


UserId = UUID
PlaceId = UUID
