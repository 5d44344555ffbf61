from typing import Any

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import (
    Mapped,
    declarative_base,
    mapped_column,
    relationship,
)

from app.core.database.defaults import gen_ulid


Base: Any = declarative_base()


# region Users
class UserRow(Base):
    __tablename__ = "user"

    id = mapped_column(Uuid, primary_key=True, default=gen_ulid)
    name = mapped_column(Text, nullable=False)
    # Always stored lower-cased
    email = mapped_column(Text, unique=True, nullable=False)
    password_hash = mapped_column(Text, nullable=False)
    image = mapped_column(Text, nullable=False)
    created_at = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Removing a place from this collection deletes the place; a place can't exist without its creator
    places: Mapped[list["PlaceRow"]] = relationship(
        "PlaceRow",
        back_populates="creator",
        cascade="all, delete-orphan",
        order_by="PlaceRow.id",
    )

    @property
    def place_ids(self) -> list:
        return [place.id for place in self.places]


class SessionRow(Base):
    __tablename__ = "session"

    id = mapped_column(Uuid, primary_key=True, default=gen_ulid)
    user_id = mapped_column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    token = mapped_column(Text, unique=True, nullable=False)
    expires_at = mapped_column(DateTime(timezone=True), nullable=False)
    created_at = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    user: Mapped[UserRow] = relationship(UserRow)

    __table_args__ = (Index("idx_session_user_id", user_id),)


# endregion Users

# region Places
class PlaceRow(Base):
    __tablename__ = "place"

    id = mapped_column(Uuid, primary_key=True, default=gen_ulid)
    title = mapped_column(Text, nullable=False)
    description = mapped_column(Text, nullable=False)
    address = mapped_column(Text, nullable=False)

    # Produced by geocoding the address, never supplied by clients
    latitude = mapped_column(Float, nullable=False)
    longitude = mapped_column(Float, nullable=False)

    # Path of the uploaded image, set once at creation
    image = mapped_column(Text, nullable=False)
    creator_id = mapped_column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)

    created_at = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    creator: Mapped[UserRow] = relationship(UserRow, back_populates="places")

    __table_args__ = (Index("idx_place_creator_id", creator_id),)


# endregion Places
