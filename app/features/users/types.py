from app.core.types import Base, UserId
from app.features.users.entities import PublicUser


class LoginRequest(Base):
    email: str
    password: str


# Response types
class AuthResponse(Base):
    user_id: UserId
    email: str
    token: str


class UsersResponse(Base):
    users: list[PublicUser]
