from datetime import timedelta

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile
from slowapi import Limiter

from app.core import config
from app.core.errors import InvalidCredentialsError, PlacesError
from app.core.security import hash_password, verify_password
from app.core.storage import ImageStorageProtocol, get_image_storage
from app.features.stores import get_user_store
from app.features.users.dependencies import get_client_key
from app.features.users.primitive_types import ValidatedEmail, ValidatedName, ValidatedPassword
from app.features.users.types import AuthResponse, LoginRequest, UsersResponse
from app.features.users.user_store import UserStore
from app.features.utils import get_background_tasks
from app.utils import get_logger

router = APIRouter(tags=["users"])
limiter = Limiter(key_func=get_client_key)
log = get_logger(__name__)


@router.get("", response_model=UsersResponse)
async def get_users(user_store: UserStore = Depends(get_user_store)):
    """Get all users (without their credentials)."""
    users = await user_store.get_users()
    return UsersResponse(users=[user.to_public() for user in users])


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(
    name: ValidatedName = Form(...),
    email: ValidatedEmail = Form(...),
    password: ValidatedPassword = Form(...),
    image: UploadFile = File(...),
    user_store: UserStore = Depends(get_user_store),
    image_storage: ImageStorageProtocol = Depends(get_image_storage),
    background_tasks: BackgroundTasks = Depends(get_background_tasks),
):
    """Create a new user and log them in."""
    image_path = await image_storage.save_image(image)
    try:
        password_hash = await hash_password(password)
        user = await user_store.create_user(name=name, email=email, password_hash=password_hash, image=image_path)
    except PlacesError:
        background_tasks.add_task(image_storage.delete_image, image_path)
        raise
    token = await user_store.create_session(user.id, ttl=timedelta(hours=config.SESSION_TTL_HOURS))
    log.info("Signed up user %s", user.id)
    return AuthResponse(user_id=user.id, email=user.email, token=token)


@router.post("/login", response_model=AuthResponse)
@limiter.limit("10/minute")
async def login(
    request: Request,  # This needs to be here for limiter
    req: LoginRequest,
    user_store: UserStore = Depends(get_user_store),
):
    """Log in with email and password, returning a session token."""
    user = await user_store.get_user(email=req.email.strip())
    # Same error for unknown email and wrong password so accounts can't be enumerated
    if user is None or not await verify_password(req.password, user.password_hash):
        raise InvalidCredentialsError("Invalid credentials, could not log you in.")
    token = await user_store.create_session(user.id, ttl=timedelta(hours=config.SESSION_TTL_HOURS))
    return AuthResponse(user_id=user.id, email=user.email, token=token)
