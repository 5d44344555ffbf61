from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database.engine import get_db
from app.core.geocoding import GeocoderProtocol, get_geocoder
from app.core.storage import ImageStorageProtocol, get_image_storage
from app.features.places.place_lifecycle import PlaceLifecycle
from app.features.places.place_store import PlaceStore
from app.features.users.user_store import UserStore
from app.features.utils import get_background_tasks


def get_place_store(db: AsyncSession = Depends(get_db)):
    return PlaceStore(db=db)


def get_user_store(db: AsyncSession = Depends(get_db)):
    return UserStore(db=db)


def get_place_lifecycle(
    background_tasks: BackgroundTasks = Depends(get_background_tasks),
    db: AsyncSession = Depends(get_db),
    place_store: PlaceStore = Depends(get_place_store),
    user_store: UserStore = Depends(get_user_store),
    geocoder: GeocoderProtocol = Depends(get_geocoder),
    image_storage: ImageStorageProtocol = Depends(get_image_storage),
) -> PlaceLifecycle:
    return PlaceLifecycle(
        db=db,
        place_store=place_store,
        user_store=user_store,
        geocoder=geocoder,
        image_storage=image_storage,
        background_tasks=background_tasks,
    )
