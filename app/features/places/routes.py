from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.storage import ImageStorageProtocol, get_image_storage
from app.core.types import PlaceId, SimpleResponse, UserId
from app.features.places.place_lifecycle import PlaceLifecycle
from app.features.places.types import PlaceResponse, PlacesResponse, UpdatePlaceRequest
from app.features.stores import get_place_lifecycle
from app.features.users.dependencies import AuthenticatedUser, get_caller

router = APIRouter(tags=["places"])


@router.get("/user/{user_id}", response_model=PlacesResponse)
async def get_places_by_user(
    user_id: UserId,
    lifecycle: PlaceLifecycle = Depends(get_place_lifecycle),
):
    """Get the places created by the given user."""
    places = await lifecycle.get_places_by_user(user_id)
    return PlacesResponse(places=places)


@router.get("/{place_id}", response_model=PlaceResponse)
async def get_place(
    place_id: PlaceId,
    lifecycle: PlaceLifecycle = Depends(get_place_lifecycle),
):
    """Get the given place."""
    return PlaceResponse(place=await lifecycle.get_place(place_id))


@router.post("", response_model=PlaceResponse, status_code=201)
async def create_place(
    title: str = Form(""),
    description: str = Form(""),
    address: str = Form(""),
    image: UploadFile = File(...),
    caller: AuthenticatedUser = Depends(get_caller),
    image_storage: ImageStorageProtocol = Depends(get_image_storage),
    lifecycle: PlaceLifecycle = Depends(get_place_lifecycle),
):
    """Create a place owned by the caller."""
    image_path = await image_storage.save_image(image)
    place = await lifecycle.create_place(
        title=title,
        description=description,
        address=address,
        creator_id=caller.user_id,
        image=image_path,
    )
    return PlaceResponse(place=place)


@router.patch("/{place_id}", response_model=PlaceResponse)
async def update_place(
    place_id: PlaceId,
    request: UpdatePlaceRequest,
    caller: AuthenticatedUser = Depends(get_caller),
    lifecycle: PlaceLifecycle = Depends(get_place_lifecycle),
):
    """Update the title and description of the given place."""
    place = await lifecycle.update_place(place_id, caller.user_id, request.title, request.description)
    return PlaceResponse(place=place)


@router.delete("/{place_id}", response_model=SimpleResponse)
async def delete_place(
    place_id: PlaceId,
    caller: AuthenticatedUser = Depends(get_caller),
    lifecycle: PlaceLifecycle = Depends(get_place_lifecycle),
):
    """Delete the given place."""
    await lifecycle.delete_place(place_id, caller.user_id)
    return SimpleResponse(success=True)
