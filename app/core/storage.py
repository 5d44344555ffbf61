import functools
import uuid
from asyncio import get_event_loop
from pathlib import Path
from typing import Protocol

from fastapi import UploadFile

from app.core import config
from app.core.errors import InvalidImageError
from app.utils import get_logger

log = get_logger(__name__)

MIME_TYPE_MAP = {
    "image/png": "png",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
}

# Leading bytes of each accepted format
SIGNATURES = {
    "png": b"\x89PNG\r\n\x1a\n",
    "jpeg": b"\xff\xd8\xff",
    "jpg": b"\xff\xd8\xff",
}


class ImageStorageProtocol(Protocol):
    async def save_image(self, file: UploadFile) -> str:
        ...

    async def delete_image(self, path: str) -> None:
        ...


class LocalImageStorage(ImageStorageProtocol):
    def __init__(self, root: str = config.UPLOAD_DIR, max_bytes: int = config.MAX_IMAGE_BYTES):
        self.root = Path(root)
        self.max_bytes = max_bytes

    async def save_image(self, file: UploadFile) -> str:
        """Validate the uploaded image and write it to disk, returning the stored path."""
        extension = MIME_TYPE_MAP.get(file.content_type or "")
        if extension is None:
            raise InvalidImageError("Image must be a png or jpeg.")
        content = await file.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            raise InvalidImageError(f"Max image size is {self.max_bytes} bytes.")
        if not content.startswith(SIGNATURES[extension]):
            raise InvalidImageError("Image must be a png or jpeg.")
        path = self.root / f"{uuid.uuid4()}.{extension}"
        loop = get_event_loop()
        await loop.run_in_executor(None, functools.partial(_write_file, path, content))
        log.debug("Stored image %s", path)
        return str(path)

    async def delete_image(self, path: str) -> None:
        """Delete the given image. Deleting an image that doesn't exist is a no-op."""
        loop = get_event_loop()
        await loop.run_in_executor(None, functools.partial(Path(path).unlink, missing_ok=True))


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


_storage = LocalImageStorage()


def get_image_storage() -> ImageStorageProtocol:
    return _storage
