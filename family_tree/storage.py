import logging
import os
import time
import uuid
from pathlib import Path
from typing import Protocol

from family_tree.errors import MutationError
from family_tree.utils.urls import absolute_media_url

logger = logging.getLogger(__name__)


# ==========================================================
# LIMITS
# ==========================================================
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
MAX_IMAGE_SIZE = 5 * 1024 * 1024


# ==========================================================
# VALIDATION
# ==========================================================
def image_extension(filename: str | None) -> str | None:
    """Lower-cased extension if it is an allowed image type."""
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        return None
    return ext


def validate_file_size(size: int, max_size: int = MAX_IMAGE_SIZE):
    if size == 0:
        return False, "File is empty – nothing to upload"

    if size > max_size:
        return False, f"Image too large (max {max_size // (1024 * 1024)}MB)."

    return True, None


def picture_key(owner_id: str, ext: str) -> str:
    filename = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}{ext}"
    return f"users/{owner_id}/profile-pictures/{filename}"


# ==========================================================
# STORAGE BACKENDS
# ==========================================================
class ImageStorage(Protocol):
    def upload_image(
        self, owner_id: str, filename: str, contents: bytes, content_type: str
    ) -> str:
        ...


class SupabaseImageStorage:
    def __init__(self, client, bucket: str = "family-tree"):
        self.client = client
        self.bucket = bucket

    def upload_image(
        self, owner_id: str, filename: str, contents: bytes, content_type: str
    ) -> str:
        key = picture_key(owner_id, image_extension(filename) or ".jpg")

        try:
            self.client.storage.from_(self.bucket).upload(
                key,
                contents,
                {"content-type": content_type or "application/octet-stream"},
            )
            url = self.client.storage.from_(self.bucket).get_public_url(key)
        except Exception as exc:
            logger.exception("Supabase upload failed: %s", key)
            raise MutationError(
                "Failed to upload profile picture", submitted={"filename": filename}
            ) from exc

        logger.info("Supabase upload OK: %s", key)
        return url


class LocalImageStorage:
    def __init__(self, media_path: str, base_url: str):
        self.media_path = Path(media_path)
        self.base_url = base_url

    def upload_image(
        self, owner_id: str, filename: str, contents: bytes, content_type: str
    ) -> str:
        key = picture_key(owner_id, image_extension(filename) or ".jpg")
        file_path = self.media_path / key

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(contents)
        except OSError as exc:
            logger.exception("Local upload failed: %s", file_path)
            raise MutationError(
                "Failed to upload profile picture", submitted={"filename": filename}
            ) from exc

        logger.info("Local upload OK: %s", key)
        return absolute_media_url(f"/media/{key}", self.base_url)
