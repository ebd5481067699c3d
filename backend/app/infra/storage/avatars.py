"""Avatar file storage on the local upload directory (served under /uploads)."""
import logging
import secrets
import time
from pathlib import Path
from typing import Optional

from app.domain.common.errors import ValidationError
from app.settings import settings

logger = logging.getLogger(__name__)

AVATAR_ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg"}
AVATAR_ALLOWED_CONTENT_TYPES = {"image/png", "image/jpeg", "image/jpg"}
AVATAR_URL_PREFIX = "/uploads/avatars/"


class AvatarStorage:
    """Writes avatar images to {upload_dir}/avatars and removes replaced ones."""

    def __init__(self, base_dir: Optional[str] = None, max_bytes: Optional[int] = None):
        self.base_dir = Path(base_dir or settings.avatar_dir)
        self.max_bytes = max_bytes or settings.avatar_max_bytes

    def validate(self, filename: Optional[str], content_type: Optional[str], content: bytes) -> str:
        """Return the normalised extension or raise ValidationError."""
        ext = Path(filename or "").suffix.lower()
        if ext not in AVATAR_ALLOWED_EXTENSIONS or (
            content_type and content_type.lower() not in AVATAR_ALLOWED_CONTENT_TYPES
        ):
            raise ValidationError("Only PNG, JPEG and JPG images are allowed")
        if not content:
            raise ValidationError("Empty file")
        if len(content) > self.max_bytes:
            raise ValidationError(f"File too large (max {self.max_bytes // (1024 * 1024)}MB)")
        return ext

    def save(self, ext: str, content: bytes) -> str:
        """Store the bytes under a fresh name and return the public URL."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        name = f"avatar-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        (self.base_dir / name).write_bytes(content)
        return f"{AVATAR_URL_PREFIX}{name}"

    def delete(self, avatar_url: Optional[str]) -> None:
        """Remove a previously stored avatar; URLs outside the avatar prefix are ignored."""
        if not avatar_url or not avatar_url.startswith(AVATAR_URL_PREFIX):
            return
        path = self.base_dir / Path(avatar_url[len(AVATAR_URL_PREFIX):]).name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not delete old avatar %s: %s", path, e)
