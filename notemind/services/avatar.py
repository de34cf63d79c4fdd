"""Avatar upload validation and storage."""

import os
import uuid
from pathlib import Path

from fastapi import UploadFile

from notemind.config import Settings

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
AVATAR_SUBDIR = "avatars"
AVATAR_URL_PREFIX = "/uploads/avatars"


class AvatarService:
    """Stores profile pictures under the upload directory."""

    def __init__(self, settings: Settings) -> None:
        self.upload_dir = Path(settings.UPLOAD_DIR)
        self.max_size_mb = settings.MAX_AVATAR_SIZE_MB

    def validate_upload_metadata(self, filename: str, content_type: str | None) -> str | None:
        """Validate upload file metadata (extension + MIME). Returns error message or None if valid."""
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            return f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}"

        if content_type and not content_type.startswith("image/"):
            return f"Invalid content type '{content_type}'. Must be an image file."

        return None

    async def store_file(self, upload: UploadFile) -> str:
        """Stream uploaded image to disk with size limit. Returns the public URL.

        Raises ValueError if file exceeds max upload size.
        """
        max_bytes = self.max_size_mb * 1024 * 1024
        ext = Path(upload.filename or "avatar.png").suffix.lower()
        stored_filename = f"{uuid.uuid4()}{ext}"
        avatar_dir = self.upload_dir / AVATAR_SUBDIR
        avatar_dir.mkdir(parents=True, exist_ok=True)

        file_path = avatar_dir / stored_filename
        file_size = 0
        chunk_size = 1024 * 64

        try:
            with open(file_path, "wb") as f:
                while True:
                    chunk = await upload.read(chunk_size)
                    if not chunk:
                        break
                    file_size += len(chunk)
                    if file_size > max_bytes:
                        raise ValueError(f"File too large. Maximum: {self.max_size_mb}MB")
                    f.write(chunk)
        except ValueError:
            if file_path.exists():
                os.remove(file_path)
            raise

        return f"{AVATAR_URL_PREFIX}/{stored_filename}"
