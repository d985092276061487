"""
File Storage Service
Uploaded documents and images kept on local disk, referenced by URL
"""
from pathlib import Path
from typing import Optional
import logging
import uuid

from fastapi import UploadFile

from aby_api.core.config import settings
from aby_api.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PROFILE_IMAGES = "profile_images"
CV_FILES = "cv_files"
APPLICATION_LETTERS = "application_letters"
ATTACHMENT_IMAGES = "attachment_images"
ASSET_IMAGES = "asset_images"


class FileStorage:
    """Saves uploads under UPLOAD_DIR/<folder>/ and serves them at UPLOAD_URL_PREFIX"""

    def __init__(self, base_dir: Optional[Path] = None, url_prefix: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.UPLOAD_DIR)
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    async def save(self, upload: UploadFile, folder: str) -> str:
        """Store an upload and return its public URL"""
        content = await upload.read()
        if not content:
            raise ValidationError(f"Uploaded file {upload.filename} is empty")
        if len(content) > settings.MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"File {upload.filename} exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit"
            )

        target_dir = self.base_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)

        suffix = Path(upload.filename or "").suffix.lower()
        filename = f"{uuid.uuid4().hex}{suffix}"
        (target_dir / filename).write_bytes(content)

        url = f"{self.url_prefix}/{folder}/{filename}"
        logger.info(f"Stored upload {upload.filename} as {url}")
        return url

    def delete(self, url: Optional[str]) -> bool:
        """Remove a previously stored file; unknown or missing files are ignored"""
        path = self.path_for(url)
        if path is None or not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.warning(f"Could not delete {path}: {e}")
            return False
        logger.info(f"Deleted upload {url}")
        return True

    def path_for(self, url: Optional[str]) -> Optional[Path]:
        if not url or not url.startswith(f"{self.url_prefix}/"):
            return None
        relative = url[len(self.url_prefix) + 1:]
        base = self.base_dir.resolve()
        path = (base / relative).resolve()
        if base not in path.parents:
            return None
        return path
