"""
Blob storage for testimonial media

Files live under settings.UPLOAD_DIR and are served by the static mount at
/uploads, so a stored path maps directly onto its public URL.
"""
import logging
import os
import posixpath
import shutil
import time
from typing import BinaryIO, Dict, Optional

from praisewall.config.settings import settings

logger = logging.getLogger(__name__)

MEDIA_KINDS = ("image", "video")


class StorageError(Exception):
    pass


class BlobStorage:
    def __init__(self, root: Optional[str] = None, public_base_url: Optional[str] = None):
        self.root = root or settings.UPLOAD_DIR
        self.public_base_url = (public_base_url or settings.PUBLIC_BASE_URL).rstrip("/")

    def _resolve(self, path: str) -> str:
        clean = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
        if clean.startswith("..") or clean in ("", "."):
            raise StorageError(f"Invalid storage path: {path}")
        return os.path.join(self.root, *clean.split("/"))

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/uploads/{path.lstrip('/')}"

    def upload(self, file: BinaryIO, path: str, upsert: bool = False) -> Dict[str, str]:
        """Write file at path and return {"public_url", "path"}.

        Without upsert an existing object at path is an error.
        """
        destination = self._resolve(path)
        if os.path.exists(destination) and not upsert:
            raise StorageError(f"Object already exists: {path}")
        os.makedirs(os.path.dirname(destination), exist_ok=True)
        with open(destination, "wb") as buffer:
            shutil.copyfileobj(file, buffer)
        logger.info("Stored upload at %s", path)
        return {"public_url": self.public_url(path), "path": path}


def safe_filename(filename: Optional[str]) -> str:
    name = os.path.basename((filename or "upload").replace("\\", "/"))
    name = "".join(c if c.isalnum() or c in "._-" else "_" for c in name)
    return name or "upload"


def media_path(kind: str, filename: Optional[str]) -> str:
    """testimonials/<kind>s/<millis>_<filename>"""
    return f"testimonials/{kind}s/{int(time.time() * 1000)}_{safe_filename(filename)}"
