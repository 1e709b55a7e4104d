# ============================================================================
# FILE: vidtube/core/asset_store.py
# ============================================================================
"""
Remote storage for binary assets (avatars, cover images, videos, thumbnails).

The rest of the application only sees the ``AssetStore`` protocol. The
production implementation goes through the Cloudinary SDK.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol
from urllib.parse import urlparse

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from vidtube.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadedAsset:
    url: str
    public_id: Optional[str] = None
    duration: Optional[float] = None


class AssetStore(Protocol):
    def upload(self, local_path: Optional[str]) -> Optional[UploadedAsset]:
        """Upload a local file and remove it from disk; None on failure"""
        ...

    def delete(self, url: Optional[str], kind: str = "image") -> bool:
        """Delete a previously uploaded asset; False on failure"""
        ...


def remove_local_file(local_path: Optional[str]) -> None:
    if local_path and os.path.exists(local_path):
        try:
            os.remove(local_path)
        except OSError as e:
            logger.error(f"Could not remove temp file {local_path}: {e}")


def public_id_from_url(url: str) -> str:
    """https://res.cloudinary.com/demo/image/upload/v1/abc.png -> abc"""
    last_segment = urlparse(url).path.rstrip("/").split("/")[-1]
    return last_segment.split(".")[0]


class CloudinaryAssetStore:
    """AssetStore backed by the Cloudinary uploader"""

    def __init__(self, settings: Settings):
        self.timeout = settings.ASSET_STORE_TIMEOUT
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True,
        )

    def upload(self, local_path: Optional[str]) -> Optional[UploadedAsset]:
        if not local_path:
            return None

        try:
            result = cloudinary.uploader.upload(local_path, resource_type="auto", timeout=self.timeout)
            url = result.get("secure_url") or result.get("url")
            if not url:
                logger.error("Asset upload returned no url")
                return None
            logger.info(f"Asset uploaded: {result.get('public_id')}")
            return UploadedAsset(url=url, public_id=result.get("public_id"), duration=result.get("duration"))
        except (cloudinary.exceptions.Error, OSError) as e:
            logger.error(f"Asset upload failed for {os.path.basename(local_path)}: {e}")
            return None
        finally:
            # The local copy is only a staging area
            remove_local_file(local_path)

    def delete(self, url: Optional[str], kind: str = "image") -> bool:
        if not url:
            return False

        public_id = public_id_from_url(url)
        try:
            result = cloudinary.uploader.destroy(public_id, resource_type=kind, timeout=self.timeout)
        except cloudinary.exceptions.Error as e:
            logger.error(f"Asset delete failed for {public_id}: {e}")
            return False

        outcome = result.get("result")
        if outcome != "ok":
            logger.error(f"Asset delete for {public_id} returned {outcome!r}")
            return False
        logger.info(f"Asset deleted: {public_id}")
        return True
