"""
Media upload client for Cloudinary.

Incoming multipart files are first staged on local disk, then pushed to the
Cloudinary upload REST API:
    POST {cloudinary_upload_url}/{cloud_name}/auto/upload

Requests are signed: signature = sha1("timestamp=<ts>" + api_secret).
The staged file is always removed once the upload attempt is over.
"""
import hashlib
import logging
import time
from pathlib import Path
from typing import Any, Optional
from uuid import uuid4

import httpx
from fastapi import UploadFile

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


async def save_upload(file: Optional[UploadFile]) -> Optional[str]:
    """
    Stage an uploaded file under the configured temp directory.

    Args:
        file: Incoming multipart file (may be None or empty)

    Returns:
        Local path of the staged file, or None if no file was sent
    """
    if file is None or not file.filename:
        return None

    temp_dir = Path(get_settings().upload_temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    local_path = temp_dir / f"{uuid4().hex}{Path(file.filename).suffix}"
    local_path.write_bytes(await file.read())
    return str(local_path)


def remove_local_file(local_path: Optional[str]) -> None:
    """Delete a staged file if it is still there."""
    if local_path:
        Path(local_path).unlink(missing_ok=True)


class CloudinaryUploader:
    """
    Async client for the Cloudinary upload API.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize uploader; `transport` lets tests stub the HTTP layer."""
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        s = self.settings
        return bool(s.cloudinary_cloud_name and s.cloudinary_api_key and s.cloudinary_api_secret)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=60.0,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def sign(self, params: dict[str, str]) -> str:
        """Cloudinary signature: sha1 over sorted `k=v&...` params plus the API secret."""
        to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
        return hashlib.sha1(
            f"{to_sign}{self.settings.cloudinary_api_secret}".encode()
        ).hexdigest()

    async def upload(self, local_path: Optional[str]) -> Optional[dict[str, Any]]:
        """
        Upload a staged file and remove it from disk.

        Args:
            local_path: Path returned by `save_upload`

        Returns:
            Cloudinary response dict (contains `url` and `secure_url`),
            or None if there was nothing to upload or the upload failed
        """
        if not local_path:
            return None

        path = Path(local_path)
        try:
            if not self.is_configured:
                logger.error("Cloudinary credentials are not configured")
                return None

            params = {"timestamp": str(int(time.time()))}
            data = {
                **params,
                "api_key": self.settings.cloudinary_api_key,
                "signature": self.sign(params),
            }
            url = (
                f"{self.settings.cloudinary_upload_url}/"
                f"{self.settings.cloudinary_cloud_name}/auto/upload"
            )

            client = await self._get_client()
            with path.open("rb") as fh:
                response = await client.post(
                    url, data=data, files={"file": (path.name, fh)}
                )
            response.raise_for_status()
            result = response.json()
            logger.info("Uploaded %s to %s", path.name, result.get("url"))
            return result
        except (httpx.HTTPError, OSError, ValueError) as e:
            logger.error("Upload of %s failed: %s", path.name, e)
            return None
        finally:
            remove_local_file(local_path)


# Singleton instance for shared use
_uploader: Optional[CloudinaryUploader] = None


async def get_media_uploader() -> CloudinaryUploader:
    """Get shared CloudinaryUploader instance."""
    global _uploader
    if _uploader is None:
        _uploader = CloudinaryUploader()
    return _uploader


async def upload_on_cloudinary(local_path: Optional[str]) -> Optional[dict[str, Any]]:
    """Upload a staged file with the shared uploader."""
    uploader = await get_media_uploader()
    return await uploader.upload(local_path)


async def close_media_uploader() -> None:
    """Close the shared uploader's HTTP client."""
    global _uploader
    if _uploader is not None:
        await _uploader.close()
        _uploader = None
