"""Storage service for handling Supabase storage operations."""

from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import StorageError
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class StorageService:
    """Service for managing files in the Supabase documents bucket."""

    def __init__(self, bucket: Optional[str] = None):
        self.url = settings.supabase_url.rstrip("/")
        self.service_role_key = settings.supabase_service_role_key
        self.bucket = bucket or settings.storage_bucket
        self.base_api_url = f"{self.url}/storage/v1"
        self.headers = {
            "Authorization": f"Bearer {self.service_role_key}",
            "apikey": self.service_role_key,
        }

    def _check(self, response: httpx.Response, action: str, path: str) -> None:
        if response.status_code != 200:
            LOGGER.error(
                f"Storage {action} failed: {response.text}",
                extra={"bucket": self.bucket, "path": path, "status_code": response.status_code}
            )
            raise StorageError(f"Storage {action} failed: {response.text}")

    async def upload_file(
        self,
        content: bytes,
        path: str,
        content_type: str = "application/octet-stream",
        upsert: bool = False,
    ) -> Dict[str, Any]:
        """Upload bytes to the bucket.

        Args:
            content: File content
            path: Target path within the bucket
            content_type: MIME type stored with the object
            upsert: Overwrite an existing object at the same path

        Returns:
            The storage API response (contains ``Key``)

        Raises:
            StorageError: If the upload fails
        """
        upload_url = f"{self.base_api_url}/object/{self.bucket}/{path}"
        headers = {**self.headers, "Content-Type": content_type}
        if upsert:
            headers["x-upsert"] = "true"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    upload_url,
                    headers=headers,
                    content=content,
                    timeout=settings.http_timeout
                )
        except httpx.HTTPError as e:
            LOGGER.error(f"Error uploading file to Supabase: {str(e)}", exc_info=True)
            raise StorageError(f"Storage upload error: {str(e)}", original_error=e)

        self._check(response, "upload", path)
        LOGGER.info(f"Uploaded {path} ({len(content)} bytes) to bucket {self.bucket}")
        return response.json()

    async def download_file(self, path: str) -> bytes:
        """Download an object's bytes.

        Raises:
            StorageError: If the object cannot be fetched
        """
        url = f"{self.base_api_url}/object/{self.bucket}/{path}"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, headers=self.headers, timeout=settings.http_timeout)
        except httpx.HTTPError as e:
            LOGGER.error(f"Error downloading file from Supabase: {str(e)}", exc_info=True)
            raise StorageError(f"Storage download error: {str(e)}", original_error=e)

        self._check(response, "download", path)
        return response.content

    async def list_files(self, prefix: str = "", limit: int = 100) -> List[Dict[str, Any]]:
        """List objects under a folder prefix."""
        url = f"{self.base_api_url}/object/list/{self.bucket}"
        payload = {
            "prefix": prefix,
            "limit": limit,
            "offset": 0,
            "sortBy": {"column": "name", "order": "asc"},
        }
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url, headers=self.headers, json=payload, timeout=settings.http_timeout
                )
        except httpx.HTTPError as e:
            LOGGER.error(f"Error listing Supabase storage: {str(e)}", exc_info=True)
            raise StorageError(f"Storage list error: {str(e)}", original_error=e)

        self._check(response, "list", prefix)
        return response.json()


def get_storage_service() -> StorageService:
    return StorageService()
