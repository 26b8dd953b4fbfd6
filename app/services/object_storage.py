"""
Object storage client

The file tree only keeps references (file_url / thumbnail_url) to binary
content. Bytes live in an external object store reached over HTTP:

    PUT    <OBJECT_STORAGE_URL>/<owner_id>/<file_id>/<filename>   upload
    DELETE <file_url>                                             release

A 404 on release means the object is already gone and counts as released.
Only URLs under <OBJECT_STORAGE_URL>/<owner_id>/ are ever released for an owner.
"""

import uuid
from urllib.parse import unquote, urlparse

import httpx

from app.core.config import settings
from app.core.exceptions import StorageUnavailable
from app.core.logger import get_logger
from app.utils.utils_http import encode_url_path, join_url

logger = get_logger(__name__)


class ObjectStorageClient:
    """
    Client for the external object store
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            base_url: Bucket base URL (defaults to settings.OBJECT_STORAGE_URL)
            token: Bearer token sent with every request (defaults to settings.OBJECT_STORAGE_TOKEN)
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests to mock the store)
        """
        self.base_url = base_url or settings.OBJECT_STORAGE_URL
        self.token = token if token is not None else settings.OBJECT_STORAGE_TOKEN
        self.timeout = timeout or settings.OBJECT_STORAGE_TIMEOUT_SECONDS
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        return httpx.AsyncClient(headers=headers, timeout=self.timeout, transport=self.transport)

    def object_url(self, owner_id: str, file_id: uuid.UUID, filename: str) -> str:
        return join_url(self.base_url, owner_id, str(file_id), filename)

    def is_owned_url(self, owner_id: str, file_url: str) -> bool:
        """
        Whether file_url names an object inside owner_id's area of this store.
        Only such URLs are ever sent a DELETE (with the store's bearer token).
        """
        base = urlparse(self.base_url.rstrip("/"))
        url = urlparse(file_url)
        if (url.scheme, url.netloc) != (base.scheme, base.netloc) or url.params or url.query or url.fragment:
            return False

        prefix = urlparse(join_url(self.base_url, owner_id)).path + "/"
        if not url.path.startswith(prefix):
            return False

        segments = [unquote(s) for s in url.path[len(prefix) :].split("/")]
        return all(s and s not in (".", "..") and "/" not in s and "\\" not in s for s in segments)

    async def upload(
        self,
        owner_id: str,
        file_id: uuid.UUID,
        filename: str,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        """
        Upload bytes and return the URL under which they are stored

        Raises:
            StorageUnavailable: If the store rejects the upload or cannot be reached
        """
        url = self.object_url(owner_id, file_id, filename)
        headers = {"Content-Type": content_type or "application/octet-stream"}
        try:
            async with self._client() as client:
                response = await client.put(url, content=content, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to upload object, URL: {url}, status: {e.response.status_code}")
            raise StorageUnavailable(f"Object storage rejected the upload: {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Failed to upload object, URL: {url}, error: {str(e)}")
            raise StorageUnavailable("Object storage is unreachable")

        logger.info(f"Uploaded object: {url} ({len(content)} bytes)")
        return url

    async def delete(self, file_url: str) -> bool:
        """
        Release the object behind a URL

        Returns:
            True if the object is gone afterwards, False otherwise
        """
        encoded_url = encode_url_path(file_url)
        try:
            async with self._client() as client:
                response = await client.delete(encoded_url)
        except httpx.HTTPError as e:
            logger.error(f"Failed to release object, URL: {file_url}, error: {str(e)}")
            return False

        if response.status_code == httpx.codes.NOT_FOUND or response.is_success:
            return True

        logger.error(f"Failed to release object, URL: {file_url}, status: {response.status_code}")
        return False

    async def delete_many(self, file_urls: list[str]) -> tuple[list[str], list[str]]:
        """
        Release several objects, one request each

        Returns:
            (released_urls, unreleased_urls)
        """
        released: list[str] = []
        unreleased: list[str] = []
        for url in file_urls:
            if await self.delete(url):
                released.append(url)
            else:
                unreleased.append(url)
        return released, unreleased


object_storage_client = ObjectStorageClient()


def get_object_storage() -> ObjectStorageClient:
    """
    Dependency for getting the object storage client
    """
    return object_storage_client
