import logging
from abc import ABC, abstractmethod
from typing import Protocol

import httpx

from src.config.settings import settings

logger = logging.getLogger(__name__)


class ObjectStoreError(Exception):
    """Raised when an upload to the object store fails."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Error uploading document: {reason}")


class ObjectStoreConfig(Protocol):
    storage_url: str
    storage_bucket: str
    storage_api_key: str


def public_url_prefix(config: ObjectStoreConfig = settings) -> str:
    """Every object the store serves publicly lives under this prefix."""
    return f"{config.storage_url.rstrip('/')}/object/public/{config.storage_bucket}/"


def is_public_object_url(url: str, config: ObjectStoreConfig = settings) -> bool:
    """True for a URL naming an object of the store, without path traversal."""
    prefix = public_url_prefix(config)
    if not url.startswith(prefix):
        return False
    path = url[len(prefix):].split("?", 1)[0]
    return bool(path) and ".." not in path.split("/") and "\\" not in path


class ObjectStore(ABC):
    @abstractmethod
    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store `content` under `path` and return its public URL."""
        raise NotImplementedError


class HttpObjectStore(ObjectStore):
    """Object store speaking the storage HTTP API (`/object/{bucket}/{path}`)."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        config: ObjectStoreConfig = settings,
    ) -> None:
        self._http_client_class = http_client_class
        self._config = config

    @property
    def _base_url(self) -> str:
        return self._config.storage_url.rstrip("/")

    def public_url(self, path: str) -> str:
        return f"{public_url_prefix(self._config)}{path}"

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        upload_url = f"{self._base_url}/object/{self._config.storage_bucket}/{path}"
        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    upload_url,
                    headers={
                        "Authorization": f"Bearer {self._config.storage_api_key}",
                        "Content-Type": content_type,
                    },
                    content=content,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Upload of %s failed: %s", path, e)
            raise ObjectStoreError(path, str(e) or e.__class__.__name__) from e

        logger.info("Uploaded %s (%d bytes)", path, len(content))
        return self.public_url(path)


def get_object_store() -> ObjectStore:
    """Factory for the object store. Override in tests."""
    return HttpObjectStore(http_client_class=httpx.AsyncClient, config=settings)
