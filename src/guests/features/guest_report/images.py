import io
import logging
from dataclasses import dataclass

import httpx
from PIL import Image

from src.config.settings import settings

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90


class ImageLoadError(Exception):
    """Raised when an ID image cannot be fetched or decoded."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load image {url}: {reason}")


@dataclass(frozen=True)
class LoadedImage:
    """An image re-encoded as JPEG, ready to embed in a PDF."""

    data: bytes
    width: int
    height: int


def decode_image(content: bytes, url: str = "<bytes>") -> LoadedImage:
    try:
        with Image.open(io.BytesIO(content)) as image:
            rgb = image.convert("RGB")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise ImageLoadError(url, f"not a readable image ({e})") from e

    output = io.BytesIO()
    rgb.save(output, format="JPEG", quality=JPEG_QUALITY)
    return LoadedImage(data=output.getvalue(), width=rgb.width, height=rgb.height)


class ImageLoader:
    """Fetches images by URL over HTTP and decodes them with Pillow."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        timeout: float | None = None,
    ) -> None:
        self._http_client_class = http_client_class
        self._timeout = timeout if timeout is not None else settings.report_image_timeout

    async def load(self, url: str) -> LoadedImage:
        try:
            async with self._http_client_class(
                timeout=self._timeout, follow_redirects=True
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Fetching report image %s failed: %s", url, e)
            raise ImageLoadError(url, str(e) or e.__class__.__name__) from e

        return decode_image(response.content, url)
