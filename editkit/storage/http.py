"""
HTTP object storage, e.g. a static file server or a public bucket endpoint.
"""
from typing import Optional
from urllib.parse import quote
import httpx
import logging

from ..core.interfaces import IObjectFetcher
from ..core.errors import FetchError

logger = logging.getLogger(__name__)

STATUS_CODES = {
    403: "AccessDenied",
    404: "NoSuchKey",
}


class HttpObjectFetcher(IObjectFetcher):
    """
    Fetches objects with GET ``{base_url}/{bucket}/{key}``.

    A client can be injected to share connection pools or, in tests, to use
    a mock transport. Otherwise a client is opened per fetch.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    def url_for(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/{quote(bucket, safe='')}/{quote(key.lstrip('/'))}"

    async def fetch(self, bucket: str, key: str) -> bytes:
        if not bucket or not key:
            raise FetchError("Bucket and key are required", status=400, code="InvalidRequest")
        url = self.url_for(bucket, key)
        try:
            if self.client is not None:
                response = await self.client.get(url, timeout=self.timeout, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise FetchError(str(e) or f"Request to {url} failed", code=type(e).__name__) from e

        if response.is_error:
            code = STATUS_CODES.get(response.status_code, "HTTPError")
            raise FetchError(
                f"GET {url} returned {response.status_code}",
                status=response.status_code,
                code=code
            )
        return response.content
