"""
Filesystem-backed object storage.
Buckets are directories under a root; keys are paths inside them.
"""
import asyncio
from pathlib import Path
import logging

from ..core.interfaces import IObjectFetcher
from ..core.errors import FetchError

logger = logging.getLogger(__name__)


class LocalObjectFetcher(IObjectFetcher):
    """Reads overlay objects from ``root/bucket/key``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _resolve(self, bucket: str, key: str) -> Path:
        if not bucket or not key:
            raise FetchError("Bucket and key are required", status=400, code="InvalidRequest")
        root = self.root.resolve()
        bucket_dir = (root / bucket).resolve()
        if root not in bucket_dir.parents:
            raise FetchError(f"Bucket escapes storage root: {bucket}", status=403, code="AccessDenied")
        path = (bucket_dir / key).resolve()
        if bucket_dir not in path.parents:
            raise FetchError(f"Key escapes bucket: {bucket}/{key}", status=403, code="AccessDenied")
        return path

    async def fetch(self, bucket: str, key: str) -> bytes:
        path = self._resolve(bucket, key)
        if not path.is_file():
            raise FetchError(f"The specified key does not exist: {bucket}/{key}", status=404, code="NoSuchKey")
        logger.debug(f"Reading {path}")
        return await asyncio.to_thread(path.read_bytes)
