# logitrack/storage/local_provider.py
"""
Local filesystem storage for development and tests.
Files land under LOCAL_STORAGE_DIR and are served back by GET /api/v1/files/{path}.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote, urlparse

from logitrack.storage.provider import StorageProvider
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)

FILES_ROUTE = "/api/v1/files/"


class LocalStorageProvider(StorageProvider):
    def __init__(self, base_dir: str = "var/storage", public_base_url: str = "http://localhost:8080"):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def resolve(self, key: str) -> Path:
        """Filesystem path for a storage key. Keys never escape base_dir."""
        clean_key = key.lstrip("/").replace("\\", "/")
        path = (self.base_dir / clean_key).resolve()
        if self.base_dir.resolve() not in path.parents:
            raise ValueError(f"Invalid storage key: {key}")
        return path

    def upload(self, data, path, content_type="application/octet-stream"):
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info(f"[STORAGE] Saved {len(data)} bytes to {target}")
        return f"{self.public_base_url}{FILES_ROUTE}{quote(path.lstrip('/'))}"

    def _key_from_url(self, url: str) -> Optional[str]:
        if not url.startswith(self.public_base_url):
            return None
        route = urlparse(url).path
        if not route.startswith(FILES_ROUTE):
            return None
        return unquote(route[len(FILES_ROUTE):])

    async def fetch(self, url):
        key = self._key_from_url(url)
        if key is None:
            return await super().fetch(url)
        return self.resolve(key).read_bytes()
