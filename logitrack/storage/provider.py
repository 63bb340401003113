# logitrack/storage/provider.py

import time

import httpx


def build_path(prefix: str, folder: str, filename: str) -> str:
    """<prefix>/<folder>/<millis>_<filename>, the layout used for every upload."""
    return f"{prefix}/{folder}/{int(time.time() * 1000)}_{filename}"


class StorageProvider:
    def upload(self, data: bytes, path: str, content_type: str = "application/octet-stream") -> str:
        """Store `data` under `path` and return a publicly resolvable URL."""
        raise NotImplementedError

    async def fetch(self, url: str) -> bytes:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content
