# linkcop/crawler/cache.py
"""
On-disk cache of GET responses: ``<key>.bin`` holds the body,
``<key>.json`` the status, final URL and headers.
"""
from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from linkcop.logger import logger


@dataclass(slots=True, frozen=True)
class CachedResponse:
    url: str
    final_url: str
    status: int
    headers: Dict[str, str]
    body: bytes
    fetched_at: float


class ResponseCache:
    """Flat directory of cached responses keyed by sha256 of the URL."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir

    @classmethod
    def open(cls, cache_dir: Union[str, Path]) -> Optional[ResponseCache]:
        """Create the directory if needed; None (no caching) when that fails."""
        path = Path(cache_dir).expanduser()
        try:
            path.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Cannot create cache dir %s because %s; caching disabled", path, exc)
            return None
        return cls(path)

    def _paths(self, url: str) -> tuple[Path, Path]:
        key = hashlib.sha256(url.encode("utf-8")).hexdigest()
        return self.cache_dir / f"{key}.bin", self.cache_dir / f"{key}.json"

    def load(self, url: str) -> Optional[CachedResponse]:
        body_path, meta_path = self._paths(url)
        if not body_path.exists() or not meta_path.exists():
            return None
        try:
            meta = json.loads(meta_path.read_text(encoding="utf-8"))
            body = body_path.read_bytes()
        except (OSError, json.JSONDecodeError) as exc:
            logger.debug("Ignoring broken cache entry for %s: %s", url, exc)
            return None
        return CachedResponse(
            url=url,
            final_url=meta.get("final_url", url),
            status=int(meta.get("status", 0)),
            headers=dict(meta.get("headers", {})),
            body=body,
            fetched_at=float(meta.get("fetched_at", 0.0)),
        )

    def store(self, url: str, final_url: str, status: int, headers: Dict[str, str], body: bytes) -> None:
        body_path, meta_path = self._paths(url)
        meta = {
            "url": url,
            "final_url": final_url,
            "status": status,
            "headers": headers,
            "fetched_at": time.time(),
        }
        try:
            body_path.write_bytes(body)
            meta_path.write_text(json.dumps(meta, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as exc:
            logger.warning("Cannot write cache entry for %s: %s", url, exc)
