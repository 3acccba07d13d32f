"""File cache for fetched datasets and derived artifacts.

Each dataset is one file named after it (``msa.json``,
``cfpbLoanData.csv`` ...) under the cache directory.  A failed read is
reported as a miss so the caller fetches again; a failed write is logged
and otherwise ignored.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)


class DatasetCache:
    """Read-or-fetch-and-write cache keyed by dataset name. Single writer."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        return self.directory / name

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------
    def read_text(self, name: str) -> str | None:
        path = self.path_for(name)
        if not path.is_file():
            logger.info("[CACHE] Cache miss: %s", path)
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("[CACHE] Could not read %s: %s", path, e)
            return None
        logger.info("[CACHE] Cache hit: %s", path)
        return text

    def write_text(self, name: str, text: str) -> bool:
        path = self.path_for(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.warning("[CACHE] Could not write %s: %s", path, e)
            return False
        logger.info("[CACHE] Saved %s", path)
        return True

    # ------------------------------------------------------------------
    # JSON
    # ------------------------------------------------------------------
    def read_json(self, name: str) -> Any | None:
        text = self.read_text(name)
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("[CACHE] Invalid JSON in %s: %s", self.path_for(name), e)
            return None

    def write_json(self, name: str, data: Any) -> bool:
        return self.write_text(name, json.dumps(data))

    # ------------------------------------------------------------------
    # Read-or-fetch
    # ------------------------------------------------------------------
    def get_or_fetch_text(self, name: str, fetch: Callable[[], str]) -> str:
        """Return the cached text, or call ``fetch`` and cache its result.

        Errors raised by ``fetch`` propagate.
        """
        text = self.read_text(name)
        if text is not None:
            return text
        text = fetch()
        self.write_text(name, text)
        return text

    def get_or_fetch_json(self, name: str, fetch: Callable[[], Any]) -> Any:
        data = self.read_json(name)
        if data is not None:
            return data
        data = fetch()
        self.write_json(name, data)
        return data
