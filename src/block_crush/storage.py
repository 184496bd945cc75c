"""Key/value persistence for the few values that outlive a session.

Stores never raise: a failed read returns the fallback, a failed write is
dropped. Both are logged unless the caller asks for silence.
The file store writes through a sibling temp file, so an interrupted write
leaves the previous contents in place.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Protocol


logger = logging.getLogger(__name__)

STORAGE_PREFIX = "blockCrush_"


class KeyValueStore(Protocol):
    def get(self, key: str, fallback: Any = None, silent: bool = False) -> Any:
        ...

    def set(self, key: str, value: Any, silent: bool = False) -> None:
        ...


class MemoryStore:
    """Dict-backed store; values are round-tripped through JSON like the file store."""

    def __init__(self, prefix: str = STORAGE_PREFIX) -> None:
        self.prefix = prefix
        self.data: Dict[str, str] = {}

    def get(self, key: str, fallback: Any = None, silent: bool = False) -> Any:
        raw = self.data.get(self.prefix + key)
        if raw is None:
            return fallback
        try:
            return json.loads(raw)
        except ValueError as exc:
            if not silent:
                logger.warning("storage get failed %s: %s", self.prefix + key, exc)
            return fallback

    def set(self, key: str, value: Any, silent: bool = False) -> None:
        try:
            self.data[self.prefix + key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            if not silent:
                logger.warning("storage set failed %s: %s", self.prefix + key, exc)


class JsonFileStore:
    """All keys live in one JSON object on disk."""

    def __init__(self, path: Path | str, prefix: str = STORAGE_PREFIX) -> None:
        self.path = Path(path)
        self.prefix = prefix

    def _read(self) -> Dict[str, Any]:
        with self.path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError("storage file does not hold a JSON object")
        return payload

    def get(self, key: str, fallback: Any = None, silent: bool = False) -> Any:
        full_key = self.prefix + key
        try:
            payload = self._read()
        except FileNotFoundError:
            return fallback
        except (OSError, ValueError) as exc:
            if not silent:
                logger.warning("storage get failed %s: %s", full_key, exc)
            return fallback
        return payload.get(full_key, fallback)

    def set(self, key: str, value: Any, silent: bool = False) -> None:
        full_key = self.prefix + key
        try:
            corrupt = False
            try:
                payload = self._read()
            except FileNotFoundError:
                payload = {}
            except ValueError as exc:
                if not silent:
                    logger.warning("storage file unreadable %s: %s", self.path, exc)
                corrupt = True
                payload = {}
            payload[full_key] = value
            text = json.dumps(payload, indent=2)
            if corrupt:
                # Keep the unreadable file next to the new one
                self.path.replace(self.path.with_name(self.path.name + ".corrupt"))
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            with tmp_path.open("w", encoding="utf-8") as handle:
                handle.write(text)
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            if not silent:
                logger.warning("storage set failed %s: %s", full_key, exc)
