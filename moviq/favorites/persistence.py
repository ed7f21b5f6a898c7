"""String-keyed durable storage backends for the favorites snapshot.

The contract mirrors a browser ``localStorage``: every slot holds a string and
the caller owns serialisation. :class:`JsonFileStorage` keeps all slots in a
single JSON object on disk; :class:`MemoryStorage` is the in-process variant
used by tests and ephemeral sessions.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class StorageCorruptedError(Exception):
    """Raised when the backing file cannot be interpreted as a slot mapping."""


class LocalStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dictionary-backed storage that disappears with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._slots: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._slots[key] = value

    def remove_item(self, key: str) -> None:
        self._slots.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._slots


class JsonFileStorage:
    """Persist slots as a JSON object in ``path``.

    The file is read once, on first access, and rewritten atomically (write to
    a sibling temporary file, then ``os.replace``) on every mutation so that a
    crash mid-write never leaves a truncated snapshot behind.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._slots: dict[str, str] | None = None

    def _load(self) -> dict[str, str]:
        if self._slots is not None:
            return self._slots

        if not self.path.exists():
            self._slots = {}
            return self._slots

        # I/O errors propagate untouched; only malformed content is corruption.
        content = self.path.read_bytes()
        try:
            raw = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageCorruptedError(f"Unable to read {self.path}: {exc}") from exc

        if not isinstance(raw, dict) or not all(
            isinstance(value, str) for value in raw.values()
        ):
            raise StorageCorruptedError(
                f"{self.path} does not contain a mapping of string slots"
            )

        self._slots = {str(key): value for key, value in raw.items()}
        return self._slots

    def _load_or_reset(self) -> dict[str, str]:
        try:
            return self._load()
        except StorageCorruptedError as exc:
            logger.warning("Discarding malformed storage file: %s", exc)
            self._slots = {}
            return self._slots

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(self._slots or {}, ensure_ascii=False, indent=2)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        """Return the slot value or ``None``.

        Raises:
            StorageCorruptedError: If the backing file holds malformed content.
            OSError: If the backing file cannot be read at all.
        """

        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        slots = self._load_or_reset()
        slots[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        slots = self._load_or_reset()
        slots.pop(key, None)
        self._flush()


__all__ = [
    "JsonFileStorage",
    "LocalStorage",
    "MemoryStorage",
    "StorageCorruptedError",
]
