# shopcart/database.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

from pydantic import TypeAdapter, ValidationError

from .errors import StorageUnavailableError
from .models import LineItem

# The persistence slot: one named text blob per key, overwritten wholesale on save.

logger = logging.getLogger(__name__)

_LINE_ITEMS = TypeAdapter(List[LineItem])


class StorageSlot(Protocol):
    """
    get returns None when the key has never been written. Implementations
    should raise StorageUnavailableError on failure; CartStore wraps anything
    else it gets from a slot into one.
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process slot, used by tests and the HTTP server when no file is wanted."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStorage:
    """
    Slot backed by a JSON file. Only one key is held per file; the key is kept
    so a slot written under one name is not picked up under another.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def get(self, key: str) -> Optional[str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning("Discarding cart file %s, not valid UTF-8: %s", self.path, e)
            return None
        except OSError as e:
            logger.error("Could not read %s: %s", self.path, e)
            raise StorageUnavailableError(key, str(e)) from e

        try:
            envelope = json.loads(raw)
        except ValueError:
            # not ours to interpret, hand it to the snapshot decoder as-is
            return raw
        if isinstance(envelope, dict) and "key" in envelope:
            if envelope.get("key") != key:
                return None
            value = envelope.get("value")
            return value if isinstance(value, str) else None
        return raw

    def set(self, key: str, value: str) -> None:
        payload = json.dumps({"key": key, "value": value})
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as e:
            logger.error("Could not write %s: %s", self.path, e)
            raise StorageUnavailableError(key, str(e)) from e


# ---------------------------
# Snapshot codec
# ---------------------------
def encode_snapshot(items: List[LineItem]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items])


def decode_snapshot(raw: Optional[str]) -> List[LineItem]:
    """
    Parse a persisted snapshot. Absent or malformed input gives an empty list;
    a malformed snapshot is dropped whole, never partially restored.
    """
    if raw is None or not raw.strip():
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Discarding cart snapshot, not valid JSON: %s", e)
        return []
    if not isinstance(data, list):
        logger.warning("Discarding cart snapshot, expected a list, got %s", type(data).__name__)
        return []
    try:
        items = _LINE_ITEMS.validate_python(data)
    except ValidationError as e:
        logger.warning("Discarding cart snapshot, %d invalid field(s)", e.error_count())
        return []

    ids = [item.id for item in items]
    if len(ids) != len(set(ids)):
        logger.warning("Discarding cart snapshot, duplicate product ids")
        return []
    return items
