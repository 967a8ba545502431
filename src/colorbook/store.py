"""
Key-value persistence for drawings, addressed by picture identity.

The rest of the package only relies on the `DrawingStore` interface. Values
are opaque bytes (codec output); the store never inspects them.
"""

from __future__ import annotations

import hashlib
import os
from logging import getLogger
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = getLogger(__name__)

SAFE_ID_CHARS = "-_."
DRAWING_SUFFIX = ".cbr"


class StoreError(RuntimeError):
    """A drawing could not be read, written or removed."""


class DrawingStore(Protocol):
    def get(self, picture_id: str) -> Optional[bytes]:
        ...

    def put(self, picture_id: str, data: bytes) -> None:
        ...

    def delete(self, picture_id: str) -> bool:
        ...


class MemoryDrawingStore:
    def __init__(self) -> None:
        self._items: Dict[str, bytes] = {}

    def get(self, picture_id: str) -> Optional[bytes]:
        return self._items.get(picture_id)

    def put(self, picture_id: str, data: bytes) -> None:
        self._items[picture_id] = bytes(data)

    def delete(self, picture_id: str) -> bool:
        return self._items.pop(picture_id, None) is not None

    def exists(self, picture_id: str) -> bool:
        return picture_id in self._items


class FileDrawingStore:
    """One file per picture identity under `root`.

    Writes go to a hidden temporary file that is renamed over the target, so a
    failed `put` leaves the previous drawing intact.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, picture_id: str) -> Path:
        safe_name = "".join(c if c.isalnum() or c in SAFE_ID_CHARS else "_" for c in picture_id).strip("._")
        digest = hashlib.md5(picture_id.encode("utf-8")).hexdigest()[:8]
        return self.root / f"{safe_name or 'picture'}-{digest}{DRAWING_SUFFIX}"

    def get(self, picture_id: str) -> Optional[bytes]:
        path = self._path_for(picture_id)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"could not read drawing {picture_id!r}: {exc}") from exc

    def put(self, picture_id: str, data: bytes) -> None:
        path = self._path_for(picture_id)
        tmp_path = path.with_name(f".{path.name}.tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as exc:
            try:
                tmp_path.unlink()
            except OSError:
                pass
            raise StoreError(f"could not save drawing {picture_id!r}: {exc}") from exc
        logger.debug("Stored %d bytes for %s at %s", len(data), picture_id, path)

    def delete(self, picture_id: str) -> bool:
        path = self._path_for(picture_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StoreError(f"could not delete drawing {picture_id!r}: {exc}") from exc
        return True

    def exists(self, picture_id: str) -> bool:
        return self._path_for(picture_id).exists()
