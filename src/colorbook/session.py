from __future__ import annotations

import threading
import weakref
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Optional, Tuple

import pygame

from colorbook.codec import DecodeError, decode, encode, save_png
from colorbook.compositor import compose_snapshot
from colorbook.fill import SKIP_OUT_OF_BOUNDS, fill_skip_reason, flood_fill
from colorbook.outline import harden_outline
from colorbook.raster import WHITE, Color, Point, RasterImage
from colorbook.store import DrawingStore

logger = getLogger(__name__)


class PictureLock:
    """Mutex for one picture identity; held by every session on that picture."""

    def __init__(self, picture_id: str) -> None:
        self.picture_id = picture_id
        self._lock = threading.Lock()

    def __enter__(self) -> "PictureLock":
        self._lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()


# Entries disappear once no session holds the lock.
_PICTURE_LOCKS: weakref.WeakValueDictionary[str, PictureLock] = weakref.WeakValueDictionary()
_PICTURE_LOCKS_GUARD = threading.Lock()


def picture_lock(picture_id: str) -> PictureLock:
    """Return the lock that serializes fill-and-persist work for one picture."""
    with _PICTURE_LOCKS_GUARD:
        lock = _PICTURE_LOCKS.get(picture_id)
        if lock is None:
            lock = PictureLock(picture_id)
            _PICTURE_LOCKS[picture_id] = lock
        return lock


@dataclass(frozen=True)
class FillOutcome:
    filled: bool
    reason: Optional[str] = None


class PictureSession:
    """The picture currently on screen, with its fixed canvas size and storage.

    Every fill composes a fresh snapshot from the last fill layer and the
    outline, fills it, then persists it before the next fill on the same
    picture may start.
    """

    def __init__(
        self,
        picture_id: str,
        size: Tuple[int, int],
        store: DrawingStore,
        outline: Optional[pygame.Surface] = None,
        background: Color = WHITE,
    ) -> None:
        self.picture_id = picture_id
        self.size = (int(size[0]), int(size[1]))
        self.store = store
        self.outline = harden_outline(outline) if outline is not None else None
        self.background = background
        self.fill_layer: Optional[RasterImage] = None
        self.displayed: Optional[RasterImage] = None
        self._lock = picture_lock(picture_id)

    def _read_fill_layer(self) -> Optional[RasterImage]:
        data = self.store.get(self.picture_id)
        if data is None:
            return None
        try:
            return decode(data, expected_size=self.size)
        except DecodeError as exc:
            # Stored bytes are left in place for later inspection.
            logger.warning("Ignoring saved drawing for %s: %s", self.picture_id, exc)
            return None

    def _compose(self) -> RasterImage:
        return compose_snapshot(self.size, self.fill_layer, self.outline, self.background)

    def _load_locked(self) -> RasterImage:
        self.fill_layer = self._read_fill_layer()
        self.displayed = self._compose()
        return self.displayed

    def load(self) -> RasterImage:
        with self._lock:
            return self._load_locked()

    def fill_at(self, seed: Point, fill: Color) -> FillOutcome:
        """Fill the region under `seed` with `fill` and persist the result.

        StoreError from the final save propagates; by then `displayed`
        already shows the filled picture.
        """
        with self._lock:
            if self.displayed is None:
                self._load_locked()
            snapshot = self._compose()
            x, y = seed
            if not snapshot.in_bounds(x, y):
                logger.debug("Tap at %s is outside %s", seed, self.size)
                return FillOutcome(False, SKIP_OUT_OF_BOUNDS)

            target = snapshot.get_pixel(x, y)
            reason = fill_skip_reason(snapshot, seed, target, fill)
            if reason is not None:
                logger.debug("Nothing to fill at %s on %s: %s", seed, self.picture_id, reason)
                return FillOutcome(False, reason)

            flood_fill(snapshot, seed, target, fill)
            self.fill_layer = snapshot
            self.displayed = snapshot
            self.store.put(self.picture_id, encode(snapshot))
            return FillOutcome(True)

    def clear(self) -> RasterImage:
        with self._lock:
            self.store.delete(self.picture_id)
            self.fill_layer = None
            self.displayed = self._compose()
            return self.displayed

    def show_blank(self) -> RasterImage:
        """Display the blank picture without touching the stored drawing."""
        with self._lock:
            self.fill_layer = None
            self.displayed = self._compose()
            return self.displayed

    def export_png(self, path: Path) -> None:
        with self._lock:
            if self.displayed is None:
                self._load_locked()
            save_png(self.displayed, path)
