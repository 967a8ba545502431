"""
Exact-match flood fill over a `RasterImage`.

The region is grown breadth-first through 4-connected neighbours (no
diagonals) whose color is byte-for-byte equal to the target color. Any other
pixel, outline strokes included, stops propagation and is left untouched.
"""

from __future__ import annotations

import sys
from collections import deque
from dataclasses import dataclass
from logging import getLogger
from typing import Optional

from colorbook.raster import Color, Point, RasterImage

logger = getLogger(__name__)

SKIP_OUT_OF_BOUNDS = "out_of_bounds"
SKIP_SAME_COLOR = "same_color"
SKIP_STALE_TARGET = "stale_target"


@dataclass(frozen=True)
class FillRequest:
    seed: Point
    target: Color
    fill: Color


def _pack(color: Color) -> int:
    # Matches the layout of one pixel viewed through a native uint32 cast.
    return int.from_bytes(bytes(color), sys.byteorder)


def fill_skip_reason(image: RasterImage, seed: Point, target: Color, fill: Color) -> Optional[str]:
    """Return why a fill would be a no-op, or None when it would paint."""
    x, y = seed
    if not image.in_bounds(x, y):
        return SKIP_OUT_OF_BOUNDS
    if tuple(target) == tuple(fill):
        return SKIP_SAME_COLOR
    if image.get_pixel(x, y) != tuple(target):
        return SKIP_STALE_TARGET
    return None


def _fill_region(image: RasterImage, start: int, target: Color, fill: Color) -> int:
    width, height = image.size
    last_x = width - 1
    last_y = height - 1
    target_word = _pack(target)
    fill_word = _pack(fill)
    visited = bytearray(width * height)
    filled = 1

    with memoryview(image.pixels) as raw, raw.cast("I") as words:
        words[start] = fill_word
        visited[start] = 1
        queue = deque([start])
        while queue:
            index = queue.popleft()
            cy, cx = divmod(index, width)
            for neighbour, inside in (
                (index + 1, cx < last_x),
                (index - 1, cx > 0),
                (index + width, cy < last_y),
                (index - width, cy > 0),
            ):
                if not inside or visited[neighbour]:
                    continue
                if words[neighbour] != target_word:
                    continue
                words[neighbour] = fill_word
                visited[neighbour] = 1
                filled += 1
                queue.append(neighbour)
    return filled


def flood_fill(image: RasterImage, seed: Point, target: Color, fill: Color) -> RasterImage:
    """Recolor the region around `seed` matching `target` to `fill`.

    The image is mutated in place and returned. Out-of-bounds seeds, a fill
    color equal to the target, and a seed pixel that no longer matches the
    target are all no-ops.
    """
    reason = fill_skip_reason(image, seed, target, fill)
    if reason is not None:
        logger.debug("Fill at %s skipped: %s", seed, reason)
        return image

    x, y = seed
    filled = _fill_region(image, y * image.width + x, tuple(target), tuple(fill))
    logger.debug("Filled %d pixels from %s", filled, seed)
    return image


def apply_fill(image: RasterImage, request: FillRequest) -> RasterImage:
    return flood_fill(image, request.seed, request.target, request.fill)
