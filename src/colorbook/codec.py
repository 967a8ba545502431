"""
Lossless conversion between `RasterImage` and its persisted byte form.

Persisted layout (little-endian)::

    magic    4s   b"CBRI"
    version  B    FORMAT_VERSION
    layout   4s   b"RGBA"
    width    I
    height   I
    pixels   width * height * 4 bytes

Dimensions travel with the pixels, so a drawing is never reconstructed with an
assumed canvas size.
"""

from __future__ import annotations

import os
import struct
from logging import getLogger
from pathlib import Path
from typing import Optional, Tuple

import pygame

from colorbook.raster import CHANNELS, RasterImage, RasterSizeError

logger = getLogger(__name__)

MAGIC = b"CBRI"
FORMAT_VERSION = 1
LAYOUT = b"RGBA"
_HEADER = struct.Struct("<4sB4sII")


class DecodeError(ValueError):
    """Persisted bytes cannot be turned back into a RasterImage."""


def encode(image: RasterImage) -> bytes:
    header = _HEADER.pack(MAGIC, FORMAT_VERSION, LAYOUT, image.width, image.height)
    return header + bytes(image.pixels)


def decode(data: bytes, expected_size: Optional[Tuple[int, int]] = None) -> RasterImage:
    """Rebuild a RasterImage from `encode` output.

    Raises DecodeError for a truncated or oversized stream, a foreign header,
    or dimensions other than `expected_size` when one is given.
    """
    if len(data) < _HEADER.size:
        raise DecodeError(f"stream of {len(data)} bytes is shorter than the {_HEADER.size}-byte header")
    magic, version, layout, width, height = _HEADER.unpack_from(data)
    if magic != MAGIC:
        raise DecodeError(f"unknown magic {magic!r}")
    if version != FORMAT_VERSION:
        raise DecodeError(f"unsupported format version {version}")
    if layout != LAYOUT:
        raise DecodeError(f"unsupported channel layout {layout!r}")
    if width == 0 or height == 0:
        raise DecodeError(f"invalid dimensions {width}x{height}")
    if expected_size is not None and (width, height) != tuple(expected_size):
        raise DecodeError(
            f"stored size {width}x{height} does not match canvas {expected_size[0]}x{expected_size[1]}"
        )

    payload = data[_HEADER.size:]
    expected = width * height * CHANNELS
    if len(payload) != expected:
        raise DecodeError(f"payload has {len(payload)} bytes, header implies {expected}")
    try:
        return RasterImage(width, height, bytearray(payload))
    except RasterSizeError as exc:
        raise DecodeError(str(exc)) from exc


def surface_to_raster(surface: pygame.Surface) -> RasterImage:
    width, height = surface.get_size()
    return RasterImage(width, height, bytearray(pygame.image.tobytes(surface, "RGBA")))


def raster_to_surface(image: RasterImage) -> pygame.Surface:
    return pygame.image.frombytes(bytes(image.pixels), image.size, "RGBA")


def save_png(image: RasterImage, path: Path) -> None:
    # Keep a .png suffix so pygame writes a PNG-encoded file.
    tmp_path = path.with_name(f".{path.stem}.tmp{path.suffix}")
    pygame.image.save(raster_to_surface(image), str(tmp_path))
    os.replace(tmp_path, path)
    logger.info("Exported %s to %s", image, path)
