"""
RGBA raster buffer shared by the compositor, the fill engine and the codec.

`RasterImage` keeps its pixels in one flat `bytearray` of `width * height * 4`
bytes in row-major order, 4 bytes per pixel in R, G, B, A order. Pixel
`(x, y)` starts at byte offset `(y * width + x) * 4`.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

Color = Tuple[int, int, int, int]
Point = Tuple[int, int]

WHITE: Color = (255, 255, 255, 255)
BLACK: Color = (0, 0, 0, 255)
CHANNELS = 4


class RasterSizeError(ValueError):
    """Pixel buffer length does not match the declared dimensions."""


def coerce_color(value: Iterable[int]) -> Color:
    channels = [int(channel) for channel in value]
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise ValueError(f"expected 3 or 4 color channels, got {len(channels)}")
    for channel in channels:
        if channel < 0 or channel > 255:
            raise ValueError(f"color channel out of range: {channel}")
    return (channels[0], channels[1], channels[2], channels[3])


class RasterImage:
    """A fixed-size RGBA image backed by a contiguous byte buffer.

    - `pixels` is mutated in place by the fill engine.
    - Coordinates are 0-based, with origin at top-left.
    """

    __slots__ = ("width", "height", "pixels")

    def __init__(self, width: int, height: int, pixels: Sequence[int] | bytes | bytearray) -> None:
        if width <= 0 or height <= 0:
            raise RasterSizeError(f"dimensions must be positive, got {width}x{height}")
        expected = width * height * CHANNELS
        if len(pixels) != expected:
            raise RasterSizeError(
                f"buffer of {len(pixels)} bytes does not match {width}x{height} RGBA ({expected} bytes)"
            )
        self.width = width
        self.height = height
        self.pixels = pixels if isinstance(pixels, bytearray) else bytearray(pixels)

    @classmethod
    def blank(cls, width: int, height: int, color: Color = WHITE) -> "RasterImage":
        if width <= 0 or height <= 0:
            raise RasterSizeError(f"dimensions must be positive, got {width}x{height}")
        return cls(width, height, bytearray(bytes(color) * (width * height)))

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def offset(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return (y * self.width + x) * CHANNELS

    def get_pixel(self, x: int, y: int) -> Color:
        start = self.offset(x, y)
        r, g, b, a = self.pixels[start:start + CHANNELS]
        return (r, g, b, a)

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        start = self.offset(x, y)
        self.pixels[start:start + CHANNELS] = bytes(color)

    def copy(self) -> "RasterImage":
        return RasterImage(self.width, self.height, bytearray(self.pixels))

    def to_bytes(self) -> bytes:
        return bytes(self.pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.size == other.size and self.pixels == other.pixels

    def __repr__(self) -> str:
        return f"RasterImage({self.width}x{self.height})"
