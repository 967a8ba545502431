from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Optional, Tuple

import pygame

from colorbook.raster import BLACK, Color

logger = getLogger(__name__)

DEFAULT_OUTLINE_SIZE = (300, 300)
SHAPES = ("square", "oval")

# Alpha at or above this is stroke, below it is paper.
STROKE_ALPHA = 128
_HARD_ALPHA = bytes(255 if value >= STROKE_ALPHA else 0 for value in range(256))


def _with_transparent_paper(image: pygame.Surface) -> pygame.Surface:
    # Opaque artwork: treat white paper as transparent so it cannot cover fills.
    image.set_colorkey((255, 255, 255))
    layer = pygame.Surface(image.get_size(), pygame.SRCALPHA, 32)
    layer.blit(image, (0, 0))
    return layer


def harden_outline(outline: pygame.Surface) -> pygame.Surface:
    """Return a copy of `outline` whose pixels are either opaque or fully transparent.

    Blitting a hard-edged outline over a snapshot that already contains it
    changes nothing, so repeated fills never darken soft stroke edges.
    """
    data = bytearray(pygame.image.tobytes(outline, "RGBA"))
    data[3::4] = data[3::4].translate(_HARD_ALPHA)
    return pygame.image.frombytes(bytes(data), outline.get_size(), "RGBA")


def load_outline(path: Optional[Path]) -> Optional[pygame.Surface]:
    if path is None or not str(path):
        return None
    path = Path(path)
    if not path.exists():
        logger.warning("Outline %s does not exist", path)
        return None
    try:
        image = pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        logger.warning("Could not load outline %s: %s", path, exc)
        return None
    if image.get_width() == 0 or image.get_height() == 0:
        logger.warning("Outline %s has no intrinsic size, using %s", path, DEFAULT_OUTLINE_SIZE)
        return pygame.Surface(DEFAULT_OUTLINE_SIZE, pygame.SRCALPHA, 32)
    if not image.get_flags() & pygame.SRCALPHA:
        image = _with_transparent_paper(image)
    return harden_outline(image)


def sample_outline(
    size: Tuple[int, int] = DEFAULT_OUTLINE_SIZE,
    shape: str = "square",
    stroke_width: int = 4,
    color: Color = BLACK,
) -> pygame.Surface:
    """Draw one of the built-in outlines on a transparent surface.

    Shapes are inset from the edges and drawn without anti-aliasing so every
    stroke pixel is exactly `color`.
    """
    width, height = size
    if width <= 0 or height <= 0:
        width, height = DEFAULT_OUTLINE_SIZE
    surface = pygame.Surface((width, height), pygame.SRCALPHA, 32)
    inset_x = max(stroke_width, width // 6)
    inset_y = max(stroke_width, height // 6)
    rect = pygame.Rect(inset_x, inset_y, max(1, width - 2 * inset_x), max(1, height - 2 * inset_y))
    if shape == "oval":
        pygame.draw.ellipse(surface, color, rect, width=stroke_width)
    elif shape == "square":
        pygame.draw.rect(surface, color, rect, width=stroke_width)
    else:
        raise ValueError(f"unknown outline shape {shape!r}; expected one of {SHAPES}")
    return surface
