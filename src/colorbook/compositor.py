from __future__ import annotations

from logging import getLogger
from typing import Optional, Tuple

import pygame

from colorbook.codec import raster_to_surface, surface_to_raster
from colorbook.raster import WHITE, Color, RasterImage

logger = getLogger(__name__)

Size = Tuple[int, int]


def _fit_outline(outline: pygame.Surface, size: Size) -> Optional[Tuple[pygame.Surface, Tuple[int, int]]]:
    width, height = size
    outline_w, outline_h = outline.get_size()
    if (outline_w, outline_h) == (width, height):
        return outline, (0, 0)
    if outline_w <= 0 or outline_h <= 0:
        return None
    scale = min(width / outline_w, height / outline_h)
    target = (max(1, int(round(outline_w * scale))), max(1, int(round(outline_h * scale))))
    # Nearest-neighbour keeps stroke pixels at their exact color.
    scaled = pygame.transform.scale(outline, target)
    return scaled, ((width - target[0]) // 2, (height - target[1]) // 2)


def compose_snapshot(
    size: Size,
    fill_layer: Optional[RasterImage] = None,
    outline: Optional[pygame.Surface] = None,
    background: Color = WHITE,
) -> RasterImage:
    """Build the picture the user sees: fill layer (or background), then outline.

    The outline goes on last so its strokes always bound the next fill.
    Neither input is modified.
    """
    size = (int(size[0]), int(size[1]))
    if fill_layer is None:
        canvas = pygame.Surface(size, pygame.SRCALPHA, 32)
        canvas.fill(background)
    else:
        canvas = raster_to_surface(fill_layer)
        if fill_layer.size != size:
            logger.warning("Resampling fill layer from %s to %s", fill_layer.size, size)
            canvas = pygame.transform.scale(canvas, size)

    if outline is not None:
        fitted = _fit_outline(outline, size)
        if fitted is None:
            logger.warning("Ignoring empty outline surface")
        else:
            surface, pos = fitted
            canvas.blit(surface, pos)

    return surface_to_raster(canvas)
