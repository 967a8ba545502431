from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import pygame


Color = Tuple[int, ...]
Point = Tuple[int, int]

FINGERDOWN = getattr(pygame, "FINGERDOWN", None)
FINGERUP = getattr(pygame, "FINGERUP", None)
FINGER_EVENTS = {event for event in (FINGERDOWN, FINGERUP) if event is not None}


@dataclass
class Button:
    rect: pygame.Rect
    label: str = ""
    fill: Optional[Color] = None
    border_color: Optional[Color] = (30, 30, 30)
    border_width: int = 0

    def draw(self, surface: pygame.Surface, font: Optional[pygame.font.Font] = None) -> None:
        if self.fill is not None:
            pygame.draw.rect(surface, self.fill, self.rect, border_radius=12)
        if self.border_color is not None and self.border_width > 0:
            pygame.draw.rect(
                surface,
                self.border_color,
                self.rect,
                width=self.border_width,
                border_radius=12,
            )
        if self.label and font is not None:
            text = font.render(self.label, True, (20, 20, 20))
            text_rect = text.get_rect(center=self.rect.center)
            surface.blit(text, text_rect)

    def hit(self, pos: Point) -> bool:
        return self.rect.collidepoint(pos)


def create_fullscreen_window() -> Tuple[pygame.Surface, pygame.Rect]:
    pygame.init()
    screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
    pygame.mouse.set_visible(True)
    return screen, screen.get_rect()


def draw_home_button(surface: pygame.Surface, rect: pygame.Rect) -> None:
    pygame.draw.rect(surface, (240, 240, 240), rect, border_radius=10)
    roof = [
        (rect.centerx, rect.top + 8),
        (rect.left + 8, rect.centery),
        (rect.right - 8, rect.centery),
    ]
    pygame.draw.polygon(surface, (50, 50, 50), roof)
    body = pygame.Rect(rect.left + 12, rect.centery, rect.width - 24, rect.height - 16)
    pygame.draw.rect(surface, (50, 50, 50), body, width=2)


def is_primary_pointer_event(event: pygame.event.Event, *, is_down: bool) -> bool:
    expected_type = pygame.MOUSEBUTTONDOWN if is_down else pygame.MOUSEBUTTONUP
    if event.type == expected_type:
        # Some touch stacks can emit emulated mouse events with button 0.
        button = getattr(event, "button", 1)
        if button in {0, 1}:
            return True
        return bool(getattr(event, "touch", False))
    finger_type = FINGERDOWN if is_down else FINGERUP
    return finger_type is not None and event.type == finger_type


def pointer_event_pos(event: pygame.event.Event, screen_rect: pygame.Rect) -> Optional[Point]:
    if hasattr(event, "pos"):
        return event.pos
    if event.type in FINGER_EVENTS:
        return (
            int(event.x * screen_rect.width),
            int(event.y * screen_rect.height),
        )
    return None


def fit_rect(content_size: Tuple[int, int], bounds: pygame.Rect) -> pygame.Rect:
    """Largest rect with the aspect of `content_size`, centered in `bounds`."""
    width, height = content_size
    scale = min(bounds.width / width, bounds.height / height)
    fitted = pygame.Rect(0, 0, max(1, int(width * scale)), max(1, int(height * scale)))
    fitted.center = bounds.center
    return fitted


def canvas_point(pos: Point, display_rect: pygame.Rect, canvas_size: Tuple[int, int]) -> Optional[Point]:
    """Map a screen position inside `display_rect` to canvas pixel space."""
    if not display_rect.collidepoint(pos):
        return None
    width, height = canvas_size
    x = (pos[0] - display_rect.left) * width // display_rect.width
    y = (pos[1] - display_rect.top) * height // display_rect.height
    return (min(width - 1, x), min(height - 1, y))
