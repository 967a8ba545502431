from __future__ import annotations

import logging
import time
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import Dict, List, Optional

import pygame

from colorbook.codec import raster_to_surface
from colorbook.config import canvas_background, canvas_size, load_config, palette_colors, picture_settings
from colorbook.outline import load_outline, sample_outline
from colorbook.paths import ensure_directories, get_data_root
from colorbook.raster import Color, Point
from colorbook.session import PictureSession
from colorbook.store import FileDrawingStore, StoreError
from colorbook.ui.common import (
    Button,
    canvas_point,
    create_fullscreen_window,
    draw_home_button,
    fit_rect,
    is_primary_pointer_event,
    pointer_event_pos,
)

logger = getLogger(__name__)

NOTICE_SECONDS = 3.0


def _export_path(exports_dir: Path, picture_id: str, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
    path = exports_dir / f"{picture_id}_{stamp}.png"
    counter = 1
    while path.exists():
        path = exports_dir / f"{picture_id}_{stamp}_{counter}.png"
        counter += 1
    return path


def _picture_outline(picture: Dict[str, object], size) -> pygame.Surface:
    outline = load_outline(Path(str(picture["outline"]))) if picture["outline"] else None
    if outline is not None:
        return outline
    return sample_outline(
        size,
        shape=str(picture.get("shape") or "square"),
        stroke_width=int(picture["stroke_width"]),
        color=picture["stroke_color"],
    )


class ColoringApp:
    def __init__(self) -> None:
        self.config = load_config()
        self.data_root = get_data_root(self.config)
        dirs = ensure_directories(self.data_root)
        self.exports_dir = dirs["exports"]

        self.screen, self.screen_rect = create_fullscreen_window()
        self.clock = pygame.time.Clock()

        self.margin = 16
        self.menu_pad = 10
        self.menu_gap = 10
        self.menu_bg = (238, 234, 226)
        self.tool_size = max(44, min(56, int(self.screen_rect.height * 0.06)))
        panel_width = self.tool_size * 2 + self.menu_gap + self.menu_pad * 2
        self.controls_rect = pygame.Rect(
            self.margin,
            self.margin,
            panel_width,
            self.screen_rect.height - 2 * self.margin,
        )
        canvas_area = pygame.Rect(
            self.controls_rect.right + self.margin,
            self.margin,
            self.screen_rect.width - panel_width - 3 * self.margin,
            self.screen_rect.height - 2 * self.margin,
        )

        size = canvas_size(self.config)
        picture = picture_settings(self.config)
        self.session = PictureSession(
            picture["id"],
            size,
            FileDrawingStore(dirs["drawings"]),
            outline=_picture_outline(picture, size),
            background=canvas_background(self.config),
        )
        self.display_rect = fit_rect(size, canvas_area)

        self.palette: List[Color] = palette_colors(self.config) or [(220, 20, 60, 255)]
        self.current_color: Color = self.palette[0]

        self.font = pygame.font.SysFont("sans", 18)
        self.notice = ""
        self.notice_until = 0.0

        self.action_buttons: Dict[str, Button] = {}
        self.palette_buttons: List[Button] = []
        self._build_ui()

        self.canvas_view: Optional[pygame.Surface] = None
        self._load_picture()

    def _build_ui(self) -> None:
        self.action_buttons.clear()
        self.palette_buttons.clear()

        pad = self.menu_pad
        gap = self.menu_gap
        left = self.controls_rect.left + pad
        top = self.controls_rect.top + pad
        inner_w = self.controls_rect.width - pad * 2

        home_size = max(40, int(self.tool_size * 0.85))
        home_rect = pygame.Rect(
            self.screen_rect.right - self.margin - home_size,
            self.margin,
            home_size,
            home_size,
        )
        self.action_buttons["home"] = Button(rect=home_rect, fill=self.menu_bg)

        action_h = self.font.get_height() + 16
        bottom_top = self.controls_rect.bottom - pad - 2 * action_h - gap
        self.action_buttons["save"] = Button(
            rect=pygame.Rect(left, bottom_top, inner_w, action_h),
            label="Save",
            fill=(245, 245, 245),
        )
        self.action_buttons["clear"] = Button(
            rect=pygame.Rect(left, bottom_top + action_h + gap, inner_w, action_h),
            label="Clear",
            fill=(245, 245, 245),
        )

        palette_rect = pygame.Rect(left, top, inner_w, max(0, bottom_top - gap - top))
        swatch_gap = 8
        rows = max(1, len(self.palette))
        swatch_height = max(14, (palette_rect.height - swatch_gap * (rows - 1)) // rows)
        for idx, color in enumerate(self.palette):
            rect = pygame.Rect(
                palette_rect.left,
                palette_rect.top + idx * (swatch_height + swatch_gap),
                palette_rect.width,
                swatch_height,
            )
            self.palette_buttons.append(Button(rect=rect, fill=color[:3]))

    def _show_notice(self, text: str) -> None:
        self.notice = text
        self.notice_until = time.monotonic() + NOTICE_SECONDS

    def _refresh_view(self) -> None:
        if self.session.displayed is None:
            return
        surface = raster_to_surface(self.session.displayed)
        self.canvas_view = pygame.transform.scale(surface, self.display_rect.size)

    def _load_picture(self) -> None:
        try:
            self.session.load()
        except StoreError as exc:
            logger.error("Could not read saved drawing: %s", exc)
            self._show_notice("Saved drawing unavailable")
            self.session.show_blank()
        self._refresh_view()

    def _fill(self, seed: Point) -> None:
        try:
            outcome = self.session.fill_at(seed, self.current_color)
        except StoreError as exc:
            logger.error("Fill at %s was not saved: %s", seed, exc)
            self._show_notice("Not saved!")
            self._refresh_view()
            return
        if outcome.filled:
            self._refresh_view()

    def _handle_pointer_down(self, pos: Point) -> bool:
        if self.action_buttons["home"].hit(pos):
            return True

        seed = canvas_point(pos, self.display_rect, self.session.size)
        if seed is not None:
            self._fill(seed)
            return False

        for idx, button in enumerate(self.palette_buttons):
            if button.hit(pos):
                self.current_color = self.palette[idx]
                return False

        if self.action_buttons["clear"].hit(pos):
            try:
                self.session.clear()
            except StoreError as exc:
                logger.error("Could not clear drawing: %s", exc)
                self._show_notice("Could not clear")
            self._refresh_view()
            return False
        if self.action_buttons["save"].hit(pos):
            path = _export_path(self.exports_dir, self.session.picture_id)
            try:
                self.session.export_png(path)
            except (pygame.error, OSError) as exc:
                logger.error("Export to %s failed: %s", path, exc)
                self._show_notice("Could not save picture")
            else:
                self._show_notice("Saved")
            return False
        return False

    def _render(self) -> None:
        self.screen.fill((252, 248, 240))
        pygame.draw.rect(self.screen, self.menu_bg, self.controls_rect)
        if self.canvas_view is not None:
            self.screen.blit(self.canvas_view, self.display_rect.topleft)
        pygame.draw.rect(self.screen, (200, 200, 200), self.display_rect, width=2)

        for idx, button in enumerate(self.palette_buttons):
            button.draw(self.screen)
            if self.palette[idx] == self.current_color:
                pygame.draw.rect(self.screen, (200, 60, 60), button.rect, width=3)

        for key, button in self.action_buttons.items():
            if key == "home":
                draw_home_button(self.screen, button.rect)
            else:
                button.draw(self.screen, self.font)

        if self.notice and time.monotonic() < self.notice_until:
            text = self.font.render(self.notice, True, (180, 30, 30))
            rect = text.get_rect(midtop=(self.display_rect.centerx, self.margin))
            self.screen.blit(text, rect)

        pygame.display.flip()

    def run(self) -> None:
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif is_primary_pointer_event(event, is_down=True):
                    pos = pointer_event_pos(event, self.screen_rect)
                    if pos is None:
                        continue
                    if self._handle_pointer_down(pos):
                        running = False

            self._render()
            self.clock.tick(60)

        pygame.quit()


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=str(config.get("log_level", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        ColoringApp().run()
    except Exception:
        logger.exception("Coloring app crashed")
        pygame.quit()


if __name__ == "__main__":
    main()
