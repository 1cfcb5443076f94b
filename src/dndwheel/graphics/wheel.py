"""
Wheel renderer - draws sectors, labels, hub, pointer and winner banner.

The engine's angle is the wheel-frame angle under the pointer, so the
wheel is drawn rotated by pointer_angle - angle.
"""

from typing import Dict, Optional, Tuple
import logging
import math

import numpy as np
import pygame

from dndwheel.config.wheel import WheelConfig
from dndwheel.engine.model import Entry, WheelModel
from dndwheel.graphics.colors import Color, parse_hex_color, segment_color, text_color_for

logger = logging.getLogger(__name__)

BACKING_COLOR = (0, 0, 0, 220)
BORDER_COLOR = (0, 0, 0)
BANNER_BG = (0, 0, 0, 200)
BANNER_FG = (255, 255, 255)


def arc_points(
    center: Tuple[float, float],
    radius: float,
    start: float,
    span: float,
) -> list[Tuple[float, float]]:
    """Pie slice outline: the center followed by points along the arc."""
    steps = max(3, int(span * 15))
    angles = np.linspace(start, start + span, steps + 1)
    xs = center[0] + radius * np.cos(angles)
    ys = center[1] + radius * np.sin(angles)
    return [center] + list(zip(xs.tolist(), ys.tolist()))


class WheelRenderer:
    """Draws the wheel onto a pygame surface."""

    def __init__(
        self,
        config: WheelConfig,
        radius: float = 250.0,
        pointer_angle: float = 1.5 * math.pi,
    ) -> None:
        self.config = config
        self.radius = radius
        self.pointer_angle = pointer_angle
        self._fonts: Dict[int, pygame.font.Font] = {}
        self._colors: list[Color] = []
        self._color_entries: tuple[Entry, ...] = ()

    def set_config(self, config: WheelConfig) -> None:
        self.config = config
        self._colors = []
        self._color_entries = ()

    def _font(self, size: float) -> pygame.font.Font:
        key = max(1, int(size))
        font = self._fonts.get(key)
        if font is None:
            font = pygame.font.SysFont(None, key)
            self._fonts[key] = font
        return font

    def _segment_colors(self, model: WheelModel) -> list[Color]:
        entries = tuple(model.entries)
        if entries != self._color_entries:
            self._colors = [segment_color(e) for e in entries]
            self._color_entries = entries
        return self._colors

    def rotation_for(self, angle: float) -> float:
        """Screen rotation of the wheel for an engine angle."""
        return self.pointer_angle - angle

    def render(
        self,
        surface: pygame.Surface,
        model: WheelModel,
        angle: float,
        winner_label: Optional[str] = None,
    ) -> None:
        """Draw the whole wheel for one frame."""
        center = (surface.get_width() / 2, surface.get_height() / 2)
        colors = self._segment_colors(model)

        self._draw_backing(surface, center)
        self._draw_sectors(surface, model, center, self.rotation_for(angle), colors)
        self._draw_hub(surface, center)
        self._draw_pointer(surface, center, colors[model.sector_at(angle)])

        if winner_label is not None:
            self._draw_banner(surface, self.config.winner_text(winner_label))

    def _draw_backing(self, surface: pygame.Surface, center: Tuple[float, float]) -> None:
        size = int(2 * (self.radius + 5))
        backing = pygame.Surface((size, size), pygame.SRCALPHA)
        pygame.draw.circle(backing, BACKING_COLOR, (size // 2, size // 2), size // 2)
        surface.blit(backing, (center[0] - size / 2, center[1] - size / 2))

    def _draw_sectors(
        self,
        surface: pygame.Surface,
        model: WheelModel,
        center: Tuple[float, float],
        rotation: float,
        colors: list[Color],
    ) -> None:
        inner = self.radius * self.config.center_radius_ratio
        label_size = self.config.label_font_size

        for sector in model.sectors:
            color = colors[sector.entry_index]
            start = rotation + sector.start_angle
            points = arc_points(center, self.radius, start, sector.span)

            pygame.draw.polygon(surface, color, points)
            if self.config.show_segments_borders:
                pygame.draw.polygon(surface, BORDER_COLOR, points, 1)

            if label_size > 0:
                text_r = inner + (self.radius - inner) * 0.5
                text_a = start + sector.span * 0.5
                text_pos = (
                    center[0] + text_r * math.cos(text_a),
                    center[1] + text_r * math.sin(text_a),
                )
                label = model.entry(sector.entry_index).label
                text = self._font(label_size).render(label, True, text_color_for(color))
                surface.blit(text, text.get_rect(center=text_pos))

    def _draw_hub(self, surface: pygame.Surface, center: Tuple[float, float]) -> None:
        inner = self.radius * self.config.center_radius_ratio
        if inner <= 0:
            return
        hub_color = parse_hex_color(self.config.center_color) or (32, 32, 32)
        pygame.draw.circle(surface, hub_color, center, inner)
        pygame.draw.circle(surface, BORDER_COLOR, center, inner, 2)

    def _draw_pointer(self, surface: pygame.Surface, center: Tuple[float, float], color: Color) -> None:
        cx, cy = center
        top = cy - self.radius
        points = [(cx - 15, top - 20), (cx + 15, top - 20), (cx, top + 10)]
        pygame.draw.polygon(surface, color, points)
        pygame.draw.polygon(surface, BORDER_COLOR, points, 2)

    def _draw_banner(self, surface: pygame.Surface, message: str) -> None:
        font = self._font(self.config.winner_font_size)
        lines = [font.render(line, True, BANNER_FG) for line in message.splitlines() or [""]]
        width = max(line.get_width() for line in lines) + 24
        height = sum(line.get_height() for line in lines) + 16

        banner = pygame.Surface((width, height), pygame.SRCALPHA)
        banner.fill(BANNER_BG)
        y = 8
        for line in lines:
            banner.blit(line, ((width - line.get_width()) // 2, y))
            y += line.get_height()

        rect = banner.get_rect(center=(surface.get_width() // 2, surface.get_height() // 2))
        surface.blit(banner, rect)
