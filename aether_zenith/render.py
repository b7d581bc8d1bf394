from __future__ import annotations

import math

import pygame

from .snapshot import EntityView, Snapshot

BACKGROUND = (8, 8, 20)
POWER_UP_GLYPHS = {
    "spread_shot": "S",
    "heavy_laser": "H",
    "shield": "D",
    "health_pack": "+",
}


def _health_color(ratio: float) -> tuple[int, int, int]:
    if ratio > 0.5:
        return (0, 255, 0)
    if ratio > 0.2:
        return (255, 165, 0)
    return (255, 0, 0)


class Renderer:
    """Draws a Snapshot. Holds no simulation state."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.glyph_font = pygame.font.Font(None, 26)
        self.frame = pygame.Surface((width, height))

    def draw(self, surface: pygame.Surface, snap: Snapshot) -> None:
        f = self.frame
        f.fill(BACKGROUND)
        for star in snap.stars:
            shade = int(255 * star.alpha)
            f.fill((shade, shade, shade), pygame.Rect(int(star.x), int(star.y), max(1, int(star.size)), max(1, int(star.size))))
        for enemy in snap.enemies:
            self._draw_enemy(f, enemy)
        if snap.player is not None:
            self._draw_player(f, snap)
        for proj in snap.projectiles:
            pygame.draw.rect(f, proj.color, pygame.Rect(int(proj.x), int(proj.y), int(proj.width), int(proj.height)))
        for pu in snap.power_ups:
            self._draw_power_up(f, pu)
        for p in snap.particles:
            r = max(1, int(p.radius))
            dot = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
            pygame.draw.circle(dot, (*p.color, int(255 * p.alpha)), (r, r), r)
            f.blit(dot, (int(p.x) - r, int(p.y) - r))

        surface.fill(BACKGROUND)
        ox, oy = snap.shake_offset
        surface.blit(f, (int(ox), int(oy)))

    def _draw_player(self, f: pygame.Surface, snap: Snapshot) -> None:
        p = snap.player
        x, y, w, h = p.x, p.y, p.width, p.height
        points = [
            (x + w / 2, y),
            (x + w, y + h),
            (x + w * 0.7, y + h * 0.8),
            (x + w * 0.3, y + h * 0.8),
            (x, y + h),
        ]
        if snap.blink:
            ship = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
            pygame.draw.polygon(ship, (*p.color, 100), points)
            f.blit(ship, (0, 0))
        else:
            pygame.draw.polygon(f, p.color, points)
            pygame.draw.polygon(f, (255, 255, 255), points, 2)
        if snap.shield:
            r = int(w * 0.8)
            ring = pygame.Surface((r * 2, r * 2), pygame.SRCALPHA)
            pygame.draw.circle(ring, (100, 200, 255, 76), (r, r), r)
            pygame.draw.circle(ring, (100, 200, 255, 204), (r, r), r, 2)
            f.blit(ring, (int(x + w / 2) - r, int(y + h / 2) - r))

    def _draw_enemy(self, f: pygame.Surface, e: EntityView) -> None:
        x, y, w, h = e.x, e.y, e.width, e.height
        if e.kind == "charger":
            points = [(x + w / 2, y), (x + w, y + h / 2), (x + w / 2, y + h), (x, y + h / 2)]
        elif e.kind == "shooter":
            points = [
                (x + w / 2 + w / 2 * math.cos(math.pi / 3 * i), y + h / 2 + h / 2 * math.sin(math.pi / 3 * i))
                for i in range(6)
            ]
        else:
            points = [(x + w / 2, y + h), (x, y), (x + w, y)]
        pygame.draw.polygon(f, e.color, points)
        pygame.draw.polygon(f, (255, 255, 255), points, 1)
        bar = int(w * e.health_ratio)
        pygame.draw.rect(f, _health_color(e.health_ratio), pygame.Rect(int(x), int(y) - 10, bar, 5))
        pygame.draw.rect(f, (180, 180, 180), pygame.Rect(int(x), int(y) - 10, int(w), 5), 1)

    def _draw_power_up(self, f: pygame.Surface, pu: EntityView) -> None:
        rect = pygame.Rect(int(pu.x), int(pu.y), int(pu.width), int(pu.height))
        pygame.draw.rect(f, pu.color, rect)
        pygame.draw.rect(f, (255, 255, 255), rect, 2)
        glyph = self.glyph_font.render(POWER_UP_GLYPHS.get(pu.kind, "?"), True, (0, 0, 0))
        f.blit(glyph, glyph.get_rect(center=rect.center))
