"""
creature_sim module: render/renderer.py

Pygame rendering of frame snapshots (top-down). Only reads snapshots; never
touches live simulation objects.
"""

from __future__ import annotations
import math
from typing import List, Tuple

import pygame

from render import colors
from world.snapshot import CreatureSnapshot, FoodSnapshot, SimStats

Point = Tuple[float, float]


def creature_color(c: CreatureSnapshot, glow: bool = False) -> pygame.Color:
    ratio = max(0.0, min(1.0, c.energy_ratio))
    col = pygame.Color(0, 0, 0)
    if glow:
        col.hsva = (c.hue % 360.0, 50, 80, 100)
    else:
        col.hsva = (c.hue % 360.0, 60 + ratio * 30, 40 + ratio * 40, 100)
    return col


def _rotate(points: List[Point], x: float, y: float, angle: float) -> List[Point]:
    ca, sa = math.cos(angle), math.sin(angle)
    return [(x + px * ca - py * sa, y + px * sa + py * ca) for px, py in points]


def body_outline(c: CreatureSnapshot) -> List[Point]:
    """Body polygon in local space: round, oval or pointed by body_shape."""
    r = c.radius
    if c.body_shape < 0.3:
        steps = 20
        return [(math.cos(a) * r, math.sin(a) * r * 0.9) for a in (i * 2 * math.pi / steps for i in range(steps))]
    if c.body_shape < 0.7:
        steps = 20
        return [(math.cos(a) * r * 1.3, math.sin(a) * r * 0.7) for a in (i * 2 * math.pi / steps for i in range(steps))]
    return [(r * 1.5, 0.0), (-r * 0.5, -r * 0.8), (-r, 0.0), (-r * 0.5, r * 0.8)]


def draw_food(screen: pygame.Surface, food: Tuple[FoodSnapshot, ...]) -> None:
    for f in food:
        pygame.draw.circle(screen, colors.FOOD_GLOW, (int(f.x), int(f.y)), int(f.radius * 1.75))
        pygame.draw.circle(screen, colors.FOOD, (int(f.x), int(f.y)), int(f.radius))


def _draw_appendages(screen: pygame.Surface, c: CreatureSnapshot, frame: int) -> None:
    if c.appendage_count == 0:
        return
    length = c.radius * c.appendage_length
    col = pygame.Color(0, 0, 0)
    col.hsva = (c.hue % 360.0, 40, 70, 100)
    n = c.appendage_count
    for i in range(n):
        base = math.pi + (-0.8 + 1.6 * i / n)
        wiggle = math.sin(frame * 0.15 + i * 1.5) * 0.4
        pts = [
            (-c.radius * 0.5, 0.0),
            (math.cos(base + wiggle * 0.5) * length * 0.5 - c.radius * 0.3, math.sin(base + wiggle * 0.5) * length * 0.5),
            (math.cos(base + wiggle) * length - c.radius * 0.3, math.sin(base + wiggle) * length),
        ]
        pygame.draw.lines(screen, col, False, _rotate(pts, c.x, c.y, c.heading), 2)


def _draw_pattern(screen: pygame.Surface, c: CreatureSnapshot) -> None:
    if c.pattern_type == 0:
        return
    col = pygame.Color(0, 0, 0)
    col.hsva = (c.hue % 360.0, 30, 90, 100)
    r = c.radius
    if c.pattern_type == 1:
        for i in range(-2, 3):
            x = i * r * 0.4
            pygame.draw.line(screen, col, *_rotate([(x, -r * 0.6), (x, r * 0.6)], c.x, c.y, c.heading), 2)
    else:
        # fixed spot layout so the pattern does not flicker between frames
        for sx, sy in ((0.3, 0.2), (-0.3, -0.2), (0.1, -0.3), (-0.2, 0.3)):
            (px, py), = _rotate([(sx * r, sy * r)], c.x, c.y, c.heading)
            pygame.draw.circle(screen, col, (int(px), int(py)), max(1, int(r * 0.15)))


def draw_creature(screen: pygame.Surface, c: CreatureSnapshot, frame: int = 0) -> None:
    if not c.alive:
        return

    if c.energy_ratio > 0.7:
        pygame.draw.circle(screen, creature_color(c, glow=True), (int(c.x), int(c.y)), int(c.radius * 1.5), 1)

    _draw_appendages(screen, c, frame)

    outline = _rotate(body_outline(c), c.x, c.y, c.heading)
    pygame.draw.polygon(screen, creature_color(c), outline)
    _draw_pattern(screen, c)

    if c.can_mate:
        pygame.draw.circle(screen, colors.MATE_INDICATOR, (int(c.x), int(c.y - c.radius - 8)), 3)


def draw_creatures(screen: pygame.Surface, creatures: Tuple[CreatureSnapshot, ...], frame: int = 0) -> None:
    # smaller ones first so big ones appear on top
    for c in sorted(creatures, key=lambda s: s.radius):
        draw_creature(screen, c, frame)


def draw_hud(screen: pygame.Surface, stats: SimStats, speed: int, paused: bool) -> None:
    font = pygame.font.Font(None, 26)

    lines = [
        f"Population: {stats.population}  Food: {stats.food}",
        f"Births: {stats.births}  Deaths: {stats.deaths}  Predations: {stats.predations}",
        f"Fitness avg {stats.average_fitness:.1f}  best {stats.best_fitness:.1f}",
        f"Tick {stats.tick}  Generation {stats.generation}  Speed {speed}x" + ("  PAUSED" if paused else ""),
    ]

    y = 10
    for line in lines:
        txt = font.render(line, True, colors.HUD_TEXT)
        screen.blit(txt, (12, y))
        y += 22
