from __future__ import annotations

import os
from pathlib import Path
from typing import Protocol

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame

from ..sim.core.world import World


class Canvas(Protocol):
    def fill_rect(self, x: int, y: int, width: int, height: int, color: str, alpha: float = 1.0) -> None:
        ...


class PygameCanvas:
    """Draws simulation cells onto a pygame surface, ``scale`` pixels per cell."""

    def __init__(self, surface: pygame.Surface, scale: int = 4):
        self.surface = surface
        self.scale = scale

    @classmethod
    def for_world(cls, world: World, scale: int = 4) -> "PygameCanvas":
        surface = pygame.Surface(((world.city.width + 1) * scale, (world.city.height + 1) * scale))
        return cls(surface, scale)

    def fill_rect(self, x: int, y: int, width: int, height: int, color: str, alpha: float = 1.0) -> None:
        if width <= 0 or height <= 0:
            return
        scale = self.scale
        rect = pygame.Rect(x * scale, y * scale, width * scale, height * scale)
        if alpha >= 1.0:
            self.surface.fill(pygame.Color(color), rect)
            return
        overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
        tint = pygame.Color(color)
        tint.a = int(round(alpha * 255))
        overlay.fill(tint)
        self.surface.blit(overlay, rect.topleft)


def draw_world(world: World, canvas: Canvas) -> None:
    world.city.render(canvas)


def save_frame(world: World, path: Path, scale: int = 4) -> Path:
    canvas = PygameCanvas.for_world(world, scale)
    draw_world(world, canvas)
    path = Path(path)
    pygame.image.save(canvas.surface, str(path))
    return path
