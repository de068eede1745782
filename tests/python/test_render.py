from __future__ import annotations

import pygame

from outbreak.app.render import PygameCanvas, draw_world, save_frame
from outbreak.sim.core.agent import Agent
from outbreak.sim.core.component import Component, ComponentKind
from outbreak.sim.core.config import SimulationConfig
from outbreak.sim.core.geometry import Point
from outbreak.sim.core.lighting import DARK_LIGHT
from outbreak.sim.core.palette import AGENT_COLORS, COMPONENT_COLORS, DARKNESS_COLOR
from outbreak.sim.core.states import AgentState
from outbreak.sim.core.world import World


class RecordingCanvas:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def fill_rect(self, x, y, width, height, color, alpha=1.0):
        self.calls.append((x, y, width, height, color, alpha))


def _rgb(hex_color: str) -> tuple[int, int, int]:
    color = pygame.Color(hex_color)
    return (color.r, color.g, color.b)


def test_component_draws_walls_floor_darkness_exits_agents_then_children():
    room = Component(ComponentKind.ROOM, Point(3, 3), Point(6, 6))
    building = Component(
        ComponentKind.BUILDING,
        Point(1, 1),
        Point(8, 8),
        light=DARK_LIGHT,
        exits=[Point(8, 4)],
        children=[room],
    )
    building.population = [Agent.zombie(0, Point(2, 2))]
    canvas = RecordingCanvas()

    building.render(canvas)

    assert canvas.calls == [
        (1, 1, 8, 8, COMPONENT_COLORS["wall"], 1.0),
        (2, 2, 6, 6, COMPONENT_COLORS["building"], 1.0),
        (2, 2, 6, 6, DARKNESS_COLOR, 0.3),
        (8, 4, 1, 1, COMPONENT_COLORS["building"], 1.0),
        (2, 2, 1, 1, AGENT_COLORS[AgentState.ZOMBIE], 1.0),
        (3, 3, 4, 4, COMPONENT_COLORS["wall"], 1.0),
        (4, 4, 2, 2, COMPONENT_COLORS["room"], 1.0),
    ]


def test_pygame_canvas_scales_cells():
    surface = pygame.Surface((10, 10))
    city = Component(ComponentKind.CITY, Point(0, 0), Point(4, 4))
    city.population = [Agent.human(0, Point(2, 2))]

    city.render(PygameCanvas(surface, scale=2))

    assert tuple(surface.get_at((0, 0)))[:3] == _rgb(COMPONENT_COLORS["wall"])
    assert tuple(surface.get_at((9, 9)))[:3] == _rgb(COMPONENT_COLORS["wall"])
    assert tuple(surface.get_at((2, 2)))[:3] == _rgb(COMPONENT_COLORS["city"])
    assert tuple(surface.get_at((4, 5)))[:3] == _rgb(AGENT_COLORS[AgentState.NORMAL])


def test_dark_components_are_shaded():
    surface = pygame.Surface((5, 5))
    room = Component(ComponentKind.ROOM, Point(0, 0), Point(4, 4), light=DARK_LIGHT)

    room.render(PygameCanvas(surface, scale=1))

    shaded = tuple(surface.get_at((2, 2)))[:3]
    floor = _rgb(COMPONENT_COLORS["room"])
    assert sum(shaded) < sum(floor)


def test_draw_world_covers_whole_city():
    world = World(SimulationConfig(width=30, height=20, map_seed="paint"))
    canvas = PygameCanvas.for_world(world, scale=3)

    draw_world(world, canvas)

    assert canvas.surface.get_size() == (90, 60)
    assert tuple(canvas.surface.get_at((0, 0)))[:3] == _rgb(COMPONENT_COLORS["wall"])


def test_save_frame_writes_png(tmp_path):
    world = World(SimulationConfig(width=30, height=20, map_seed="frame"))

    path = save_frame(world, tmp_path / "frame.png", scale=2)

    assert path.exists()
    assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
