"""Procedural city: binary space partition into buildings and rooms, then initial population."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.agent import Agent
from ..core.component import Component, ComponentKind
from ..core.config import CityConfig, SizeRange
from ..core.geometry import Point
from ..core.lighting import DARK_LIGHT, NORMAL_LIGHT, LightPolicy
from ..core.rng import SimulationRng

log = logging.getLogger("outbreak")

# smallest leaf span that still leaves a floor cell inside the walls
_MIN_LEAF_SPAN = 2


@dataclass(frozen=True)
class SubdivisionLevel:
    leaf_kind: ComponentKind
    split_size: SizeRange
    leaf_min: int


def city_level(config: CityConfig) -> SubdivisionLevel:
    return SubdivisionLevel(ComponentKind.BUILDING, config.block_size, config.building_size.min)


def building_level(config: CityConfig) -> SubdivisionLevel:
    return SubdivisionLevel(ComponentKind.ROOM, config.building_size, config.room_size.min)


def subdivide(
    area_min: Point,
    area_max: Point,
    level: SubdivisionLevel,
    config: CityConfig,
    rng: SimulationRng,
    iterations: Optional[int] = None,
) -> List[Component]:
    if iterations == 0:
        return []

    width = area_max.x - area_min.x
    height = area_max.y - area_min.y
    threshold = rng.next_between(level.split_size.min, level.split_size.max)
    at_width = width < threshold
    at_height = height < threshold
    if at_width and at_height:
        return _make_leaf(area_min, area_max, level, config, rng)

    divide_on_x = rng.next_int(2) == 1
    if at_height:
        divide_on_x = True
    if at_width:
        divide_on_x = False

    remaining = None if iterations is None else iterations - 1
    if divide_on_x:
        div = rng.next_between(area_min.x, area_max.x)
        first = subdivide(area_min, Point(div, area_max.y), level, config, rng, remaining)
        second = subdivide(Point(div, area_min.y), area_max, level, config, rng, remaining)
    else:
        div = rng.next_between(area_min.y, area_max.y)
        first = subdivide(area_min, Point(area_max.x, div), level, config, rng, remaining)
        second = subdivide(Point(area_min.x, div), area_max, level, config, rng, remaining)
    return first + second


def _make_leaf(
    area_min: Point, area_max: Point, level: SubdivisionLevel, config: CityConfig, rng: SimulationRng
) -> List[Component]:
    width = area_max.x - area_min.x
    height = area_max.y - area_min.y
    if width <= level.leaf_min or height <= level.leaf_min:
        return []

    light = DARK_LIGHT if rng.next_float() < config.dark_chance else NORMAL_LIGHT
    leaf_min = Point(area_min.x + rng.next_between(1, 2), area_min.y + rng.next_between(1, 2))
    leaf_max = Point(area_max.x - rng.next_between(1, 2), area_max.y - rng.next_between(1, 2))
    if leaf_max.x - leaf_min.x < _MIN_LEAF_SPAN or leaf_max.y - leaf_min.y < _MIN_LEAF_SPAN:
        return []
    return [build_component(level.leaf_kind, leaf_min, leaf_max, config, rng, light=light)]


def build_component(
    kind: ComponentKind,
    box_min: Point,
    box_max: Point,
    config: CityConfig,
    rng: SimulationRng,
    light: LightPolicy = NORMAL_LIGHT,
) -> Component:
    exits = define_exits(box_min, box_max, config.number_exits, rng)
    children: List[Component] = []
    if kind is ComponentKind.BUILDING:
        children = subdivide(
            Point(box_min.x + 1, box_min.y + 1),
            Point(box_max.x - 1, box_max.y - 1),
            building_level(config),
            config,
            rng,
            config.subdivision_depth,
        )
    return Component(kind, box_min, box_max, light=light, exits=exits, children=children)


def define_exits(box_min: Point, box_max: Point, number_exits: SizeRange, rng: SimulationRng) -> List[Point]:
    """Pick distinct wall cells for doors, walking the perimeter clockwise from the top-left.

    The last three perimeter positions are never used so corners stay solid.
    """
    width = box_max.x - box_min.x
    height = box_max.y - box_min.y
    perimeter = width * 2 + height * 2
    count = rng.next_between(number_exits.min, number_exits.max)
    spots = rng.sample(range(1, max(1, perimeter - 3)), count)

    exits: List[Point] = []
    for spot in spots:
        if spot < width:
            exits.append(Point(box_min.x + spot, box_min.y))  # top wall
            continue
        spot -= width - 1
        if spot < height:
            exits.append(Point(box_max.x, box_min.y + spot))  # right wall
            continue
        spot -= height - 1
        if spot < width:
            exits.append(Point(box_max.x - spot, box_max.y))  # bottom wall
            continue
        spot -= width - 1
        exits.append(Point(box_min.x, box_max.y - spot))  # left wall
    return exits


def populate(city: Component, config: CityConfig, rng: SimulationRng) -> int:
    """Scatter humans over free floor cells and turn the last one into a zombie."""
    free_cells: List[Point] = []
    for x in range(city.min.x + 1, city.max.x):
        for y in range(city.min.y + 1, city.max.y):
            spot = Point(x, y)
            owner = city.deepest_at(spot)
            if owner is not None and not owner.has_wall_at(spot):
                free_cells.append(spot)

    humans = int(city.width * city.height * config.population_percentage)
    chosen = rng.sample(free_cells, humans + 1)
    last = len(chosen) - 1
    for index, spot in enumerate(chosen):
        agent = Agent.zombie(index, spot) if index == last else Agent.human(index, spot)
        city.add_agent(agent, spot)
    return len(chosen)


def build_city(width: int, height: int, config: CityConfig, rng: SimulationRng) -> Component:
    city_min = Point(0, 0)
    city_max = Point(width - 1, height - 1)
    # leave a ring road inside the city wall
    buildings = subdivide(
        Point(city_min.x + 1, city_min.y + 1),
        Point(city_max.x - 1, city_max.y - 1),
        city_level(config),
        config,
        rng,
        config.subdivision_depth,
    )
    city = Component(ComponentKind.CITY, city_min, city_max, children=buildings)
    placed = populate(city, config, rng)
    log.info(
        "generated %dx%d city: %d buildings, %d components, %d agents",
        width,
        height,
        len(buildings),
        sum(1 for _ in city.walk()),
        placed,
    )
    return city
