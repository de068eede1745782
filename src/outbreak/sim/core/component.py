from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .agent import Agent
from .geometry import Point
from .lighting import NORMAL_LIGHT, LightPolicy
from .palette import COMPONENT_COLORS, DARKNESS_COLOR

if TYPE_CHECKING:
    from ...app.render import Canvas
    from .rng import SimulationRng


class ComponentKind(str, Enum):
    CITY = "city"
    BUILDING = "building"
    ROOM = "room"


class Component:
    """A rectangular region of the city that owns agents and nested regions.

    City, buildings and rooms share this type and differ only by ``kind``. The box
    ``min``..``max`` is inclusive and its boundary cells are walls unless listed in
    ``exits``. Shape and children are fixed at construction; only ``population``
    changes from tick to tick.
    """

    def __init__(
        self,
        kind: ComponentKind,
        min: Point,
        max: Point,
        light: LightPolicy = NORMAL_LIGHT,
        exits: Iterable[Point] = (),
        children: Sequence["Component"] = (),
    ):
        if max.x < min.x or max.y < min.y:
            raise ValueError(f"empty {kind.value} box {min}..{max}")
        self.kind = kind
        self.min = min
        self.max = max
        self.light = light
        self.exits = frozenset(exits)
        self.children: List[Component] = list(children)
        self.population: List[Agent] = []
        self._validate()

    def __repr__(self) -> str:
        return f"Component({self.kind.value}, {self.min}..{self.max}, children={len(self.children)})"

    @property
    def width(self) -> int:
        return self.max.x - self.min.x

    @property
    def height(self) -> int:
        return self.max.y - self.min.y

    # --- spatial queries -------------------------------------------------

    def contains(self, location: Point) -> bool:
        # walls are inside the component
        return self.min.x <= location.x <= self.max.x and self.min.y <= location.y <= self.max.y

    def on_boundary(self, location: Point) -> bool:
        return (
            location.x == self.min.x
            or location.x == self.max.x
            or location.y == self.min.y
            or location.y == self.max.y
        )

    def child_at(self, location: Point) -> Optional["Component"]:
        for child in self.children:
            if child.contains(location):
                return child
        return None

    def deepest_at(self, location: Point) -> Optional["Component"]:
        if not self.contains(location):
            return None
        child = self.child_at(location)
        if child is None:
            return self
        return child.deepest_at(location)

    def has_wall_at(self, location: Point) -> bool:
        return self.on_boundary(location) and self.contains(location) and location not in self.exits

    def has_exit_at(self, location: Point) -> bool:
        return location in self.exits

    def agent_at(self, location: Point) -> Optional[Agent]:
        for agent in self.population:
            if agent.location == location:
                return agent
        return None

    def is_blocked(self, location: Point) -> bool:
        return self.has_wall_at(location) or self.agent_at(location) is not None

    def look_ahead(self, origin: Point, direction: Point, max_distance: int = 10) -> Optional[Agent]:
        """Nearest agent straight ahead on origin's row or column, hidden by walls.

        Only agents sharing origin's x or y are candidates, so a diagonal facing
        still sees along the row and column it is heading into.
        """
        closest: Optional[Agent] = None
        closest_dist = max_distance + 1
        for agent in self.population:
            loc = agent.location
            dx = (loc.x - origin.x) * direction.x
            dy = (loc.y - origin.y) * direction.y
            if (origin.x == loc.x and 0 < dy < closest_dist) or (origin.y == loc.y and 0 < dx < closest_dist):
                closest_dist = max(dx, dy)
                closest = agent

        if closest is not None and self.children:
            for step in range(1, closest_dist):
                spot = origin + direction * step
                if self.has_wall_at(spot):
                    return None
                if any(child.has_wall_at(spot) for child in self.children):
                    return None
        return closest

    # --- ownership ---------------------------------------------------------

    def add_agent(self, agent: Agent, location: Point) -> None:
        child = self.child_at(location)
        if child is not None:
            child.add_agent(agent, location)
        else:
            # newcomers act first next tick
            self.population.insert(0, agent)

    def walk(self) -> Iterator["Component"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def all_agents(self) -> Iterator[Agent]:
        for component in self.walk():
            yield from component.population

    # --- simulation --------------------------------------------------------

    def step_tick(self, rng: SimulationRng, parent: Optional["Component"] = None) -> None:
        self._look_around(rng)
        self._move_agents(rng, parent)
        self._agents_interact()
        for child in self.children:
            child.step_tick(rng, self)

    def _look_around(self, rng: SimulationRng) -> None:
        vision = self.light.vision_distance
        for index, agent in enumerate(list(self.population)):
            seen = self.look_ahead(agent.location, agent.facing, vision)
            self.population[index] = agent.see(seen, rng)

    def _move_agents(self, rng: SimulationRng, parent: Optional["Component"]) -> None:
        departed: List[Agent] = []
        for agent in list(self.population):
            next_spot = agent.next_cell()
            if parent is not None and not self.contains(next_spot):
                if self._enter(parent, agent, next_spot, rng):
                    departed.append(agent)
                continue
            child = self.child_at(next_spot)
            if child is not None:
                if self._enter(child, agent, next_spot, rng):
                    departed.append(agent)
                continue
            # the root has nothing beyond its own walls
            path_clear = self.contains(next_spot) and not self.is_blocked(next_spot)
            agent.move(path_clear, rng)

        if departed:
            gone = {id(agent) for agent in departed}
            self.population = [agent for agent in self.population if id(agent) not in gone]

    @staticmethod
    def _enter(other: "Component", agent: Agent, next_spot: Point, rng: SimulationRng) -> bool:
        destination = other.deepest_at(next_spot)
        if destination is None or destination.is_blocked(next_spot):
            agent.move(False, rng)
            return False
        # crossing a boundary skips the speed roll so the agent always lands inside its new owner
        agent.location = next_spot
        destination.add_agent(agent, next_spot)
        return True

    def _agents_interact(self) -> None:
        for agent in list(self.population):
            target = self.agent_at(agent.next_cell())
            if target is None:
                continue
            index = self.population.index(target)
            self.population[index] = agent.interact_with(target)

    # --- rendering ---------------------------------------------------------

    def draw_request(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "min": self.min.as_list(),
            "max": self.max.as_list(),
            "light": self.light.name,
            "opacity": self.light.opacity,
            "exits": sorted(exit_spot.as_list() for exit_spot in self.exits),
        }

    def render(self, canvas: Canvas) -> None:
        floor = COMPONENT_COLORS[self.kind.value]
        canvas.fill_rect(self.min.x, self.min.y, self.width + 1, self.height + 1, COMPONENT_COLORS["wall"])
        canvas.fill_rect(self.min.x + 1, self.min.y + 1, self.width - 1, self.height - 1, floor)
        if self.light.opacity > 0:
            canvas.fill_rect(
                self.min.x + 1, self.min.y + 1, self.width - 1, self.height - 1, DARKNESS_COLOR, self.light.opacity
            )
        for exit_spot in sorted(self.exits, key=lambda spot: (spot.y, spot.x)):
            canvas.fill_rect(exit_spot.x, exit_spot.y, 1, 1, floor)
        for agent in self.population:
            agent.render(canvas)
        for child in self.children:
            child.render(canvas)

    # --- construction checks -------------------------------------------------

    def _validate(self) -> None:
        for spot in self.exits:
            if not (self.contains(spot) and self.on_boundary(spot)):
                raise ValueError(f"exit {spot} is not on the boundary of {self!r}")
        for index, child in enumerate(self.children):
            if not (
                self.min.x < child.min.x
                and self.min.y < child.min.y
                and child.max.x < self.max.x
                and child.max.y < self.max.y
            ):
                raise ValueError(f"{child!r} is not nested inside {self!r}")
            for other in self.children[index + 1 :]:
                if _overlaps(child, other):
                    raise ValueError(f"{child!r} overlaps {other!r}")


def _overlaps(a: Component, b: Component) -> bool:
    return not (a.max.x < b.min.x or b.max.x < a.min.x or a.max.y < b.min.y or b.max.y < a.min.y)
