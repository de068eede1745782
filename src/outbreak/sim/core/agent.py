from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..systems import behavior
from .geometry import Facing, Point
from .palette import AGENT_COLORS
from .states import AgentState, Behavior, NormalHuman, Zombie

if TYPE_CHECKING:
    from ...app.render import Canvas
    from .rng import SimulationRng


@dataclass(slots=True, eq=False)
class Agent:
    id: int
    location: Point
    facing: Point = Facing.SOUTH
    behavior: Behavior = field(default_factory=NormalHuman)

    @classmethod
    def human(cls, agent_id: int, location: Point) -> "Agent":
        return cls(id=agent_id, location=location)

    @classmethod
    def zombie(cls, agent_id: int, location: Point) -> "Agent":
        return cls(id=agent_id, location=location, behavior=Zombie())

    @property
    def state(self) -> AgentState:
        return self.behavior.kind

    @property
    def speed(self) -> float:
        return self.behavior.speed

    @property
    def color(self) -> str:
        return AGENT_COLORS[self.behavior.kind]

    def next_cell(self) -> Point:
        return self.location + self.facing

    def turn_opposite(self) -> None:
        self.facing = Facing.opposite(self.facing)

    def face_randomly(self, rng: SimulationRng) -> None:
        self.facing = rng.choice(Facing.DIRECTIONS)

    def see(self, target: Optional["Agent"], rng: SimulationRng) -> "Agent":
        """React to the nearest agent in view (or to nothing); returns self."""
        return behavior.see(self, target, rng)

    def move(self, path_clear: bool, rng: SimulationRng) -> Point:
        return behavior.move(self, path_clear, rng)

    def interact_with(self, target: "Agent") -> "Agent":
        """Act on the agent directly ahead; returns the (possibly changed) target."""
        return behavior.interact(self, target)

    def render(self, canvas: Canvas) -> None:
        canvas.fill_rect(self.location.x, self.location.y, 1, 1, self.color)
