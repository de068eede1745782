from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

FEAR_MAX = 10
SICK_LEVEL_TO_TURN = 25
PURSUIT_TICKS = 10


class AgentState(str, Enum):
    NORMAL = "Normal"
    PANICKED = "Panicked"
    SICK = "Sick"
    ZOMBIE = "Zombie"


@dataclass(frozen=True, slots=True)
class NormalHuman:
    kind: ClassVar[AgentState] = AgentState.NORMAL
    speed: ClassVar[float] = 0.5


@dataclass(frozen=True, slots=True)
class PanickedHuman:
    kind: ClassVar[AgentState] = AgentState.PANICKED
    speed: ClassVar[float] = 1.0
    fear_level: int = FEAR_MAX


@dataclass(frozen=True, slots=True)
class SickHuman:
    kind: ClassVar[AgentState] = AgentState.SICK
    speed: ClassVar[float] = 0.4
    sick_level: int = 1


@dataclass(frozen=True, slots=True)
class Zombie:
    kind: ClassVar[AgentState] = AgentState.ZOMBIE
    speed: ClassVar[float] = 0.3
    pursuit_timer: int = 0


Behavior = Union[NormalHuman, PanickedHuman, SickHuman, Zombie]

# Zombies chase and bite only healthy humans
PREY_STATES = frozenset({AgentState.NORMAL, AgentState.PANICKED})
