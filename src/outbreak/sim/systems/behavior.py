"""Agent state machine: perception, movement and interaction per behavior variant."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..core.geometry import Point
from ..core.states import (
    FEAR_MAX,
    PREY_STATES,
    PURSUIT_TICKS,
    SICK_LEVEL_TO_TURN,
    AgentState,
    NormalHuman,
    PanickedHuman,
    SickHuman,
    Zombie,
)

if TYPE_CHECKING:
    from ..core.agent import Agent
    from ..core.rng import SimulationRng

log = logging.getLogger("outbreak")

TURN_CHANCE = 0.15


def see(agent: Agent, target: Optional[Agent], rng: SimulationRng) -> Agent:
    match agent.behavior:
        case NormalHuman():
            if target is None:
                return agent
            if target.state is AgentState.ZOMBIE:
                # flee: turn around and panic
                agent.turn_opposite()
                agent.behavior = PanickedHuman()
            elif target.state in (AgentState.SICK, AgentState.PANICKED):
                agent.behavior = PanickedHuman()
            elif rng.next_float() < TURN_CHANCE:
                agent.face_randomly(rng)

        case PanickedHuman(fear_level=fear):
            fear = max(0, fear - 1)
            if target is not None and target.state is AgentState.ZOMBIE:
                fear = FEAR_MAX
            agent.behavior = NormalHuman() if fear == 0 else PanickedHuman(fear_level=fear)

        case SickHuman(sick_level=level):
            if level >= SICK_LEVEL_TO_TURN:
                log.debug("agent %d turned into a zombie at %s", agent.id, agent.location)
                agent.behavior = Zombie()
                return agent
            if rng.next_float() < TURN_CHANCE:
                agent.face_randomly(rng)
            agent.behavior = SickHuman(sick_level=level + 1)

        case Zombie(pursuit_timer=timer):
            timer = max(0, timer - 1)
            if target is not None and target.state in PREY_STATES:
                timer = PURSUIT_TICKS
            elif timer == 0 and target is None:
                agent.face_randomly(rng)
            agent.behavior = Zombie(pursuit_timer=timer)

    return agent


def move(agent: Agent, path_clear: bool, rng: SimulationRng) -> Point:
    # speed is a chance to move this tick, not a distance
    if rng.next_float() > agent.behavior.speed:
        return agent.location
    if path_clear:
        agent.location = agent.next_cell()
    else:
        agent.face_randomly(rng)
    return agent.location


def interact(agent: Agent, target: Agent) -> Agent:
    match agent.behavior:
        case Zombie() if target.state in PREY_STATES:
            log.debug("agent %d bit agent %d at %s", agent.id, target.id, target.location)
            target.behavior = SickHuman()
    return target
