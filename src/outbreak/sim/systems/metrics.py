from __future__ import annotations

from typing import Iterable

from ..core.agent import Agent
from ..core.states import AgentState
from ..types.metrics import TickMetrics


def create_metrics(tick: int, agents: Iterable[Agent], duration_ms: float) -> TickMetrics:
    counts = {state: 0 for state in AgentState}
    for agent in agents:
        counts[agent.state] += 1
    return TickMetrics(
        tick=tick,
        population=sum(counts.values()),
        normal=counts[AgentState.NORMAL],
        panicked=counts[AgentState.PANICKED],
        sick=counts[AgentState.SICK],
        zombies=counts[AgentState.ZOMBIE],
        tick_duration_ms=duration_ms,
    )
