from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Dict, List, Optional

from ..systems.generation import build_city
from ..systems.metrics import create_metrics
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata
from .agent import Agent
from .component import Component
from .config import SimulationConfig
from .rng import SimulationRng

log = logging.getLogger("outbreak")


class World:
    """Owns the city, the random source and the tick counter.

    ``reset`` and ``step`` are the only entry points a scheduler needs.
    """

    def __init__(self, config: SimulationConfig):
        self._config = config
        self._map_seed = config.map_seed
        self._rng = SimulationRng(self._map_seed)
        self._city: Optional[Component] = None
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self.reset()

    @property
    def city(self) -> Component:
        assert self._city is not None
        return self._city

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def map_seed(self) -> Optional[str]:
        return self._map_seed

    @property
    def rng(self) -> SimulationRng:
        return self._rng

    @property
    def agents(self) -> List[Agent]:
        return list(self.city.all_agents())

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def set_map_seed(self, map_seed: Optional[str]) -> None:
        self._map_seed = None if map_seed is None else str(map_seed)

    def reset(self) -> None:
        self._rng.reseed(self._map_seed)
        self._city = build_city(self._config.width, self._config.height, self._config.city, self._rng)
        self._tick = 0
        self._metrics = create_metrics(0, self._city.all_agents(), 0.0)
        log.info("world reset with map seed %r", self._map_seed)

    def step(self) -> TickMetrics:
        start = perf_counter()
        self.city.step_tick(self._rng)
        self._tick += 1
        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = create_metrics(self._tick, self.city.all_agents(), elapsed_ms)
        self._metrics = metrics
        log.debug(
            "tick %d: normal=%d panicked=%d sick=%d zombies=%d",
            metrics.tick,
            metrics.normal,
            metrics.panicked,
            metrics.sick,
            metrics.zombies,
        )
        return metrics

    def snapshot(self) -> Snapshot:
        metrics = self._metrics if self._metrics is not None else create_metrics(self._tick, self.agents, 0.0)
        components = [component.draw_request() for component in self.city.walk()]
        agents_payload = [self._agent_snapshot(agent) for agent in self.city.all_agents()]
        metadata = SnapshotMetadata(
            width=self._config.width,
            height=self._config.height,
            map_seed=self._map_seed,
            config_version=self._config.config_version,
        )
        return Snapshot(
            tick=self._tick,
            metrics=metrics,
            agents=agents_payload,
            components=components,
            metadata=metadata,
        )

    @staticmethod
    def _agent_snapshot(agent: Agent) -> Dict[str, Any]:
        return {
            "id": agent.id,
            "x": agent.location.x,
            "y": agent.location.y,
            "fx": agent.facing.x,
            "fy": agent.facing.y,
            "state": agent.state.value,
            "color": agent.color,
        }
