from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    normal: int
    panicked: int
    sick: int
    zombies: int
    tick_duration_ms: float = 0.0

    @property
    def humans(self) -> int:
        return self.normal + self.panicked + self.sick
