from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LightPolicy:
    name: str
    vision_distance: int
    opacity: float


NORMAL_LIGHT = LightPolicy(name="normal", vision_distance=10, opacity=0.0)
# Buildings and rooms without electricity
DARK_LIGHT = LightPolicy(name="dark", vision_distance=1, opacity=0.3)
