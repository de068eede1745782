from __future__ import annotations

from typing import Dict

from .states import AgentState

# mapbox streets-basic tones
COMPONENT_COLORS: Dict[str, str] = {
    "city": "#ede5c9",
    "building": "#d9ccbf",
    "room": "#dee0c1",
    "wall": "#c8c2ac",
}

AGENT_COLORS: Dict[AgentState, str] = {
    AgentState.NORMAL: "#f9a7b0",
    AgentState.PANICKED: "#fff380",
    AgentState.SICK: "#fc2aee",
    AgentState.ZOMBIE: "#00ff00",
}

DARKNESS_COLOR = "#000000"
