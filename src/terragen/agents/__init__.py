"""Terrain agents and the registry the generator dispatches through."""

from terragen.agents.base import TerrainAgent
from terragen.agents.registry import AgentRegistry
from terragen.agents.coastline import CoastLineAgent, CoastNode
from terragen.agents.mountain import MountainAgent
from terragen.agents.smooth import SmoothAgent
from terragen.agents.river import RiverAgent
from terragen.agents.beach import BeachAgent

BUILTIN_AGENTS: list[type[TerrainAgent]] = [
    CoastLineAgent,
    MountainAgent,
    SmoothAgent,
    RiverAgent,
    BeachAgent,
]


def default_registry() -> AgentRegistry:
    """A fresh registry holding the five built-in agent kinds."""
    registry = AgentRegistry()
    for agent_cls in BUILTIN_AGENTS:
        registry.register(agent_cls)
    return registry


__all__ = [
    "TerrainAgent",
    "AgentRegistry",
    "CoastLineAgent",
    "CoastNode",
    "MountainAgent",
    "SmoothAgent",
    "RiverAgent",
    "BeachAgent",
    "BUILTIN_AGENTS",
    "default_registry",
]
