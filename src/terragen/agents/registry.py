"""
Agent registry.

Maps script type tags to agent classes so the generator and the script
decoder can instantiate agents without knowing the concrete kinds.
"""

from __future__ import annotations

from terragen.agents.base import TerrainAgent


class AgentRegistry:
    """
    Registry of available agent kinds, keyed by ``type_name``.

    Usage::

        registry = AgentRegistry()
        registry.register(CoastLineAgent)
        agent = registry.create("CoastLine")
    """

    def __init__(self) -> None:
        self._agents: dict[str, type[TerrainAgent]] = {}

    def register(self, agent_cls: type[TerrainAgent]) -> None:
        """Register an agent class under its ``type_name``."""
        name = agent_cls.type_name
        if not name:
            raise ValueError(f"{agent_cls.__name__} does not define a type_name")
        if name in self._agents and self._agents[name] is not agent_cls:
            raise ValueError(f"Agent type '{name}' is already registered")
        self._agents[name] = agent_cls

    def unregister(self, name: str) -> None:
        if name not in self._agents:
            raise KeyError(f"Agent type '{name}' is not registered")
        del self._agents[name]

    def create(self, name: str) -> TerrainAgent:
        """Instantiate a template agent with default parameters."""
        if name not in self._agents:
            raise KeyError(
                f"Unknown agent type '{name}'. "
                f"Available: {self.registered_names}"
            )
        return self._agents[name]()

    def get(self, name: str) -> type[TerrainAgent] | None:
        """Return a registered class by name, or *None*."""
        return self._agents.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    @property
    def registered_names(self) -> list[str]:
        """Names of all registered agent types, in registration order."""
        return list(self._agents.keys())
