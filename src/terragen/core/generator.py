"""
Phase scheduler.

Runs a scripted sequence of phases. Each phase is a list of template
agents; when no live agents remain the generator clones ``count``
instances of every template in the next phase, spawns them on the
height map and advances them one step per tick until they all die.
Once every phase is exhausted it fires the finish callback and
finalizes the grid (smoothing + normals) exactly once.

States: idle (not started) → running → finished.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import numpy as np

from terragen.agents import AgentRegistry, TerrainAgent, default_registry
from terragen.core.config import GeneratorConfig
from terragen.core.heightmap import HeightMap
from terragen.core.script import dump_script, parse_script

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Phase bookkeeping
# ---------------------------------------------------------------------------
@dataclass
class PhaseRecord:
    """What happened in one populated phase."""
    phase: int
    agents_spawned: int
    started_tick: int
    finished_tick: int | None = None
    type_counts: dict[str, int] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
class Generator:
    """
    Tick-based scheduler for terrain agents.

    Per tick:
    1. If no agents are live, populate the next phase, or finish when
       every phase is exhausted.
    2. Run every live agent once, in spawn order, and reap the dead.
    3. Increment the tick counter.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        heightmap: HeightMap | None = None,
        registry: AgentRegistry | None = None,
    ):
        self.config = config or GeneratorConfig()
        self.registry = registry or default_registry()
        self.rng = np.random.default_rng(self.config.random_seed)

        self._heightmap = heightmap
        self.phases: list[list[TerrainAgent]] = []
        self.agents: list[TerrainAgent] = []
        self.history: list[PhaseRecord] = []

        self._on_finish: Callable[[], None] = lambda: None
        self._is_running = False
        self._has_started = False
        self._finished = False
        self._defer_finalize = False
        self._next_phase = 0
        self._tick_count = 0

    @classmethod
    def from_config(
        cls, config: GeneratorConfig, registry: AgentRegistry | None = None,
    ) -> Generator:
        """Generator with a fresh height map sized from the config."""
        heightmap = HeightMap(
            config.grid_size,
            initial_height=config.initial_height,
            smoothing_passes=config.smoothing_passes,
        )
        return cls(config, heightmap=heightmap, registry=registry)

    # ------------------------------------------------------------------
    # Script I/O
    # ------------------------------------------------------------------
    def load(self, path: str | Path) -> None:
        """Replace all phases with the script at ``path`` and reset.

        Raises OSError if the file cannot be read.
        """
        text = Path(path).read_text(encoding="utf-8")
        self.loads(text)

    def loads(self, text: str) -> None:
        """Replace all phases with the given script text and reset."""
        self.phases = parse_script(text, self.registry)
        logger.info(
            "Loaded script: %d phase(s), %d template(s)",
            len(self.phases), sum(len(p) for p in self.phases),
        )
        self.reset()

    def save(self, path: str | Path) -> None:
        """Write the current phases to ``path``.

        Raises OSError if the file cannot be written.
        """
        Path(path).write_text(self.dumps(), encoding="utf-8")

    def dumps(self) -> str:
        return dump_script(self.phases)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------
    def add_agent(self, phase: int, agent: TerrainAgent) -> None:
        """Append a template to ``phase``, creating empty phases as needed."""
        if phase < 0:
            raise ValueError(f"Phase index must be non-negative, got {phase}")
        while phase >= len(self.phases):
            self.phases.append([])
        self.phases[phase].append(agent)

    def get_agents(self, phase: int) -> list[TerrainAgent]:
        """Templates declared for ``phase``."""
        return list(self.phases[phase])

    @property
    def phases_count(self) -> int:
        return len(self.phases)

    # ------------------------------------------------------------------
    # Height map
    # ------------------------------------------------------------------
    @property
    def heightmap(self) -> HeightMap | None:
        return self._heightmap

    def set_heightmap(self, heightmap: HeightMap | None) -> None:
        self._heightmap = heightmap

    @property
    def heightmap_size(self) -> int:
        return self._heightmap.size if self._heightmap is not None else 0

    def _require_heightmap(self) -> HeightMap:
        if self._heightmap is None:
            raise RuntimeError("Generator has no height map assigned")
        return self._heightmap

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def set_on_finish(self, callback: Callable[[], None]) -> None:
        self._on_finish = callback

    def is_started(self) -> bool:
        return self._has_started

    def is_over(self) -> bool:
        return self._has_started and not self._is_running

    @property
    def current_phase(self) -> int:
        """Index of the most recently populated phase (-1 before the first)."""
        return self._next_phase - 1

    @property
    def next_phase(self) -> int:
        return self._next_phase

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def live_agents(self) -> int:
        return len(self.agents)

    def reset(self) -> None:
        """Clear live agents and counters, reseed, and reset the height map."""
        self._is_running = False
        self._has_started = False
        self._finished = False
        self._next_phase = 0
        self._tick_count = 0
        self.agents = []
        self.history = []
        self.rng = np.random.default_rng(self.config.random_seed)
        if self._heightmap is not None:
            self._heightmap.reset()

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """Advance the generation by one step."""
        heightmap = self._require_heightmap()
        if not self._has_started:
            self._has_started = True
            self._is_running = True

        if not self.agents:
            if self._next_phase < len(self.phases):
                self._populate_next_phase(heightmap)
            elif not self._finished:
                self._finish()

        survivors: list[TerrainAgent] = []
        for agent in self.agents:
            agent.run()
            if not agent.is_dead():
                survivors.append(agent)
        self.agents = survivors

        if not self.agents and self.history and self.history[-1].finished_tick is None:
            self.history[-1].finished_tick = self._tick_count

        self._tick_count += 1

    def run_all(self, max_ticks: int | None = None) -> bool:
        """Tick until every phase is exhausted, then finalize the grid.

        Normal recomputation is switched off while ticking and the
        finalize pass runs once at the end. ``max_ticks`` (default
        ``config.max_ticks``) stops early without finalizing.

        Returns True if generation finished.
        """
        heightmap = self._require_heightmap()
        if self._finished:
            return True
        if max_ticks is None:
            max_ticks = self.config.max_ticks

        heightmap.compute_normals_enabled = False
        self._defer_finalize = True
        ticks = 0
        try:
            while not self._finished:
                if max_ticks is not None and ticks >= max_ticks:
                    logger.warning(
                        "run_all stopped after %d ticks (phase %d of %d, %d live agents)",
                        ticks, self.current_phase + 1, len(self.phases), len(self.agents),
                    )
                    return False
                self.tick()
                ticks += 1
        finally:
            heightmap.compute_normals_enabled = True
            self._defer_finalize = False

        self._finalize(heightmap)
        return True

    def _populate_next_phase(self, heightmap: HeightMap) -> None:
        """Clone and spawn ``count`` instances of every template in the next phase."""
        phase = self._next_phase
        record = PhaseRecord(phase=phase, agents_spawned=0, started_tick=self._tick_count)
        self.agents = []
        for template in self.phases[phase]:
            for _ in range(template.count):
                agent = template.copy()
                seed = int(self.rng.integers(0, 2**63 - 1))
                agent.spawn(heightmap, rng=np.random.default_rng(seed), config=self.config)
                self.agents.append(agent)
                record.type_counts[agent.type_name] = record.type_counts.get(agent.type_name, 0) + 1
        record.agents_spawned = len(self.agents)
        self.history.append(record)
        self._next_phase += 1
        logger.info(
            "Phase %d populated with %d agent(s) at tick %d",
            phase, record.agents_spawned, self._tick_count,
        )

    def _finish(self) -> None:
        self._is_running = False
        self._finished = True
        logger.info("Generation finished after %d ticks", self._tick_count)
        self._on_finish()
        if not self._defer_finalize:
            self._finalize(self._heightmap)

    def _finalize(self, heightmap: HeightMap) -> None:
        heightmap.smooth_all()
        heightmap.compute_normals()
