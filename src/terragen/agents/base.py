"""
Base class for terrain agents.

An agent is a small unit of behaviour that reads and writes the shared
height map one step at a time. The generator keeps *template* agents
(parameters only) and runs *live* clones made with ``copy()`` and
``spawn()``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from terragen.core.config import GeneratorConfig
from terragen.core.script import (
    ScriptFormatError,
    apply_fields,
    encode_agent,
    split_fields,
)

if TYPE_CHECKING:
    from terragen.core.heightmap import HeightMap


# Compass-aligned unit directions (dx, dy).
COMPASS_DIRECTIONS: list[tuple[int, int]] = [(1, 0), (0, 1), (-1, 0), (0, -1)]

# Compass directions including diagonals, normalized.
OCTANT_DIRECTIONS: list[tuple[float, float]] = [
    (math.cos(k * math.pi / 4), math.sin(k * math.pi / 4)) for k in range(8)
]


def rotate(direction: tuple[float, float], degrees: float) -> tuple[float, float]:
    """Rotate a 2-D vector counter-clockwise."""
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    dx, dy = direction
    return (dx * c - dy * s, dx * s + dy * c)


def random_inland_position(rng: np.random.Generator, size: int) -> tuple[int, int]:
    """Uniformly random interior cell (any cell on grids smaller than 3)."""
    lo, hi = (1, size - 2) if size > 2 else (0, size - 1)
    return int(rng.integers(lo, hi + 1)), int(rng.integers(lo, hi + 1))


def is_coastal(heightmap: HeightMap, x: int, z: int, sea_level: float) -> bool:
    """Land cell with at least one water cell among its 4-neighbours."""
    if heightmap.get(x, z) <= sea_level:
        return False
    return any(
        heightmap.get(nx, nz) <= sea_level
        for nx, nz in heightmap.neighbors(x, z, diagonal=False)
    )


class TerrainAgent(ABC):
    """
    Abstract base for all terrain agents.

    Subclasses declare ``type_name`` (the script tag) and ``DEFAULTS``
    (every numeric parameter they recognise, including ``count``) and
    implement ``_on_spawn``, ``run`` and ``is_dead``.

    Contract:
        spawn(heightmap): bind to a grid and initialise runtime state.
        run(): advance exactly one step; no-op once dead.
        is_dead(): pure; once True stays True.
        copy(): fresh clone carrying parameters only.
    """

    type_name: ClassVar[str] = ""
    DEFAULTS: ClassVar[dict[str, float]] = {"count": 1.0}

    def __init__(self, **values: float):
        self.values: dict[str, float] = dict(self.DEFAULTS)
        for name, value in values.items():
            self.set_value(name, value)
        self.heightmap: HeightMap | None = None
        self.rng: np.random.Generator | None = None
        self.config: GeneratorConfig | None = None

    # ------------------------------------------------------------------
    # Life cycle
    # ------------------------------------------------------------------
    def spawn(
        self,
        heightmap: HeightMap,
        rng: np.random.Generator | None = None,
        config: GeneratorConfig | None = None,
    ) -> None:
        """Bind this instance to a height map and initialise its state."""
        if heightmap is None:
            raise RuntimeError(f"{self.type_name}: cannot spawn without a height map")
        self.heightmap = heightmap
        self.rng = rng if rng is not None else np.random.default_rng()
        self.config = config if config is not None else GeneratorConfig()
        self._on_spawn()

    @abstractmethod
    def _on_spawn(self) -> None:
        """Initialise runtime state from parameters; heightmap/rng/config are set."""

    @abstractmethod
    def run(self) -> None:
        """Advance one discrete step."""

    @abstractmethod
    def is_dead(self) -> bool:
        """True once the agent can be removed by the generator."""

    def copy(self) -> TerrainAgent:
        """Detached clone holding the same parameters and no runtime state."""
        return type(self)(**self.values)

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------
    def get_type_name(self) -> str:
        return self.type_name

    def get_properties(self) -> list[str]:
        return list(self.values)

    def get_value(self, name: str) -> float:
        try:
            return self.values[name]
        except KeyError:
            raise KeyError(f"{self.type_name} has no parameter '{name}'") from None

    def set_value(self, name: str, value: float) -> None:
        if name not in self.values:
            raise KeyError(f"{self.type_name} has no parameter '{name}'")
        self.values[name] = float(value)

    @property
    def count(self) -> int:
        return int(self.values["count"])

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_string(self) -> str:
        return encode_agent(self)

    def from_string(self, line: str) -> None:
        """Load parameters from a script line carrying this agent's tag."""
        fields = split_fields(line)
        if not fields or fields[0] != self.type_name:
            raise ScriptFormatError(
                f"Line {line!r} does not describe a {self.type_name} agent"
            )
        apply_fields(self, fields[1:])

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v:g}" for k, v in self.values.items())
        return f"{type(self).__name__}({params})"
