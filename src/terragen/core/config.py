"""
Master configuration for terragen.

ALL tunable parameters live here. Agent scripts carry the per-agent
parameters (count, life, height, ...); this object carries the global
grid settings and the weights that steer agent behaviour.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class GeneratorConfig:
    """
    Master configuration for a generation run.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int | None = None

    # === Height grid ===
    grid_size: int = 128
    initial_height: float = 0.0
    sea_level: float = 0.1
    smoothing_passes: int = 1

    # === Scheduling ===
    # Optional safety cap for run_all(); None = run until finished.
    max_ticks: int | None = None

    # === Noise ===
    noise_config: dict[str, float] = field(default_factory=lambda: {
        "scale": 0.08,
        "octaves": 3,
        "lacunarity": 2.0,
        "gain": 0.5,
    })

    # === Coastline growth ===
    # Score = height_weight * height_term
    #       - attractor_weight * d2(attractor) / size^2
    #       + repulsor_weight * d2(repulsor) / size^2
    #       + noise_weight * noise(x, y)
    coastline_config: dict[str, Any] = field(default_factory=lambda: {
        "height_weight": 1.0,
        "attractor_weight": 1.0,
        "repulsor_weight": 0.5,
        "noise_weight": 0.5,
        "continuation_threshold": -3.0,
        "candidate_angles": [-45.0, -20.0, 0.0, 20.0, 45.0],
        "step_length": 1.0,
        "branch_angle": 45.0,
        "life_split": 0.5,
        "footprint": 1,
    })

    # === Mountain ridges ===
    mountain_config: dict[str, float] = field(default_factory=lambda: {
        "turn_angle": 45.0,
        "land_search_attempts": 32,
    })

    # === Smoothing walkers ===
    smooth_config: dict[str, float] = field(default_factory=lambda: {
        "center_weight": 1.0,
    })

    # === Rivers ===
    river_config: dict[str, float] = field(default_factory=lambda: {
        "source_samples": 16,
        "min_depth": 0.0,
    })

    # === Beaches ===
    beach_config: dict[str, float] = field(default_factory=lambda: {
        "start_attempts": 64,
    })

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def __post_init__(self) -> None:
        if self.grid_size <= 0:
            raise ValueError(f"grid_size must be positive, got {self.grid_size}")
        split = self.coastline_config.get("life_split", 0.5)
        if not 0.0 < split <= 0.5:
            raise ValueError(f"coastline life_split must be in (0, 0.5], got {split}")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> GeneratorConfig:
        """Deserialize from a dict."""
        return cls(**{k: v for k, v in d.items() if not k.startswith("_")})

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    @classmethod
    def from_json(cls, s: str) -> GeneratorConfig:
        return cls.from_dict(json.loads(s))

    def configure(self, section: str, **kwargs: Any) -> None:
        """Update tuning parameters of one ``*_config`` section."""
        attr = f"{section}_config"
        if not hasattr(self, attr):
            raise KeyError(f"Unknown config section '{section}'")
        getattr(self, attr).update(kwargs)

    def diff(self, other: GeneratorConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for k in self.to_dict():
            v1 = getattr(self, k)
            v2 = getattr(other, k)
            if v1 != v2:
                diffs[k] = (v1, v2)
        return diffs
