"""
Generation presets: ready-made agent scripts with matching configs.

Each preset returns a GenerationPreset whose script can be fed straight
to ``Generator.loads``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from terragen.core.config import GeneratorConfig


@dataclass
class GenerationPreset:
    """A named agent script plus the config it was tuned for."""
    name: str
    description: str
    config: GeneratorConfig
    script: str


def island() -> GenerationPreset:
    """One inland coastline tree, a ridge, rivers and beaches."""
    return GenerationPreset(
        name="island",
        description="Single island grown from the centre outwards.",
        config=GeneratorConfig(experiment_name="island", grid_size=96),
        script=(
            "CoastLine!count=1!life=400!vertexLimit=800!branchInterval=25!inland=1!height=0.5\n"
            "newPhase\n"
            "Mountain!count=2!life=40!width=4!height=0.3!turnInterval=8\n"
            "newPhase\n"
            "Smooth!count=4!life=300!radius=1\n"
            "newPhase\n"
            "River!count=3!life=150!depth=0.05!width=1\n"
            "Beach!count=4!life=120!height=0.12!limit=0.3!width=2\n"
        ),
    )


def archipelago() -> GenerationPreset:
    """Many short-lived inland coastlines scattered across the sea."""
    return GenerationPreset(
        name="archipelago",
        description="Scattered small islands with beaches.",
        config=GeneratorConfig(
            experiment_name="archipelago",
            grid_size=128,
            coastline_config={
                "height_weight": 1.0,
                "attractor_weight": 0.5,
                "repulsor_weight": 1.0,
                "noise_weight": 1.0,
                "continuation_threshold": -3.0,
                "candidate_angles": [-60.0, -30.0, 0.0, 30.0, 60.0],
                "step_length": 1.0,
                "branch_angle": 60.0,
                "life_split": 0.5,
                "footprint": 1,
            },
        ),
        script=(
            "CoastLine!count=8!life=80!vertexLimit=160!branchInterval=12!inland=1!height=0.4\n"
            "newPhase\n"
            "Smooth!count=6!life=200!radius=1\n"
            "newPhase\n"
            "Beach!count=8!life=60!height=0.12!limit=0.25!width=1\n"
        ),
    )


def continent() -> GenerationPreset:
    """Coastlines growing in from every edge, heavy mountain ranges."""
    return GenerationPreset(
        name="continent",
        description="Large landmass grown from the map boundary.",
        config=GeneratorConfig(experiment_name="continent", grid_size=160, smoothing_passes=2),
        script=(
            "CoastLine!count=6!life=600!vertexLimit=1200!branchInterval=30!inland=0!height=0.5\n"
            "newPhase\n"
            "Mountain!count=5!life=80!width=6!height=0.35!turnInterval=12\n"
            "newPhase\n"
            "Smooth!count=10!life=400!radius=2\n"
            "newPhase\n"
            "River!count=8!life=300!depth=0.06!width=2\n"
            "newPhase\n"
            "Beach!count=10!life=200!height=0.12!limit=0.3!width=2\n"
        ),
    )


def coast_only() -> GenerationPreset:
    """A single boundary coastline and nothing else; handy for tuning."""
    return GenerationPreset(
        name="coast_only",
        description="One coastline tree, no other agents.",
        config=GeneratorConfig(experiment_name="coast_only", grid_size=64),
        script="CoastLine!count=1!life=200!vertexLimit=400!branchInterval=20\n",
    )


# Registry of all presets
PRESETS: dict[str, Callable[[], GenerationPreset]] = {
    "island": island,
    "archipelago": archipelago,
    "continent": continent,
    "coast_only": coast_only,
}


def get_preset(name: str) -> GenerationPreset:
    """Get a preset by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """Return list of available preset names."""
    return list(PRESETS.keys())
