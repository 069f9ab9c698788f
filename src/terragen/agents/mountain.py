"""
Mountain agent: walks a ridge line, raising a conical footprint.
"""

from __future__ import annotations

import math

from terragen.agents.base import (
    OCTANT_DIRECTIONS,
    TerrainAgent,
    random_inland_position,
    rotate,
)


class MountainAgent(TerrainAgent):
    """Raises a ridge of mountains across existing land.

    Parameters (script fields):
        count: Number of ridges per template.
        life: Ridge length in steps.
        width: Footprint radius in cells.
        height: Elevation added at the ridge line.
        turnInterval: Steps between random ±turn_angle turns.
    """

    type_name = "Mountain"
    DEFAULTS = {
        "count": 1.0,
        "life": 60.0,
        "width": 4.0,
        "height": 0.3,
        "turnInterval": 10.0,
    }

    def __init__(self, **values: float):
        super().__init__(**values)
        self.x = 0.0
        self.y = 0.0
        self.direction: tuple[float, float] = (1.0, 0.0)
        self.life = 0
        self.steps = 0

    def _on_spawn(self) -> None:
        self.x, self.y = (float(c) for c in self._find_land_start())
        self.direction = OCTANT_DIRECTIONS[int(self.rng.integers(0, len(OCTANT_DIRECTIONS)))]
        self.life = int(self.values["life"])
        self.steps = 0

    def _find_land_start(self) -> tuple[int, int]:
        """Random interior cell above sea level, or any interior cell."""
        size = self.heightmap.size
        attempts = int(self.config.mountain_config.get("land_search_attempts", 32))
        fallback = random_inland_position(self.rng, size)
        for _ in range(attempts):
            x, y = random_inland_position(self.rng, size)
            if self.heightmap.get(x, y) > self.config.sea_level:
                return x, y
        return fallback

    def run(self) -> None:
        if self.is_dead():
            return
        cx, cy = int(round(self.x)), int(round(self.y))
        self._uplift(cx, cy)

        self.x += self.direction[0]
        self.y += self.direction[1]
        self.steps += 1
        self.life -= 1

        interval = max(1, int(self.values["turnInterval"]))
        if self.steps % interval == 0:
            angle = float(self.config.mountain_config.get("turn_angle", 45.0))
            sign = 1.0 if self.rng.random() < 0.5 else -1.0
            self.direction = rotate(self.direction, sign * angle)

        if not self.heightmap.in_bounds(int(round(self.x)), int(round(self.y))):
            self.life = 0

    def _uplift(self, cx: int, cy: int) -> None:
        radius = max(0, int(self.values["width"]))
        height = self.values["height"]
        for x in range(cx - radius, cx + radius + 1):
            for y in range(cy - radius, cy + radius + 1):
                if not self.heightmap.in_bounds(x, y):
                    continue
                d = math.hypot(x - cx, y - cy)
                if d > radius:
                    continue
                falloff = 1.0 - d / (radius + 1)
                self.heightmap.set(x, y, self.heightmap.get(x, y) + height * falloff)

    def is_dead(self) -> bool:
        return self.life <= 0
