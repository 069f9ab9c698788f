"""
River agent: carves a channel downhill from high ground to the sea.
"""

from __future__ import annotations

from terragen.agents.base import TerrainAgent, random_inland_position


class RiverAgent(TerrainAgent):
    """Follows steepest descent from a high source cell, lowering the terrain.

    The river stops when it reaches water, gets stuck in a local minimum,
    or runs out of life.

    Parameters (script fields):
        count: Number of rivers per template.
        life: Maximum channel length in steps.
        depth: Height removed from each channel cell.
        width: Channel radius in cells (1 = single cell).
    """

    type_name = "River"
    DEFAULTS = {
        "count": 1.0,
        "life": 200.0,
        "depth": 0.05,
        "width": 1.0,
    }

    def __init__(self, **values: float):
        super().__init__(**values)
        self.x = 0
        self.y = 0
        self.life = 0
        self.finished = False
        self.path: list[tuple[int, int]] = []

    def _on_spawn(self) -> None:
        self.x, self.y = self._find_source()
        self.life = int(self.values["life"])
        self.finished = False
        self.path = []

    def _find_source(self) -> tuple[int, int]:
        """Highest of a handful of random interior cells."""
        samples = max(1, int(self.config.river_config.get("source_samples", 16)))
        size = self.heightmap.size
        best = random_inland_position(self.rng, size)
        for _ in range(samples - 1):
            x, y = random_inland_position(self.rng, size)
            if self.heightmap.get(x, y) > self.heightmap.get(*best):
                best = (x, y)
        return best

    def run(self) -> None:
        if self.is_dead():
            return
        here = self.heightmap.get(self.x, self.y)
        self.path.append((self.x, self.y))
        self._carve(self.x, self.y)
        self.life -= 1

        if here <= self.config.sea_level:
            self.finished = True
            return

        neighbours = self.heightmap.neighbors(self.x, self.y)
        lowest = min(neighbours, key=lambda c: self.heightmap.get(*c), default=None)
        if lowest is None or self.heightmap.get(*lowest) >= here:
            self.finished = True
            return
        self.x, self.y = lowest

    def _carve(self, cx: int, cy: int) -> None:
        radius = max(0, int(self.values["width"]) - 1)
        floor = float(self.config.river_config.get("min_depth", 0.0))
        depth = self.values["depth"]
        for x in range(cx - radius, cx + radius + 1):
            for y in range(cy - radius, cy + radius + 1):
                if not self.heightmap.in_bounds(x, y):
                    continue
                h = self.heightmap.get(x, y)
                if h > floor:
                    self.heightmap.set(x, y, max(floor, h - depth))

    def is_dead(self) -> bool:
        return self.finished or self.life <= 0
