"""
Smoothing agent: a random walker that averages the terrain it crosses.
"""

from __future__ import annotations

from terragen.agents.base import TerrainAgent, random_inland_position


class SmoothAgent(TerrainAgent):
    """Replaces each visited cell by the mean of its neighbourhood.

    Parameters (script fields):
        count: Number of walkers per template.
        life: Steps before the walker stops.
        radius: Neighbourhood radius in cells.
    """

    type_name = "Smooth"
    DEFAULTS = {
        "count": 1.0,
        "life": 200.0,
        "radius": 1.0,
    }

    def __init__(self, **values: float):
        super().__init__(**values)
        self.x = 0
        self.y = 0
        self.life = 0

    def _on_spawn(self) -> None:
        self.x, self.y = random_inland_position(self.rng, self.heightmap.size)
        self.life = int(self.values["life"])

    def run(self) -> None:
        if self.is_dead():
            return
        self.heightmap.set(self.x, self.y, self._neighbourhood_mean(self.x, self.y))

        moves = self.heightmap.neighbors(self.x, self.y)
        if moves:
            self.x, self.y = moves[int(self.rng.integers(0, len(moves)))]
        self.life -= 1

    def _neighbourhood_mean(self, cx: int, cy: int) -> float:
        radius = max(1, int(self.values["radius"]))
        center_weight = float(self.config.smooth_config.get("center_weight", 1.0))
        total = self.heightmap.get(cx, cy) * center_weight
        weight = center_weight
        for x in range(cx - radius, cx + radius + 1):
            for y in range(cy - radius, cy + radius + 1):
                if (x, y) == (cx, cy) or not self.heightmap.in_bounds(x, y):
                    continue
                total += self.heightmap.get(x, y)
                weight += 1.0
        return total / weight

    def is_dead(self) -> bool:
        return self.life <= 0
