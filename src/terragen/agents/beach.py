"""
Beach agent: walks the shoreline flattening low land into beaches.
"""

from __future__ import annotations

from terragen.agents.base import TerrainAgent, is_coastal


class BeachAgent(TerrainAgent):
    """Flattens low coastal land to a uniform beach height.

    Parameters (script fields):
        count: Number of walkers per template.
        life: Steps before the walker stops.
        height: Beach elevation written to flattened cells.
        limit: Only land below this height is flattened.
        width: Flattening radius in cells.
    """

    type_name = "Beach"
    DEFAULTS = {
        "count": 1.0,
        "life": 100.0,
        "height": 0.12,
        "limit": 0.3,
        "width": 2.0,
    }

    def __init__(self, **values: float):
        super().__init__(**values)
        self.x = 0
        self.y = 0
        self.life = 0
        self.finished = False

    def _on_spawn(self) -> None:
        self.life = int(self.values["life"])
        start = self._find_shore()
        self.finished = start is None
        if start is not None:
            self.x, self.y = start

    def _find_shore(self) -> tuple[int, int] | None:
        size = self.heightmap.size
        attempts = int(self.config.beach_config.get("start_attempts", 64))
        sea_level = self.config.sea_level
        for _ in range(attempts):
            x, y = int(self.rng.integers(0, size)), int(self.rng.integers(0, size))
            if is_coastal(self.heightmap, x, y, sea_level):
                return x, y
        return None

    def run(self) -> None:
        if self.is_dead():
            return
        self._flatten(self.x, self.y)
        self.life -= 1

        sea_level = self.config.sea_level
        shore = [
            c for c in self.heightmap.neighbors(self.x, self.y)
            if is_coastal(self.heightmap, c[0], c[1], sea_level)
        ]
        if not shore:
            self.finished = True
            return
        self.x, self.y = shore[int(self.rng.integers(0, len(shore)))]

    def _flatten(self, cx: int, cy: int) -> None:
        radius = max(0, int(self.values["width"]))
        sea_level = self.config.sea_level
        for x in range(cx - radius, cx + radius + 1):
            for y in range(cy - radius, cy + radius + 1):
                if not self.heightmap.in_bounds(x, y):
                    continue
                h = self.heightmap.get(x, y)
                if sea_level < h < self.values["limit"]:
                    self.heightmap.set(x, y, self.values["height"])

    def is_dead(self) -> bool:
        return self.finished or self.life <= 0
