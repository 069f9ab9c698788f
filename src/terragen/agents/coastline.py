"""
Coastline agent: recursive binary-branching growth over the height map.

A coastline tree starts at a single root node (a boundary cell, or an
interior cell for inland variants). Each step every growing node scores
the cells reachable along its default direction plus a few angular
perturbations, moves to the best in-bounds candidate and raises the
terrain there. Every ``branchInterval`` steps a node splits into two
children heading off at ``±branch_angle``; the parent stops moving and
hands its remaining budget to them.

Nodes live in a flat arena addressed by index. A node has either no
children or exactly two. The whole tree is dead only once the root and
every descendant are terminal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from terragen.agents.base import (
    COMPASS_DIRECTIONS,
    TerrainAgent,
    random_inland_position,
    rotate,
)
from terragen.core.noise import NoiseSource

ROOT = 0


@dataclass
class CoastNode:
    """One branch of a coastline tree.

    Attributes:
        x, y: Current cell.
        life: Remaining step budget.
        vertex_limit: Maximum vertices this branch may lay down.
        direction: Default growth direction (unit vector).
        vertices: Vertices laid down so far.
        steps_since_branch: Steps since this node was created.
        terminal: This branch has stopped growing.
        children: Arena indices of the two children, or None.
        parent: Arena index of the parent, None for the root.
    """

    x: int
    y: int
    life: int
    vertex_limit: int
    direction: tuple[float, float]
    vertices: int = 0
    steps_since_branch: int = 0
    terminal: bool = False
    children: tuple[int, int] | None = None
    parent: int | None = None

    @property
    def is_root(self) -> bool:
        return self.parent is None


class CoastLineAgent(TerrainAgent):
    """Grows a branching coastline that raises land out of the sea.

    Parameters (script fields):
        count: Number of trees spawned per template.
        life: Step budget of the root (``maxLife``).
        vertexLimit: Maximum vertices the root may lay down.
        branchInterval: Steps a node takes before splitting in two.
        inland: Non-zero to start from an interior cell.
        height: Elevation written at each vertex.
    """

    type_name = "CoastLine"
    DEFAULTS = {
        "count": 1.0,
        "life": 200.0,
        "vertexLimit": 400.0,
        "branchInterval": 20.0,
        "inland": 0.0,
        "height": 0.5,
    }

    def __init__(self, **values: float):
        super().__init__(**values)
        self.nodes: list[CoastNode] = []
        self.attractor: tuple[int, int] = (0, 0)
        self.repulsor: tuple[int, int] = (0, 0)
        self.max_life = 0
        self.noise: NoiseSource | None = None
        self._dead = False
        self._size = 0

    # ------------------------------------------------------------------
    # Life cycle
    # ------------------------------------------------------------------
    def _on_spawn(self) -> None:
        size = self.heightmap.size
        self.max_life = int(self.values["life"])

        if self.values["inland"]:
            x, y = self.get_random_inland_position()
            direction = self.get_random_direction()
        else:
            (x, y), direction = self.get_random_position()

        self.attractor = self.get_random_inland_position()
        self.repulsor = self.get_random_inland_position()
        self.noise = NoiseSource.from_config(
            seed=int(self.rng.integers(0, 2**31 - 1)),
            noise_config=self.config.noise_config,
        )
        self.nodes = [
            CoastNode(
                x=x,
                y=y,
                life=self.max_life,
                vertex_limit=int(self.values["vertexLimit"]),
                direction=(float(direction[0]), float(direction[1])),
            )
        ]
        self._dead = False
        self._size = size

    def run(self) -> None:
        if self._dead or not self.nodes:
            return
        # Children created this step start moving next step.
        growing = [i for i, node in enumerate(self.nodes) if not node.terminal]
        for i in growing:
            self._step_node(i)
        self._dead = self._subtree_terminal(ROOT)

    def is_dead(self) -> bool:
        return self._dead

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------
    @property
    def _tuning(self) -> dict[str, Any]:
        return self.config.coastline_config

    def _step_node(self, index: int) -> None:
        node = self.nodes[index]
        if node.life <= 0 or node.vertices >= node.vertex_limit:
            node.terminal = True
            return

        best = self._best_candidate(node)
        if best is None:
            node.terminal = True
            return

        cx, cy, direction = best
        node.x, node.y = cx, cy
        node.direction = direction
        self._raise(cx, cy)
        node.life -= 1
        node.vertices += 1
        node.steps_since_branch += 1

        interval = max(1, int(self.values["branchInterval"]))
        exhausted = node.life <= 0 or node.vertices >= node.vertex_limit
        if not exhausted and node.steps_since_branch >= interval:
            self._branch(index)
        elif exhausted:
            node.terminal = True

    def _candidates(self, node: CoastNode) -> list[tuple[int, int, tuple[float, float]]]:
        """In-bounds cells reachable along the perturbed directions.

        Ordered straight-ahead first, then by increasing deflection, so
        that equal scores resolve toward the default direction.
        """
        step = float(self._tuning.get("step_length", 1.0))
        angles = sorted(self._tuning.get("candidate_angles", [0.0]), key=lambda a: (abs(a), a))
        seen: set[tuple[int, int]] = set()
        out: list[tuple[int, int, tuple[float, float]]] = []
        for angle in angles:
            dx, dy = rotate(node.direction, angle)
            cx = int(round(node.x + dx * step))
            cy = int(round(node.y + dy * step))
            if (cx, cy) == (node.x, node.y) or (cx, cy) in seen:
                continue
            if not self.heightmap.in_bounds(cx, cy):
                continue
            seen.add((cx, cy))
            out.append((cx, cy, (dx, dy)))
        return out

    def _best_candidate(self, node: CoastNode) -> tuple[int, int, tuple[float, float]] | None:
        threshold = float(self._tuning.get("continuation_threshold", -math.inf))
        best = None
        best_score = -math.inf
        for cx, cy, direction in self._candidates(node):
            score = self.get_score(cx, cy)
            if score > best_score:
                best, best_score = (cx, cy, direction), score
        if best is None or best_score < threshold:
            return None
        return best

    def _branch(self, index: int) -> None:
        """Split a node into two children diverging by ``±branch_angle``."""
        parent = self.nodes[index]
        split = float(self._tuning.get("life_split", 0.5))
        child_life = int(parent.life * split)
        child_vertices = int((parent.vertex_limit - parent.vertices) * split)
        if child_life < 1 or child_vertices < 1:
            return

        angle = float(self._tuning.get("branch_angle", 45.0))
        first = len(self.nodes)
        for sign in (-1.0, 1.0):
            self.nodes.append(
                CoastNode(
                    x=parent.x,
                    y=parent.y,
                    life=child_life,
                    vertex_limit=child_vertices,
                    direction=rotate(parent.direction, sign * angle),
                    parent=index,
                )
            )
        parent.children = (first, first + 1)
        parent.life -= 2 * child_life
        parent.terminal = True

    def _raise(self, x: int, y: int) -> None:
        """Raise land to ``height`` around (x, y); never lowers terrain."""
        height = self.values["height"]
        radius = int(self._tuning.get("footprint", 0))
        for fx in range(x - radius, x + radius + 1):
            for fy in range(y - radius, y + radius + 1):
                if self.heightmap.in_bounds(fx, fy) and self.heightmap.get(fx, fy) < height:
                    self.heightmap.set(fx, fy, height)

    def _subtree_terminal(self, index: int) -> bool:
        node = self.nodes[index]
        if not node.terminal:
            return False
        if node.children is None:
            return True
        return all(self._subtree_terminal(c) for c in node.children)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def get_score(self, x: int, y: int) -> float:
        """Desirability of growing into (x, y).

        Prefers cells still at sea level, close to the attractor, far
        from the repulsor, with a noise term for irregularity.
        """
        t = self._tuning
        sea_level = self.config.sea_level
        span = max(self.values["height"] - sea_level, 1e-6)
        height_term = -max(0.0, self.heightmap.get(x, y) - sea_level) / span

        norm = float(self._size * self._size)
        attract = self.get_square_distance(x, y, *self.attractor) / norm
        repulse = self.get_square_distance(x, y, *self.repulsor) / norm

        return (
            t.get("height_weight", 1.0) * height_term
            - t.get("attractor_weight", 1.0) * attract
            + t.get("repulsor_weight", 0.5) * repulse
            + t.get("noise_weight", 0.5) * self.noise.value(x, y)
        )

    @staticmethod
    def get_square_distance(x: int, y: int, x2: int, y2: int) -> float:
        return float((x - x2) ** 2 + (y - y2) ** 2)

    # ------------------------------------------------------------------
    # Random placement (used only at spawn)
    # ------------------------------------------------------------------
    def get_random_position(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Uniformly random boundary cell and the inward direction of its side."""
        size = self.heightmap.size
        side = int(self.rng.integers(0, 4))
        t = int(self.rng.integers(0, size))
        if side == 0:
            return (0, t), (1, 0)
        if side == 1:
            return (size - 1, t), (-1, 0)
        if side == 2:
            return (t, 0), (0, 1)
        return (t, size - 1), (0, -1)

    def get_random_inland_position(self) -> tuple[int, int]:
        return random_inland_position(self.rng, self.heightmap.size)

    def get_random_direction(self) -> tuple[int, int]:
        return COMPASS_DIRECTIONS[int(self.rng.integers(0, len(COMPASS_DIRECTIONS)))]

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def vertex_count(self) -> int:
        """Vertices laid down by the whole tree."""
        return sum(node.vertices for node in self.nodes)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def leaves(self) -> list[CoastNode]:
        return [node for node in self.nodes if node.children is None]
