"""
Square height grid mutated by terrain agents.

Heights are stored row-major by (x, z) in a numpy array. Agents only
touch terrain through ``get`` / ``set``; smoothing and normal
recomputation are whole-grid passes run by the generator at the end.

Out-of-bounds access is a programming error and raises ``IndexError``
(numpy would otherwise wrap negative indices silently).
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np


class HeightMap:
    """A square grid of scalar heights.

    Attributes:
        heights: ``(size, size)`` float array indexed ``[x, z]``.
        normals: ``(size, size, 3)`` unit surface normals, or None until
            the first ``compute_normals`` call.
        compute_normals_enabled: When False, ``compute_normals`` is a no-op.
            The generator switches it off during bulk ticking.
        smoothing_passes: Number of box-filter passes per ``smooth_all``.
    """

    def __init__(
        self,
        size: int,
        initial_height: float = 0.0,
        smoothing_passes: int = 1,
    ):
        if size <= 0:
            raise ValueError(f"HeightMap size must be positive, got {size}")
        self._size = int(size)
        self._initial = np.full((self._size, self._size), float(initial_height))
        self.heights = self._initial.copy()
        self.normals: np.ndarray | None = None
        self.compute_normals_enabled = True
        self.smoothing_passes = int(smoothing_passes)

    @classmethod
    def from_array(cls, heights: np.ndarray, smoothing_passes: int = 1) -> HeightMap:
        """Build a grid seeded from an existing square array.

        ``reset()`` restores this array, not a flat grid.
        """
        arr = np.asarray(heights, dtype=float)
        if arr.ndim != 2 or arr.shape[0] != arr.shape[1]:
            raise ValueError(f"Expected a square 2-D array, got shape {arr.shape}")
        hm = cls(arr.shape[0], smoothing_passes=smoothing_passes)
        hm._initial = arr.copy()
        hm.heights = arr.copy()
        return hm

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self._size

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self._size and 0 <= z < self._size

    def _check(self, x: int, z: int) -> None:
        if not self.in_bounds(x, z):
            raise IndexError(
                f"Cell ({x}, {z}) outside height map of size {self._size}"
            )

    def get(self, x: int, z: int) -> float:
        """Return the height at cell (x, z)."""
        self._check(x, z)
        return float(self.heights[x, z])

    def set(self, x: int, z: int, height: float) -> None:
        """Overwrite the height at cell (x, z)."""
        self._check(x, z)
        self.heights[x, z] = height

    def get_height(self, x: float, z: float) -> float:
        """Bilinearly interpolated height at fractional coordinates.

        Coordinates are clamped to the grid so sampling just outside the
        edge returns the edge value.
        """
        hi = self._size - 1
        x = min(max(x, 0.0), float(hi))
        z = min(max(z, 0.0), float(hi))
        x0, z0 = int(math.floor(x)), int(math.floor(z))
        x1, z1 = min(x0 + 1, hi), min(z0 + 1, hi)
        fx, fz = x - x0, z - z0
        h = self.heights
        top = h[x0, z0] + fx * (h[x1, z0] - h[x0, z0])
        bottom = h[x0, z1] + fx * (h[x1, z1] - h[x0, z1])
        return float(top + fz * (bottom - top))

    def neighbors(self, x: int, z: int, diagonal: bool = True) -> list[tuple[int, int]]:
        """In-bounds neighbouring cells of (x, z)."""
        offsets = (
            [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]
            if diagonal else [(-1, 0), (1, 0), (0, -1), (0, 1)]
        )
        return [
            (x + dx, z + dz) for dx, dz in offsets
            if self.in_bounds(x + dx, z + dz)
        ]

    # ------------------------------------------------------------------
    # Whole-grid passes
    # ------------------------------------------------------------------
    def smooth_all(self, passes: int | None = None) -> None:
        """Apply 3x3 box-filter passes over every cell (edges replicated)."""
        passes = self.smoothing_passes if passes is None else passes
        n = self._size
        for _ in range(passes):
            padded = np.pad(self.heights, 1, mode="edge")
            acc = np.zeros_like(self.heights)
            for dx in range(3):
                for dz in range(3):
                    acc += padded[dx:dx + n, dz:dz + n]
            self.heights = acc / 9.0

    def compute_normals(self) -> None:
        """Derive unit surface normals from height gradients.

        With unit cell spacing the normal at a cell is
        ``normalize(-dh/dx, 1, -dh/dz)``.
        """
        if not self.compute_normals_enabled:
            return
        if self._size == 1:
            self.normals = np.array([[[0.0, 1.0, 0.0]]])
            return
        dhdx, dhdz = np.gradient(self.heights)
        normals = np.stack([-dhdx, np.ones_like(self.heights), -dhdz], axis=-1)
        length = np.linalg.norm(normals, axis=-1, keepdims=True)
        self.normals = normals / length

    def reset(self) -> None:
        """Restore the pre-generation heights and drop cached normals."""
        self.heights = self._initial.copy()
        self.normals = None

    # ------------------------------------------------------------------
    # Queries / serialization
    # ------------------------------------------------------------------
    def land_fraction(self, sea_level: float) -> float:
        """Fraction of cells strictly above ``sea_level``."""
        return float(np.mean(self.heights > sea_level))

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self._size,
            "heights": self.heights.tolist(),
            "min_height": float(self.heights.min()),
            "max_height": float(self.heights.max()),
        }

    def __repr__(self) -> str:
        return (
            f"HeightMap(size={self._size}, "
            f"range=[{self.heights.min():.3f}, {self.heights.max():.3f}])"
        )
