"""
Shared test configuration.

Provides small seeded configs and a height map that counts its
finalization passes.
"""

import pytest

from terragen.core.config import GeneratorConfig
from terragen.core.heightmap import HeightMap


class CountingHeightMap(HeightMap):
    """HeightMap that records how often the whole-grid passes run."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.smooth_calls = 0
        self.normal_calls = 0
        self.reset_calls = 0

    def smooth_all(self, passes=None):
        self.smooth_calls += 1
        super().smooth_all(passes)

    def compute_normals(self):
        self.normal_calls += 1
        super().compute_normals()

    def reset(self):
        self.reset_calls += 1
        super().reset()


@pytest.fixture
def config():
    return GeneratorConfig(random_seed=42, grid_size=16)


@pytest.fixture
def heightmap(config):
    return HeightMap(config.grid_size, initial_height=config.initial_height)


@pytest.fixture
def counting_heightmap():
    return CountingHeightMap(8)
