"""
Seeded 2-D coherent noise for agent steering.

Wraps OpenSimplex with fractal Brownian motion so agents get smooth,
organic perturbations instead of white noise.
"""

from __future__ import annotations

from opensimplex import OpenSimplex


class NoiseSource:
    """Deterministic fBm noise mapping (x, y) to a value in [-1, 1].

    Attributes:
        seed: Seed of the underlying simplex generator.
        scale: Coordinate multiplier applied before sampling.
        octaves: Number of fBm layers.
        lacunarity: Frequency multiplier between octaves.
        gain: Amplitude multiplier between octaves.
    """

    def __init__(
        self,
        seed: int = 0,
        scale: float = 0.08,
        octaves: int = 3,
        lacunarity: float = 2.0,
        gain: float = 0.5,
    ):
        self.seed = int(seed)
        self.scale = float(scale)
        self.octaves = max(1, int(octaves))
        self.lacunarity = float(lacunarity)
        self.gain = float(gain)
        self._gen = OpenSimplex(seed=self.seed)

    @classmethod
    def from_config(cls, seed: int, noise_config: dict[str, float]) -> NoiseSource:
        return cls(
            seed=seed,
            scale=noise_config.get("scale", 0.08),
            octaves=int(noise_config.get("octaves", 3)),
            lacunarity=noise_config.get("lacunarity", 2.0),
            gain=noise_config.get("gain", 0.5),
        )

    def value(self, x: float, y: float) -> float:
        """Sample normalized fBm noise at (x, y)."""
        amp = 1.0
        freq = self.scale
        total = 0.0
        norm = 0.0
        for _ in range(self.octaves):
            total += amp * self._gen.noise2(x * freq, y * freq)
            norm += amp
            freq *= self.lacunarity
            amp *= self.gain
        return total / norm

    def __repr__(self) -> str:
        return f"NoiseSource(seed={self.seed}, scale={self.scale}, octaves={self.octaves})"
