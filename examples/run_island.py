#!/usr/bin/env python3
"""Generate a terrain from a preset and print per-phase results."""

import sys

from terragen.core.generator import Generator
from terragen.experiment.presets import get_preset

SHADES = " .:-=+*#%@"


def render(heightmap, sea_level: float, width: int = 64) -> str:
    """ASCII view of the height map, water drawn as '~'."""
    step = max(1, heightmap.size // width)
    lo = sea_level
    hi = max(float(heightmap.heights.max()), lo + 1e-9)
    rows = []
    for z in range(0, heightmap.size, step):
        row = []
        for x in range(0, heightmap.size, step):
            h = heightmap.get(x, z)
            if h <= sea_level:
                row.append("~")
            else:
                i = int((h - lo) / (hi - lo) * (len(SHADES) - 1))
                row.append(SHADES[i])
        rows.append("".join(row))
    return "\n".join(rows)


def main():
    name = sys.argv[1] if len(sys.argv) > 1 else "island"
    preset = get_preset(name)
    config = preset.config
    config.random_seed = 42

    print(f"=== terragen: {config.experiment_name} ===")
    print(preset.description)
    print(f"Grid: {config.grid_size}x{config.grid_size}")
    print(f"Sea level: {config.sea_level}")
    print()

    gen = Generator.from_config(config)
    gen.loads(preset.script)
    gen.run_all()

    print(f"{'Phase':>5} {'Agents':>6} {'Start':>6} {'End':>6}  Types")
    print("-" * 60)
    for rec in gen.history:
        types = ", ".join(f"{t}x{n}" for t, n in sorted(rec.type_counts.items()))
        print(f"{rec.phase:5d} {rec.agents_spawned:6d} {rec.started_tick:6d} "
              f"{rec.finished_tick if rec.finished_tick is not None else -1:6d}  {types}")

    hm = gen.heightmap
    print()
    print(f"=== Final State (tick {gen.tick_count}) ===")
    print(f"Land fraction: {hm.land_fraction(config.sea_level):.1%}")
    print(f"Height range: {hm.heights.min():.3f} .. {hm.heights.max():.3f}")
    print()
    print(render(hm, config.sea_level))


if __name__ == "__main__":
    main()
