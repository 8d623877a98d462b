"""Island heightmap generator combining fractal noise with an edge falloff."""

import logging
import time
from typing import Any

import numpy as np
from numpy.typing import NDArray

from island_erosion.terrain.grid import HeightGrid
from island_erosion.terrain.masks import apply_falloff
from island_erosion.terrain.noise import generate_heightfield
from island_erosion.terrain.types import TerrainConfig

logger = logging.getLogger(__name__)


class TerrainGenerator:
    """Generates the initial island height field for an erosion run."""

    def __init__(self, config: TerrainConfig) -> None:
        config.validate()
        self.config = config

    def generate(self) -> HeightGrid:
        """Generate a fully populated grid.

        Identical configs always produce identical grids.
        """
        cfg = self.config
        logger.info(
            "Generating %dx%d island (seed=%d, profile=%s)",
            cfg.width, cfg.height, cfg.seed, cfg.falloff_profile,
        )

        t0 = time.perf_counter()

        heightfield = generate_heightfield(
            seed=cfg.seed,
            width=cfg.width,
            height=cfg.height,
            octaves=cfg.noise_octaves,
            persistence=cfg.noise_persistence,
            lacunarity=cfg.noise_lacunarity,
            frequency=cfg.noise_frequency,
        )

        t_noise = time.perf_counter()

        # Scale roughness around mid-height before shaping the island
        heightfield = 0.5 + cfg.noise_amplitude * (heightfield - 0.5)
        heightfield = apply_falloff(heightfield, cfg.falloff_profile, cfg.falloff_shape)

        if cfg.normalize:
            heightfield = _normalize(heightfield)

        t_done = time.perf_counter()

        logger.info(
            "[Terrain] Generation complete: noise=%.1fms falloff=%.1fms total=%.1fms "
            "min=%.3f max=%.3f",
            (t_noise - t0) * 1000,
            (t_done - t_noise) * 1000,
            (t_done - t0) * 1000,
            float(heightfield.min()),
            float(heightfield.max()),
        )

        return HeightGrid(heightfield)


def _normalize(heightfield: NDArray[np.float64]) -> NDArray[np.float64]:
    """Rescale to [0, 1]. A constant field maps to all zeros."""
    lo = float(heightfield.min())
    hi = float(heightfield.max())
    if hi - lo < 1e-12:
        return np.zeros_like(heightfield)
    return (heightfield - lo) / (hi - lo)


def generate_island(
    seed: int,
    config_overrides: dict[str, Any] | None = None,
) -> HeightGrid:
    """Convenience function to generate an island grid.

    Args:
        seed: Seed for deterministic generation
        config_overrides: Optional TerrainConfig field overrides

    Returns:
        Freshly generated HeightGrid
    """
    config_kwargs: dict[str, Any] = {"seed": seed}
    if config_overrides:
        config_kwargs.update(config_overrides)

    config = TerrainConfig(**config_kwargs)
    return TerrainGenerator(config).generate()
