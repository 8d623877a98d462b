"""Pipeline runner - generates an island, erodes it and exports the result."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from island_erosion.config import Settings
from island_erosion.terrain.erosion import ErosionSimulator
from island_erosion.terrain.export import write_json, write_npy
from island_erosion.terrain.generator import TerrainGenerator
from island_erosion.terrain.grid import HeightGrid
from island_erosion.terrain.presets import apply_preset
from island_erosion.terrain.types import (
    ConfigurationError,
    ErosionConfig,
    ErosionStats,
    RiverSource,
    TerrainConfig,
)

logger = logging.getLogger(__name__)


def derive_erosion_seed(seed: int) -> int:
    """Droplet seed derived from the terrain seed.

    Use abs() to ensure a non-negative seed for numpy's RNG.
    """
    return abs(seed ^ 7919)


@dataclass
class RunResult:
    """Output of one generate-and-erode run."""

    initial: HeightGrid
    grid: HeightGrid
    stats: ErosionStats
    sources: list[RiverSource] = field(default_factory=list)
    timings_ms: dict[str, float] = field(default_factory=dict)
    output_path: Path | None = None


class PipelineRunner:
    """Runs terrain generation and erosion for a fixed pair of configs."""

    def __init__(
        self,
        terrain_config: TerrainConfig,
        erosion_config: ErosionConfig,
        output_path: Path | None = None,
    ) -> None:
        # Validate everything up front so a bad erosion config fails
        # before generation work starts.
        terrain_config.validate()
        erosion_config.validate()
        if output_path is not None and output_path.suffix not in (".json", ".npy"):
            raise ConfigurationError(
                f"output_path must end in .json or .npy, got {output_path.name!r}"
            )
        self.terrain_config = terrain_config
        self.erosion_config = erosion_config
        self.output_path = output_path

    def run(self) -> RunResult:
        """Generate, erode and optionally export. Returns the run result."""
        try:
            return self._run()
        except Exception:
            logger.exception("Island run failed (seed=%d)", self.terrain_config.seed)
            raise

    def _run(self) -> RunResult:
        t0 = time.perf_counter()

        grid = TerrainGenerator(self.terrain_config).generate()
        initial = grid.copy()

        t_generate = time.perf_counter()

        simulator = ErosionSimulator(
            grid,
            self.erosion_config,
            seed=derive_erosion_seed(self.terrain_config.seed),
        )
        stats = simulator.run()

        t_erode = time.perf_counter()

        if self.output_path is not None:
            if self.output_path.suffix == ".npy":
                write_npy(grid, self.output_path)
            else:
                write_json(grid, self.output_path, stats)

        t_export = time.perf_counter()

        timings_ms = {
            "generate": (t_generate - t0) * 1000,
            "erode": (t_erode - t_generate) * 1000,
            "export": (t_export - t_erode) * 1000,
        }
        logger.info(
            "[Run] Phase timings: generate=%.1fms erode=%.1fms export=%.1fms total=%.1fms",
            timings_ms["generate"],
            timings_ms["erode"],
            timings_ms["export"],
            (t_export - t0) * 1000,
        )

        return RunResult(
            initial=initial,
            grid=grid,
            stats=stats,
            sources=list(simulator.sources),
            timings_ms=timings_ms,
            output_path=self.output_path,
        )


def build_configs(settings: Settings) -> tuple[TerrainConfig, ErosionConfig]:
    """Build terrain and erosion configs from run settings."""
    terrain_config = TerrainConfig(
        seed=settings.seed,
        width=settings.width,
        height=settings.height,
    )
    overrides = {}
    if settings.droplet_count is not None:
        overrides["droplet_count"] = settings.droplet_count
    erosion_config = ErosionConfig(**apply_preset(settings.preset, **overrides))
    return terrain_config, erosion_config


def run_from_settings(settings: Settings) -> RunResult:
    """Build configs from *settings* and run the full pipeline."""
    terrain_config, erosion_config = build_configs(settings)
    runner = PipelineRunner(terrain_config, erosion_config, output_path=settings.output_path)
    return runner.run()
