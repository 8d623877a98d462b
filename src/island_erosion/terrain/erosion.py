"""Droplet-based hydraulic erosion.

Each droplet spawns at a random point, follows the terrain downhill with
some inertia, picks up sediment while it has spare carrying capacity and
drops it when it is overloaded or climbing.  Droplets run one at a time,
each to termination, against the same grid, so later droplets see the
channels carved by earlier ones and the result depends only on the seed
and the parameters.

Random draw order (part of the reproducibility contract), all from one
``numpy.random.default_rng(seed & SEED_MASK)`` stream (negative seeds
wrap modulo 2**64):
  1. River source placement: ``source_attempts`` pairs (x, then y).
  2. For each rain droplet: x, then y.
Source droplets spawn at fixed points and draw nothing.
"""

import logging
import math
import time
from typing import Any

import numpy as np
from numpy.typing import NDArray

from island_erosion.terrain.grid import HeightGrid
from island_erosion.terrain.types import (
    Droplet,
    ErosionConfig,
    ErosionStats,
    RiverSource,
    TerminationReason,
)

logger = logging.getLogger(__name__)

# Direction vectors shorter than this count as "no preferred direction"
MIN_DIRECTION_LENGTH = 1e-9

# Any integer seed maps onto the unsigned 64-bit range the generator accepts
SEED_MASK = (1 << 64) - 1


def step_droplet(
    grid: HeightGrid,
    droplet: Droplet,
    config: ErosionConfig,
    stats: ErosionStats,
) -> TerminationReason | None:
    """Advance *droplet* by one step, eroding or depositing at its old position.

    Returns the termination reason if the droplet stopped during this
    step, else None.  Lifetime is checked by the caller.
    """
    old_x, old_y = droplet.x, droplet.y
    old_height = grid.sample(old_x, old_y)
    grad_x, grad_y = grid.gradient(old_x, old_y)

    # Blend previous direction with the downhill gradient
    dir_x = droplet.dir_x * config.inertia - grad_x * (1.0 - config.inertia)
    dir_y = droplet.dir_y * config.inertia - grad_y * (1.0 - config.inertia)
    length = math.hypot(dir_x, dir_y)
    if length > MIN_DIRECTION_LENGTH:
        dir_x /= length
        dir_y /= length
    else:
        # Flat ground: the droplet stays put and evaporates in place
        dir_x = dir_y = 0.0
    droplet.dir_x, droplet.dir_y = dir_x, dir_y

    droplet.steps += 1
    stats.steps += 1

    new_x = old_x + dir_x
    new_y = old_y + dir_y
    if not grid.contains(new_x, new_y):
        return TerminationReason.OUT_OF_BOUNDS
    droplet.x, droplet.y = new_x, new_y

    delta_height = grid.sample(new_x, new_y) - old_height
    capacity = (
        max(-delta_height, config.min_slope)
        * droplet.speed
        * droplet.water
        * config.capacity_factor
    )

    if droplet.sediment > capacity or delta_height > 0:
        if delta_height > 0:
            # Climbing: fill the pit behind us, at most with what we carry
            amount = min(delta_height, droplet.sediment)
        else:
            amount = (droplet.sediment - capacity) * config.deposition_rate
        deposited = grid.deposit(old_x, old_y, amount)
        droplet.sediment = max(droplet.sediment - deposited, 0.0)
        stats.deposited += deposited
    else:
        # Never take more than the drop, or the path would dig a pit
        amount = min((capacity - droplet.sediment) * config.erosion_rate, -delta_height)
        removed = grid.erode(old_x, old_y, amount, floor=config.erosion_floor)
        droplet.sediment += removed
        stats.eroded += removed

    droplet.speed = math.sqrt(max(0.0, droplet.speed * droplet.speed - delta_height * config.gravity))
    droplet.water *= 1.0 - config.evaporation_rate

    if droplet.water < config.min_water:
        return TerminationReason.EVAPORATED
    return None


class ErosionSimulator:
    """Runs droplets sequentially over a grid it owns for the run."""

    def __init__(self, grid: HeightGrid, config: ErosionConfig, seed: int = 0) -> None:
        config.validate()
        self.grid = grid
        self.config = config
        self.seed = seed
        self.rng = np.random.default_rng(seed & SEED_MASK)
        self.stats = ErosionStats()
        self.sources: list[RiverSource] = []

    def spawn_droplet(self, x: float, y: float) -> Droplet:
        """Create a fresh droplet at (x, y) with the configured water and speed."""
        return Droplet(
            x=x,
            y=y,
            water=self.config.initial_water,
            speed=self.config.initial_speed,
        )

    def _random_position(self) -> tuple[float, float]:
        x = float(self.rng.random()) * (self.grid.width - 1)
        y = float(self.rng.random()) * (self.grid.height - 1)
        return x, y

    def random_droplet(self) -> Droplet:
        """Spawn a droplet at a uniformly random point inside the grid."""
        return self.spawn_droplet(*self._random_position())

    def place_sources(self) -> list[RiverSource]:
        """Pick river sources among random high points.

        Draws ``source_attempts`` positions and keeps those above
        ``source_min_elevation``.
        """
        cfg = self.config
        sources = []
        for _ in range(int(cfg.source_attempts)):
            x, y = self._random_position()
            if self.grid.sample(x, y) > cfg.source_min_elevation:
                sources.append(RiverSource(x=x, y=y, flux=cfg.source_flux))
        self.sources = sources
        logger.info("Placed %d river sources from %d attempts", len(sources), cfg.source_attempts)
        return sources

    def simulate_droplet(
        self,
        droplet: Droplet,
        trace: list[tuple[float, float]] | None = None,
    ) -> TerminationReason:
        """Run *droplet* until it terminates.

        Args:
            droplet: Droplet to simulate; mutated in place
            trace: Optional list that receives every position visited,
                spawn point included (debugging only)

        Returns:
            Why the droplet stopped
        """
        cfg = self.config
        if trace is not None:
            trace.append((droplet.x, droplet.y))

        while True:
            reason = step_droplet(self.grid, droplet, cfg, self.stats)
            if trace is not None and reason is not TerminationReason.OUT_OF_BOUNDS:
                trace.append((droplet.x, droplet.y))
            if reason is None and droplet.steps >= cfg.max_droplet_lifetime:
                reason = TerminationReason.MAX_LIFETIME
            if reason is not None:
                break

        if cfg.settle_sediment and droplet.sediment > 0.0:
            settled = self.grid.deposit(droplet.x, droplet.y, droplet.sediment)
            droplet.sediment -= settled
            self.stats.deposited += settled
            self.stats.settled += settled

        self.stats.droplets += 1
        self.stats.terminations[reason] += 1
        return reason

    def run(self) -> ErosionStats:
        """Simulate ``droplet_count`` rain droplets, plus any source droplets.

        Mutates the grid in place and returns the cumulative statistics.
        """
        cfg = self.config
        logger.info(
            "Eroding %dx%d grid with %d droplets (seed=%d)",
            self.grid.width, self.grid.height, cfg.droplet_count, self.seed,
        )

        t0 = time.perf_counter()

        if cfg.source_attempts > 0:
            self.place_sources()

        droplet_count = int(cfg.droplet_count)
        report_every = max(droplet_count // 10, 1)
        for i in range(droplet_count):
            self.simulate_droplet(self.random_droplet())
            for source in self.sources:
                for _ in range(source.flow()):
                    self.simulate_droplet(self.spawn_droplet(source.x, source.y))

            if (i + 1) % report_every == 0:
                logger.debug(
                    "Erosion progress: %d/%d rain droplets, eroded=%.4f",
                    i + 1, droplet_count, self.stats.eroded,
                )

        total_ms = (time.perf_counter() - t0) * 1000
        logger.info(
            "[Erosion] Complete in %.1fms: droplets=%d steps=%d eroded=%.4f deposited=%.4f %s",
            total_ms,
            self.stats.droplets,
            self.stats.steps,
            self.stats.eroded,
            self.stats.deposited,
            dict(self.stats.terminations),
        )

        return self.stats


def apply_erosion(
    heightfield: NDArray[np.float64],
    seed: int,
    config_overrides: dict[str, Any] | None = None,
) -> NDArray[np.float64]:
    """Apply droplet erosion to a copy of *heightfield*.

    Args:
        heightfield: 2D height array (left untouched)
        seed: Random seed for deterministic droplet spawning
        config_overrides: Optional ErosionConfig field overrides

    Returns:
        Eroded heightfield
    """
    config = ErosionConfig(**(config_overrides or {}))
    grid = HeightGrid(heightfield)
    ErosionSimulator(grid, config, seed=seed).run()
    return grid.to_array()
