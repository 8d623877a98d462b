"""Type definitions for terrain generation and erosion."""

import math
from collections import Counter
from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import Any

from island_erosion.terrain.masks import falloff_names


class ConfigurationError(ValueError):
    """Raised when generation or erosion parameters are invalid.

    Detected once, before any generation or simulation work starts.
    """


class TerminationReason(StrEnum):
    """Why a droplet stopped flowing."""

    EVAPORATED = "evaporated"
    MAX_LIFETIME = "max_lifetime"
    OUT_OF_BOUNDS = "out_of_bounds"


def _require(condition: bool, field_name: str, message: str) -> None:
    if not condition:
        raise ConfigurationError(f"{field_name} {message}")


def _require_finite(config: Any) -> None:
    for f in fields(config):
        value = getattr(config, f.name)
        if isinstance(value, float) and not math.isfinite(value):
            raise ConfigurationError(f"{f.name} must be finite, got {value}")


def _require_whole(config: Any, *names: str) -> None:
    for name in names:
        value = getattr(config, name)
        _require(float(value).is_integer(), name, f"must be a whole number, got {value}")


@dataclass
class TerrainConfig:
    """Configuration for island heightmap generation.

    All parameters are deterministic given the seed.
    """

    # Seed for the noise field
    seed: int

    # Grid dimensions in cells
    width: int = 256
    height: int = 256

    # Fractal noise parameters
    noise_octaves: int = 6
    noise_frequency: float = 1.5  # Base frequency over the [-1, 1] domain
    noise_persistence: float = 0.5
    noise_lacunarity: float = 2.0
    noise_amplitude: float = 1.0

    # Island falloff: profile name from the falloff registry and its exponent
    falloff_profile: str = "radial"
    falloff_shape: float = 2.0

    # Rescale the final field to [0, 1]
    normalize: bool = True

    def validate(self) -> None:
        """Raise ConfigurationError if any parameter is out of range."""
        _require_finite(self)
        _require_whole(self, "width", "height", "noise_octaves")
        _require(self.width > 0, "width", f"must be > 0, got {self.width}")
        _require(self.height > 0, "height", f"must be > 0, got {self.height}")
        _require(self.noise_octaves >= 1, "noise_octaves", "must be >= 1")
        _require(self.noise_frequency > 0, "noise_frequency", "must be > 0")
        _require(self.noise_persistence >= 0, "noise_persistence", "must be >= 0")
        _require(self.noise_lacunarity >= 1, "noise_lacunarity", "must be >= 1")
        _require(self.noise_amplitude >= 0, "noise_amplitude", "must be >= 0")
        _require(self.falloff_shape > 0, "falloff_shape", "must be > 0")
        _require(
            self.falloff_profile in falloff_names(),
            "falloff_profile",
            f"must be one of {sorted(falloff_names())}, got {self.falloff_profile!r}",
        )


@dataclass
class ErosionConfig:
    """Tuning constants for droplet-based hydraulic erosion."""

    droplet_count: int = 50_000
    max_droplet_lifetime: int = 30

    # Blend weight of the previous direction against the downhill gradient
    inertia: float = 0.05

    # Sediment capacity ~ max(drop, min_slope) * speed * water * capacity_factor
    capacity_factor: float = 4.0
    min_slope: float = 0.01

    erosion_rate: float = 0.3
    deposition_rate: float = 0.3
    evaporation_rate: float = 0.01  # Multiplicative water loss per step
    gravity: float = 4.0

    initial_water: float = 1.0
    initial_speed: float = 1.0
    min_water: float = 1e-3  # Below this the droplet has evaporated

    # No cell is eroded below this elevation
    erosion_floor: float = 0.0

    # Drop carried sediment at the last in-bounds position on termination
    settle_sediment: bool = True

    # River sources (disabled when source_attempts == 0)
    source_attempts: int = 0
    source_min_elevation: float = 0.3
    source_flux: float = 0.01  # Droplets emitted per rain droplet

    def validate(self) -> None:
        """Raise ConfigurationError if any parameter is out of range."""
        _require_finite(self)
        _require_whole(self, "droplet_count", "max_droplet_lifetime", "source_attempts")
        _require(self.droplet_count > 0, "droplet_count", f"must be > 0, got {self.droplet_count}")
        _require(
            self.max_droplet_lifetime > 0,
            "max_droplet_lifetime",
            f"must be > 0, got {self.max_droplet_lifetime}",
        )
        for name in ("inertia", "erosion_rate", "deposition_rate"):
            value = getattr(self, name)
            _require(0.0 <= value <= 1.0, name, f"must be in [0, 1], got {value}")
        _require(
            0.0 < self.evaporation_rate <= 1.0,
            "evaporation_rate",
            f"must be in (0, 1], got {self.evaporation_rate}",
        )
        for name in ("capacity_factor", "min_slope", "gravity"):
            value = getattr(self, name)
            _require(value >= 0.0, name, f"must be >= 0, got {value}")
        _require(self.initial_water > 0, "initial_water", "must be > 0")
        _require(self.initial_speed >= 0, "initial_speed", "must be >= 0")
        _require(
            0.0 <= self.min_water < self.initial_water,
            "min_water",
            "must be in [0, initial_water)",
        )
        _require(self.source_attempts >= 0, "source_attempts", "must be >= 0")
        _require(self.source_flux >= 0, "source_flux", "must be >= 0")


@dataclass
class Droplet:
    """A single water droplet in grid space.

    Plain value type: the simulator owns and mutates it for one lifetime.
    """

    x: float
    y: float
    water: float
    speed: float
    dir_x: float = 0.0
    dir_y: float = 0.0
    sediment: float = 0.0
    steps: int = 0


@dataclass
class RiverSource:
    """A fixed spawn point that emits droplets at a steady flux."""

    x: float
    y: float
    flux: float
    stock: float = 0.0

    def flow(self) -> int:
        """Accumulate one tick of flux and return the whole droplets released."""
        self.stock += self.flux
        drops = math.floor(self.stock)
        self.stock -= drops
        return drops


@dataclass
class ErosionStats:
    """Summary of an erosion run."""

    droplets: int = 0
    steps: int = 0
    eroded: float = 0.0  # Sum of all material removed from the grid
    deposited: float = 0.0  # Sum of all material added back, settling included
    settled: float = 0.0  # Portion of `deposited` dropped at termination
    terminations: Counter = field(default_factory=Counter)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "droplets": self.droplets,
            "steps": self.steps,
            "eroded": self.eroded,
            "deposited": self.deposited,
            "settled": self.settled,
            "terminations": {str(k): v for k, v in self.terminations.items()},
        }
