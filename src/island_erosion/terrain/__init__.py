"""Terrain module: island heightmap generation and hydraulic erosion."""

from island_erosion.terrain.erosion import ErosionSimulator, apply_erosion, step_droplet
from island_erosion.terrain.export import colorize, heightgrid_to_dict, write_json, write_npy
from island_erosion.terrain.generator import TerrainGenerator, generate_island
from island_erosion.terrain.grid import HeightGrid
from island_erosion.terrain.masks import apply_falloff, get_falloff, register_falloff
from island_erosion.terrain.presets import apply_preset, get_preset_overrides
from island_erosion.terrain.types import (
    ConfigurationError,
    Droplet,
    ErosionConfig,
    ErosionStats,
    RiverSource,
    TerminationReason,
    TerrainConfig,
)

__all__ = [
    "ConfigurationError",
    "Droplet",
    "ErosionConfig",
    "ErosionSimulator",
    "ErosionStats",
    "HeightGrid",
    "RiverSource",
    "TerminationReason",
    "TerrainConfig",
    "TerrainGenerator",
    "apply_erosion",
    "apply_falloff",
    "apply_preset",
    "colorize",
    "generate_island",
    "get_falloff",
    "get_preset_overrides",
    "heightgrid_to_dict",
    "register_falloff",
    "step_droplet",
    "write_json",
    "write_npy",
]
