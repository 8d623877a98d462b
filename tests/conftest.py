"""Pytest configuration and fixtures for island erosion tests."""

import numpy as np
import pytest

from island_erosion.terrain import ErosionConfig, HeightGrid, TerrainConfig


def make_ramp(width: int = 32, height: int = 16) -> HeightGrid:
    """Linear ramp falling from 1.0 at x=0 to 0.0 at x=width-1."""
    row = np.linspace(1.0, 0.0, width)
    return HeightGrid(np.tile(row, (height, 1)))


@pytest.fixture
def ramp_grid():
    """32x16 ramp descending along +x."""
    return make_ramp()


@pytest.fixture
def flat_grid():
    """Uniform 24x24 grid at elevation 0.5."""
    return HeightGrid.flat(24, 24, value=0.5)


@pytest.fixture
def small_terrain_config():
    """Small island config for fast tests."""
    return TerrainConfig(seed=42, width=48, height=40, noise_octaves=4)


@pytest.fixture
def small_erosion_config():
    """Erosion config with few droplets for fast tests."""
    return ErosionConfig(droplet_count=300, max_droplet_lifetime=30)
