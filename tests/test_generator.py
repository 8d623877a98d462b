"""Tests for island terrain generation and its configuration."""

import numpy as np
import pytest

from island_erosion.terrain import (
    ConfigurationError,
    HeightGrid,
    TerrainConfig,
    TerrainGenerator,
    generate_island,
)


class TestTerrainConfig:
    """Tests for TerrainConfig validation."""

    def test_default_config_is_valid(self):
        TerrainConfig(seed=1).validate()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"width": 0},
            {"height": -4},
            {"noise_octaves": 0},
            {"noise_frequency": 0.0},
            {"noise_persistence": -0.1},
            {"noise_lacunarity": 0.5},
            {"noise_amplitude": -1.0},
            {"falloff_shape": 0.0},
            {"falloff_profile": "hexagon"},
            {"noise_frequency": float("nan")},
            {"falloff_shape": float("inf")},
            {"noise_octaves": 4.5},
            {"width": 16.5},
        ],
    )
    def test_invalid_values_rejected(self, overrides):
        """Out-of-range parameters raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            TerrainConfig(seed=1, **overrides).validate()

    def test_error_names_field(self):
        """The error message names the offending field."""
        with pytest.raises(ConfigurationError, match="width"):
            TerrainConfig(seed=1, width=0).validate()

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)

    def test_fractional_octaves_name_field(self):
        with pytest.raises(ConfigurationError, match="noise_octaves must be a whole number"):
            TerrainConfig(seed=1, noise_octaves=4.5).validate()


class TestTerrainGenerator:
    """Tests for the TerrainGenerator class."""

    @pytest.fixture
    def generator(self, small_terrain_config):
        return TerrainGenerator(small_terrain_config)

    def test_invalid_config_rejected_before_generation(self):
        """Degenerate dimensions fail at construction time."""
        with pytest.raises(ConfigurationError):
            TerrainGenerator(TerrainConfig(seed=1, width=0))

    def test_returns_height_grid_with_dimensions(self, generator):
        grid = generator.generate()

        assert isinstance(grid, HeightGrid)
        assert grid.width == 48
        assert grid.height == 40

    def test_values_normalized(self, generator):
        """Normalized output spans exactly [0, 1]."""
        data = generator.generate().data

        assert data.min() == pytest.approx(0.0)
        assert data.max() == pytest.approx(1.0)
        assert np.isfinite(data).all()

    def test_deterministic(self, small_terrain_config):
        """Same seed and parameters produce bit-identical grids."""
        g1 = TerrainGenerator(small_terrain_config).generate()
        g2 = TerrainGenerator(small_terrain_config).generate()

        np.testing.assert_array_equal(g1.data, g2.data)

    def test_different_seeds_differ(self):
        g1 = generate_island(1, {"width": 32, "height": 32})
        g2 = generate_island(2, {"width": 32, "height": 32})

        assert not np.array_equal(g1.data, g2.data)

    def test_island_shape(self):
        """The interior stands higher than the border, which sits at zero."""
        data = generate_island(42, {"width": 64, "height": 64}).data

        border = np.concatenate([data[0, :], data[-1, :], data[:, 0], data[:, -1]])
        interior = data[24:40, 24:40]

        assert border.max() == pytest.approx(0.0)
        assert interior.mean() > 0.3

    def test_no_falloff_reaches_edges(self):
        """Without falloff the border keeps noise elevation."""
        data = generate_island(42, {"width": 32, "height": 32, "falloff_profile": "none"}).data
        assert data[0, :].max() > 0.0

    def test_unnormalized_output_keeps_falloff_scale(self):
        """With normalize=False values stay within the masked noise range."""
        data = generate_island(5, {"width": 32, "height": 32, "normalize": False}).data
        assert data.min() >= 0.0
        assert data.max() <= 1.0

    def test_whole_number_float_octaves(self):
        """Octaves and dimensions given as whole-number floats generate like ints."""
        as_float = TerrainGenerator(
            TerrainConfig(seed=1, width=16.0, height=16.0, noise_octaves=4.0)
        ).generate()
        as_int = TerrainGenerator(
            TerrainConfig(seed=1, width=16, height=16, noise_octaves=4)
        ).generate()

        np.testing.assert_array_equal(as_float.data, as_int.data)

    def test_single_cell_grid(self):
        """A 1x1 grid is valid and finite."""
        grid = generate_island(3, {"width": 1, "height": 1})
        assert grid.shape == (1, 1)
        assert grid.is_finite()
