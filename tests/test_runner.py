"""Tests for settings, presets and the pipeline runner."""

import json
import logging

import numpy as np
import pytest
from pydantic import ValidationError

from island_erosion.config import Settings
from island_erosion.runner import (
    PipelineRunner,
    build_configs,
    derive_erosion_seed,
    run_from_settings,
)
from island_erosion.terrain import ConfigurationError, ErosionConfig, TerrainConfig
from island_erosion.terrain.presets import EROSION_PRESETS, apply_preset, get_preset_overrides


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ISLAND_EROSION_SEED", raising=False)
        settings = Settings(_env_file=None)
        assert settings.seed == 0
        assert settings.preset == "moderate"
        assert settings.output_path is None
        assert settings.log_level == "info"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("ISLAND_EROSION_SEED", "17")
        monkeypatch.setenv("ISLAND_EROSION_WIDTH", "64")
        monkeypatch.setenv("ISLAND_EROSION_PRESET", "light")
        monkeypatch.setenv("ISLAND_EROSION_LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.seed == 17
        assert settings.width == 64
        assert settings.preset == "light"
        assert settings.log_level == "debug"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="loud")


class TestPresets:
    """Tests for named erosion presets."""

    @pytest.mark.parametrize("preset", list(EROSION_PRESETS))
    def test_every_preset_builds_valid_config(self, preset):
        ErosionConfig(**apply_preset(preset)).validate()

    def test_overrides_win(self):
        kwargs = apply_preset("heavy", droplet_count=5)
        assert kwargs["droplet_count"] == 5
        assert kwargs["capacity_factor"] == EROSION_PRESETS["heavy"]["capacity_factor"]

    def test_returns_copy(self):
        get_preset_overrides("light")["droplet_count"] = 1
        assert EROSION_PRESETS["light"]["droplet_count"] != 1

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError, match="unknown erosion preset"):
            get_preset_overrides("apocalyptic")


class TestPipelineRunner:
    """Tests for the generate-erode-export pipeline."""

    @pytest.fixture
    def configs(self):
        return (
            TerrainConfig(seed=3, width=32, height=32, noise_octaves=3),
            ErosionConfig(droplet_count=150),
        )

    def test_run_returns_eroded_grid(self, configs):
        result = PipelineRunner(*configs).run()

        assert result.grid.shape == (32, 32)
        assert result.stats.droplets == 150
        assert not np.array_equal(result.grid.data, result.initial.data)
        assert set(result.timings_ms) == {"generate", "erode", "export"}

    def test_run_is_reproducible(self, configs):
        r1 = PipelineRunner(*configs).run()
        r2 = PipelineRunner(*configs).run()

        np.testing.assert_array_equal(r1.grid.data, r2.grid.data)

    def test_invalid_erosion_config_fails_before_generation(self, caplog):
        """Validation happens at construction; no generation is logged."""
        with caplog.at_level(logging.INFO):
            with pytest.raises(ConfigurationError):
                PipelineRunner(TerrainConfig(seed=1), ErosionConfig(droplet_count=0))
        assert "Generating" not in caplog.text

    def test_rejects_unknown_output_suffix(self, configs, tmp_path):
        with pytest.raises(ConfigurationError, match="output_path"):
            PipelineRunner(*configs, output_path=tmp_path / "island.png")

    def test_writes_json(self, configs, tmp_path):
        path = tmp_path / "island.json"
        result = PipelineRunner(*configs, output_path=path).run()

        payload = json.loads(path.read_text())
        assert result.output_path == path
        assert payload["width"] == 32
        assert payload["erosion"]["droplets"] == 150

    def test_writes_npy(self, configs, tmp_path):
        path = tmp_path / "island.npy"
        result = PipelineRunner(*configs, output_path=path).run()

        np.testing.assert_array_equal(np.load(path), result.grid.data)

    def test_logs_phase_timings(self, configs, caplog):
        with caplog.at_level(logging.INFO, logger="island_erosion"):
            PipelineRunner(*configs).run()
        assert "Phase timings" in caplog.text


class TestRunFromSettings:
    """Tests for building and running from Settings."""

    def test_build_configs(self):
        settings = Settings(
            _env_file=None, seed=5, width=20, height=10, preset="light", droplet_count=7
        )
        terrain_config, erosion_config = build_configs(settings)

        assert (terrain_config.seed, terrain_config.width, terrain_config.height) == (5, 20, 10)
        assert erosion_config.droplet_count == 7
        assert erosion_config.erosion_rate == EROSION_PRESETS["light"]["erosion_rate"]

    def test_run_from_settings(self, tmp_path):
        settings = Settings(
            _env_file=None,
            seed=2,
            width=24,
            height=24,
            droplet_count=50,
            output_path=tmp_path / "island.json",
        )
        result = run_from_settings(settings)

        assert result.stats.droplets == 50
        assert (tmp_path / "island.json").exists()

    def test_erosion_seed_non_negative(self):
        assert derive_erosion_seed(-12345) >= 0
        assert derive_erosion_seed(0) != derive_erosion_seed(1)
