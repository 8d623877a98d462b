"""Named erosion presets.

Maps each preset name to ErosionConfig parameter overrides so callers
can pick an erosion strength without tuning every constant.
"""

from __future__ import annotations

from typing import Any

from island_erosion.terrain.types import ConfigurationError


# Each preset is a dict of ErosionConfig field overrides.
# Omitted fields keep the ErosionConfig defaults.

EROSION_PRESETS: dict[str, dict[str, Any]] = {
    # ── Light ───────────────────────────────────────────────────
    # Gentle weathering: few short-lived droplets, low erosion rate.
    # Softens noise artefacts without cutting visible channels.
    "light": {
        "droplet_count": 10_000,
        "max_droplet_lifetime": 20,
        "erosion_rate": 0.1,
        "deposition_rate": 0.1,
        "evaporation_rate": 0.05,
    },
    # ── Moderate ────────────────────────────────────────────────
    # The ErosionConfig defaults: clear drainage channels and
    # sediment fans at the foot of slopes.
    "moderate": {},
    # ── Heavy ───────────────────────────────────────────────────
    # Long-lived, high-capacity droplets with more inertia carve
    # deep, smooth valleys and carry sediment out to the coast.
    "heavy": {
        "droplet_count": 150_000,
        "max_droplet_lifetime": 64,
        "inertia": 0.1,
        "capacity_factor": 8.0,
        "erosion_rate": 0.5,
        "evaporation_rate": 0.005,
    },
    # ── Rivers ──────────────────────────────────────────────────
    # Moderate rain plus steady river sources on high ground,
    # digging persistent channels from the highlands.
    "rivers": {
        "source_attempts": 400,
        "source_min_elevation": 0.6,
        "source_flux": 0.05,
    },
}


def get_preset_overrides(preset: str) -> dict[str, Any]:
    """Return a copy of the ErosionConfig overrides for *preset*.

    Raises ConfigurationError for unknown preset names.
    """
    if preset not in EROSION_PRESETS:
        raise ConfigurationError(
            f"unknown erosion preset {preset!r}, expected one of {sorted(EROSION_PRESETS)}"
        )
    return dict(EROSION_PRESETS[preset])


def apply_preset(preset: str, **overrides: Any) -> dict[str, Any]:
    """Build ErosionConfig kwargs from *preset* with explicit *overrides* on top."""
    config_kwargs = get_preset_overrides(preset)
    config_kwargs.update(overrides)
    return config_kwargs
