"""Island falloff masks for terrain generation.

A falloff function receives normalized grid coordinates (both axes in
[-1, 1], the grid centre at the origin, edge cells at +/-1) and the
configured falloff shape exponent.  It returns an attenuation mask in
[0, 1] that the generator multiplies into the noise field, so the
landmass rises centrally and falls to zero at the boundary.

Profiles:
  radial  – Euclidean distance from the centre (round island)
  square  – Chebyshev distance from the centre (boxy landmass)
  none    – no attenuation (open terrain)
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import NDArray


# ── Helpers ──────────────────────────────────────────────────────


def _smoothstep(t: NDArray[np.float64]) -> NDArray[np.float64]:
    """Hermite smoothstep: 3t^2 - 2t^3, clamped to [0, 1]."""
    t = np.clip(t, 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def _axis(n: int) -> NDArray[np.float64]:
    if n == 1:
        return np.zeros(1, dtype=np.float64)
    return np.linspace(-1.0, 1.0, n, dtype=np.float64)


def normalized_coordinates(
    width: int, height: int
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return (nx, ny) arrays of shape (height, width) spanning [-1, 1]."""
    nx, ny = np.meshgrid(_axis(width), _axis(height))
    return nx, ny


def _attenuate(distance: NDArray[np.float64], shape: float) -> NDArray[np.float64]:
    """Map distance from centre to a mask: 1 at the centre, 0 at distance >= 1."""
    return _smoothstep(1.0 - np.power(distance, shape))


# Type alias for falloff functions.
FalloffFn = Callable[[NDArray[np.float64], NDArray[np.float64], float], NDArray[np.float64]]


# ── Built-in profiles ────────────────────────────────────────────


def radial_falloff(
    nx: NDArray[np.float64], ny: NDArray[np.float64], shape: float
) -> NDArray[np.float64]:
    """Round island: attenuate by Euclidean distance from the centre.

    Larger *shape* exponents keep the interior flat for longer and
    steepen the drop near the coast.  Corners lie beyond distance 1 and
    are always fully attenuated.
    """
    return _attenuate(np.sqrt(nx * nx + ny * ny), shape)


def square_falloff(
    nx: NDArray[np.float64], ny: NDArray[np.float64], shape: float
) -> NDArray[np.float64]:
    """Boxy landmass: attenuate by Chebyshev distance from the centre."""
    return _attenuate(np.maximum(np.abs(nx), np.abs(ny)), shape)


def no_falloff(
    nx: NDArray[np.float64], ny: NDArray[np.float64], shape: float
) -> NDArray[np.float64]:
    """No-op falloff: every cell keeps its full noise height."""
    return np.ones_like(nx)


# ── Falloff registry ─────────────────────────────────────────────

_FALLOFF_REGISTRY: dict[str, FalloffFn] = {
    "radial": radial_falloff,
    "square": square_falloff,
    "none": no_falloff,
}


def register_falloff(name: str, falloff_fn: FalloffFn) -> None:
    """Register (or replace) a falloff function under *name*."""
    _FALLOFF_REGISTRY[name] = falloff_fn


def get_falloff(name: str) -> FalloffFn:
    """Return the falloff function registered under *name*.

    Raises KeyError for unknown names; ``TerrainConfig.validate`` rejects
    them before generation starts.
    """
    return _FALLOFF_REGISTRY[name]


def falloff_names() -> set[str]:
    """Names of all registered falloff profiles."""
    return set(_FALLOFF_REGISTRY)


def apply_falloff(
    heightfield: NDArray[np.float64],
    profile: str,
    shape: float,
) -> NDArray[np.float64]:
    """Attenuate *heightfield* toward its edges using *profile*.

    Args:
        heightfield: 2D array of shape (height, width).
        profile: Registered falloff name (e.g. ``"radial"``).
        shape: Falloff exponent (> 0).

    Returns:
        New array: heightfield multiplied by the falloff mask.
    """
    h, w = heightfield.shape
    nx, ny = normalized_coordinates(w, h)
    mask = get_falloff(profile)(nx, ny, shape)
    return heightfield * mask
