"""Noise utilities for terrain generation using OpenSimplex."""

import numpy as np
from numpy.typing import NDArray
from opensimplex import OpenSimplex

from island_erosion.terrain.masks import normalized_coordinates


class SeededNoise:
    """OpenSimplex fBm for one seed, per point or over a whole lattice.

    Pure function of (seed, coordinates). The per-point methods are the
    reference definition; :meth:`octave_noise_grid` is the batched form
    the generator uses.
    """

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._simplex = OpenSimplex(seed=seed)

    def sample_2d(self, x: float, y: float) -> float:
        """Single-octave simplex value at (x, y), in [-1, 1]."""
        return self._simplex.noise2(x, y)

    def octave_noise_2d(
        self,
        x: float,
        y: float,
        octaves: int = 6,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
        scale: float = 1.0,
    ) -> float:
        """Sum *octaves* layers at (x, y), divided by the summed amplitudes.

        Layer ``k`` is sampled at frequency ``scale * lacunarity**k`` with
        weight ``persistence**k``, so the result stays within [-1, 1].
        """
        value = 0.0
        weight = 1.0
        weight_sum = 0.0
        frequency = scale

        for _ in range(int(octaves)):
            value += weight * self.sample_2d(x * frequency, y * frequency)
            weight_sum += weight
            weight *= persistence
            frequency *= lacunarity

        return value / weight_sum

    def octave_noise_grid(
        self,
        xs: NDArray[np.float64],
        ys: NDArray[np.float64],
        octaves: int = 6,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
        scale: float = 1.0,
    ) -> NDArray[np.float64]:
        """Vectorized fBm over the lattice spanned by 1D axes *xs* and *ys*.

        Same sum as :meth:`octave_noise_2d`, evaluated for every
        ``(xs[j], ys[i])`` pair.

        Returns:
            Array of shape (len(ys), len(xs)), values approximately in [-1, 1]
        """
        value = np.zeros((len(ys), len(xs)), dtype=np.float64)
        weight = 1.0
        weight_sum = 0.0
        frequency = scale

        for _ in range(int(octaves)):
            value += weight * self._simplex.noise2array(xs * frequency, ys * frequency)
            weight_sum += weight
            weight *= persistence
            frequency *= lacunarity

        return value / weight_sum


def generate_heightfield(
    seed: int,
    width: int,
    height: int,
    octaves: int = 6,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    frequency: float = 1.5,
) -> NDArray[np.float64]:
    """Generate a fractal noise heightfield over the normalized [-1, 1] domain.

    Args:
        seed: Seed for deterministic generation
        width, height: Grid dimensions in cells
        octaves: Noise octaves
        persistence: Amplitude decay
        lacunarity: Frequency growth
        frequency: Base frequency over the [-1, 1] domain

    Returns:
        2D numpy array of shape (height, width), heights normalized to [0, 1]
    """
    width, height, octaves = int(width), int(height), int(octaves)
    noise = SeededNoise(seed)
    nx, ny = normalized_coordinates(width, height)

    value = noise.octave_noise_grid(
        nx[0, :],
        ny[:, 0],
        octaves=octaves,
        persistence=persistence,
        lacunarity=lacunarity,
        scale=frequency,
    )

    # Normalize from [-1, 1] to [0, 1]
    return np.clip((value + 1.0) / 2.0, 0.0, 1.0)
