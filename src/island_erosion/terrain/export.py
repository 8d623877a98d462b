"""Export helpers for handing a finished grid to display or storage.

Produces plain data products only: nested lists / JSON, ``.npy``
files and RGBA colour arrays.  Drawing them is up to the consumer.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

import numpy as np
from numpy.typing import NDArray

from island_erosion.terrain.grid import HeightGrid
from island_erosion.terrain.types import ErosionStats

logger = logging.getLogger(__name__)

# Per-cell slope above which land is drawn as bare rock
DEFAULT_ROCK_SLOPE = 0.008

SOURCE_COLOR = (255, 0, 0, 255)


def heightgrid_to_dict(
    grid: HeightGrid,
    stats: ErosionStats | None = None,
) -> dict[str, Any]:
    """Convert to a JSON-serializable dict.

    ``heightfield`` is row-major: ``heightfield[y][x]``.
    """
    data = grid.data
    result: dict[str, Any] = {
        "width": grid.width,
        "height": grid.height,
        "min": float(data.min()),
        "max": float(data.max()),
        "heightfield": data.tolist(),
    }
    if stats is not None:
        result["erosion"] = stats.to_dict()
    return result


def write_json(
    grid: HeightGrid,
    path: str | Path,
    stats: ErosionStats | None = None,
) -> Path:
    """Write the grid (and optional run statistics) as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(heightgrid_to_dict(grid, stats)))
    logger.info("Wrote %dx%d grid to %s", grid.width, grid.height, path)
    return path


def write_npy(grid: HeightGrid, path: str | Path) -> Path:
    """Write the raw float64 grid as a NumPy ``.npy`` file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    np.save(path, grid.to_array())
    logger.info("Wrote %dx%d grid to %s", grid.width, grid.height, path)
    return path


def cell_slopes(heights: NDArray[np.float64]) -> NDArray[np.float64]:
    """Gradient magnitude at each cell from forward differences.

    Matches ``HeightGrid.gradient`` evaluated at whole coordinates; the
    last row and column reuse the difference before them.
    """
    h, w = heights.shape
    gx = np.zeros_like(heights)
    gy = np.zeros_like(heights)
    if w > 1:
        gx[:, :-1] = np.diff(heights, axis=1)
        gx[:, -1] = gx[:, -2]
    if h > 1:
        gy[:-1, :] = np.diff(heights, axis=0)
        gy[-1, :] = gy[-2, :]
    return np.hypot(gx, gy)


def colorize(
    grid: HeightGrid,
    sea_level: float = 0.1,
    rock_slope: float = DEFAULT_ROCK_SLOPE,
    sources: Iterable[Any] | None = None,
) -> NDArray[np.uint8]:
    """Render the grid to an RGBA image array of shape (height, width, 4).

    Water (below *sea_level*) is black.  Land brightness follows
    elevation; steep land is tinted as rock, gentle land as vegetation.
    Anything with ``x``/``y`` attributes in *sources* (e.g. river
    sources) is marked in red.
    """
    heights = grid.to_array()
    v = (np.clip(heights, 0.0, 1.0) * 255.0).astype(np.uint8)
    rock = cell_slopes(heights) > rock_slope

    image = np.zeros((grid.height, grid.width, 4), dtype=np.uint8)
    image[..., 0] = np.where(rock, v, v // 4)
    image[..., 1] = np.where(rock, v // 2, v)
    image[..., 2] = v // 3
    image[..., 3] = 255

    water = heights < sea_level
    image[water] = (0, 0, 0, 255)

    for source in sources or ():
        ix = min(max(int(source.x), 0), grid.width - 1)
        iy = min(max(int(source.y), 0), grid.height - 1)
        image[iy, ix] = SOURCE_COLOR

    return image
