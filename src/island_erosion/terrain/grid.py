"""Dense height field with bilinear sampling and redistribution.

Cells are indexed ``data[y, x]`` (row-major) with integer cell centres at
whole coordinates, so the continuous domain spans ``[0, width - 1] x
[0, height - 1]``.  Every continuous query touches exactly the 2x2 block
of cells around the point; coordinates outside the domain are clamped to
its edge rather than rejected.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from island_erosion.terrain.types import ConfigurationError


class HeightGrid:
    """Mutable 2D elevation field.

    Allocated once at a fixed resolution; mutated in place by
    :meth:`deposit` and :meth:`erode`; never resized.
    """

    def __init__(self, data: NDArray[np.float64]) -> None:
        array = np.array(data, dtype=np.float64)
        if array.ndim != 2 or array.size == 0:
            raise ConfigurationError(
                f"height grid must be a non-empty 2D array, got shape {array.shape}"
            )
        if not np.isfinite(array).all():
            raise ConfigurationError("height grid contains NaN or infinite values")
        self._data = array
        self.height, self.width = array.shape

    @classmethod
    def flat(cls, width: int, height: int, value: float = 0.0) -> HeightGrid:
        """Create a grid with every cell at *value*."""
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"grid dimensions must be > 0, got {width}x{height}")
        return cls(np.full((height, width), value, dtype=np.float64))

    @property
    def data(self) -> NDArray[np.float64]:
        """Read-only view of the cell values, shape (height, width)."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    def copy(self) -> HeightGrid:
        return HeightGrid(self._data)

    def to_array(self) -> NDArray[np.float64]:
        """Independent copy of the cell values."""
        return self._data.copy()

    def total(self) -> float:
        """Sum of all cell elevations (the grid's material volume)."""
        return float(self._data.sum())

    def is_finite(self) -> bool:
        return bool(np.isfinite(self._data).all())

    def contains(self, x: float, y: float) -> bool:
        """True if (x, y) lies inside the continuous sampling domain."""
        return 0.0 <= x <= self.width - 1 and 0.0 <= y <= self.height - 1

    # ── Stencil ──────────────────────────────────────────────────

    def _cell(self, x: float, y: float) -> tuple[int, int, int, int, float, float]:
        """Locate the 2x2 block around (x, y).

        Returns (x0, y0, x1, y1, fx, fy) where fx, fy in [0, 1] are the
        offsets from the (x0, y0) corner.  On a single-column or
        single-row grid the block collapses onto that line and the
        matching offset is 0.
        """
        if math.isnan(x):
            x = 0.0
        if math.isnan(y):
            y = 0.0
        x = min(max(x, 0.0), self.width - 1.0)
        y = min(max(y, 0.0), self.height - 1.0)

        x0 = min(int(x), max(self.width - 2, 0))
        y0 = min(int(y), max(self.height - 2, 0))
        x1 = min(x0 + 1, self.width - 1)
        y1 = min(y0 + 1, self.height - 1)
        return x0, y0, x1, y1, x - x0, y - y0

    def _stencil(self, x: float, y: float) -> list[tuple[int, int, float]]:
        """Bilinear weights for the four corners as (ix, iy, weight)."""
        x0, y0, x1, y1, fx, fy = self._cell(x, y)
        return [
            (x0, y0, (1.0 - fx) * (1.0 - fy)),
            (x1, y0, fx * (1.0 - fy)),
            (x0, y1, (1.0 - fx) * fy),
            (x1, y1, fx * fy),
        ]

    # ── Queries ──────────────────────────────────────────────────

    def sample(self, x: float, y: float) -> float:
        """Bilinearly interpolated elevation at a continuous point."""
        d = self._data
        return float(sum(w * d[iy, ix] for ix, iy, w in self._stencil(x, y)))

    def gradient(self, x: float, y: float) -> tuple[float, float]:
        """Partial derivatives (dh/dx, dh/dy) of the bilinear surface at (x, y).

        Uses the same four corners and offsets as :meth:`sample`, so the
        flow direction agrees with the interpolated heights.
        """
        x0, y0, x1, y1, fx, fy = self._cell(x, y)
        d = self._data
        h00 = d[y0, x0]
        h10 = d[y0, x1]
        h01 = d[y1, x0]
        h11 = d[y1, x1]
        gx = (h10 - h00) * (1.0 - fy) + (h11 - h01) * fy
        gy = (h01 - h00) * (1.0 - fx) + (h11 - h10) * fx
        return float(gx), float(gy)

    # ── Mutations ────────────────────────────────────────────────

    def deposit(self, x: float, y: float, amount: float) -> float:
        """Add *amount* of material around (x, y), split by bilinear weights.

        Returns the amount actually added: *amount* itself, or 0.0 for a
        non-positive or non-finite amount (which is ignored).
        """
        if not math.isfinite(amount) or amount <= 0.0:
            return 0.0
        for ix, iy, w in self._stencil(x, y):
            self._data[iy, ix] += amount * w
        return amount

    def erode(self, x: float, y: float, amount: float, floor: float = 0.0) -> float:
        """Remove up to *amount* of material around (x, y).

        Each corner gives up its bilinear share, limited to what it holds
        above *floor*.  Whatever a corner cannot give is dropped, not
        moved to its neighbours.

        Returns:
            The amount actually removed (<= *amount*).
        """
        if not math.isfinite(amount) or amount <= 0.0:
            return 0.0
        removed = 0.0
        for ix, iy, w in self._stencil(x, y):
            current = float(self._data[iy, ix])
            take = min(amount * w, max(current - floor, 0.0))
            if take > 0.0:
                self._data[iy, ix] = max(current - take, floor)
                removed += take
        return removed
