"""
Particle lattice generation.

Builds the fixed 3D lattice once at startup. Every particle gets two
positions: a normalized copy spanning the fractal domain (fed to the
escape-time iteration) and a centered, scaled copy for display.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from juliafield.errors import InvalidConfiguration


@dataclass(frozen=True)
class DomainBounds:
    """Per-axis [min, max] of the normalized fractal domain."""
    x_min: float = -3.0
    x_max: float = 3.0
    y_min: float = -3.0
    y_max: float = 3.0
    z_min: float = -3.0
    z_max: float = 3.0

    @property
    def mins(self) -> np.ndarray:
        return np.array([self.x_min, self.y_min, self.z_min], dtype=np.float64)

    @property
    def spans(self) -> np.ndarray:
        return np.array(
            [self.x_max - self.x_min, self.y_max - self.y_min, self.z_max - self.z_min],
            dtype=np.float64,
        )

    def validate(self):
        if np.any(self.spans <= 0):
            raise InvalidConfiguration(f"Domain bounds must have max > min on every axis: {self}")


@dataclass
class Grid:
    """Lattice coordinates plus both derived position sets."""
    dimensions: Tuple[int, int, int]
    lattice: np.ndarray      # (N, 3) int64
    normalized: np.ndarray   # (N, 3) float32
    display: np.ndarray      # (N, 3) float32

    @property
    def count(self) -> int:
        return len(self.lattice)


def _icbrt(n: int) -> int:
    """Exact integer cube root (floor)."""
    root = int(round(n ** (1.0 / 3.0)))
    while root ** 3 > n:
        root -= 1
    while (root + 1) ** 3 <= n:
        root += 1
    return root


def grid_dimensions(count: int) -> Tuple[int, int, int]:
    """
    Derive (width, height, depth) from the particle count.

    Width is the cube root; height and depth come from integer division
    so the lattice roughly tiles ``count`` cells. The product may differ
    from ``count``.

    Args:
        count: Total number of particles.

    Returns:
        (width, height, depth), each at least 1.
    """
    if count <= 0:
        raise InvalidConfiguration(f"Particle count must be positive, got {count}")

    width = max(1, _icbrt(count))
    height = max(1, count // width // width)
    depth = max(1, count // height // height)
    return width, height, depth


def lattice_indices(count: int, dimensions: Tuple[int, int, int]) -> np.ndarray:
    """Map linear indices to (x, y, z) lattice coordinates."""
    width, height, depth = dimensions
    i = np.arange(count, dtype=np.int64)

    x = i % width
    y = (i // width) % height
    # z divides by height twice, not width then height
    z = (i // height // height) % depth

    return np.stack([x, y, z], axis=1)


def normalize(
    lattice: np.ndarray,
    dimensions: Tuple[int, int, int],
    bounds: DomainBounds,
) -> np.ndarray:
    """Scale lattice coordinates into the fractal domain."""
    dims = np.asarray(dimensions, dtype=np.float64)
    normalized = lattice / dims * bounds.spans + bounds.mins
    return normalized.astype(np.float32)


def center(
    lattice: np.ndarray,
    dimensions: Tuple[int, int, int],
    unit: float,
) -> np.ndarray:
    """Re-center lattice coordinates about the grid midpoint and scale by unit."""
    half = np.asarray(dimensions, dtype=np.float64) * 0.5
    return ((lattice - half) * unit).astype(np.float32)


def generate_grid(
    count: int,
    bounds: DomainBounds | None = None,
    unit: float = 0.2,
) -> Grid:
    """
    Build the full particle lattice.

    Args:
        count: Number of particles.
        bounds: Normalized domain, defaults to [-3, 3] on every axis.
        unit: Spacing of the display lattice.

    Returns:
        Grid with read-only position arrays.
    """
    bounds = bounds or DomainBounds()
    bounds.validate()

    dimensions = grid_dimensions(count)
    lattice = lattice_indices(count, dimensions)
    normalized = normalize(lattice, dimensions, bounds)
    display = center(lattice, dimensions, unit)

    for arr in (lattice, normalized, display):
        arr.flags.writeable = False

    return Grid(
        dimensions=dimensions,
        lattice=lattice,
        normalized=normalized,
        display=display,
    )
