from dataclasses import dataclass, field
from typing import NamedTuple

import numpy as np

from .tables import CORNER_OFFSETS


class Cube(NamedTuple):
    """One grid cell: 8 field indices in table corner order."""

    corners: tuple


@dataclass
class SampleField:
    """Dense lattice of positions and field values.

    Point ``(i, j, k)`` lives at flat index ``(i * ny + j) * nz + k`` where
    ``(nx, ny, nz) = shape``, so x varies slowest and z fastest. Cubes are
    numbered the same way over ``(nx - 1, ny - 1, nz - 1)``.

    Cubes flagged in ``refined`` are not triangulated here; their geometry
    comes from the finer field stored in ``children`` under the same cube
    number.
    """

    positions: np.ndarray
    values: np.ndarray
    shape: tuple
    step: float
    axes: tuple
    depth: int = 0
    refined: np.ndarray = None
    children: dict = field(default_factory=dict)

    def __post_init__(self):
        if len(self.positions) != len(self.values):
            raise ValueError("positions and values must have equal length")
        if self.refined is None:
            self.refined = np.zeros(self.num_cubes, dtype=bool)

    def __len__(self):
        return len(self.values)

    @property
    def cube_shape(self):
        return tuple(max(0, n - 1) for n in self.shape)

    @property
    def num_cubes(self):
        cx, cy, cz = self.cube_shape
        return cx * cy * cz

    def index(self, i, j, k):
        _, ny, nz = self.shape
        return (i * ny + j) * nz + k

    def corner_strides(self):
        """Flat-index offset of each cube corner from the cube's first corner."""
        _, ny, nz = self.shape
        return CORNER_OFFSETS @ np.array([ny * nz, nz, 1], dtype=np.int64)

    def cube(self, ci, cj, ck):
        cx, cy, cz = self.cube_shape
        if not (0 <= ci < cx and 0 <= cj < cy and 0 <= ck < cz):
            raise IndexError(f"cube ({ci}, {cj}, {ck}) outside {self.cube_shape}")
        base = self.index(ci, cj, ck)
        return Cube(tuple(int(base + s) for s in self.corner_strides()))

    def cube_origins(self):
        """First-corner flat index of every cube, in cube order."""
        cx, cy, cz = self.cube_shape
        _, ny, nz = self.shape
        i, j, k = np.meshgrid(np.arange(cx), np.arange(cy), np.arange(cz),
                              indexing="ij")
        return ((i * ny + j) * nz + k).ravel().astype(np.int64)

    def corner_indices(self):
        """(num_cubes, 8) field indices, one row per cube."""
        return self.cube_origins()[:, None] + self.corner_strides()[None, :]

    def cubes(self):
        cx, cy, cz = self.cube_shape
        for ci in range(cx):
            for cj in range(cy):
                for ck in range(cz):
                    yield self.cube(ci, cj, ck)

    def walk(self):
        """This field followed by every refined descendant, depth first."""
        yield self
        for number in sorted(self.children):
            yield from self.children[number].walk()

    def total_points(self):
        return sum(len(f) for f in self.walk())
