import math
from dataclasses import dataclass, field, replace
from enum import IntEnum

import numpy as np

from . import config
from .errors import ParameterError
from .quaternion import Quaternion


class FractalKind(IntEnum):
    JULIA = 0
    MANDELBROT = 1
    HYBRID = 2

    @classmethod
    def _missing_(cls, value):
        # Unknown codes fall back so that cycling never breaks a session
        return cls.JULIA


class Formula(IntEnum):
    STANDARD = 0    # z^2 + c
    CUBIC = 1       # z^3 + c
    LINEAR = 2      # z^2 + z + c
    MAGNITUDE = 3   # |z|^2 - z^2 + c

    @classmethod
    def _missing_(cls, value):
        return cls.STANDARD


class Precision(IntEnum):
    SINGLE = 0
    DOUBLE = 1

    @classmethod
    def _missing_(cls, value):
        return cls.SINGLE


KIND_NAMES = {
    FractalKind.JULIA: "Julia Set",
    FractalKind.MANDELBROT: "Mandelbrot Set",
    FractalKind.HYBRID: "Hybrid",
}

FORMULA_NAMES = {
    Formula.STANDARD: "Standard z^2+c",
    Formula.CUBIC: "Cubic z^3+c",
    Formula.LINEAR: "z^2+z+c",
    Formula.MAGNITUDE: "|z|^2-z^2+c",
}


@dataclass(frozen=True)
class FractalParameters:
    c: Quaternion = Quaternion(*config.C)
    w: float = config.W
    max_iter: int = config.MAX_ITER
    threshold: float = config.THRESHOLD
    kind: FractalKind = FractalKind.JULIA
    formula: Formula = Formula.STANDARD
    precision: Precision = Precision.SINGLE
    zoom: float = config.ZOOM
    supersampling: int = config.SUPERSAMPLING
    adaptive: bool = False
    detail_threshold: float = config.DETAIL_THRESHOLD
    max_depth: int = config.MAX_DEPTH

    def __post_init__(self):
        object.__setattr__(self, "c", Quaternion(*(float(v) for v in self.c)))
        object.__setattr__(self, "kind", FractalKind(self.kind))
        object.__setattr__(self, "formula", Formula(self.formula))
        object.__setattr__(self, "precision", Precision(self.precision))

        if self.max_iter < 1:
            raise ParameterError(f"max_iter must be >= 1, got {self.max_iter}")
        if not self.threshold > 0:
            raise ParameterError(f"threshold must be > 0, got {self.threshold}")
        if self.zoom < 1:
            raise ParameterError(f"zoom must be >= 1, got {self.zoom}")
        if self.supersampling < 1:
            raise ParameterError(
                f"supersampling must be >= 1, got {self.supersampling}")
        if self.max_depth < 0:
            raise ParameterError(f"max_depth must be >= 0, got {self.max_depth}")

    @property
    def deep_zoom(self):
        """True when iteration switches to float64 and w is zoomed too."""
        return (self.precision == Precision.DOUBLE
                and self.zoom > config.DEEP_ZOOM_THRESHOLD)

    @property
    def dtype(self):
        return np.float64 if self.deep_zoom else np.float32

    def with_changes(self, **changes):
        return replace(self, **changes)


@dataclass(frozen=True)
class GridSpec:
    p0: tuple = config.P0
    p1: tuple = config.P1
    step: float = config.STEP
    resolution: tuple = field(init=False)

    def __post_init__(self):
        p0 = tuple(float(v) for v in self.p0)
        p1 = tuple(float(v) for v in self.p1)
        if len(p0) != 3 or len(p1) != 3:
            raise ParameterError("bounding box corners must be 3D points")
        if not self.step > 0:
            raise ParameterError(f"step must be > 0, got {self.step}")
        if any(b < a for a, b in zip(p0, p1)):
            raise ParameterError(f"p1 {p1} must be >= p0 {p0} on every axis")

        # The epsilon keeps 3.0 / 0.05 from rounding up to 61 cells
        resolution = tuple(
            max(0, math.ceil((b - a) / self.step - 1e-9)) for a, b in zip(p0, p1)
        )
        object.__setattr__(self, "p0", p0)
        object.__setattr__(self, "p1", p1)
        object.__setattr__(self, "step", float(self.step))
        object.__setattr__(self, "resolution", resolution)

    @property
    def lattice_shape(self):
        return tuple(n + 1 for n in self.resolution)

    @property
    def num_points(self):
        nx, ny, nz = self.lattice_shape
        return nx * ny * nz

    @property
    def num_cubes(self):
        nx, ny, nz = self.resolution
        return nx * ny * nz

    def axes(self, dtype=np.float64):
        """Lattice coordinates along x, y and z."""
        return tuple(
            (a + np.arange(n + 1, dtype=np.float64) * self.step).astype(dtype)
            for a, n in zip(self.p0, self.resolution)
        )


def default_parameters(**overrides):
    return FractalParameters(**overrides)


def default_grid(**overrides):
    return GridSpec(**overrides)


def describe_parameters(params, grid=None, num_triangles=None):
    """Multi-line summary of the current settings."""
    c = params.c
    lines = [
        "========== QUATMESH PARAMETERS ==========",
        f"  C = ({c.x:.3f}, {c.y:.3f}, {c.z:.3f}, {c.w:.3f}), w = {params.w:.3f}",
        f"  Max Iterations: {params.max_iter}",
        f"  Escape Threshold: {params.threshold:.3f}",
        f"  Fractal Type: {KIND_NAMES[params.kind]}",
        f"  Quaternion Formula: {FORMULA_NAMES[params.formula]}",
        f"  Deep Zoom Level: {params.zoom:.1f}x",
        f"  Double Precision: {'ON' if params.precision == Precision.DOUBLE else 'OFF'}",
        f"  Supersampling: {params.supersampling}x",
        f"  Adaptive Grid: {'ON' if params.adaptive else 'OFF'}",
    ]
    if params.adaptive:
        lines.append(f"  Detail Threshold: {params.detail_threshold:.2f}"
                     f" (max depth {params.max_depth})")
    if grid is not None:
        nx, ny, nz = grid.resolution
        lines.append(f"  Grid: {nx}x{ny}x{nz} cubes, step {grid.step:.6f}")
    if num_triangles is not None:
        lines.append(f"  Triangles: {num_triangles}")
    lines.append("=" * 41)
    return "\n".join(lines)
