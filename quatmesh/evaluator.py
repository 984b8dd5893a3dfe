"""Quaternion escape-time field.

Every (kind, formula) pair gets its own jitted field function, built once
and looked up once per evaluation or sampling pass, so the iteration loop
never branches on configuration.

Field values are 1.0 inside the set (bounded after ``max_iter``
iterations) and 0.0 outside; supersampling averages sub-samples into
``[0, 1]``.
"""

import math
from functools import lru_cache
from typing import NamedTuple

import numpy as np
from numba import njit

from . import config
from .params import FractalKind, Formula
from .quaternion import qadd, qmul, qnorm_sq, qsquare


# ----------------------------------------------------
# ITERATION FORMULAS (the non-constant term f(z))
# ----------------------------------------------------
@njit(cache=True)
def _f_standard(z):
    return qsquare(z)


@njit(cache=True)
def _f_cubic(z):
    return qmul(z, qsquare(z))


@njit(cache=True)
def _f_linear(z):
    return qadd(qsquare(z), z)


@njit(cache=True)
def _f_magnitude(z):
    sq = qsquare(z)
    return (qnorm_sq(z) - sq[0], -sq[1], -sq[2], -sq[3])


FORMULAS = {
    Formula.STANDARD: _f_standard,
    Formula.CUBIC: _f_cubic,
    Formula.LINEAR: _f_linear,
    Formula.MAGNITUDE: _f_magnitude,
}


# ----------------------------------------------------
# KERNEL FACTORIES
# ----------------------------------------------------
def _make_orbit(f):
    @njit
    def orbit(z, c, max_iter, threshold_sq):
        """Return 1.0 if z stays bounded under z <- f(z) + c, else 0.0."""
        for _ in range(max_iter):
            z = qadd(f(z), c)
            # NaN after overflow counts as escaped
            if not qnorm_sq(z) <= threshold_sq:
                return 0.0
        return 1.0

    return orbit


def _make_field(kind, orbit):
    if kind == FractalKind.MANDELBROT:
        @njit
        def field(x, y, z, w, c, seed, max_iter, threshold_sq):
            return orbit(seed, (x, y, z, w), max_iter, threshold_sq)

    elif kind == FractalKind.HYBRID:
        @njit
        def field(x, y, z, w, c, seed, max_iter, threshold_sq):
            julia = orbit((x, y, z, w), c, max_iter, threshold_sq)
            mandel = orbit(seed, (x, y, z, w), max_iter, threshold_sq)
            blend = 0.5 + 0.5 * math.sin(x + y + z)
            return julia * blend + mandel * (1.0 - blend)

    else:
        @njit
        def field(x, y, z, w, c, seed, max_iter, threshold_sq):
            return orbit((x, y, z, w), c, max_iter, threshold_sq)

    return field


def _make_point(field):
    @njit
    def point(x, y, z, offsets, zoom, w, c, seed, max_iter, threshold_sq):
        n = offsets.shape[0]
        total = 0.0
        for i in range(n):
            for j in range(n):
                for k in range(n):
                    total += field((x + offsets[i]) / zoom,
                                   (y + offsets[j]) / zoom,
                                   (z + offsets[k]) / zoom,
                                   w, c, seed, max_iter, threshold_sq)
        return total / (n * n * n)

    return point


def _make_volume(point):
    @njit
    def volume(xs, ys, zs, offsets, zoom, w, c, seed, max_iter, threshold_sq, out):
        idx = 0
        for i in range(xs.shape[0]):
            for j in range(ys.shape[0]):
                for k in range(zs.shape[0]):
                    out[idx] = point(xs[i], ys[j], zs[k], offsets, zoom,
                                     w, c, seed, max_iter, threshold_sq)
                    idx += 1
        return out

    return volume


class Kernels(NamedTuple):
    field: object
    point: object
    volume: object


@lru_cache(maxsize=None)
def kernels(kind, formula):
    """Jitted kernels for one fractal kind / formula combination."""
    orbit = _make_orbit(FORMULAS[Formula(formula)])
    field = _make_field(FractalKind(kind), orbit)
    point = _make_point(field)
    return Kernels(field, point, _make_volume(point))


# ----------------------------------------------------
# PARAMETER PREPARATION
# ----------------------------------------------------
class IterationInputs(NamedTuple):
    dtype: type
    zoom: object
    w: object
    c: tuple
    seed: tuple
    max_iter: int
    threshold_sq: object


def iteration_inputs(params):
    """Cast the iteration constants to the working precision."""
    cast = params.dtype
    zoom = cast(params.zoom)
    w = cast(params.w)
    if params.deep_zoom:
        w = w / zoom
    scale = cast(config.MANDELBROT_SEED_SCALE)
    c = tuple(cast(v) for v in params.c)
    seed = tuple(v * scale for v in c)
    # float32 overflows for radii above ~1.8e19
    threshold_sq = float(params.threshold) ** 2
    return IterationInputs(cast, zoom, w, c, seed, int(params.max_iter),
                           threshold_sq)


def supersample_offsets(n, step_size, dtype=np.float64):
    """Per-axis sub-sample offsets, centred, spaced ``step_size / (2n)``."""
    spacing = step_size / (2.0 * n)
    return ((np.arange(n, dtype=np.float64) - (n - 1) / 2.0) * spacing).astype(dtype)


# ----------------------------------------------------
# PUBLIC API
# ----------------------------------------------------
def evaluate(position, params, step_size=config.STEP, supersampling=None):
    """Field value at ``position`` in [0, 1].

    ``supersampling`` overrides ``params.supersampling`` for this call only;
    sub-samples are evaluated with ``supersampling=1``.
    """
    n = params.supersampling if supersampling is None else int(supersampling)
    inputs = iteration_inputs(params)
    x, y, z = (inputs.dtype(v) for v in position)

    if n > 1:
        offsets = supersample_offsets(n, step_size, inputs.dtype)
        total = 0.0
        for ox in offsets:
            for oy in offsets:
                for oz in offsets:
                    total += evaluate((x + ox, y + oy, z + oz), params,
                                      step_size, supersampling=1)
        return total / (n * n * n)

    point = kernels(params.kind, params.formula).point
    return float(point(x, y, z, np.zeros(1, dtype=inputs.dtype), inputs.zoom,
                       inputs.w, inputs.c, inputs.seed, inputs.max_iter,
                       inputs.threshold_sq))


def evaluate_lattice(xs, ys, zs, params, step_size, out):
    """Fill ``out`` with the field over the product of three axes.

    ``out`` is flat, x slowest and z fastest.
    """
    inputs = iteration_inputs(params)
    offsets = supersample_offsets(max(1, params.supersampling), step_size,
                                  inputs.dtype)
    volume = kernels(params.kind, params.formula).volume
    return volume(
        np.ascontiguousarray(xs, dtype=inputs.dtype),
        np.ascontiguousarray(ys, dtype=inputs.dtype),
        np.ascontiguousarray(zs, dtype=inputs.dtype),
        offsets, inputs.zoom, inputs.w, inputs.c, inputs.seed,
        inputs.max_iter, inputs.threshold_sq, out,
    )
