import math

import numpy as np
import pytest

from quatmesh.evaluator import (
    evaluate,
    evaluate_lattice,
    iteration_inputs,
    supersample_offsets,
)
from quatmesh.params import FractalKind, FractalParameters, Formula


def random_positions(n=200, seed=0):
    rng = np.random.default_rng(seed)
    return rng.uniform(-1.5, 1.5, size=(n, 3))


def test_origin_inside_far_point_outside():
    params = FractalParameters()
    assert evaluate((0.0, 0.0, 0.0), params) == 1.0
    assert evaluate((1.5, 1.5, 1.5), params) == 0.0


def test_deterministic_and_binary():
    params = FractalParameters()
    for p in random_positions():
        v = evaluate(p, params)
        assert v in (0.0, 1.0)
        assert evaluate(p, params) == v


@pytest.mark.parametrize("formula", list(Formula))
def test_escape_is_monotone_in_iterations(formula):
    positions = random_positions(100, seed=1)
    for n in range(1, 9):
        fewer = FractalParameters(max_iter=n, formula=formula)
        more = FractalParameters(max_iter=n + 1, formula=formula)
        for p in positions:
            assert evaluate(p, more) <= evaluate(p, fewer)


def test_supersampling_is_mean_of_subsamples():
    params = FractalParameters(supersampling=2)
    step = 0.2
    offsets = supersample_offsets(2, step, np.float32)
    for p in random_positions(30, seed=2):
        x, y, z = (np.float32(v) for v in p)
        subs = [evaluate((x + ox, y + oy, z + oz), params, step, supersampling=1)
                for ox in offsets for oy in offsets for oz in offsets]
        value = evaluate(p, params, step)
        assert 0.0 <= value <= 1.0
        assert value == pytest.approx(sum(subs) / 8)


def test_supersample_offsets_are_centred():
    offsets = supersample_offsets(3, 0.3)
    assert offsets == pytest.approx([-0.05, 0.0, 0.05])
    assert supersample_offsets(1, 0.3) == pytest.approx([0.0])


def test_kinds_differ():
    p = (-1.0, 0.0, 0.0)
    julia = evaluate(p, FractalParameters(kind=FractalKind.JULIA))
    mandel = evaluate(p, FractalParameters(kind=FractalKind.MANDELBROT))
    hybrid = evaluate(p, FractalParameters(kind=FractalKind.HYBRID))
    assert julia == 0.0
    assert mandel == 1.0
    blend = 0.5 + 0.5 * math.sin(-1.0)
    assert hybrid == pytest.approx(julia * blend + mandel * (1.0 - blend), abs=1e-6)


def test_unknown_kind_matches_julia():
    for p in random_positions(50, seed=3):
        assert evaluate(p, FractalParameters(kind=42)) == evaluate(p, FractalParameters())


def test_zoom_divides_position():
    params = FractalParameters()
    zoomed = FractalParameters(zoom=2.0)
    for p in random_positions(50, seed=4):
        assert evaluate(2.0 * p, zoomed) == pytest.approx(evaluate(p, params))
    assert evaluate((-2.0, 0.0, 0.0), zoomed) == evaluate((-1.0, 0.0, 0.0), params)


def test_deep_zoom_inputs():
    deep = FractalParameters(w=0.5, precision=1, zoom=2000.0)
    inputs = iteration_inputs(deep)
    assert inputs.dtype is np.float64
    assert inputs.w == 0.5 / 2000.0
    assert inputs.threshold_sq == 4.0

    shallow = FractalParameters(w=0.5, zoom=2000.0)
    inputs = iteration_inputs(shallow)
    assert inputs.dtype is np.float32
    assert inputs.w == np.float32(0.5)


def test_large_threshold_still_escapes():
    params = FractalParameters(threshold=1e20)
    inputs = iteration_inputs(params)
    assert math.isfinite(inputs.threshold_sq)
    assert inputs.threshold_sq == pytest.approx(1e40)
    assert evaluate((1e3, 1e3, 1e3), params) == 0.0
    assert evaluate((0.0, 0.0, 0.0), params) == 1.0


def test_deep_zoom_evaluates():
    deep = FractalParameters(precision=1, zoom=2000.0)
    assert evaluate((0.0, 0.0, 0.0), deep) == 1.0
    assert evaluate((-2000.0, 0.0, 0.0), deep) == 0.0


def test_mandelbrot_seed():
    inputs = iteration_inputs(FractalParameters(kind=FractalKind.MANDELBROT))
    assert inputs.seed == pytest.approx((-0.02, 0.08, 0.0, 0.0))


@pytest.mark.parametrize("supersampling", [1, 2])
def test_lattice_matches_pointwise(supersampling):
    params = FractalParameters(supersampling=supersampling)
    axis = np.linspace(-1.0, 1.0, 5)
    out = np.empty(axis.size ** 3)
    evaluate_lattice(axis, axis, axis, params, 0.5, out)
    expected = [evaluate((x, y, z), params, 0.5)
                for x in axis for y in axis for z in axis]
    np.testing.assert_allclose(out, expected)
