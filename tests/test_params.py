import numpy as np
import pytest

from quatmesh import config
from quatmesh.errors import ParameterError
from quatmesh.params import (
    FractalKind,
    FractalParameters,
    Formula,
    GridSpec,
    Precision,
    default_grid,
    default_parameters,
    describe_parameters,
)
from quatmesh.quaternion import Quaternion


def test_defaults():
    params = default_parameters()
    assert params.c == Quaternion(-0.2, 0.8, 0.0, 0.0)
    assert params.max_iter == config.MAX_ITER
    assert params.kind == FractalKind.JULIA
    assert params.dtype is np.float32
    assert not params.deep_zoom


def test_coercion():
    params = FractalParameters(c=[0, 1, 0, 0], kind=1, formula=2, precision=1)
    assert params.c == Quaternion(0.0, 1.0, 0.0, 0.0)
    assert params.kind is FractalKind.MANDELBROT
    assert params.formula is Formula.LINEAR
    assert params.precision is Precision.DOUBLE


def test_unknown_codes_fall_back():
    params = FractalParameters(kind=7, formula=9, precision=5)
    assert params.kind is FractalKind.JULIA
    assert params.formula is Formula.STANDARD
    assert params.precision is Precision.SINGLE


@pytest.mark.parametrize("changes", [
    {"max_iter": 0},
    {"threshold": 0.0},
    {"zoom": 0.5},
    {"supersampling": 0},
    {"max_depth": -1},
])
def test_invalid_parameters(changes):
    with pytest.raises(ParameterError):
        FractalParameters(**changes)
    # ParameterError is also a ValueError
    with pytest.raises(ValueError):
        FractalParameters(**changes)


def test_deep_zoom_selects_double():
    assert FractalParameters(precision=1, zoom=2000.0).dtype is np.float64
    assert FractalParameters(precision=1, zoom=10.0).dtype is np.float32
    assert FractalParameters(precision=0, zoom=2000.0).dtype is np.float32


def test_with_changes_is_a_copy():
    params = default_parameters()
    other = params.with_changes(max_iter=9)
    assert other.max_iter == 9
    assert params.max_iter == config.MAX_ITER


def test_default_grid_resolution():
    grid = default_grid()
    assert grid.resolution == (60, 60, 60)
    assert grid.lattice_shape == (61, 61, 61)


def test_small_grid():
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 1.0)
    assert grid.resolution == (2, 2, 2)
    assert grid.num_points == 27
    assert grid.num_cubes == 8
    xs, ys, zs = grid.axes(np.float32)
    assert xs.dtype == np.float32
    assert np.array_equal(xs, [-1.0, 0.0, 1.0])


def test_degenerate_axis():
    grid = GridSpec((0, 0, 0), (1, 1, 0), 0.5)
    assert grid.resolution == (2, 2, 0)
    assert grid.num_cubes == 0
    assert grid.num_points == 9


def test_invalid_grid():
    with pytest.raises(ParameterError):
        GridSpec((1, 0, 0), (0, 1, 1), 0.1)
    with pytest.raises(ParameterError):
        GridSpec((0, 0, 0), (1, 1, 1), 0.0)
    with pytest.raises(ParameterError):
        GridSpec((0, 0), (1, 1), 0.1)


def test_describe_parameters():
    text = describe_parameters(default_parameters(adaptive=True),
                               GridSpec((-1, -1, -1), (1, 1, 1), 1.0), 12)
    assert "Julia Set" in text
    assert "Standard z^2+c" in text
    assert "Detail Threshold" in text
    assert "Grid: 2x2x2 cubes" in text
    assert "Triangles: 12" in text
