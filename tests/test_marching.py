import numpy as np
import pytest

from quatmesh.accumulator import TriangleAccumulator
from quatmesh.errors import OutOfMemoryError
from quatmesh.field import SampleField
from quatmesh.marching import (
    cube_configs,
    cube_index,
    interpolate,
    triangulate,
    triangulate_field,
)
from quatmesh.params import FractalParameters, GridSpec
from quatmesh.sampler import GridSampler


def unit_field(values, dtype=np.float32):
    """2x2x2 lattice over the unit cube."""
    axis = np.array([0.0, 1.0], dtype=dtype)
    gx, gy, gz = np.meshgrid(axis, axis, axis, indexing="ij")
    positions = np.column_stack([gx.ravel(), gy.ravel(), gz.ravel()])
    return SampleField(positions, np.asarray(values, dtype=np.float64),
                       (2, 2, 2), 1.0, (axis, axis, axis))


def test_cube_index():
    assert cube_index([0] * 8) == 0
    assert cube_index([1] * 8) == 255
    assert cube_index([1, 0, 0, 0, 0, 0, 0, 0]) == 1
    assert cube_index([0, 0, 0, 0.5, 0, 0, 0, 0]) == 8


@pytest.mark.parametrize("value", [0.0, 1.0])
def test_uniform_cube_emits_nothing(value):
    field = unit_field([value] * 8)
    acc = TriangleAccumulator()
    assert triangulate(field.cube(0, 0, 0), field, acc) == 0
    assert len(acc) == 0
    assert triangulate_field(field, acc) == 0


def test_single_corner_snaps_to_corner():
    values = np.zeros(8)
    values[0] = 1.0
    field = unit_field(values)
    acc = TriangleAccumulator()
    assert triangulate(field.cube(0, 0, 0), field, acc) == 1
    assert np.array_equal(acc.triangles[0], np.zeros((3, 3)))


def test_interpolate_snapping_rules():
    p0 = np.array([0.0, 0.0, 0.0], dtype=np.float32)
    p1 = np.array([1.0, 0.0, 0.0], dtype=np.float32)
    assert np.array_equal(interpolate(p0, p1, 1.0, 0.0), p0)
    assert np.array_equal(interpolate(p0, p1, 0.0, 1.0), p1)
    assert np.array_equal(interpolate(p0, p1, 1.0, 1.0), p0)
    assert np.array_equal(interpolate(p0, p1, 0.5, 0.5), p0)


def test_interpolate_extrapolates_below_one():
    p0 = np.array([0.0, 0.0, 0.0], dtype=np.float32)
    p1 = np.array([1.0, 2.0, 0.0], dtype=np.float32)
    v = interpolate(p0, p1, 0.25, 0.75)
    assert v.dtype == np.float32
    # mu = (1 - 0.25) / (0.75 - 0.25) = 1.5, past p1
    np.testing.assert_allclose(v, [1.5, 3.0, 0.0])


def test_cube_configs_match_cube_index():
    params = FractalParameters()
    field = GridSampler().sample(GridSpec((-1, -1, -1), (1, 1, 1), 0.5), params)
    configs = cube_configs(field)
    for number, cube in enumerate(field.cubes()):
        assert configs[number] == cube_index(field.values[list(cube.corners)])


def per_cube(field):
    acc = TriangleAccumulator()
    for f in field.walk():
        for number, cube in enumerate(f.cubes()):
            if not f.refined[number]:
                triangulate(cube, f, acc)
    return acc


@pytest.mark.parametrize("changes", [
    {},
    {"supersampling": 2},
    {"adaptive": True, "max_depth": 1},
    {"kind": 1},
])
def test_whole_field_matches_per_cube(changes):
    params = FractalParameters(**changes)
    grid = GridSpec((-1.5, -1.5, -1.5), (1.5, 1.5, 1.5), 0.25)
    field = GridSampler().sample(grid, params)

    expected = per_cube(field)
    acc = TriangleAccumulator()
    count = triangulate_field(field, acc)

    assert count == len(expected) == len(acc)
    assert count > 0
    assert np.array_equal(acc.triangles, expected.triangles)


def test_binary_field_vertices_lie_on_lattice():
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 0.5)
    field = GridSampler().sample(grid, FractalParameters())
    acc = TriangleAccumulator()
    triangulate_field(field, acc)
    lattice = set(np.round(field.axes[0].astype(np.float64), 6))
    for coord in np.unique(acc.vertices):
        assert round(float(coord), 6) in lattice


def test_triangle_buffer_allocation_failure(starve_vertex_arrays):
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 0.5)
    field = GridSampler().sample(grid, FractalParameters())
    acc = TriangleAccumulator()
    starve_vertex_arrays()
    with pytest.raises(OutOfMemoryError):
        triangulate_field(field, acc)
    assert len(acc) == 0
