import logging

import numpy as np
import pytest

from quatmesh.errors import OutOfMemoryError
from quatmesh.evaluator import evaluate
from quatmesh.params import FractalParameters, GridSpec
from quatmesh.refine import should_refine
from quatmesh.sampler import GridSampler, sample


def test_layout_and_values():
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 1.0)
    params = FractalParameters()
    field = sample(grid, params)

    assert field.shape == (3, 3, 3)
    assert len(field) == 27
    assert field.num_cubes == 8
    assert field.positions.dtype == np.float32
    xs, ys, zs = field.axes
    for i in range(3):
        for j in range(3):
            for k in range(3):
                n = field.index(i, j, k)
                assert tuple(field.positions[n]) == (xs[i], ys[j], zs[k])
                assert field.values[n] == evaluate(field.positions[n], params)


def test_cube_corners():
    field = sample(GridSpec((0, 0, 0), (2, 2, 2), 1.0), FractalParameters())
    corners = field.cube(1, 0, 1).corners
    pts = field.positions[list(corners)]
    assert tuple(pts[0]) == (1.0, 0.0, 1.0)
    assert tuple(pts[6]) == (2.0, 1.0, 2.0)
    assert np.array_equal(field.corner_indices()[field.num_cubes - 1],
                          field.cube(1, 1, 1).corners)


def test_large_lattice_warning(caplog):
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 1.0)
    with caplog.at_level(logging.WARNING, logger="quatmesh.sampler"):
        GridSampler(warn_points=10).sample(grid, FractalParameters())
    assert any("Large lattice" in r.getMessage() for r in caplog.records)


def test_should_refine():
    params = FractalParameters(adaptive=True)
    # far outside the set every sample escapes
    assert not should_refine((3.0, 3.0, 3.0), 0.5, 0, params)
    assert should_refine((0.25, 0.25, 0.25), 0.5, 0, params)
    assert not should_refine((0.25, 0.25, 0.25), 0.5, params.max_depth, params)


def test_refinement_mask_matches_should_refine():
    params = FractalParameters(adaptive=True, max_depth=1)
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 0.5)
    field = GridSampler().sample(grid, params)

    assert field.refined.any()
    origins = field.cube_origins()
    for number in range(field.num_cubes):
        center = field.positions[origins[number]].astype(np.float64) + 0.25
        assert field.refined[number] == should_refine(center, 0.5, 0, params)


def test_refined_cubes_get_children():
    params = FractalParameters(adaptive=True, max_depth=1)
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 0.5)
    field = GridSampler().sample(grid, params)

    assert sorted(field.children) == list(np.flatnonzero(field.refined))
    origins = field.cube_origins()
    for number, child in field.children.items():
        assert child.depth == 1
        assert child.shape == (3, 3, 3)
        assert child.step == 0.25
        assert not child.refined.any()
        assert tuple(child.positions[0]) == tuple(field.positions[origins[number]])
    assert field.total_points() == 125 + 27 * len(field.children)


def test_no_refinement_at_depth_zero():
    params = FractalParameters(adaptive=True, max_depth=0)
    field = sample(GridSpec((-1, -1, -1), (1, 1, 1), 0.5), params)
    assert not field.refined.any()
    assert field.children == {}


def test_lattice_allocation_failure(starve_vertex_arrays):
    starve_vertex_arrays()
    grid = GridSpec((-1, -1, -1), (1, 1, 1), 0.5)
    with pytest.raises(OutOfMemoryError, match="5x5x5 lattice"):
        GridSampler().sample(grid, FractalParameters())
