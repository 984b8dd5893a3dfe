"""Adaptive grid refinement.

A cell is subdivided when the field varies strongly inside it: the 8
corners and the centre are sampled and the population standard deviation
of those 9 values is compared against ``params.detail_threshold``.
"""

import numpy as np

from .evaluator import evaluate, evaluate_lattice

# Corner offsets in units of half a cell, followed by the centre
_SAMPLE_OFFSETS = np.array([
    [-1, -1, -1],
    [1, -1, -1],
    [-1, 1, -1],
    [1, 1, -1],
    [-1, -1, 1],
    [1, -1, 1],
    [-1, 1, 1],
    [1, 1, 1],
    [0, 0, 0],
], dtype=np.float64)


def cell_samples(center, cell_size, params):
    half = cell_size / 2.0
    center = np.asarray(center, dtype=np.float64)
    return np.array([
        evaluate(center + offset * half, params, step_size=cell_size,
                 supersampling=1)
        for offset in _SAMPLE_OFFSETS
    ])


def should_refine(center, cell_size, depth, params):
    """True if the cell at ``center`` should be split one level deeper."""
    if depth >= params.max_depth:
        return False
    samples = cell_samples(center, cell_size, params)
    return bool(samples.std() > params.detail_threshold)


def refinement_mask(field, params):
    """Apply the ``should_refine`` test to every cube of ``field`` at once.

    Corner samples come from the lattice itself (re-evaluated without
    supersampling when the field was supersampled); only the cube centres
    need new evaluations.
    """
    if field.depth >= params.max_depth or field.num_cubes == 0:
        return np.zeros(field.num_cubes, dtype=bool)

    plain = params.with_changes(supersampling=1)
    xs, ys, zs = field.axes
    if params.supersampling > 1:
        lattice = np.empty(len(field), dtype=np.float64)
        evaluate_lattice(xs, ys, zs, plain, field.step, lattice)
    else:
        lattice = field.values

    half = field.step / 2.0
    cx, cy, cz = (np.asarray(a[:-1], dtype=np.float64) + half for a in (xs, ys, zs))
    centers = np.empty(field.num_cubes, dtype=np.float64)
    evaluate_lattice(cx, cy, cz, plain, field.step, centers)

    samples = np.column_stack([lattice[field.corner_indices()], centers])
    return samples.std(axis=1) > params.detail_threshold
