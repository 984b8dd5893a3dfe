"""Marching cubes over a binary (or supersampled) fractal field.

A corner counts as inside when its value is nonzero; there is no numeric
iso level. Edge crossings use the snapping interpolation below, so on a
strictly binary field every vertex lands exactly on a lattice point. On a
supersampled field both corner values can lie below 1, in which case the
crossing is extrapolated past the end of the edge.
"""

import numpy as np
from numba import njit

from . import config
from .errors import OutOfMemoryError
from .tables import EDGE_CORNERS, EDGE_TABLE, TRI_END, TRI_TABLE


def cube_index(values):
    """8-bit configuration: bit k set iff corner k is nonzero."""
    index = 0
    for bit, value in enumerate(values):
        if value:
            index |= 1 << bit
    return index


def interpolate(p0, p1, v0, v1):
    """Crossing point on the edge p0-p1 for corner values v0, v1."""
    p0 = np.asarray(p0)
    p1 = np.asarray(p1)
    if v0 == 1.0:
        return p0.copy()
    if v1 == 1.0:
        return p1.copy()
    if v1 == v0:
        return p0.copy()
    mu = (1.0 - v0) / (v1 - v0)
    a = p0.astype(np.float64)
    b = p1.astype(np.float64)
    return (a + mu * (b - a)).astype(p0.dtype)


def cube_vertices(config_index, positions, values):
    """(12, 3) edge vertices; only edges flagged in EDGE_TABLE are filled."""
    edges = EDGE_TABLE[config_index]
    vertlist = np.zeros((12, 3), dtype=np.asarray(positions).dtype)
    for e, (a, b) in enumerate(EDGE_CORNERS):
        if edges & (1 << e):
            vertlist[e] = interpolate(positions[a], positions[b], values[a], values[b])
    return vertlist


def triangulate(cube, field, accumulator):
    """Emit the triangles of one cube; returns how many were appended."""
    corners = np.asarray(cube.corners, dtype=np.int64)
    values = field.values[corners]
    config_index = cube_index(values)
    if EDGE_TABLE[config_index] == 0:
        return 0

    vertlist = cube_vertices(config_index, field.positions[corners], values)
    row = TRI_TABLE[config_index]
    count = 0
    for t in range(0, len(row) - 2, 3):
        if row[t] == TRI_END:
            break
        accumulator.append(vertlist[row[t:t + 3]])
        count += 1
    return count


# ----------------------------------------------------
# WHOLE-FIELD PASS
# ----------------------------------------------------
@njit(cache=True)
def _interpolate_into(positions, values, a, b, vertlist, e):
    v0 = values[a]
    v1 = values[b]
    if v0 == 1.0 or v1 == v0:
        for d in range(3):
            vertlist[e, d] = positions[a, d]
    elif v1 == 1.0:
        for d in range(3):
            vertlist[e, d] = positions[b, d]
    else:
        mu = (1.0 - v0) / (v1 - v0)
        for d in range(3):
            pa = np.float64(positions[a, d])
            pb = np.float64(positions[b, d])
            vertlist[e, d] = pa + mu * (pb - pa)


@njit(cache=True)
def _emit_triangles(positions, values, origins, strides, configs,
                    edge_table, tri_table, edge_corners, vertlist, out):
    count = 0
    for n in range(origins.shape[0]):
        cfg = configs[n]
        edges = edge_table[cfg]
        if edges == 0:
            continue
        base = origins[n]
        for e in range(12):
            if edges & (1 << e):
                a = base + strides[edge_corners[e, 0]]
                b = base + strides[edge_corners[e, 1]]
                _interpolate_into(positions, values, a, b, vertlist, e)
        t = 0
        while tri_table[cfg, t] != -1:
            for v in range(3):
                src = tri_table[cfg, t + v]
                for d in range(3):
                    out[count * 3 + v, d] = vertlist[src, d]
            count += 1
            t += 3
    return count


def cube_configs(field):
    """Configuration index of every cube of ``field`` in cube order."""
    inside = field.values[field.corner_indices()] != 0
    return (inside.astype(np.int64) << np.arange(8, dtype=np.int64)).sum(axis=1)


def _triangulate_lattice(field, accumulator):
    if field.num_cubes == 0:
        return 0
    keep = ~field.refined
    origins = field.cube_origins()[keep]
    configs = cube_configs(field)[keep]
    active = EDGE_TABLE[configs] != 0
    origins = np.ascontiguousarray(origins[active])
    configs = np.ascontiguousarray(configs[active])
    if len(origins) == 0:
        return 0

    try:
        out = np.empty((len(origins) * config.MAX_TRIANGLES_PER_CUBE * 3, 3),
                       dtype=field.positions.dtype)
    except MemoryError as exc:
        raise OutOfMemoryError(
            f"cannot allocate triangles for {len(origins):,} surface cubes") from exc

    count = _emit_triangles(field.positions, field.values, origins,
                            field.corner_strides(), configs, EDGE_TABLE,
                            TRI_TABLE, EDGE_CORNERS,
                            np.zeros((12, 3), dtype=field.positions.dtype), out)
    accumulator.extend(out[:count * 3].reshape(-1, 3, 3))
    return count


def triangulate_field(field, accumulator):
    """Triangulate every unrefined cube of ``field`` and its refinements.

    Cubes are visited in cube order, then each refined cube's child field
    in turn; the result equals calling ``triangulate`` cube by cube in
    that order.
    """
    return sum(_triangulate_lattice(f, accumulator) for f in field.walk())
