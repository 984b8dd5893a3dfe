import logging

import numpy as np

from . import config
from .errors import OutOfMemoryError
from .evaluator import evaluate_lattice
from .field import SampleField
from .params import GridSpec
from .refine import refinement_mask

log = logging.getLogger(__name__)


class GridSampler:
    """Fill a lattice over a bounding box with fractal field values."""

    def __init__(self, warn_points=config.LATTICE_WARNING_POINTS):
        self.warn_points = warn_points

    def sample(self, grid, params):
        if grid.num_points > self.warn_points:
            nx, ny, nz = grid.lattice_shape
            log.warning("Large lattice: %dx%dx%d = %s points, consider a bigger step",
                        nx, ny, nz, f"{grid.num_points:,}")
        field = self._sample_lattice(grid, params, depth=0)
        if params.adaptive:
            refined = self._refine(field, params)
            if refined:
                log.info("Adaptive grid: refined %d cells (%s points total)",
                         refined, f"{field.total_points():,}")
        return field

    def _sample_lattice(self, grid, params, depth):
        dtype = params.dtype
        shape = grid.lattice_shape
        try:
            xs, ys, zs = grid.axes(dtype)
            positions = np.empty((grid.num_points, 3), dtype=dtype)
            values = np.empty(grid.num_points, dtype=np.float64)
            gx, gy, gz = np.meshgrid(xs, ys, zs, indexing="ij")
        except MemoryError as exc:
            raise OutOfMemoryError(
                f"cannot allocate a {shape[0]}x{shape[1]}x{shape[2]} lattice"
            ) from exc

        positions[:, 0] = gx.ravel()
        positions[:, 1] = gy.ravel()
        positions[:, 2] = gz.ravel()
        del gx, gy, gz

        evaluate_lattice(xs, ys, zs, params, grid.step, values)
        return SampleField(positions, values, shape, grid.step, (xs, ys, zs),
                           depth=depth)

    def _refine(self, field, params):
        """Replace high-variance cubes with half-step child lattices."""
        mask = refinement_mask(field, params)
        field.refined = mask
        count = 0
        origins = field.cube_origins()
        for number in np.flatnonzero(mask):
            p0 = field.positions[origins[number]].astype(np.float64)
            child_grid = GridSpec(p0, p0 + field.step, field.step / 2.0)
            child = self._sample_lattice(child_grid, params, field.depth + 1)
            field.children[int(number)] = child
            count += 1 + self._refine(child, params)
        return count


def sample(grid, params):
    return GridSampler().sample(grid, params)
