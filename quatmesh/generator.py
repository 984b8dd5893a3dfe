import logging
import threading
import time
from dataclasses import dataclass

import numpy as np

from . import config
from .accumulator import TriangleAccumulator
from .marching import triangulate_field
from .params import describe_parameters
from .sampler import GridSampler

log = logging.getLogger(__name__)


@dataclass
class Mesh:
    """Unwelded triangle soup: ``triangles[i]`` holds three corner points.

    Shared edges appear once per adjacent triangle; collaborators that
    need indexed geometry must weld vertices themselves.
    """

    triangles: np.ndarray
    params: object
    grid: object
    elapsed: float = 0.0

    def __len__(self):
        return len(self.triangles)

    @property
    def vertices(self):
        return self.triangles.reshape(-1, 3)

    @property
    def faces(self):
        return np.arange(len(self.vertices), dtype=np.int64).reshape(-1, 3)

    def bounds(self):
        if len(self.triangles) == 0:
            return np.zeros(3), np.zeros(3)
        verts = self.vertices
        return verts.min(axis=0), verts.max(axis=0)


class MeshGenerator:
    """One generation session.

    Owns the sample field and the triangle buffer and recomputes both from
    scratch on every call to :meth:`generate`. Calls are serialised: a
    request made while another is running waits for it to finish.
    """

    def __init__(self, pooled=False, sampler=None):
        self.pooled = pooled
        self.sampler = sampler or GridSampler()
        self.buffer = None
        self.field = None
        self._lock = threading.Lock()

    def _prepare_buffer(self, grid, params):
        dtype = np.dtype(params.dtype)
        estimate = grid.num_cubes * config.MAX_TRIANGLES_PER_CUBE
        if self.buffer is not None and self.buffer.dtype == dtype:
            if not self.pooled or self.buffer.capacity >= estimate:
                self.buffer.reset()
                return self.buffer
        if self.pooled:
            log.info("Allocating triangle pool: %s triangles", f"{estimate:,}")
            self.buffer = TriangleAccumulator(dtype=dtype, pool_size=estimate)
        else:
            self.buffer = TriangleAccumulator(dtype=dtype)
        return self.buffer

    def generate(self, params, grid):
        with self._lock:
            log.info("Regenerating fractal...")
            t0 = time.perf_counter()

            buffer = self._prepare_buffer(grid, params)
            self.field = self.sampler.sample(grid, params)
            t1 = time.perf_counter()

            count = triangulate_field(self.field, buffer)
            t2 = time.perf_counter()

            mesh = Mesh(buffer.triangles.copy(), params, grid, t2 - t0)
            log.info("Volume: %.1fms, MC: %.1fms, Tris: %d",
                     (t1 - t0) * 1000, (t2 - t1) * 1000, count)
            log.debug("%s", describe_parameters(params, grid, count))
            return mesh


def generate(params, grid):
    """Single-shot convenience wrapper around :class:`MeshGenerator`."""
    return MeshGenerator().generate(params, grid)
