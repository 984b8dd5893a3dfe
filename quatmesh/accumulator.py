"""Flat, resettable triangle storage.

Triangle ``i`` occupies vertex rows ``[3i, 3i + 3)`` of one contiguous
array. The buffer is reset between regenerations and keeps its capacity,
so steady-state interactive use does not reallocate.

Two growth modes:

* growable (default): capacity doubles whenever it runs out;
* pooled (``pool_size`` given): storage is sized once for a worst-case
  estimate and never grows. Triangles beyond the pool are allocated one by
  one instead. That path is slower but never fails.
"""

import logging

import numpy as np

from .errors import OutOfMemoryError

log = logging.getLogger(__name__)


class TriangleAccumulator:
    def __init__(self, capacity=0, dtype=np.float32, pool_size=None):
        self.dtype = np.dtype(dtype)
        self.pooled = pool_size is not None
        if self.pooled:
            capacity = int(pool_size)
        self._storage = self._allocate(max(0, int(capacity)))
        self._count = 0
        self._overflow = []
        self._warned = False
        self.reallocations = 0

    # ------------------------------------------------------------------
    # storage
    # ------------------------------------------------------------------
    def _allocate(self, capacity):
        try:
            return np.empty((capacity * 3, 3), dtype=self.dtype)
        except MemoryError as exc:
            raise OutOfMemoryError(
                f"cannot allocate storage for {capacity:,} triangles") from exc

    def _grow(self, needed):
        capacity = max(1, self.capacity)
        while capacity < needed:
            capacity *= 2
        log.debug("Expanding triangle storage to %d triangles", capacity)
        storage = self._allocate(capacity)
        storage[:self._count * 3] = self._storage[:self._count * 3]
        self._storage = storage
        self.reallocations += 1

    def _reserve(self, extra):
        """Room for ``extra`` triangles in storage; returns how many fit."""
        needed = self._count + extra
        if needed <= self.capacity:
            return extra
        if not self.pooled:
            self._grow(needed)
            return extra
        if not self._warned:
            log.warning("Triangle pool exhausted (%d triangles), "
                        "falling back to individual allocation", self.capacity)
            self._warned = True
        return max(0, self.capacity - self._count)

    @property
    def capacity(self):
        return len(self._storage) // 3

    def __len__(self):
        return self._count + len(self._overflow)

    # ------------------------------------------------------------------
    # appending
    # ------------------------------------------------------------------
    def append(self, triangle):
        """Append one triangle given as three 3D points."""
        triangle = np.asarray(triangle, dtype=self.dtype).reshape(3, 3)
        if self._reserve(1):
            start = self._count * 3
            self._storage[start:start + 3] = triangle
            self._count += 1
        else:
            self._overflow.append(triangle.copy())

    def extend(self, triangles):
        """Append a ``(k, 3, 3)`` block of triangles."""
        triangles = np.asarray(triangles, dtype=self.dtype).reshape(-1, 3, 3)
        k = len(triangles)
        if k == 0:
            return
        fit = self._reserve(k)
        start = self._count * 3
        self._storage[start:start + fit * 3] = triangles[:fit].reshape(-1, 3)
        self._count += fit
        for triangle in triangles[fit:]:
            self._overflow.append(triangle.copy())

    def append_batch(self, batch):
        """Move every triangle of ``batch`` into this buffer.

        ``batch`` is left empty afterwards.
        """
        if batch is self:
            raise ValueError("cannot append a buffer to itself")
        self.extend(batch.triangles)
        batch.reset()

    def reset(self):
        """Drop all triangles, keep the allocated capacity."""
        self._count = 0
        self._overflow = []
        self._warned = False

    # ------------------------------------------------------------------
    # views
    # ------------------------------------------------------------------
    @property
    def triangles(self):
        """``(len(self), 3, 3)`` array of triangle corner positions."""
        stored = self._storage[:self._count * 3].reshape(-1, 3, 3)
        if not self._overflow:
            return stored
        return np.concatenate([stored, np.stack(self._overflow)])

    @property
    def vertices(self):
        """Flattened ``(3 * len(self), 3)`` vertex list, ready for upload."""
        return self.triangles.reshape(-1, 3)

    def __getitem__(self, i):
        return self.triangles[i]

    def __iter__(self):
        return iter(self.triangles)
