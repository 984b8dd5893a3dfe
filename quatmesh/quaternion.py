"""Quaternion algebra.

The kernels below take and return plain 4-tuples ``(x, y, z, w)`` so the
jitted evaluator loops can call them directly. They contain no float
literals: a float32 quaternion stays float32 all the way through.
"""

import math
from typing import NamedTuple

from numba import njit


@njit(cache=True)
def qadd(a, b):
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2], a[3] + b[3])


@njit(cache=True)
def qmul(a, b):
    """Hamilton product a * b."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        ax * bx - ay * by - az * bz - aw * bw,
        ax * by + ay * bx + az * bw - aw * bz,
        ax * bz - ay * bw + az * bx + aw * by,
        ax * bw + ay * bz - az * by + aw * bx,
    )


@njit(cache=True)
def qsquare(a):
    """a * a, written out so the cross terms cancel exactly."""
    x, y, z, w = a
    xy = x * y
    xz = x * z
    xw = x * w
    return (x * x - y * y - z * z - w * w, xy + xy, xz + xz, xw + xw)


@njit(cache=True)
def qnorm_sq(a):
    return a[0] * a[0] + a[1] * a[1] + a[2] * a[2] + a[3] * a[3]


@njit(cache=True)
def qnorm(a):
    return math.sqrt(qnorm_sq(a))


def _floats(q):
    return (float(q[0]), float(q[1]), float(q[2]), float(q[3]))


class Quaternion(NamedTuple):
    """4-component hypercomplex value ``x + yi + zj + wk``."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def __add__(self, other):
        return Quaternion(*qadd(_floats(self), _floats(other)))

    def __mul__(self, other):
        return Quaternion(*qmul(_floats(self), _floats(other)))

    def square(self):
        return Quaternion(*qsquare(_floats(self)))

    def norm_sq(self):
        return float(qnorm_sq(_floats(self)))

    def norm(self):
        return float(qnorm(_floats(self)))

    def scaled(self, factor):
        return Quaternion(self.x * factor, self.y * factor,
                          self.z * factor, self.w * factor)
