"""Per-face normals and colours for display."""

import numpy as np

# Normal assigned to faces too small to have a direction
DEFAULT_NORMAL = (0.0, 1.0, 0.0)


def face_normals(triangles, eps=1e-4):
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    normals = np.cross(triangles[:, 1] - triangles[:, 0],
                       triangles[:, 2] - triangles[:, 0])
    length = np.linalg.norm(normals, axis=1)
    ok = length > eps
    normals[ok] /= length[ok, None]
    normals[~ok] = DEFAULT_NORMAL
    return normals


def face_colors(triangles, params, normals=None):
    """RGB in [0.1, 1] per face.

    Orientation picks the hue, distance from the origin dims far faces,
    position adds a slow sinusoidal ripple and the Julia constant tints
    the whole surface.
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    if normals is None:
        normals = face_normals(triangles)
    centers = triangles.mean(axis=1)
    distance = np.linalg.norm(centers, axis=1)

    color = np.abs(normals) * 0.8 + 0.2
    color *= (1.0 - np.minimum(distance / 3.0, 0.8))[:, None]

    ripple = 0.3 * (np.sin(centers[:, 0] * 2.0)
                    + np.cos(centers[:, 1] * 2.0)
                    + np.sin(centers[:, 2] * 1.5))
    color += ripple[:, None] * np.array([0.2, 0.15, 0.25])

    tint = (params.c.x + params.c.y) * 0.1
    color += tint * np.array([1.0, 0.5, -0.3])
    return np.clip(color, 0.1, 1.0)


def to_rgb8(colors):
    return (np.asarray(colors) * 255).astype(np.uint8)
