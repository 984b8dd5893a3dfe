"""Mesh export.

Triangles are written exactly as generated: every triangle carries its
own three vertices, so positions along shared edges are duplicated in
the output files. Weld in the downstream tool if indexed geometry is
needed.
"""

import logging
from pathlib import Path

import numpy as np
from stl import mesh as stl_mesh

from . import config
from .errors import ExportError

log = logging.getLogger(__name__)


def save_stl(triangles, path):
    triangles = np.asarray(triangles, dtype=np.float32).reshape(-1, 3, 3)
    m = stl_mesh.Mesh(np.zeros(len(triangles), dtype=stl_mesh.Mesh.dtype))
    m.vectors[:] = triangles
    m.update_normals()
    m.save(str(path))
    return path


def save_obj(triangles, path, precision=config.OUTPUT_PRECISION):
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    fmt = f"v {{:.{precision}f}} {{:.{precision}f}} {{:.{precision}f}}\n"
    with open(path, "w") as fh:
        fh.write(f"# quatmesh: {len(triangles)} triangles\n")
        for x, y, z in triangles.reshape(-1, 3):
            fh.write(fmt.format(x, y, z))
        for t in range(len(triangles)):
            a = 3 * t + 1
            fh.write(f"f {a} {a + 1} {a + 2}\n")
    return path


EXPORTERS = {
    ".stl": save_stl,
    ".obj": save_obj,
}


def export_mesh(mesh, path):
    """Write ``mesh`` to ``path``; the format follows the file suffix."""
    path = Path(path)
    exporter = EXPORTERS.get(path.suffix.lower())
    if exporter is None:
        raise ExportError(
            f"unsupported mesh format {path.suffix!r}, use one of {sorted(EXPORTERS)}")
    exporter(mesh.triangles, path)
    log.info("Saved %d triangles to %s", len(mesh), path)
    return path
