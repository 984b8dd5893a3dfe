"""Triangle meshes of 4D quaternion Julia and Mandelbrot sets."""

__all__ = [
    "Quaternion",
    "FractalKind",
    "Formula",
    "Precision",
    "FractalParameters",
    "GridSpec",
    "default_parameters",
    "default_grid",
    "describe_parameters",
    "evaluate",
    "SampleField",
    "GridSampler",
    "should_refine",
    "TriangleAccumulator",
    "triangulate",
    "triangulate_field",
    "Mesh",
    "MeshGenerator",
    "generate",
    "export_mesh",
    # Errors
    "QuatMeshError",
    "OutOfMemoryError",
    "ParameterError",
    "ExportError",
]

from .accumulator import TriangleAccumulator
from .errors import ExportError, OutOfMemoryError, ParameterError, QuatMeshError
from .evaluator import evaluate
from .export import export_mesh
from .field import SampleField
from .generator import Mesh, MeshGenerator, generate
from .marching import triangulate, triangulate_field
from .params import (
    FractalKind,
    FractalParameters,
    Formula,
    GridSpec,
    Precision,
    default_grid,
    default_parameters,
    describe_parameters,
)
from .quaternion import Quaternion
from .refine import should_refine
from .sampler import GridSampler
