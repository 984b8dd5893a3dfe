"""Exception types raised by quatmesh."""


class QuatMeshError(Exception):
    """Base class for all quatmesh errors."""


class OutOfMemoryError(QuatMeshError, MemoryError):
    """A sample field or triangle buffer could not be allocated.

    Fatal for the generation session: retry with a coarser grid.
    """


class ParameterError(QuatMeshError, ValueError):
    """Fractal parameters or a grid spec violate their invariants."""


class ExportError(QuatMeshError):
    """The mesh could not be written in the requested format."""
