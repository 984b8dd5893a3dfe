import numpy as np
import pytest


@pytest.fixture
def starve_vertex_arrays(monkeypatch):
    """Return a function that makes ``(n, 3)`` numpy.empty calls fail."""
    real_empty = np.empty

    def empty(shape, *args, **kwargs):
        if isinstance(shape, tuple) and len(shape) == 2 and shape[1] == 3:
            raise MemoryError("no memory left")
        return real_empty(shape, *args, **kwargs)

    def install():
        monkeypatch.setattr(np, "empty", empty)

    return install
