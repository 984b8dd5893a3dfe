import numpy as np
import pytest

from quatmesh.tables import CORNER_OFFSETS, EDGE_CORNERS, EDGE_TABLE, TRI_END, TRI_TABLE


def test_shapes():
    assert CORNER_OFFSETS.shape == (8, 3)
    assert EDGE_CORNERS.shape == (12, 2)
    assert EDGE_TABLE.shape == (256,)
    assert TRI_TABLE.shape == (256, 16)


def test_edges_join_adjacent_corners():
    for a, b in EDGE_CORNERS:
        assert np.abs(CORNER_OFFSETS[a] - CORNER_OFFSETS[b]).sum() == 1


def test_empty_and_full_configurations():
    assert EDGE_TABLE[0] == 0
    assert EDGE_TABLE[255] == 0
    assert np.all(TRI_TABLE[0] == TRI_END)
    assert np.all(TRI_TABLE[255] == TRI_END)


def test_edge_table_flags_crossing_edges():
    for config in range(256):
        inside = [(config >> k) & 1 for k in range(8)]
        expected = 0
        for e, (a, b) in enumerate(EDGE_CORNERS):
            if inside[a] != inside[b]:
                expected |= 1 << e
        assert EDGE_TABLE[config] == expected


def test_triangle_rows():
    for config in range(256):
        row = list(TRI_TABLE[config])
        n = row.index(TRI_END)
        assert n % 3 == 0
        assert n <= 15
        assert all(v == TRI_END for v in row[n:])
        used = 0
        for e in row[:n]:
            used |= 1 << int(e)
        assert used == EDGE_TABLE[config]


def test_tables_are_read_only():
    with pytest.raises(ValueError):
        EDGE_TABLE[0] = 1
    with pytest.raises(ValueError):
        TRI_TABLE[0, 0] = 1
