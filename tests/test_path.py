import numpy as np
import pytest

from graphexpr import PathData


def _path(*segments):
    return PathData(np.array(segments, dtype=float))


def test_commands_emit_move_then_line_per_segment():
    path = _path([[0, 0], [10, 20]], [[1.5, 2.5], [3, 4]])
    assert list(path.commands()) == [
        ("M", 0.0, 0.0),
        ("L", 10.0, 20.0),
        ("M", 1.5, 2.5),
        ("L", 3.0, 4.0),
    ]


def test_svg_path_data():
    path = _path([[0, 0], [1000, 500.5]], [[-0.0001, 250.12345], [10, 0.1]])
    assert path.to_svg_data() == "M 0,0 L 1000,500.5 M 0,250.123 L 10,0.1"
    assert path.to_svg_data(precision=0) == "M 0,0 L 1000,500 M 0,250 L 10,0"


def test_concat_is_associative():
    p = _path([[0, 0], [1, 1]])
    q = _path([[2, 2], [3, 3]], [[4, 4], [5, 5]])
    r = _path([[6, 6], [7, 7]])
    assert (p + q) + r == p + (q + r)
    assert PathData.concat([p, q, r]) == (p + q) + r
    assert len(PathData.concat([p, q, r])) == 4


def test_empty_is_identity():
    p = _path([[0, 0], [1, 1]])
    assert PathData.empty() + p == p
    assert p + PathData.empty() == p
    assert len(PathData.concat([])) == 0
    assert len(PathData([])) == 0


def test_segments_are_read_only_copies():
    source = np.zeros((1, 2, 2))
    path = PathData(source)
    source[0, 0, 0] = 9.0
    assert path.segments[0, 0, 0] == 0.0
    with pytest.raises(ValueError):
        path.segments[0, 0, 0] = 1.0


def test_invalid_shape():
    with pytest.raises(ValueError):
        PathData(np.zeros((3, 2)))


def test_edge_set_ignores_order_and_direction():
    p = _path([[0, 0], [1, 1]], [[2, 2], [3, 3]])
    q = _path([[3, 3], [2, 2]], [[0, 0], [1, 1]])
    assert p.edge_set() == q.edge_set()
    assert p != q


def test_repr_is_short():
    assert repr(_path([[0, 0], [1, 1]])) == "PathData(segments=1)"
