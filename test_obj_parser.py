"""
Tests for OBJParser
Tests directive dispatch, face index resolution and final index validation
"""

import numpy as np
import pytest

from obj_errors import ExpectedIdx, ExpectedName, InvalidIndex, ObjError
from obj_parser import OBJParser, parse_floats, resolve_vertex, validate_indices


def parse(text):
    return OBJParser().parse(text.strip().split('\n'))


# =============================================================================
# TEST VERTEX DIRECTIVES
# =============================================================================

def test_parse_floats_reads_three_values():
    assert parse_floats(['1', '2.5', '-3']) == [1.0, 2.5, -3.0]


def test_parse_floats_defaults_missing_values():
    assert parse_floats(['1']) == [1.0, 0.0, 0.0]
    assert parse_floats([]) == [0.0, 0.0, 0.0]


def test_parse_floats_ignores_extra_values():
    assert parse_floats(['1', '2', '3', '4']) == [1.0, 2.0, 3.0]


def test_parse_floats_stops_at_first_non_number():
    """A bad token ends the values instead of failing the parse"""
    assert parse_floats(['1.0', 'abc', '2.0']) == [1.0, 0.0, 0.0]
    assert parse_floats(['1_0', '2']) == [0.0, 0.0, 0.0]


def test_vertex_directives_fill_buffers():
    data = parse("""
v 1 2 3
vt 0.5 0.25
vn 0 0 1
v 4 5 6 1.0
""")
    np.testing.assert_array_equal(data['positions'], [[1, 2, 3], [4, 5, 6]])
    np.testing.assert_array_equal(data['uvs'], [[0.5, 0.25, 0.0]])
    np.testing.assert_array_equal(data['normals'], [[0, 0, 1]])
    assert data['positions'].dtype == np.float32


def test_unknown_directives_and_comments_are_ignored():
    data = parse("""
# a comment
mtllib ship.mtl
usemtl hull
s off

v 0 0 0
""")
    assert len(data['positions']) == 1
    assert data['objects'] == {}


def test_only_ascii_whitespace_separates_terms():
    """A non-breaking space does not split a directive from its values"""
    data = parse("v\u00a01 2 3\nv 4\u00a05 6\nvt\t0.5  0.25\f")
    np.testing.assert_array_equal(data['positions'], [[0, 0, 0]])
    np.testing.assert_array_equal(data['uvs'], [[0.5, 0.25, 0.0]])


def test_buffers_are_read_only():
    data = parse("v 0 0 0\nvt 0 0\nvn 0 0 1\nf 1 1 1")
    for key in ('positions', 'uvs', 'normals', 'vertices'):
        with pytest.raises(ValueError):
            data[key][...] = 0


# =============================================================================
# TEST INDEX RESOLUTION
# =============================================================================

def test_resolve_vertex_field_combinations():
    lengths = (10, 10, 10)
    assert resolve_vertex('3', lengths, 1) == (3, 0, 0)
    assert resolve_vertex('3/4', lengths, 1) == (3, 4, 0)
    assert resolve_vertex('3//5', lengths, 1) == (3, 0, 5)
    assert resolve_vertex('3/4/5', lengths, 1) == (3, 4, 5)


def test_resolve_vertex_ignores_extra_fields():
    assert resolve_vertex('1/2/3/4', (5, 5, 5), 1) == (1, 2, 3)


def test_resolve_vertex_negative_indices():
    """Negative indices count back from the end of each buffer"""
    assert resolve_vertex('-1/-1/-1', (4, 3, 2), 1) == (4, 3, 2)
    assert resolve_vertex('-4/-2', (4, 3, 2), 1) == (1, 2, 0)


def test_resolve_vertex_zero_is_invalid():
    with pytest.raises(InvalidIndex) as excinfo:
        resolve_vertex('1/0', (5, 5, 5), 7)
    assert excinfo.value.index == 0
    assert excinfo.value.line == 7


def test_resolve_vertex_negative_beyond_history():
    with pytest.raises(InvalidIndex) as excinfo:
        resolve_vertex('-3', (2, 0, 0), 1)
    assert excinfo.value.index == -3


def test_resolve_vertex_negative_with_empty_buffer():
    with pytest.raises(InvalidIndex) as excinfo:
        resolve_vertex('1/-1', (1, 0, 0), 1)
    assert excinfo.value.index == -1


def test_resolve_vertex_missing_position():
    with pytest.raises(ExpectedIdx) as excinfo:
        resolve_vertex('/1/1', (5, 5, 5), 3)
    assert excinfo.value.line == 3


@pytest.mark.parametrize('token', ['a', '1/b', '1//1.5', '1_0'])
def test_resolve_vertex_non_integer(token):
    with pytest.raises(ExpectedIdx):
        resolve_vertex(token, (5, 5, 5), 1)


# =============================================================================
# TEST FACES
# =============================================================================

def test_face_records_polygon_range():
    data = parse("""
v 0 0 0
v 1 0 0
v 1 1 0
v 0 1 0
f 1 2 3
f 1 3 4
""")
    assert data['objects'] == {'': {'': ((0, 3), (3, 6))}}
    np.testing.assert_array_equal(
        data['vertices'],
        [[1, 0, 0], [2, 0, 0], [3, 0, 0], [1, 0, 0], [3, 0, 0], [4, 0, 0]]
    )


def test_relative_indices_resolve_against_current_buffers():
    data = parse("""
v 0 0 0
v 1 0 0
v 1 1 0
f -3 -2 -1
v 0 1 0
f -4 -2 -1
""")
    np.testing.assert_array_equal(data['vertices'][:, 0], [1, 2, 3, 1, 3, 4])


def test_zero_index_fails():
    with pytest.raises(InvalidIndex) as excinfo:
        parse("f 0/1/1 1/1/1 1/1/1")
    assert excinfo.value.index == 0


def test_insufficient_history_fails():
    with pytest.raises(InvalidIndex) as excinfo:
        parse("v 1 1 1\nf -5 1 1")
    assert excinfo.value.index == -5
    assert excinfo.value.line == 2


def test_bad_index_reports_line():
    with pytest.raises(ExpectedIdx) as excinfo:
        parse("v 0 0 0\n\nf 1 x 1")
    assert excinfo.value.line == 3
    assert str(excinfo.value) == "Expected index on line 3"


def test_empty_face_is_degenerate_polygon():
    data = parse("v 0 0 0\nf")
    assert data['objects'] == {'': {'': ((0, 0),)}}
    assert data['vertices'].shape == (0, 3)


# =============================================================================
# TEST VALIDATION
# =============================================================================

def test_absolute_index_beyond_positions_fails():
    with pytest.raises(InvalidIndex) as excinfo:
        parse("v 0 0 0\nf 1 2 1")
    assert excinfo.value.index == 2
    assert excinfo.value.line is None


def test_forward_reference_is_valid():
    """Absolute indices only need to exist once the whole file is read"""
    data = parse("f 1 2 3\nv 0 0 0\nv 1 0 0\nv 1 1 0")
    assert len(data['vertices']) == 3


def test_last_uv_and_normal_are_valid():
    data = parse("""
v 0 0 0
vt 0 0
vt 1 0
vn 0 0 1
f 1/2/1 1/2/1 1/1/1
""")
    np.testing.assert_array_equal(data['vertices'][0], [1, 2, 1])


def test_uv_beyond_buffer_fails():
    with pytest.raises(InvalidIndex) as excinfo:
        parse("v 0 0 0\nvt 0 0\nf 1/2 1/1 1/1")
    assert excinfo.value.index == 2


def test_normal_beyond_buffer_fails():
    with pytest.raises(InvalidIndex) as excinfo:
        parse("v 0 0 0\nf 1//1 1 1")
    assert excinfo.value.index == 1


def test_validate_reports_first_violation_in_table_order():
    vertices = np.array([[1, 0, 0], [1, 0, 9], [7, 0, 0]])
    with pytest.raises(InvalidIndex) as excinfo:
        validate_indices(vertices, (5, 0, 2))
    assert excinfo.value.index == 9


def test_validate_accepts_empty_table():
    validate_indices(np.zeros((0, 3), dtype=np.int64), (0, 0, 0))


# =============================================================================
# TEST OBJECTS
# =============================================================================

def test_lone_object_directive_fails():
    with pytest.raises(ExpectedName) as excinfo:
        parse("o")
    assert excinfo.value.line == 1


def test_invalid_object_name_fails():
    with pytest.raises(ExpectedName):
        parse("v 0 0 0\nf 1 1 1\no bad-name")


def test_errors_share_base_class():
    with pytest.raises(ObjError):
        parse("f 0 0 0")
