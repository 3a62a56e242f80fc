"""
OBJ File Parser for 3D Mesh Data
Parses Wavefront .obj lines into attribute buffers, a vertex table and
object/group polygon ranges
"""

import logging
import re

import numpy as np

from obj_accumulator import GroupAccumulator, name_is_valid
from obj_errors import ExpectedIdx, InvalidIndex

__all__ = ['OBJParser', 'name_is_valid', 'parse_floats', 'resolve_vertex',
           'validate_indices']

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r'[+-]?[0-9]+')
# Only ASCII whitespace separates terms; other Unicode spaces stay inside them
_ASCII_WHITESPACE = ' \t\n\r\f'
_TERM_SEP_RE = re.compile(r'[ \t\n\r\f]+')
# Indices must fit the int64 vertex table
_MAX_INDEX = np.iinfo(np.int64).max


def parse_floats(terms):
    """
    Parse the values of a 'v', 'vt' or 'vn' directive

    At most three values are read. Reading stops at the first term that is
    not a number and missing values default to 0.0, so malformed lines still
    produce an attribute instead of failing.

    Args:
        terms: Tokens following the directive

    Returns:
        list: Three floats
    """
    values = []
    for term in terms[:3]:
        if '_' in term or term != term.strip():
            break
        try:
            values.append(float(term))
        except ValueError:
            break
    return values + [0.0] * (3 - len(values))


def _resolve_index(field, length, line_num):
    field = field.strip()
    if not field:
        return 0
    if not _INDEX_RE.fullmatch(field):
        raise ExpectedIdx(line_num)

    idx = int(field)
    if abs(idx) > _MAX_INDEX:
        raise ExpectedIdx(line_num)
    if idx > 0:
        return idx
    if idx == 0:
        # OBJ indices start at 1
        raise InvalidIndex(0, line_num)

    # Negative indices count back from the latest attribute
    resolved = length - (-idx - 1)
    if resolved <= 0:
        raise InvalidIndex(idx, line_num)
    return resolved


def resolve_vertex(token, lengths, line_num):
    """
    Resolve one face vertex token such as '3/4/5', '3//5' or '-2/4'

    Args:
        token: The vertex token
        lengths: Current (positions, uvs, normals) buffer lengths
        line_num: 1-based line number for error reporting

    Returns:
        tuple: 1-based (position, uv, normal) indices, 0 for absent uv/normal

    Raises:
        ExpectedIdx: If the position is missing or a field is not an integer
        InvalidIndex: If an index is zero or reaches before the first attribute
    """
    fields = token.split('/')[:3]
    indices = [
        _resolve_index(field, length, line_num)
        for field, length in zip(fields, lengths)
    ]
    indices += [0] * (3 - len(indices))

    if indices[0] == 0:
        raise ExpectedIdx(line_num)
    return tuple(indices)


def validate_indices(vertices, lengths):
    """
    Check every vertex record against the final buffer sizes

    Args:
        vertices: (M, 3) array of 1-based indices, 0 for absent
        lengths: Final (positions, uvs, normals) buffer lengths

    Raises:
        InvalidIndex: For the first record (in table order) holding an index
                      beyond its buffer
    """
    out_of_range = vertices > np.asarray(lengths)
    bad_rows = np.flatnonzero(out_of_range.any(axis=1))
    if bad_rows.size == 0:
        return

    row = bad_rows[0]
    column = int(np.argmax(out_of_range[row]))
    raise InvalidIndex(int(vertices[row, column]))


def _freeze(array):
    array.flags.writeable = False
    return array


class OBJParser:
    """
    Parser for Wavefront .obj 3D model files

    A parser instance performs a single forward pass; create a new one for
    every file.
    """

    def __init__(self):
        self.positions = []
        self.uvs = []
        self.normals = []
        self.vertices = []
        self.groups = GroupAccumulator()

    def parse_line(self, line, line_num):
        """
        Dispatch one line of OBJ text

        Args:
            line: Line of text, with or without its line terminator
            line_num: 1-based line number used in error messages
        """
        line = line.strip(_ASCII_WHITESPACE)
        if not line:
            return
        parts = _TERM_SEP_RE.split(line)

        directive, terms = parts[0], parts[1:]

        # Vertex attributes
        if directive == 'v':
            self.positions.append(parse_floats(terms))
        elif directive == 'vt':
            self.uvs.append(parse_floats(terms))
        elif directive == 'vn':
            self.normals.append(parse_floats(terms))

        # Faces
        elif directive == 'f':
            lengths = (len(self.positions), len(self.uvs), len(self.normals))
            start = len(self.vertices)
            for token in terms:
                self.vertices.append(resolve_vertex(token, lengths, line_num))
            self.groups.add_polygon((start, len(self.vertices)))

        # Grouping
        elif directive == 'g':
            self.groups.select_groups(terms)
        elif directive == 'o':
            self.groups.begin_object(terms, line_num)

    def parse(self, lines):
        """
        Parse OBJ lines and return the finished model data

        Args:
            lines: Iterable of text lines

        Returns:
            dict: Contains 'positions', 'uvs', 'normals' (read-only Nx3 float32
                  arrays), 'vertices' (read-only Mx3 array of 1-based indices,
                  0 for absent) and 'objects' (object name -> group name ->
                  tuple of (start, end) vertex ranges)
        """
        for i, line in enumerate(lines):
            self.parse_line(line, i + 1)
        return self.finish()

    def finish(self):
        """Flush the last object, validate all indices and freeze the buffers"""
        objects = self.groups.finish()

        positions = np.array(self.positions, dtype=np.float32).reshape(-1, 3)
        uvs = np.array(self.uvs, dtype=np.float32).reshape(-1, 3)
        normals = np.array(self.normals, dtype=np.float32).reshape(-1, 3)
        vertices = np.array(self.vertices, dtype=np.int64).reshape(-1, 3)

        validate_indices(vertices, (len(positions), len(uvs), len(normals)))

        logger.debug(
            "Parsed %d positions, %d uvs, %d normals, %d vertex records, %d object(s)",
            len(positions), len(uvs), len(normals), len(vertices), len(objects)
        )

        return {
            'positions': _freeze(positions),
            'uvs': _freeze(uvs),
            'normals': _freeze(normals),
            'vertices': _freeze(vertices),
            'objects': objects,
        }
