"""
OBJ Model
Read-only access to a parsed Wavefront .obj file through object, group,
polygon and vertex views

Example:
    model = ObjModel.from_file('ship.obj')
    for a, b, c in model.triangles():
        print(a.position(), b.position(), c.position())
"""

from pathlib import Path
from types import MappingProxyType

from obj_parser import OBJParser
from triangulate import fan_indices


class Buffers:
    """
    Shared storage behind every view of a model

    Attributes:
        positions: Nx3 float32 array of positions
        uvs: Nx3 float32 array of texture coordinates
        normals: Nx3 float32 array of normals
        vertices: Mx3 array of 1-based (position, uv, normal) indices,
                  0 where uv or normal is absent
    """

    def __init__(self, positions, uvs, normals, vertices):
        self.positions = positions
        self.uvs = uvs
        self.normals = normals
        self.vertices = vertices

    def lookup(self, polygon_range):
        start, end = polygon_range
        return Polygon(self, start, end)


class ObjModel:
    """
    Contents of a parsed OBJ file

    Objects and groups without a name in the file are stored under the
    empty string. The model never changes after parsing and can be shared
    freely between readers.
    """

    def __init__(self, positions, uvs, normals, vertices, objects):
        self._buffers = Buffers(positions, uvs, normals, vertices)
        self._objects = MappingProxyType({
            name: MappingProxyType(groups) for name, groups in objects.items()
        })

    @classmethod
    def from_file(cls, path, encoding='utf-8'):
        """Read an OBJ from a file path"""
        with open(Path(path), 'rb') as f:
            return cls.from_reader(f, encoding=encoding)

    @classmethod
    def from_reader(cls, reader, encoding='utf-8'):
        """
        Read an OBJ from a readable stream

        Args:
            reader: Object with a read() method returning bytes or str
            encoding: Text encoding used when read() returns bytes
        """
        data = reader.read()
        if isinstance(data, bytes):
            data = data.decode(encoding)
        return cls.from_lines(data.split('\n'))

    @classmethod
    def from_lines(cls, lines):
        """Read an OBJ from an iterable of text lines"""
        return cls(**OBJParser().parse(lines))

    def positions(self):
        """Read-only Nx3 array of position attributes"""
        return self._buffers.positions

    def uvs(self):
        """Read-only Nx3 array of texture coordinate attributes"""
        return self._buffers.uvs

    def normals(self):
        """Read-only Nx3 array of normal attributes"""
        return self._buffers.normals

    def vertices_table(self):
        """
        Resolved vertex records of every polygon, in file order

        Returns:
            Mx3 int array of zero-based (position, uv, normal) indices, -1
            where uv or normal is absent
        """
        return self._buffers.vertices - 1

    def object(self, name):
        """Return an Object by name, or None. Unnamed content lives under ''."""
        groups = self._objects.get(name)
        if groups is None:
            return None
        return Object(self._buffers, groups)

    def objects(self):
        """Yield (name, Object) pairs"""
        for name, groups in self._objects.items():
            yield name, Object(self._buffers, groups)

    def groups(self):
        """Yield (name, Group) pairs of every object"""
        for _, obj in self.objects():
            yield from obj.groups()

    def polygons(self):
        """Yield every Polygon of every object"""
        for _, group in self.groups():
            yield from group.polygons()

    def triangles(self):
        """Yield every triangle; see Polygon.triangles"""
        for polygon in self.polygons():
            yield from polygon.triangles()

    def __len__(self):
        return len(self._objects)

    def dump(self):
        """
        Write the model back out as OBJ-like text for inspection

        The output uses the parsed (absolute) indices and is not guaranteed
        to match the original file.
        """
        lines = []
        for directive, buffer in (('v', self.positions()),
                                  ('vt', self.uvs()),
                                  ('vn', self.normals())):
            for values in buffer:
                lines.append(' '.join([directive] + [str(v) for v in values]))

        for object_name, obj in self.objects():
            if object_name:
                lines.append(f"o {object_name}")
            for group_name, group in obj.groups():
                if group_name:
                    lines.append(f"g {group_name}")
                for polygon in group.polygons():
                    lines.append(polygon.dump())

        return '\n'.join(lines) + '\n' if lines else ''

    def __str__(self):
        return self.dump()

    def __repr__(self):
        return (f"ObjModel(positions={len(self.positions())}, uvs={len(self.uvs())}, "
                f"normals={len(self.normals())}, objects={len(self)})")


class Object:
    """An object defined in an OBJ"""

    def __init__(self, buffers, groups):
        self._buffers = buffers
        self._groups = groups

    def group(self, name):
        """Return a Group by name, or None. Faces outside any group live under ''."""
        polygons = self._groups.get(name)
        if polygons is None:
            return None
        return Group(self._buffers, polygons)

    def groups(self):
        """Yield (name, Group) pairs"""
        for name, polygons in self._groups.items():
            yield name, Group(self._buffers, polygons)

    def polygons(self):
        for _, group in self.groups():
            yield from group.polygons()

    def triangles(self):
        for polygon in self.polygons():
            yield from polygon.triangles()

    def __len__(self):
        return len(self._groups)


class Group:
    """A group defined in an OBJ. Polygons keep their file order."""

    def __init__(self, buffers, polygons):
        self._buffers = buffers
        self._polygons = polygons

    def polygon(self, index):
        """Return the Polygon at `index`, or None if out of range"""
        if not 0 <= index < len(self._polygons):
            return None
        return self._buffers.lookup(self._polygons[index])

    def polygons(self):
        for polygon_range in self._polygons:
            yield self._buffers.lookup(polygon_range)

    def triangles(self):
        for polygon in self.polygons():
            yield from polygon.triangles()

    def __len__(self):
        return len(self._polygons)


class Polygon:
    """A polygon defined in an OBJ, as a range of the vertex table"""

    def __init__(self, buffers, start, end):
        self._buffers = buffers
        self._start = start
        self._end = end

    def vertex(self, index):
        """Return the Vertex at `index`, or None if out of range"""
        if not 0 <= index < len(self):
            return None
        return Vertex(self._buffers, self._start + index)

    def vertices(self):
        """Yield Vertices in winding order"""
        for row in range(self._start, self._end):
            yield Vertex(self._buffers, row)

    def triangles(self):
        """
        Yield (a, b, c) Vertex triangles covering this polygon

        Useful when an application only accepts triangles but the OBJ holds
        quads or larger polygons. The triangles form a fan around the first
        vertex and keep the polygon's winding order. See
        triangulate.fan_indices for which vertices are used.

        Assumes the polygon is convex and that its vertices lie in one plane.
        """
        for a, b, c in fan_indices(len(self)):
            yield self.vertex(a), self.vertex(b), self.vertex(c)

    def dump(self):
        return ' '.join(['f'] + [vertex.dump() for vertex in self.vertices()])

    def __len__(self):
        return self._end - self._start

    def __eq__(self, other):
        if not isinstance(other, Polygon):
            return NotImplemented
        return (self._buffers is other._buffers and
                (self._start, self._end) == (other._start, other._end))

    def __hash__(self):
        return hash((id(self._buffers), self._start, self._end))

    def __repr__(self):
        return f"Polygon({self.dump()!r})"


class Vertex:
    """
    A vertex defined in an OBJ

    Indices returned here are zero-based, unlike the OBJ file itself.
    """

    def __init__(self, buffers, row):
        self._buffers = buffers
        self._row = row

    def _index(self, column):
        idx = int(self._buffers.vertices[self._row, column])
        return idx - 1 if idx else None

    def position_index(self):
        """Index of this vertex's position in ObjModel.positions()"""
        return self._index(0)

    def position(self):
        return self._buffers.positions[self.position_index()]

    def uv_index(self):
        """Index of this vertex's texture coordinate in ObjModel.uvs(), or None"""
        return self._index(1)

    def uv(self):
        idx = self.uv_index()
        return None if idx is None else self._buffers.uvs[idx]

    def normal_index(self):
        """Index of this vertex's normal in ObjModel.normals(), or None"""
        return self._index(2)

    def normal(self):
        idx = self.normal_index()
        return None if idx is None else self._buffers.normals[idx]

    def dump(self):
        """Format as an OBJ face vertex ('1', '1/2', '1//3' or '1/2/3')"""
        position, uv, normal = (int(i) for i in self._buffers.vertices[self._row])
        if normal:
            return f"{position}/{uv or ''}/{normal}"
        if uv:
            return f"{position}/{uv}"
        return str(position)

    def __eq__(self, other):
        if not isinstance(other, Vertex):
            return NotImplemented
        return self._buffers is other._buffers and self._row == other._row

    def __hash__(self):
        return hash((id(self._buffers), self._row))

    def __repr__(self):
        return f"Vertex({self.dump()})"
