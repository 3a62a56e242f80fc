"""
Mesh Export
Converts a parsed OBJ model into triangle arrays for rendering and
geometry processing
"""

import numpy as np
import trimesh


def triangle_faces(model):
    """
    Collect the triangles of every polygon as position indices

    Args:
        model: ObjModel

    Returns:
        Tx3 int array of zero-based indices into model.positions()
    """
    faces = [
        [a.position_index(), b.position_index(), c.position_index()]
        for a, b, c in model.triangles()
    ]
    return np.array(faces, dtype=np.int64).reshape(-1, 3)


def to_arrays(model, scale=1.0):
    """
    Export a model as vertex and face arrays

    Args:
        model: ObjModel
        scale: Scale factor to apply to all coordinates (default 1.0)

    Returns:
        dict: Contains 'vertices' (Nx3 array), 'faces' (Tx3 array),
              'face_normals' (Tx3 unit normals of the triangles), 'normals'
              (Nx3 array or None), 'bounds' (min/max coordinates) and 'scale'
    """
    vertices = np.array(model.positions(), dtype=np.float64)
    faces = triangle_faces(model)

    # Apply scaling
    if scale != 1.0:
        vertices = vertices * scale

    # Calculate bounds
    if len(vertices):
        bounds = {
            'min': vertices.min(axis=0),
            'max': vertices.max(axis=0),
            'center': vertices.mean(axis=0),
            'size': vertices.max(axis=0) - vertices.min(axis=0)
        }
    else:
        bounds = None

    normals = model.normals()
    return {
        'vertices': vertices,
        'faces': faces,
        'face_normals': compute_face_normals(vertices, faces),
        'normals': np.array(normals) if len(normals) else None,
        'bounds': bounds,
        'scale': scale
    }


def compute_face_normals(vertices, faces):
    """
    Unit normal of each triangle, following its winding order

    Args:
        vertices: Nx3 array of vertex coordinates
        faces: Tx3 array of vertex indices

    Returns:
        Tx3 array; degenerate triangles get a zero normal
    """
    corners = vertices[faces]
    normals = np.cross(corners[:, 1] - corners[:, 0], corners[:, 2] - corners[:, 0])
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)


def to_trimesh(model, scale=1.0):
    """Build a trimesh.Trimesh from a model, keeping vertex order intact"""
    arrays = to_arrays(model, scale=scale)
    return trimesh.Trimesh(vertices=arrays['vertices'], faces=arrays['faces'],
                           process=False)
