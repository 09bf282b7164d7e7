import numpy as np
from concurrent.futures import ThreadPoolExecutor

DEFAULT_SPLITTING_ANGLE = 180.0
SPLIT_CHUNK_SIZE = 4096


class Mesh:
    """
    A triangle mesh: (N, 3) vertex positions, (M, 3) vertex indices and
    optional (N, 3) per-vertex normals.
    """
    def __init__(self, vertices=None, triangles=None, normals=None):
        self.vertices = np.zeros((0, 3), dtype=float) if vertices is None else np.asarray(vertices, dtype=float).reshape(-1, 3)
        self.triangles = np.zeros((0, 3), dtype=np.int64) if triangles is None else np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
        self.normals = None if normals is None else np.asarray(normals, dtype=float).reshape(-1, 3)
        if len(self.triangles) and (self.triangles.min() < 0 or self.triangles.max() >= len(self.vertices)):
            raise ValueError("Triangle indices must refer to existing vertices.")

    @classmethod
    def empty(cls) -> 'Mesh':
        return cls()

    @property
    def is_empty(self) -> bool:
        return len(self.triangles) == 0

    def __len__(self):
        return len(self.triangles)

    def __repr__(self):
        return f"Mesh(vertices={len(self.vertices)}, triangles={len(self.triangles)})"


def face_normals(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Unnormalized face normals; their length is twice the triangle area."""
    v = vertices[triangles]
    return np.cross(v[:, 1] - v[:, 0], v[:, 2] - v[:, 0])

def recalculate_normals(vertices, triangles) -> np.ndarray:
    """
    Area-weighted vertex normals: each vertex gets the normalized sum of the
    face normals of the triangles using it.
    """
    vertices = np.asarray(vertices, dtype=float).reshape(-1, 3)
    triangles = np.asarray(triangles, dtype=np.int64).reshape(-1, 3)
    normals = np.zeros_like(vertices)
    if len(triangles):
        fn = face_normals(vertices, triangles)
        for corner in range(3):
            np.add.at(normals, triangles[:, corner], fn)
    length = np.linalg.norm(normals, axis=1, keepdims=True)
    return normals / np.where(length == 0, 1, length)

def _angle_between(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Row-wise angle in degrees between two (N, 3) arrays; zero vectors give 0."""
    denom = np.linalg.norm(a, axis=1) * np.linalg.norm(b, axis=1)
    cos = np.einsum('ij,ij->i', a, b) / np.where(denom == 0, 1, denom)
    angle = np.degrees(np.arccos(np.clip(cos, -1.0, 1.0)))
    return np.where(denom == 0, 0.0, angle)

def _corner_flags(vertices, normals, triangles, splitting_angle) -> np.ndarray:
    """For each triangle corner, whether the corner's vertex normal deviates too far from the face."""
    fn = face_normals(vertices, triangles)
    return np.stack([_angle_between(normals[triangles[:, c]], fn) > splitting_angle for c in range(3)], axis=1)

def split_normals(mesh: Mesh, splitting_angle: float = DEFAULT_SPLITTING_ANGLE, chunk_size: int = SPLIT_CHUNK_SIZE, max_workers: int = None) -> Mesh:
    """
    Returns a copy of `mesh` with hard edges preserved.

    Every triangle corner whose face normal deviates from the shared vertex
    normal by more than `splitting_angle` degrees gets its own copy of that
    vertex, then normals are recomputed on the result. An angle of 180 or
    more disables splitting.

    Args:
        mesh (Mesh): The input mesh. Its normals are used as the shared vertex
                     normals when present, otherwise they are recomputed.
        splitting_angle (float): Threshold in degrees.
        chunk_size (int): Triangles per worker task for the corner test.
        max_workers (int, optional): Thread pool size for the corner test.
    """
    vertices, triangles = mesh.vertices, mesh.triangles
    normals = mesh.normals if mesh.normals is not None else recalculate_normals(vertices, triangles)

    if splitting_angle >= 180.0 or len(vertices) == 0 or len(triangles) == 0:
        return Mesh(vertices.copy(), triangles.copy(), normals.copy())

    flags = np.zeros(triangles.shape, dtype=bool)
    step = max(1, chunk_size)
    starts = range(0, len(triangles), step)

    def mark(start):
        stop = start + step
        flags[start:stop] = _corner_flags(vertices, normals, triangles[start:stop], splitting_angle)

    if len(starts) == 1:
        mark(0)
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(executor.map(mark, starts))

    # Duplicate flagged corners in index-buffer order.
    flat = triangles.reshape(-1).copy()
    marked = np.flatnonzero(flags.reshape(-1))
    new_vertices = np.concatenate([vertices, vertices[flat[marked]]], axis=0)
    flat[marked] = len(vertices) + np.arange(len(marked))
    new_triangles = flat.reshape(-1, 3)
    return Mesh(new_vertices, new_triangles, recalculate_normals(new_vertices, new_triangles))

def finalize_mesh(vertices, triangles, splitting_angle: float = DEFAULT_SPLITTING_ANGLE) -> Mesh:
    """Builds a Mesh with normals from raw polygonizer output."""
    if vertices is None or triangles is None or len(triangles) == 0:
        return Mesh.empty()
    mesh = Mesh(vertices, triangles)
    mesh.normals = recalculate_normals(mesh.vertices, mesh.triangles)
    if splitting_angle < 180.0:
        mesh = split_normals(mesh, splitting_angle)
    return mesh
