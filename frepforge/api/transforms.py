"""
Coordinate transforms.

Every transform is a remap of the coordinate variables. Shapes live in
object space, so each remap pulls world-space query points back into object
space; nothing here evaluates the shape.
"""
import numpy as np
from . import ops
from .core import Tree, scoped
from .primitives import _vec3

@scoped
def move(t: Tree, translation) -> Tree:
    """Translates a shape."""
    tx, ty, tz = _vec3(translation)
    return t.remap(ops.sub(ops.x(), ops.constant(tx)), ops.sub(ops.y(), ops.constant(ty)), ops.sub(ops.z(), ops.constant(tz)))

def _mirror(axis_value: Tree, offset: float) -> Tree:
    return ops.sub(ops.constant(2.0 * offset), axis_value)

@scoped
def reflect_x(t: Tree, offset: float = 0.0) -> Tree:
    """Reflects a shape about the plane x = offset."""
    return t.remap(_mirror(ops.x(), offset), ops.y(), ops.z())

@scoped
def reflect_y(t: Tree, offset: float = 0.0) -> Tree:
    """Reflects a shape about the plane y = offset."""
    return t.remap(ops.x(), _mirror(ops.y(), offset), ops.z())

@scoped
def reflect_z(t: Tree, offset: float = 0.0) -> Tree:
    """Reflects a shape about the plane z = offset."""
    return t.remap(ops.x(), ops.y(), _mirror(ops.z(), offset))

@scoped
def reflect_xy(t: Tree) -> Tree:
    """Moves a shape across the plane y = x."""
    return t.remap(ops.y(), ops.x(), ops.z())

@scoped
def reflect_yz(t: Tree) -> Tree:
    """Moves a shape across the plane y = z."""
    return t.remap(ops.x(), ops.z(), ops.y())

@scoped
def reflect_xz(t: Tree) -> Tree:
    """Moves a shape across the plane x = z."""
    return t.remap(ops.z(), ops.y(), ops.x())

@scoped
def symmetric_x(t: Tree) -> Tree:
    """Clips a shape at x = 0 and mirrors the positive half onto the negative side."""
    return t.remap(ops.abs(ops.x()), ops.y(), ops.z())

@scoped
def symmetric_y(t: Tree) -> Tree:
    """Clips a shape at y = 0 and mirrors the positive half onto the negative side."""
    return t.remap(ops.x(), ops.abs(ops.y()), ops.z())

@scoped
def symmetric_z(t: Tree) -> Tree:
    """Clips a shape at z = 0 and mirrors the positive half onto the negative side."""
    return t.remap(ops.x(), ops.y(), ops.abs(ops.z()))

@scoped
def transform(t: Tree, matrix) -> Tree:
    """
    Applies an affine transform to a shape.

    Args:
        t (Tree): The shape to transform.
        matrix: A 4x4 affine matrix, or its top 3x4 block. Raises
                numpy.linalg.LinAlgError when the matrix is singular.
    """
    m = np.asarray(matrix, dtype=float)
    if m.shape == (3, 4): m = np.vstack([m, [0.0, 0.0, 0.0, 1.0]])
    if m.shape != (4, 4): raise ValueError(f"Expected a 4x4 or 3x4 matrix, got shape {m.shape}.")
    inv = np.linalg.inv(m)
    x, y, z = ops.x(), ops.y(), ops.z()

    def row(r):
        terms = [ops.mul(ops.constant(inv[r, 0]), x), ops.mul(ops.constant(inv[r, 1]), y), ops.mul(ops.constant(inv[r, 2]), z)]
        return ops.add(ops.add(ops.add(terms[0], terms[1]), terms[2]), ops.constant(inv[r, 3]))

    return t.remap(row(0), row(1), row(2))

def scale(t: Tree, factor) -> Tree:
    """Scales a shape about the origin by a scalar or per-axis factor."""
    f = np.broadcast_to(np.asarray(factor, dtype=float), (3,))
    return transform(t, np.diag([f[0], f[1], f[2], 1.0]))

def rotate(t: Tree, axis, angle: float) -> Tree:
    """Rotates a shape by `angle` radians about an axis through the origin."""
    ax = _vec3(axis)
    if np.linalg.norm(ax) == 0: raise ValueError("Rotation axis cannot be zero vector")
    kx, ky, kz = ax / np.linalg.norm(ax)
    K = np.array([[0, -kz, ky], [kz, 0, -kx], [-ky, kx, 0]])
    rot = np.eye(3) + np.sin(angle) * K + (1 - np.cos(angle)) * (K @ K)
    m = np.eye(4)
    m[:3, :3] = rot
    return transform(t, m)
