import numpy as np
from . import ops
from .core import Tree, scoped

def _vec3(v) -> np.ndarray:
    arr = np.asarray(v, dtype=float).reshape(-1)
    if arr.shape != (3,): raise ValueError(f"Expected a 3D vector, got {v!r}.")
    return arr

def _distance_to(point) -> Tree:
    """Euclidean distance from (x, y, z) to a fixed point."""
    px, py, pz = _vec3(point)
    return ops.sqrt(ops.add(ops.add(
        ops.square(ops.sub(ops.x(), ops.constant(px))),
        ops.square(ops.sub(ops.y(), ops.constant(py)))),
        ops.square(ops.sub(ops.z(), ops.constant(pz)))))

@scoped
def circle(radius: float = 1.0) -> Tree:
    """
    Creates a circle of the given radius centered on the Z axis.

    The field ignores Z, so the result is an infinite cylinder until it is
    extruded.
    """
    dist = ops.sqrt(ops.add(ops.square(ops.x()), ops.square(ops.y())))
    return ops.sub(dist, ops.constant(radius))

@scoped
def sphere(radius: float = 1.0, center=(0.0, 0.0, 0.0)) -> Tree:
    """
    Creates a sphere.

    Args:
        radius (float, optional): The radius of the sphere. Defaults to 1.0.
        center (tuple, optional): The center point. Defaults to the origin.
    """
    return ops.sub(_distance_to(center), ops.constant(radius))

@scoped
def ellipsoid(radius: float, focus_a, focus_b) -> Tree:
    """Creates an ellipsoid: points whose summed distance to both foci is `radius`."""
    return ops.sub(ops.add(_distance_to(focus_a), _distance_to(focus_b)), ops.constant(radius))

@scoped
def box(lower, upper) -> Tree:
    """
    Creates an axis-aligned box with corners at `lower` and `upper`.

    The field is the largest per-axis distance outside the slabs. It is not a
    true Euclidean distance, but its sign is exact.
    """
    lo, hi = _vec3(lower), _vec3(upper)
    axes = (ops.x(), ops.y(), ops.z())
    slabs = [ops.max(ops.sub(ops.constant(lo[i]), axes[i]), ops.sub(axes[i], ops.constant(hi[i]))) for i in range(3)]
    return ops.max(ops.max(slabs[0], slabs[1]), slabs[2])

@scoped
def extrude(a: Tree, z_low: float, z_high: float) -> Tree:
    """Extrudes a 2D shape on the XY plane along Z between `z_low` and `z_high`."""
    z = ops.z()
    return ops.max(a, ops.max(ops.sub(ops.constant(z_low), z), ops.sub(z, ops.constant(z_high))))

@scoped
def cylinder(radius: float, height: float, base=(0.0, 0.0, 0.0)) -> Tree:
    """Creates a Z-aligned cylinder standing on `base`."""
    from .transforms import move
    b = _vec3(base)
    return extrude(move(circle(radius), b), b[2], b[2] + height)

@scoped
def shell(t: Tree, offset: float) -> Tree:
    """Returns a hollow shell of the given thickness around the surface of `t`."""
    return ops.sub(ops.abs(t), ops.constant(offset))
