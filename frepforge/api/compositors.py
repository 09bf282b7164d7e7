from functools import reduce
from . import ops
from .core import Tree, scoped

DEFAULT_BLEND = 0.5

def _shape_list(shapes, name: str) -> list:
    if len(shapes) == 1 and isinstance(shapes[0], (list, tuple)):
        shapes = shapes[0]
    if not shapes:
        raise ValueError(f"{name}() can't be called without arguments.")
    return list(shapes)

@scoped
def union(*shapes: Tree) -> Tree:
    """Returns the union of one or more shapes."""
    return reduce(ops.min, _shape_list(shapes, 'union'))

@scoped
def intersection(*shapes: Tree) -> Tree:
    """Returns the intersection of one or more shapes."""
    return reduce(ops.max, _shape_list(shapes, 'intersection'))

def inverse(shape: Tree) -> Tree:
    """Returns the complement of a shape."""
    return ops.neg(shape)

@scoped
def difference(*shapes: Tree) -> Tree:
    """
    Subtracts every following shape from the first one.

    A single shape is returned unchanged.
    """
    shapes = _shape_list(shapes, 'difference')
    if len(shapes) == 1: return shapes[0]
    return intersection(shapes[0], inverse(union(shapes[1:])))

@scoped
def blend(a: Tree, b: Tree, amount: float = DEFAULT_BLEND) -> Tree:
    """
    Returns the union of two shapes with a rounded fillet where they meet.

    The fillet term is sqrt(|a|) + sqrt(|b|) - amount; larger amounts give a
    wider fillet.
    """
    fillet = ops.sub(ops.add(ops.sqrt(ops.abs(a)), ops.sqrt(ops.abs(b))), ops.constant(amount))
    return union(a, b, fillet)

@scoped
def blend_all(*shapes: Tree, amount: float = DEFAULT_BLEND) -> Tree:
    """Blends any number of shapes together, left to right."""
    return reduce(lambda acc, s: blend(acc, s, amount), _shape_list(shapes, 'blend_all'))
