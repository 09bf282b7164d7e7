"""
Explicit constructors for expression nodes.

Numbers are never converted implicitly: every operand must already be a
Tree, so write `ops.sub(ops.x(), ops.constant(1.0))` rather than `x - 1`.
Several names here (abs, min, max, pow) shadow builtins on purpose and are
meant to be used through the module, e.g. `ops.max(a, b)`.
"""
from .core import Tree, _check_operand
from .engine import get_engine

# --- Leaves ---

def constant(value: float) -> Tree:
    engine = get_engine()
    return Tree(engine.tree_const(float(value)), engine)

def _nonary(op: str) -> Tree:
    engine = get_engine()
    return Tree(engine.tree_nonary(op), engine)

def x() -> Tree: return _nonary('var_x')
def y() -> Tree: return _nonary('var_y')
def z() -> Tree: return _nonary('var_z')

def free_var() -> Tree:
    """A free variable whose value is supplied at evaluation time."""
    return _nonary('var_free')

def const_var() -> Tree:
    """A variable held constant during evaluation; its value defaults to 0.0."""
    return _nonary('const_var')

# --- Unary ops ---

def _unary(op: str, a: Tree) -> Tree:
    _check_operand(a)
    return Tree(a.engine.tree_unary(op, a.handle), a.engine)

def neg(a): return _unary('neg', a)
def abs(a): return _unary('abs', a)
def sqrt(a): return _unary('sqrt', a)
def square(a): return _unary('square', a)
def recip(a): return _unary('recip', a)
def sin(a): return _unary('sin', a)
def cos(a): return _unary('cos', a)
def tan(a): return _unary('tan', a)
def asin(a): return _unary('asin', a)
def acos(a): return _unary('acos', a)
def atan(a): return _unary('atan', a)
def exp(a): return _unary('exp', a)
def log(a): return _unary('log', a)

# --- Binary ops ---

def _binary(op: str, a: Tree, b: Tree) -> Tree:
    _check_operand(a)
    _check_operand(b, a.engine)
    return Tree(a.engine.tree_binary(op, a.handle, b.handle), a.engine)

def add(a, b): return _binary('add', a, b)
def sub(a, b): return _binary('sub', a, b)
def mul(a, b): return _binary('mul', a, b)
def div(a, b): return _binary('div', a, b)
def mod(a, b): return _binary('mod', a, b)
def min(a, b): return _binary('min', a, b)
def max(a, b): return _binary('max', a, b)
def pow(a, b): return _binary('pow', a, b)
def nth_root(a, b): return _binary('nth_root', a, b)
def atan2(a, b): return _binary('atan2', a, b)

def nanfill(a, b):
    """Returns `a`, with NaN results replaced by `b`."""
    return _binary('nanfill', a, b)

def compare(a, b):
    """-1 where a < b, 1 where a > b and 0 otherwise."""
    return _binary('compare', a, b)

def remap(t: Tree, x: Tree, y: Tree, z: Tree) -> Tree:
    _check_operand(t)
    return t.remap(x, y, z)
