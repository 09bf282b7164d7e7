import functools
import numpy as np
from .engine import Engine, get_engine
from .context import Scope, active_scope


class DisposedTreeError(RuntimeError):
    """Raised when a Tree is used after its engine handle was released."""


class Tree:
    """
    An owning handle to an expression node held by an Engine.

    A Tree registers itself with the active Scope (if any) when it is created,
    and the scope disposes it when the scope itself is disposed. Trees are
    immutable; every operation on them builds a new Tree. Equality is identity.
    """
    def __init__(self, handle: int, engine: Engine = None):
        self.engine = engine or get_engine()
        self._handle = handle
        self.scope = None
        try:
            scope = active_scope()
            if scope is not None:
                scope.track(self)
                self.scope = scope
        except BaseException:
            self.engine.tree_delete(handle)
            self._handle = None
            raise

    @property
    def handle(self) -> int:
        if self._handle is None or not self.engine.is_live(self._handle):
            raise DisposedTreeError("Tree has already been disposed.")
        return self._handle

    @property
    def id(self) -> int:
        return self.handle

    @property
    def disposed(self) -> bool:
        return self._handle is None or not self.engine.is_live(self._handle)

    def dispose(self):
        """Releases the engine handle. Calling this more than once is a no-op."""
        if self._handle is None: return
        handle, self._handle = self._handle, None
        self.engine.tree_delete(handle)

    def detach(self) -> 'Tree':
        """Removes this tree from its owning scope; the caller must dispose it."""
        if self.scope is not None:
            self.scope.untrack(self)
            self.scope = None
        return self

    def adopt(self) -> 'Tree':
        """Hands a scope-less tree to the active scope, if there is one."""
        scope = active_scope()
        if self.scope is None and scope is not None:
            scope.track(self)
            self.scope = scope
        return self

    def remap(self, x: 'Tree', y: 'Tree', z: 'Tree') -> 'Tree':
        """Returns this shape evaluated with the coordinates replaced by x, y and z."""
        for t in (x, y, z): _check_operand(t, self.engine)
        return Tree(self.engine.tree_remap(self.handle, x.handle, y.handle, z.handle), self.engine)

    def evaluate(self, points, variables: dict = None) -> np.ndarray:
        """
        Evaluates the field at an (N, 3) array of points.

        Args:
            points: Array-like of shape (N, 3), or a single (x, y, z) point.
            variables (dict, optional): Values for free/const variable trees.
        """
        handles = {t.handle: v for t, v in (variables or {}).items()}
        return self.engine.tree_eval(self.handle, points, handles)

    def __copy__(self):
        raise TypeError("Trees own their handle and cannot be copied.")

    def __deepcopy__(self, memo):
        raise TypeError("Trees own their handle and cannot be copied.")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    def __repr__(self):
        state = 'disposed' if self.disposed else f'handle={self._handle}'
        return f"Tree({state})"


def _check_operand(value, engine: Engine = None) -> 'Tree':
    if not isinstance(value, Tree):
        raise TypeError(f"Expected a Tree, got {type(value).__name__}. Wrap numbers with constant().")
    if engine is not None and value.engine is not engine:
        raise ValueError("Cannot combine Trees from different engines.")
    return value

def scoped(func):
    """
    Runs a Tree-building helper inside a private Scope.

    Intermediate nodes are released when the helper returns; the result is
    handed to whichever scope was active when the helper was called.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with Scope() as inner:
            result = func(*args, **kwargs)
            owned = result.scope is inner
            if owned: result.detach()
        return result.adopt() if owned else result
    return wrapper
