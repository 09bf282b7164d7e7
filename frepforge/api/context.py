import threading
from contextlib import contextmanager


class ScopeStack:
    """
    Holds the currently active Scope.

    Scopes form a stack through the predecessor link each one records when it
    is activated. A stack is meant to be driven from a single thread.
    """
    def __init__(self):
        self._active = None

    @property
    def active(self) -> 'Scope':
        return self._active

    @active.setter
    def active(self, scope: 'Scope'):
        if scope is None: self._active = None
        else: self.activate(scope)

    def activate(self, scope: 'Scope') -> 'Scope':
        if scope.disposed: raise RuntimeError("Cannot activate a disposed scope.")
        if scope is self._active: return scope
        scope.prior = self._active
        scope.stack = self
        scope.activated = True
        self._active = scope
        return scope

    def _restore(self, scope: 'Scope'):
        # Restoring a predecessor must not overwrite that scope's own link.
        self._active = scope


class Scope:
    """
    Tracks the Trees created while it is active and disposes them with itself.

    Use as a context manager:

        with Scope():
            shape = difference(sphere(1.0), box((-2, -2, 0), (2, 2, 2)))
            mesh = render_mesh(shape, region, 0.05)

    or activate and dispose it explicitly.
    """
    def __init__(self):
        self.stack = None
        self.prior = None
        self.trees = []
        self.activated = False
        self.disposed = False

    def activate(self) -> 'Scope':
        """Makes this scope the active one, remembering the current one as its predecessor."""
        return get_stack().activate(self)

    def track(self, tree):
        self.trees.append(tree)

    def untrack(self, tree):
        """Stops tracking `tree`, so disposing the scope leaves it alive."""
        for i, tracked in enumerate(self.trees):
            if tracked is tree:
                del self.trees[i]
                if tree.scope is self: tree.scope = None
                return

    def dispose(self):
        """Disposes every tracked tree and reactivates the predecessor."""
        if self.disposed: return
        self.disposed = True
        trees, self.trees = self.trees, []
        for tree in trees:
            if tree is not None: tree.dispose()
        if self.activated:
            prior, seen = self.prior, {id(self)}
            while prior is not None and prior.disposed:
                if id(prior) in seen: prior = None; break
                seen.add(id(prior))
                prior = prior.prior
            self.stack._restore(prior)

    def __contains__(self, tree):
        return any(t is tree for t in self.trees)

    def __enter__(self):
        return self.activate()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False


_local = threading.local()

def get_stack() -> ScopeStack:
    """Returns this thread's current scope stack, creating one on first use."""
    stack = getattr(_local, 'stack', None)
    if stack is None:
        stack = _local.stack = ScopeStack()
    return stack

def active_scope() -> Scope:
    return get_stack().active

@contextmanager
def use_stack(stack: ScopeStack):
    """Temporarily installs `stack` as this thread's scope stack."""
    previous = getattr(_local, 'stack', None)
    _local.stack = stack
    try:
        yield stack
    finally:
        _local.stack = previous
