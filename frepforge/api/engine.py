import threading
from collections import namedtuple
import numpy as np
from skimage import measure

# --- Opcodes ---

NONARY_OPS = ('const', 'var_x', 'var_y', 'var_z', 'var_free', 'const_var')
UNARY_OPS = ('neg', 'abs', 'sqrt', 'square', 'recip', 'sin', 'cos', 'tan', 'asin', 'acos', 'atan', 'exp', 'log')
BINARY_OPS = ('add', 'sub', 'mul', 'div', 'mod', 'min', 'max', 'pow', 'nth_root', 'atan2', 'nanfill', 'compare')

def _nth_root(a, b):
    root = np.abs(a) ** (1.0 / b)
    return np.where(a < 0, -root, root)

def _compare(a, b):
    return np.where(a < b, -1.0, np.where(a > b, 1.0, 0.0))

_UNARY_FUNCS = {
    'neg': np.negative, 'abs': np.abs, 'sqrt': np.sqrt, 'square': np.square,
    'recip': np.reciprocal, 'sin': np.sin, 'cos': np.cos, 'tan': np.tan,
    'asin': np.arcsin, 'acos': np.arccos, 'atan': np.arctan, 'exp': np.exp, 'log': np.log,
}

_BINARY_FUNCS = {
    'add': np.add, 'sub': np.subtract, 'mul': np.multiply, 'div': np.divide,
    'mod': np.mod, 'min': np.minimum, 'max': np.maximum, 'pow': np.power,
    'nth_root': _nth_root, 'atan2': np.arctan2,
    'nanfill': lambda a, b: np.where(np.isnan(a), b, a), 'compare': _compare,
}

# Internal expression record. `args` holds child _Expr records, never handles,
# so a parent stays valid after its children's handles are deleted.
_Expr = namedtuple('_Expr', ['op', 'value', 'args'])


class Engine:
    """
    Handle-based store and evaluator for implicit-surface expressions.

    Callers only ever see integer handles. Every `tree_*` constructor returns
    a new handle which stays alive until `tree_delete` is called on it.
    """
    def __init__(self):
        self._trees = {}
        self._next_handle = 1
        self._lock = threading.Lock()

    def _store(self, expr: _Expr) -> int:
        with self._lock:
            handle = self._next_handle
            self._next_handle += 1
            self._trees[handle] = expr
        return handle

    def lookup(self, handle: int) -> _Expr:
        try:
            return self._trees[handle]
        except KeyError:
            raise KeyError(f"Unknown or deleted tree handle: {handle}") from None

    def is_live(self, handle: int) -> bool:
        return handle in self._trees

    def live_count(self) -> int:
        """Number of handles created and not yet deleted."""
        return len(self._trees)

    # --- Construction ---

    def tree_const(self, value: float) -> int:
        return self._store(_Expr('const', float(value), ()))

    def tree_nonary(self, op: str) -> int:
        if op not in NONARY_OPS or op == 'const':
            raise ValueError(f"Unknown nonary opcode: {op}")
        return self._store(_Expr(op, None, ()))

    def tree_unary(self, op: str, a: int) -> int:
        if op not in UNARY_OPS: raise ValueError(f"Unknown unary opcode: {op}")
        return self._store(_Expr(op, None, (self.lookup(a),)))

    def tree_binary(self, op: str, a: int, b: int) -> int:
        if op not in BINARY_OPS: raise ValueError(f"Unknown binary opcode: {op}")
        return self._store(_Expr(op, None, (self.lookup(a), self.lookup(b))))

    def tree_remap(self, base: int, x: int, y: int, z: int) -> int:
        return self._store(_Expr('remap', None, (self.lookup(base), self.lookup(x), self.lookup(y), self.lookup(z))))

    def tree_delete(self, handle: int):
        with self._lock:
            self._trees.pop(handle, None)

    # --- Evaluation ---

    def tree_eval(self, handle: int, points, variables=None) -> np.ndarray:
        """
        Evaluates a tree at an (N, 3) array of points.

        `variables` maps the handle of a free or const variable to its value;
        unlisted variables evaluate to 0.0.
        """
        p = np.asarray(points, dtype=float).reshape(-1, 3)
        return self._eval(self.lookup(handle), p[:, 0], p[:, 1], p[:, 2], variables)

    def _eval(self, root: _Expr, x, y, z, variables=None) -> np.ndarray:
        var_values = {id(self.lookup(h)): v for h, v in (variables or {}).items()}
        shape = np.shape(x)

        def evaluate_frame(expr, fx, fy, fz):
            cache = {}

            def ev(e):
                key = id(e)
                if key in cache: return cache[key]
                op = e.op
                if op == 'const': out = np.full(shape, e.value)
                elif op == 'var_x': out = fx
                elif op == 'var_y': out = fy
                elif op == 'var_z': out = fz
                elif op in ('var_free', 'const_var'): out = np.full(shape, float(var_values.get(key, 0.0)))
                elif op == 'remap':
                    base, rx, ry, rz = e.args
                    out = evaluate_frame(base, ev(rx), ev(ry), ev(rz))
                elif op in _UNARY_FUNCS: out = _UNARY_FUNCS[op](ev(e.args[0]))
                else: out = _BINARY_FUNCS[op](ev(e.args[0]), ev(e.args[1]))
                cache[key] = out
                return out

            return ev(expr)

        with np.errstate(all='ignore'):
            return np.asarray(evaluate_frame(root, x, y, z), dtype=float)

    # --- Polygonization ---

    def render_mesh(self, handle: int, region, resolution: float):
        """
        Polygonizes the zero level set of a tree inside `region`.

        `region` is ((min_x, min_y, min_z), (max_x, max_y, max_z)); `resolution`
        is the largest allowed cell edge. Returns (vertices, triangles), or None
        when the surface does not cross the region.
        """
        if resolution <= 0: raise ValueError("Resolution must be positive.")
        expr = self.lookup(handle)
        min_c, max_c = np.array(region[0], dtype=float), np.array(region[1], dtype=float)
        if np.any(max_c <= min_c): raise ValueError(f"Invalid region: {region}")

        counts = np.maximum(2, np.ceil((max_c - min_c) / resolution).astype(int) + 1)
        axes = [np.linspace(min_c[i], max_c[i], counts[i]) for i in range(3)]
        spacing = tuple((max_c - min_c) / (counts - 1))
        gx, gy, gz = np.meshgrid(*axes, indexing='ij')
        volume = self._eval(expr, gx, gy, gz)
        volume = np.where(np.isnan(volume), np.inf, volume)
        volume = np.clip(volume, -1e9, 1e9)

        if not (volume.min() <= 0.0 <= volume.max()) or volume.min() == volume.max():
            return None
        try:
            verts, faces, _, _ = measure.marching_cubes(volume, level=0.0, spacing=spacing)
        except (ValueError, RuntimeError):
            return None
        if len(faces) == 0: return None
        return verts + min_c, faces.astype(np.int64)


_default_engine = Engine()

def get_engine() -> Engine:
    """Returns the process-wide default engine."""
    return _default_engine

def set_engine(engine: Engine) -> Engine:
    """Replaces the default engine and returns the previous one."""
    global _default_engine
    previous, _default_engine = _default_engine, engine
    return previous
