import copy
import pytest
import numpy as np
from frepforge import ops, Tree, DisposedTreeError

def test_constant_and_axis_variables():
    p = np.array([[1.0, 2.0, 3.0], [-4.0, 5.0, -6.0]])
    assert np.allclose(ops.constant(2.5).evaluate(p), [2.5, 2.5])
    assert np.allclose(ops.x().evaluate(p), [1.0, -4.0])
    assert np.allclose(ops.y().evaluate(p), [2.0, 5.0])
    assert np.allclose(ops.z().evaluate(p), [3.0, -6.0])

def test_unary_ops():
    p = [[0.5, 0, 0]]
    x = ops.x()
    assert np.allclose(ops.neg(x).evaluate(p), -0.5)
    assert np.allclose(ops.abs(ops.neg(x)).evaluate(p), 0.5)
    assert np.allclose(ops.square(x).evaluate(p), 0.25)
    assert np.allclose(ops.sqrt(x).evaluate(p), np.sqrt(0.5))
    assert np.allclose(ops.recip(x).evaluate(p), 2.0)
    assert np.allclose(ops.sin(x).evaluate(p), np.sin(0.5))
    assert np.allclose(ops.cos(x).evaluate(p), np.cos(0.5))
    assert np.allclose(ops.tan(x).evaluate(p), np.tan(0.5))
    assert np.allclose(ops.asin(x).evaluate(p), np.arcsin(0.5))
    assert np.allclose(ops.acos(x).evaluate(p), np.arccos(0.5))
    assert np.allclose(ops.atan(x).evaluate(p), np.arctan(0.5))
    assert np.allclose(ops.exp(x).evaluate(p), np.exp(0.5))
    assert np.allclose(ops.log(x).evaluate(p), np.log(0.5))

def test_binary_ops():
    p = [[-8.0, 3.0, 0.0]]
    x, y = ops.x(), ops.y()
    assert np.allclose(ops.add(x, y).evaluate(p), -5.0)
    assert np.allclose(ops.sub(x, y).evaluate(p), -11.0)
    assert np.allclose(ops.mul(x, y).evaluate(p), -24.0)
    assert np.allclose(ops.div(x, y).evaluate(p), -8.0 / 3.0)
    assert np.allclose(ops.min(x, y).evaluate(p), -8.0)
    assert np.allclose(ops.max(x, y).evaluate(p), 3.0)
    assert np.allclose(ops.pow(y, ops.constant(2.0)).evaluate(p), 9.0)
    assert np.allclose(ops.atan2(y, x).evaluate(p), np.arctan2(3.0, -8.0))

def test_mod_takes_the_sign_of_the_divisor():
    m = ops.mod(ops.x(), ops.constant(3.0))
    assert np.allclose(m.evaluate([[-1.0, 0, 0], [7.0, 0, 0]]), [2.0, 1.0])

def test_nth_root_keeps_sign():
    r = ops.nth_root(ops.x(), ops.constant(3.0))
    assert np.allclose(r.evaluate([[-8.0, 0, 0], [27.0, 0, 0]]), [-2.0, 3.0])

def test_compare_and_nanfill():
    c = ops.compare(ops.x(), ops.y())
    assert np.allclose(c.evaluate([[1, 2, 0], [2, 1, 0], [1, 1, 0]]), [-1.0, 1.0, 0.0])
    filled = ops.nanfill(ops.sqrt(ops.x()), ops.constant(5.0))
    assert np.allclose(filled.evaluate([[-1, 0, 0], [4, 0, 0]]), [5.0, 2.0])

def test_free_and_const_variables():
    v = ops.free_var()
    c = ops.const_var()
    f = ops.add(ops.add(ops.x(), v), c)
    assert np.allclose(f.evaluate([[1, 0, 0]]), 1.0)
    assert np.allclose(f.evaluate([[1, 0, 0]], {v: 2.0, c: 0.5}), 3.5)

def test_remap_substitutes_coordinates():
    r = ops.x().remap(ops.y(), ops.z(), ops.x())
    assert np.allclose(r.evaluate([[1, 2, 3]]), 2.0)
    nested = ops.remap(r, ops.z(), ops.x(), ops.y())
    assert np.allclose(nested.evaluate([[1, 2, 3]]), 1.0)

def test_numbers_are_not_coerced():
    with pytest.raises(TypeError, match="constant"):
        ops.add(ops.x(), 1.0)
    with pytest.raises(TypeError):
        ops.neg(2)
    with pytest.raises(TypeError):
        ops.x().remap(0.0, ops.y(), ops.z())

def test_operations_build_new_trees():
    x = ops.x()
    n = ops.neg(x)
    assert n is not x
    assert isinstance(n, Tree)
    assert n.id != x.id
    assert np.allclose(x.evaluate([[3, 0, 0]]), 3.0)

def test_equality_is_identity():
    a, b = ops.constant(1.0), ops.constant(1.0)
    assert a != b
    assert a == a

def test_dispose_is_idempotent(engine):
    t = ops.constant(1.0)
    assert engine.live_count() == 1
    t.dispose()
    t.dispose()
    assert t.disposed
    assert engine.live_count() == 0

def test_disposed_tree_cannot_be_used():
    t = ops.x()
    t.dispose()
    with pytest.raises(DisposedTreeError):
        ops.neg(t)
    with pytest.raises(DisposedTreeError):
        t.evaluate([[0, 0, 0]])
    with pytest.raises(DisposedTreeError):
        t.id

def test_parent_survives_child_disposal():
    child = ops.x()
    parent = ops.neg(child)
    child.dispose()
    assert np.allclose(parent.evaluate([[2, 0, 0]]), -2.0)

def test_tree_context_manager_disposes(engine):
    with ops.constant(1.0) as t:
        assert not t.disposed
    assert t.disposed
    assert engine.live_count() == 0

def test_trees_cannot_be_copied():
    t = ops.x()
    with pytest.raises(TypeError):
        copy.copy(t)
    with pytest.raises(TypeError):
        copy.deepcopy(t)

def test_engine_rejects_unknown_opcodes(engine):
    with pytest.raises(ValueError):
        engine.tree_unary('cbrt', engine.tree_const(1.0))
    with pytest.raises(ValueError):
        engine.tree_nonary('const')

def test_repr_reports_state():
    t = ops.x()
    assert 'handle=' in repr(t)
    t.dispose()
    assert repr(t) == "Tree(disposed)"
