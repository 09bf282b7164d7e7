import pytest
import numpy as np
from frepforge import Engine, set_engine, ScopeStack, use_stack

@pytest.fixture(autouse=True)
def engine():
    """A fresh engine and scope stack for every test, so leak counts start at zero."""
    fresh = Engine()
    previous = set_engine(fresh)
    with use_stack(ScopeStack()):
        yield fresh
    set_engine(previous)

@pytest.fixture
def points():
    rng = np.random.default_rng(1234)
    return rng.uniform(-2.0, 2.0, size=(200, 3))

@pytest.fixture
def folded_mesh():
    """Two unit right triangles sharing the edge (0,0,0)-(1,0,0), folded at 90 degrees."""
    from frepforge import Mesh
    vertices = [[0, 0, 0], [1, 0, 0], [0, 1, 0], [0, 0, 1]]
    triangles = [[0, 1, 2], [1, 0, 3]]
    return Mesh(vertices, triangles)
