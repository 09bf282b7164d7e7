from .api.engine import Engine, get_engine, set_engine
from .api.context import Scope, ScopeStack, get_stack, active_scope, use_stack
from .api.core import Tree, DisposedTreeError, scoped
from .api import ops
from .api.primitives import circle, sphere, ellipsoid, box, cylinder, extrude, shell
from .api.compositors import union, intersection, inverse, difference, blend, blend_all
from .api.transforms import (
    move, reflect_x, reflect_y, reflect_z, reflect_xy, reflect_yz, reflect_xz,
    symmetric_x, symmetric_y, symmetric_z, transform, scale, rotate
)
from .api.mesh import Mesh, recalculate_normals, split_normals
from .api.render import render_mesh, RenderJob, MeshRenderer
from .api.io import create_stl, save_stl
