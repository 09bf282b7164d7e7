import struct
import sys
import time
import numpy as np
from .mesh import Mesh

def _format_float(v) -> str:
    return repr(float(v))

def create_stl(mesh: Mesh, name: str = "") -> str:
    """
    Returns the mesh as ASCII STL text with CRLF line endings.

    Facet normals are always written as `0.0 0.0 0.0`; readers recompute
    them from the vertex winding.
    """
    lines = [f"solid {name}"]
    for tri in mesh.triangles:
        lines.append("facet normal 0.0 0.0 0.0")
        lines.append("outer loop")
        for index in tri:
            x, y, z = mesh.vertices[index]
            lines.append(f"vertex {_format_float(x)} {_format_float(y)} {_format_float(z)}")
        lines.append("endloop")
        lines.append("endfacet")
    lines.append("endsolid")
    return "\r\n".join(lines) + "\r\n"

def _write_ascii_stl(path, mesh: Mesh, name: str):
    with open(path, 'w', newline='') as fp: fp.write(create_stl(mesh, name))

def _write_binary_stl(path, mesh: Mesh, name: str):
    points = np.array(mesh.vertices[mesh.triangles], dtype='float32').reshape(-1, 3, 3)
    dtype = np.dtype([('normal', ('<f', 3)), ('points', ('<f', (3, 3))), ('attr', '<H')])
    a = np.zeros(len(points), dtype=dtype); a['points'] = points
    header = name.encode('ascii', 'replace')[:80].ljust(80, b'\x00')
    with open(path, 'wb') as fp: fp.write(header); fp.write(struct.pack('<I', len(points))); fp.write(a.tobytes())

def save_stl(mesh: Mesh, path, name: str = "", binary: bool = False, verbose: bool = True) -> bool:
    """
    Writes a mesh to an STL file.

    Write failures are reported on stderr and return False; the mesh itself
    is left untouched either way.
    """
    start = time.time()
    if verbose: print(f"INFO: Saving {len(mesh.triangles)} triangles to '{path}'...", file=sys.stderr)
    try:
        if binary: _write_binary_stl(path, mesh, name)
        else: _write_ascii_stl(path, mesh, name)
    except OSError as e:
        print(f"ERROR: Could not write STL to '{path}': {e}", file=sys.stderr)
        return False
    if verbose: print(f"SUCCESS: Saved {len(mesh.triangles)} triangles in {time.time()-start:.2f}s.", file=sys.stderr)
    return True
