import pytest
import numpy as np
from frepforge import Mesh, recalculate_normals, split_normals, box, render_mesh

def test_mesh_rejects_out_of_range_indices():
    with pytest.raises(ValueError, match="existing vertices"):
        Mesh([[0, 0, 0], [1, 0, 0], [0, 1, 0]], [[0, 1, 3]])

def test_empty_mesh():
    mesh = Mesh.empty()
    assert mesh.is_empty
    assert mesh.vertices.shape == (0, 3)
    assert mesh.triangles.shape == (0, 3)

def test_recalculate_normals_averages_adjacent_faces(folded_mesh):
    normals = recalculate_normals(folded_mesh.vertices, folded_mesh.triangles)
    diagonal = np.array([0, 1, 1]) / np.sqrt(2)
    assert np.allclose(normals[0], diagonal)
    assert np.allclose(normals[1], diagonal)
    assert np.allclose(normals[2], [0, 0, 1])
    assert np.allclose(normals[3], [0, 1, 0])

def test_recalculate_normals_leaves_unused_vertices_zero():
    normals = recalculate_normals([[0, 0, 0], [1, 0, 0], [0, 1, 0], [5, 5, 5]], [[0, 1, 2]])
    assert np.allclose(normals[3], 0.0)

def test_no_split_at_180_degrees(folded_mesh):
    result = split_normals(folded_mesh, 180.0)
    assert np.array_equal(result.vertices, folded_mesh.vertices)
    assert np.array_equal(result.triangles, folded_mesh.triangles)
    result = split_normals(folded_mesh, 270.0)
    assert len(result.vertices) == 4

def test_split_duplicates_shared_corners_in_index_order(folded_mesh):
    result = split_normals(folded_mesh, 30.0)
    assert len(result.vertices) == 8
    assert result.triangles.tolist() == [[4, 5, 2], [6, 7, 3]]
    assert np.allclose(result.vertices[4:], [[0, 0, 0], [1, 0, 0], [1, 0, 0], [0, 0, 0]])
    assert np.allclose(result.normals[4], [0, 0, 1])
    assert np.allclose(result.normals[6], [0, 1, 0])
    # The input mesh is not modified.
    assert folded_mesh.triangles.tolist() == [[0, 1, 2], [1, 0, 3]]

def test_split_below_threshold_keeps_vertices_shared(folded_mesh):
    result = split_normals(folded_mesh, 60.0)
    assert len(result.vertices) == 4
    assert np.array_equal(result.triangles, folded_mesh.triangles)

def test_zero_threshold_splits_every_deviating_corner(folded_mesh):
    result = split_normals(folded_mesh, 0.0)
    assert len(result.vertices) == 8

def test_zero_threshold_leaves_flat_surfaces_alone():
    flat = Mesh([[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0]], [[0, 1, 2], [0, 2, 3]])
    result = split_normals(flat, 0.0)
    assert len(result.vertices) == 4
    assert np.allclose(result.normals, [0, 0, 1])

def test_split_uses_supplied_normals(folded_mesh):
    folded_mesh.normals = np.array([[0, 0, 1], [0, 0, 1], [0, 0, 1], [0, 0, 1]], dtype=float)
    result = split_normals(folded_mesh, 10.0)
    # Only the corners of the second face disagree with +Z.
    assert len(result.vertices) == 7
    assert result.triangles.tolist() == [[0, 1, 2], [4, 5, 6]]

def test_chunked_split_matches_single_pass():
    shape = box((-1, -1, -1), (1, 1, 1))
    mesh = render_mesh(shape, ((-1.55,) * 3, (1.55,) * 3), resolution=0.2)
    single = split_normals(mesh, 5.0)
    chunked = split_normals(mesh, 5.0, chunk_size=7, max_workers=4)
    assert np.array_equal(single.triangles, chunked.triangles)
    assert np.allclose(single.vertices, chunked.vertices)
    assert len(single.vertices) > len(mesh.vertices)

def test_split_empty_mesh():
    result = split_normals(Mesh.empty(), 10.0)
    assert result.is_empty
