import struct

import numpy as np
import pytest

from gluttony.mesh import BVHNode, BVHStats, StaticMesh, Vertex


def _row_mesh(count: int) -> StaticMesh:
    vertices = []
    indices = []
    for i in range(count):
        base = len(vertices)
        x = float(i * 3)
        vertices += [
            Vertex(position=(x, 0.0, 0.0)),
            Vertex(position=(x + 1.0, 0.0, 0.0)),
            Vertex(position=(x, 1.0, 0.0)),
        ]
        indices += [base, base + 1, base + 2]
    return StaticMesh(vertices=vertices, indices=indices)


def _random_mesh(count: int, seed: int = 7) -> StaticMesh:
    rng = np.random.default_rng(seed)
    vertices = []
    indices = []
    for _ in range(count):
        centre = rng.uniform(-50, 50, size=3)
        base = len(vertices)
        for _ in range(3):
            vertices.append(Vertex(position=tuple(centre + rng.uniform(-1, 1, size=3))))
        indices += [base, base + 1, base + 2]
    return StaticMesh(vertices=vertices, indices=indices)


def _triangle_bounds(mesh: StaticMesh, tri: int):
    pts = np.array([mesh.vertices[mesh.indices[tri * 3 + k]].position for k in range(3)])
    return pts.min(axis=0), pts.max(axis=0)


def test_vertex_packs_to_32_bytes_in_field_order():
    vertex = Vertex(position=(1.0, 2.0, 3.0), uv_x=0.25, normal=(0.0, 1.0, 0.0), uv_y=0.75)
    data = vertex.to_bytes()
    assert len(data) == 32
    assert struct.unpack("<8f", data) == (1.0, 2.0, 3.0, 0.25, 0.0, 1.0, 0.0, 0.75)


def test_bvh_node_packs_to_32_bytes():
    node = BVHNode(
        aabb_min=np.array([-1.0, -2.0, -3.0]),
        left_node=5,
        tri_count=7,
        aabb_max=np.array([1.0, 2.0, 3.0]),
        first_tri_index=11,
    )
    data = node.to_bytes()
    assert len(data) == 32
    assert struct.unpack("<3fHH3fI", data) == (-1.0, -2.0, -3.0, 5, 7, 1.0, 2.0, 3.0, 11)


def test_bvh_node_rejects_counts_beyond_16_bits():
    node = BVHNode(aabb_min=np.zeros(3), aabb_max=np.ones(3), tri_count=70000)
    with pytest.raises(ValueError):
        node.to_bytes()


def test_is_leaf_depends_on_triangle_count():
    assert BVHNode(tri_count=3).is_leaf() is True
    assert BVHNode(tri_count=0).is_leaf() is False


def test_single_triangle_is_one_leaf():
    mesh = _row_mesh(1)
    mesh.build_bvh()
    assert len(mesh.bvh_nodes) == 1
    root = mesh.bvh_nodes[0]
    assert root.tri_count == 1
    assert mesh.tri_idx == [0]
    assert np.allclose(root.aabb_min, [0.0, 0.0, 0.0])
    assert np.allclose(root.aabb_max, [1.0, 1.0, 0.0])
    assert mesh.bvh_stats == BVHStats(leaf_count=1, max_triangles=1, average_triangles=1, max_depth=0)


def test_two_triangles_stay_together_below_minimum_child_size():
    mesh = _row_mesh(2)
    mesh.build_bvh(1)
    assert len(mesh.bvh_nodes) == 1
    assert mesh.bvh_nodes[0].tri_count == 2


def test_empty_mesh_builds_empty_root():
    mesh = StaticMesh()
    mesh.build_bvh()
    assert len(mesh.bvh_nodes) == 1
    assert mesh.bvh_nodes[0].tri_count == 0
    assert mesh.tri_idx == []
    assert mesh.bvh_stats.leaf_count == 0


def test_index_out_of_range_raises():
    mesh = StaticMesh(vertices=[Vertex(), Vertex()], indices=[0, 1, 2])
    with pytest.raises(IndexError):
        mesh.build_bvh()


@pytest.mark.parametrize("count,target", [(8, 2), (40, 4), (200, 16)])
def test_every_triangle_appears_once(count, target):
    mesh = _random_mesh(count)
    mesh.build_bvh(target)
    assert sorted(mesh.tri_idx) == list(range(count))
    leaves = [n for n in mesh.bvh_nodes if n.is_leaf()]
    assert sum(n.tri_count for n in leaves) == count
    covered = sorted(t for n in leaves for t in mesh.tri_idx[n.first_tri_index : n.first_tri_index + n.tri_count])
    assert covered == list(range(count))


def test_large_mesh_is_split():
    mesh = _random_mesh(200)
    mesh.build_bvh(8)
    stats = mesh.bvh_stats
    assert stats.leaf_count > 1
    assert stats.max_depth >= 1
    assert len(mesh.bvh_nodes) == 2 * stats.leaf_count - 1


def test_leaf_bounds_contain_their_triangles():
    mesh = _random_mesh(120)
    mesh.build_bvh(6)
    leaves = [node for node in mesh.bvh_nodes if node.is_leaf()]
    assert len(leaves) > 1
    violations = []
    checked = 0
    for node in leaves:
        for tri in mesh.tri_idx[node.first_tri_index : node.first_tri_index + node.tri_count]:
            lo, hi = _triangle_bounds(mesh, tri)
            checked += 1
            if not (np.all(node.aabb_min <= lo + 1e-9) and np.all(node.aabb_max >= hi - 1e-9)):
                violations.append(tri)
    assert checked == 120
    assert violations == []


def test_children_lie_within_parent_bounds():
    mesh = _random_mesh(150)
    mesh.build_bvh(4)
    for node in mesh.bvh_nodes:
        if node.is_leaf():
            continue
        for child in (mesh.bvh_nodes[node.left_node], mesh.bvh_nodes[node.left_node + 1]):
            assert np.all(child.aabb_min >= node.aabb_min - 1e-9)
            assert np.all(child.aabb_max <= node.aabb_max + 1e-9)
            assert child.tri_count == 0 or child.tri_count >= 2


def test_stats_agree_with_nodes():
    mesh = _random_mesh(100, seed=3)
    mesh.build_bvh(5)
    stats = mesh.compute_bvh_stats()
    leaves = [n for n in mesh.bvh_nodes if n.is_leaf()]
    assert stats.leaf_count == len(leaves)
    assert stats.max_triangles == max(n.tri_count for n in leaves)
    assert stats.average_triangles == 100 // len(leaves)
    assert stats is mesh.bvh_stats


def test_rebuild_is_deterministic():
    mesh = _random_mesh(80, seed=11)
    mesh.build_bvh(4)
    first = [n.to_bytes() for n in mesh.bvh_nodes]
    mesh.build_bvh(4)
    assert [n.to_bytes() for n in mesh.bvh_nodes] == first


def test_default_transform_is_identity():
    mesh = StaticMesh()
    assert np.array_equal(mesh.transform, np.eye(4))