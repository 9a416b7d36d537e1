"""Static triangle meshes and their bounding volume hierarchy."""

from __future__ import annotations

import math
import struct
import time
from dataclasses import dataclass, field

import numpy as np

_VERTEX_LAYOUT = struct.Struct("<3ff3ff")
_NODE_LAYOUT = struct.Struct("<3fHH3fI")

_BINS = 8
_DEGENERATE_AXIS = 1e-5
_MIN_TRIS_PER_CHILD = 2
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


def _inf_min() -> np.ndarray:
    return np.full(3, math.inf)


def _inf_max() -> np.ndarray:
    return np.full(3, -math.inf)


def _surface_metric(minimum: np.ndarray, maximum: np.ndarray) -> float:
    extent = maximum - minimum
    return float(extent[0] * extent[1] + extent[1] * extent[2] + extent[2] * extent[0])


@dataclass
class Vertex:
    """A mesh vertex; serialised as 32 tightly packed bytes."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    uv_x: float = 0.0
    normal: tuple[float, float, float] = (0.0, 0.0, 0.0)
    uv_y: float = 0.0

    def to_bytes(self) -> bytes:
        """Pack as position, uv_x, normal, uv_y (little-endian float32)."""
        return _VERTEX_LAYOUT.pack(*self.position, self.uv_x, *self.normal, self.uv_y)


@dataclass
class BVHNode:
    """One node of the hierarchy; the right child sits at ``left_node + 1``."""

    aabb_min: np.ndarray = field(default_factory=_inf_min)
    left_node: int = 0
    tri_count: int = 0
    aabb_max: np.ndarray = field(default_factory=_inf_max)
    first_tri_index: int = 0

    def is_leaf(self) -> bool:
        return self.tri_count > 0

    def to_bytes(self) -> bytes:
        """Pack into the 32-byte layout shared with the shader."""
        if not 0 <= self.left_node <= _U16_MAX:
            raise ValueError(f"left_node {self.left_node} does not fit in 16 bits")
        if not 0 <= self.tri_count <= _U16_MAX:
            raise ValueError(f"tri_count {self.tri_count} does not fit in 16 bits")
        if not 0 <= self.first_tri_index <= _U32_MAX:
            raise ValueError(f"first_tri_index {self.first_tri_index} does not fit in 32 bits")
        return _NODE_LAYOUT.pack(
            *(float(x) for x in self.aabb_min),
            self.left_node,
            self.tri_count,
            *(float(x) for x in self.aabb_max),
            self.first_tri_index,
        )


@dataclass
class BVHStats:
    """Shape of a built hierarchy."""

    leaf_count: int = 0
    max_triangles: int = 0
    average_triangles: int = 0
    max_depth: int = 0


class _BVHBuilder:
    """Binned surface-area-heuristic builder over precomputed triangle data."""

    def __init__(self, tri_min, tri_max, centroids, target_tri_count: int) -> None:
        self.tri_min = tri_min
        self.tri_max = tri_max
        self.centroids = centroids
        self.target = target_tri_count
        self.tri_idx = list(range(len(centroids)))
        self.nodes = [BVHNode(first_tri_index=0, tri_count=len(centroids))]

    def build(self) -> None:
        self._update_bounds(0)
        self._subdivide(0)

    def _segment(self, node: BVHNode) -> list[int]:
        return self.tri_idx[node.first_tri_index : node.first_tri_index + node.tri_count]

    def _update_bounds(self, index: int) -> None:
        node = self.nodes[index]
        segment = self._segment(node)
        if segment:
            node.aabb_min = self.tri_min[segment].min(axis=0)
            node.aabb_max = self.tri_max[segment].max(axis=0)
        else:
            node.aabb_min = _inf_min()
            node.aabb_max = _inf_max()

    def _best_binned_split(self, node: BVHNode) -> tuple[int, float]:
        best_cost = math.inf
        best_axis = -1
        best_split = 0.0
        size = node.aabb_max - node.aabb_min
        selection = np.asarray(self._segment(node), dtype=np.int64)

        for axis in range(3):
            if size[axis] < _DEGENERATE_AXIS:
                continue
            scale = _BINS / size[axis]
            offsets = (self.centroids[selection, axis] - node.aabb_min[axis]) * scale
            bin_idx = np.clip(offsets.astype(np.int64), 0, _BINS - 1)

            counts = np.bincount(bin_idx, minlength=_BINS)
            bin_min = np.full((_BINS, 3), math.inf)
            bin_max = np.full((_BINS, 3), -math.inf)
            np.minimum.at(bin_min, bin_idx, self.tri_min[selection])
            np.maximum.at(bin_max, bin_idx, self.tri_max[selection])

            for split in range(1, _BINS):
                left_count = int(counts[:split].sum())
                right_count = int(counts[split:].sum())
                if left_count == 0 or right_count == 0:
                    continue
                left_area = _surface_metric(bin_min[:split].min(axis=0), bin_max[:split].max(axis=0))
                right_area = _surface_metric(bin_min[split:].min(axis=0), bin_max[split:].max(axis=0))
                cost = left_count * left_area + right_count * right_area
                if cost < best_cost:
                    best_cost = cost
                    best_axis = axis
                    best_split = float(node.aabb_min[axis] + split * (size[axis] / _BINS))
        return best_axis, best_split

    def _median_split(self, node: BVHNode) -> tuple[int, float]:
        size = node.aabb_max - node.aabb_min
        if size[0] > size[1]:
            axis = 0 if size[0] > size[2] else 2
        else:
            axis = 1 if size[1] > size[2] else 2
        ordered = sorted(self._segment(node), key=lambda tri: self.centroids[tri, axis])
        self.tri_idx[node.first_tri_index : node.first_tri_index + node.tri_count] = ordered
        return axis, float(self.centroids[ordered[node.tri_count // 2], axis])

    def _subdivide(self, index: int) -> None:
        node = self.nodes[index]
        if node.tri_count <= self.target:
            return

        axis, split = self._best_binned_split(node)
        if axis == -1:
            axis, split = self._median_split(node)

        first = node.first_tri_index
        segment = self._segment(node)
        left = [tri for tri in segment if self.centroids[tri, axis] < split]
        right = [tri for tri in segment if not self.centroids[tri, axis] < split]
        self.tri_idx[first : first + node.tri_count] = left + right

        left_count, right_count = len(left), len(right)
        if left_count < _MIN_TRIS_PER_CHILD or right_count < _MIN_TRIS_PER_CHILD:
            return

        left_index = len(self.nodes)
        node.left_node = left_index
        node.tri_count = 0
        self.nodes.append(BVHNode(first_tri_index=first, tri_count=left_count))
        self.nodes.append(BVHNode(first_tri_index=first + left_count, tri_count=right_count))
        self._update_bounds(left_index)
        self._update_bounds(left_index + 1)

        if left_count > self.target:
            self._subdivide(left_index)
        if right_count > self.target:
            self._subdivide(left_index + 1)


@dataclass
class StaticMesh:
    """Indexed triangle mesh with an optional bounding volume hierarchy."""

    vertices: list[Vertex] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    transform: np.ndarray = field(default_factory=lambda: np.eye(4))
    bvh_nodes: list[BVHNode] = field(default_factory=list)
    tri_idx: list[int] = field(default_factory=list)
    bvh_viz_max_depth: int = 3
    bvh_show_leaves: bool = True
    bvh_viz_color: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 1.0)
    bvh_stats: BVHStats = field(default_factory=BVHStats)
    bvh_build_time: float = 0.0

    def build_bvh(self, target_tri_count: int = 32) -> None:
        """Build the hierarchy so leaves hold about ``target_tri_count`` triangles."""
        start = time.perf_counter()
        tri_count = len(self.indices) // 3
        positions = np.asarray([v.position for v in self.vertices], dtype=float).reshape(-1, 3)
        tris = np.asarray(self.indices[: tri_count * 3], dtype=np.int64).reshape(-1, 3)
        if tris.size and (tris.min() < 0 or tris.max() >= len(positions)):
            raise IndexError("mesh index refers to a missing vertex")

        corners = positions[tris]
        builder = _BVHBuilder(
            corners.min(axis=1),
            corners.max(axis=1),
            corners.mean(axis=1),
            target_tri_count,
        )
        builder.build()
        self.bvh_nodes = builder.nodes
        self.tri_idx = builder.tri_idx
        self.bvh_build_time = (time.perf_counter() - start) * 1e6
        self.compute_bvh_stats()

    def compute_bvh_stats(self) -> BVHStats:
        """Recount leaves, triangle counts and depth of the current hierarchy."""
        leaves = [node for node in self.bvh_nodes if node.is_leaf()]
        leaf_count = len(leaves)
        max_triangles = max((node.tri_count for node in leaves), default=0)
        average = sum(node.tri_count for node in leaves) // leaf_count if leaf_count else 0

        def depth(index: int) -> int:
            if index >= len(self.bvh_nodes):
                return 0
            node = self.bvh_nodes[index]
            if node.is_leaf():
                return 0
            return 1 + max(depth(node.left_node), depth(node.left_node + 1))

        self.bvh_stats = BVHStats(leaf_count, max_triangles, average, depth(0))
        return self.bvh_stats