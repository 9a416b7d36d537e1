"""Camera with view and projection matrices.

Matrices are 4x4 numpy arrays indexed ``[row, column]`` and act on column
vectors, so ``projection @ view @ point`` transforms a homogeneous point.
"""

from __future__ import annotations

import logging
import math

import numpy as np

_log = logging.getLogger(__name__)

_FLOAT32_EPSILON = float(np.finfo(np.float32).eps)
_DEFAULT_UP = (0.0, -1.0, 0.0)


def _vec3(value) -> np.ndarray:
    array = np.asarray(value, dtype=float).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"expected three components, got {array.shape[0]}")
    return array.copy()


def _normalize(vector: np.ndarray) -> np.ndarray:
    return vector / np.linalg.norm(vector)


def _view_from_basis(u, v, w, position) -> np.ndarray:
    view = np.eye(4)
    view[0, :3] = u
    view[1, :3] = v
    view[2, :3] = w
    view[0, 3] = -np.dot(u, position)
    view[1, 3] = -np.dot(v, position)
    view[2, 3] = -np.dot(w, position)
    return view


def perspective(fov_y: float, aspect_ratio: float, near: float, far: float) -> np.ndarray:
    """Right-handed perspective projection with depth mapped to [0, 1]; ``fov_y`` in radians."""
    tan_half = math.tan(fov_y / 2.0)
    result = np.zeros((4, 4))
    result[0, 0] = 1.0 / (aspect_ratio * tan_half)
    result[1, 1] = 1.0 / tan_half
    result[2, 2] = far / (near - far)
    result[3, 2] = -1.0
    result[2, 3] = -(far * near) / (far - near)
    return result


class Camera:
    """Holds position, orientation and the matrices derived from them."""

    def __init__(self) -> None:
        self.position = np.array([0.0, 0.0, -5.0])
        self.direction = np.zeros(3)
        self.fov_y = 45.0
        self.aspect_ratio = 0.0
        self.orthographic_left = 0.0
        self.orthographic_right = 0.0
        self.orthographic_up = 0.0
        self.orthographic_down = 0.0
        self.clipping_near = 0.1
        self.clipping_far = 10000.0
        self.projection = np.eye(4)
        self.view = np.eye(4)

    def set_clipping_dist(self, near: float, far: float) -> None:
        self.clipping_near = near
        self.clipping_far = far

    def set_view_direction(self, position, direction, up=_DEFAULT_UP) -> None:
        """Look from ``position`` along ``direction``."""
        position = _vec3(position)
        direction = _vec3(direction)
        self.position = position
        self.direction = direction
        w = _normalize(direction)
        u = _normalize(np.cross(w, _vec3(up)))
        v = np.cross(w, u)
        self.view = _view_from_basis(u, v, w, position)

    def set_view_target(self, position, target, up=_DEFAULT_UP) -> None:
        """Look from ``position`` towards ``target``."""
        position = _vec3(position)
        offset = _vec3(target) - position
        if not offset.any():
            raise ValueError("Provided position and target are identical")
        self.set_view_direction(position, offset, up)

    def set_view_yxz(self, position, rotation) -> None:
        """Orient by Euler angles (radians) applied in Y, X, Z order."""
        position = _vec3(position)
        rotation = _vec3(rotation)
        self.position = position
        self.direction = rotation
        c1, s1 = math.cos(rotation[1]), math.sin(rotation[1])
        c2, s2 = math.cos(rotation[0]), math.sin(rotation[0])
        c3, s3 = math.cos(rotation[2]), math.sin(rotation[2])
        u = np.array([c1 * c3 + s1 * s2 * s3, c2 * s3, c1 * s2 * s3 - c3 * s1])
        v = np.array([c3 * s1 * s2 - c1 * s3, c2 * c3, c1 * c3 * s2 + s1 * s3])
        w = np.array([c2 * s1, -s2, c1 * c2])
        self.view = _view_from_basis(u, v, w, position)

    def set_view_xyz(self, position, rotation) -> None:
        """Orient by Euler angles (radians) applied in X, Y, Z order."""
        position = _vec3(position)
        rotation = _vec3(rotation)
        self.position = position
        self.direction = rotation
        c1, s1 = math.cos(rotation[0]), math.sin(rotation[0])
        c2, s2 = math.cos(rotation[1]), math.sin(rotation[1])
        c3, s3 = math.cos(rotation[2]), math.sin(rotation[2])
        u = np.array([c2 * c3, -c2 * s3, s2])
        v = np.array([c1 * s3 + c3 * s1 * s2, c3 * c1 - s1 * s2 * s3, -c2 * s1])
        w = np.array([s1 * s3 - c1 * c3 * s2, c1 * s2 * s3 + c3 * s1, c1 * c2])
        self.view = _view_from_basis(u, v, w, position)

    def set_orthographic_projection(self, left, right, top, bottom, near, far) -> None:
        self.clipping_near = near
        self.clipping_far = far
        projection = np.eye(4)
        projection[0, 0] = 2.0 / (right - left)
        projection[1, 1] = 2.0 / (bottom - top)
        projection[2, 2] = 1.0 / (far - near)
        projection[0, 3] = -(right + left) / (right - left)
        projection[1, 3] = -(bottom + top) / (bottom - top)
        projection[2, 3] = -near / (far - near)
        self.projection = projection

    def set_perspective_projection(self, fov_y, aspect_ratio, near, far) -> None:
        """Perspective with depth in [0, 1], looking along +z; ``fov_y`` in radians."""
        if abs(aspect_ratio) <= _FLOAT32_EPSILON:
            raise ValueError("aspect ratio must be greater than epsilon")
        tan_half = math.tan(fov_y / 2.0)
        projection = np.zeros((4, 4))
        projection[0, 0] = 1.0 / (aspect_ratio * tan_half)
        projection[1, 1] = 1.0 / tan_half
        projection[2, 2] = far / (far - near)
        projection[3, 2] = 1.0
        projection[2, 3] = -(far * near) / (far - near)
        self.projection = projection
        self.fov_y = fov_y
        self.aspect_ratio = aspect_ratio
        self.clipping_near = near
        self.clipping_far = far

    def set_aspect_ratio(self, aspect_ratio: float) -> None:
        self.aspect_ratio = aspect_ratio
        self._update_perspective_projection()

    def set_fov_y(self, fov_y: float) -> None:
        self.fov_y = fov_y
        self._update_perspective_projection()

    def auto_calc_fov(self, image_size) -> None:
        """Set ``fov_y`` (degrees) so the horizontal field of view is 100 degrees."""
        width, height = (float(component) for component in image_size)
        hfov = math.radians(100.0)
        aspect_ratio = width / height
        vfov = 2.0 * math.atan(math.tan(hfov / 2.0) * (1.0 / aspect_ratio))
        _log.debug("Recalculated FOV: %s", self.fov_y)
        self.fov_y = math.degrees(vfov)

    def inverse_projection(self, aspect_ratio: float | None = None) -> np.ndarray:
        """Inverse of the current projection, or of a fresh perspective for ``aspect_ratio``."""
        if aspect_ratio is None:
            return np.linalg.inv(self.projection)
        matrix = perspective(math.radians(self.fov_y), aspect_ratio, self.clipping_near, self.clipping_far)
        return np.linalg.inv(matrix)

    def inverse_view(self) -> np.ndarray:
        return np.linalg.inv(self.view)

    def _update_orthographic_projection(self) -> None:
        self.set_orthographic_projection(
            self.orthographic_left,
            self.orthographic_right,
            self.orthographic_up,
            self.orthographic_down,
            self.clipping_near,
            self.clipping_far,
        )

    def _update_perspective_projection(self) -> None:
        self.set_perspective_projection(self.fov_y, self.aspect_ratio, self.clipping_near, self.clipping_far)