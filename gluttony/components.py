"""Entity components."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


def _identity() -> np.ndarray:
    return np.eye(4)


@dataclass
class TransformComponent:
    """A 4x4 model transform (row/column indexed, acting on column vectors)."""

    transform: np.ndarray = field(default_factory=_identity)

    def __post_init__(self) -> None:
        matrix = np.array(self.transform, dtype=float)
        if matrix.shape != (4, 4):
            raise ValueError(f"transform must be 4x4, got shape {matrix.shape}")
        self.transform = matrix

    def __array__(self, dtype=None, copy=None):
        return self.transform if dtype is None else self.transform.astype(dtype)

    def translated(self, offset) -> TransformComponent:
        """Return a new component translated by ``offset`` in local space."""
        vector = np.asarray(offset, dtype=float).reshape(-1)
        if vector.shape != (3,):
            raise ValueError("offset must have three components")
        translation = np.eye(4)
        translation[:3, 3] = vector
        return TransformComponent(self.transform @ translation)