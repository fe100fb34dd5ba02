"""Rigid-body frames, rotation conversions and plane fitting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from .messages import Point

_GIMBAL_EPSILON = 1e-12


@dataclass(eq=False)
class Frame:
    """A rotation plus a translation."""

    rotation: np.ndarray = field(default_factory=lambda: np.eye(3))
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.rotation = np.array(self.rotation, dtype=float).reshape(3, 3)
        self.position = np.array(self.position, dtype=float).reshape(3)

    def __mul__(self, other):
        """Compose with another frame, or transform a 3-vector."""
        if isinstance(other, Frame):
            return Frame(
                self.rotation @ other.rotation,
                self.rotation @ other.position + self.position,
            )
        vector = np.asarray(other, dtype=float).reshape(3)
        return self.rotation @ vector + self.position

    def __repr__(self) -> str:
        return f"Frame(rotation={self.rotation.tolist()}, position={self.position.tolist()})"


def rotation_from_rpy(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Rotation matrix for roll, pitch, yaw about the fixed X, Y, Z axes."""
    return Rotation.from_euler("xyz", [roll, pitch, yaw]).as_matrix()


def rpy_from_rotation(rotation) -> tuple[float, float, float]:
    """Roll, pitch, yaw about fixed axes; roll is zero at gimbal lock."""
    m = np.asarray(rotation, dtype=float)
    pitch = math.atan2(-m[2, 0], math.hypot(m[0, 0], m[1, 0]))
    if abs(pitch) > math.pi / 2.0 - _GIMBAL_EPSILON:
        yaw = math.atan2(-m[0, 1], m[1, 1])
        roll = 0.0
    else:
        roll = math.atan2(m[2, 1], m[2, 2])
        yaw = math.atan2(m[1, 0], m[0, 0])
    return roll, pitch, yaw


def rotation_from_axis_magnitude(x: float, y: float, z: float) -> np.ndarray:
    """Rotation matrix for an axis whose length is the rotation angle."""
    return Rotation.from_rotvec([x, y, z]).as_matrix()


def axis_magnitude_from_rotation(rotation) -> tuple[float, float, float]:
    """Axis scaled by rotation angle for the given rotation matrix."""
    vec = Rotation.from_matrix(np.asarray(rotation, dtype=float)).as_rotvec()
    return float(vec[0]), float(vec[1]), float(vec[2])


def get_matrix(points: Sequence[Point]) -> np.ndarray:
    """Stack points as the columns of a 3xN matrix."""
    if not points:
        return np.zeros((3, 0))
    return np.array([[p.x, p.y, p.z] for p in points], dtype=float).T


def get_centroid(points) -> np.ndarray:
    """Mean of the columns of a 3xN matrix."""
    return np.asarray(points, dtype=float).mean(axis=1)


def get_plane(points) -> tuple[np.ndarray, float]:
    """Fit a plane ``n . p + d = 0`` to a 3xN matrix; ``d`` is non-negative."""
    matrix = np.array(points, dtype=float)
    centroid = get_centroid(matrix)
    centered = matrix - centroid[:, np.newaxis]
    u, _, _ = np.linalg.svd(centered, full_matrices=False)
    normal = u[:, -1].copy()
    d = -float(normal @ centroid)
    if d < 0:
        d = -d
        normal = -normal
    return normal, d


def _as_points(values: Iterable[Sequence[float]]) -> list[Point]:
    return [Point(*v) for v in values]