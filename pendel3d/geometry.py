"""
Pointer geometry: from screen coordinates to a point on the pendulum plane.

The pendulum swings in the z = 0 plane with the pivot at the origin. A pointer
position is turned into normalized device coordinates, unprojected into a ray
through the camera, and intersected with that plane.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

PARALLEL_EPS = 1e-6
PLANE_NORMAL = np.array([0.0, 0.0, 1.0])


def client_to_ndc(client_x: float, client_y: float, width: float, height: float) -> Tuple[float, float]:
    """Pixel coordinates (origin top-left) to normalized device coordinates."""
    nx = (client_x / width) * 2.0 - 1.0
    ny = -(client_y / height) * 2.0 + 1.0
    return nx, ny


def ndc_to_client(nx: float, ny: float, width: float, height: float) -> Tuple[float, float]:
    return (nx + 1.0) * 0.5 * width, (1.0 - ny) * 0.5 * height


def _vec3(value: Sequence[float]) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass
class Camera:
    """Perspective camera, OpenGL conventions (y up, looking along -z in view space)."""

    position: np.ndarray = field(default_factory=lambda: np.array([0.0, 2.0, 5.0]))
    target: np.ndarray = field(default_factory=lambda: np.array([0.0, 2.0, 0.0]))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    fov_y_deg: float = 50.0
    aspect: float = 16.0 / 9.0
    near: float = 0.1
    far: float = 1000.0

    def __post_init__(self) -> None:
        self.position = _vec3(self.position)
        self.target = _vec3(self.target)
        self.up = _vec3(self.up)

    def view_matrix(self) -> np.ndarray:
        forward = self.target - self.position
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, self.up)
        right /= np.linalg.norm(right)
        true_up = np.cross(right, forward)

        view = np.identity(4)
        view[0, :3] = right
        view[1, :3] = true_up
        view[2, :3] = -forward
        view[:3, 3] = -view[:3, :3] @ self.position
        return view

    def projection_matrix(self) -> np.ndarray:
        f = 1.0 / math.tan(math.radians(self.fov_y_deg) / 2.0)
        near, far = self.near, self.far
        proj = np.zeros((4, 4))
        proj[0, 0] = f / self.aspect
        proj[1, 1] = f
        proj[2, 2] = (far + near) / (near - far)
        proj[2, 3] = 2.0 * far * near / (near - far)
        proj[3, 2] = -1.0
        return proj

    def ray_from_ndc(self, nx: float, ny: float) -> Tuple[np.ndarray, np.ndarray]:
        """Return (origin, unit direction) of the ray through an NDC point."""
        inv_pv = np.linalg.inv(self.projection_matrix() @ self.view_matrix())

        p_near = inv_pv @ np.array([nx, ny, -1.0, 1.0])
        p_far = inv_pv @ np.array([nx, ny, 1.0, 1.0])
        p_near /= p_near[3]
        p_far /= p_far[3]

        origin = p_near[:3]
        direction = p_far[:3] - p_near[:3]
        direction /= np.linalg.norm(direction)
        return origin, direction

    def world_to_ndc(self, point: Sequence[float]) -> Tuple[float, float]:
        clip = self.projection_matrix() @ self.view_matrix() @ np.append(_vec3(point), 1.0)
        return float(clip[0] / clip[3]), float(clip[1] / clip[3])


def intersect_z_plane(origin: np.ndarray, direction: np.ndarray) -> Optional[np.ndarray]:
    """
    Intersection of a ray with the plane z = 0, or None if the ray is
    (nearly) parallel to it.
    """
    denom = float(np.dot(direction, PLANE_NORMAL))
    if abs(denom) < PARALLEL_EPS:
        return None
    t = -float(np.dot(origin, PLANE_NORMAL)) / denom
    # infinite plane, the sign of t is not checked
    return origin + direction * t


def pointer_to_plane(nx: float, ny: float, camera: Camera) -> Optional[np.ndarray]:
    origin, direction = camera.ray_from_ndc(nx, ny)
    return intersect_z_plane(origin, direction)


def pointer_to_angle(nx: float, ny: float, camera: Camera) -> Optional[float]:
    """
    Angle of the pivot->pointer direction in the pendulum plane, measured
    with atan2(y, x). Returns None for degenerate rays and for a pointer
    exactly on the pivot.
    """
    point = pointer_to_plane(nx, ny, camera)
    if point is None:
        return None
    return angle_of_point(point)


def angle_of_point(point: Sequence[float]) -> Optional[float]:
    vec = _vec3(point)
    norm = float(np.linalg.norm(vec))
    if norm == 0.0:
        return None
    direction = vec / norm
    return math.atan2(direction[1], direction[0])


def hit_test(point: Sequence[float], center: Sequence[float], radius: float) -> bool:
    """True if ``point`` lies strictly within ``radius`` of ``center``."""
    return float(np.linalg.norm(_vec3(point) - _vec3(center))) < radius
