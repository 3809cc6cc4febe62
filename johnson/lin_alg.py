"""
Vector, plane and angle helpers shared by the polyhedron core.

Vectors are plain numpy arrays of shape (3,). Every comparison uses the
fixed tolerance PRECISION.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import acos, cos, sin
from typing import Callable, Sequence

import numpy as np

from .errors import StructuralError

PRECISION_DIGITS = 3
PRECISION = 10 ** -PRECISION_DIGITS

Transform = Callable[[np.ndarray], np.ndarray]


def vec(point) -> np.ndarray:
    """Convert a point (any 3-sequence) into a float vector."""
    return np.asarray(point, dtype=float).reshape(3)


def get_midpoint(v1: np.ndarray, v2: np.ndarray) -> np.ndarray:
    return (v1 + v2) * 0.5


def is_inverse(v1: np.ndarray, v2: np.ndarray) -> bool:
    return bool(np.allclose(-v1, v2, atol=PRECISION, rtol=0.0))


def get_centroid(vectors: Sequence[np.ndarray]) -> np.ndarray:
    if len(vectors) == 0:
        raise StructuralError("Cannot take the centroid of no vectors")
    return np.mean(np.asarray(vectors, dtype=float), axis=0)


def _unit(v: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(v))
    if norm < 1e-12:
        raise StructuralError("Cannot normalize a zero-length vector")
    return v / norm


@dataclass(frozen=True)
class Plane:
    """Plane through `point` with unit `normal`."""

    point: np.ndarray
    normal: np.ndarray

    def signed_distance(self, p) -> float:
        return float(np.dot(vec(p) - self.point, self.normal))

    def distance_to_point(self, p) -> float:
        return abs(self.signed_distance(p))


@dataclass(frozen=True)
class Ray:
    origin: np.ndarray
    direction: np.ndarray


def get_plane(points: Sequence[np.ndarray]) -> Plane:
    """Get the plane containing the first three of the given points."""
    if len(points) < 3:
        raise StructuralError("Need at least three points for a plane")
    p0, p1, p2 = (vec(p) for p in points[:3])
    normal = np.cross(p1 - p0, p2 - p0)
    if np.linalg.norm(normal) < 1e-12:
        raise StructuralError("The first three points are colinear")
    return Plane(point=p0, normal=_unit(normal))


def is_planar(points: Sequence[np.ndarray]) -> bool:
    """Return whether the set of points lie on a plane."""
    plane = get_plane(points)
    return all(plane.distance_to_point(p) < PRECISION for p in points)


def get_normal(vertices: Sequence[np.ndarray]) -> np.ndarray:
    """Get the normal of a polygon given its ordered vertices."""
    v0, v1, v2 = (vec(v) for v in vertices[:3])
    return _unit(np.cross(v0 - v1, v1 - v2))


def get_normal_ray(vertices: Sequence[np.ndarray]) -> Ray:
    return Ray(origin=get_centroid(vertices), direction=get_normal(vertices))


def angle_between(v1: np.ndarray, v2: np.ndarray, normal: np.ndarray | None = None) -> float:
    """
    Angle between two vectors in [0, pi].

    With `normal` the result is signed: positive when the rotation from v1
    to v2 is counter-clockwise around `normal`.
    """
    u1, u2 = _unit(vec(v1)), _unit(vec(v2))
    angle = acos(float(np.clip(np.dot(u1, u2), -1.0, 1.0)))
    if normal is not None and float(np.dot(np.cross(u1, u2), vec(normal))) < 0:
        return -angle
    return angle


def with_origin(origin: np.ndarray, t: Transform) -> Transform:
    return lambda v: t(v - origin) + origin


def rotation_about_axis(axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotation matrix for `angle` radians counter-clockwise about `axis` (Rodrigues)."""
    k = _unit(vec(axis))
    kx = np.array([
        [0.0, -k[2], k[1]],
        [k[2], 0.0, -k[0]],
        [-k[1], k[0], 0.0],
    ])
    return np.eye(3) + sin(angle) * kx + (1 - cos(angle)) * (kx @ kx)


def rigid_transform(source: Sequence[np.ndarray], target: Sequence[np.ndarray]) -> Transform:
    """
    Best-fit proper rotation plus translation taking source[i] onto target[i].

    Kabsch fit over the point correspondences; reflections are excluded so
    that face orientation is carried over.
    """
    src = np.asarray(source, dtype=float)
    dst = np.asarray(target, dtype=float)
    if src.shape != dst.shape or len(src) < 3:
        raise StructuralError("Need at least three matching point pairs to align")
    src_center = src.mean(axis=0)
    dst_center = dst.mean(axis=0)
    h = (src - src_center).T @ (dst - dst_center)
    u, _, vt = np.linalg.svd(h)
    d = np.sign(np.linalg.det(vt.T @ u.T)) or 1.0
    rotation = vt.T @ np.diag([1.0, 1.0, d]) @ u.T
    return lambda v: rotation @ (vec(v) - src_center) + dst_center


__all__ = [
    "PRECISION",
    "PRECISION_DIGITS",
    "Plane",
    "Ray",
    "angle_between",
    "get_centroid",
    "get_midpoint",
    "get_normal",
    "get_normal_ray",
    "get_plane",
    "is_inverse",
    "is_planar",
    "rigid_transform",
    "rotation_about_axis",
    "vec",
    "with_origin",
]
