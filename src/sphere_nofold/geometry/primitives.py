"""
Geometry Primitives
===================

Vector operations on 3D points and the ray-triangle intersection test
used by the bounding-box estimator.

SIGNED VOLUME:
    The tetrahedron spanned by triangle (a, b, c) and the sphere centre
    (origin) has signed volume

        vol(a, b, c) = det[a; b; c] / 6 = (a × b) · c / 6

    Positive for a triangle whose normal points away from the origin.
    Cyclic shifts of (a, b, c) leave it unchanged, swaps flip its sign.

RAY-TRIANGLE TEST (Möller–Trumbore):
    Ray o + t·d, t >= 0, against triangle (v0, v1, v2).
    Two-sided: hits are reported whatever the triangle's orientation.
    Boundary inclusive: hits on edges and vertices count.
"""

import numpy as np
from typing import Tuple

from ..spec.constants import EPS_ZERO


def cross3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Cross product of 3-vectors (or row-wise for (M, 3) arrays)."""
    return np.cross(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def dot3(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Dot product of 3-vectors (or row-wise for (M, 3) arrays)."""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.sum(a * b, axis=-1)


def triple_product(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> np.ndarray:
    """(a × b) · c = det[a; b; c]."""
    return dot3(cross3(a, b), c)


def tetrahedron_volume(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    """Signed volume of the tetrahedron (origin, a, b, c)."""
    return float(triple_product(a, b, c)) / 6.0


def signed_volumes(coords: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """
    Signed volume of the origin-tetrahedron of every triangle.

    Args:
        coords: (N, 3) vertex coordinates
        triangles: (Ntri, 3) vertex indices

    Returns:
        (Ntri,) signed volumes; all positive for an outward-oriented
        fold-free mesh around the origin.
    """
    coords = np.asarray(coords, dtype=float)
    triangles = np.asarray(triangles, dtype=int)
    a = coords[triangles[:, 0]]
    b = coords[triangles[:, 1]]
    c = coords[triangles[:, 2]]
    return triple_product(a, b, c) / 6.0


def chord_length_squared(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Squared Euclidean distance |a - b|²."""
    d = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return dot3(d, d)


def ray_triangle_intersect(origin: np.ndarray,
                           direction: np.ndarray,
                           v0: np.ndarray,
                           v1: np.ndarray,
                           v2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Möller–Trumbore ray-triangle intersection, vectorized over triangles.

    Args:
        origin: (3,) ray origin
        direction: (3,) ray direction (need not be unit)
        v0, v1, v2: (M, 3) triangle corners (or (3,) for one triangle)

    Returns:
        hit: (M,) bool, True where the ray meets the triangle at t >= 0
        t: (M,) ray parameter of the hit (np.inf where no hit)

    NOTE:
        A ray parallel to the triangle's plane is a miss. The test is
        relative, |det| <= EPS_ZERO·|d|·|edge1|·|edge2|, so it does not
        depend on the size of the sphere.
    """
    origin = np.asarray(origin, dtype=float)
    direction = np.asarray(direction, dtype=float)
    v0 = np.atleast_2d(np.asarray(v0, dtype=float))
    v1 = np.atleast_2d(np.asarray(v1, dtype=float))
    v2 = np.atleast_2d(np.asarray(v2, dtype=float))

    edge1 = v1 - v0
    edge2 = v2 - v0
    h = np.cross(direction, edge2)
    det = dot3(edge1, h)

    # Two-sided: accept either sign of det
    scale = np.linalg.norm(direction) * np.linalg.norm(edge1, axis=-1) * np.linalg.norm(edge2, axis=-1)
    not_parallel = np.abs(det) > EPS_ZERO * scale
    inv_det = np.zeros_like(det)
    inv_det[not_parallel] = 1.0 / det[not_parallel]

    s = origin - v0
    u = inv_det * dot3(s, h)
    q = np.cross(s, edge1)
    v = inv_det * dot3(direction, q)
    t = inv_det * dot3(edge2, q)

    hit = (not_parallel
           & (u >= 0.0) & (u <= 1.0)
           & (v >= 0.0) & (u + v <= 1.0)
           & (t >= 0.0))

    return hit, np.where(hit, t, np.inf)
