"""
Bounding Box of the Spherical Region Spanned by a Mesh
======================================================

The box bounds every free coordinate of the program.

PROBLEM:
    Fitting the box to the vertices alone chops off spherical caps. A mesh
    with vertices around the North Pole, but none on it, still covers the
    pole, so z must be allowed to reach +R.

METHOD:
    1. Convex hull of the vertices plus the sphere centre (origin).
    2. Drop hull facets incident to the centre, or whose plane passes
       through it. They come from the added interior point, not from the
       spherical shell.
    3. For each cardinal ray ±X, ±Y, ±Z from the origin, test the
       remaining facets (two-sided ray-triangle test, t >= 0).
       Hit  → that side of the box is ±R.
       Miss → that side is the raw vertex min / max.

    If the centre is inside the hull of the vertices (mesh wraps the whole
    sphere) no facet is dropped and every ray hits: box = [-R, R]³.

FALLBACK:
    No coordinates, or a degenerate point set that Qhull cannot hull
    (fewer than 4 non-coplanar points) → full sphere box [-R, R]³.

ALTERNATIVE (not implemented):
    A signed winding-number test of each cardinal direction against the
    mesh's solid angle gives the same answer for closed meshes.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from ..spec.constants import PLANE_TOL
from .primitives import ray_triangle_intersect

logger = logging.getLogger(__name__)


# Cardinal rays: (axis, sign)
CARDINAL_RAYS = [(axis, sign) for axis in range(3) for sign in (+1, -1)]


def sphere_box(radius: float) -> Tuple[np.ndarray, np.ndarray]:
    """Box [-R, R]³ enclosing the whole sphere."""
    return np.full(3, -float(radius)), np.full(3, float(radius))


def shell_facets(coords: np.ndarray, radius: float) -> Optional[np.ndarray]:
    """
    Hull facets of coords + origin that do not pass through the origin.

    The origin is either a hull vertex (facets incident to it are dropped)
    or lies inside a flat hull facet, e.g. a hemisphere whose rim is a
    great circle. Qhull then keeps it as a coplanar point, not a vertex,
    so facets are also dropped when their plane is within
    PLANE_TOL·R of the origin.

    Args:
        coords: (N, 3) vertex coordinates
        radius: sphere radius R, scale of the plane-offset test

    Returns:
        (M, 3) indices into coords, or None if Qhull fails.
    """
    n = len(coords)
    points = np.vstack([coords, np.zeros((1, 3))])
    try:
        hull = ConvexHull(points)
    except QhullError as exc:
        logger.warning(f"Convex hull failed on {n} vertices, using full sphere box: {exc}")
        return None

    simplices = hull.simplices
    keep = ~np.any(simplices == n, axis=1)
    # equations rows are (unit normal, offset); |offset| = plane distance to origin
    keep &= np.abs(hull.equations[:, 3]) > PLANE_TOL * radius
    return simplices[keep]


def ray_hits_facets(coords: np.ndarray, facets: np.ndarray, direction: np.ndarray) -> bool:
    """Does the ray from the origin along `direction` hit any facet?"""
    if len(facets) == 0:
        return False
    hit, _ = ray_triangle_intersect(
        np.zeros(3), direction,
        coords[facets[:, 0]], coords[facets[:, 1]], coords[facets[:, 2]],
    )
    return bool(np.any(hit))


def estimate_bounding_box(coords: Optional[np.ndarray],
                          radius: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Axis-aligned box enclosing the part of the sphere covered by the mesh.

    Args:
        coords: (N, 3) vertex coordinates, or None when unknown
        radius: sphere radius R

    Returns:
        (lower, upper): two (3,) arrays, lower <= upper on every axis
    """
    if coords is None:
        logger.debug("No vertex coordinates, using full sphere box")
        return sphere_box(radius)

    coords = np.asarray(coords, dtype=float)
    facets = shell_facets(coords, radius)
    if facets is None:
        return sphere_box(radius)

    lower = coords.min(axis=0).copy()
    upper = coords.max(axis=0).copy()

    for axis, sign in CARDINAL_RAYS:
        direction = np.zeros(3)
        direction[axis] = sign
        if ray_hits_facets(coords, facets, direction):
            if sign > 0:
                upper[axis] = radius
            else:
                lower[axis] = -radius
            logger.debug(f"Ray {'+' if sign > 0 else '-'}{'XYZ'[axis]} hits the mesh, "
                         f"box extends to the pole")

    return lower, upper
