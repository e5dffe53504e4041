"""
Sphere Polyhedra Construction
=============================

Closed triangle meshes inscribed in the sphere of radius R, with outward
normals, for exercising the constraint generator.

POLYHEDRA INCLUDED:
    - Tetrahedron (V=4,  E=6,  F=4)
    - Octahedron  (V=6,  E=12, F=8)   vertices ON the 6 poles
    - Icosahedron (V=12, E=30, F=20)  no vertex on any pole
    - Icosphere   (V=10·4ⁿ+2)         icosahedron subdivided n times

All satisfy χ = V - E + F = 2 and are returned as contract mesh dicts
(see spec/structures.py).
"""

import numpy as np
from itertools import combinations
from typing import Dict, List, Tuple

from ..spec.constants import EDGE_TOL_POLY, GOLDEN_RATIO
from ..spec.structures import create_sphere_mesh


def orient_outward(vertices: np.ndarray, faces: List[List[int]]) -> List[List[int]]:
    """
    Reorder each triangle so its normal points away from the origin.

    Valid for convex polyhedra containing the origin.
    """
    ordered = []
    for face in faces:
        coords = vertices[face]
        centroid = coords.mean(axis=0)
        normal = np.cross(coords[1] - coords[0], coords[2] - coords[0])
        if np.dot(normal, centroid) < 0:
            face = [face[0], face[2], face[1]]
        ordered.append(list(face))
    return ordered


def triangles_from_edges(n_vertices: int, edges: List[Tuple[int, int]]) -> List[List[int]]:
    """All 3-cliques of the edge graph (the faces of a simplicial convex polyhedron)."""
    edge_set = set(edges)
    faces = []
    for i, j, k in combinations(range(n_vertices), 3):
        if (i, j) in edge_set and (j, k) in edge_set and (i, k) in edge_set:
            faces.append([i, j, k])
    return faces


def edges_at_min_distance(vertices: np.ndarray) -> List[Tuple[int, int]]:
    """Pairs of vertices at the minimum pairwise distance (regular polyhedra)."""
    n = len(vertices)
    dists = {(i, j): np.linalg.norm(vertices[i] - vertices[j])
             for i in range(n) for j in range(i + 1, n)}
    min_dist = min(dists.values())
    return [pair for pair, d in dists.items() if abs(d - min_dist) < EDGE_TOL_POLY * max(1.0, min_dist)]


def build_tetrahedron(radius: float = 1.0) -> dict:
    """
    Build a regular tetrahedron inscribed in the sphere of radius R.

    TOPOLOGY:
        V = 4, E = 6, F = 4, χ = 2

    Returns:
        contract mesh dict
    """
    # Alternating corners of the cube, scaled onto the sphere
    vertices = np.array([
        (1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)
    ], dtype=float)
    vertices *= radius / np.sqrt(3.0)

    faces = [list(f) for f in combinations(range(4), 3)]
    faces = orient_outward(vertices, faces)

    if len(faces) != 4:
        raise ValueError(f"Expected 4 faces, got {len(faces)}")

    return create_sphere_mesh(vertices, faces, radius, name="tetrahedron")


def build_octahedron(radius: float = 1.0) -> dict:
    """
    Build a regular octahedron with its vertices on the 6 poles ±R·e_axis.

    TOPOLOGY:
        V = 6, E = 12, F = 8 (one per octant), χ = 2
    """
    vertices = []
    for axis in range(3):
        for sign in [1, -1]:
            v = [0.0, 0.0, 0.0]
            v[axis] = sign * radius
            vertices.append(tuple(v))
    vertices = np.array(vertices, dtype=float)

    edges = edges_at_min_distance(vertices)
    faces = orient_outward(vertices, triangles_from_edges(len(vertices), edges))

    if len(edges) != 12:
        raise ValueError(f"Expected 12 edges, got {len(edges)}")
    if len(faces) != 8:
        raise ValueError(f"Expected 8 faces, got {len(faces)}")

    return create_sphere_mesh(vertices, faces, radius, name="octahedron")


def icosahedron_vertices(radius: float = 1.0) -> np.ndarray:
    """(0, ±1, ±φ) and cyclic permutations, scaled onto the sphere."""
    phi = GOLDEN_RATIO
    raw = []
    for s1 in [1, -1]:
        for s2 in [1, -1]:
            raw.append((0.0, s1 * 1.0, s2 * phi))
            raw.append((s1 * 1.0, s2 * phi, 0.0))
            raw.append((s2 * phi, 0.0, s1 * 1.0))
    vertices = np.array(raw, dtype=float)
    return vertices * (radius / np.linalg.norm(vertices[0]))


def build_icosahedron(radius: float = 1.0) -> dict:
    """
    Build a regular icosahedron inscribed in the sphere of radius R.

    No vertex lies on a coordinate axis: the largest |coordinate| is
    φ/√(1+φ²)·R ≈ 0.851·R, yet the mesh covers all 6 poles.

    TOPOLOGY:
        V = 12, E = 30, F = 20, χ = 2
    """
    vertices = icosahedron_vertices(radius)

    edges = edges_at_min_distance(vertices)
    faces = orient_outward(vertices, triangles_from_edges(len(vertices), edges))

    if len(edges) != 30:
        raise ValueError(f"Expected 30 edges, got {len(edges)}")
    if len(faces) != 20:
        raise ValueError(f"Expected 20 faces, got {len(faces)}")

    return create_sphere_mesh(vertices, faces, radius, name="icosahedron")


def subdivide_on_sphere(vertices: np.ndarray,
                        faces: np.ndarray,
                        radius: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split every triangle into 4, projecting edge midpoints onto the sphere.

    Orientation is preserved: (a, b, c) → (a, ab, ca), (b, bc, ab),
    (c, ca, bc), (ab, bc, ca).
    """
    verts = [tuple(v) for v in vertices]
    midpoint_idx: Dict[Tuple[int, int], int] = {}

    def midpoint(i: int, j: int) -> int:
        key = (min(i, j), max(i, j))
        if key not in midpoint_idx:
            m = (np.asarray(verts[i]) + np.asarray(verts[j])) / 2.0
            m = m * (radius / np.linalg.norm(m))
            midpoint_idx[key] = len(verts)
            verts.append(tuple(m))
        return midpoint_idx[key]

    new_faces = []
    for a, b, c in np.asarray(faces).tolist():
        ab, bc, ca = midpoint(a, b), midpoint(b, c), midpoint(c, a)
        new_faces += [[a, ab, ca], [b, bc, ab], [c, ca, bc], [ab, bc, ca]]

    return np.array(verts, dtype=float), np.array(new_faces, dtype=int)


def build_icosphere(subdivisions: int = 1, radius: float = 1.0) -> dict:
    """
    Build an icosphere: icosahedron subdivided `subdivisions` times.

    TOPOLOGY:
        V = 10·4ⁿ + 2, E = 30·4ⁿ, F = 20·4ⁿ, χ = 2
    """
    if subdivisions < 0:
        raise ValueError(f"subdivisions must be >= 0, got {subdivisions}")

    base = build_icosahedron(radius)
    vertices, faces = base['V'], base['T']
    for _ in range(subdivisions):
        vertices, faces = subdivide_on_sphere(vertices, faces, radius)

    expected_F = 20 * 4 ** subdivisions
    if len(faces) != expected_F:
        raise ValueError(f"Expected {expected_F} faces, got {len(faces)}")

    return create_sphere_mesh(vertices, faces, radius, name=f"icosphere_{subdivisions}")
