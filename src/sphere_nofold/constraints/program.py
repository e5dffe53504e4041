"""
Fold-free Spherical Embedding Program
=====================================

Builds the full constraint set for mapping a closed, outward-oriented
triangle mesh onto the sphere of radius R without fold-overs.

PIPELINE:
    1. Validate triangles, parameters, partition (all-or-nothing)
    2. Bounding box → bounds on every free coordinate
    3. Volume constraints  (triangle order)
    4. Edge constraints    (sorted edge order)
    5. Radius constraints  (vertex order)

The constraint list is append-only; ids c1..cM are assigned by the
serializer from list order, so the output is reproducible.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..geometry.bounds_box import estimate_bounding_box
from ..spec.constants import AXES, KINDS
from ..spec.structures import Constraint, VariableBound, Variable, mesh_edges
from .edges import build_edge_constraints
from .parameters import resolve_parameters, resolve_triangles
from .partition import resolve_partition
from .radius import build_radius_constraints
from .tetrahedra import build_volume_constraints

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NofoldProgram:
    """Variable bounds and constraints of one fold-free embedding problem."""
    bounds: Tuple[VariableBound, ...]
    constraints: Tuple[Constraint, ...]
    box: Tuple[np.ndarray, np.ndarray]

    @property
    def n_constraints(self) -> int:
        return len(self.constraints)

    def count(self, kind: str) -> int:
        """Number of constraints of one kind ('volume', 'edge', 'radius')."""
        return sum(1 for c in self.constraints if c.kind == kind)

    def violations(self, coords: np.ndarray) -> np.ndarray:
        """Per-constraint violation of a full (N, 3) configuration."""
        coords = np.asarray(coords, dtype=float)
        return np.array([c.violation(coords) for c in self.constraints])

    def max_violation(self, coords: np.ndarray) -> float:
        """Largest constraint or bound violation of a configuration (0 if feasible)."""
        coords = np.asarray(coords, dtype=float)
        worst = 0.0
        if self.constraints:
            worst = float(self.violations(coords).max())
        for bound in self.bounds:
            value = coords[bound.variable.vertex, bound.variable.axis_index]
            worst = max(worst, bound.lower - value, value - bound.upper)
        return worst


def build_variable_bounds(free_indices: np.ndarray,
                          lower: np.ndarray,
                          upper: np.ndarray) -> Tuple[VariableBound, ...]:
    """Same box for every free vertex, x then y then z per vertex."""
    bounds = []
    for v in free_indices.tolist():
        for n, axis in enumerate(AXES):
            bounds.append(VariableBound(Variable(axis, v), float(lower[n]), float(upper[n])))
    return tuple(bounds)


def build_nofold_program(triangles,
                         radius,
                         vmin,
                         vmax,
                         lmax=None,
                         is_free=None,
                         coords=None,
                         feastol: Optional[float] = None) -> NofoldProgram:
    """
    Derive bounds and constraints for a fold-free spherical embedding.

    Args:
        triangles: (Ntri, 3) vertex indices, 0-based, outward oriented.
            N = triangles.max() + 1.
        radius: sphere radius R
        vmin, vmax: tetrahedron volume budget, scalar or one per triangle.
            vmin >= 10*feastol is required; vmax may be np.inf.
        lmax: maximum edge length (default 2R)
        is_free: (N,) bool, True for unknown vertices (default all free)
        coords: (N, 3) coordinates. Required if any vertex is fixed.
            Also used for the bounding box; without it the box is [-R, R]³.
        feastol: solver feasibility tolerance (default 1e-6, min 1e-9)

    Returns:
        NofoldProgram

    Raises:
        ConfigurationError: invalid input (nothing is produced)
        InvariantError: internal inconsistency (algorithm bug)
    """
    tri = resolve_triangles(triangles)
    n_vertices = int(tri.max()) + 1
    params = resolve_parameters(len(tri), radius, vmin, vmax, lmax=lmax, feastol=feastol)
    partition = resolve_partition(n_vertices, is_free=is_free, coords=coords)

    box = estimate_bounding_box(partition.coords, params.radius)

    if partition.n_free == 0:
        logger.info("All vertices are fixed, no bounds or constraints")
        return NofoldProgram(bounds=(), constraints=(), box=box)

    bounds = build_variable_bounds(partition.free_indices, *box)

    constraints = []
    constraints += build_volume_constraints(tri, partition, params)
    constraints += build_edge_constraints(mesh_edges(tri), partition, params)
    constraints += build_radius_constraints(partition, params.radius)

    program = NofoldProgram(bounds=bounds, constraints=tuple(constraints), box=box)
    logger.info(
        f"Nofold program: {partition.n_free}/{n_vertices} free vertices, "
        f"{len(bounds)} bounds, {program.n_constraints} constraints "
        f"({', '.join(f'{kind}={program.count(kind)}' for kind in KINDS)})"
    )
    return program


def build_nofold_program_from_mesh(mesh: dict, vmin, vmax, **kwargs) -> NofoldProgram:
    """
    build_nofold_program() for a contract mesh dict.

    Uses mesh['T'] and mesh['radius']; mesh['V'] is passed as coords
    unless coords is given explicitly.
    """
    kwargs.setdefault('coords', mesh['V'])
    return build_nofold_program(mesh['T'], mesh['radius'], vmin, vmax, **kwargs)
