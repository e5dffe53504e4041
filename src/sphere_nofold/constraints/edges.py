"""
Edge-Length Constraints
=======================

Each mesh edge (a, b) touching a free vertex is bounded by lmax:

    (xa-xb)² + (ya-yb)² + (za-zb)² <= lmax²

On the sphere xa²+ya²+za² = xb²+yb²+zb² = R², so this expands to

    2R² - 2(xa xb + ya yb + za zb) <= lmax²
    -xa xb - ya yb - za zb <= lmax²/2 - R²

which is bilinear instead of a full quadratic.

CASES:
    both free  → 3 products of unknowns, coefficient -1
    one free   → linear, coefficients = -(fixed endpoint's coordinates)
    both fixed → skipped before reaching the emitter
"""

import logging
from typing import List

import numpy as np

from ..spec.constants import AXES, KIND_EDGE, SENSE_LE
from ..spec.errors import InvariantError
from ..spec.structures import Constraint, Term, Variable
from .parameters import NofoldParameters
from .partition import VertexPartition

logger = logging.getLogger(__name__)


def edge_terms(a: int, b: int, partition: VertexPartition) -> List[Term]:
    """Monomials of -(p_a · p_b) for edge (a, b)."""
    free_a = bool(partition.is_free[a])
    free_b = bool(partition.is_free[b])

    if free_a and free_b:
        return [Term(-1.0, (Variable(axis, a), Variable(axis, b))) for axis in AXES]
    if free_a:
        p = partition.fixed_position(b)
        return [Term(-float(p[n]), (Variable(axis, a),)) for n, axis in enumerate(AXES)]
    if free_b:
        p = partition.fixed_position(a)
        return [Term(-float(p[n]), (Variable(axis, b),)) for n, axis in enumerate(AXES)]
    raise InvariantError(f"Edge ({a}, {b}) has two fixed vertices and doesn't need a constraint")


def build_edge_constraints(edges: np.ndarray,
                           partition: VertexPartition,
                           params: NofoldParameters) -> List[Constraint]:
    """
    Edge-length constraints for edges with at least one free endpoint.

    Args:
        edges: (E, 2) unique undirected edges, from mesh_edges()
        partition: VertexPartition
        params: NofoldParameters (radius, lmax)

    Returns:
        Constraints in edge order; `element` is the row index in `edges`.
    """
    rhs = params.edge_rhs
    constraints = []

    for e_idx, (a, b) in enumerate(edges.tolist()):
        if not (partition.is_free[a] or partition.is_free[b]):
            continue
        terms = tuple(edge_terms(a, b, partition))
        constraints.append(Constraint(terms, SENSE_LE, rhs, KIND_EDGE, e_idx))

    logger.debug(f"Edge constraints: {len(constraints)} of {len(edges)} edges")
    return constraints
