"""
Tetrahedron Volume Constraints
==============================

Every triangle (a, b, c) with at least one free vertex gets

    vmin + tol·max(1,|vmin|)  <=  det[a; b; c] / 6  <=  vmax - tol·max(1,|vmax|)

i.e. the signed volume of the tetrahedron (origin, a, b, c) may not cross
zero, so the triangle cannot fold over on the sphere.

DETERMINANT EXPANSION:
    det[a; b; c] = Σ_σ sign(σ) · x_σ(0) · y_σ(1) · z_σ(2)

    over the 6 permutations σ of the three vertices (σ(k) is the vertex
    that supplies axis k). Fixed coordinates fold into the coefficients:

    AllFree  3 free   cubic:     6 terms  ±(1/6) x_. y_. z_.
    TwoFree  2 free   quadratic: 6 terms  ±(p_fixed/6) · (free coord)(free coord)
    OneFree  1 free   linear:    3 terms  (p_a × p_b)/6 · (x_k, y_k, z_k)

RIGHT-HAND SIDE:
    The solver accepts f(x) >= b when f(x) >= b - tol·max(1,|b|). Shifting
    the bound by the same amount makes the TRUE bound hold even at the
    solver's feasibility boundary. Infinite bounds emit no constraint.
"""

import logging
from collections import Counter
from itertools import permutations
from typing import List

import numpy as np

from ..spec.constants import AXES, KIND_VOLUME, SENSE_GE, SENSE_LE
from ..spec.errors import InvariantError
from ..spec.structures import Constraint, Term, Variable, permutation_sign
from .parameters import NofoldParameters
from .partition import (
    AllFixed,
    AllFree,
    OneFree,
    TriangleCase,
    TwoFree,
    VertexPartition,
    classify_triangle,
)

logger = logging.getLogger(__name__)


def linear_volume_terms(p_a: np.ndarray, p_b: np.ndarray, k: int) -> List[Term]:
    """
    Volume of (p_a, p_b, v_k) with p_a, p_b fixed: ((p_a × p_b) · v_k) / 6.
    """
    coef = np.cross(p_a, p_b) / 6.0
    return [Term(float(coef[axis]), (Variable(AXES[axis], k),)) for axis in range(3)]


def quadratic_volume_terms(p_i: np.ndarray, j: int, k: int) -> List[Term]:
    """
    Volume of (p_i, v_j, v_k) with p_i fixed: (p_i · (v_j × v_k)) / 6.

        x_i (y_j z_k - y_k z_j) + y_i (x_k z_j - x_j z_k) + z_i (x_j y_k - x_k y_j)
    """
    xi, yi, zi = (float(c) for c in p_i)
    x, y, z = AXES
    return [
        Term(-zi / 6.0, (Variable(x, k), Variable(y, j))),
        Term(zi / 6.0, (Variable(x, j), Variable(y, k))),
        Term(yi / 6.0, (Variable(x, k), Variable(z, j))),
        Term(-xi / 6.0, (Variable(y, k), Variable(z, j))),
        Term(-yi / 6.0, (Variable(x, j), Variable(z, k))),
        Term(xi / 6.0, (Variable(y, j), Variable(z, k))),
    ]


def cubic_volume_terms(i: int, j: int, k: int) -> List[Term]:
    """
    Volume of (v_i, v_j, v_k), all free: det[v_i; v_j; v_k] / 6.

    One term per permutation σ: sign(σ)/6 · x_σ(0) y_σ(1) z_σ(2).
    """
    tri = (i, j, k)
    terms = []
    for perm in permutations(range(3)):
        coef = permutation_sign(perm) / 6.0
        variables = tuple(Variable(AXES[axis], tri[slot]) for axis, slot in enumerate(perm))
        terms.append(Term(coef, variables))
    return terms


def volume_terms(case: TriangleCase, partition: VertexPartition) -> List[Term]:
    """Monomials of the signed volume for one triangle case."""
    if isinstance(case, OneFree):
        return linear_volume_terms(
            partition.fixed_position(case.fixed_a),
            partition.fixed_position(case.fixed_b),
            case.free,
        )
    if isinstance(case, TwoFree):
        return quadratic_volume_terms(
            partition.fixed_position(case.fixed), case.free_a, case.free_b
        )
    if isinstance(case, AllFree):
        return cubic_volume_terms(case.a, case.b, case.c)
    if isinstance(case, AllFixed):
        raise InvariantError(
            f"Triangle {case.triangle} has 3 fixed vertices and should have been skipped"
        )
    raise InvariantError(f"Unknown triangle case {case!r}")


def build_volume_constraints(triangles: np.ndarray,
                             partition: VertexPartition,
                             params: NofoldParameters) -> List[Constraint]:
    """
    Lower/upper signed-volume constraints for every triangle with a free vertex.

    Args:
        triangles: (Ntri, 3) vertex indices, outward oriented
        partition: VertexPartition
        params: NofoldParameters (vmin, vmax, feastol)

    Returns:
        Constraints in triangle order; for each triangle the >= constraint
        (if vmin > -inf) precedes the <= constraint (if vmax < inf).
    """
    constraints = []
    case_counts = Counter()

    n_free_per_tri = partition.is_free[triangles].sum(axis=1)

    for t in np.flatnonzero(n_free_per_tri > 0):
        t = int(t)
        case = classify_triangle(t, triangles[t], partition)
        case_counts[type(case).__name__] += 1
        terms = tuple(volume_terms(case, partition))

        if params.vmin[t] > -np.inf:
            constraints.append(Constraint(terms, SENSE_GE, params.lower_rhs(t), KIND_VOLUME, t))
        if params.vmax[t] < np.inf:
            constraints.append(Constraint(terms, SENSE_LE, params.upper_rhs(t), KIND_VOLUME, t))

    logger.debug(f"Volume constraints: {len(constraints)} from triangle cases {dict(case_counts)}")
    return constraints
