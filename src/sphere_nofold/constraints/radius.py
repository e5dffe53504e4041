"""
Radius Constraints
==================

One equality per free vertex keeps it on the sphere:

    x_i² + y_i² + z_i² = R²

Exact equality: no feasibility-tolerance shift, the solver's own equality
tolerance decides.
"""

from typing import List

from ..spec.constants import AXES, KIND_RADIUS, SENSE_EQ
from ..spec.structures import Constraint, Term, Variable
from .partition import VertexPartition


def build_radius_constraints(partition: VertexPartition, radius: float) -> List[Constraint]:
    """x² + y² + z² = R² for every free vertex, in vertex order."""
    rhs = float(radius) ** 2
    constraints = []
    for v in partition.free_indices.tolist():
        terms = tuple(Term(1.0, (Variable(axis, v), Variable(axis, v))) for axis in AXES)
        constraints.append(Constraint(terms, SENSE_EQ, rhs, KIND_RADIUS, v))
    return constraints
