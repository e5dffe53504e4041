"""Constants, error types, constraint data model and mesh contract."""

from .constants import (
    AXES,
    DEFAULT_FEASTOL,
    FEASTOL_FLOOR,
    VMIN_FEASTOL_FACTOR,
    PIP_DIGITS,
    SENSE_GE,
    SENSE_LE,
    SENSE_EQ,
    KIND_VOLUME,
    KIND_EDGE,
    KIND_RADIUS,
    COMPLEX_SURFACE,
    EPS_ZERO,
    EPS_CLOSE,
)
from .errors import ConfigurationError, InvariantError
from .structures import (
    Variable,
    Term,
    Constraint,
    VariableBound,
    vertex_variables,
    permutation_sign,
    rotate_to_pattern,
    mesh_edges,
    validate_sphere_mesh,
    create_sphere_mesh,
)
