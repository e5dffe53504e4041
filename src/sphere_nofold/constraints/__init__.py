"""
Constraint generators - depend on spec and geometry layers.

Layering:
    constraints → geometry → spec
    formats → spec
"""

from .parameters import NofoldParameters, resolve_parameters, resolve_triangles
from .partition import (
    VertexPartition,
    resolve_partition,
    classify_triangle,
    AllFixed,
    OneFree,
    TwoFree,
    AllFree,
)
from .tetrahedra import volume_terms, build_volume_constraints
from .edges import edge_terms, build_edge_constraints
from .radius import build_radius_constraints
from .program import NofoldProgram, build_nofold_program, build_nofold_program_from_mesh
