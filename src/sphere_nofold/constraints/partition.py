"""
Vertex Partition and Triangle Cases
===================================

FREE / FIXED:
    A free vertex is an unknown of the program (variables x_i, y_i, z_i).
    A fixed vertex has known constant coordinates, read from `coords`.
    Free rows of `coords` are never read by the constraint generators.

TRIANGLE CASES (selected once per triangle):
    AllFixed  0 free   no constraint (filtered out before reaching here)
    OneFree   1 free   rotated so the free vertex is LAST:  (fixed, fixed, free)
    TwoFree   2 free   rotated so the fixed vertex is FIRST: (fixed, free, free)
    AllFree   3 free   kept in input order

ORIENTATION:
    Only cyclic rotations are applied. They are even permutations, so
    det[a; b; c] and hence the sign of the volume constraint is unchanged.
    A swap (odd permutation) would flip it. classify_triangle() checks the
    parity of the permutation it applied and raises if it is odd.
"""

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from ..spec.errors import ConfigurationError, InvariantError
from ..spec.structures import permutation_sign, rotate_to_pattern


# =============================================================================
# Partition
# =============================================================================

@dataclass
class VertexPartition:
    """Free/fixed flag per vertex plus the coordinates table."""
    is_free: np.ndarray            # (N,) bool
    coords: Optional[np.ndarray]   # (N, 3) or None when all vertices are free

    @property
    def n_vertices(self) -> int:
        return len(self.is_free)

    @property
    def free_indices(self) -> np.ndarray:
        return np.flatnonzero(self.is_free)

    @property
    def n_free(self) -> int:
        return int(np.count_nonzero(self.is_free))

    def fixed_position(self, vertex: int) -> np.ndarray:
        """Constant coordinates of a fixed vertex."""
        if self.is_free[vertex]:
            raise InvariantError(f"Vertex {vertex} is free, its position is an unknown")
        return self.coords[vertex]


def resolve_partition(n_vertices: int, is_free=None, coords=None) -> VertexPartition:
    """
    Validate the free/fixed flags and the coordinates table.

    Args:
        n_vertices: N, number of mesh vertices
        is_free: (N,) boolean vector, default all True
        coords: (N, 3) coordinates. Required if any vertex is fixed;
                rows of free vertices are ignored by the generators.

    Returns:
        VertexPartition

    FAIL-FAST:
        ConfigurationError for a wrong-length or non-boolean flag vector,
        missing coordinates when a vertex is fixed, wrong shape, or NaN.
    """
    if is_free is None:
        flags = np.ones(n_vertices, dtype=bool)
    else:
        flags = np.asarray(is_free)
        if flags.ndim != 1:
            raise ConfigurationError(f"is_free must be a vector, got shape {flags.shape}")
        if flags.dtype != np.bool_:
            raise ConfigurationError(f"is_free must be boolean, got dtype {flags.dtype}")
        if len(flags) != n_vertices:
            raise ConfigurationError(
                f"is_free must have one element per mesh vertex ({n_vertices}), got {len(flags)}"
            )
        flags = flags.copy()

    if coords is None:
        if not np.all(flags):
            fixed = int(np.flatnonzero(~flags)[0])
            raise ConfigurationError(
                f"Vertex {fixed} is fixed, so coordinates for all vertices must be provided"
            )
        return VertexPartition(is_free=flags, coords=None)

    table = np.asarray(coords, dtype=float)
    if table.shape != (n_vertices, 3):
        raise ConfigurationError(
            f"coords must have shape ({n_vertices}, 3), got {table.shape}"
        )
    nan_rows = np.flatnonzero(np.any(np.isnan(table), axis=1))
    if len(nan_rows) > 0:
        raise ConfigurationError(f"NaN coordinates for vertex {nan_rows[0]}")

    return VertexPartition(is_free=flags, coords=table.copy())


# =============================================================================
# Triangle cases
# =============================================================================

@dataclass(frozen=True)
class AllFixed:
    triangle: int


@dataclass(frozen=True)
class OneFree:
    triangle: int
    fixed_a: int
    fixed_b: int
    free: int


@dataclass(frozen=True)
class TwoFree:
    triangle: int
    fixed: int
    free_a: int
    free_b: int


@dataclass(frozen=True)
class AllFree:
    triangle: int
    a: int
    b: int
    c: int


TriangleCase = Union[AllFixed, OneFree, TwoFree, AllFree]

# Canonical free-flag patterns after rotation
ONE_FREE_PATTERN = (False, False, True)
TWO_FREE_PATTERN = (False, True, True)


def _canonical(t: int, tri, flags, pattern):
    try:
        rotated, perm = rotate_to_pattern(tri, flags, pattern)
    except InvariantError as exc:
        raise InvariantError(f"Triangle {t}: {exc}") from exc
    if permutation_sign(perm) != +1:
        raise InvariantError(
            f"Triangle {t}: canonical rotation {perm} is an odd permutation "
            f"and would flip the volume sign"
        )
    return rotated


def classify_triangle(t: int, tri, partition: VertexPartition) -> TriangleCase:
    """
    Select the case of triangle t from the free flags of its vertices.

    Args:
        t: triangle index (for error messages)
        tri: its 3 vertex indices, in mesh orientation
        partition: VertexPartition

    Returns:
        AllFixed, OneFree, TwoFree or AllFree with canonically rotated indices
    """
    tri = tuple(int(v) for v in tri)
    flags = tuple(bool(partition.is_free[v]) for v in tri)
    n_free = sum(flags)

    if n_free == 0:
        return AllFixed(t)
    if n_free == 1:
        i, j, k = _canonical(t, tri, flags, ONE_FREE_PATTERN)
        return OneFree(t, fixed_a=i, fixed_b=j, free=k)
    if n_free == 2:
        i, j, k = _canonical(t, tri, flags, TWO_FREE_PATTERN)
        return TwoFree(t, fixed=i, free_a=j, free_b=k)
    return AllFree(t, *tri)
