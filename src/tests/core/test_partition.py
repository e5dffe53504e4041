"""
Vertex Partition and Canonical Rotation Tests
=============================================

Free/fixed validation, the four triangle cases, and the orientation
argument: cyclic rotations are even permutations (volume sign kept),
swaps are odd (volume sign flipped).

Run: python -m pytest tests/core/test_partition.py -v
"""

import numpy as np
import pytest

from sphere_nofold.builders import build_tetrahedron
from sphere_nofold.constraints.partition import (
    AllFixed,
    AllFree,
    OneFree,
    TwoFree,
    classify_triangle,
    resolve_partition,
)
from sphere_nofold.constraints.tetrahedra import volume_terms
from sphere_nofold.geometry.primitives import tetrahedron_volume
from sphere_nofold.spec.errors import ConfigurationError, InvariantError
from sphere_nofold.spec.structures import permutation_sign, rotate_to_pattern


def evaluate(terms, coords):
    return sum(term.evaluate(coords) for term in terms)


# =============================================================================
# P1: resolve_partition
# =============================================================================

def test_default_all_free():
    """No flags: every vertex is free, no coordinates needed."""
    part = resolve_partition(5)
    assert part.n_free == 5
    assert part.free_indices.tolist() == [0, 1, 2, 3, 4]
    assert part.coords is None


def test_fixed_vertex_requires_coords():
    """A fixed vertex without a coordinates table is rejected."""
    with pytest.raises(ConfigurationError, match="Vertex 1 is fixed"):
        resolve_partition(3, is_free=[True, False, True])


def test_flags_wrong_length():
    with pytest.raises(ConfigurationError, match="one element per mesh vertex"):
        resolve_partition(4, is_free=[True, True, True])


def test_flags_not_boolean():
    """0/1 integers are not accepted as flags."""
    with pytest.raises(ConfigurationError, match="boolean"):
        resolve_partition(3, is_free=[1, 0, 1], coords=np.zeros((3, 3)))


def test_flags_not_vector():
    with pytest.raises(ConfigurationError, match="vector"):
        resolve_partition(4, is_free=np.ones((2, 2), dtype=bool))


def test_coords_wrong_shape():
    with pytest.raises(ConfigurationError, match=r"shape \(3, 3\)"):
        resolve_partition(3, is_free=[True, False, True], coords=np.zeros((3, 2)))


def test_coords_nan_rejected():
    """NaN anywhere in the table is rejected, naming the vertex."""
    coords = np.zeros((3, 3))
    coords[2, 1] = np.nan
    with pytest.raises(ConfigurationError, match="vertex 2"):
        resolve_partition(3, is_free=[True, False, True], coords=coords)


def test_fixed_position_of_free_vertex_raises():
    """Free positions are unknowns: reading one is an internal error."""
    part = resolve_partition(3, is_free=[True, False, True], coords=np.eye(3))
    assert np.allclose(part.fixed_position(1), [0, 1, 0])
    with pytest.raises(InvariantError, match="Vertex 0 is free"):
        part.fixed_position(0)


# =============================================================================
# P2: permutation parity and canonical rotation
# =============================================================================

def test_permutation_sign_triangle():
    """Cyclic shifts are even, swaps are odd."""
    assert permutation_sign((0, 1, 2)) == +1
    assert permutation_sign((1, 2, 0)) == +1
    assert permutation_sign((2, 0, 1)) == +1
    assert permutation_sign((0, 2, 1)) == -1
    assert permutation_sign((2, 1, 0)) == -1
    assert permutation_sign((1, 0, 2)) == -1


def test_permutation_sign_rejects_non_permutation():
    with pytest.raises(ValueError):
        permutation_sign((0, 0, 1))


def test_rotate_free_vertex_last():
    """1 free: the free vertex moves to the last slot, cyclic order kept."""
    rotated, perm = rotate_to_pattern((7, 3, 5), (True, False, False), (False, False, True))
    assert rotated == (3, 5, 7)
    assert permutation_sign(perm) == +1


def test_rotate_fixed_vertex_first():
    """2 free: the fixed vertex moves to the first slot."""
    rotated, perm = rotate_to_pattern((7, 3, 5), (True, False, True), (False, True, True))
    assert rotated == (3, 5, 7)
    assert permutation_sign(perm) == +1


def test_rotate_impossible_pattern_raises():
    """Flags with the wrong free count cannot reach the pattern."""
    with pytest.raises(InvariantError, match="canonical"):
        rotate_to_pattern((0, 1, 2), (True, True, False), (False, False, True))


# =============================================================================
# P3: classify_triangle
# =============================================================================

def test_classify_cases():
    """Free count selects the case; indices come out canonically rotated."""
    coords = np.eye(4)[:, :3]
    part = resolve_partition(4, is_free=np.array([False, True, False, True]), coords=coords)

    assert classify_triangle(0, (0, 2, 0), part) == AllFixed(0)
    assert classify_triangle(1, (1, 0, 2), part) == OneFree(1, fixed_a=0, fixed_b=2, free=1)
    assert classify_triangle(2, (3, 0, 1), part) == TwoFree(2, fixed=0, free_a=1, free_b=3)
    assert classify_triangle(3, (1, 3, 1), part) == AllFree(3, 1, 3, 1)


@pytest.mark.parametrize("free_slot", [0, 1, 2])
@pytest.mark.parametrize("shift", [0, 1, 2])
def test_one_free_rotation_keeps_sign(free_slot, shift):
    """1 free: cyclically rotating the input triangle keeps the linear volume."""
    mesh = build_tetrahedron(1.0)
    V = mesh['V']
    tri = list(mesh['T'][0])
    true_volume = tetrahedron_volume(*V[tri])

    flags = np.zeros(4, dtype=bool)
    flags[tri[free_slot]] = True
    part = resolve_partition(4, is_free=flags, coords=V)

    rotated = tri[shift:] + tri[:shift]
    case = classify_triangle(0, rotated, part)

    assert isinstance(case, OneFree)
    assert evaluate(volume_terms(case, part), V) == pytest.approx(true_volume)


@pytest.mark.parametrize("fixed_slot", [0, 1, 2])
@pytest.mark.parametrize("shift", [0, 1, 2])
def test_two_free_rotation_keeps_sign(fixed_slot, shift):
    """2 free: cyclically rotating the input triangle keeps the quadratic volume."""
    mesh = build_tetrahedron(1.0)
    V = mesh['V']
    tri = list(mesh['T'][1])
    true_volume = tetrahedron_volume(*V[tri])

    flags = np.ones(4, dtype=bool)
    flags[tri[fixed_slot]] = False
    part = resolve_partition(4, is_free=flags, coords=V)

    rotated = tri[shift:] + tri[:shift]
    case = classify_triangle(0, rotated, part)

    assert isinstance(case, TwoFree)
    assert evaluate(volume_terms(case, part), V) == pytest.approx(true_volume)


@pytest.mark.parametrize("n_free", [1, 2, 3])
def test_reflection_flips_sign(n_free):
    """Swapping two vertices (odd permutation) negates the derived volume."""
    mesh = build_tetrahedron(1.0)
    V = mesh['V']
    a, b, c = mesh['T'][2].tolist()

    flags = np.zeros(4, dtype=bool)
    flags[[a, b, c][:n_free]] = True
    part = resolve_partition(4, is_free=flags, coords=V)

    forward = evaluate(volume_terms(classify_triangle(0, (a, b, c), part), part), V)
    reflected = evaluate(volume_terms(classify_triangle(0, (a, c, b), part), part), V)

    assert forward > 0
    assert reflected == pytest.approx(-forward)
