"""
Input Validation for the Constraint Generator
=============================================

Everything the caller passes in is checked here, BEFORE any constraint is
derived. A failure raises ConfigurationError and nothing is produced.

PARAMETERS:
    triangles  (Ntri, 3) integer vertex indices, 0-based
    radius     sphere radius R > 0
    vmin, vmax tetrahedron volume budget, scalar or one value per triangle
               ((Ntri,) or column vector (Ntri, 1))
    lmax       maximum edge length, default 2R
    feastol    solver feasibility tolerance, default 1e-6

FEASIBILITY TOLERANCE:
    The solver accepts f(x) >= b whenever f(x) >= b - feastol*max(1,|b|).
    A vmin comparable to feastol would let it return tiny negative
    volumes, so vmin >= 10*feastol is required for every triangle.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..spec.constants import DEFAULT_FEASTOL, FEASTOL_FLOOR, VMIN_FEASTOL_FACTOR
from ..spec.errors import ConfigurationError


@dataclass
class NofoldParameters:
    """Validated numeric parameters of one program."""
    radius: float
    vmin: np.ndarray   # (Ntri,)
    vmax: np.ndarray   # (Ntri,)
    lmax: float
    feastol: float

    @property
    def edge_rhs(self) -> float:
        """Right-hand side of every edge-length constraint, lmax²/2 - R²."""
        return self.lmax ** 2 / 2.0 - self.radius ** 2

    def lower_rhs(self, t: int) -> float:
        """vmin of triangle t tightened by the feasibility tolerance."""
        vmin = float(self.vmin[t])
        return vmin + self.feastol * max(1.0, abs(vmin))

    def upper_rhs(self, t: int) -> float:
        """vmax of triangle t tightened by the feasibility tolerance."""
        vmax = float(self.vmax[t])
        return vmax - self.feastol * max(1.0, abs(vmax))


def resolve_triangles(triangles) -> np.ndarray:
    """
    Check the triangle array.

    Returns:
        (Ntri, 3) int array
    """
    tri = np.asarray(triangles)
    if tri.ndim != 2 or tri.shape[1] != 3:
        raise ConfigurationError(f"Triangles must have 3 columns, got shape {tri.shape}")
    if tri.shape[0] == 0:
        raise ConfigurationError("Mesh has no triangles")
    if not np.issubdtype(tri.dtype, np.integer):
        raise ConfigurationError(f"Triangle indices must be integers, got dtype {tri.dtype}")
    if tri.min() < 0:
        bad = int(np.where(np.any(tri < 0, axis=1))[0][0])
        raise ConfigurationError(f"Triangle {bad} has a negative vertex index: {tri[bad].tolist()}")
    return tri.astype(int)


def _scalar(name: str, value) -> float:
    if np.ndim(value) != 0:
        raise ConfigurationError(f"{name} must be a scalar, got shape {np.shape(value)}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a real number, got {value!r}") from exc


def _per_triangle(name: str, value, n_triangles: int) -> np.ndarray:
    """Broadcast a scalar budget, or check a per-triangle (column) vector."""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return np.full(n_triangles, float(arr))
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr.ravel()
    if arr.ndim != 1 or len(arr) != n_triangles:
        raise ConfigurationError(
            f"{name} must be a scalar or a vector with one element per triangle "
            f"({n_triangles}), got shape {arr.shape}"
        )
    return arr.copy()


def resolve_parameters(n_triangles: int,
                       radius,
                       vmin,
                       vmax,
                       lmax=None,
                       feastol: Optional[float] = None) -> NofoldParameters:
    """
    Validate and broadcast the numeric parameters.

    Args:
        n_triangles: number of mesh triangles
        radius: sphere radius R (scalar, > 0)
        vmin, vmax: volume budgets, scalar or (n_triangles,)
        lmax: maximum edge length (default 2R)
        feastol: solver feasibility tolerance (default DEFAULT_FEASTOL)

    Returns:
        NofoldParameters

    FAIL-FAST:
        Raises ConfigurationError naming the first offending triangle.
    """
    R = _scalar("Radius", radius)
    if not np.isfinite(R) or R <= 0:
        raise ConfigurationError(f"Radius must be a positive finite number, got {R}")

    if lmax is None:
        lmax = 2.0 * R
    lmax = _scalar("lmax", lmax)
    if not np.isfinite(lmax) or lmax <= 0:
        raise ConfigurationError(f"lmax must be a positive finite number, got {lmax}")

    if feastol is None:
        feastol = DEFAULT_FEASTOL
    feastol = _scalar("feastol", feastol)
    if not feastol >= FEASTOL_FLOOR:
        raise ConfigurationError(
            f"feastol={feastol} is below {FEASTOL_FLOOR}. The solver silently treats a "
            f"feasibility tolerance smaller than its numerics epsilon as 0"
        )

    vmin = _per_triangle("vmin", vmin, n_triangles)
    vmax = _per_triangle("vmax", vmax, n_triangles)

    for name, arr in (("vmin", vmin), ("vmax", vmax)):
        nan = np.where(np.isnan(arr))[0]
        if len(nan) > 0:
            raise ConfigurationError(f"{name} is NaN for triangle {nan[0]}")

    too_small = np.where(vmin < VMIN_FEASTOL_FACTOR * feastol)[0]
    if len(too_small) > 0:
        t = too_small[0]
        raise ConfigurationError(
            f"vmin={vmin[t]} for triangle {t} is too close to feastol={feastol} "
            f"(need vmin >= {VMIN_FEASTOL_FACTOR}*feastol). This may generate solutions with "
            f"tiny negative volumes; scale the problem so constraint limits are larger"
        )

    unbounded = np.where(np.isposinf(vmin))[0]
    if len(unbounded) > 0:
        raise ConfigurationError(f"vmin is +inf for triangle {unbounded[0]}")

    inverted = np.where(vmin > vmax)[0]
    if len(inverted) > 0:
        t = inverted[0]
        raise ConfigurationError(f"vmin={vmin[t]} > vmax={vmax[t]} for triangle {t}")

    return NofoldParameters(radius=R, vmin=vmin, vmax=vmax, lmax=lmax, feastol=feastol)
