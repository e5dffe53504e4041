"""
SPHERE_NOFOLD - Fold-free spherical embedding constraints
=========================================================

Derives the linear / quadratic / cubic constraints of a program that maps
a closed, outward-oriented triangle mesh onto the sphere of radius R
without triangle fold-overs, and writes them in PIP text format.

NO solver. NO mesh I/O. NO command line.

Structure:
    spec/         - Constants, errors, constraint data model, mesh contract
    geometry/     - Vector primitives, ray-triangle test, bounding box
    constraints/  - Partition, volume / edge / radius generators, program
    formats/      - PIP serialization
    builders/     - Sphere test meshes (tetrahedron ... icosphere)

Requirements:
    Python >= 3.9
    numpy >= 1.20
    scipy >= 1.11
"""

import sys

# Python version check
if sys.version_info < (3, 9):
    raise ImportError(f"sphere_nofold requires Python >= 3.9, got {sys.version}")

# scipy version check (QhullError is public in scipy.spatial)
import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"sphere_nofold requires scipy >= 1.11, got {scipy.__version__}")

# numpy version check
import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 20):
    raise ImportError(f"sphere_nofold requires numpy >= 1.20, got {np.__version__}")

from . import spec
from . import geometry
from . import constraints
from . import formats
from . import builders

from .spec.errors import ConfigurationError, InvariantError
from .constraints.program import NofoldProgram, build_nofold_program, build_nofold_program_from_mesh
from .formats.pip import to_pip_sections, render_pip_sections

__version__ = "0.5.1"
