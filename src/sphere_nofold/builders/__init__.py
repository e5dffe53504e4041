"""
Sphere mesh builders - pure geometry construction, no constraints dependency.

EXPORTS:
- Contract wrappers (return mesh dicts): build_tetrahedron, build_octahedron,
  build_icosahedron, build_icosphere
"""

from .polyhedra import build_tetrahedron, build_octahedron, build_icosahedron, build_icosphere
