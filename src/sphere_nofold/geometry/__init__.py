"""Geometry primitives and the bounding-box estimator."""

from .primitives import (
    cross3,
    dot3,
    triple_product,
    tetrahedron_volume,
    signed_volumes,
    chord_length_squared,
    ray_triangle_intersect,
)
from .bounds_box import estimate_bounding_box, sphere_box
