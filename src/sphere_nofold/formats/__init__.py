"""Text serialization of nofold programs."""

from .pip import (
    format_number,
    format_coefficient,
    format_term,
    format_constraint,
    format_bound,
    format_bounds,
    format_constraints,
    to_pip_sections,
    render_pip_sections,
)
