"""
PIP Text Serialization
======================

Writes a NofoldProgram as the two PIP blocks a solver input file needs:

    Bounds
     -1 <= x1 <= 1
     ...
    Subject to
     c1: +0.16666666666666666 x1 y2 z3 -0.16666666666666666 x1 y3 z2 ... >= 0.010000001
     c2: - x1 x2 - y1 y2 - z1 z2 <= 1
     c3: + x1^2 + y1^2 + z1^2 = 1

CONVENTIONS:
    - Variable names: axis letter + 1-based vertex index (x1 = vertex 0).
    - Coefficients are explicitly signed; ±1 is written as a bare +/-.
    - A repeated variable in a monomial is written as a power (x1^2).
    - Numbers use PIP_DIGITS significant digits so that the tightened
      right-hand sides survive the text round trip.
    - Constraint ids c1..cM follow the program's constraint order.

The caller owns the objective, file I/O and solver invocation.
"""

from typing import List, Tuple

from ..spec.constants import PIP_BOUNDS_HEADER, PIP_CONSTRAINTS_HEADER, PIP_DIGITS
from ..spec.structures import Constraint, Term, VariableBound


def format_number(value: float) -> str:
    """Unsigned-style literal with full precision, e.g. 0.16666666666666666."""
    return f"{float(value):.{PIP_DIGITS}g}"


def format_coefficient(value: float) -> str:
    """Signed coefficient literal; +1 and -1 abbreviate to '+' and '-'."""
    value = float(value)
    if value == 1.0:
        return "+"
    if value == -1.0:
        return "-"
    return f"{value:+.{PIP_DIGITS}g}"


def format_monomial(term: Term) -> str:
    """Variables of a term, repeated variables collapsed into powers."""
    parts = []
    run_name, run_length = None, 0
    for var in term.variables:
        if var.name == run_name:
            run_length += 1
            continue
        if run_name is not None:
            parts.append(run_name if run_length == 1 else f"{run_name}^{run_length}")
        run_name, run_length = var.name, 1
    parts.append(run_name if run_length == 1 else f"{run_name}^{run_length}")
    return " ".join(parts)


def format_term(term: Term) -> str:
    return f"{format_coefficient(term.coefficient)} {format_monomial(term)}"


def format_constraint(cid: int, constraint: Constraint) -> str:
    """One constraint line, ' c<id>: <terms> <op> <rhs>'."""
    terms = " ".join(format_term(term) for term in constraint.terms)
    return f" c{cid}: {terms} {constraint.sense} {format_number(constraint.rhs)}"


def format_bound(bound: VariableBound) -> str:
    """One bound line, ' <lower> <= <var> <= <upper>'."""
    return f" {format_number(bound.lower)} <= {bound.variable.name} <= {format_number(bound.upper)}"


def format_bounds(program) -> List[str]:
    """Bounds block: header then one line per free coordinate."""
    return [PIP_BOUNDS_HEADER] + [format_bound(b) for b in program.bounds]


def format_constraints(program) -> List[str]:
    """Constraints block: header then one line per constraint, ids from 1."""
    lines = [PIP_CONSTRAINTS_HEADER]
    for cid, constraint in enumerate(program.constraints, start=1):
        lines.append(format_constraint(cid, constraint))
    return lines


def to_pip_sections(program) -> Tuple[List[str], List[str]]:
    """(constraint lines, bound lines), each starting with its header."""
    return format_constraints(program), format_bounds(program)


def render_pip_sections(program) -> str:
    """Both blocks as text, constraints first, newline terminated."""
    con, bnd = to_pip_sections(program)
    return "\n".join(con + bnd) + "\n"
