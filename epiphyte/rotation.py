"""Building blocks for rotating an epiphytic decomposition.

A rotation chooses, for every ternary constraint ``X = Y op Z``, which of
its three variables becomes the head (the variable isolated on the left).
This module reads the variable and constraint files, keeps the bookkeeping
for the backtracking search and writes the rotated constraints.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence, TextIO

from .operations import Opcode, opcode

__all__ = [
    "ALLOW_CONSTANTS_IN_ARCS",
    "ERROR_BLOCK",
    "Variable",
    "Constraint",
    "Choice",
    "read_variables",
    "read_constraints",
    "prune",
    "update_cap",
    "rotated_line",
    "write_rotation",
]

# Whether a constant (a variable named "@...") may become the head of an arc.
ALLOW_CONSTANTS_IN_ARCS = True

ERROR_BLOCK = "\n\n!!!!!!!!!!!!!!!ERRO!!!!!!!!!!!!!!!!!!!!!\n\n"

# Rotation 1 turns ``X = Y op Z`` into ``Y = X inv Z``.
_INVERSE = {
    Opcode.OP: Opcode.IOP,
    Opcode.ADD: Opcode.SUB,
    Opcode.MUL: Opcode.DIV,
    Opcode.POW: Opcode.SQR,
    Opcode.SIN: Opcode.ARCS,
    Opcode.COS: Opcode.ARCC,
    Opcode.TAN: Opcode.ARCT,
    Opcode.EXP: Opcode.LOG,
    Opcode.ABS: Opcode.IABS,
    Opcode.SGN: Opcode.VAL,
    Opcode.MAX: Opcode.IMAX,
    Opcode.MIN: Opcode.IMIN,
    Opcode.SUB: Opcode.ADD,
    Opcode.DIV: Opcode.MUL,
    Opcode.SQR: Opcode.POW,
    Opcode.ARCS: Opcode.SIN,
    Opcode.ARCC: Opcode.COS,
    Opcode.ARCT: Opcode.TAN,
    Opcode.LOG: Opcode.EXP,
}

# Rotation 2 turns ``X = Y op Z`` into ``Z = X comp Y``...
_COMPLEMENT = {
    Opcode.OP: Opcode.COP,
    Opcode.ADD: Opcode.SUB,
    Opcode.MUL: Opcode.DIV,
    Opcode.POW: Opcode.LG,
    Opcode.SIN: Opcode.CSIN,
    Opcode.COS: Opcode.CCOS,
    Opcode.TAN: Opcode.CTAN,
    Opcode.EXP: Opcode.CEXP,
    Opcode.ABS: Opcode.CABS,
    Opcode.SGN: Opcode.CSGN,
    Opcode.MAX: Opcode.CMAX,
    Opcode.MIN: Opcode.CMIN,
}

# ...or, for the already inverted operations, into ``Z = Y comp X``.
_SWAPPED_COMPLEMENT = {
    Opcode.SUB: Opcode.SUB,
    Opcode.DIV: Opcode.DIV,
    Opcode.SQR: Opcode.LG,
    Opcode.ARCS: Opcode.CSIN,
    Opcode.ARCC: Opcode.CCOS,
    Opcode.ARCT: Opcode.CTAN,
    Opcode.LOG: Opcode.CEXP,
}


@dataclass(eq=False)
class Variable:
    """A variable of the model and its state in the rotation search.

    ``level`` is the search level at which the variable was chosen (0 when
    it is still free); ``constraints`` are the constraints using it.
    """

    name: str
    lower: float = float("-inf")
    upper: float = float("inf")
    lower_closed: bool = False
    upper_closed: bool = False
    level: int = 0
    constraints: list["Constraint"] = field(default_factory=list)
    arc_head: bool = False
    non_aux_arc_head: bool = False


@dataclass(eq=False)
class Constraint:
    """A ternary constraint ``x = y op z``.

    ``cap`` counts how many of its variables are already chosen and ``ok``
    tells whether the constraint has been traversed.
    """

    x: Variable
    y: Variable
    z: Variable
    op: Opcode
    cap: int = 0
    ok: bool = False

    @property
    def variables(self) -> tuple[Variable, Variable, Variable]:
        return (self.x, self.y, self.z)


@dataclass(eq=False)
class Choice:
    """An entry of the backtracking stack: a constraint and its rotation.

    ``rotation`` is 0, 1 or 2 for the variable (x, y or z) that becomes the
    head; ``kind`` is written as the constraint type in the output.
    """

    constraint: Constraint
    searched: bool
    rotation: int
    kind: int


def _tokens(path: str | Path) -> Iterator[str]:
    return iter(Path(path).read_text().split())


def _next(tokens: Iterator[str], what: str) -> str:
    try:
        return next(tokens)
    except StopIteration:
        raise ValueError(f"unexpected end of file reading {what}") from None


def read_variables(path: str | Path, out: TextIO) -> tuple[list[Variable], str | None]:
    """Read the variables file and echo each variable to ``out``.

    Each record is ``name closed_left lower , upper closed_right``; the
    record ``f<name>`` names the root and ends the file.  Returns the
    variables read and the root name (None if there is no root record).
    """
    tokens = _tokens(path)
    variables: list[Variable] = []
    for name in tokens:
        if name.startswith("f"):
            return variables, name[1:]
        try:
            left = int(_next(tokens, "variables"))
            lower = float(_next(tokens, "variables"))
            separator = _next(tokens, "variables")
            upper = float(_next(tokens, "variables"))
            right = int(_next(tokens, "variables"))
        except ValueError as exc:
            raise ValueError(f"error reading variable {name!r}: {exc}") from None
        out.write(
            f"v {name} {'[' if left else '('} {lower:f} {separator} "
            f"{upper:f} {']' if right else ')'}\n"
        )
        variables.append(
            Variable(
                name=name,
                lower=lower,
                upper=upper,
                lower_closed=bool(left),
                upper_closed=bool(right),
            )
        )
    return variables, None


def read_constraints(path: str | Path, variables: Iterable[Variable]) -> list[Constraint]:
    """Read constraints ``x = y OP z`` and link them to their variables."""
    by_name: dict[str, Variable] = {}
    for variable in variables:
        by_name.setdefault(variable.name, variable)

    def lookup(name: str) -> Variable:
        try:
            return by_name[name]
        except KeyError:
            raise ValueError(f"unknown variable {name!r} in constraint") from None

    tokens = _tokens(path)
    constraints: list[Constraint] = []
    for head in tokens:
        _next(tokens, "constraints")  # the '=' sign
        y_name = _next(tokens, "constraints")
        op_name = _next(tokens, "constraints")
        z_name = _next(tokens, "constraints")
        constraint = Constraint(
            x=lookup(head), y=lookup(y_name), z=lookup(z_name), op=opcode(op_name)
        )
        for variable in constraint.variables:
            variable.constraints.append(constraint)
        constraints.append(constraint)
    return constraints


def prune(constraint: Constraint, non_aux_heads: int, best_non_aux_heads: int) -> bool:
    """Return True when the current branch must be abandoned at ``constraint``."""
    if constraint.cap == 3 and not constraint.ok:
        return True

    free = [v for v in constraint.variables if v.level == 0]

    if (
        constraint.cap == 2
        and not ALLOW_CONSTANTS_IN_ARCS
        and any(v.name.startswith("@") for v in free)
    ):
        return True

    if (
        constraint.cap == 2
        and non_aux_heads == best_non_aux_heads
        and any(not v.name.startswith("z") for v in free)
    ):
        return True

    return False


def update_cap(constraints: Iterable[Constraint], mode: str) -> None:
    """Update the chosen-variable count of ``constraints``.

    ``mode`` is ``"1"`` to set it to one, ``"+"`` to increase it and ``"-"``
    to decrease it (which also marks the constraint as not traversed).
    """
    if mode not in ("1", "+", "-"):
        raise ValueError(f"unknown update mode {mode!r}")
    for constraint in constraints:
        if mode == "1":
            constraint.cap = 1
        elif mode == "+":
            constraint.cap += 1
        else:
            constraint.cap -= 1
            constraint.ok = False


def rotated_line(choice: Choice) -> str:
    """Return the output line of ``choice``; raise ValueError if it has none."""
    r = choice.constraint
    op = Opcode(r.op)
    if choice.rotation == 0:
        head, left, name, right = r.x, r.y, op.name, r.z
    elif choice.rotation == 1:
        if op not in _INVERSE:
            raise ValueError(f"operation {op.name} cannot be rotated to its second operand")
        head, left, name, right = r.y, r.x, _INVERSE[op].name, r.z
    elif op in _COMPLEMENT:
        head, left, name, right = r.z, r.x, _COMPLEMENT[op].name, r.y
    elif op in _SWAPPED_COMPLEMENT:
        head, left, name, right = r.z, r.y, _SWAPPED_COMPLEMENT[op].name, r.x
    else:
        raise ValueError(f"operation {op.name} cannot be rotated to its third operand")
    return f"c {choice.kind} {head.name} = {left.name} {name} {right.name}\n"


def write_rotation(stack: Sequence[Choice], as_graph: bool, out: TextIO) -> None:
    """Write the searched choices of ``stack``, oldest first, to ``out``.

    ``stack`` holds the most recent choice last.  Unless ``as_graph`` is set
    the output ends with the ``f`` line.
    """
    for choice in stack:
        if not choice.searched:
            continue
        try:
            out.write(rotated_line(choice))
        except ValueError:
            sys.stdout.write(ERROR_BLOCK)
            out.write(ERROR_BLOCK)
    if not as_graph:
        out.write("f\n")