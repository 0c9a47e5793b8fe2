"""Search for a rotation of an epiphytic decomposition.

Starting from the root variable, the search repeatedly infers the head of
every constraint that has exactly one free variable and, when none is
left, branches on the constraints touching the chosen variables.  Conflicts
are undone by chronological backtracking.  The first complete rotation found
is written, after the variables, to ``instancia_rotacionada.txt``.
"""

from __future__ import annotations

import math
import re
import sys
import time
from typing import Sequence

from .rotation import (
    Choice,
    Constraint,
    Variable,
    prune,
    read_constraints,
    read_variables,
    update_cap,
    write_rotation,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "OUTPUT_FILE",
    "RotationNotFound",
    "search",
    "main",
]

DEFAULT_TIMEOUT = 600
OUTPUT_FILE = "instancia_rotacionada.txt"

# Best number of non-auxiliary arc heads known before any rotation is found.
_INITIAL_BEST_NON_AUX_HEADS = 9999999

_USAGE = (
    "Usage: {prog} <variables_file> <constraints_file> [TIMEOUT [--creates-hypergraph]]\n"
    "TIMEOUT               :timeout, in seconds, of the search for a rotation.\n"
    "--creates-hypergraph  :omit the final 'f' line, for a constraint hypergraph output.\n"
)


class RotationNotFound(Exception):
    """The backtracking search ran out of alternatives."""


def _seconds() -> int:
    return math.floor(time.monotonic())


def _choose_root(variables: Sequence[Variable], root: str | None) -> Variable:
    if root is not None:
        for variable in variables:
            if variable.name == root:
                return variable
    raise ValueError(f"root variable {root!r} not found")


def search(
    variables: Sequence[Variable],
    constraints: Sequence[Constraint],
    root: str | None,
    timeout: int,
) -> list[Choice] | None:
    """Find a rotation of ``constraints`` starting at the variable ``root``.

    Returns the backtracking stack, most recent choice last, once every
    constraint has been traversed, or None when ``timeout`` seconds pass
    first.  Raises RotationNotFound when the search space is exhausted and
    ValueError when ``root`` is not among ``variables``.
    """
    start_var = _choose_root(variables, root)
    start_var.level = 1
    update_cap(start_var.constraints, "1")

    stack: list[Choice] = []
    level = 2
    non_aux_heads = 0
    best_non_aux_heads = _INITIAL_BEST_NON_AUX_HEADS

    start = _seconds()
    found = False
    timed_out = _seconds() - start > timeout

    while not timed_out and not found:
        found = True
        i = 0
        while i < len(constraints):
            constraint = constraints[i]
            if prune(constraint, non_aux_heads, best_non_aux_heads):
                found = False
                break
            if constraint.cap == 2:
                rotation, head = next(
                    (
                        (k, v)
                        for k, v in enumerate(constraint.variables[:2])
                        if v.level == 0
                    ),
                    (2, constraint.z),
                )
                head.level = level
                level += 1
                update_cap(head.constraints, "+")
                if not head.name.startswith("z"):
                    head.non_aux_arc_head = True
                    non_aux_heads += 1
                constraint.ok = True
                stack.append(Choice(constraint, True, rotation, 1))
                i = 0
                continue
            i += 1

        if found:
            for constraint in constraints:
                if constraint.cap == 1:
                    if constraint.x.level != 0:
                        rotation = 0
                    elif constraint.y.level != 0:
                        rotation = 1
                    else:
                        rotation = 2
                    stack.append(Choice(constraint, False, rotation, 2))
                    found = False

        if not found:
            if not stack:
                raise RotationNotFound("no alternative left to backtrack to")
            top = stack[-1]
            while top.searched:
                level -= 1
                for variable in variables:
                    if variable.level == level:
                        if variable.non_aux_arc_head:
                            non_aux_heads -= 1
                        variable.level = 0
                        variable.arc_head = False
                        variable.non_aux_arc_head = False
                        update_cap(variable.constraints, "-")
                stack.pop()
                if not stack:
                    raise RotationNotFound("no alternative left to backtrack to")
                top = stack[-1]

            constraint = top.constraint
            for variable in constraint.variables:
                if variable.level == 0:
                    variable.level = level
                    update_cap(variable.constraints, "+")
            constraint.ok = True
            top.searched = True
            level += 1

        timed_out = _seconds() - start > timeout

    return stack if found else None


def _atol(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the rotator on the command line arguments; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        sys.stdout.write(_USAGE.format(prog="rotator"))
        return 1

    as_graph = len(args) > 3
    timeout = _atol(args[2]) if len(args) > 2 else DEFAULT_TIMEOUT
    started = time.monotonic()

    with open(OUTPUT_FILE, "w") as out:
        try:
            variables, root = read_variables(args[0], out)
            constraints = read_constraints(args[1], variables)
        except (OSError, ValueError) as exc:
            print(f"ERROR: {exc}")
            return 1

        try:
            stack = search(variables, constraints, root, timeout)
        except ValueError:
            print("ERROR: root not found")
            return 1
        except RotationNotFound:
            print(f"TOTAL TIME: {time.monotonic() - started:f}s")
            print("backtracking failed")
            return 1

        if stack is None:
            print(f"TIMEOUT: {args[0]}")
            return 0

        write_rotation(stack, as_graph, out)
    return 0