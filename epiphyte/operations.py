"""Operation codes used in ternary constraints ``X = Y op Z``.

Each operation comes in three forms: the direct one, its inverse (solving
for the first operand) and its complement (solving for the second).
Only OP, ADD, SUB, MUL, DIV, POW, SQR, SIN, ARCS, COS, ARCC, TAN, ARCT,
EXP, LOG, ABS, SGN, MAX and MIN may appear in a model.
"""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Opcode", "MODEL_OPERATIONS", "opcode", "opcode_name"]


class Opcode(IntEnum):
    """Numeric codes of the interval operations."""

    OP = 1
    IOP = 2
    COP = 3
    ADD = 4     # X = Y + Z
    SUB = 5     # Y = X - Z
    MUL = 6     # X = Y * Z
    DIV = 7     # Y = X / Z
    POW = 8     # X = Y ^ c, c integer
    SQR = 9     # Y = c-th root of X, c integer
    LG = 10     # c = log_Y(X)
    SIN = 11    # X = sin(Y)
    ARCS = 12   # Y = arcsin(X)
    CSIN = 13
    COS = 14    # X = cos(Y)
    ARCC = 15   # Y = arccos(X)
    CCOS = 16
    TAN = 17    # X = tan(Y)
    ARCT = 18   # Y = arctan(X)
    CTAN = 19
    EXP = 20    # X = b ^ Y, 0 < b != 1
    LOG = 21    # Y = log_b(X), 0 < b != 1
    CEXP = 22
    ABS = 23    # X = |Y|
    IABS = 24   # Y = {r : |r| in X}
    CABS = 25
    SGN = 26    # X = sgn(Y)
    VAL = 27    # Y = {r : sgn(r) in X}
    CSGN = 28
    MAX = 29    # X = max(Y, Z)
    IMAX = 30
    CMAX = 31
    MIN = 32    # X = min(Y, Z)
    IMIN = 33
    CMIN = 34

    @classmethod
    def from_name(cls, name: str) -> "Opcode":
        """Look an operation up by its exact (upper case) name."""
        try:
            return cls[name]
        except KeyError:
            raise ValueError(f"unknown operation {name!r}") from None


MODEL_OPERATIONS = frozenset(
    {
        Opcode.OP, Opcode.ADD, Opcode.SUB, Opcode.MUL, Opcode.DIV,
        Opcode.POW, Opcode.SQR, Opcode.SIN, Opcode.ARCS, Opcode.COS,
        Opcode.ARCC, Opcode.TAN, Opcode.ARCT, Opcode.EXP, Opcode.LOG,
        Opcode.ABS, Opcode.SGN, Opcode.MAX, Opcode.MIN,
    }
)


def opcode(name: str) -> Opcode:
    """Return the operation named ``name``; raise ValueError if unknown."""
    return Opcode.from_name(name)


def opcode_name(op: int) -> str:
    """Return the name of operation code ``op``, or ``"???"`` if unknown."""
    try:
        return Opcode(op).name
    except ValueError:
        return "???"