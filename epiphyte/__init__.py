"""Extended-real arithmetic, DE parameter adaptation and epiphytic tree rotation."""

__version__ = "0.1.0"

__all__ = [
    "extended_real",
    "operations",
    "strategy",
    "rotation",
    "rotator",
]