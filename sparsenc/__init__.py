"""Sparse network coding: Galois field arithmetic, substitution and pivoting, and packet encoding."""

__version__ = "0.1.0"

__all__ = [
    "galois",
    "gaussian",
    "pivot_selection",
    "mt19937",
    "packet",
    "encoder",
]