"""Forward and back substitution for A x = B over a Galois field.

Matrices are lists of ``bytearray`` rows.  Operations on A and B are
performed together, in place, and each routine returns the number of
finite-field operations it spent.
"""

from __future__ import annotations

__all__ = ["forward_substitute", "back_substitute"]


def _ncols(rows):
    return len(rows[0]) if rows else 0


def forward_substitute(field, a, b):
    """Bring A to upper triangular form by row operations, mirroring them on B."""
    nrow = len(a)
    ncol_a = _ncols(a)
    ncol_b = _ncols(b)
    operations = 0
    for i in range(min(nrow, ncol_a)):
        if a[i][i] == 0:
            pivot = next((p for p in range(i + 1, nrow) if a[p][i] != 0), None)
            if pivot is None:
                continue
            a[i], a[pivot] = a[pivot], a[i]
            b[i], b[pivot] = b[pivot], b[i]
        pivot_row = a[i]
        for j in range(i + 1, nrow):
            if a[j][i] == 0:
                continue
            quotient = field.divide(a[j][i], pivot_row[i])
            operations += 1
            field.multiply_add_region(memoryview(a[j])[i:], pivot_row[i:], quotient)
            operations += ncol_a - i
            field.multiply_add_region(b[j], b[i], quotient)
            operations += ncol_b
    return operations


def back_substitute(field, a, b):
    """Reduce a full-rank upper triangular A to the identity, solving for B."""
    ncol_a = _ncols(a)
    ncol_b = _ncols(b)
    if len(a) < ncol_a:
        raise ValueError("matrix has fewer rows than columns")
    operations = 0
    for i in range(ncol_a - 1, -1, -1):
        for j in range(i):
            if a[j][i] == 0:
                continue
            quotient = field.divide(a[j][i], a[i][i])
            operations += 1
            a[j][i] = 0
            field.multiply_add_region(b[j], b[i], quotient)
            operations += ncol_b
        if a[i][i] != 1:
            field.multiply_region(b[i], field.divide(1, a[i][i]))
            operations += ncol_b
            a[i][i] = 1
    return operations