"""Pivot selection for sparse linear systems A x = B.

Two strategies choose an ordering of rows and columns so that solving the
system after reordering needs far fewer field operations:

* inactivation pivoting takes pivots only from singleton rows of the
  residual matrix and declares the heaviest active column inactive
  whenever no singleton row remains;
* Zlatev pivoting is a Markowitz search restricted to a few candidate
  rows with the fewest nonzeros.

Both only inspect the nonzero structure of ``a`` and never modify it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

__all__ = ["PivotOrder", "inactivation_pivoting", "zlatev_pivoting", "ZLATEV_ROWS"]

logger = logging.getLogger(__name__)

ZLATEV_ROWS = 3  # number of candidate rows examined per Zlatev pivot search


@dataclass
class PivotOrder:
    """Chosen pivot sequence.

    The k-th pivot sits at row ``rows[k]`` and column ``cols[k]`` of the
    original matrix.  ``inactivated`` counts the columns placed at the end
    of the order as inactive (always zero for Zlatev pivoting).
    """

    rows: list = field(default_factory=list)
    cols: list = field(default_factory=list)
    inactivated: int = 0


def _shape(a):
    nrow = len(a)
    ncol = len(a[0]) if nrow else 0
    if any(len(row) != ncol for row in a):
        raise ValueError("matrix rows differ in length")
    return nrow, ncol


def _counts(a, nrow, ncol):
    row_counts = [sum(1 for v in row if v != 0) for row in a]
    col_rows = [[i for i in range(nrow) if a[i][j] != 0] for j in range(ncol)]
    col_counts = [len(rows) for rows in col_rows]
    return row_counts, col_counts, col_rows


def _buckets(counts):
    """Group indices by count; later indices come first within a bucket."""
    buckets = [[] for _ in range(max(counts, default=0) + 1)]
    for index, count in enumerate(counts):
        buckets[count].insert(0, index)
    return buckets


def inactivation_pivoting(a):
    """Select pivots by progressive inactivation.

    Returns a :class:`PivotOrder` whose first ``ncol - inactivated`` pivots
    form a lower triangular block with nonzero diagonal; the inactivated
    columns follow, each paired with a row not used before.
    """
    nrow, ncol = _shape(a)
    logger.debug("pivoting matrix of size %d x %d via inactivation", nrow, ncol)
    row_counts, col_counts, col_rows = _counts(a, nrow, ncol)
    col_buckets = _buckets(col_counts)

    ACTIVE, INACTIVE, PIVOT = 0, 1, 2
    col_state = [ACTIVE] * ncol
    order = PivotOrder()
    active = ncol

    def drop_column(col):
        for r in col_rows[col]:
            if row_counts[r] != -1:
                row_counts[r] -= 1

    while active:
        p_r = next((i for i, count in enumerate(row_counts) if count == 1), None)
        if p_r is not None:
            row = a[p_r]
            p_c = next(
                (j for j in range(ncol) if col_state[j] == ACTIVE and row[j] != 0),
                None,
            )
            if p_c is None:
                raise RuntimeError("no nonzero element found in the singleton row")
            order.rows.append(p_r)
            order.cols.append(p_c)
            row_counts[p_r] = -1
            drop_column(p_c)
            col_buckets[col_counts[p_c]].remove(p_c)
            col_state[p_c] = PIVOT
            active -= 1
        else:
            bucket = next(b for b in reversed(col_buckets) if b)
            col = bucket.pop(0)
            col_state[col] = INACTIVE
            order.inactivated += 1
            active -= 1
            drop_column(col)

    for col in range(ncol):
        if col_state[col] != INACTIVE:
            continue
        candidate = None
        for r in range(nrow):
            if row_counts[r] != -1:
                candidate = r
                if a[r][col] != 0:
                    break
        if candidate is None:
            raise ValueError("matrix has fewer rows than columns")
        order.rows.append(candidate)
        order.cols.append(col)
        row_counts[candidate] = -1
        col_state[col] = PIVOT

    logger.debug("%d/%d columns inactivated", order.inactivated, ncol)
    return order


def _zlatev_search(a, row_buckets, col_buckets):
    """Return the (row, col) of the next pivot, or None if none remains."""
    best = None
    best_mc = -1
    searched = 0
    for i in range(1, len(row_buckets)):
        for row_id in row_buckets[i]:
            if searched >= ZLATEV_ROWS:
                break
            searched += 1
            row = a[row_id]
            for j in range(1, len(col_buckets)):
                for col_id in col_buckets[j]:
                    if row[col_id] == 0:
                        continue
                    mc = (i - 1) * (j - 1)
                    if mc == 0:
                        return row_id, col_id
                    if best_mc == -1 or mc < best_mc:
                        best = (row_id, col_id)
                        best_mc = mc
    return best


def zlatev_pivoting(a):
    """Select pivots with Zlatev's restricted Markowitz strategy.

    Rows and columns that end up without nonzeros are paired up at the end
    of the order, so the result always holds one pivot per column.
    """
    nrow, ncol = _shape(a)
    row_counts, col_counts, _ = _counts(a, nrow, ncol)
    row_buckets = _buckets(row_counts)
    col_buckets = _buckets(col_counts)
    order = PivotOrder()

    while len(order.cols) != ncol:
        found = _zlatev_search(a, row_buckets, col_buckets)
        if found is None:
            zero_cols = list(col_buckets[0])
            zero_rows = row_buckets[0]
            if len(zero_rows) < len(zero_cols):
                raise ValueError("matrix has fewer usable rows than columns")
            order.cols.extend(zero_cols)
            order.rows.extend(zero_rows[: len(zero_cols)])
            logger.debug(
                "partial success: %d pivots paired with all-zero rows/cols",
                len(zero_cols),
            )
            return order

        p_r, p_c = found
        order.rows.append(p_r)
        order.cols.append(p_c)

        pivot_row = a[p_r]
        for count in range(1, len(col_buckets)):
            for col in list(col_buckets[count]):
                if pivot_row[col] == 0:
                    continue
                col_buckets[count].remove(col)
                col_counts[col] -= 1
                if col != p_c:
                    col_buckets[count - 1].insert(0, col)
        for count in range(1, len(row_buckets)):
            for r in list(row_buckets[count]):
                if a[r][p_c] == 0:
                    continue
                row_buckets[count].remove(r)
                row_counts[r] -= 1
                if r != p_r:
                    row_buckets[count - 1].insert(0, r)

    return order