import random

import pytest

from sparsenc.pivot_selection import PivotOrder, inactivation_pivoting, zlatev_pivoting


def identity(n):
    return [bytearray(1 if i == j else 0 for j in range(n)) for i in range(n)]


def random_sparse(nrow, ncol, density, seed):
    rng = random.Random(seed)
    return [
        bytearray(rng.randrange(1, 256) if rng.random() < density else 0 for _ in range(ncol))
        for _ in range(nrow)
    ]


def assert_valid_order(order, nrow, ncol):
    assert len(order.rows) == ncol
    assert len(order.cols) == ncol
    assert sorted(order.cols) == list(range(ncol))
    assert len(set(order.rows)) == ncol
    assert all(0 <= r < nrow for r in order.rows)


def test_inactivation_identity_keeps_natural_order():
    order = inactivation_pivoting(identity(5))
    assert order.rows == list(range(5))
    assert order.cols == list(range(5))
    assert order.inactivated == 0


def test_inactivation_dense_matrix_inactivates_heaviest_columns():
    a = [bytearray([1, 1, 1]) for _ in range(3)]
    order = inactivation_pivoting(a)
    assert order == PivotOrder(rows=[0, 1, 2], cols=[0, 1, 2], inactivated=2)


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("shape", [(10, 10), (14, 10), (30, 25)])
def test_inactivation_active_block_is_lower_triangular(seed, shape):
    nrow, ncol = shape
    a = random_sparse(nrow, ncol, 0.2, seed)
    order = inactivation_pivoting(a)
    assert_valid_order(order, nrow, ncol)
    active = ncol - order.inactivated
    for k in range(active):
        row = a[order.rows[k]]
        assert row[order.cols[k]] != 0
        for m in range(k + 1, active):
            assert row[order.cols[m]] == 0


@pytest.mark.parametrize("seed", range(4))
def test_inactivation_does_not_modify_matrix(seed):
    a = random_sparse(12, 12, 0.3, seed)
    snapshot = [bytes(row) for row in a]
    inactivation_pivoting(a)
    assert [bytes(row) for row in a] == snapshot


def test_inactivation_zero_matrix_inactivates_everything():
    a = [bytearray(4) for _ in range(4)]
    order = inactivation_pivoting(a)
    assert order.inactivated == 4
    assert_valid_order(order, 4, 4)


def test_inactivation_too_few_rows():
    with pytest.raises(ValueError):
        inactivation_pivoting([bytearray([1, 1])])


def test_inactivation_ragged_rows():
    with pytest.raises(ValueError):
        inactivation_pivoting([bytearray([1, 0]), bytearray([1])])


def test_zlatev_identity_takes_latest_rows_first():
    order = zlatev_pivoting(identity(4))
    assert order.rows == [3, 2, 1, 0]
    assert order.cols == [3, 2, 1, 0]
    assert order.inactivated == 0


def test_zlatev_zero_matrix_pairs_zero_rows_and_columns():
    a = [bytearray(3) for _ in range(3)]
    order = zlatev_pivoting(a)
    assert order.rows == [2, 1, 0]
    assert order.cols == [2, 1, 0]


@pytest.mark.parametrize("seed", range(5))
def test_zlatev_dense_matrix_pivots_are_nonzero(seed):
    rng = random.Random(seed)
    a = [bytearray(rng.randrange(1, 256) for _ in range(7)) for _ in range(7)]
    order = zlatev_pivoting(a)
    assert_valid_order(order, 7, 7)
    assert all(a[r][c] != 0 for r, c in zip(order.rows, order.cols))


@pytest.mark.parametrize("seed", range(8))
def test_zlatev_sparse_matrix_gives_valid_order(seed):
    a = random_sparse(12, 9, 0.25, seed)
    snapshot = [bytes(row) for row in a]
    order = zlatev_pivoting(a)
    assert_valid_order(order, 12, 9)
    assert [bytes(row) for row in a] == snapshot


def test_zlatev_too_few_rows():
    with pytest.raises(ValueError):
        zlatev_pivoting([bytearray([1, 1])])


def test_empty_matrix_gives_empty_order():
    assert inactivation_pivoting([]) == PivotOrder()
    assert zlatev_pivoting([]) == PivotOrder()