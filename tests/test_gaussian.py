import random

import pytest

from sparsenc.galois import GaloisField
from sparsenc.gaussian import back_substitute, forward_substitute


def _matmul(field, left, right):
    rows, inner, cols = len(left), len(right), len(right[0])
    result = []
    for r in range(rows):
        row = bytearray(cols)
        for k in range(inner):
            coef = left[r][k]
            if coef:
                field.multiply_add_region(row, right[k], coef)
        result.append(row)
    return result


def _invertible_matrix(field, n, rng):
    lower = [
        bytearray(1 if c == r else (rng.randrange(field.size) if c < r else 0) for c in range(n))
        for r in range(n)
    ]
    upper = [
        bytearray(
            rng.randrange(1, field.size) if c == r else (rng.randrange(field.size) if c > r else 0)
            for c in range(n)
        )
        for r in range(n)
    ]
    product = _matmul(field, lower, upper)
    rng.shuffle(product)
    return product


@pytest.mark.parametrize("power,n,width", [(8, 6, 5), (8, 12, 3), (4, 5, 4), (2, 4, 2)])
def test_solves_linear_system(power, n, width):
    field = GaloisField(power)
    rng = random.Random(power * 100 + n)
    a = _invertible_matrix(field, n, rng)
    x = [bytearray(rng.randrange(field.size) for _ in range(width)) for _ in range(n)]
    b = _matmul(field, a, x)
    forward_substitute(field, a, b)
    back_substitute(field, a, b)
    assert [bytes(row) for row in b] == [bytes(row) for row in x]
    assert all(a[i][j] == (1 if i == j else 0) for i in range(n) for j in range(n))


def test_forward_substitute_yields_upper_triangular():
    field = GaloisField(8)
    rng = random.Random(3)
    a = _invertible_matrix(field, 8, rng)
    b = [bytearray(4) for _ in range(8)]
    ops = forward_substitute(field, a, b)
    assert ops > 0
    for i in range(8):
        assert a[i][i] != 0
        assert all(a[j][i] == 0 for j in range(i + 1, 8))


def test_identity_costs_no_operations():
    field = GaloisField(8)
    a = [bytearray(1 if i == j else 0 for j in range(3)) for i in range(3)]
    b = [bytearray([i, i + 1]) for i in range(3)]
    assert forward_substitute(field, a, b) == 0
    assert back_substitute(field, a, b) == 0
    assert b == [bytearray([0, 1]), bytearray([1, 2]), bytearray([2, 3])]


def test_row_swap_moves_rhs_with_row():
    field = GaloisField(8)
    a = [bytearray([0, 1]), bytearray([1, 0])]
    b = [bytearray([7]), bytearray([9])]
    forward_substitute(field, a, b)
    assert a == [bytearray([1, 0]), bytearray([0, 1])]
    assert b == [bytearray([9]), bytearray([7])]


def test_back_substitute_singular_raises():
    field = GaloisField(8)
    a = [bytearray([1, 1]), bytearray([0, 0])]
    b = [bytearray([1]), bytearray([2])]
    with pytest.raises(ZeroDivisionError):
        back_substitute(field, a, b)


def test_back_substitute_needs_enough_rows():
    field = GaloisField(8)
    with pytest.raises(ValueError):
        back_substitute(field, [bytearray([1, 0])], [bytearray([1])])