"""Arithmetic over the binary extension fields GF(2^m), 1 <= m <= 8.

Elements are plain integers (one element per byte).  A field requested
with power 1 is backed by the GF(256) tables, so GF(2) coefficients can be
handled by the same byte-oriented region operations.
"""

from __future__ import annotations

from functools import lru_cache

__all__ = ["GaloisField", "get_field", "PRIMITIVE_POLYNOMIALS"]

PRIMITIVE_POLYNOMIALS = {
    2: 0o7,  # x^2 + x + 1
    3: 0o13,  # x^3 + x + 1
    4: 0o23,  # x^4 + x + 1
    5: 0o45,  # x^5 + x^2 + 1
    6: 0o103,  # x^6 + x + 1
    7: 0o203,  # x^7 + x + 1
    8: 0o435,  # x^8 + x^4 + x^3 + x^2 + 1
}


class GaloisField:
    """Lookup-table arithmetic for GF(2^power)."""

    def __init__(self, power):
        if not isinstance(power, int) or not 1 <= power <= 8:
            raise ValueError(f"unsupported field power: {power!r}")
        self.power = power
        self.table_power = 8 if power == 1 else power
        self.size = 1 << self.table_power
        self.polynomial = PRIMITIVE_POLYNOMIALS[self.table_power]
        self._log, self._ilog = self._build_log_tables()
        self._mult_rows = self._build_mult_rows()
        self._div_rows = self._build_div_rows()
        padding = bytes(256 - self.size)
        self._translate = [row + padding for row in self._mult_rows]

    def _build_log_tables(self):
        nw = self.size
        order = nw - 1
        log = [order] * nw
        ilog = [0] * nw
        b = 1
        for j in range(order):
            if log[b] != order:
                raise RuntimeError(
                    f"polynomial {self.polynomial:o} is not primitive (j={j}, b={b})"
                )
            log[b] = j
            ilog[j] = b
            b <<= 1
            if b & nw:
                b = (b ^ self.polynomial) & order
        return log, ilog

    def _build_mult_rows(self):
        order = self.size - 1
        log, ilog = self._log, self._ilog
        rows = [bytes(self.size)]
        for x in range(1, self.size):
            logx = log[x]
            rows.append(
                bytes([0] + [ilog[(logx + log[y]) % order] for y in range(1, self.size)])
            )
        return rows

    def _build_div_rows(self):
        order = self.size - 1
        log, ilog = self._log, self._ilog
        rows = [bytes(self.size)]
        for x in range(1, self.size):
            logx = log[x]
            rows.append(
                bytes([0] + [ilog[(logx - log[y]) % order] for y in range(1, self.size)])
            )
        return rows

    def _check(self, value):
        if not 0 <= value < self.size:
            raise ValueError(f"{value} is not an element of GF({self.size})")

    def _check_region(self, region):
        if self.size < 256 and len(region) and max(region) >= self.size:
            raise ValueError(f"region holds values outside GF({self.size})")

    def add(self, a, b):
        """Return a + b."""
        self._check(a)
        self._check(b)
        return a ^ b

    def sub(self, a, b):
        """Return a - b (identical to addition in characteristic 2)."""
        return self.add(a, b)

    def multiply(self, a, b):
        """Return a * b."""
        self._check(a)
        self._check(b)
        if a == 0 or b == 0:
            return 0
        if a == 1:
            return b
        if b == 1:
            return a
        return self._mult_rows[a][b]

    def divide(self, a, b):
        """Return a / b; raises ZeroDivisionError when b is zero."""
        self._check(a)
        self._check(b)
        if b == 0:
            raise ZeroDivisionError("division by zero in Galois field")
        if a == 0:
            return 0
        if b == 1:
            return a
        return self._div_rows[a][b]

    def multiply_region(self, src, multiplier):
        """Multiply every element of the writable buffer ``src`` in place."""
        self._check(multiplier)
        if multiplier == 0:
            src[:] = bytes(len(src))
            return
        if multiplier == 1:
            return
        self._check_region(src)
        src[:] = bytes(src).translate(self._translate[multiplier])

    def multiply_add_region(self, dst, src, multiplier):
        """Add ``multiplier * src`` element-wise into the writable buffer ``dst``."""
        self._check(multiplier)
        n = len(src)
        if len(dst) < n:
            raise ValueError("destination region is shorter than source region")
        if multiplier == 0 or n == 0:
            return
        if multiplier == 1:
            product = bytes(src)
        else:
            self._check_region(src)
            product = bytes(src).translate(self._translate[multiplier])
        mixed = int.from_bytes(bytes(dst[:n]), "little") ^ int.from_bytes(product, "little")
        dst[:n] = mixed.to_bytes(n, "little")

    def __repr__(self):
        return f"GaloisField(power={self.power})"


@lru_cache(maxsize=None)
def get_field(power):
    """Return the shared field instance for ``power``, building it once."""
    return GaloisField(power)