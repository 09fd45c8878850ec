"""Mersenne Twister MT19937 pseudo-random number generator.

The generator is used for reproducible grouping of packets into
subgenerations and for drawing coding coefficients. Each instance keeps
its own state, so several coders can run side by side without
disturbing one another.
"""

from __future__ import annotations

__all__ = ["MT19937", "DEFAULT_SEED"]

_N = 624
_M = 397
_MATRIX_A = 0x9908B0DF
_UPPER_MASK = 0x80000000
_LOWER_MASK = 0x7FFFFFFF
_MASK32 = 0xFFFFFFFF

DEFAULT_SEED = 5489


class MT19937:
    """A 32-bit Mersenne Twister.

    Without a seed the generator is seeded lazily with :data:`DEFAULT_SEED`
    the first time a number is drawn.
    """

    def __init__(self, seed=None):
        self._mt = [0] * _N
        self._mti = _N + 1  # state not yet initialised
        if seed is not None:
            self.seed(seed)

    def seed(self, s):
        """Initialise the state from a single integer seed."""
        mt = self._mt
        mt[0] = s & _MASK32
        for i in range(1, _N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & _MASK32
        self._mti = _N

    def seed_by_array(self, key):
        """Initialise the state from a sequence of 32-bit integers."""
        key = [k & _MASK32 for k in key]
        if not key:
            raise ValueError("seed key must not be empty")
        self.seed(19650218)
        mt = self._mt
        i, j = 1, 0
        for _ in range(max(_N, len(key))):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * 1664525)) + key[j] + j) & _MASK32
            i += 1
            j += 1
            if i >= _N:
                mt[0] = mt[_N - 1]
                i = 1
            if j >= len(key):
                j = 0
        for _ in range(_N - 1):
            prev = mt[i - 1]
            mt[i] = ((mt[i] ^ ((prev ^ (prev >> 30)) * 1566083941)) - i) & _MASK32
            i += 1
            if i >= _N:
                mt[0] = mt[_N - 1]
                i = 1
        mt[0] = 0x80000000  # assures a non-zero initial state

    def _twist(self):
        mt = self._mt
        for kk in range(_N):
            y = (mt[kk] & _UPPER_MASK) | (mt[(kk + 1) % _N] & _LOWER_MASK)
            value = mt[(kk + _M) % _N] ^ (y >> 1)
            if y & 1:
                value ^= _MATRIX_A
            mt[kk] = value
        self._mti = 0

    def genrand_int32(self):
        """Return the next number in the interval [0, 2**32 - 1]."""
        if self._mti >= _N:
            if self._mti == _N + 1:
                self.seed(DEFAULT_SEED)
            self._twist()
        y = self._mt[self._mti]
        self._mti += 1
        y ^= y >> 11
        y ^= (y << 7) & 0x9D2C5680
        y ^= (y << 15) & 0xEFC60000
        y ^= y >> 18
        return y & _MASK32

    def __iter__(self):
        return self

    def __next__(self):
        return self.genrand_int32()