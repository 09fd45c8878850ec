# sparsenc

Sparse network coding in pure Python. A block of data is split into source
packets. The packets are grouped into subgenerations, and coded packets are
produced as random linear combinations over a Galois field. The package also
provides the linear algebra a receiver needs: field arithmetic, Gaussian
substitution and pivot selection for sparse systems.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `sparsenc.galois`: `GaloisField(power)` does arithmetic over GF(2^m) for
  m = 1..8. Power 1 is backed by the GF(256) tables. It provides `add`,
  `sub`, `multiply` and `divide`; `divide` raises `ZeroDivisionError` for a
  zero divisor. Two region operations work in place on `bytearray` buffers:
  `multiply_region(src, multiplier)` and
  `multiply_add_region(dst, src, multiplier)`. `get_field(power)` returns a
  shared, cached instance.
- `sparsenc.gaussian`: `forward_substitute(field, a, b)` and
  `back_substitute(field, a, b)` work on `A x = B`. The matrices are lists of
  `bytearray` rows, and both are changed in place. Each function returns the
  number of field operations it spent.
- `sparsenc.pivot_selection`: `inactivation_pivoting(a)` and
  `zlatev_pivoting(a)` choose a pivot order for a sparse matrix without
  changing it. The order comes back as a `PivotOrder`. Its `rows` and `cols`
  lists give the pivot positions, and `inactivated` gives the number of
  columns declared inactive.
- `sparsenc.mt19937`: `MT19937` is a per-instance Mersenne Twister. It has
  `seed`, `seed_by_array` and `genrand_int32` methods and can also be
  iterated.
- `sparsenc.packet`: this module defines `CodeType` (`RAND`, `BAND`,
  `WINDWRAP`, `BATS`, `RAPTOR`), the `SncParameters` dataclass and
  `SncPacket`, which offers `SncPacket.empty(params)` and `copy()`. For the
  wire format it has `packet_length`, `serialize_packet` and
  `deserialize_packet`.
- `sparsenc.encoder`: `EncoderContext(data, params)` groups packets and
  generates coded packets. It has `generate_packet()`,
  `load_file(path, start)`, `recover_data()`, `recover_to_file(path)` and
  `code_summary(overhead, operations)`.

## Example

```python
from sparsenc.encoder import EncoderContext
from sparsenc.packet import CodeType, SncParameters, deserialize_packet, serialize_packet

data = bytes(range(256)) * 4
params = SncParameters(
    datasize=len(data),
    size_p=64,
    size_b=4,
    size_g=8,
    type=CodeType.BAND,
    gfpower=8,
    seed=1234,
)

encoder = EncoderContext(data, params)
packet = encoder.generate_packet()

wire = serialize_packet(packet, params)
received = deserialize_packet(wire, params)
assert received == packet

print(encoder.code_summary(0, 0))
assert encoder.recover_data() == data
```

A seed of `-1` (the default) makes the encoder seed itself from the current
time. The chosen seed is written back into the parameters that were passed
in.

## Environment variables

- `GF_POWER` overrides the field power given in the parameters. The override
  applies when the value is an integer of 8 or less.
- `SNC_NONUNIFORM_RAND=1` schedules subgenerations non-uniformly. The end
  subgenerations get more weight than the inner ones.
- `SNC_PRECODE=HDPC` changes only the precode name shown by `code_summary`.

## What this package does not do

- There is no decoder. Received packets can be parsed, and the
  `gaussian` and `pivot_selection` modules give the building blocks, but
  nothing collects packets and solves for the source data.
- There is no recoding of packets at intermediate nodes.
- Precoding is not built. `EncoderContext` raises `ValueError` when
  `size_c` is not zero.
- `RAPTOR` codes cannot generate packets. `generate_packet` raises
  `ValueError` for them.
- There is no command-line program.