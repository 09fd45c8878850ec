"""Code parameters and coded packets, with their wire format.

A serialized packet is laid out as::

    gid (4 bytes, little-endian signed) | ucid (4 bytes) | coefficients | symbols

The gid is left out for non-systematic full-size RLNC, where there is
only one subgeneration, and the ucid is present only for systematic codes.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, field

__all__ = [
    "CodeType",
    "SncParameters",
    "SncPacket",
    "packet_length",
    "serialize_packet",
    "deserialize_packet",
]

_INT = struct.Struct("<i")


def _align(value, unit):
    """Number of units of size ``unit`` needed to hold ``value``."""
    return -(-value // unit)


class CodeType(enum.IntEnum):
    """How packets are grouped into subgenerations."""

    RAND = 0
    BAND = 1
    WINDWRAP = 2
    BATS = 3
    RAPTOR = 4


@dataclass
class SncParameters:
    """Parameters of a sparse network code.

    ``seed`` of -1 asks the encoder to pick a seed from the current time.
    """

    datasize: int
    size_p: int
    size_c: int = 0
    size_b: int = 1
    size_g: int = 1
    type: CodeType = CodeType.RAND
    bpc: bool = False
    gfpower: int = 8
    sys: bool = False
    seed: int = -1

    def __post_init__(self):
        self.type = CodeType(self.type)
        if self.size_p <= 0:
            raise ValueError("packet size must be positive")
        if self.datasize < 0:
            raise ValueError("data size must not be negative")
        if not 1 <= self.gfpower <= 8:
            raise ValueError(f"unsupported field power: {self.gfpower}")

    @property
    def snum(self):
        """Number of source packets."""
        return _align(self.datasize, self.size_p)

    @property
    def pktnum(self):
        """Number of source and check packets together."""
        return self.snum + self.size_c

    @property
    def coes_length(self):
        """Bytes taken by the packed coding coefficients of one packet."""
        return _align(self.size_g * self.gfpower, 8)


@dataclass
class SncPacket:
    """A coded packet.

    ``gid`` of -1 with a ``ucid`` other than -1 marks an uncoded
    (systematic) source packet.
    """

    gid: int = 0
    ucid: int = -1
    coes: bytearray = field(default_factory=bytearray)
    syms: bytearray = field(default_factory=bytearray)

    @classmethod
    def empty(cls, params):
        """Return a packet with zeroed coefficients and symbols."""
        return cls(
            gid=0,
            ucid=-1,
            coes=bytearray(params.coes_length),
            syms=bytearray(params.size_p),
        )

    def copy(self):
        """Return an independent copy of the packet."""
        return SncPacket(
            gid=self.gid,
            ucid=self.ucid,
            coes=bytearray(self.coes),
            syms=bytearray(self.syms),
        )


def packet_length(params):
    """Length in bytes of a packet with both gid and ucid fields."""
    return 4 + 4 + params.coes_length + params.size_p


def _layout(params):
    rlnc = (
        params.size_g == params.pktnum
        and params.size_b == params.size_g
        and not params.sys
    )
    gid_len = 0 if rlnc else 4
    ucid_len = 4 if params.sys else 0
    return gid_len, ucid_len, params.coes_length, params.size_p


def serialize_packet(packet, params):
    """Return the wire bytes of ``packet``."""
    gid_len, ucid_len, ces_len, sym_len = _layout(params)
    if len(packet.coes) != ces_len:
        raise ValueError(f"expected {ces_len} coefficient bytes, got {len(packet.coes)}")
    if len(packet.syms) != sym_len:
        raise ValueError(f"expected {sym_len} symbol bytes, got {len(packet.syms)}")
    parts = []
    if gid_len:
        parts.append(_INT.pack(packet.gid))
    if ucid_len:
        parts.append(_INT.pack(packet.ucid))
    parts.append(bytes(packet.coes))
    parts.append(bytes(packet.syms))
    return b"".join(parts)


def deserialize_packet(data, params):
    """Build a packet from wire bytes produced by :func:`serialize_packet`."""
    gid_len, ucid_len, ces_len, sym_len = _layout(params)
    total = gid_len + ucid_len + ces_len + sym_len
    if len(data) < total:
        raise ValueError(f"packet needs {total} bytes, got {len(data)}")
    packet = SncPacket.empty(params)
    offset = 0
    if gid_len:
        (packet.gid,) = _INT.unpack_from(data, offset)
        offset += gid_len
    if ucid_len:
        (packet.ucid,) = _INT.unpack_from(data, offset)
        offset += ucid_len
    packet.coes[:] = data[offset:offset + ces_len]
    offset += ces_len
    packet.syms[:] = data[offset:offset + sym_len]
    return packet