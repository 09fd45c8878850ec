"""Encoding of data into sparse network coded packets.

An :class:`EncoderContext` splits data into source packets, groups the
packets into subgenerations according to the code type and produces
coded packets as random linear combinations of one subgeneration at a
time.  The same context, created without data, describes the code to a
decoder or recoder, and can turn recovered source packets back into data.

Environment variables honoured:

* ``GF_POWER`` overrides the field power given in the parameters;
* ``SNC_NONUNIFORM_RAND=1`` schedules subgenerations of banded codes
  non-uniformly;
* ``SNC_PRECODE=HDPC`` only changes the precode name in summaries.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import random
import time

from .galois import get_field
from .mt19937 import MT19937
from .packet import CodeType, SncPacket

__all__ = ["EncoderContext"]

logger = logging.getLogger(__name__)

_FIXED_SUBSET_TYPES = (CodeType.RAND, CodeType.BAND, CodeType.WINDWRAP)


def _align(value, unit):
    return -(-value // unit)


def _set_bit(array, index):
    """Set bit ``index`` of ``array``; bits are numbered from the MSB of byte 0."""
    array[index // 8] |= 0x80 >> (index % 8)


def _pack_bits(array, value, width, index):
    """Store ``value`` as the ``index``-th element of ``width`` bits in ``array``."""
    start = index * width
    for k in range(width):
        position = start + k
        byte = position // 8
        if byte >= len(array):
            break
        mask = 0x80 >> (position % 8)
        if (value >> (width - 1 - k)) & 1:
            array[byte] |= mask
        else:
            array[byte] &= ~mask & 0xFF


def _galois2n_multiply_add_region(field, dst, src, multiplier, nelem=None):
    """Add ``multiplier * src`` into ``dst``, both packed ``field.power``-bit elements."""
    if multiplier == 0:
        return
    width = field.power
    nbytes = len(dst)
    if nelem is None:
        nelem = _align(nbytes * 8, width)
    total = nelem * width
    length = max(total, 8 * nbytes)
    source = int.from_bytes(bytes(src[:nbytes]), "big") << (length - 8 * nbytes)
    mask = (1 << width) - 1
    product = 0
    for j in range(nelem):
        shift = length - (j + 1) * width
        element = (source >> shift) & mask
        if element:
            product |= field.multiply(element, multiplier) << shift
    product >>= length - 8 * nbytes
    mixed = int.from_bytes(bytes(dst), "big") ^ product
    dst[:] = mixed.to_bytes(nbytes, "big")


def _effective_gf_power(params):
    """Field power of the code, overridden by the GF_POWER environment variable."""
    override = os.environ.get("GF_POWER")
    if override is not None:
        try:
            value = int(override)
        except ValueError:
            value = None
        if value is not None and value <= 8:
            params.gfpower = value
    return params.gfpower


class EncoderContext:
    """Meta information and packets of one block of data under a sparse code.

    ``data`` may be ``None``, in which case the context only describes the
    code; source packets can then be loaded with :meth:`load_file` or filled
    in by a decoder through :attr:`packets`.
    """

    def __init__(self, data, params):
        self.params = dataclasses.replace(params)
        if self.params.seed == -1:
            self.params.seed = int(time.time() * 1000)
        params.seed = self.params.seed
        self._rng = MT19937(self.params.seed)
        self._sched_rng = random.Random(self.params.seed)

        p = self.params
        self.snum = p.snum
        self.cnum = p.size_c
        if p.type == CodeType.BAND:
            self.gnum = _align(self.snum + self.cnum - p.size_g, p.size_b) + 1
        elif p.type in (CodeType.RAND, CodeType.WINDWRAP):
            self.gnum = _align(self.snum + self.cnum, p.size_b)
        else:
            self.gnum = None

        self._verify()
        if self.cnum != 0:
            raise ValueError("check packets require a precode graph, which this encoder does not build")

        self.subgenerations = []
        self._group_packets()
        self.count = 0
        self._current_batch = -1
        self._batch_sent = 0

        self.gfpower = _effective_gf_power(self.params)
        self.field = get_field(self.gfpower)
        self.packets = [None] * (self.snum + self.cnum)
        if data is not None:
            self._load_bytes(bytes(data))

    # -- construction -------------------------------------------------

    def _verify(self):
        p = self.params
        if p.type not in (CodeType.BATS, CodeType.RAPTOR) and p.size_b > p.size_g:
            raise ValueError("code parameter error: size_b > size_g")
        if p.size_b <= 0 or p.size_g <= 0:
            raise ValueError("size_b and size_g must be positive")
        if p.size_g > self.snum + self.cnum:
            raise ValueError("size_g exceeds the number of packets")

    def _group_packets(self):
        if self.gnum is None:
            return
        grouping = {
            CodeType.RAND: self._group_rand,
            CodeType.BAND: self._group_band,
            CodeType.WINDWRAP: self._group_windwrap,
        }[self.params.type]
        self.subgenerations = [grouping(i) for i in range(self.gnum)]

    def _random_index(self, num_p):
        return self._rng.genrand_int32() % num_p

    def _group_rand(self, gid):
        num_p = self.snum + self.cnum
        size_b = self.params.size_b
        ids = []
        for j in range(size_b):
            index = (gid * size_b + j) % num_p
            while index in ids:
                index = self._random_index(num_p)
            ids.append(index)
        for _ in range(size_b, self.params.size_g):
            index = self._random_index(num_p)
            while index in ids:
                index = self._random_index(num_p)
            ids.append(index)
        return ids

    def _group_band(self, gid):
        num_p = self.snum + self.cnum
        lead = gid * self.params.size_b
        if lead > num_p - self.params.size_g:
            logger.debug("band lead of gid %d is modified", gid)
            lead = num_p - self.params.size_g
        return list(range(lead, lead + self.params.size_g))

    def _group_windwrap(self, gid):
        num_p = self.snum + self.cnum
        lead = gid * self.params.size_b
        return [(lead + j) % num_p for j in range(self.params.size_g)]

    def _new_batch(self):
        num_p = self.snum + self.cnum
        ids = []
        while len(ids) < self.params.size_g:
            index = self._random_index(num_p)
            if index not in ids:
                ids.append(index)
        self.subgenerations.append(ids)

    def _load_bytes(self, data):
        p = self.params
        if len(data) < p.datasize:
            raise ValueError(f"expected {p.datasize} bytes of data, got {len(data)}")
        for i in range(self.snum):
            chunk = data[i * p.size_p:min((i + 1) * p.size_p, p.datasize)]
            packet = bytearray(p.size_p)
            packet[:len(chunk)] = chunk
            self.packets[i] = packet
        for i in range(self.cnum):
            self.packets[self.snum + i] = bytearray(p.size_p)

    def load_file(self, path, start):
        """Load ``datasize`` bytes of the file at ``path`` from offset ``start``."""
        with open(path, "rb") as fp:
            fp.seek(0, os.SEEK_END)
            if fp.tell() - start < self.params.datasize:
                raise ValueError(f"{path} holds fewer than {self.params.datasize} bytes after offset {start}")
            fp.seek(start)
            data = fp.read(self.params.datasize)
        self._load_bytes(data)

    # -- encoding -----------------------------------------------------

    def generate_packet(self):
        """Return a new coded packet."""
        if any(packet is None for packet in self.packets):
            raise ValueError("no data loaded into the context")
        p = self.params
        if p.type in _FIXED_SUBSET_TYPES:
            return self._encode(self._schedule_generation())
        if p.type == CodeType.BATS:
            if self._current_batch == -1 or self._batch_sent >= p.size_b:
                self._current_batch += 1
                self._batch_sent = 0
            while len(self.subgenerations) <= self._current_batch:
                self._new_batch()
            packet = self._encode(self._current_batch)
            self._batch_sent += 1
            return packet
        raise ValueError(f"packet generation is not available for {p.type.name} codes")

    def _encode(self, gid):
        p = self.params
        packet = SncPacket.empty(p)
        packet.gid = gid
        if p.sys and self.count < self.snum:
            packet.syms[:] = self.packets[self.count]
            packet.gid = -1
            packet.ucid = self.count
            self.count += 1
            return packet

        power = self.gfpower
        for i, pktid in enumerate(self.subgenerations[gid]):
            co = self._rng.genrand_int32() % (1 << power)
            if power == 1:
                if co == 1:
                    _set_bit(packet.coes, i)
            elif power == 8:
                packet.coes[i] = co
            else:
                _pack_bits(packet.coes, co, power, i)
            if power in (1, 8):
                self.field.multiply_add_region(packet.syms, self.packets[pktid], co)
            else:
                _galois2n_multiply_add_region(self.field, packet.syms, self.packets[pktid], co)
        packet.ucid = -1
        self.count += 1
        return packet

    def _schedule_generation(self):
        if self.gnum == 1:
            return 0
        if os.environ.get("SNC_NONUNIFORM_RAND", "").strip() == "1":
            return self._banded_nonuniform_schedule()
        return self._sched_rng.randrange(self.gnum)

    def _banded_nonuniform_schedule(self):
        """End subgenerations get weight G+1, inner ones weight 2."""
        m = self.snum + self.cnum
        g = self.params.size_g
        upper = 2 * (g + 1) + 2 * (m - g - 1)
        selected = self._sched_rng.randrange(upper) + 1
        if selected <= g + 1:
            return 0
        if selected > g + 1 + 2 * (m - g - 1):
            return self.gnum - 1
        return (selected - (g + 1)) // 2 + 1

    # -- recovery -----------------------------------------------------

    def recover_data(self):
        """Return the original data from the source packets."""
        sources = self.packets[:self.snum]
        if any(packet is None for packet in sources):
            raise ValueError("source packets are not available")
        return b"".join(bytes(packet) for packet in sources)[:self.params.datasize]

    def recover_to_file(self, path):
        """Append the original data to the file at ``path``; return bytes written."""
        data = self.recover_data()
        with open(path, "ab") as fp:
            fp.write(data)
        return len(data)

    def code_summary(self, overhead, operations):
        """Return a one-line description of the code and, if given, its decoding cost."""
        p = self.params
        type_names = {
            CodeType.RAND: "RAND",
            CodeType.BAND: "BAND",
            CodeType.WINDWRAP: "WINDWRAP",
            CodeType.BATS: "BATS",
        }
        type_name = type_names.get(p.type, "UNKNOWN")
        hdpc = os.environ.get("SNC_PRECODE") == "HDPC"
        if p.size_c == 0:
            precode = "NoPrecode"
        else:
            precode = ("Binary" if p.bpc else "NonBinary") + ("HDPC" if hdpc else "LDPC")
        systematic = "Systematic" if p.sys else "NonSystematic"
        parts = [
            f"datasize: {p.datasize}",
            f"size_p: {p.size_p}",
            f"snum: {self.snum}",
            f"size_c: {p.size_c}",
        ]
        if p.type == CodeType.BATS:
            parts += [f"BTS: {p.size_b}", f"batch-degree: {p.size_g}"]
        else:
            parts += [f"size_b: {p.size_b}", f"size_g: {p.size_g}"]
        parts.append(f"type: [{type_name}::GF(2^{p.gfpower})::{precode}::{systematic}]")
        gnum = self._current_batch + 1 if p.type == CodeType.BATS else self.gnum
        parts.append(f"gnum: {gnum}")
        if operations != 0:
            parts += [f"overhead: {overhead:.6f}", f"computation: {operations:.4f}"]
        return " ".join(parts)