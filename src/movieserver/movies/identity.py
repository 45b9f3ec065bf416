"""
=============================================================================
MOVIE IDENTIFIERS
=============================================================================

A movie's id is a pure function of its name:

    "Inception" ──utf-8──► b"Inception" + b"\\xff" ──SipHash-1-3(key 0,0)──► u64 ──► str

The trailing 0xff byte frames the string so that the hash of a name never
equals the hash of a prefix-plus-suffix split of it. Year and was_good do
not take part, so posting the same name again replaces the earlier record.

The key is fixed at zero: ids must be stable across processes and restarts.
Two names that collide share one record.

=============================================================================
"""

import struct

from .model import MovieId


_MASK = 0xFFFFFFFFFFFFFFFF

_NAME_TERMINATOR = b"\xff"


def _rotl(x: int, b: int) -> int:
    return ((x << b) | (x >> (64 - b))) & _MASK


def _sipround(v0: int, v1: int, v2: int, v3: int) -> tuple[int, int, int, int]:
    v0 = (v0 + v1) & _MASK
    v1 = _rotl(v1, 13) ^ v0
    v0 = _rotl(v0, 32)
    v2 = (v2 + v3) & _MASK
    v3 = _rotl(v3, 16) ^ v2
    v0 = (v0 + v3) & _MASK
    v3 = _rotl(v3, 21) ^ v0
    v2 = (v2 + v1) & _MASK
    v1 = _rotl(v1, 17) ^ v2
    v2 = _rotl(v2, 32)
    return v0, v1, v2, v3


def siphash(data: bytes, k0: int = 0, k1: int = 0, c_rounds: int = 1, d_rounds: int = 3) -> int:
    """
    SipHash-c-d of data under the 128-bit key (k0, k1).

    The defaults give SipHash-1-3 with a zero key. c_rounds=2, d_rounds=4
    is the SipHash-2-4 of the reference paper.

    Returns:
        The 64-bit hash as a non-negative int.
    """
    v0 = k0 ^ 0x736F6D6570736575
    v1 = k1 ^ 0x646F72616E646F6D
    v2 = k0 ^ 0x6C7967656E657261
    v3 = k1 ^ 0x7465646279746573

    length = len(data)
    end = length - (length % 8)

    for (m,) in struct.iter_unpack("<Q", data[:end]):
        v3 ^= m
        for _ in range(c_rounds):
            v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
        v0 ^= m

    b = ((length & 0xFF) << 56) | int.from_bytes(data[end:], "little")
    v3 ^= b
    for _ in range(c_rounds):
        v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)
    v0 ^= b

    v2 ^= 0xFF
    for _ in range(d_rounds):
        v0, v1, v2, v3 = _sipround(v0, v1, v2, v3)

    return v0 ^ v1 ^ v2 ^ v3


def generate_movie_id(name: str) -> MovieId:
    """
    Derive the id of a movie from its name.

        generate_movie_id("Inception") == generate_movie_id("Inception")

    Returns:
        Decimal string of an unsigned 64-bit hash.
    """
    return str(siphash(name.encode("utf-8") + _NAME_TERMINATOR))
