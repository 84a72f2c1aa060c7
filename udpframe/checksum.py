"""Simple 16-bit two's-complement byte checksum."""

from __future__ import annotations


def calc_checksum(data: bytes) -> int:
    """Return the two's complement of the 16-bit sum of all bytes."""
    return -sum(data) & 0xFFFF


def verify_checksum(data: bytes, checksum: int) -> bool:
    """Tell whether ``checksum`` matches ``data``."""
    return calc_checksum(data) == checksum