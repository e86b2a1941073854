# dailyluck/core/hashing.py
"""
64-bit DJB2-style string hash used by the luck calculator.

The fold runs over UTF-16 code units, not code points: characters outside
the BMP contribute two units (a surrogate pair).
"""
from __future__ import annotations

HASH_SEED = 5381
HASH_MASK = (1 << 64) - 1
HASH_FINAL_XOR = 0xA98F501BC684032F


def _code_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def hash_string(text: str) -> int:
    """Return the unsigned 64-bit hash of ``text``."""
    value = HASH_SEED
    for unit in _code_units(text):
        value = ((value << 5) ^ value ^ unit) & HASH_MASK
    return value ^ HASH_FINAL_XOR
