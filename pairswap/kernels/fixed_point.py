"""
Bounded-width integer helpers and UQ112x112 fixed-point encoding.

Python integers are unbounded, so every width the pool relies on is enforced
here explicitly:
- reserves are checked against 112 bits and rejected (never wrapped),
- timestamps live modulo 2**32 (wrapping is intended),
- oracle accumulators live modulo 2**256 (wrapping is intended).
"""

from __future__ import annotations

from fractions import Fraction

from ..errors import InvalidParameters, ReserveOverflow


RESOLUTION = 112
Q112 = 1 << RESOLUTION

UINT32_MODULUS = 1 << 32
UINT112_MAX = (1 << 112) - 1
UINT224_MAX = (1 << 224) - 1
UINT256_MODULUS = 1 << 256


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_uint112(name: str, value: int) -> int:
    """Return `value` if it fits 112 bits, raising ReserveOverflow otherwise."""
    require_int(name, value)
    if value < 0:
        raise InvalidParameters(f"{name} must be non-negative: {value}")
    if value > UINT112_MAX:
        raise ReserveOverflow(f"{name} exceeds uint112: {value}")
    return value


def to_uint32(timestamp: int) -> int:
    """Reduce a timestamp to the 32-bit clock domain."""
    require_int("timestamp", timestamp)
    return timestamp % UINT32_MODULUS


def elapsed_uint32(now: int, last: int) -> int:
    """Seconds between two 32-bit timestamps; a clock wrap is not an error."""
    return (to_uint32(now) - to_uint32(last)) % UINT32_MODULUS


def wrapping_add_uint256(a: int, b: int) -> int:
    return (a + b) % UINT256_MODULUS


def wrapping_sub_uint256(a: int, b: int) -> int:
    return (a - b) % UINT256_MODULUS


def encode_uq112(value: int) -> int:
    """Encode a uint112 as UQ112x112 (never overflows 224 bits)."""
    require_uint112("value", value)
    return value * Q112


def uqdiv(encoded: int, divisor: int) -> int:
    """Floor-divide a UQ112x112 value by a uint112, yielding UQ112x112."""
    require_int("encoded", encoded)
    require_uint112("divisor", divisor)
    if divisor == 0:
        raise InvalidParameters("uqdiv by zero")
    return encoded // divisor


def price_uq112(numerator_reserve: int, denominator_reserve: int) -> int:
    """`(numerator_reserve << 112) // denominator_reserve`, the instantaneous price."""
    return uqdiv(encode_uq112(numerator_reserve), denominator_reserve)


def decode_uq112(value: int) -> Fraction:
    """Exact rational value of a UQ112x112 number."""
    require_int("value", value)
    if value < 0:
        raise InvalidParameters("UQ112x112 values are unsigned")
    return Fraction(value, Q112)
