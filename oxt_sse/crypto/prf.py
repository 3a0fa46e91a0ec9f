"""
Keyed pseudorandom functions (HMAC-SHA256).

- derive_key: PRF over (context, index); used for counter factors and Basic-scheme subkeys.
- randomize: PRF over an integer counter or a string; raw 32-byte output.
- randomize_exponent: PRF output mapped into [1, p-1] for use as a group exponent.
- derive_invertible_factor: PRF output adjusted until coprime to p-1, so its inverse exists.
"""

from math import gcd
from typing import Union

from Crypto.Hash import HMAC, SHA256

from ..errors import ConfigurationError
from .group import bytes_to_int


def _encode(value: Union[int, str]) -> bytes:
    if isinstance(value, int):
        return value.to_bytes(8, "big")
    return value.encode("utf-8")


def derive_key(master_key: bytes, context: str, index: int) -> bytes:
    """HMAC-SHA256(master_key, utf8(context) || index as 8-byte big-endian)."""
    h = HMAC.new(master_key, digestmod=SHA256)
    h.update(context.encode("utf-8"))
    h.update(index.to_bytes(8, "big"))
    return h.digest()


def randomize(key: bytes, value: Union[int, str]) -> bytes:
    """PRF keyed by `key` over an integer counter or a string."""
    h = HMAC.new(key, digestmod=SHA256)
    h.update(_encode(value))
    return h.digest()


def randomize_exponent(key: bytes, value: Union[int, str], p: int) -> int:
    """PRF output mapped into [1, p-1]."""
    if p <= 2:
        raise ConfigurationError("p must be greater than 2 for Z_p*")
    return bytes_to_int(randomize(key, value)) % (p - 1) + 1


def derive_invertible_factor(key: bytes, keyword: str, counter: int, order: int) -> int:
    """
    Per-(keyword, counter) exponent z with gcd(z, order) == 1.
    Starts from the PRF value, coerces to >= 2 and increments (wrapping to 2) until coprime.
    """
    z = bytes_to_int(derive_key(key, keyword, counter)) % order
    if z <= 1:
        z = 2
    while gcd(z, order) != 1:
        z += 1
        if z >= order:
            z = 2
    return z
