"""
Multiplicative group Z_p* arithmetic for OXT cross-tags.

- Fixed 256-bit prime by default; any safe prime p = 2q + 1 can be injected via GroupParams.
- Exponents live in Z_(p-1); values that must be inverted are chosen coprime to p-1.
- Generator chosen deterministically from small candidates.
"""

from typing import Tuple

from ..errors import ConfigurationError, NoGeneratorFound, NotInvertible

PRIME_256 = 89717256085762065735428409900757717635795337683454659872469413210581406231563

GENERATOR_CANDIDATES: Tuple[int, ...] = (2, 3, 5, 7, 11, 13, 17, 19)


def mod_multiply(a: int, b: int, modulus: int) -> int:
    if modulus <= 0:
        raise ConfigurationError("Modulus must be positive")
    return ((a % modulus) * (b % modulus)) % modulus


def mod_pow(base: int, exponent: int, modulus: int) -> int:
    if modulus <= 0:
        raise ConfigurationError("Modulus must be positive")
    return pow(base, exponent, modulus)


def mod_inverse(a: int, modulus: int) -> int:
    """
    Inverse of a modulo `modulus` via the extended Euclidean algorithm.
    Raises NotInvertible when gcd(a, modulus) != 1.
    """
    if modulus <= 1:
        raise ConfigurationError("Modulus must be greater than 1")
    t, new_t = 0, 1
    r, new_r = modulus, a % modulus
    while new_r != 0:
        quotient = r // new_r
        t, new_t = new_t, t - quotient * new_t
        r, new_r = new_r, r - quotient * new_r
    if r != 1:
        raise NotInvertible(a, modulus)
    if t < 0:
        t += modulus
    return t


def find_generator(p: int) -> int:
    """
    Return the first small candidate g with g^((p-1)/2) != 1 and g^((p-1)/q) != 1 (mod p),
    where p = 2q + 1. For a safe prime these are the only two subgroup-order checks needed.
    """
    if p <= 2:
        raise ConfigurationError("p must be greater than 2 for Z_p*")
    q = (p - 1) // 2
    for g in GENERATOR_CANDIDATES:
        if g >= p:
            continue
        if pow(g, (p - 1) // 2, p) != 1 and pow(g, (p - 1) // q, p) != 1:
            return g
    raise NoGeneratorFound(p)


def int_to_bytes(value: int) -> bytes:
    """Unsigned big-endian encoding (at least one byte)."""
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def bytes_to_int(data: bytes) -> int:
    return int.from_bytes(data, "big")


class GroupParams:
    """
    Immutable group configuration: modulus p, exponent order p-1, generator g.
    Injected into schemes so tests can swap in a different safe prime.
    """

    __slots__ = ("_modulus", "_generator")

    def __init__(self, modulus: int = PRIME_256):
        if modulus <= 2:
            raise ConfigurationError("p must be greater than 2 for Z_p*")
        self._modulus = modulus
        self._generator = find_generator(modulus)

    @property
    def modulus(self) -> int:
        return self._modulus

    @property
    def order(self) -> int:
        """Exponent group order, p - 1."""
        return self._modulus - 1

    @property
    def generator(self) -> int:
        return self._generator

    def exp(self, exponent: int) -> int:
        """g^(exponent mod (p-1)) mod p."""
        return pow(self._generator, exponent % self.order, self._modulus)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, GroupParams) and other._modulus == self._modulus

    def __hash__(self) -> int:
        return hash(self._modulus)

    def __repr__(self) -> str:
        return f"GroupParams(bits={self._modulus.bit_length()}, g={self._generator})"


_DEFAULT_GROUP = None


def default_group() -> GroupParams:
    """Shared GroupParams for PRIME_256 (generator computed once)."""
    global _DEFAULT_GROUP
    if _DEFAULT_GROUP is None:
        _DEFAULT_GROUP = GroupParams(PRIME_256)
    return _DEFAULT_GROUP
