"""Cryptographic primitives for OXT Searchable Symmetric Encryption (SSE)."""

from .group import (
    PRIME_256,
    GroupParams,
    default_group,
    find_generator,
    mod_inverse,
    mod_multiply,
    mod_pow,
    int_to_bytes,
    bytes_to_int,
)
from .prf import (
    derive_key,
    randomize,
    randomize_exponent,
    derive_invertible_factor,
)
from .cipher import encrypt, decrypt
from .keys import (
    KeyCollection,
    generate_key,
    generate_key_collection,
)

__all__ = [
    "PRIME_256",
    "GroupParams",
    "default_group",
    "find_generator",
    "mod_inverse",
    "mod_multiply",
    "mod_pow",
    "int_to_bytes",
    "bytes_to_int",
    "derive_key",
    "randomize",
    "randomize_exponent",
    "derive_invertible_factor",
    "encrypt",
    "decrypt",
    "KeyCollection",
    "generate_key",
    "generate_key_collection",
]
