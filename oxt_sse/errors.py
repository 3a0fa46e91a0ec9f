"""
Exception taxonomy for the SSE core.

- Configuration errors: bad q range, empty keyword list, bad modulus. Raised before any crypto work.
- Group-arithmetic errors: broken modulus / parameter choice. Unrecoverable, never retried.
- Integrity errors: ciphertext or index payload failed verification. Never swallowed.
Lookup misses (unknown tag, short pattern) are not errors; they produce empty results.
"""


class SSEError(Exception):
    """Base class for all errors raised by oxt_sse."""


class ConfigurationError(SSEError, ValueError):
    """Invalid parameters passed to a call (q range, empty query, modulus)."""


class GroupArithmeticError(SSEError):
    """Modular arithmetic failed; indicates a broken modulus or parameter choice."""


class NotInvertible(GroupArithmeticError):
    """gcd(a, modulus) != 1, so a has no inverse."""

    def __init__(self, value: int, modulus: int):
        super().__init__(f"value is not invertible modulo {modulus}")
        self.value = value
        self.modulus = modulus


class NoGeneratorFound(GroupArithmeticError):
    """None of the small candidates generates the group for this prime."""

    def __init__(self, modulus: int):
        super().__init__(f"no generator found for modulus {modulus}")
        self.modulus = modulus


class IntegrityError(SSEError):
    """Authenticated decryption failed: wrong key, wrong tag, or tampered ciphertext."""


class IndexSealedError(SSEError):
    """The encrypted index is read-only once set up."""


class IndexFormatError(SSEError, ValueError):
    """A persisted index could not be parsed."""
