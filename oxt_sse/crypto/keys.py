"""
Key material for the OXT scheme.

- Five independent 256-bit keys, generated fresh for every index build; never reused.
- K_S (search tag key) is generated by the index store during setup and handed back to the client.
- Keys stay on the client; the server only ever sees derived tags and group elements.
"""

import base64
from typing import Dict, NamedTuple

from Crypto.Random import get_random_bytes

from .. import config

KEY_SIZE = config.KEY_SIZE


class KeyCollection(NamedTuple):
    """Client-held key set. Server never sees any of these."""
    doc_enc_key_seed: bytes  # K_e seed: per-keyword identifier encryption keys
    cross_tag_key: bytes     # K_X: per-keyword cross-tag exponent factor
    doc_index_key: bytes     # K_I: per-document cross-identifier
    counter_key: bytes       # K_Z: per-(keyword, counter) invertible factor
    search_tag_key: bytes    # K_S: returned by EncryptedIndex.setup

    def to_dict(self) -> Dict[str, str]:
        """Base64 fields for the client key file."""
        return {name: base64.b64encode(value).decode("ascii") for name, value in self._asdict().items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "KeyCollection":
        return cls(**{name: base64.b64decode(data[name]) for name in cls._fields})


def generate_key(size: int = KEY_SIZE) -> bytes:
    """Generate a random key using the pycryptodome CSPRNG. No hardcoded keys."""
    return get_random_bytes(size)


def generate_key_collection() -> KeyCollection:
    """Fresh client keys; search_tag_key is filled in after EncryptedIndex.setup."""
    return KeyCollection(
        doc_enc_key_seed=generate_key(),
        cross_tag_key=generate_key(),
        doc_index_key=generate_key(),
        counter_key=generate_key(),
        search_tag_key=b"",
    )
