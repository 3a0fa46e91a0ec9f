"""
Identifier encryption for posting lists.

- AES-256-GCM with a fresh random IV per call (authenticated encryption).
- Payload layout: iv || tag || ciphertext; the IV is never reused.
- Verification failure raises IntegrityError; it is never swallowed.
"""

from typing import Union

from Crypto.Cipher import AES
from Crypto.Random import get_random_bytes

from ..errors import IntegrityError

IV_SIZE = 16
TAG_SIZE = 16


def encrypt(key: bytes, plaintext: Union[str, bytes]) -> bytes:
    """Encrypt an identifier (str is UTF-8 encoded). Returns iv || tag || ciphertext."""
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")
    iv = get_random_bytes(IV_SIZE)
    cipher = AES.new(key, AES.MODE_GCM, nonce=iv)
    ciphertext, tag = cipher.encrypt_and_digest(plaintext)
    return iv + tag + ciphertext


def decrypt_bytes(key: bytes, payload: bytes) -> bytes:
    """Decrypt a payload (iv || tag || ciphertext)."""
    if len(payload) < IV_SIZE + TAG_SIZE:
        raise IntegrityError("Ciphertext too short")
    iv = payload[:IV_SIZE]
    tag = payload[IV_SIZE : IV_SIZE + TAG_SIZE]
    ciphertext = payload[IV_SIZE + TAG_SIZE :]
    cipher = AES.new(key, AES.MODE_GCM, nonce=iv)
    try:
        return cipher.decrypt_and_verify(ciphertext, tag)
    except ValueError as e:
        raise IntegrityError("Identifier ciphertext failed verification") from e


def decrypt(key: bytes, payload: bytes) -> str:
    """Decrypt a payload back to the identifier string."""
    return decrypt_bytes(key, payload).decode("utf-8")
