"""Searchable Symmetric Encryption: OXT conjunctive keyword search and substring search."""

from .api import query, setup, substring_query, substring_setup
from .client import BasicScheme, BooleanQueryScheme, Document, SubstringQueryScheme
from .crypto import GroupParams, KeyCollection
from .errors import (
    ConfigurationError,
    IntegrityError,
    NoGeneratorFound,
    NotInvertible,
    SSEError,
)
from .server import EncryptedIndex, OXTServer

__version__ = "1.0.0"

__all__ = [
    "setup",
    "query",
    "substring_setup",
    "substring_query",
    "BasicScheme",
    "BooleanQueryScheme",
    "SubstringQueryScheme",
    "Document",
    "GroupParams",
    "KeyCollection",
    "EncryptedIndex",
    "OXTServer",
    "SSEError",
    "ConfigurationError",
    "IntegrityError",
    "NoGeneratorFound",
    "NotInvertible",
]
