from .index import BasicIndex, EncryptedIndex
from .server import BasicServer, OXTServer
from .index_backend import IndexBackend, JsonIndexBackend, SqliteIndexBackend

__all__ = [
    "BasicIndex",
    "EncryptedIndex",
    "BasicServer",
    "OXTServer",
    "IndexBackend",
    "JsonIndexBackend",
    "SqliteIndexBackend",
]
