"""
Index storage backends: JSON file (pydantic-validated) and SQLite.

Persisted layout: posting lists keyed by base64 search tag, each posting as
(ciphertext, exponent bytes); cross-tags as big-endian integer encodings.
Occurrence order within a posting list is preserved; OXT test tokens depend on it.
"""

import base64
import sqlite3
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, ValidationError

from ..crypto import bytes_to_int, int_to_bytes
from ..errors import IndexFormatError
from ..models import PostingEntry
from .index import EncryptedIndex

FORMAT_VERSION = 1


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


class PostingRecord(BaseModel):
    e: str  # base64 ciphertext (iv || tag || ct)
    y: str  # base64 big-endian exponent


class IndexDocument(BaseModel):
    version: int = FORMAT_VERSION
    posting_lists: Dict[str, List[PostingRecord]]
    cross_tags: List[str]

    @classmethod
    def from_index(cls, index: EncryptedIndex) -> "IndexDocument":
        return cls(
            posting_lists={
                token: [PostingRecord(e=_b64(p.encrypted_id), y=_b64(int_to_bytes(p.y))) for p in postings]
                for token, postings in index.iter_posting_lists()
            },
            cross_tags=sorted(_b64(int_to_bytes(tag)) for tag in index.cross_tags),
        )

    def to_index(self) -> EncryptedIndex:
        if self.version != FORMAT_VERSION:
            raise IndexFormatError(f"Unsupported index format version {self.version}")
        try:
            posting_lists = {
                token: [PostingEntry(_unb64(r.e), bytes_to_int(_unb64(r.y))) for r in records]
                for token, records in self.posting_lists.items()
            }
            cross_tags = [bytes_to_int(_unb64(t)) for t in self.cross_tags]
        except ValueError as e:
            raise IndexFormatError(f"Malformed index payload: {e}") from e
        return EncryptedIndex.from_components(posting_lists, cross_tags)


class IndexBackend:
    """Abstract backend persisting a sealed EncryptedIndex."""

    def save(self, index: EncryptedIndex) -> None:
        """Replace any stored index with `index`."""
        raise NotImplementedError

    def load(self) -> EncryptedIndex:
        """Load the stored index. Raises FileNotFoundError when nothing is stored."""
        raise NotImplementedError

    def size_bytes(self) -> int:
        """Size of the persisted artifact (index growth metric)."""
        raise NotImplementedError

    def close(self) -> None:
        """Release resources."""
        pass


class JsonIndexBackend(IndexBackend):
    """Whole index as one JSON document."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def save(self, index: EncryptedIndex) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        doc = IndexDocument.from_index(index)
        with open(self._path, "w", encoding="utf-8") as f:
            f.write(doc.model_dump_json())

    def load(self) -> EncryptedIndex:
        if not self._path.exists():
            raise FileNotFoundError(self._path)
        with open(self._path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            doc = IndexDocument.model_validate_json(raw)
        except ValidationError as e:
            raise IndexFormatError(f"Invalid index file {self._path}: {e}") from e
        return doc.to_index()

    def size_bytes(self) -> int:
        return self._path.stat().st_size if self._path.exists() else 0


class SqliteIndexBackend(IndexBackend):
    """
    SQLite-backed index: one row per posting (token, position) and one per cross-tag.
    Scales past what fits comfortably in a single JSON document.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._path), check_same_thread=False)
        self._conn.execute(
            "CREATE TABLE IF NOT EXISTS postings (token TEXT NOT NULL, position INTEGER NOT NULL, "
            "e BLOB NOT NULL, y BLOB NOT NULL, PRIMARY KEY (token, position))"
        )
        self._conn.execute("CREATE TABLE IF NOT EXISTS cross_tags (tag BLOB PRIMARY KEY)")
        self._conn.execute("CREATE TABLE IF NOT EXISTS meta (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        self._conn.commit()

    def save(self, index: EncryptedIndex) -> None:
        with self._conn:
            self._conn.execute("DELETE FROM postings")
            self._conn.execute("DELETE FROM cross_tags")
            self._conn.execute(
                "INSERT OR REPLACE INTO meta (key, value) VALUES ('version', ?)", (str(FORMAT_VERSION),)
            )
            for token, postings in index.iter_posting_lists():
                self._conn.executemany(
                    "INSERT INTO postings (token, position, e, y) VALUES (?, ?, ?, ?)",
                    [(token, c, p.encrypted_id, int_to_bytes(p.y)) for c, p in enumerate(postings)],
                )
            self._conn.executemany(
                "INSERT INTO cross_tags (tag) VALUES (?)",
                [(int_to_bytes(tag),) for tag in index.cross_tags],
            )

    def load(self) -> EncryptedIndex:
        row = self._conn.execute("SELECT value FROM meta WHERE key = 'version'").fetchone()
        if row is None:
            raise FileNotFoundError(self._path)
        if int(row[0]) != FORMAT_VERSION:
            raise IndexFormatError(f"Unsupported index format version {row[0]}")
        posting_lists: Dict[str, List[PostingEntry]] = {}
        cur = self._conn.execute("SELECT token, e, y FROM postings ORDER BY token, position")
        for token, e, y in cur:
            posting_lists.setdefault(token, []).append(PostingEntry(bytes(e), bytes_to_int(bytes(y))))
        cross_tags = [bytes_to_int(bytes(tag)) for (tag,) in self._conn.execute("SELECT tag FROM cross_tags")]
        return EncryptedIndex.from_components(posting_lists, cross_tags)

    def size_bytes(self) -> int:
        return self._path.stat().st_size if self._path.exists() else 0

    def close(self) -> None:
        self._conn.close()
