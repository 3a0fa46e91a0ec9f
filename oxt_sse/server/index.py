"""
Encrypted index structures held by the untrusted server.

- EncryptedIndex (OXT): TSet mapping opaque search tags to posting lists, plus the XSet of
  cross-tags. Built once via setup(); read-only afterwards, so concurrent reads need no lock.
- BasicIndex: label -> encrypted identifier map for the single-keyword scheme.
Neither structure ever sees a plaintext keyword or identifier.
"""

import base64
import logging
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..crypto import generate_key, randomize
from ..errors import IndexSealedError
from ..models import PostingEntry

logger = logging.getLogger(__name__)

_EMPTY: Tuple[PostingEntry, ...] = ()


def encode_tag(search_tag: bytes) -> str:
    """Base64 form of a search tag; the TSet is keyed by this."""
    return base64.b64encode(search_tag).decode("ascii")


class EncryptedIndex:
    """OXT encrypted index: TSet (stag -> posting list) and XSet (cross-tags)."""

    def __init__(self, cross_tags: Iterable[int] = ()):
        self._cross_tags: FrozenSet[int] = frozenset(cross_tags)
        self._posting_lists: Dict[str, Tuple[PostingEntry, ...]] = {}
        self._sealed = False

    @classmethod
    def from_components(
        cls,
        posting_lists: Mapping[str, Sequence[PostingEntry]],
        cross_tags: Iterable[int],
    ) -> "EncryptedIndex":
        """Rebuild a sealed index from persisted state (tokens already base64 search tags)."""
        index = cls(cross_tags)
        index._posting_lists = {token: tuple(entries) for token, entries in posting_lists.items()}
        index._sealed = True
        return index

    def setup(self, keyword_posting_lists: Mapping[str, Sequence[PostingEntry]]) -> bytes:
        """
        Generate K_S, re-key every posting list under randomize(K_S, keyword) and store it.
        Returns K_S; the client keeps it to derive search tags. Callable once.
        """
        if self._sealed:
            raise IndexSealedError("Encrypted index is already set up")
        search_tag_key = generate_key()
        for keyword, postings in keyword_posting_lists.items():
            token = encode_tag(randomize(search_tag_key, keyword))
            self._posting_lists[token] = tuple(postings)
        self._sealed = True
        logger.info(
            "Encrypted index sealed: %d posting lists, %d postings, %d cross-tags",
            self.keyword_count, self.posting_count, self.cross_tag_count,
        )
        return search_tag_key

    def retrieve_posting_list(self, search_tag: bytes) -> Tuple[PostingEntry, ...]:
        """Exact lookup by stag. Unknown tags give an empty tuple, not an error."""
        return self._posting_lists.get(encode_tag(search_tag), _EMPTY)

    def contains_membership_tag(self, candidate: Optional[int]) -> bool:
        """XSet membership test."""
        if candidate is None:
            return False
        return candidate in self._cross_tags

    def iter_posting_lists(self):
        """Yield (base64 token, postings). Used by persistence backends."""
        yield from self._posting_lists.items()

    @property
    def cross_tags(self) -> FrozenSet[int]:
        return self._cross_tags

    @property
    def keyword_count(self) -> int:
        return len(self._posting_lists)

    @property
    def posting_count(self) -> int:
        return sum(len(p) for p in self._posting_lists.values())

    @property
    def cross_tag_count(self) -> int:
        return len(self._cross_tags)


class BasicIndex:
    """Basic scheme index: PRF label -> encrypted identifier. Static after construction."""

    def __init__(self, entries: Mapping[bytes, bytes]):
        self._entries: Dict[bytes, bytes] = dict(entries)

    def get(self, label: bytes) -> Optional[bytes]:
        return self._entries.get(label)

    def __len__(self) -> int:
        return len(self._entries)

    def labels(self) -> List[bytes]:
        return list(self._entries)
