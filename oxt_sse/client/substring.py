"""
Substring search over OXT (SUB-OXT style, Faber et al.).

Documents are indexed under q-gram and adjacency tokens; a substring query becomes a
conjunctive OXT query over the pattern's tokens. Matches follow token co-occurrence, not a
verified substring check, so rare false positives are possible; adjacency tokens bound them.
The client keeps token -> posting-list size for pivot choice. Those gram tokens are fragments
of document text; identifiers and whole documents are not kept.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .. import config
from ..crypto import GroupParams, KeyCollection
from ..crypto.ngrams import document_tokens, pattern_tokens
from ..errors import ConfigurationError
from ..server import EncryptedIndex
from .document import Document
from .oxt import BooleanQueryScheme
from .schemes import SearchScheme

logger = logging.getLogger(__name__)


def validate_q_range(q_min: int, q_max: int, boundary_char: str) -> None:
    if q_min < 2:
        raise ConfigurationError("q_min must be at least 2")
    if q_max < q_min:
        raise ConfigurationError("q_max must be >= q_min")
    if len(boundary_char) != 1:
        raise ConfigurationError("boundary_char must be a single character")


def build_token_metadata(
    documents: Iterable, q_min: int, q_max: int, boundary_char: str
) -> Dict[str, List[str]]:
    """Token -> identifiers whose padded text produces that token (presence only)."""
    metadata: Dict[str, List[str]] = {}
    for doc_id, content in (Document(*d) for d in documents):
        for token in document_tokens(content, q_min, q_max, boundary_char):
            metadata.setdefault(token, []).append(doc_id)
    for k in metadata:
        metadata[k] = list(dict.fromkeys(metadata[k]))
    return metadata


def order_by_selectivity(tokens: List[str], token_counts: Optional[Mapping[str, int]]) -> List[str]:
    """Move the token with the smallest known posting list to the front. Unknown tokens sort last."""
    if not tokens or not token_counts:
        return list(tokens)
    pivot = min(tokens, key=lambda t: token_counts.get(t, float("inf")))
    return [pivot] + [t for t in tokens if t != pivot]


class SubstringQueryScheme(SearchScheme):
    """Substring scheme composed over a BooleanQueryScheme."""

    name = "substring"

    def __init__(
        self,
        q_min: int = config.Q_MIN,
        q_max: int = config.Q_MAX,
        boundary_char: str = config.BOUNDARY_CHAR,
        group: Optional[GroupParams] = None,
        max_occurrences: int = config.MAX_OCCURRENCES,
        keys: Optional[KeyCollection] = None,
        token_counts: Optional[Mapping[str, int]] = None,
    ):
        validate_q_range(q_min, q_max, boundary_char)
        self.q_min = q_min
        self.q_max = q_max
        self.boundary_char = boundary_char
        self._boolean = BooleanQueryScheme(group=group, max_occurrences=max_occurrences, keys=keys)
        self._token_counts: Dict[str, int] = dict(token_counts or {})

    @property
    def keys(self) -> KeyCollection:
        return self._boolean.keys

    @property
    def token_counts(self) -> Dict[str, int]:
        return dict(self._token_counts)

    def setup(self, documents: Iterable) -> EncryptedIndex:
        _, index = self.setup_with_keys(documents)
        return index

    def setup_with_keys(self, documents: Iterable) -> Tuple[KeyCollection, EncryptedIndex]:
        metadata = build_token_metadata(documents, self.q_min, self.q_max, self.boundary_char)
        self._token_counts = {token: len(ids) for token, ids in metadata.items()}
        logger.info("Substring index: %d distinct tokens (q=%d..%d)", len(metadata), self.q_min, self.q_max)
        return self._boolean.setup_from_metadata(metadata)

    def query_tokens(self, pattern: str) -> List[str]:
        """Tokens for `pattern`, pivot first. Empty for empty or too-short patterns."""
        if not pattern:
            return []
        return order_by_selectivity(pattern_tokens(pattern, self.q_min, self.q_max), self._token_counts)

    def search(self, index: EncryptedIndex, query: str) -> List[str]:
        tokens = self.query_tokens(query)
        if not tokens:
            return []
        logger.debug("Substring query with %d tokens", len(tokens))
        return self._boolean.search(index, tokens)
