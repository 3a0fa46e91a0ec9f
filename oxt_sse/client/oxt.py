"""
Oblivious Cross-Tags (OXT) conjunctive search, client side (Cash et al. 2013).

Build: for each keyword w and each identifier ind at shuffled position c, store
    e = Enc(K_e(w), ind),  y = xind(ind) * z(w, c)^-1  (mod p-1)
in w's posting list, and the cross-tag g^(kx(w) * xind(ind)) in the XSet.
Query: stag for the pivot w1, and for every c the xtokens g^(z(w1, c) * kx(wi)).
Since z * y = xind, xtoken^y equals the cross-tag of (wi, ind) exactly when wi occurs in ind;
the server only ever handles group elements.
"""

import logging
import secrets
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .. import config
from ..crypto import (
    GroupParams,
    KeyCollection,
    bytes_to_int,
    decrypt,
    default_group,
    derive_invertible_factor,
    encrypt,
    generate_key_collection,
    mod_inverse,
    mod_multiply,
    randomize,
    randomize_exponent,
)
from ..errors import ConfigurationError
from ..models import PostingEntry, QueryMessage
from ..server import EncryptedIndex, OXTServer
from .document import Database, Tokenizer, tokenize
from .schemes import SearchScheme

logger = logging.getLogger(__name__)


class BooleanQueryScheme(SearchScheme):
    """OXT client: builds the encrypted index, issues conjunctive queries, decrypts results."""

    name = "boolean"

    def __init__(
        self,
        tokenizer: Tokenizer = tokenize,
        group: Optional[GroupParams] = None,
        max_occurrences: int = config.MAX_OCCURRENCES,
        keys: Optional[KeyCollection] = None,
    ):
        if max_occurrences < 1:
            raise ConfigurationError("max_occurrences must be at least 1")
        self._tokenizer = tokenizer
        self._group = group or default_group()
        self._max_occurrences = max_occurrences
        self._keys = keys
        self._rng = secrets.SystemRandom()

    @property
    def group(self) -> GroupParams:
        return self._group

    @property
    def keys(self) -> KeyCollection:
        if self._keys is None or not self._keys.search_tag_key:
            raise ConfigurationError("No key material; call setup() first")
        return self._keys

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def setup(self, documents: Iterable) -> EncryptedIndex:
        """Tokenize `documents` and build a fresh index. Keys are kept on this instance."""
        metadata = Database(documents, self._tokenizer).get_metadata()
        _, index = self.setup_from_metadata(metadata)
        return index

    def setup_from_metadata(self, metadata: Mapping[str, Sequence[str]]) -> Tuple[KeyCollection, EncryptedIndex]:
        """Build from a keyword -> identifiers map. Generates new keys every call."""
        keys = generate_key_collection()
        self._keys = keys
        order = self._group.order
        posting_lists: Dict[str, List[PostingEntry]] = {}
        cross_tags = set()

        for keyword, identifiers in metadata.items():
            identifier_key = randomize(keys.doc_enc_key_seed, keyword)
            kx = self._cross_tag_factor(keyword)
            shuffled = list(dict.fromkeys(identifiers))
            self._rng.shuffle(shuffled)
            postings: List[PostingEntry] = []
            for c, ind in enumerate(shuffled):
                xind = self._cross_identifier(ind)
                z = derive_invertible_factor(keys.counter_key, keyword, c, order)
                y = mod_multiply(xind, mod_inverse(z, order), order)
                postings.append(PostingEntry(encrypt(identifier_key, ind), y))
                cross_tags.add(self._group.exp(mod_multiply(kx, xind, order)))
            posting_lists[keyword] = postings

        index = EncryptedIndex(cross_tags)
        self._keys = keys._replace(search_tag_key=index.setup(posting_lists))
        logger.info(
            "Built OXT index: %d keywords, %d postings, %d cross-tags",
            len(posting_lists), index.posting_count, index.cross_tag_count,
        )
        return self._keys, index

    def _cross_identifier(self, identifier: str) -> int:
        xind = randomize_exponent(self._keys.doc_index_key, identifier, self._group.modulus) % self._group.order
        return xind or 1

    def _cross_tag_factor(self, keyword: str) -> int:
        kx = bytes_to_int(randomize(self._keys.cross_tag_key, keyword)) % self._group.order
        return kx or 1

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def generate_query(self, keywords: Sequence[str]) -> QueryMessage:
        """
        stag for keywords[0] (the pivot) plus xtokens for every occurrence index up to the cap.
        Put the most selective keyword first; the result set does not depend on the order.
        """
        if not keywords:
            raise ConfigurationError("Query needs at least one keyword")
        keys = self.keys
        pivot, rest = keywords[0], list(keywords[1:])
        search_tag = randomize(keys.search_tag_key, pivot)
        if not rest:
            return QueryMessage(search_tag, {0: []})

        order = self._group.order
        factors = [self._cross_tag_factor(w) for w in rest]
        test_token_sets: Dict[int, List[int]] = {}
        for c in range(self._max_occurrences):
            z = derive_invertible_factor(keys.counter_key, pivot, c, order)
            test_token_sets[c] = [self._group.exp(mod_multiply(z, kx, order)) for kx in factors]
        logger.debug("Generated query: %d conjuncts, %d token sets", len(rest), len(test_token_sets))
        return QueryMessage(search_tag, test_token_sets)

    def decrypt_identifier(self, pivot: str, encrypted_id: bytes) -> str:
        """Raises IntegrityError on a key/tag mismatch."""
        return decrypt(randomize(self.keys.doc_enc_key_seed, pivot), encrypted_id)

    def search(self, index: Union[EncryptedIndex, OXTServer], query: Union[str, Sequence[str]]) -> List[str]:
        """Conjunctive search; `query` is a keyword or a keyword list with the pivot first."""
        keywords = [query] if isinstance(query, str) else list(query)
        message = self.generate_query(keywords)
        server = index if isinstance(index, OXTServer) else OXTServer(index, self._group)
        return [self.decrypt_identifier(keywords[0], e) for e in server.process_query(message)]
