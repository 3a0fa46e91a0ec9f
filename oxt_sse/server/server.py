"""
SSE servers: evaluate queries against an encrypted index without decrypting anything.

- OXTServer: looks up the pivot's posting list by stag and tests each entry with xtoken^y in XSet.
- BasicServer: walks PRF labels from counter 0 until a miss.
Results are produced lazily; each call restarts evaluation from scratch.
"""

import logging
from typing import Iterator, Optional

from ..crypto import GroupParams, decrypt, default_group, randomize
from ..models import QueryMessage
from .index import BasicIndex, EncryptedIndex

logger = logging.getLogger(__name__)


class OXTServer:
    """Untrusted server: holds the OXT index; answers conjunctive queries with ciphertexts."""

    def __init__(self, index: EncryptedIndex, group: Optional[GroupParams] = None):
        self._index = index
        self._group = group or default_group()

    @property
    def index(self) -> EncryptedIndex:
        return self._index

    def process_query(self, message: QueryMessage) -> Iterator[bytes]:
        """
        Yield encrypted identifiers of postings that pass every test token.
        Single-keyword queries (no non-empty token sets) yield the whole posting list.
        A posting whose occurrence index has no token set does not match.
        """
        postings = self._index.retrieve_posting_list(message.search_tag)
        logger.debug("Processing query over %d postings", len(postings))
        if message.is_single_keyword():
            for entry in postings:
                yield entry.encrypted_id
            return
        modulus = self._group.modulus
        for c, entry in enumerate(postings):
            xtokens = message.test_token_sets.get(c)
            if not xtokens:
                continue
            if all(self._index.contains_membership_tag(pow(xtoken, entry.y, modulus)) for xtoken in xtokens):
                yield entry.encrypted_id


class BasicServer:
    """Server for the Basic scheme; receives per-keyword label and identifier keys."""

    def __init__(self, index: BasicIndex):
        self._index = index

    def find(self, label_key: bytes, identifier_key: bytes) -> Iterator[str]:
        counter = 0
        encrypted = self._index.get(randomize(label_key, counter))
        while encrypted is not None:
            yield decrypt(identifier_key, encrypted)
            counter += 1
            encrypted = self._index.get(randomize(label_key, counter))
