"""
Basic single-keyword scheme (Cash et al. 2013).
Per keyword: label key K1 = F(K, w||1), identifier key K2 = F(K, w||2);
entry c is stored as F(K1, c) -> Enc(K2, ind). Search hands (K1, K2) to the server.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from ..crypto import derive_key, encrypt, generate_key, randomize
from ..errors import ConfigurationError
from ..server import BasicIndex, BasicServer
from .document import Database, Tokenizer, tokenize
from .schemes import SearchScheme

logger = logging.getLogger(__name__)

LABEL_KEY_INDEX = 1
IDENTIFIER_KEY_INDEX = 2


class BasicScheme(SearchScheme):
    name = "basic"

    def __init__(self, tokenizer: Tokenizer = tokenize, master_key: Optional[bytes] = None):
        self._tokenizer = tokenizer
        self._master_key = master_key

    @property
    def master_key(self) -> bytes:
        if self._master_key is None:
            raise ConfigurationError("No key material; call setup() first")
        return self._master_key

    def setup(self, documents: Iterable) -> BasicIndex:
        self._master_key = generate_key()
        metadata = Database(documents, self._tokenizer).get_metadata()
        entries: Dict[bytes, bytes] = {}
        for keyword, identifiers in metadata.items():
            label_key, identifier_key = self.derive_search_keys(keyword)
            for counter, identifier in enumerate(identifiers):
                entries[randomize(label_key, counter)] = encrypt(identifier_key, identifier)
        # ordered by label, not by keyword
        index = BasicIndex(dict(sorted(entries.items())))
        logger.info("Built basic index: %d keywords, %d entries", len(metadata), len(index))
        return index

    def derive_search_keys(self, keyword: str) -> Tuple[bytes, bytes]:
        return (
            derive_key(self.master_key, keyword, LABEL_KEY_INDEX),
            derive_key(self.master_key, keyword, IDENTIFIER_KEY_INDEX),
        )

    def search(self, index: BasicIndex, query: str) -> List[str]:
        label_key, identifier_key = self.derive_search_keys(query)
        return list(BasicServer(index).find(label_key, identifier_key))
