"""
Document model: (identifier, content) pairs, tokenizer and inverted metadata.
Metadata (keyword -> identifiers) exists only at build time; it is never persisted.
"""

import re
from typing import Callable, Dict, Iterable, List, NamedTuple, Set

_NON_WORD = re.compile(r"\W+")


class Document(NamedTuple):
    doc_id: str
    content: str


Tokenizer = Callable[[str], Set[str]]


def tokenize(content: str) -> Set[str]:
    """Split on non-word characters, lower-case, drop empties."""
    if not content or not content.strip():
        return set()
    return {t.lower() for t in _NON_WORD.split(content) if t}


def build_metadata(documents: Iterable[Document], tokenizer: Tokenizer = tokenize) -> Dict[str, List[str]]:
    """Keyword -> identifiers containing it; each identifier at most once per keyword."""
    metadata: Dict[str, List[str]] = {}
    for doc_id, content in documents:
        for token in tokenizer(content):
            metadata.setdefault(token, []).append(doc_id)
    for k in metadata:
        metadata[k] = list(dict.fromkeys(metadata[k]))
    return metadata


class Database:
    """Ordered document collection plus the tokenizer used to index it."""

    def __init__(self, documents: Iterable, tokenizer: Tokenizer = tokenize):
        self.documents: List[Document] = [Document(*d) for d in documents]
        self.tokenizer = tokenizer

    def get_metadata(self) -> Dict[str, List[str]]:
        return build_metadata(self.documents, self.tokenizer)

    def __len__(self) -> int:
        return len(self.documents)

    def __iter__(self):
        return iter(self.documents)
