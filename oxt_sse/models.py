"""Shared message and record types exchanged between client and server."""
from typing import Dict, List, NamedTuple


class PostingEntry(NamedTuple):
    """One (keyword, occurrence) entry: encrypted identifier and y = xind * z^-1 mod (p-1)."""
    encrypted_id: bytes
    y: int


class QueryMessage(NamedTuple):
    """
    Client -> server OXT query.
    search_tag: stag for the pivot keyword.
    test_token_sets: occurrence index c -> xtokens for the non-pivot keywords.
    """
    search_tag: bytes
    test_token_sets: Dict[int, List[int]]

    def is_single_keyword(self) -> bool:
        return not any(self.test_token_sets.values())
