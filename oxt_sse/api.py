"""
Library entry points for front ends.

    keys, index = setup(documents)
    ids = query(index, keys, ["fig", "apple"])          # pivot first
    keys, index, counts = substring_setup(documents)
    ids = substring_query(index, keys, "nan", token_counts=counts)
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .client import BooleanQueryScheme, SubstringQueryScheme, tokenize
from .client.document import Tokenizer
from .crypto import GroupParams, KeyCollection
from .server import EncryptedIndex


def setup(
    documents: Iterable,
    tokenizer: Tokenizer = tokenize,
    group: Optional[GroupParams] = None,
) -> Tuple[KeyCollection, EncryptedIndex]:
    """Build an OXT index for (id, content) documents. Returns (client keys, encrypted index)."""
    scheme = BooleanQueryScheme(tokenizer=tokenizer, group=group)
    index = scheme.setup(documents)
    return scheme.keys, index


def query(
    index: EncryptedIndex,
    keys: KeyCollection,
    keywords: Sequence[str],
    group: Optional[GroupParams] = None,
    max_occurrences: int = config.MAX_OCCURRENCES,
) -> List[str]:
    """Conjunctive keyword search; keywords[0] is the pivot."""
    return BooleanQueryScheme(group=group, max_occurrences=max_occurrences, keys=keys).search(index, keywords)


def substring_setup(
    documents: Iterable,
    q_min: int = config.Q_MIN,
    q_max: int = config.Q_MAX,
    boundary_char: str = config.BOUNDARY_CHAR,
    group: Optional[GroupParams] = None,
) -> Tuple[KeyCollection, EncryptedIndex, Dict[str, int]]:
    """Build a substring index. Also returns token -> posting-list size for pivot selection."""
    scheme = SubstringQueryScheme(q_min=q_min, q_max=q_max, boundary_char=boundary_char, group=group)
    keys, index = scheme.setup_with_keys(documents)
    return keys, index, scheme.token_counts


def substring_query(
    index: EncryptedIndex,
    keys: KeyCollection,
    pattern: str,
    q_min: int = config.Q_MIN,
    q_max: int = config.Q_MAX,
    token_counts: Optional[Mapping[str, int]] = None,
    boundary_char: str = config.BOUNDARY_CHAR,
    group: Optional[GroupParams] = None,
    max_occurrences: int = config.MAX_OCCURRENCES,
) -> List[str]:
    """Substring search. q_min/q_max/boundary_char must match the values used at build time."""
    scheme = SubstringQueryScheme(
        q_min=q_min,
        q_max=q_max,
        boundary_char=boundary_char,
        group=group,
        max_occurrences=max_occurrences,
        keys=keys,
        token_counts=token_counts,
    )
    return scheme.search(index, pattern)
