"""
q-gram tokenization for substring search.

- Gram tokens "G:q:gram" for every distinct fixed-length gram, q in [q_min, q_max].
- Adjacency tokens "A:q:gram_i|gram_(i+1)" for consecutive grams; these bound false positives
  from grams that co-occur without being adjacent.
- Document text is lower-cased and padded with (q_max - 1) boundary characters on both ends,
  so prefixes and suffixes produce distinct grams.
"""

from typing import List, Set


def gram_token(q: int, gram: str) -> str:
    return f"G:{q}:{gram}"


def adjacency_token(q: int, first: str, second: str) -> str:
    return f"A:{q}:{first}|{second}"


def extract_qgrams(text: str, q: int) -> List[str]:
    """Overlapping fixed-length grams of `text` (no padding). Empty when text is shorter than q."""
    if not text or len(text) < q:
        return []
    return [text[i : i + q] for i in range(len(text) - q + 1)]


def document_tokens(content: str, q_min: int, q_max: int, boundary_char: str) -> Set[str]:
    """
    Distinct gram and adjacency tokens for one document.
    All-boundary grams are skipped, as are adjacency pairs touching one.
    """
    pad = boundary_char * (q_max - 1)
    padded = pad + content.lower() + pad
    tokens: Set[str] = set()
    for q in range(q_min, q_max + 1):
        grams = extract_qgrams(padded, q)
        boundary = [all(c == boundary_char for c in g) for g in grams]
        for g, is_boundary in zip(grams, boundary):
            if not is_boundary:
                tokens.add(gram_token(q, g))
        for i in range(len(grams) - 1):
            if boundary[i] or boundary[i + 1]:
                continue
            tokens.add(adjacency_token(q, grams[i], grams[i + 1]))
    return tokens


def pattern_tokens(pattern: str, q_min: int, q_max: int) -> List[str]:
    """
    Query tokens for a substring pattern, in gram order then adjacency order.
    Empty when the pattern is shorter than q_min.
    """
    norm = pattern.lower()
    if len(norm) < q_min:
        return []
    q_sel = min(q_max, len(norm))
    grams = extract_qgrams(norm, q_sel)
    tokens = [gram_token(q_sel, g) for g in grams]
    tokens.extend(adjacency_token(q_sel, grams[i], grams[i + 1]) for i in range(len(grams) - 1))
    # duplicates collapse (repeated grams such as "anan" in "ananan")
    return list(dict.fromkeys(tokens))
