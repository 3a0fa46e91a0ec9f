"""
Substring search tests: q-gram tokenization, pivot selection and end-to-end scenarios.
"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from oxt_sse import substring_query, substring_setup
from oxt_sse.client import SubstringQueryScheme
from oxt_sse.client.substring import build_token_metadata, order_by_selectivity
from oxt_sse.crypto.ngrams import document_tokens, extract_qgrams, pattern_tokens
from oxt_sse.errors import ConfigurationError

CORPUS = [
    ("doc1", "apple banana cherry"),
    ("doc2", "banana cherry date"),
    ("doc3", "apple cherry elderberry"),
    ("doc4", "banana apple fig"),
    ("doc5", "grape apple banana"),
    ("doc6", "appliance repair guide"),
]


@pytest.fixture(scope="module")
def built():
    scheme = SubstringQueryScheme(q_min=3, q_max=5)
    index = scheme.setup(CORPUS)
    return scheme, index


def test_extract_qgrams():
    assert extract_qgrams("apple", 3) == ["app", "ppl", "ple"]
    assert extract_qgrams("ap", 3) == []
    assert extract_qgrams("", 3) == []


def test_document_tokens_padding_and_adjacency():
    tokens = document_tokens("ab", 3, 3, "#")
    assert tokens == {
        "G:3:##a", "G:3:#ab", "G:3:ab#", "G:3:b##",
        "A:3:##a|#ab", "A:3:#ab|ab#", "A:3:ab#|b##",
    }


def test_document_tokens_skip_all_boundary_grams():
    tokens = document_tokens("x", 3, 4, "#")
    assert not any(t.split(":", 2)[2].strip("#|") == "" for t in tokens)
    assert "G:4:###x" in tokens
    assert "G:3:#x#" in tokens


def test_pattern_tokens():
    assert pattern_tokens("apple", 3, 5) == ["G:5:apple"]
    assert pattern_tokens("NAN", 3, 5) == ["G:3:nan"]
    assert pattern_tokens("banana", 3, 5) == ["G:5:banan", "G:5:anana", "A:5:banan|anana"]
    assert pattern_tokens("ap", 3, 5) == []


def test_order_by_selectivity():
    counts = {"a": 5, "b": 1, "c": 3}
    assert order_by_selectivity(["a", "b", "c"], counts) == ["b", "a", "c"]
    assert order_by_selectivity(["x", "a"], {"a": 5}) == ["a", "x"]
    assert order_by_selectivity(["x", "y"], None) == ["x", "y"]


def test_token_metadata_presence_only():
    metadata = build_token_metadata([("d1", "aaaa aaaa")], 3, 3, "#")
    assert metadata["G:3:aaa"] == ["d1"]


def test_token_counts_recorded(built):
    scheme, _ = built
    counts = scheme.token_counts
    assert counts["G:5:apple"] == 4
    assert counts["G:4:appl"] == 5


def test_search_whole_word(built):
    scheme, index = built
    assert set(scheme.search(index, "apple")) == {"doc1", "doc3", "doc4", "doc5"}


def test_search_internal_substring(built):
    scheme, index = built
    assert set(scheme.search(index, "nan")) == {"doc1", "doc2", "doc4", "doc5"}


def test_search_short_pattern_empty(built):
    scheme, index = built
    assert scheme.search(index, "ap") == []
    assert scheme.search(index, "") == []


def test_search_no_match(built):
    scheme, index = built
    assert scheme.search(index, "xyz") == []


def test_search_elder(built):
    scheme, index = built
    assert scheme.search(index, "elder") == ["doc3"]


def test_search_prefix_shared_with_other_word(built):
    scheme, index = built
    assert set(scheme.search(index, "appl")) == {"doc1", "doc3", "doc4", "doc5", "doc6"}


def test_search_pattern_longer_than_q_max(built):
    scheme, index = built
    assert set(scheme.search(index, "banana")) == {"doc1", "doc2", "doc4", "doc5"}
    assert scheme.search(index, "elderberry") == ["doc3"]


def test_search_across_word_boundary(built):
    scheme, index = built
    assert set(scheme.search(index, "e ban")) == {"doc1", "doc5"}


def test_search_is_case_insensitive(built):
    scheme, index = built
    assert set(scheme.search(index, "APPLE")) == {"doc1", "doc3", "doc4", "doc5"}


def test_invalid_q_range_rejected():
    with pytest.raises(ConfigurationError):
        SubstringQueryScheme(q_min=1, q_max=3)
    with pytest.raises(ConfigurationError):
        SubstringQueryScheme(q_min=4, q_max=3)
    with pytest.raises(ConfigurationError):
        SubstringQueryScheme(boundary_char="##")


def test_api_substring_roundtrip():
    keys, index, counts = substring_setup(CORPUS[:5], q_min=3, q_max=5)
    assert set(substring_query(index, keys, "apple", token_counts=counts)) == {"doc1", "doc3", "doc4", "doc5"}
    # pivot choice only affects cost
    assert set(substring_query(index, keys, "cherr")) == {"doc1", "doc2", "doc3"}
    assert substring_query(index, keys, "ap") == []


def test_api_substring_custom_boundary_char():
    keys, index, counts = substring_setup(CORPUS[:5], boundary_char="$")
    assert substring_query(index, keys, "elder", token_counts=counts, boundary_char="$") == ["doc3"]
    with pytest.raises(ConfigurationError):
        substring_query(index, keys, "elder", boundary_char="$$")
