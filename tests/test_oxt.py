"""
OXT conjunctive search tests: single keyword, conjunctions, pivot order, cross-tag algebra,
server-side evaluation and error paths.
"""

import sys
import types
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from oxt_sse import query, setup
from oxt_sse.client import BooleanQueryScheme
from oxt_sse.crypto import (
    GroupParams,
    decrypt,
    derive_invertible_factor,
    randomize,
    randomize_exponent,
)
from oxt_sse.errors import ConfigurationError, IndexSealedError, IntegrityError
from oxt_sse.models import QueryMessage
from oxt_sse.server import EncryptedIndex, OXTServer

CORPUS = [
    ("doc1", "apple banana cherry"),
    ("doc2", "banana cherry date"),
    ("doc3", "apple cherry elderberry"),
    ("doc4", "banana apple fig"),
    ("doc5", "grape apple banana"),
]


@pytest.fixture(scope="module")
def built():
    scheme = BooleanQueryScheme()
    index = scheme.setup(CORPUS)
    return scheme, index


def test_single_keyword_no_result(built):
    scheme, index = built
    assert scheme.search(index, "orange") == []


def test_single_keyword_one_result(built):
    scheme, index = built
    assert scheme.search(index, "grape") == ["doc5"]


def test_single_keyword_multiple_results(built):
    scheme, index = built
    results = scheme.search(index, "apple")
    assert len(results) == len(set(results))
    assert set(results) == {"doc1", "doc3", "doc4", "doc5"}


def test_every_keyword_complete_and_sound(built):
    scheme, index = built
    for word in ("apple", "banana", "cherry", "date", "elderberry", "fig", "grape"):
        expected = {doc_id for doc_id, text in CORPUS if word in text.split()}
        assert set(scheme.search(index, [word])) == expected


def test_two_keywords_multiple_results(built):
    scheme, index = built
    assert set(scheme.search(index, ["apple", "banana"])) == {"doc1", "doc4", "doc5"}


def test_two_keywords_single_result(built):
    scheme, index = built
    assert scheme.search(index, ["apple", "fig"]) == ["doc4"]


def test_two_keywords_no_result(built):
    scheme, index = built
    assert scheme.search(index, ["apple", "date"]) == []


def test_three_keywords_single_result(built):
    scheme, index = built
    assert scheme.search(index, ["apple", "banana", "cherry"]) == ["doc1"]


def test_pivot_order_does_not_change_results(built):
    scheme, index = built
    assert scheme.search(index, ["fig", "apple"]) == scheme.search(index, ["apple", "fig"]) == ["doc4"]
    a = scheme.search(index, ["cherry", "apple", "banana"])
    b = scheme.search(index, ["banana", "cherry", "apple"])
    assert sorted(a) == sorted(b) == ["doc1"]


def test_unknown_non_pivot_keyword(built):
    scheme, index = built
    assert scheme.search(index, ["apple", "orange"]) == []


def test_identifier_roundtrip_from_posting_list(built):
    scheme, index = built
    keys = scheme.keys
    postings = index.retrieve_posting_list(randomize(keys.search_tag_key, "banana"))
    assert len(postings) == 4
    ke = randomize(keys.doc_enc_key_seed, "banana")
    assert {decrypt(ke, p.encrypted_id) for p in postings} == {"doc1", "doc2", "doc4", "doc5"}


def test_counter_factor_cancels_against_y(built):
    scheme, index = built
    keys = scheme.keys
    group = scheme.group
    order = group.order
    postings = index.retrieve_posting_list(randomize(keys.search_tag_key, "cherry"))
    ke = randomize(keys.doc_enc_key_seed, "cherry")
    for c, entry in enumerate(postings):
        ind = decrypt(ke, entry.encrypted_id)
        xind = randomize_exponent(keys.doc_index_key, ind, group.modulus) % order or 1
        z = derive_invertible_factor(keys.counter_key, "cherry", c, order)
        assert z * entry.y % order == xind


def test_xtoken_matches_only_cooccurring_cross_tags(built):
    scheme, index = built
    message = scheme.generate_query(["apple", "fig"])
    postings = index.retrieve_posting_list(message.search_tag)
    p = scheme.group.modulus
    hits = [index.contains_membership_tag(pow(message.test_token_sets[c][0], e.y, p)) for c, e in enumerate(postings)]
    assert hits.count(True) == 1


def test_index_hides_plaintext_keywords(built):
    _, index = built
    tokens = [token for token, _ in index.iter_posting_lists()]
    assert len(tokens) == 7
    assert not any(word in tokens for word in ("apple", "banana", "cherry"))


def test_unknown_search_tag_is_empty(built):
    _, index = built
    assert index.retrieve_posting_list(b"\x00" * 32) == ()


def test_membership_empty_candidate(built):
    _, index = built
    assert index.contains_membership_tag(None) is False
    assert index.contains_membership_tag(0) is False


def test_generate_query_single_keyword(built):
    scheme, _ = built
    message = scheme.generate_query(["apple"])
    assert message.test_token_sets == {0: []}
    assert message.is_single_keyword()


def test_generate_query_token_sets_up_to_cap():
    scheme = BooleanQueryScheme(max_occurrences=16)
    scheme.setup(CORPUS)
    message = scheme.generate_query(["apple", "banana", "cherry"])
    assert sorted(message.test_token_sets) == list(range(16))
    assert all(len(tokens) == 2 for tokens in message.test_token_sets.values())


def test_occurrence_cap_excludes_later_postings():
    scheme = BooleanQueryScheme(max_occurrences=2)
    index = scheme.setup(CORPUS)
    results = scheme.search(index, ["apple", "banana"])
    assert len(results) <= 2
    assert set(results) <= {"doc1", "doc4", "doc5"}
    # single-keyword queries are not bounded by the cap
    assert len(scheme.search(index, "apple")) == 4


def test_process_query_is_lazy(built):
    scheme, index = built
    server = OXTServer(index)
    gen = server.process_query(scheme.generate_query(["apple"]))
    assert isinstance(gen, types.GeneratorType)
    assert len(list(gen)) == 4


def test_missing_token_set_means_no_match(built):
    scheme, index = built
    full = scheme.generate_query(["apple", "banana"])
    partial = QueryMessage(full.search_tag, {c: full.test_token_sets[c] for c in (0, 1)})
    assert len(list(OXTServer(index).process_query(partial))) <= 2
    garbage = QueryMessage(full.search_tag, {c: [1] for c in range(8)})
    assert list(OXTServer(index).process_query(garbage)) == []


def test_empty_keyword_list_rejected(built):
    scheme, index = built
    with pytest.raises(ConfigurationError):
        scheme.generate_query([])
    with pytest.raises(ConfigurationError):
        scheme.search(index, [])


def test_search_before_setup_rejected():
    with pytest.raises(ConfigurationError):
        BooleanQueryScheme().generate_query(["apple"])


def test_index_is_sealed_after_setup(built):
    _, index = built
    with pytest.raises(IndexSealedError):
        index.setup({"apple": []})


def test_wrong_pivot_key_is_integrity_fault(built):
    scheme, index = built
    postings = index.retrieve_posting_list(randomize(scheme.keys.search_tag_key, "apple"))
    with pytest.raises(IntegrityError):
        scheme.decrypt_identifier("banana", postings[0].encrypted_id)


def test_fresh_keys_per_build():
    a = BooleanQueryScheme()
    index_a = a.setup(CORPUS)
    b = BooleanQueryScheme()
    b.setup(CORPUS)
    assert a.keys.counter_key != b.keys.counter_key
    assert a.keys.search_tag_key != b.keys.search_tag_key
    # b's tags do not address a's index
    assert b.search(index_a, "apple") == []


def test_api_setup_and_query():
    keys, index = setup(CORPUS)
    assert isinstance(index, EncryptedIndex)
    assert set(query(index, keys, ["banana", "cherry"])) == {"doc1", "doc2"}
    assert query(index, keys, ["elderberry"]) == ["doc3"]


def test_injected_group_single_keyword():
    group = GroupParams(1019)
    scheme = BooleanQueryScheme(group=group)
    index = scheme.setup(CORPUS)
    assert scheme.group is group
    assert set(scheme.search(index, "apple")) == {"doc1", "doc3", "doc4", "doc5"}
    assert all(0 < tag < 1019 for tag in index.cross_tags)


def test_posting_order_is_shuffled_per_build():
    corpus = [(f"doc{i:02d}", "common") for i in range(20)]
    orders = set()
    for _ in range(5):
        scheme = BooleanQueryScheme(max_occurrences=4)
        index = scheme.setup(corpus)
        postings = index.retrieve_posting_list(randomize(scheme.keys.search_tag_key, "common"))
        orders.add(tuple(scheme.decrypt_identifier("common", p.encrypted_id) for p in postings))
    assert all(sorted(order) == sorted(doc_id for doc_id, _ in corpus) for order in orders)
    # 20! orderings; five builds landing on the same one means no shuffle
    assert len(orders) > 1
