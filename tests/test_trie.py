import random

import pytest
from sanajahti.trie import InvalidWord, PrefixIndex, Status


def _walk_is_word(index: PrefixIndex, word: str) -> bool:
    node = index.root()
    for ch in word:
        node = index.child(node, ch)
        if node is None:
            return False
    return index.is_word(node)


def test_every_inserted_word_is_marked():
    words = ["CAT", "CAR", "CARE", "ART", "CARTS", "A"]
    index = PrefixIndex.build(words)
    for w in words:
        assert _walk_is_word(index, w)


def test_insertion_order_and_duplicates_do_not_matter():
    words = ["KALA", "KALAT", "KAL", "TALO", "TALOT"]
    shuffled = words * 3
    random.Random(7).shuffle(shuffled)

    a = PrefixIndex.build(words)
    b = PrefixIndex.build(shuffled)
    assert len(a) == len(b) == len(words)
    assert a.node_count() == b.node_count()
    for w in words:
        assert _walk_is_word(b, w)


def test_non_words_are_not_marked():
    index = PrefixIndex.build(["CARE", "CAT"])
    # Prefix of a word, extension of a word, unrelated string
    for s in ["CA", "CAR", "CARES", "DOG", "C"]:
        assert not _walk_is_word(index, s)
        assert s not in index


def test_child_returns_none_for_dead_prefix():
    index = PrefixIndex.build(["CAT"])
    c = index.child(index.root(), "C")
    assert c is not None
    assert index.child(c, "X") is None
    assert index.child(index.root(), "Z") is None


def test_root_is_not_a_word():
    index = PrefixIndex.build(["AB"])
    assert not index.is_word(index.root())


def test_empty_word_rejected():
    with pytest.raises(InvalidWord):
        PrefixIndex.build(["CAT", ""])


def test_word_status():
    index = PrefixIndex.build(["CAR", "CARE"])
    assert index.word_status("CAR") is Status.WORD
    assert index.word_status("CARE") is Status.WORD
    assert index.word_status("CA") is Status.POSSIBLE
    assert index.word_status("CAX") is Status.IMPOSSIBLE
    assert index.word_status("CARES") is Status.IMPOSSIBLE
    assert index.has_prefix("C")
    assert not index.has_prefix("Q")


def test_empty_index():
    index = PrefixIndex.build([])
    assert len(index) == 0
    assert index.node_count() == 1
    assert index.word_status("") is Status.IMPOSSIBLE
    assert "A" not in index


def test_node_sharing():
    # CAT, CAR, CARE share C-A: root + C + A + T + R + E
    index = PrefixIndex.build(["CAT", "CAR", "CARE"])
    assert index.node_count() == 6


def test_contains_ignores_non_strings():
    index = PrefixIndex.build(["CAT"])
    assert 42 not in index
    assert None not in index


def test_finnish_letters():
    index = PrefixIndex.build(["ÄITI", "PÖYTÄ", "SÅG"])
    assert "PÖYTÄ" in index
    assert index.word_status("ÄI") is Status.POSSIBLE


def test_no_public_insert():
    index = PrefixIndex.build(["CAT"])
    assert not hasattr(index, "insert")
