"""
Unit tests for trigram similarity and candidate extraction.
"""

import pytest

from poster_search.similarity import best_similarity, extract_similar, trigram_similarity, trigrams


def test_trigrams_pad_each_word():
	assert trigrams("cat") == frozenset({"  c", " ca", "cat", "at "})
	assert trigrams("a b") == frozenset({"  a", " a ", "  b", " b "})


def test_trigrams_ignore_case_and_punctuation():
	assert trigrams("AC/DC") == trigrams("ac dc")


def test_identical_strings_score_one():
	assert trigram_similarity("Phish", "phish") == 1.0


def test_misspelling_scores_partially():
	assert trigram_similarity("phsh", "Phish") == pytest.approx(3 / 8)


def test_empty_side_scores_zero():
	assert trigram_similarity("", "Phish") == 0.0
	assert trigram_similarity(None, "Phish") == 0.0
	assert trigram_similarity("!!!", "Phish") == 0.0


def test_similarity_is_symmetric():
	assert trigram_similarity("Grateful Dead", "grateful") == trigram_similarity("grateful", "Grateful Dead")


def test_score_cutoff_zeroes_weak_scores():
	assert trigram_similarity("phsh", "Phish", score_cutoff=0.5) == 0.0
	assert trigram_similarity("phsh", "Phish", score_cutoff=0.3) == pytest.approx(0.375)


def test_best_similarity_takes_max():
	assert best_similarity("Grateful Dead", ["Seattle", "Grateful Dead"]) == 1.0
	assert best_similarity("", ["x"]) == 0.0
	assert best_similarity("Phish", []) == 0.0


def test_extract_similar_orders_and_filters():
	choices = {1: "Phish", 2: "Grateful Dead", 3: "Fish"}
	found = extract_similar("phish", choices, 0.3)
	keys = [k for k, _ in found]
	assert keys[0] == 1
	assert 2 not in keys


def test_extract_similar_exclusive_threshold():
	choices = {1: "Phish"}
	assert extract_similar("phsh", choices, 0.375, inclusive=True) == [(1, pytest.approx(0.375))]
	assert extract_similar("phsh", choices, 0.375, inclusive=False) == []
