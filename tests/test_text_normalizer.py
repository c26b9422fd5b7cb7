"""
Unit tests for query cleanup, stop-word filtering, and spelling variants.
"""

from poster_search.text_normalizer import filter_stop_words, generate_spelling_variants, validate_and_clean


def test_validate_rejects_empty_and_short():
	assert validate_and_clean(None) is None
	assert validate_and_clean("") is None
	assert validate_and_clean("   ") is None
	assert validate_and_clean("a") is None
	assert validate_and_clean(" a ") is None


def test_validate_trims_and_collapses():
	assert validate_and_clean("  Grateful    Dead \t Seattle ") == "Grateful Dead Seattle"
	assert validate_and_clean("ab") == "ab"


def test_stop_words_removed():
	assert filter_stop_words("Phish or Goose") == "Phish Goose"
	assert filter_stop_words("the Grateful Dead at the Fillmore") == "Grateful Dead Fillmore"


def test_stop_words_are_case_insensitive():
	assert filter_stop_words("Phish AND Goose") == "Phish Goose"


def test_single_character_tokens_dropped():
	assert filter_stop_words("Phish a Goose") == "Phish Goose"


def test_filter_never_destroys_query():
	assert filter_stop_words("the") == "the"
	assert filter_stop_words("or and") == "or and"
	assert filter_stop_words("a b") == "a b"


def test_variants_for_punctuated_name():
	variants = generate_spelling_variants("AC/DC")
	assert variants[0] == "AC/DC"
	assert "AC DC" in variants
	assert "ACDC" in variants
	assert len(variants) == len(set(variants))


def test_variants_for_all_caps():
	variants = generate_spelling_variants("RHCP")
	assert "R H C P" in variants
	assert "R/H/C/P" in variants


def test_variants_for_spaced_caps():
	variants = generate_spelling_variants("A C D C")
	assert "ACDC" in variants
	assert "A/C/D/C" in variants


def test_variants_for_dotted_abbreviation():
	variants = generate_spelling_variants("N.W.A")
	assert "NWA" in variants
	assert "N W A" in variants


def test_variants_plain_word():
	assert generate_spelling_variants("Phish") == ["Phish"]
	assert generate_spelling_variants("") == []
