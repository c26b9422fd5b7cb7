"""
Unit tests for the Ranker: combination table, gating, strict mode, ordering.
"""

from poster_search.models import DateInfo, ScoredCandidate
from poster_search.ranking import Ranker, ScoringRequest
from poster_search.term_classifier import TermClassifier


def request_for(text, date_info=None, limit=50, threshold=0.35):
	date_info = date_info or DateInfo()
	classification = TermClassifier().classify(text, date_info)
	return ScoringRequest.from_classification(text, classification, date_info, threshold, limit)


def test_misspelled_artist_single_term(catalog, settings):
	ranked = Ranker(settings).rank(catalog, request_for("phsh"))
	assert ranked == [1, 6, 9]


def test_compound_query_requires_both_components(catalog, settings):
	ranked = Ranker(settings).rank(catalog, request_for("Grateful Dead Seattle"))
	assert ranked[0] == 2
	assert 3 not in ranked


def test_artist_month_day_forced_to_top(catalog, settings):
	d = DateInfo(has_date=True, month=12, day=31, remaining_text="Phish")
	req = request_for("Phish", d)
	req.full_text = "Phish 12/31"
	candidate = Ranker(settings).score(catalog, catalog.poster(1), req)
	assert candidate.artist_month_day_match
	assert candidate.combined_score == 3.0
	# December 30th shares the month only
	assert Ranker(settings).score(catalog, catalog.poster(9), req) is None
	assert Ranker(settings).rank(catalog, req) == [1]


def test_exact_full_date_scores_three(catalog, settings):
	d = DateInfo(has_date=True, year=2023, month=10, day=31)
	req = request_for("", d)
	req.full_text = "10/31/2023"
	candidate = Ranker(settings).score(catalog, catalog.poster(4), req)
	assert candidate.exact_date_match
	assert candidate.combined_score == 3.0
	assert Ranker(settings).rank(catalog, req) == [4]


def test_artist_year_multiplier(catalog, settings):
	d = DateInfo(has_date=True, year=2023)
	req = request_for("Phish", d)
	candidate = Ranker(settings).score(catalog, catalog.poster(9), req)
	assert candidate.artist_year_match
	assert candidate.combined_score == 2.5
	# Phish posters from other years are gated out
	assert Ranker(settings).score(catalog, catalog.poster(1), req) is None
	assert Ranker(settings).rank(catalog, req) == [9]


def test_venue_only_search(catalog, settings):
	ranked = Ranker(settings).rank(catalog, request_for("Madison Square Garden"))
	assert set(ranked[:3]) == {1, 4, 9}


def test_likely_artist_name_only(catalog, settings):
	req = request_for("Flying Lotus")
	candidate = Ranker(settings).score(catalog, catalog.poster(8), req)
	assert candidate.artist_similarity == 1.0
	assert candidate.combined_score == 2.0
	assert Ranker(settings).rank(catalog, req)[0] == 8


def test_inactive_posters_never_ranked(catalog, settings):
	assert 10 not in Ranker(settings).rank(catalog, request_for("Pink Floyd"))


def test_limit_caps_results(catalog, settings):
	assert Ranker(settings).rank(catalog, request_for("phsh", limit=2)) == [1, 6]


def test_strict_artist_city(catalog, settings):
	req = ScoringRequest(
		full_text="Phish New York",
		match_text="Phish new york",
		artist_terms=["Phish"],
		venue_terms=["new york"],
		strict=True,
	)
	assert Ranker(settings).rank(catalog, req) == [1, 9]


def test_strict_artist_city_year(catalog, settings):
	req = ScoringRequest(
		full_text="Phish New York 2023",
		match_text="Phish new york",
		date_info=DateInfo(has_date=True, year=2023),
		artist_terms=["Phish"],
		venue_terms=["new york"],
		strict=True,
	)
	assert Ranker(settings).rank(catalog, req) == [9]


def test_strict_rejects_wrong_city(catalog, settings):
	req = ScoringRequest(
		full_text="Goose Seattle",
		match_text="Goose Seattle",
		artist_terms=["Goose"],
		venue_terms=["Seattle"],
		strict=True,
	)
	assert Ranker(settings).rank(catalog, req) == []


def test_sort_key_prefers_flags_over_score():
	exact = ScoredCandidate(poster_id=5, exact_date_match=True, overall_score=0.1)
	strong = ScoredCandidate(poster_id=1, overall_score=2.9)
	ordered = sorted([strong, exact], key=lambda c: c.sort_key(), reverse=True)
	assert [c.poster_id for c in ordered] == [5, 1]


def test_ties_broken_by_lowest_id():
	a = ScoredCandidate(poster_id=7, overall_score=1.0)
	b = ScoredCandidate(poster_id=3, overall_score=1.0)
	ordered = sorted([a, b], key=lambda c: c.sort_key(), reverse=True)
	assert [c.poster_id for c in ordered] == [3, 7]


def test_artist_and_month_must_both_match(catalog, settings):
	d = DateInfo(has_date=True, month=7, remaining_text="Goose")
	req = request_for("Goose", d)
	req.full_text = "Goose July"
	ranker = Ranker(settings)
	# Other artists' July posters and Goose's April poster are both left out
	assert ranker.score(catalog, catalog.poster(2), req) is None
	assert ranker.score(catalog, catalog.poster(7), req) is None
	assert ranker.rank(catalog, req) == []


def test_artist_and_month_keeps_matching_posters(catalog, settings):
	d = DateInfo(has_date=True, month=12, remaining_text="Phish")
	req = request_for("Phish", d)
	req.full_text = "Phish December"
	assert Ranker(settings).rank(catalog, req) == [1, 9]


def test_venue_signal_disables_artist_year_shortcut(catalog, settings):
	d = DateInfo(has_date=True, year=2023)
	req = request_for("Grateful Dead Seattle", d)
	req.full_text = "Grateful Dead Seattle 2023"
	assert req.has_venue_signal
	ranker = Ranker(settings)
	# Boston poster: right artist and year, wrong city
	assert ranker.score(catalog, catalog.poster(3), req) is None
	assert ranker.rank(catalog, req)[0] == 2
