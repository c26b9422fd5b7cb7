"""
SearchSettings defaults, environment overrides, and validation.
"""

import pytest
from pydantic import ValidationError

from poster_search.config import SearchSettings


def test_defaults():
	s = SearchSettings()
	assert s.similarity_threshold == 0.35
	assert s.artist_similarity_threshold == 0.3
	assert s.venue_similarity_threshold == 0.2
	assert (s.single_term_limit, s.complex_limit, s.strict_limit) == (20, 50, 100)
	assert s.min_query_length == 2
	assert not s.parallel_combinations


def test_environment_override(monkeypatch):
	monkeypatch.setenv("POSTER_SEARCH_ARTIST_SIMILARITY_THRESHOLD", "0.45")
	monkeypatch.setenv("POSTER_SEARCH_PARALLEL_COMBINATIONS", "true")
	s = SearchSettings()
	assert s.artist_similarity_threshold == 0.45
	assert s.parallel_combinations


@pytest.mark.parametrize("field, value", [("similarity_threshold", 1.5), ("venue_similarity_threshold", -0.1)])
def test_thresholds_must_be_unit_interval(field, value):
	with pytest.raises(ValidationError):
		SearchSettings(**{field: value})


@pytest.mark.parametrize("field", ["single_term_limit", "complex_limit", "strict_limit", "max_workers"])
def test_limits_must_be_positive(field):
	with pytest.raises(ValidationError):
		SearchSettings(**{field: 0})
