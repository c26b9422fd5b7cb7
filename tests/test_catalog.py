"""
InMemoryCatalog lookups used by the strategies.
"""

from datetime import date


def test_active_posters_exclude_drafts(catalog):
	ids = [p.id for p in catalog.active_posters()]
	assert ids == [1, 2, 3, 4, 5, 6, 7, 8, 9]
	assert catalog.poster(10) is None
	assert catalog.poster(404) is None


def test_find_artists_exact_before_contains(catalog):
	assert [a.id for a in catalog.find_artists_by_name("phish")] == [1]
	assert [a.id for a in catalog.find_artists_by_name("Dead")] == [2]


def test_find_artists_fuzzy(catalog):
	assert [a.id for a in catalog.find_artists_by_name("phsh")] == [1]
	assert catalog.find_artists_by_name("zzyzx") == []
	assert catalog.find_artists_by_name("   ") == []


def test_find_events_by_date_components(catalog):
	assert [e.id for e in catalog.find_events_by_date(month=12, day=31)] == [1]
	assert [e.id for e in catalog.find_events_by_date(year=2023)] == [2, 3, 4, 8]
	assert [e.id for e in catalog.find_events_by_date(year=2023, month=12)] == [8]
	assert catalog.find_events_by_date(month=1, day=1) == []


def test_find_events_between_is_inclusive(catalog):
	events = catalog.find_events_between(date(2023, 7, 14), date(2023, 8, 2))
	assert [e.id for e in events] == [2, 3]


def test_find_posters_linking(catalog):
	assert [p.id for p in catalog.find_posters_linking([1], [1, 8])] == [1, 9]
	assert [p.id for p in catalog.find_posters_linking(None, [4])] == [4]
	assert [p.id for p in catalog.find_posters_linking([2], None)] == [2, 3]
	assert catalog.find_posters_linking([1], []) == []


def test_linking_never_returns_drafts(catalog):
	assert catalog.find_posters_linking([8], None) == []


def test_find_venues_by_name(catalog):
	assert [v.id for v in catalog.find_venues_by_name("garden")] == [1, 3]
	assert [v.id for v in catalog.find_venues_by_name("Seatle")] == [2]
	assert catalog.find_venues_by_name("") == []


def test_find_events_at_venues(catalog):
	assert [e.id for e in catalog.find_events_by_date(year=2023, venue_ids=[1])] == [4, 8]
	assert catalog.find_events_by_date(venue_ids=[]) == []


def test_posters_matching_pages_by_similarity(catalog):
	assert [p.id for p in catalog.posters_matching("Summer Tour")] == [2, 3, 6]
	assert [p.id for p in catalog.posters_matching("Summer Tour", offset=1, limit=1)] == [3]
	assert catalog.count_posters_matching("Summer Tour") == 3
	assert catalog.count_posters_matching("zzyzx") == 0
