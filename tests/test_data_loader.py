"""
Catalog loading: JSON documents to InMemoryCatalog, with bad records skipped.
"""

import json
from datetime import date

import pytest

from poster_search.catalog import CatalogDataError
from poster_search.data_loader import DataLoader

from conftest import ROOT


def write_catalog(tmp_path, document):
	path = tmp_path / "catalog.json"
	path.write_text(json.dumps(document), encoding="utf-8")
	return path


def test_load_bundled_catalog():
	catalog = DataLoader().load_catalog(ROOT / "data" / "posters.json")
	assert len(catalog.artists()) == 8
	assert len(catalog.posters_map) == 10
	# The draft poster is loaded but hidden
	assert 10 in catalog.posters_map
	assert catalog.poster(10) is None
	assert [p.id for p in catalog.active_posters()] == list(range(1, 10))


def test_load_from_file(tmp_path):
	path = write_catalog(tmp_path, {
		"artists": [{"id": 1, "name": "  Phish  "}],
		"venues": [{"id": 1, "name": "Madison Square Garden", "city": "New York", "state": "NY"}],
		"events": [{"id": 1, "name": "NYE", "date": "2024-12-31T20:00:00", "venue_id": 1, "artist_ids": "1"}],
		"posters": [{"id": 1, "title": "Phish NYE", "artist_ids": [1], "event_ids": "1"}],
	})
	catalog = DataLoader().load_catalog(path)
	assert catalog.artist(1).name == "Phish"
	assert catalog.venue(1).state == "NY"
	assert catalog.venue(1).country == ""
	assert catalog.event(1).date == date(2024, 12, 31)
	assert catalog.event(1).artist_ids == (1,)
	poster = catalog.poster(1)
	assert poster.status == "active"
	assert poster.event_ids == (1,)
	assert poster.description == ""


def test_invalid_records_are_skipped(tmp_path):
	path = write_catalog(tmp_path, {
		"artists": [{"id": 1, "name": "Phish"}, {"name": "No id"}, "not an object"],
		"events": [{"id": 1, "date": "2024-02-30"}, {"id": 2, "date": "2024-03-01"}],
		"posters": [{"id": "x", "title": "Bad id"}, {"id": 2, "title": "Good"}],
	})
	catalog = DataLoader().load_catalog(path)
	assert [a.id for a in catalog.artists()] == [1]
	assert list(catalog.events_map) == [2]
	assert [p.id for p in catalog.active_posters()] == [2]


def test_missing_file_raises(tmp_path):
	with pytest.raises(CatalogDataError):
		DataLoader().load_catalog(tmp_path / "nope.json")


def test_invalid_json_raises(tmp_path):
	path = tmp_path / "broken.json"
	path.write_text("{not json", encoding="utf-8")
	with pytest.raises(CatalogDataError):
		DataLoader().load_catalog(path)


@pytest.mark.parametrize("document", [[], {"artists": []}, {"posters": {}}, {"posters": [], "events": "1,2"}])
def test_malformed_document_raises(document):
	with pytest.raises(CatalogDataError):
		DataLoader().load_document(document)
