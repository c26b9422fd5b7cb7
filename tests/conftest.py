"""
Shared fixtures: a small catalog covering the artist, city, date, and misspelling scenarios.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from poster_search.catalog import InMemoryCatalog
from poster_search.config import SearchSettings
from poster_search.date_extractor import DateExtractor
from poster_search.models import Artist, Event, Poster, Venue
from poster_search.search_engine import SearchEngine


TODAY = date(2025, 5, 15)  # a Thursday


def build_catalog() -> InMemoryCatalog:
	artists = [
		Artist(1, "Phish"),
		Artist(2, "Grateful Dead"),
		Artist(3, "Pearl Jam"),
		Artist(4, "AC/DC"),
		Artist(5, "Flying Lotus"),
		Artist(6, "Goose"),
		Artist(8, "Pink Floyd"),
	]
	venues = [
		Venue(1, "Madison Square Garden", "New York", "USA", "NY"),
		Venue(2, "Climate Pledge Arena", "Seattle", "USA", "WA"),
		Venue(3, "TD Garden", "Boston", "USA", "MA"),
		Venue(4, "Red Rocks Amphitheatre", "Morrison", "USA", "CO"),
		Venue(5, "The Forum", "Los Angeles", "USA", "CA"),
	]
	events = [
		Event(1, "New Year's Eve Run", date(2024, 12, 31), venue_id=1, artist_ids=(1,)),
		Event(2, "Summer Tour", date(2023, 7, 14), venue_id=2, artist_ids=(2,)),
		Event(3, "Summer Tour", date(2023, 8, 2), venue_id=3, artist_ids=(2,)),
		Event(4, "Halloween", date(2023, 10, 31), venue_id=1, artist_ids=(3,)),
		Event(5, "Power Up Tour", date(2024, 3, 22), venue_id=5, artist_ids=(4,)),
		Event(6, "Independence Day", date(2025, 7, 4), venue_id=4, artist_ids=(1,)),
		Event(7, "Spring Tour", date(2024, 4, 12), venue_id=3, artist_ids=(6,)),
		Event(8, "Holiday Run", date(2023, 12, 30), venue_id=1, artist_ids=(1,)),
	]
	posters = [
		Poster(1, "Phish New Year's Eve", "Four night run finale", artist_ids=(1,), event_ids=(1,)),
		Poster(2, "Grateful Dead Summer Tour", "Seattle show print", artist_ids=(2,), event_ids=(2,)),
		Poster(3, "Grateful Dead Summer Tour", "Boston show print", artist_ids=(2,), event_ids=(3,)),
		Poster(4, "Pearl Jam Halloween", "Screen printed gig poster", artist_ids=(3,), event_ids=(4,)),
		Poster(5, "AC/DC Power Up", "Arena tour", artist_ids=(4,), event_ids=(5,)),
		Poster(6, "Phish Red Rocks", "Summer run", artist_ids=(1,), event_ids=(6,)),
		Poster(7, "Goose Spring Tour", "Limited edition", artist_ids=(6,), event_ids=(7,)),
		Poster(8, "Flying Lotus", "Art print", artist_ids=(5,)),
		Poster(9, "Phish Holiday Run", "Night one", artist_ids=(1,), event_ids=(8,)),
		Poster(10, "Pink Floyd Animals", "Retired print", status="draft", artist_ids=(8,)),
	]
	return InMemoryCatalog(artists=artists, venues=venues, events=events, posters=posters)


@pytest.fixture
def catalog():
	return build_catalog()


@pytest.fixture
def settings():
	return SearchSettings()


@pytest.fixture
def engine(catalog, settings):
	return SearchEngine(catalog, settings, today=TODAY)


@pytest.fixture
def extractor():
	return DateExtractor(today=TODAY)
