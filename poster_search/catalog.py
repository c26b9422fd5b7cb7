"""
Catalog access module.
Read-only lookups over posters, artists, venues, and events used by the search strategies.
The engine only depends on the CatalogFacade protocol; InMemoryCatalog is the bundled implementation.
"""

from datetime import date  # event date bounds
from typing import Dict, Iterable, List, Optional, Protocol, Sequence  # type hints

# Console logging
from loguru import logger  # console logger

from .models import Artist, Event, Poster, Venue  # catalog records
from .similarity import extract_similar, trigram_similarity  # fuzzy name lookup


class CatalogUnavailableError(RuntimeError):
	"""Raised when the backing store cannot be read at all."""


class CatalogDataError(ValueError):
	"""Raised when catalog source data is missing or structurally invalid."""


class CatalogFacade(Protocol):
	"""
	What the search engine needs from a catalog.
	Only posters in "active" status are ever returned by the poster accessors.
	"""

	def active_posters(self) -> Sequence[Poster]: ...

	def poster(self, poster_id: int) -> Optional[Poster]: ...

	def artist(self, artist_id: int) -> Optional[Artist]: ...

	def artists(self) -> Sequence[Artist]: ...

	def venue(self, venue_id: int) -> Optional[Venue]: ...

	def event(self, event_id: int) -> Optional[Event]: ...

	def find_artists_by_name(self, name: str, threshold: float = 0.3) -> List[Artist]: ...

	def find_venues_by_name(self, text: str, threshold: float = 0.3) -> List[Venue]: ...

	def find_events_by_date(
		self,
		year: Optional[int] = None,
		month: Optional[int] = None,
		day: Optional[int] = None,
		venue_ids: Optional[Iterable[int]] = None,
	) -> List[Event]: ...

	def find_events_between(self, start: date, end: date) -> List[Event]: ...

	def find_posters_linking(
		self,
		artist_ids: Optional[Iterable[int]] = None,
		event_ids: Optional[Iterable[int]] = None,
	) -> List[Poster]: ...

	def count_posters_matching(self, text: str, threshold: float = 0.35) -> int: ...

	def posters_matching(self, text: str, threshold: float = 0.35, offset: int = 0, limit: int = 20) -> List[Poster]: ...


class InMemoryCatalog:
	"""
	Catalog held in plain dictionaries keyed by id.
	Built once and never mutated, so concurrent searches can share it.
	"""

	def __init__(
		self,
		artists: Iterable[Artist] = (),
		venues: Iterable[Venue] = (),
		events: Iterable[Event] = (),
		posters: Iterable[Poster] = (),
	):
		# Quick lookup tables: id -> record
		self.artists_map: Dict[int, Artist] = {a.id: a for a in artists}
		self.venues_map: Dict[int, Venue] = {v.id: v for v in venues}
		self.events_map: Dict[int, Event] = {e.id: e for e in events}
		self.posters_map: Dict[int, Poster] = {p.id: p for p in posters}
		self._active = sorted((p for p in self.posters_map.values() if p.is_active), key=lambda p: p.id)

		logger.info(
			f"[Catalog] Ready | artists={len(self.artists_map)} venues={len(self.venues_map)} "
			f"events={len(self.events_map)} posters={len(self.posters_map)} active={len(self._active)}"
		)

	def active_posters(self) -> Sequence[Poster]:
		return list(self._active)

	def poster(self, poster_id: int) -> Optional[Poster]:
		poster = self.posters_map.get(poster_id)
		return poster if poster is not None and poster.is_active else None

	def artist(self, artist_id: int) -> Optional[Artist]:
		return self.artists_map.get(artist_id)

	def artists(self) -> Sequence[Artist]:
		return list(self.artists_map.values())

	def venue(self, venue_id: int) -> Optional[Venue]:
		return self.venues_map.get(venue_id)

	def event(self, event_id: int) -> Optional[Event]:
		return self.events_map.get(event_id)

	def find_artists_by_name(self, name: str, threshold: float = 0.3) -> List[Artist]:
		"""
		Artists matching a name, best tier first:
		case-insensitive equality, then substring containment, then trigram similarity above threshold.
		"""
		needle = (name or "").strip().lower()
		if not needle:
			return []

		exact, contains = [], []
		for artist in self.artists_map.values():
			artist_name = artist.name.lower()
			if artist_name == needle:
				exact.append(artist)
			elif needle in artist_name:
				contains.append(artist)

		seen = {a.id for a in exact + contains}
		choices = {a.id: a.name for a in self.artists_map.values() if a.id not in seen}
		fuzzy = [self.artists_map[artist_id] for artist_id, _ in extract_similar(name, choices, threshold, inclusive=False)]

		found = exact + contains + fuzzy
		logger.debug(
			f"[Catalog] Artists for '{name}': exact={len(exact)} contains={len(contains)} fuzzy={len(fuzzy)}"
		)
		return found

	def find_venues_by_name(self, text: str, threshold: float = 0.3) -> List[Venue]:
		"""Venues whose name or city contains the text, then venues whose name or city is similar to it."""
		needle = (text or "").strip().lower()
		if not needle:
			return []

		contains = [v for v in self.venues_map.values() if needle in v.name.lower() or needle in v.city.lower()]
		seen = {v.id for v in contains}
		scored = []
		for venue in self.venues_map.values():
			if venue.id in seen:
				continue
			score = max(trigram_similarity(venue.name, text), trigram_similarity(venue.city, text))
			if score >= threshold:
				scored.append((score, venue))
		scored.sort(key=lambda sv: (-sv[0], sv[1].id))
		return contains + [v for _, v in scored]

	def find_events_by_date(
		self,
		year: Optional[int] = None,
		month: Optional[int] = None,
		day: Optional[int] = None,
		venue_ids: Optional[Iterable[int]] = None,
	) -> List[Event]:
		"""Events whose date equals every component given, optionally held at one of the venues; None means no constraint."""
		matches = []
		wanted_venues = set(venue_ids) if venue_ids is not None else None
		for event in self.events_map.values():
			if year is not None and event.year != year:
				continue
			if month is not None and event.month != month:
				continue
			if day is not None and event.day != day:
				continue
			if wanted_venues is not None and event.venue_id not in wanted_venues:
				continue
			matches.append(event)
		return sorted(matches, key=lambda e: e.id)

	def find_events_between(self, start: date, end: date) -> List[Event]:
		"""Events dated within [start, end], inclusive."""
		return sorted((e for e in self.events_map.values() if start <= e.date <= end), key=lambda e: e.id)

	def find_posters_linking(
		self,
		artist_ids: Optional[Iterable[int]] = None,
		event_ids: Optional[Iterable[int]] = None,
	) -> List[Poster]:
		"""
		Active posters linked to at least one of the artists AND at least one of the events.
		Passing None for either side drops that constraint; an empty collection matches nothing.
		"""
		wanted_artists = set(artist_ids) if artist_ids is not None else None
		wanted_events = set(event_ids) if event_ids is not None else None

		results = []
		for poster in self._active:
			if wanted_artists is not None and not wanted_artists.intersection(poster.artist_ids):
				continue
			if wanted_events is not None and not wanted_events.intersection(poster.event_ids):
				continue
			results.append(poster)
		return results

	def posters_matching(self, text: str, threshold: float = 0.35, offset: int = 0, limit: int = 20) -> List[Poster]:
		"""One page of active posters whose title or description is similar to the text, best first."""
		scored = []
		for poster in self._active:
			score = max(trigram_similarity(poster.title, text), trigram_similarity(poster.description, text))
			if score >= threshold:
				scored.append((score, poster))
		scored.sort(key=lambda sp: (-sp[0], sp[1].id))
		return [p for _, p in scored[offset:offset + limit]]

	def count_posters_matching(self, text: str, threshold: float = 0.35) -> int:
		return len(self.posters_matching(text, threshold, limit=len(self._active)))
