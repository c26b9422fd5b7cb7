"""
Ranking module.
Scores every active poster against a query shape, applies the shape-specific inclusion gate,
and orders survivors by exact-match flags first and combined similarity second.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from loguru import logger

from .catalog import CatalogFacade
from .config import SearchSettings
from .models import Artist, DateInfo, Event, Poster, QueryClassification, ScoredCandidate, Venue
from .similarity import best_similarity, trigram_similarity


@dataclass
class ScoringRequest:
	"""
	Everything the ranker needs to know about one query shape.
	full_text is compared against poster title/description; match_text is the date-free remainder.
	"""
	full_text: str
	match_text: str
	date_info: DateInfo = field(default_factory=DateInfo)
	artist_terms: List[str] = field(default_factory=list)
	venue_terms: List[str] = field(default_factory=list)
	token_count: int = 0
	is_potential_artist_venue_search: bool = False
	is_likely_artist_name_only: bool = False
	is_venue_only_search: bool = False
	has_venue_signal: bool = False  # a venue keyword, known city, or multi-word city was seen
	similarity_threshold: float = 0.35
	venue_threshold: Optional[float] = None  # overrides the configured venue cutoff
	limit: int = 50
	strict: bool = False  # every present component must match

	@classmethod
	def from_classification(
		cls,
		full_text: str,
		classification: QueryClassification,
		date_info: DateInfo,
		similarity_threshold: float,
		limit: int,
	) -> "ScoringRequest":
		return cls(
			full_text=full_text,
			match_text=classification.match_text,
			date_info=date_info,
			artist_terms=list(classification.artist_terms),
			venue_terms=list(classification.venue_terms),
			token_count=classification.token_count,
			is_potential_artist_venue_search=classification.is_potential_artist_venue_search,
			is_likely_artist_name_only=classification.is_likely_artist_name_only,
			is_venue_only_search=classification.is_venue_only_search,
			has_venue_signal=classification.is_likely_venue_search or classification.multi_word_city is not None,
			similarity_threshold=similarity_threshold,
			limit=limit,
		)


class Ranker:
	"""
	Computes per-poster relevance from several signals:
	- artist_similarity: best linked artist name vs. the artist candidates (0..1)
	- venue_similarity: best linked venue name/city/state/country vs. the venue candidates (0..1)
	- event_similarity: event name similarity, or fixed scores for exact year (1.0) / month or day (0.9)
	- text_similarity: poster title/description vs. the whole query (0..1)
	"""

	def __init__(self, settings: Optional[SearchSettings] = None):
		self.settings = settings or SearchSettings()
		self.artist_threshold = self.settings.artist_similarity_threshold
		self.venue_threshold = self.settings.venue_similarity_threshold
		self.city_threshold = self.settings.city_similarity_threshold
		self.likely_artist_threshold = self.settings.likely_artist_threshold
		self.likely_artist_gate = self.settings.likely_artist_gate

	def rank(self, catalog: CatalogFacade, request: ScoringRequest) -> List[int]:
		"""Score, gate, order, and cap. Returns poster ids, best first."""
		candidates: List[ScoredCandidate] = []
		seen = set()
		for poster in catalog.active_posters():
			if poster.id in seen:
				continue
			seen.add(poster.id)
			if request.strict:
				candidate = self.score_strict(catalog, poster, request)
			else:
				candidate = self.score(catalog, poster, request)
			if candidate is None:
				continue
			logger.debug(
				f"[Ranker] Candidate kept | poster={poster.id} '{poster.title}' | artist={candidate.artist_similarity:.3f} "
				f"venue={candidate.venue_similarity:.3f} event={candidate.event_similarity:.3f} "
				f"text={candidate.text_similarity:.3f} overall={candidate.overall_score:.3f} all={candidate.matches_all_terms}"
			)
			candidates.append(candidate)

		candidates.sort(key=lambda c: c.sort_key(), reverse=True)
		ranked = [c.poster_id for c in candidates[:request.limit]]
		logger.debug(f"[Ranker] {len(candidates)} candidates passed gating, returning {len(ranked)}")
		return ranked

	# --- Combined scoring -------------------------------------------------------

	def score(self, catalog: CatalogFacade, poster: Poster, request: ScoringRequest) -> Optional[ScoredCandidate]:
		"""Score one poster for the generic query shapes; None when the inclusion gate rejects it."""
		d = request.date_info
		artist_terms = request.artist_terms or [request.match_text]
		venue_terms = request.venue_terms or [request.match_text]
		venue_threshold = request.venue_threshold if request.venue_threshold is not None else self.venue_threshold

		artists = self._artists(catalog, poster)
		events = self._events(catalog, poster)
		venues = self._venues(catalog, events)

		c = ScoredCandidate(poster_id=poster.id)
		c.text_similarity = self._text_similarity(poster, request.full_text)
		c.artist_similarity = max(
			(self._artist_similarity(a, request.match_text, artist_terms, request.is_likely_artist_name_only) for a in artists),
			default=0.0,
		)
		c.venue_similarity = max((self._venue_similarity(v, venue_terms) for v in venues), default=0.0)
		c.exact_venue_match = max(
			(self._exact_venue_match(v, request.match_text, request.is_venue_only_search) for v in venues),
			default=0.0,
		)

		# With a year or a range present only events on the requested dates take part in date scoring
		dated = [e for e in events if self._date_matches(e, d)] if d.has_date and (d.year or d.is_range) else events
		for e in dated:
			self._apply_event(c, e, d, request.full_text)

		month_day_search = d.has_date and d.month is not None and d.day is not None
		artist_month_day_search = month_day_search and bool(request.artist_terms)
		artist_year_search = (
			d.has_date
			and d.year is not None
			and bool(request.artist_terms)
			and d.month is None
			and d.day is None
			and not request.has_venue_signal
		)
		# Artist plus any date ("Goose July", "Phish 2023", "Phish this weekend")
		artist_dated_search = d.has_date and bool(request.artist_terms) and (self._has_date_parts(d) or d.is_range)
		full_date_search = d.has_date and d.has_full_date
		artist_ok = c.artist_similarity >= self.artist_threshold
		venue_ok = c.venue_similarity >= venue_threshold
		venue_only_ok = request.is_venue_only_search and max(c.venue_similarity, c.exact_venue_match) >= venue_threshold
		likely_artist_ok = request.is_likely_artist_name_only and c.artist_similarity >= self.likely_artist_threshold

		c.artist_month_day_match = month_day_search and artist_ok and c.month_day_match
		c.artist_year_match = bool(d.has_date and d.year is not None and artist_ok and dated)

		# Combination table: the first rule that applies sets the score
		if artist_month_day_search and artist_ok and c.month_day_match:
			c.combined_score = 3.0
		elif full_date_search and c.exact_date_match:
			c.combined_score = 3.0
		elif artist_year_search and artist_ok and c.year_match:
			c.combined_score = c.artist_similarity * 2.5
		elif venue_only_ok:
			c.combined_score = max(c.venue_similarity, c.exact_venue_match) * 2.0
		elif likely_artist_ok:
			c.combined_score = c.artist_similarity * 2.0
		elif request.venue_terms and request.is_potential_artist_venue_search and artist_ok and venue_ok:
			c.combined_score = (c.artist_similarity + c.venue_similarity) * 1.5
		else:
			c.combined_score = max(
				c.artist_similarity * 1.2,
				c.venue_similarity * (1.5 if request.is_venue_only_search else 1.0),
				c.exact_venue_match * 1.5,
				c.event_similarity * (1.5 if d.has_date else 1.0),
				c.text_similarity * 0.8,
			)

		multi_term = request.token_count > 1 and request.is_potential_artist_venue_search
		date_ok = self._date_ok(c, d, events)
		if artist_dated_search:
			c.matches_all_terms = artist_ok and date_ok and (venue_ok or not request.has_venue_signal)
		else:
			c.matches_all_terms = (
				(full_date_search and c.exact_date_match)
				or venue_only_ok
				or likely_artist_ok
				or (multi_term and artist_ok and venue_ok)
				or (not request.artist_terms and not request.venue_terms and d.has_date and date_ok)
			)
		c.overall_score = max(c.text_similarity, c.combined_score)

		if artist_dated_search:
			# The artist and the date have to match, plus the venue when one was named
			return c if c.matches_all_terms else None
		if not self._passes_gate(c, request, venue_threshold, month_day_search, full_date_search):
			return None
		return c

	def _passes_gate(
		self,
		c: ScoredCandidate,
		request: ScoringRequest,
		venue_threshold: float,
		month_day_search: bool,
		full_date_search: bool,
	) -> bool:
		"""Shape-specific inclusion for queries without an artist/date pairing: any satisfied clause admits the poster."""
		multi_term = request.token_count > 1 and request.is_potential_artist_venue_search
		if month_day_search and c.month_day_match:
			return True
		if full_date_search and c.exact_date_match:
			return True
		if request.is_venue_only_search and (c.venue_similarity >= venue_threshold or c.exact_venue_match >= 1.0):
			return True
		if request.is_likely_artist_name_only and c.artist_similarity >= self.likely_artist_gate:
			return True
		if multi_term and c.matches_all_terms:
			return True
		if not multi_term:
			return c.text_similarity >= request.similarity_threshold or c.combined_score >= self.artist_threshold
		return False

	# --- Strict scoring ---------------------------------------------------------

	def score_strict(self, catalog: CatalogFacade, poster: Poster, request: ScoringRequest) -> Optional[ScoredCandidate]:
		"""
		AND semantics over artist, city, and date components.
		One linked event has to satisfy the city and every given date component together.
		"""
		d = request.date_info
		artist_term = (request.artist_terms or [request.match_text])[0]
		city_term = request.venue_terms[0] if request.venue_terms else None
		artist_needle = artist_term.lower()

		c = ScoredCandidate(poster_id=poster.id)
		c.text_similarity = self._text_similarity(poster, request.full_text)

		# Artist: linked name or poster title, by containment or similarity
		artist_scores = []
		for a in self._artists(catalog, poster):
			if artist_needle in a.name.lower():
				artist_scores.append(1.0)
			artist_scores.append(trigram_similarity(a.name, artist_term))
		if artist_needle in poster.title.lower():
			artist_scores.append(1.0)
		artist_scores.append(trigram_similarity(poster.title, artist_term))
		c.artist_similarity = max(artist_scores)
		if c.artist_similarity <= self.artist_threshold:
			return None

		needs_event = city_term is not None or (d.has_date and (d.year or d.month or d.day))
		if needs_event:
			for e in self._events(catalog, poster):
				if not self._date_matches(e, d):
					continue
				city_score = 1.0
				if city_term is not None:
					city_score = self._city_score(catalog.venue(e.venue_id) if e.venue_id is not None else None, city_term)
					if city_score <= self.city_threshold:
						continue
				c.venue_similarity = max(c.venue_similarity, city_score if city_term is not None else 0.0)
				self._apply_event(c, e, d, request.full_text)
			if not (c.year_match or c.month_match or c.day_match or c.venue_similarity > 0.0):
				return None

		c.matches_all_terms = True
		c.artist_year_match = d.year is not None
		c.artist_month_day_match = d.has_month_day and c.month_day_match
		if city_term is not None:
			c.combined_score = (c.artist_similarity + c.venue_similarity) * 1.5
		else:
			c.combined_score = c.artist_similarity * 2.5
		c.overall_score = max(c.text_similarity, c.combined_score)
		return c

	def _city_score(self, venue: Optional[Venue], city_term: str) -> float:
		if venue is None:
			return 0.0
		needle = city_term.lower()
		fields = [venue.city, venue.name, self._city_state(venue)]
		if any(needle in (f or "").lower() for f in fields):
			return 1.0
		return max(trigram_similarity(f, city_term) for f in fields)

	# --- Signal helpers ---------------------------------------------------------

	@staticmethod
	def _artists(catalog: CatalogFacade, poster: Poster) -> List[Artist]:
		return [a for a in (catalog.artist(i) for i in poster.artist_ids) if a is not None]

	@staticmethod
	def _events(catalog: CatalogFacade, poster: Poster) -> List[Event]:
		return [e for e in (catalog.event(i) for i in poster.event_ids) if e is not None]

	@staticmethod
	def _venues(catalog: CatalogFacade, events: Sequence[Event]) -> List[Venue]:
		venues = []
		for e in events:
			v = catalog.venue(e.venue_id) if e.venue_id is not None else None
			if v is not None and v not in venues:
				venues.append(v)
		return venues

	@staticmethod
	def _text_similarity(poster: Poster, full_text: str) -> float:
		return max(trigram_similarity(poster.title, full_text), trigram_similarity(poster.description, full_text))

	@staticmethod
	def _artist_similarity(artist: Artist, match_text: str, terms: List[str], likely_name_only: bool) -> float:
		score = max(trigram_similarity(artist.name, match_text), best_similarity(artist.name, terms))
		if likely_name_only and artist.name.lower() == match_text.lower():
			score = 1.0  # full two-word name typed exactly
		return score

	def _venue_similarity(self, venue: Venue, terms: List[str]) -> float:
		fields = [venue.name, venue.city, venue.state or "", venue.country, self._city_state(venue)]
		return max(best_similarity(f, terms) for f in fields)

	def _exact_venue_match(self, venue: Venue, match_text: str, venue_only: bool) -> float:
		needle = match_text.lower().strip()
		if not needle:
			return 0.0
		name, city = venue.name.lower(), venue.city.lower()
		if needle in (name, city):
			return 1.0
		if venue_only:
			if needle in name or needle in city or needle == self._city_state(venue).lower():
				return 1.0
			# "new york" against "New York City": every query word, in order
			words = [re.escape(w) for w in needle.split()]
			if re.search(r"\b" + r"\W+(?:\w+\W+)*".join(words) + r"\b", city):
				return 1.0
		return 0.0

	@staticmethod
	def _city_state(venue: Venue) -> str:
		return f"{venue.city} {venue.state}" if venue.state else venue.city

	@staticmethod
	def _date_matches(event: Event, d: DateInfo) -> bool:
		if d.is_range and d.start_date is not None and d.end_date is not None:
			return d.start_date <= event.date <= d.end_date
		if d.year is not None and event.year != d.year:
			return False
		if d.month is not None and event.month != d.month:
			return False
		if d.day is not None and event.day != d.day:
			return False
		return True

	@staticmethod
	def _apply_event(c: ScoredCandidate, event: Event, d: DateInfo, full_text: str):
		"""Fold one linked event into the candidate's date flags and event score."""
		year_match = d.year is not None and event.year == d.year
		month_match = d.month is not None and event.month == d.month
		day_match = d.day is not None and event.day == d.day

		score = trigram_similarity(event.name, full_text)
		if year_match:
			score = max(score, 1.0)
		if month_match or day_match:
			score = max(score, 0.9)
		c.event_similarity = max(c.event_similarity, score)

		c.year_match = c.year_match or year_match
		c.month_match = c.month_match or month_match
		c.day_match = c.day_match or day_match
		c.month_day_match = c.month_day_match or (month_match and day_match)
		c.exact_date_match = c.exact_date_match or (year_match and month_match and day_match)

	def _date_ok(self, c: ScoredCandidate, d: DateInfo, events: Sequence[Event]) -> bool:
		if d.is_range and d.start_date is not None and d.end_date is not None:
			return any(self._date_matches(e, d) for e in events)
		if self._has_date_parts(d):
			return self._date_parts_match(c, d)
		return True

	@staticmethod
	def _has_date_parts(d: DateInfo) -> bool:
		return d.year is not None or d.month is not None or d.day is not None

	@staticmethod
	def _date_parts_match(c: ScoredCandidate, d: DateInfo) -> bool:
		"""Every date component the query gave is matched; month and day together must come from one event."""
		if d.has_full_date:
			return c.exact_date_match
		if d.has_month_day:
			return c.month_day_match and (d.year is None or c.year_match)
		if d.year is not None and not c.year_match:
			return False
		if d.month is not None and not c.month_match:
			return False
		if d.day is not None and not c.day_match:
			return False
		return True
