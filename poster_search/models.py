"""
Data models for the Poster Search Engine.
Defines the catalog records the engine reads and the per-query value objects it builds.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Calendar day type for event dates and date ranges
from datetime import date  # year/month/day value
# Import typing helpers for precise and self-documenting types
from typing import List, Optional, Tuple  # lists, optional values, and fixed-size tuples


@dataclass(frozen=True)
class Artist:
	"""A performer that can appear on posters and play events."""
	id: int  # unique identifier
	name: str  # display name, e.g. "Grateful Dead"


@dataclass(frozen=True)
class Venue:
	"""A place where events happen."""
	id: int  # unique identifier
	name: str  # venue name, e.g. "Madison Square Garden"
	city: str  # city name, e.g. "New York"
	country: str = ""  # country name or code
	state: Optional[str] = None  # optional state/province


@dataclass(frozen=True)
class Event:
	"""
	A dated show at one venue.
	The date is decomposed into year/month/day so exact component matching stays cheap.
	"""
	id: int  # unique identifier
	name: str  # event name, e.g. "New Year's Eve Run"
	date: date  # calendar day of the show
	venue_id: Optional[int] = None  # venue reference
	artist_ids: Tuple[int, ...] = ()  # performers billed for the event

	@property
	def year(self) -> int:
		return self.date.year

	@property
	def month(self) -> int:
		return self.date.month

	@property
	def day(self) -> int:
		return self.date.day


@dataclass(frozen=True)
class Poster:
	"""
	A catalog item returned by search.
	Only posters with status "active" are eligible for results.
	"""
	id: int  # unique identifier returned to callers
	title: str  # poster title
	description: str = ""  # free-text description
	status: str = "active"  # lifecycle status; anything else is hidden from search
	artist_ids: Tuple[int, ...] = ()  # linked artists
	event_ids: Tuple[int, ...] = ()  # linked events

	@property
	def is_active(self) -> bool:
		return self.status.lower() == "active"


@dataclass
class DateInfo:
	"""
	Calendar information found in a query, plus the text left once it is removed.
	Built fresh for every query; month is calendar numbered (1 = January).
	"""
	has_date: bool = False  # True when any component was recognized
	year: Optional[int] = None  # four-digit year
	month: Optional[int] = None  # 1-12
	day: Optional[int] = None  # 1-31
	remaining_text: str = ""  # query with the date phrase removed
	start_date: Optional[date] = None  # first day of the recognized span
	end_date: Optional[date] = None  # last day of the recognized span
	is_range: bool = False  # True for "between June and August 2025" style input
	date_text: Optional[str] = None  # the phrase that was recognized

	@property
	def has_month_day(self) -> bool:
		return self.month is not None and self.day is not None

	@property
	def has_full_date(self) -> bool:
		return self.year is not None and self.has_month_day


@dataclass(frozen=True)
class ArtistCityCombination:
	"""One way of splitting leftover text into an artist part and a city part."""
	artist: str
	city: str


@dataclass
class QueryClassification:
	"""
	The role guess for the text left after date extraction.
	Candidate lists are ordered most-likely first and contain no duplicates.
	"""
	match_text: str  # text used for artist/venue matching
	tokens: List[str]  # whitespace tokens of match_text
	is_likely_venue_search: bool  # venue keyword or known city present
	is_potential_artist_venue_search: bool  # three or more tokens, or a venue signal
	is_likely_artist_name_only: bool  # exactly two tokens and no venue signal
	is_venue_only_search: bool = False  # whole text names a venue or multi-word city
	multi_word_city: Optional[str] = None  # matched multi-word city phrase, if any
	artist_remainder: str = ""  # match_text with the multi-word city removed
	artist_terms: List[str] = field(default_factory=list)  # potential artist substrings
	venue_terms: List[str] = field(default_factory=list)  # potential venue substrings
	artist_city_combinations: List[ArtistCityCombination] = field(default_factory=list)
	or_artists: List[str] = field(default_factory=list)  # sides of an "X or Y" query

	@property
	def token_count(self) -> int:
		return len(self.tokens)

	@property
	def is_multi_artist(self) -> bool:
		return len(self.or_artists) >= 2


@dataclass
class ScoredCandidate:
	"""
	Relevance bookkeeping for one poster within one query.
	Flags mark exact-match conditions that outrank any plain similarity score.
	"""
	poster_id: int  # poster being scored
	artist_similarity: float = 0.0  # best linked artist vs. artist terms
	venue_similarity: float = 0.0  # best linked venue field vs. venue terms
	exact_venue_match: float = 0.0  # 1.0 when a venue name/city equals the query text
	event_similarity: float = 0.0  # event name similarity or date indicator score
	text_similarity: float = 0.0  # poster title/description vs. full query
	year_match: bool = False  # some linked event falls in the requested year
	month_match: bool = False  # some linked event falls in the requested month
	day_match: bool = False  # some linked event falls on the requested day of month
	month_day_match: bool = False  # one event matches both month and day
	exact_date_match: bool = False  # one event matches year, month, and day
	artist_year_match: bool = False  # artist clears threshold and the date components match
	artist_month_day_match: bool = False  # artist clears threshold and month/day match
	matches_all_terms: bool = False  # every detected query component matched
	combined_score: float = 0.0  # score from the combination table
	overall_score: float = 0.0  # max(text_similarity, combined_score)

	def sort_key(self) -> Tuple:
		"""Descending-order key: exact flags first, then the combined score, then lowest id."""
		return (
			self.exact_date_match,
			self.artist_year_match,
			self.month_day_match,
			self.artist_month_day_match,
			self.matches_all_terms,
			self.overall_score,
			-self.poster_id,
		)
