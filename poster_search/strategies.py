"""
Search strategies.
Each strategy is a (predicate, matcher) pair over a SearchContext. The engine walks STRATEGIES
in order and returns the first non-empty result; a terminal strategy ends the walk even when empty.
"""

import re
from concurrent.futures import ThreadPoolExecutor  # optional parallel combination attempts
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger

from .catalog import CatalogFacade
from .config import SearchSettings
from .models import ArtistCityCombination, DateInfo, QueryClassification
from .ranking import Ranker, ScoringRequest
from .similarity import trigram_similarity
from .text_normalizer import RE_NON_ALNUM, filter_stop_words, generate_spelling_variants


RE_LETTER_WORDS = re.compile(r"^[a-z]+(?:\s+[a-z]+)+$", re.I)  # "phish los angeles"


@dataclass
class SearchContext:
	"""Per-query state shared by the strategies. Built fresh for every search call."""
	catalog: CatalogFacade
	settings: SearchSettings
	ranker: Ranker
	cleaned: str  # validated query, stop words still present
	term: str  # cleaned query without stop words
	date_info: DateInfo
	classification: QueryClassification
	similarity_threshold: float

	@property
	def match_text(self) -> str:
		return self.classification.match_text


@dataclass(frozen=True)
class Strategy:
	name: str
	applies: Callable[[SearchContext], bool]
	run: Callable[[SearchContext], List[int]]
	terminal: bool = False  # an empty result still ends the cascade


# --- Special-character names (AC/DC, P!nk, R.E.M.) ---------------------------

def special_character_applies(ctx: SearchContext) -> bool:
	return (
		not ctx.date_info.has_date
		and not any(ch.isspace() for ch in ctx.cleaned)
		and bool(RE_NON_ALNUM.search(ctx.cleaned))
	)


def special_character_search(ctx: SearchContext) -> List[int]:
	term = ctx.cleaned
	variants = [v.lower() for v in generate_spelling_variants(term)]
	spaced = RE_NON_ALNUM.sub(" ", term).strip() or term
	parts = [p for p in RE_NON_ALNUM.split(term.lower()) if p]
	wildcard = re.compile(r"[\W_]*".join(re.escape(p) for p in parts)) if parts else None

	# Lower rank value = better match
	artist_rank: Dict[int, int] = {}
	for artist in ctx.catalog.artists():
		name = artist.name.lower()
		if name in variants:
			artist_rank[artist.id] = 1
		elif any(v in name for v in variants) or (wildcard is not None and wildcard.search(name)):
			artist_rank[artist.id] = 2
		elif trigram_similarity(artist.name, spaced) >= ctx.settings.artist_similarity_threshold:
			artist_rank[artist.id] = 3
	logger.debug(f"[Strategy] Special-character variants for '{term}': {variants} -> {len(artist_rank)} artists")

	needle = term.lower()
	ranked: List[Tuple[int, int]] = []
	for poster in ctx.catalog.active_posters():
		ranks = [artist_rank[a] for a in poster.artist_ids if a in artist_rank]
		if needle in poster.title.lower() or needle in poster.description.lower():
			ranks.append(4)
		if ranks:
			ranked.append((min(ranks), poster.id))
	ranked.sort()
	return [poster_id for _, poster_id in ranked[:ctx.settings.complex_limit]]


# --- Exact month/day, optionally with year ------------------------------------

def exact_month_day_applies(ctx: SearchContext) -> bool:
	# A range that starts on a given day belongs to the range strategy
	return ctx.date_info.has_month_day and not ctx.date_info.is_range


def exact_month_day_search(ctx: SearchContext) -> List[int]:
	d = ctx.date_info
	events = ctx.catalog.find_events_by_date(d.year, d.month, d.day)
	if not events:
		logger.debug(f"[Strategy] No events on {d.month}/{d.day}/{d.year or '*'}")
		return []

	artist_ids = None
	if ctx.match_text:
		artists = ctx.catalog.find_artists_by_name(ctx.match_text, ctx.settings.artist_similarity_threshold)
		if not artists:
			return []
		artist_ids = [a.id for a in artists]

	posters = ctx.catalog.find_posters_linking(artist_ids, [e.id for e in events])
	return [p.id for p in posters[:ctx.settings.strict_limit]]


# --- Artist within a date range -----------------------------------------------

def artist_date_range_applies(ctx: SearchContext) -> bool:
	d = ctx.date_info
	return d.is_range and d.start_date is not None and d.end_date is not None and bool(ctx.match_text)


def artist_date_range_search(ctx: SearchContext) -> List[int]:
	d = ctx.date_info
	artists = ctx.catalog.find_artists_by_name(ctx.match_text, ctx.settings.artist_similarity_threshold)
	if not artists:
		return []
	events = ctx.catalog.find_events_between(d.start_date, d.end_date)
	posters = ctx.catalog.find_posters_linking([a.id for a in artists], [e.id for e in events])
	logger.debug(f"[Strategy] Range {d.start_date}..{d.end_date} for '{ctx.match_text}': {len(posters)} posters")
	return [p.id for p in posters[:ctx.settings.strict_limit]]


# --- Strict artist / city / year combinations -----------------------------------

def _strict_request(ctx: SearchContext, artist: str, city: Optional[str]) -> ScoringRequest:
	return ScoringRequest(
		full_text=ctx.term,
		match_text=artist if city is None else f"{artist} {city}",
		date_info=ctx.date_info,
		artist_terms=[artist],
		venue_terms=[city] if city else [],
		similarity_threshold=ctx.similarity_threshold,
		limit=ctx.settings.strict_limit,
		strict=True,
	)


def _first_combination_hit(ctx: SearchContext, combos: List[ArtistCityCombination]) -> List[int]:
	"""Try combinations in order; the earliest one with results wins even when run in parallel."""
	def attempt(combo: ArtistCityCombination) -> List[int]:
		logger.debug(f"[Strategy] Trying artist '{combo.artist}' in city '{combo.city}' (year={ctx.date_info.year})")
		return ctx.ranker.rank(ctx.catalog, _strict_request(ctx, combo.artist, combo.city))

	if ctx.settings.parallel_combinations and len(combos) > 1:
		with ThreadPoolExecutor(max_workers=ctx.settings.max_workers) as executor:
			outcomes = list(executor.map(attempt, combos))
		for outcome in outcomes:
			if outcome:
				return outcome
		return []

	for combo in combos:
		outcome = attempt(combo)
		if outcome:
			return outcome
	return []


def artist_city_year_applies(ctx: SearchContext) -> bool:
	return (
		ctx.date_info.year is not None
		and ctx.classification.token_count >= 2
		and not ctx.classification.is_venue_only_search
	)


def artist_city_year_search(ctx: SearchContext) -> List[int]:
	return _first_combination_hit(ctx, ctx.classification.artist_city_combinations)


def artist_year_applies(ctx: SearchContext) -> bool:
	c = ctx.classification
	return (
		ctx.date_info.year is not None
		and len(ctx.match_text) >= 2
		and not c.is_likely_venue_search
		and c.multi_word_city is None
	)


def artist_year_search(ctx: SearchContext) -> List[int]:
	return ctx.ranker.rank(ctx.catalog, _strict_request(ctx, ctx.match_text, None))


def artist_city_applies(ctx: SearchContext) -> bool:
	return (
		not ctx.date_info.has_date
		and ctx.classification.token_count >= 2
		and not ctx.classification.is_venue_only_search
		and bool(RE_LETTER_WORDS.match(ctx.match_text))
	)


def artist_city_search(ctx: SearchContext) -> List[int]:
	return _first_combination_hit(ctx, ctx.classification.artist_city_combinations)


# --- City only ---------------------------------------------------------------

def city_only_applies(ctx: SearchContext) -> bool:
	c = ctx.classification
	return c.multi_word_city is not None and len(c.artist_remainder) <= 1


def city_only_search(ctx: SearchContext) -> List[int]:
	city = ctx.match_text
	# Longer names share fewer trigrams on average, so multi-word cities get a lower bar
	threshold = ctx.similarity_threshold
	if len(city.split()) > 1:
		threshold = max(ctx.settings.city_similarity_floor, threshold - 0.1)
	venues = ctx.catalog.find_venues_by_name(city, threshold)
	if not venues:
		logger.debug(f"[Strategy] No venue name or city close to '{city}'")
		return []
	logger.debug(f"[Strategy] City-only search for '{city}' matches {len(venues)} venues")
	request = ScoringRequest(
		full_text=ctx.term,
		match_text=city,
		date_info=ctx.date_info,
		artist_terms=[],
		venue_terms=[city],
		token_count=ctx.classification.token_count,
		is_venue_only_search=True,
		similarity_threshold=ctx.similarity_threshold,
		venue_threshold=threshold,
		limit=ctx.settings.complex_limit,
	)
	return ctx.ranker.rank(ctx.catalog, request)


# --- Several artists joined by "or" ------------------------------------------

def multi_artist_applies(ctx: SearchContext) -> bool:
	return ctx.classification.is_multi_artist


def single_artist_search(ctx: SearchContext, name: str) -> List[int]:
	"""Posters for one artist name: name substring, title substring, strong similarity, then weaker hits."""
	needle = name.lower()
	threshold = ctx.similarity_threshold
	strong = ctx.settings.high_confidence_threshold
	ranked: List[Tuple[int, float, int]] = []
	for poster in ctx.catalog.active_posters():
		names = [a.name for a in (ctx.catalog.artist(i) for i in poster.artist_ids) if a is not None]
		artist_sim = max((trigram_similarity(n, name) for n in names), default=0.0)
		title_sim = trigram_similarity(poster.title, name)
		best = max(artist_sim, title_sim)

		if any(needle in n.lower() for n in names):
			priority = 1
		elif needle in poster.title.lower():
			priority = 2
		elif best > strong:
			priority = 3
		elif best >= threshold or needle in poster.description.lower():
			priority = 4
		else:
			continue
		ranked.append((priority, -best, poster.id))
	ranked.sort()
	return [poster_id for _, _, poster_id in ranked[:ctx.settings.complex_limit]]


def multi_artist_search(ctx: SearchContext) -> List[int]:
	names = [filter_stop_words(side) for side in ctx.classification.or_artists]
	logger.debug(f"[Strategy] Multi-artist search for {names}")

	if ctx.settings.parallel_combinations and len(names) > 1:
		with ThreadPoolExecutor(max_workers=ctx.settings.max_workers) as executor:
			per_artist = list(executor.map(lambda n: single_artist_search(ctx, n), names))
	else:
		per_artist = [single_artist_search(ctx, n) for n in names]

	# Union in input order, first appearance wins
	merged: List[int] = []
	seen = set()
	for ids in per_artist:
		for poster_id in ids:
			if poster_id not in seen:
				seen.add(poster_id)
				merged.append(poster_id)
	return merged


# --- Generic fallback ----------------------------------------------------------

def generic_applies(ctx: SearchContext) -> bool:
	return bool(ctx.term)


def generic_search(ctx: SearchContext) -> List[int]:
	c = ctx.classification
	complex_shape = (c.token_count > 1 and c.is_potential_artist_venue_search) or ctx.date_info.has_date
	limit = ctx.settings.complex_limit if complex_shape else ctx.settings.single_term_limit
	request = ScoringRequest.from_classification(ctx.term, c, ctx.date_info, ctx.similarity_threshold, limit)
	if not complex_shape and not c.match_text:
		request.match_text = ctx.term
	logger.debug(f"[Strategy] Generic {'combined' if complex_shape else 'single-term'} search, limit={limit}")
	return ctx.ranker.rank(ctx.catalog, request)


STRATEGIES: Tuple[Strategy, ...] = (
	Strategy("special_character", special_character_applies, special_character_search),
	Strategy("exact_month_day", exact_month_day_applies, exact_month_day_search, terminal=True),
	Strategy("artist_date_range", artist_date_range_applies, artist_date_range_search),
	Strategy("artist_city_year", artist_city_year_applies, artist_city_year_search),
	Strategy("artist_year", artist_year_applies, artist_year_search),
	Strategy("artist_city", artist_city_applies, artist_city_search),
	Strategy("city_only", city_only_applies, city_only_search),
	Strategy("multi_artist", multi_artist_applies, multi_artist_search),
	Strategy("generic", generic_applies, generic_search),
)
