"""
Term role classification.
Guesses which parts of the date-free query name an artist, a venue/city, or plain text,
and builds the candidate substrings the ranker and strict strategies try.
"""

import re  # whole-word and phrase checks
from typing import List, Optional, Tuple  # type annotations

from loguru import logger  # console logging

from .models import ArtistCityCombination, DateInfo, QueryClassification  # value objects
from .vocabulary import COMMON_CITIES, MULTI_WORD_CITIES, SPECIFIC_VENUES, VENUE_KEYWORDS  # static tables


def _phrase_pattern(phrase: str) -> "re.Pattern":
	return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.I)


def _unique(items: List[str]) -> List[str]:
	seen = set()
	out = []
	for item in items:
		key = item.lower()
		if item and key not in seen:
			seen.add(key)
			out.append(item)
	return out


class TermClassifier:
	"""
	Heuristic role tagging for the remaining query text.
	Pure function of its inputs; the phrase patterns are compiled once per class.
	"""

	RE_OR = re.compile(r"\s+or\s+", re.I)  # "Phish or Goose"
	KEYWORD_PATTERNS = [_phrase_pattern(k) for k in VENUE_KEYWORDS]
	CITY_PATTERNS = [_phrase_pattern(c) for c in COMMON_CITIES]
	# Longest first so "salt lake city" wins over any shorter overlap
	MULTI_WORD_CITY_PATTERNS = [(c, _phrase_pattern(c)) for c in sorted(MULTI_WORD_CITIES, key=len, reverse=True)]

	def classify(self, match_text: str, date_info: Optional[DateInfo] = None, raw_text: Optional[str] = None) -> QueryClassification:
		"""
		Classify the text left after date extraction.
		raw_text is the cleaned query before stop-word removal, used for "or" detection.
		"""
		text = (match_text or "").strip()
		tokens = text.split()

		city, remainder = self.find_multi_word_city(text)
		likely_venue = self.is_likely_venue_search(text)
		potential_artist_venue = len(tokens) >= 3 or likely_venue
		venue_only = self.is_venue_only(text)

		classification = QueryClassification(
			match_text=text,
			tokens=tokens,
			is_likely_venue_search=likely_venue,
			is_potential_artist_venue_search=potential_artist_venue,
			is_likely_artist_name_only=len(tokens) == 2 and not likely_venue,
			is_venue_only_search=venue_only,
			multi_word_city=city,
			artist_remainder=remainder,
			artist_terms=[] if venue_only else self.artist_terms(text, tokens, potential_artist_venue),
			venue_terms=self.venue_terms(text, tokens),
			artist_city_combinations=self.artist_city_combinations(tokens, city, remainder),
			or_artists=self.split_or_artists(raw_text if raw_text is not None else text),
		)
		logger.debug(
			f"[Classifier] '{text}' | tokens={len(tokens)} venue={likely_venue} artist_venue={potential_artist_venue} "
			f"artist_only={classification.is_likely_artist_name_only} venue_only={venue_only} city={city} "
			f"or={classification.or_artists}"
		)
		return classification

	def find_multi_word_city(self, text: str) -> Tuple[Optional[str], str]:
		"""Return (city, text without the city) for the first multi-word city in text."""
		for city, pattern in self.MULTI_WORD_CITY_PATTERNS:
			m = pattern.search(text)
			if m:
				remainder = " ".join(f"{text[:m.start()]} {text[m.end():]}".split())
				return city, remainder
		return None, text

	def is_likely_venue_search(self, text: str) -> bool:
		lowered = text.lower().strip()
		if not lowered:
			return False
		# One word is a venue search only when it names a well-known venue
		if len(lowered.split()) == 1:
			return lowered in SPECIFIC_VENUES
		if any(p.search(lowered) for p in self.KEYWORD_PATTERNS):
			return True
		if any(v in lowered for v in SPECIFIC_VENUES):
			return True
		return any(p.search(lowered) for p in self.CITY_PATTERNS)

	def is_venue_only(self, text: str) -> bool:
		lowered = " ".join(text.lower().split())
		return lowered in SPECIFIC_VENUES or lowered in MULTI_WORD_CITIES

	@staticmethod
	def artist_terms(text: str, tokens: List[str], potential_artist_venue: bool) -> List[str]:
		n = len(tokens)
		terms = [text]
		if n >= 3:
			terms.append(" ".join(tokens[:2]))  # "Grateful Dead Seattle" -> "Grateful Dead"
		if n >= 2:
			terms.append(tokens[0])  # "Phish Madison" -> "Phish"
			terms.append(" ".join(tokens[:-1]))
		if n >= 3:
			terms.append(" ".join(tokens[2:]))
		if n > 1 and not potential_artist_venue:
			terms.extend(t for t in tokens if len(t) > 1)
		return _unique(terms)

	@staticmethod
	def venue_terms(text: str, tokens: List[str]) -> List[str]:
		n = len(tokens)
		terms = []
		if n >= 3:
			terms.append(" ".join(tokens[2:]))
		if n >= 2:
			terms.append(" ".join(tokens[1:]))
			terms.append(tokens[-1])
			terms.append(text)
		return _unique(terms)

	@staticmethod
	def artist_city_combinations(tokens: List[str], city: Optional[str], remainder: str) -> List[ArtistCityCombination]:
		combos = []
		if city and len(remainder) > 1:
			combos.append(ArtistCityCombination(artist=remainder, city=city))
		if len(tokens) >= 2:
			combos.append(ArtistCityCombination(artist=" ".join(tokens[:-1]), city=tokens[-1]))
			combos.append(ArtistCityCombination(artist=tokens[0], city=" ".join(tokens[1:])))

		seen = set()
		unique = []
		for combo in combos:
			key = (combo.artist.lower(), combo.city.lower())
			if key in seen or len(combo.artist) < 2 or len(combo.city) < 2:
				continue
			seen.add(key)
			unique.append(combo)
		return unique

	def split_or_artists(self, text: str) -> List[str]:
		if not text or not self.RE_OR.search(text):
			return []
		sides = [s.strip() for s in self.RE_OR.split(text) if s.strip()]
		return sides if len(sides) >= 2 else []
