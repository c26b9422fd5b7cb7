"""
Text normalization for raw search input.
Cleans the query, drops stop words without destroying short queries, and builds
alternate spellings for names written with punctuation or capitals (AC/DC, R.E.M., RHCP).
"""

import re  # whitespace and punctuation handling
from typing import List, Optional  # type annotations

from loguru import logger  # console logging

from .vocabulary import STOP_WORDS  # tokens removed before matching


RE_WHITESPACE = re.compile(r"\s+")  # runs of any whitespace
RE_NON_ALNUM = re.compile(r"[\W_]+")  # punctuation/separator runs
RE_ALL_CAPS = re.compile(r"^[A-Z]{2,}$")  # RHCP, ACDC
RE_SPACED_CAPS = re.compile(r"^[A-Z](\s+[A-Z])+$")  # A C D C


def validate_and_clean(search_term: Optional[str], min_length: int = 2) -> Optional[str]:
	"""Trim and collapse whitespace; return None for empty or too-short input."""
	if not search_term or not search_term.strip():  # empty input guard
		return None

	cleaned = RE_WHITESPACE.sub(" ", search_term.strip())  # single spaces only
	if len(cleaned) < min_length:
		logger.debug(f"[Normalizer] Rejected short query '{cleaned}'")
		return None
	return cleaned


def filter_stop_words(search_term: str) -> str:
	"""
	Remove stop words and single-character tokens.
	Falls back to the input unchanged when filtering would leave fewer than 2 characters.
	"""
	kept = [w for w in search_term.split() if w.lower() not in STOP_WORDS and len(w) > 1]
	filtered = " ".join(kept)
	if len(filtered) > 1:
		if filtered != search_term:
			logger.debug(f"[Normalizer] Stop words removed: '{search_term}' -> '{filtered}'")
		return filtered
	logger.debug(f"[Normalizer] Filtering would empty '{search_term}', keeping original")
	return search_term


def generate_spelling_variants(search_term: str) -> List[str]:
	"""Return the unique spellings of a name, original first."""
	if not search_term:
		return []

	term = search_term.strip()
	variants = [term]

	# Punctuation-joined names: "AC/DC" -> "AC DC", "ACDC"
	if RE_NON_ALNUM.search(term):
		spaced = RE_NON_ALNUM.sub(" ", term).strip()
		variants.append(spaced)
		variants.append(RE_NON_ALNUM.sub("", term))

	# All-caps abbreviation: "RHCP" -> "R H C P", "R/H/C/P"
	if RE_ALL_CAPS.match(term):
		variants.append(" ".join(term))
		variants.append("/".join(term))

	# Spaced capitals: "A C D C" -> "ACDC", "A/C/D/C"
	if RE_SPACED_CAPS.match(term):
		variants.append(RE_WHITESPACE.sub("", term))
		variants.append(RE_WHITESPACE.sub("/", term))

	# Dotted abbreviation: "N.W.A" -> "NWA", "N W A"
	if "." in term:
		variants.append(term.replace(".", ""))
		variants.append(RE_WHITESPACE.sub(" ", term.replace(".", " ")).strip())

	seen = set()
	unique = []
	for v in variants:
		if v and v not in seen:
			seen.add(v)
			unique.append(v)
	return unique
