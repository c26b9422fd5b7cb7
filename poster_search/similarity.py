"""
Trigram string similarity.
Same semantics as PostgreSQL pg_trgm: each alphanumeric word is padded with two
leading spaces and one trailing space, and similarity is the Jaccard ratio of the
two trigram sets. Plugs into rapidfuzz.process as a custom scorer.
"""

from functools import lru_cache  # trigram sets are reused across many comparisons
from typing import Dict, FrozenSet, Hashable, List, Mapping, Optional, Tuple

from rapidfuzz import process  # candidate extraction with score cutoffs
from rapidfuzz.utils import default_process  # lowercase + strip non-alphanumerics


@lru_cache(maxsize=8192)
def trigrams(text: str) -> FrozenSet[str]:
	"""Return the pg_trgm style trigram set of a string."""
	if not text:
		return frozenset()
	grams = set()
	for word in default_process(text).split():
		padded = f"  {word} "
		for i in range(len(padded) - 2):
			grams.add(padded[i:i + 3])
	return frozenset(grams)


def trigram_similarity(a: Optional[str], b: Optional[str], **kwargs) -> float:
	"""
	Similarity in [0, 1] between two strings; 0.0 when either side has no trigrams.
	Extra keyword arguments (processor, score_cutoff) are accepted so rapidfuzz can call it.
	"""
	ta = trigrams(a or "")
	tb = trigrams(b or "")
	if not ta or not tb:
		return 0.0
	shared = len(ta & tb)
	score = shared / float(len(ta) + len(tb) - shared)
	score_cutoff = kwargs.get("score_cutoff")
	if score_cutoff is not None and score < score_cutoff:
		return 0.0
	return score


def best_similarity(value: Optional[str], terms: List[str]) -> float:
	"""Highest similarity between one field value and any of the query terms."""
	if not value:
		return 0.0
	return max((trigram_similarity(value, t) for t in terms), default=0.0)


def extract_similar(
	query: str,
	choices: Mapping[Hashable, str],
	threshold: float,
	inclusive: bool = True,
) -> List[Tuple[Hashable, float]]:
	"""
	Rank the choices (key -> text) by similarity to the query.
	Returns (key, score) pairs at or above the threshold, best first; ties keep input order.
	With inclusive=False the threshold itself is excluded.
	"""
	if not query or not choices:
		return []
	matches = process.extract(
		query,
		choices,
		scorer=trigram_similarity,
		limit=None,
		score_cutoff=threshold,
	)
	results: Dict[Hashable, float] = {}
	for _choice, score, key in matches:
		if score < threshold or (not inclusive and score == threshold) or score <= 0.0:
			continue
		results[key] = score
	return sorted(results.items(), key=lambda kv: -kv[1])
