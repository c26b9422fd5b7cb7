"""
Search engine module.
Turns a raw query into ranked poster ids: clean, extract dates, classify terms,
then walk the strategy cascade until one strategy produces results.
"""

import threading  # caller-supplied cancellation flag
import time  # deadlines
from datetime import date  # fixed reference day for relative dates
from typing import Any, Dict, List, Optional, Sequence  # type annotations for clarity

# Import project modules for data structures and components
from .catalog import CatalogFacade, CatalogUnavailableError  # read-only catalog access
from .config import SearchSettings  # thresholds and limits
from .date_extractor import DateExtractor  # date understanding
from .ranking import Ranker  # combined scoring
from .strategies import STRATEGIES, SearchContext, Strategy  # ordered matching rules
from .term_classifier import TermClassifier  # artist/venue role guessing
from .text_normalizer import filter_stop_words, validate_and_clean  # input cleanup

# Import loguru for console logging
from loguru import logger  # simple structured logger


class SearchEngine:
	"""
	High-level search API over a poster catalog.
	Holds only read-only collaborators, so one instance can serve concurrent searches.
	"""
	def __init__(
		self,
		catalog: CatalogFacade,  # where posters, artists, venues, and events come from
		settings: Optional[SearchSettings] = None,  # thresholds and limits
		today: Optional[date] = None,  # reference day for "next month" style phrases
		strategies: Sequence[Strategy] = STRATEGIES,  # cascade order
	):
		self.catalog = catalog  # keep catalog reference
		self.settings = settings or SearchSettings()  # env-driven defaults
		self.ranker = Ranker(self.settings)  # scoring engine
		self.date_extractor = DateExtractor(today=today, two_digit_year_pivot=self.settings.two_digit_year_pivot)
		self.classifier = TermClassifier()  # role heuristics
		self.strategies = tuple(strategies)  # fixed priority order
		logger.info(f"[Engine] Ready with {len(self.strategies)} strategies: {[s.name for s in self.strategies]}")

	def build_context(self, query: str, similarity_threshold: Optional[float] = None) -> Optional[SearchContext]:
		"""Run the query-understanding steps; None when the query is rejected."""
		cleaned = validate_and_clean(query, self.settings.min_query_length)  # trim/collapse/reject
		if cleaned is None:
			return None

		term = filter_stop_words(cleaned)  # full text for poster title/description matching
		date_info = self.date_extractor.extract(cleaned)  # split off calendar phrases
		match_text = filter_stop_words(date_info.remaining_text) if date_info.remaining_text else ""
		classification = self.classifier.classify(match_text, date_info, raw_text=cleaned)
		threshold = self.settings.similarity_threshold if similarity_threshold is None else similarity_threshold

		logger.debug(
			f"[Engine] Query '{query}' | cleaned='{cleaned}' term='{term}' match='{match_text}' "
			f"date=({date_info.year}, {date_info.month}, {date_info.day}) range={date_info.is_range}"
		)
		return SearchContext(
			catalog=self.catalog,
			settings=self.settings,
			ranker=self.ranker,
			cleaned=cleaned,
			term=term,
			date_info=date_info,
			classification=classification,
			similarity_threshold=threshold,
		)

	def search(
		self,
		query: str,
		similarity_threshold: Optional[float] = None,
		timeout: Optional[float] = None,
		cancel_event: Optional[threading.Event] = None,
	) -> List[int]:
		"""
		Return poster ids ranked by relevance, best first.
		Never raises for bad input or failing strategies; CatalogUnavailableError is the only error surfaced.
		Cancellation (timeout seconds or cancel_event) is checked between strategies and yields [].
		"""
		deadline = time.monotonic() + timeout if timeout is not None else None

		ctx = self.build_context(query, similarity_threshold)
		if ctx is None:
			logger.debug(f"[Engine] Rejected query {query!r}")
			return []

		for strategy in self.strategies:
			if self._cancelled(deadline, cancel_event):
				logger.warning(f"[Engine] Search for '{ctx.cleaned}' cancelled before strategy '{strategy.name}'")
				return []

			results = self._attempt(strategy, ctx)
			if results is None:
				continue

			# Work finished after cancellation is discarded
			if self._cancelled(deadline, cancel_event):
				logger.warning(f"[Engine] Search for '{ctx.cleaned}' cancelled during strategy '{strategy.name}'")
				return []

			if results:
				logger.info(f"[Engine] '{ctx.cleaned}' -> {len(results)} results via '{strategy.name}'")
				return results
			if strategy.terminal:
				logger.info(f"[Engine] '{ctx.cleaned}' -> no results, '{strategy.name}' ends the search")
				return []

		logger.info(f"[Engine] '{ctx.cleaned}' -> no results from any strategy")
		return []

	def _attempt(self, strategy: Strategy, ctx: SearchContext) -> Optional[List[int]]:
		"""Run one strategy. None when it does not apply; [] when it fails or finds nothing."""
		try:
			if not strategy.applies(ctx):
				return None
			logger.debug(f"[Strategy] Trying '{strategy.name}'")
			results = strategy.run(ctx)
		except CatalogUnavailableError:
			logger.error(f"[Engine] Catalog unavailable during '{strategy.name}'")
			raise
		except Exception as e:
			logger.warning(f"[Strategy] '{strategy.name}' failed for '{ctx.cleaned}', treating as no results: {e}")
			return []
		logger.debug(f"[Strategy] '{strategy.name}' returned {len(results)} results")
		return results

	@staticmethod
	def _cancelled(deadline: Optional[float], cancel_event: Optional[threading.Event]) -> bool:
		if cancel_event is not None and cancel_event.is_set():
			return True
		return deadline is not None and time.monotonic() >= deadline

	def explain(self, query: str) -> Dict[str, Any]:
		"""Query understanding without running any strategy, for debugging."""
		ctx = self.build_context(query)
		if ctx is None:
			return {"query": query, "rejected": True}
		applicable = []
		for strategy in self.strategies:
			try:
				if strategy.applies(ctx):
					applicable.append(strategy.name)
			except Exception as e:
				logger.warning(f"[Engine] Predicate for '{strategy.name}' failed: {e}")
		return {
			"query": query,
			"rejected": False,
			"cleaned": ctx.cleaned,
			"term": ctx.term,
			"date_info": ctx.date_info,
			"classification": ctx.classification,
			"strategies": applicable,
			"text_matches": self.catalog.count_posters_matching(ctx.term, ctx.similarity_threshold),
		}
