"""
Data loading module.
Reads a catalog JSON document (artists, venues, events, posters) into an InMemoryCatalog.
"""

# Standard libs for JSON parsing, dates, typing, and paths
import json  # read the catalog document
from datetime import date  # event dates
from pathlib import Path  # filesystem-safe paths
from typing import Any, Callable, Dict, List, Tuple, TypeVar, Union  # type hints

# Project types
from .catalog import CatalogDataError, InMemoryCatalog  # target container and load errors
from .models import Artist, Event, Poster, Venue  # structured catalog records

# Console logging
from loguru import logger  # console logger


T = TypeVar("T")


class DataLoader:
	"""
	Handles loading and light normalization of catalog data.
	Malformed records are skipped with a warning; a malformed document raises CatalogDataError.
	"""

	SECTIONS = ("artists", "venues", "events", "posters")  # top-level keys read from the document

	def load_catalog(self, filepath: Union[str, Path]) -> InMemoryCatalog:
		"""Load a catalog JSON file and build the in-memory catalog from it."""
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise CatalogDataError(f"Catalog file not found: {filepath}")

		logger.info(f"[DataLoader] Loading catalog from {filepath}...")  # log action
		try:
			with open(filepath, "r", encoding="utf-8") as f:
				document = json.load(f)  # whole document at once; catalogs are small
		except json.JSONDecodeError as e:
			raise CatalogDataError(f"Catalog file {filepath} is not valid JSON: {e}") from e

		return self.load_document(document)

	def load_document(self, document: Any) -> InMemoryCatalog:
		"""Build a catalog from an already-parsed document."""
		if not isinstance(document, dict) or not isinstance(document.get("posters"), list):
			raise CatalogDataError("Catalog document must be an object with a 'posters' list")

		for section in self.SECTIONS:
			if section in document and not isinstance(document[section], list):
				raise CatalogDataError(f"Catalog section '{section}' must be a list")

		artists = self._parse_section(document.get("artists", []), "artist", self._parse_artist)
		venues = self._parse_section(document.get("venues", []), "venue", self._parse_venue)
		events = self._parse_section(document.get("events", []), "event", self._parse_event)
		posters = self._parse_section(document.get("posters", []), "poster", self._parse_poster)

		logger.info(
			f"[DataLoader] Successfully loaded {len(artists)} artists, {len(venues)} venues, "
			f"{len(events)} events, {len(posters)} posters."
		)  # summary
		return InMemoryCatalog(artists=artists, venues=venues, events=events, posters=posters)

	def _parse_section(self, records: List[Any], kind: str, parse: Callable[[Dict], T]) -> List[T]:
		parsed = []  # accumulator for records that survive validation
		for index, data in enumerate(records, 1):  # keep track of position for diagnostics
			try:
				if not isinstance(data, dict):
					raise ValueError(f"expected an object, got {type(data).__name__}")
				parsed.append(parse(data))  # convert dict -> record
			except (KeyError, TypeError, ValueError) as e:
				logger.warning(f"[DataLoader] Skipping invalid {kind} #{index}: {e}")  # malformed record
				continue  # move on
		return parsed

	def _parse_artist(self, data: Dict) -> Artist:
		return Artist(id=int(data["id"]), name=self._normalize_text(data["name"]))

	def _parse_venue(self, data: Dict) -> Venue:
		return Venue(
			id=int(data["id"]),  # required
			name=self._normalize_text(data["name"]),  # required
			city=self._normalize_text(data.get("city", "")),  # may be blank
			country=self._normalize_text(data.get("country", "")),  # optional
			state=self._normalize_text(data["state"]) if data.get("state") else None,  # optional
		)

	def _parse_event(self, data: Dict) -> Event:
		# ISO "YYYY-MM-DD"; a timestamp suffix is ignored
		raw_date = str(data["date"])[:10]
		return Event(
			id=int(data["id"]),
			name=self._normalize_text(data.get("name", "")),
			date=date.fromisoformat(raw_date),  # raises ValueError for bad dates
			venue_id=int(data["venue_id"]) if data.get("venue_id") is not None else None,
			artist_ids=self._parse_ids(data.get("artist_ids", [])),
		)

	def _parse_poster(self, data: Dict) -> Poster:
		return Poster(
			id=int(data["id"]),
			title=self._normalize_text(data.get("title", "")),
			description=self._normalize_text(data.get("description", "")),
			status=str(data.get("status") or "active").strip(),
			artist_ids=self._parse_ids(data.get("artist_ids", [])),
			event_ids=self._parse_ids(data.get("event_ids", [])),
		)

	def _parse_ids(self, value) -> Tuple[int, ...]:
		"""
		Normalize a value that may be None, a list, or a comma-separated string
		into a tuple of integer ids.
		"""
		if value is None:  # missing field
			return ()
		if isinstance(value, str):  # "1, 2, 3"
			value = [v for v in value.split(",") if v.strip()]
		return tuple(int(v) for v in value)

	def _normalize_text(self, text) -> str:
		"""Trim and collapse whitespace; None becomes an empty string."""
		if text is None:
			return ""
		return " ".join(str(text).split())
