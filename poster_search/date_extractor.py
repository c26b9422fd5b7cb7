"""
Date extraction module.
Finds calendar references in a search string (12/31/1999, 12/31, "June 2025",
"next month", "between June and August 2025", bare years, month names) and splits
them from the rest of the text, which is then used for artist/venue matching.
"""

import re  # date pattern recognition
from datetime import date, datetime  # calendar values
from typing import Optional, Tuple  # type annotations

from dateutil import parser as dateutil_parser  # interprets recognized date phrases
from dateutil.relativedelta import relativedelta  # month/year arithmetic

from loguru import logger  # console logging

from .models import DateInfo  # structured date result
from .vocabulary import MONTH_LOOKUP, MONTH_NAMES, NUMBER_WORDS, ORDINAL_WORDS  # calendar words


# Two defaults that differ in every component; a field is "certain" only when both parses agree.
# Both are leap years so Feb 29 parses either way.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2004, 2, 2)

# Building blocks for natural-language phrases
_MONTH_FULL = "|".join(MONTH_NAMES)
_MONTH_ABBR = "sept|jan|feb|mar|apr|jun|jul|aug|sep|oct|nov|dec"
_MONTH = rf"(?:{_MONTH_FULL}|{_MONTH_ABBR})\b\.?"
_ORDINAL = "|".join(re.escape(w) for w in sorted(ORDINAL_WORDS, key=len, reverse=True))
_DAY = rf"(?:\d{{1,2}}(?:st|nd|rd|th)?\b|(?:{_ORDINAL})\b)"
_TENS = "twenty|thirty|forty|fifty|sixty|seventy|eighty|ninety"
_UNITS = "one|two|three|four|five|six|seven|eight|nine"
_TEENS = "ten|eleven|twelve|thirteen|fourteen|fifteen|sixteen|seventeen|eighteen|nineteen"
_SPELLED_YEAR = rf"(?:nineteen|twenty)[\s-]+(?:(?:{_TENS})(?:[\s-]+(?:{_UNITS}))?|{_TEENS}|oh[\s-]+(?:{_UNITS}))\b"
_YEAR = rf"(?:(?:19|20)\d{{2}}\b|{_SPELLED_YEAR})"
# A month phrase without capture groups, for embedding in the range pattern
_MONTH_PHRASE = rf"(?:(?:the\s+)?{_DAY}\s+(?:of\s+)?)?{_MONTH}(?:\s+(?:the\s+)?{_DAY})?(?:,?\s+{_YEAR})?"


class DateExtractor:
	"""
	Splits a query into DateInfo and the remaining text.
	Recognition order (first hit wins): M/D/Y, M/D, natural language, bare year, month name.
	Stateless apart from an optional fixed reference day used for relative phrases.
	"""

	# Pre-compiled regex patterns for date expressions
	RE_FULL_DATE = re.compile(r"(?<![\d/.-])(\d{1,2})([/.-])(\d{1,2})\2(\d{4}|\d{2})(?![\d/.-])")  # 12/31/1999, 6-15-24
	RE_MONTH_DAY = re.compile(r"(?<![\d/])(\d{1,2})/(\d{1,2})(?![\d/])")  # 12/31
	RE_YEAR = re.compile(r"\b(19\d{2}|20\d{2})\b")  # 1977, 2024
	RE_MONTH_NAME = re.compile(rf"\b({_MONTH_FULL})\b", re.I)  # whole-word month names only
	RE_MONTH_PHRASE = re.compile(
		rf"\b(?:(?:the\s+)?(?P<day1>{_DAY})\s+(?:of\s+)?)?(?P<month>{_MONTH})"
		rf"(?:\s+(?:the\s+)?(?P<day2>{_DAY}))?(?:,?\s+(?P<year>{_YEAR}))?",
		re.I,
	)  # June, June 15th, 15 June 2024, June fifteenth twenty twenty-four
	RE_RANGE = re.compile(
		rf"\b(?:(?P<lead>between|from)\s+)?(?P<first>{_MONTH_PHRASE})\s*"
		rf"(?P<joiner>\band\b|\bto\b|\bthrough\b|\bthru\b|\buntil\b|-)\s*(?P<second>{_MONTH_PHRASE})",
		re.I,
	)  # between June and August 2025, from June 2025 to August 2025, June-August
	RE_WEEKEND_OF = re.compile(rf"\b(?:the\s+)?weekend\s+of\s+(?:the\s+)?(?P<phrase>{_MONTH_PHRASE})", re.I)
	RE_RELATIVE = re.compile(
		r"\b(?P<word>today|tonight|tomorrow|yesterday)\b|\b(?P<which>this|next|last)\s+(?P<unit>weekend|week|month|year)\b",
		re.I,
	)
	RE_SPACES = re.compile(r"\s+")

	def __init__(self, today: Optional[date] = None, two_digit_year_pivot: int = 50):
		# A fixed reference day keeps relative phrases reproducible in tests
		self._today = today
		self.two_digit_year_pivot = two_digit_year_pivot

	def extract(self, text: str) -> DateInfo:
		"""Main entry: return DateInfo for the text, with the date portion removed."""
		if not text or not text.strip():
			return DateInfo(remaining_text=(text or "").strip())

		found = (
			self._match_full_date(text)
			or self._match_month_day(text)
			or self._match_natural_language(text)
			or self._match_bare_year(text)
			or self._match_month_name(text)
		)
		if found is None:
			logger.debug(f"[DateExtractor] No date in '{text}'")
			return DateInfo(remaining_text=self._collapse(text))

		info, span = found
		info = self._finalize(info, text, span)
		logger.debug(
			f"[DateExtractor] '{text}' -> year={info.year} month={info.month} day={info.day} "
			f"range={info.is_range} remaining='{info.remaining_text}'"
		)
		return info

	def today(self) -> date:
		return self._today or date.today()

	# --- Step 1: explicit M/D/Y -------------------------------------------------

	def _match_full_date(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		for m in self.RE_FULL_DATE.finditer(text):
			month, day, raw_year = int(m.group(1)), int(m.group(3)), m.group(4)
			year = self._window_year(int(raw_year)) if len(raw_year) == 2 else int(raw_year)
			try:
				exact = date(year, month, day)
			except ValueError:  # 2/30/2024 and the like
				logger.debug(f"[DateExtractor] Ignoring impossible date '{m.group(0)}'")
				continue
			info = DateInfo(year=year, month=month, day=day, start_date=exact, end_date=exact, date_text=m.group(0))
			return info, m.span()
		return None

	def _window_year(self, two_digit: int) -> int:
		# 00-49 -> 2000s, 50-99 -> 1900s with the default pivot
		return 2000 + two_digit if two_digit < self.two_digit_year_pivot else 1900 + two_digit

	# --- Step 2: explicit M/D ---------------------------------------------------

	def _match_month_day(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		for m in self.RE_MONTH_DAY.finditer(text):
			month, day = int(m.group(1)), int(m.group(2))
			if not (1 <= month <= 12 and 1 <= day <= 31):
				continue
			info = DateInfo(month=month, day=day, date_text=m.group(0))
			self._fill_span(info)
			return info, m.span()
		return None

	# --- Step 3: natural language -----------------------------------------------

	def _match_natural_language(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		try:
			return (
				self._match_range(text)
				or self._match_weekend_of(text)
				or self._match_relative(text)
				or self._match_month_phrase(text)
			)
		except Exception as e:
			logger.warning(f"[DateExtractor] Natural-language date parsing failed for '{text}': {e}")
			return None

	def _match_range(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		for m in self.RE_RANGE.finditer(text):
			# "June and August" only reads as a range after "between"
			if m.group("joiner").lower() == "and" and (m.group("lead") or "").lower() != "between":
				continue
			first = self._components_of(m.group("first"))
			second = self._components_of(m.group("second"))
			if first is None or second is None:
				continue
			info = self._build_range(first, second)
			if info is None:
				continue
			info.date_text = m.group(0)
			return info, m.span()
		return None

	def _build_range(
		self,
		first: Tuple[Optional[int], Optional[int], Optional[int]],
		second: Tuple[Optional[int], Optional[int], Optional[int]],
	) -> Optional[DateInfo]:
		y1, m1, d1 = first
		y2, m2, d2 = second
		explicit_end_year = y2 is not None
		# A side without a year borrows the other side's
		y1 = y1 if y1 is not None else y2
		y2 = y2 if y2 is not None else y1
		ref1 = y1 if y1 is not None else self.today().year
		ref2 = y2 if y2 is not None else ref1
		try:
			start = date(ref1, m1, d1 or 1)
			end = date(ref2, m2, d2) if d2 else date(ref2, m2, 1) + relativedelta(months=1, days=-1)
		except ValueError:
			return None
		if end < start and not explicit_end_year:
			end = end + relativedelta(years=1)  # "November to February" wraps the year
		if end < start:
			return None
		return DateInfo(year=y1, month=m1, day=d1, start_date=start, end_date=end, is_range=True)

	def _match_weekend_of(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		m = self.RE_WEEKEND_OF.search(text)
		if not m:
			return None
		components = self._components_of(m.group("phrase"), allow_bare_abbreviation=True)
		if components is None:
			return None
		year, month, day = components
		# The month is kept even though a "weekend of" reading never pins a day
		info = DateInfo(year=year, month=month, day=day, date_text=m.group(0))
		self._fill_span(info)
		return info, m.span()

	def _match_relative(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		m = self.RE_RELATIVE.search(text)
		if not m:
			return None
		today = self.today()
		info = DateInfo(date_text=m.group(0))

		word = (m.group("word") or "").lower()
		if word:
			offset = {"today": 0, "tonight": 0, "tomorrow": 1, "yesterday": -1}[word]
			day = today + relativedelta(days=offset)
			info.year, info.month, info.day = day.year, day.month, day.day
			info.start_date = info.end_date = day
			return info, m.span()

		offset = {"this": 0, "next": 1, "last": -1}[m.group("which").lower()]
		unit = m.group("unit").lower()
		if unit == "month":
			first = today.replace(day=1) + relativedelta(months=offset)
			info.year, info.month = first.year, first.month
			self._fill_span(info)
		elif unit == "year":
			info.year = today.year + offset
			self._fill_span(info)
		else:
			monday = today - relativedelta(days=today.weekday()) + relativedelta(weeks=offset)
			if unit == "weekend":
				info.start_date = monday + relativedelta(days=5)
				info.end_date = monday + relativedelta(days=6)
			else:
				info.start_date = monday
				info.end_date = monday + relativedelta(days=6)
			info.is_range = True
		return info, m.span()

	def _match_month_phrase(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		for m in self.RE_MONTH_PHRASE.finditer(text):
			components = self._components_from_match(m)
			if components is None:
				continue
			year, month, day = components
			info = DateInfo(year=year, month=month, day=day, date_text=m.group(0))
			self._fill_span(info)
			return info, m.span()
		return None

	def _components_of(
		self,
		phrase: str,
		allow_bare_abbreviation: bool = False,
	) -> Optional[Tuple[Optional[int], Optional[int], Optional[int]]]:
		m = self.RE_MONTH_PHRASE.fullmatch(phrase.strip())
		if not m:
			return None
		return self._components_from_match(m, allow_bare_abbreviation)

	def _components_from_match(
		self,
		m: "re.Match",
		allow_bare_abbreviation: bool = False,
	) -> Optional[Tuple[Optional[int], Optional[int], Optional[int]]]:
		month_word = m.group("month").lower().rstrip(".")
		day_word = m.group("day1") or m.group("day2")
		year_word = m.group("year")
		# "mar", "dec" alone are too ambiguous to be dates
		if month_word not in MONTH_NAMES and not (day_word or year_word or allow_bare_abbreviation):
			return None

		pieces = [MONTH_NAMES[MONTH_LOOKUP[month_word] - 1]]
		if day_word:
			pieces.append(str(self._day_value(day_word)))
		if year_word:
			pieces.append(str(self._year_value(year_word)))
		return self._interpret(" ".join(pieces))

	def _interpret(self, phrase: str) -> Optional[Tuple[Optional[int], Optional[int], Optional[int]]]:
		"""Parse a normalized phrase with dateutil; keep only the components both parses agree on."""
		try:
			a = dateutil_parser.parse(phrase, default=_DEFAULT_A)
			b = dateutil_parser.parse(phrase, default=_DEFAULT_B)
		except (ValueError, OverflowError) as e:
			logger.debug(f"[DateExtractor] dateutil rejected '{phrase}': {e}")
			return None
		year = a.year if a.year == b.year else None
		month = a.month if a.month == b.month else None
		day = a.day if a.day == b.day else None
		if year is not None and not 1900 <= year <= 2099:
			return None
		if month is None:
			return None
		return year, month, day

	@staticmethod
	def _day_value(word: str) -> int:
		word = word.lower()
		if word in ORDINAL_WORDS:
			return ORDINAL_WORDS[word]
		return int(re.sub(r"(st|nd|rd|th)$", "", word))

	@staticmethod
	def _year_value(word: str) -> int:
		if word.isdigit():
			return int(word)
		parts = [p for p in re.split(r"[\s-]+", word.lower()) if p]
		century = NUMBER_WORDS[parts[0]]
		return century * 100 + sum(NUMBER_WORDS[p] for p in parts[1:])

	# --- Steps 4 and 5: bare year, bare month name --------------------------------

	def _match_bare_year(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		m = self.RE_YEAR.search(text)
		if not m:
			return None
		info = DateInfo(year=int(m.group(1)), date_text=m.group(0))
		self._fill_span(info)
		return info, m.span()

	def _match_month_name(self, text: str) -> Optional[Tuple[DateInfo, Tuple[int, int]]]:
		m = self.RE_MONTH_NAME.search(text)
		if not m:
			return None
		info = DateInfo(month=MONTH_LOOKUP[m.group(1).lower()], date_text=m.group(0))
		self._fill_span(info)
		return info, m.span()

	# --- Post-processing --------------------------------------------------------

	def _finalize(self, info: DateInfo, text: str, span: Tuple[int, int]) -> DateInfo:
		start, end = span
		remaining = self._collapse(f"{text[:start]} {text[end:]}")

		# Only the first year counts; every other year token is stripped
		years = self.RE_YEAR.findall(remaining)
		if years:
			if info.year is None:
				info.year = int(years[0])
				if not info.is_range:
					self._fill_span(info)
			remaining = self._collapse(self.RE_YEAR.sub(" ", remaining))

		info.has_date = True
		info.remaining_text = remaining
		return info

	def _fill_span(self, info: DateInfo):
		"""Set start/end to the span the known components cover (current year when none given)."""
		ref_year = info.year if info.year is not None else self.today().year
		try:
			if info.month is not None and info.day is not None:
				info.start_date = info.end_date = date(ref_year, info.month, info.day)
			elif info.month is not None:
				info.start_date = date(ref_year, info.month, 1)
				info.end_date = info.start_date + relativedelta(months=1, days=-1)
			elif info.year is not None:
				info.start_date = date(ref_year, 1, 1)
				info.end_date = date(ref_year, 12, 31)
		except ValueError:  # Feb 29 against a non-leap reference year
			info.start_date = info.end_date = None

	def _collapse(self, text: str) -> str:
		return self.RE_SPACES.sub(" ", text).strip()
