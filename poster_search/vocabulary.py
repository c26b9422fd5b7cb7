"""
Static vocabularies used by query understanding.
Stop words, venue keywords, city lists, and calendar words are loaded once at import and never mutated.
"""

from typing import Dict, FrozenSet, Tuple


# Tokens dropped before matching (conjunctions, articles, boolean-like words)
STOP_WORDS: FrozenSet[str] = frozenset({
	"or", "and", "the", "in", "at", "on", "by", "of", "with", "for",
})

# Words that signal a venue reference inside a query
VENUE_KEYWORDS: Tuple[str, ...] = (
	"arena", "theater", "theatre", "hall", "center", "centre", "stadium",
	"garden", "gardens", "coliseum", "pavilion", "amphitheatre", "amphitheater",
	"auditorium", "convention", "fairgrounds", "park", "square", "forum",
	"bowl", "palace", "ballroom", "opera", "civic", "festival", "club",
	"lounge", "concert hall", "music hall", "performing arts", "venue",
	"stage", "grounds", "house of blues", "field", "farm", "center stage",
	"casino", "pier", "dome", "music box", "tabernacle", "civic center",
	"nightclub", "bar", "pub",
)

# Venue names specific enough to stand on their own as a one-word search
SPECIFIC_VENUES: Tuple[str, ...] = (
	"fillmore", "ryman", "beacon", "paramount", "red rocks", "msg",
	"madison square garden", "hollywood bowl", "gorge", "tabernacle",
	"greek theatre", "fox theater", "apollo", "capitol theatre",
)

# Cities that host a lot of shows; used by the venue-likelihood heuristic
COMMON_CITIES: Tuple[str, ...] = (
	"new york", "los angeles", "chicago", "seattle", "portland", "boston",
	"austin", "nashville", "miami", "denver", "boulder", "san francisco",
	"oakland", "berkeley", "las vegas", "atlanta", "dallas", "houston",
	"philadelphia", "washington", "toronto", "montreal", "vancouver", "london",
	"detroit", "minneapolis", "st paul", "san diego", "phoenix", "tucson",
	"sacramento", "memphis", "new orleans", "charlotte", "raleigh", "durham",
	"charleston", "savannah", "orlando", "tampa", "cleveland", "cincinnati",
	"columbus", "pittsburgh", "buffalo", "syracuse", "albany", "providence",
	"hartford", "omaha", "kansas city", "st louis", "milwaukee", "indianapolis",
	"louisville", "lexington", "birmingham", "richmond", "baltimore",
	"san jose", "albuquerque", "santa fe", "salt lake city", "boise",
	"spokane", "eugene", "tacoma", "olympia", "san antonio", "fort worth",
	"oklahoma city", "tulsa", "wichita", "des moines", "grand rapids",
	"madison", "ann arbor", "burlington", "hollywood",
)

# Cities whose names span several words; matched as whole phrases
MULTI_WORD_CITIES: Tuple[str, ...] = (
	"new york", "los angeles", "san francisco", "san diego", "san jose",
	"san antonio", "las vegas", "salt lake city", "jersey city", "mexico city",
	"new orleans", "st. louis", "st louis", "kansas city", "oklahoma city",
	"fort lauderdale", "fort worth", "fort collins", "santa fe", "santa cruz",
	"santa monica", "santa barbara", "santa rosa", "baton rouge",
	"coral gables", "coral springs", "grand rapids", "grand junction",
	"north charleston", "west palm beach", "palm springs", "palm desert",
	"long beach", "virginia beach", "newport beach", "south bend",
	"colorado springs", "iowa city", "atlantic city", "cedar rapids",
	"lake tahoe", "des moines", "el paso", "san bernardino", "palo alto",
	"rio rancho", "green bay", "black mountain", "red hook", "red bank",
	"mount vernon", "new haven", "new brunswick", "new rochelle",
)

MONTH_NAMES: Tuple[str, ...] = (
	"january", "february", "march", "april", "may", "june",
	"july", "august", "september", "october", "november", "december",
)

# Month name or three-letter abbreviation -> calendar month (1-12)
MONTH_LOOKUP: Dict[str, int] = {name: i + 1 for i, name in enumerate(MONTH_NAMES)}
MONTH_LOOKUP.update({name[:3]: i + 1 for i, name in enumerate(MONTH_NAMES)})
MONTH_LOOKUP["sept"] = 9

# Words that turn two date phrases into a range
RANGE_WORDS: FrozenSet[str] = frozenset({"between", "from", "to", "through", "thru", "until", "and"})

ORDINAL_WORDS: Dict[str, int] = {
	"first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
	"sixth": 6, "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10,
	"eleventh": 11, "twelfth": 12, "thirteenth": 13, "fourteenth": 14,
	"fifteenth": 15, "sixteenth": 16, "seventeenth": 17, "eighteenth": 18,
	"nineteenth": 19, "twentieth": 20, "twenty-first": 21, "twenty-second": 22,
	"twenty-third": 23, "twenty-fourth": 24, "twenty-fifth": 25,
	"twenty-sixth": 26, "twenty-seventh": 27, "twenty-eighth": 28,
	"twenty-ninth": 29, "thirtieth": 30, "thirty-first": 31,
}

# Spelled-out numbers used for years like "twenty twenty-four"
NUMBER_WORDS: Dict[str, int] = {
	"zero": 0, "oh": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
	"six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11,
	"twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
	"sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
	"twenty": 20, "thirty": 30, "forty": 40, "fifty": 50, "sixty": 60,
	"seventy": 70, "eighty": 80, "ninety": 90,
}
