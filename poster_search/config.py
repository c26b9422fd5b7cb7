"""
Search settings loaded from environment variables via pydantic-settings.
Every tunable threshold and result cap used by the cascade lives here.

Environment variables use the POSTER_SEARCH_ prefix, e.g.
POSTER_SEARCH_ARTIST_SIMILARITY_THRESHOLD=0.4 overrides artist_similarity_threshold.
"""

from pydantic import Field, field_validator  # field constraints and checks
from pydantic_settings import BaseSettings, SettingsConfigDict  # env-driven settings


class SearchSettings(BaseSettings):
	"""
	Thresholds and limits for the poster search engine.
	Defaults mirror the production tuning; override through env vars or a .env file.
	"""

	model_config = SettingsConfigDict(env_prefix="POSTER_SEARCH_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

	# === Similarity thresholds (trigram scores, 0..1) ===
	similarity_threshold: float = 0.35  # generic fallback cutoff for free text
	artist_similarity_threshold: float = 0.3  # artist name must clear this
	venue_similarity_threshold: float = 0.2  # venue/city fields in combined search
	city_similarity_threshold: float = 0.3  # city match in strict artist+city searches
	city_similarity_floor: float = 0.2  # lowest cutoff for multi-word city-only searches
	likely_artist_threshold: float = 0.9  # "Flying Lotus" style two-word artist boost
	likely_artist_gate: float = 0.8  # inclusion cutoff for the two-word artist case
	high_confidence_threshold: float = 0.7  # similarity treated as a near-certain name hit

	# === Result caps ===
	single_term_limit: int = Field(default=20, gt=0)
	complex_limit: int = Field(default=50, gt=0)
	strict_limit: int = Field(default=100, gt=0)

	# === Input handling ===
	min_query_length: int = Field(default=2, gt=0)
	two_digit_year_pivot: int = Field(default=50, ge=0, le=99)  # 2-digit years below this are 20xx

	# === Concurrency ===
	parallel_combinations: bool = False  # evaluate artist/city splits in a thread pool
	max_workers: int = Field(default=4, gt=0)

	@field_validator(
		"similarity_threshold",
		"artist_similarity_threshold",
		"venue_similarity_threshold",
		"city_similarity_threshold",
		"city_similarity_floor",
		"likely_artist_threshold",
		"likely_artist_gate",
		"high_confidence_threshold",
	)
	@classmethod
	def _check_unit_interval(cls, value: float) -> float:
		if not 0.0 <= value <= 1.0:
			raise ValueError(f"threshold must be within [0, 1], got {value}")
		return value
