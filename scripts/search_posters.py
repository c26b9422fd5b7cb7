"""
Run poster searches from the command line.

This script:
1) Loads the catalog from data/posters.json (or --catalog)
2) Builds the search engine with settings from the environment
3) Runs each query given on the command line and logs the ranked posters

Usage:
    python -m scripts.search_posters "Phish 12/31" "Grateful Dead Seattle"
    python -m scripts.search_posters --explain "phish new york 2024"
"""

import argparse  # command-line options
import time  # measure query timings
from pathlib import Path  # filesystem-safe paths

from loguru import logger  # console logging

from poster_search.config import SearchSettings  # env-driven thresholds
from poster_search.data_loader import DataLoader  # catalog ingestion
from poster_search.search_engine import SearchEngine  # query resolution


def parse_args():
	root = Path(__file__).resolve().parents[1]  # project root
	parser = argparse.ArgumentParser(description="Search the poster catalog")
	parser.add_argument("queries", nargs="+", help="search strings")
	parser.add_argument("--catalog", default=str(root / "data" / "posters.json"), help="catalog JSON file")
	parser.add_argument("--threshold", type=float, default=None, help="generic similarity threshold")
	parser.add_argument("--timeout", type=float, default=None, help="per-query timeout in seconds")
	parser.add_argument("--explain", action="store_true", help="show query understanding instead of results")
	return parser.parse_args()


def main():
	args = parse_args()

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Poster Search")
	logger.info("=" * 60)

	# 1) Load data
	logger.info("[1/2] Loading catalog...")
	catalog = DataLoader().load_catalog(args.catalog)  # read dataset
	engine = SearchEngine(catalog, SearchSettings())  # engine instance

	# 2) Run queries
	logger.info("[2/2] Running queries...")
	for query in args.queries:
		if args.explain:
			details = engine.explain(query)
			for key, value in details.items():
				logger.info(f"  {key}: {value}")
			continue

		t0 = time.time()  # start timer
		ids = engine.search(query, similarity_threshold=args.threshold, timeout=args.timeout)
		logger.info(f"'{query}' -> {len(ids)} posters in {(time.time() - t0) * 1000:.1f} ms")
		for rank, poster_id in enumerate(ids, 1):
			poster = catalog.poster(poster_id)
			logger.info(f"  {rank:>2}. [{poster_id}] {poster.title if poster else '?'}")

	logger.info("=" * 60)


if __name__ == "__main__":
	main()  # invoke runner
