"""Terminal tables for the collaborative-filtering recommender.

Pick a target user (or seed movie), a similarity metric and a result count;
the ranked records are printed as a table.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

from .config import load_config
from .errors import RecommenderError
from .paths import get_repo_root
from .service.recommender import CollaborativeRecommender
from .similarity.metrics import SimilarityMetric
from .utils import setup_logging


MODES = (
    "users",
    "top-matching-users",
    "recommended-movies",
    "item-based-recommended-movies",
    "similar-movies",
    "recommended-movies-for-movie",
)


def _non_negative_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Collaborative filtering recommendations (Euclidean / Pearson)")
    p.add_argument("mode", choices=MODES, help="Which ranking to print")
    p.add_argument("--user-id", type=int, default=None, help="Target UserId (user-seeded modes)")
    p.add_argument("--movie-id", type=int, default=None, help="Seed MovieId (movie-seeded modes)")
    p.add_argument(
        "--similarity",
        type=str,
        default=None,
        help=f"One of {', '.join(m.value for m in SimilarityMetric)}; default from config",
    )
    p.add_argument("--results", type=_non_negative_int, default=None, help="How many rows to return; default from config")
    p.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    p.add_argument("--data-dir", type=Path, default=None, help="Directory holding users.csv, movies.csv, ratings.csv")
    return p


def _records_frame(records: list) -> pd.DataFrame:
    return pd.DataFrame([r.__dict__ for r in records])


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    repo_root = get_repo_root()
    config_path = Path(args.config) if args.config is not None else repo_root / "config.yaml"
    cfg = load_config(config_path, repo_root=repo_root)
    setup_logging(cfg.log_level)

    rec = CollaborativeRecommender(data_dir=(args.data_dir or cfg.data_dir))
    similarity = args.similarity if args.similarity is not None else cfg.default_similarity
    results = int(args.results) if args.results is not None else int(cfg.default_results)

    try:
        if args.mode == "users":
            records = rec.list_users()
        elif args.mode in ("top-matching-users", "recommended-movies", "item-based-recommended-movies"):
            if args.user_id is None:
                print(f"{args.mode} requires --user-id", file=sys.stderr)
                return 2
            op = {
                "top-matching-users": rec.top_matching_users,
                "recommended-movies": rec.recommended_movies,
                "item-based-recommended-movies": rec.item_based_recommended_movies,
            }[args.mode]
            records = op(int(args.user_id), similarity, results)
        else:
            if args.movie_id is None:
                print(f"{args.mode} requires --movie-id", file=sys.stderr)
                return 2
            op = {
                "similar-movies": rec.similar_movies,
                "recommended-movies-for-movie": rec.recommended_movies_for_movie,
            }[args.mode]
            records = op(int(args.movie_id), similarity, results)
    except RecommenderError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"\n=== {args.mode} ===")
    if records:
        print(_records_frame(records).to_string(index=False))
    else:
        print("No results.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
