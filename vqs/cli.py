#!/usr/bin/env python3
"""
CLI for VQS keyword search and ranking

Usage:
    python -m vqs.cli --input videos.json search KEYWORD [--limit 100]
    python -m vqs.cli --input videos.json batch KEYWORD [KEYWORD ...] [--limit 50]
    python -m vqs.cli --input videos.json keywords
    python -m vqs.cli show-config [--config scoring.json]
"""
import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime

from pydantic import ValidationError

from .scoring.config import ScoringConfig, load_config
from .scoring.models import SCORE_BUCKETS, parse_timestamp
from .search.engine import VideoSearchEngine
from .search.sources import JsonFileSource

logger = logging.getLogger(__name__)


def _parse_now(value: str) -> datetime:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid timestamp: {value}")
    return parsed


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Video Quality Score search CLI"
    )
    parser.add_argument(
        "--input",
        help="JSON file of candidate video records (list, or keyword -> list)"
    )
    parser.add_argument(
        "--config",
        help="JSON scoring config (default: $VQS_CONFIG or built-in defaults)"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--now",
        type=_parse_now,
        help="Reference time for video age, ISO 8601 (default: current time)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Search command
    search_parser = subparsers.add_parser(
        "search",
        help="Score and rank the candidates for one keyword"
    )
    search_parser.add_argument("keyword", help="Collection keyword to search")
    search_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of top videos to return (default: config default_limit)"
    )

    # Batch command
    batch_parser = subparsers.add_parser(
        "batch",
        help="Score and rank several keywords concurrently"
    )
    batch_parser.add_argument("keywords", nargs="+", help="Keywords to search")
    batch_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of top videos per keyword"
    )

    # Keywords command
    subparsers.add_parser(
        "keywords",
        help="List keywords in the input file with candidate counts"
    )

    # Show config command
    subparsers.add_parser(
        "show-config",
        help="Print the effective scoring configuration"
    )

    args = parser.parse_args(argv)
    if args.command != "show-config" and not args.input:
        parser.error(f"--input is required for '{args.command}'")
    return args


async def cmd_search(engine: VideoSearchEngine, args) -> dict:
    """Execute the search command."""
    result = await engine.search(args.keyword, limit=args.limit, now=args.now)
    return {"command": "search", **result.to_dict()}


async def cmd_batch(engine: VideoSearchEngine, args) -> dict:
    """Execute the batch command."""
    report = await engine.batch_search(args.keywords, limit=args.limit, now=args.now)
    return {"command": "batch", **report.to_dict()}


async def cmd_keywords(engine: VideoSearchEngine, args) -> dict:
    """Execute the keywords command."""
    keywords = engine.source.keywords
    counts = await engine.keyword_counts(keywords)
    return {
        "command": "keywords",
        "count": len(counts),
        "keywords": [{"keyword": k, "candidates": n} for k, n in counts.items()],
    }


def cmd_show_config(config: ScoringConfig, args) -> dict:
    """Execute the show-config command."""
    return {
        "command": "show-config",
        "config": config.model_dump(mode="json", by_alias=True),
    }


def _print_result(result: dict):
    status = "ok" if result["success"] else "FAILED"
    print(f"Keyword: {result['keyword']} [{status}]")
    print(f"  {result['message']}")
    if result.get("error"):
        print(f"  Error: {result['error']}")
    if result.get("skipped"):
        print(f"  Skipped records: {result['skipped']}")

    stats = result.get("stats")
    if stats:
        print(f"  Candidates: {stats['count']} | Avg: {stats['averageScore']} | "
              f"Median: {stats['medianScore']} | "
              f"Range: {stats['lowestScore']}-{stats['highestScore']}")
        dist = stats["distribution"]
        print("  Distribution: " + ", ".join(f"{b}={dist[b]}" for b in SCORE_BUCKETS))

    videos = result.get("videos", [])
    if videos:
        print("\n  RANK | SCORE | VIEWS        | VIDEO")
        print("  " + "-" * 50)
        for v in videos[:20]:
            print(f"  {v['rank']:>4} | {v['score']:>5} | {v['views']:>12,} | {v['videoId']}")
        if len(videos) > 20:
            print(f"  ... {len(videos) - 20} more")


async def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValidationError) as e:
        logger.error("Invalid scoring config: %s", e)
        return 2

    if args.command == "show-config":
        result = cmd_show_config(config, args)
    else:
        try:
            source = JsonFileSource(args.input)
        except (FileNotFoundError, ValueError) as e:
            logger.error("Cannot load candidates: %s", e)
            return 2

        engine = VideoSearchEngine(source, config)
        if args.command == "search":
            result = await cmd_search(engine, args)
        elif args.command == "batch":
            result = await cmd_batch(engine, args)
        elif args.command == "keywords":
            result = await cmd_keywords(engine, args)
        else:
            logger.error(f"Unknown command: {args.command}")
            return 1

    # Output results
    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    print(f"\n{'=' * 50}")
    print(f"Command: {result['command']}")
    print(f"{'=' * 50}")

    if args.command == "search":
        _print_result(result)

    elif args.command == "batch":
        for r in result["results"]:
            _print_result(r)
            print()
        s = result["summary"]
        print(f"Keywords: {s['totalKeywords']} "
              f"({s['successful']} successful, {s['failed']} failed)")
        print(f"Total videos: {s['totalVideos']}")

    elif args.command == "keywords":
        print(f"Keywords: {result['count']}")
        for kw in result["keywords"]:
            print(f"  {kw['candidates']:>6}  {kw['keyword']}")

    elif args.command == "show-config":
        print(json.dumps(result["config"], indent=2))

    print(f"{'=' * 50}\n")
    return 0


def run():
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
