"""Command line entrypoint for ranking and maintaining a gift catalogue"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import settings
from .errors import CorpusLoadError
from .schemas.query import GiftQuery, SortDirection, SortKey, SortSpec, SortToggle
from .services.catalogue import clean_records, summarize_catalogue, tag_items
from .services.corpus import load_corpus
from .services.query import run_query, summarize_rows
from .services.sorting import SortState
from .utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="giftrank",
        description="Rank a gift catalogue by value for money and maintain its data file."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for structured logs written to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rank = subparsers.add_parser("rank", help="Score, filter and sort the catalogue.")
    rank.add_argument("path", nargs="?", default=settings.CORPUS_PATH, help="Catalogue JSON file.")
    rank.add_argument("--category", default=settings.ALL_CATEGORY, help="Category label or 'tag:<id>'.")
    rank.add_argument("--tag", default=None, help="Taxonomy tag id to filter by.")
    rank.add_argument("--search", default="", help="Title or category substring.")
    rank.add_argument(
        "--sort-key",
        default=SortKey.VALUE.value,
        choices=[key.value for key in SortKey],
        help="Column to sort by.",
    )
    rank.add_argument(
        "--direction",
        default=SortDirection.DESC.value,
        choices=[direction.value for direction in SortDirection],
        help="Sort direction.",
    )
    rank.add_argument(
        "--toggle",
        default=None,
        choices=[toggle.value for toggle in SortToggle],
        help="Quick sort overriding --sort-key and --direction.",
    )
    rank.add_argument("--max-price", default=None, help="Price ceiling; ignored unless numeric.")
    rank.add_argument("--min-rating", default=None, help="Star floor; ignored unless numeric.")
    rank.add_argument("--in-stock-only", action="store_true", help="Hide gifts marked out of stock.")
    rank.add_argument("--limit", type=int, default=20, help="Rows to print.")
    rank.add_argument("--json", action="store_true", help="Print rows as JSON.")

    tag = subparsers.add_parser("tag", help="Recompute taxonomy tags and write them back.")
    tag.add_argument("path", help="Catalogue JSON file.")
    tag.add_argument("--output", default=None, help="Output file (defaults to rewriting the input).")

    clean = subparsers.add_parser("clean", help="Drop unusable scraped records.")
    clean.add_argument("path", help="Raw scraped JSON file.")
    clean.add_argument("output", help="Cleaned JSON file.")

    check = subparsers.add_parser("check", help="Print a data check report.")
    check.add_argument("path", nargs="?", default=settings.CORPUS_PATH, help="Catalogue JSON file.")

    return parser


def _read_json(path: str):
    with Path(path).open(encoding="utf-8") as fh:
        return json.load(fh)


def _write_json(path: str, payload) -> None:
    with Path(path).open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)


def _format_table(rows, limit: int) -> List[str]:
    lines = [f"{'#':>3}  {'price':>9}  {'stars':>5}  {'score':>7}  {'value':>8}  {'pop':>4}  {'tier':>4}  title"]
    for position, row in enumerate(rows[:limit], start=1):
        lines.append(
            f"{position:>3}  {row.price_min:>9.2f}  {row.stars:>5.1f}  {row.score:>7.3f}  "
            f"{row.value:>8.4f}  {row.pop_rating:>4.1f}  {row.analytics_priority:>4}  {row.title}"
        )
    return lines


def run_rank(args) -> int:
    corpus = load_corpus(args.path)

    state = SortState(SortSpec(key=SortKey(args.sort_key), direction=SortDirection(args.direction)))
    if args.toggle:
        state.set_toggle(SortToggle(args.toggle))

    query = GiftQuery(
        category=args.category,
        tag=args.tag,
        search=args.search,
        sort=state.spec,
        max_price=args.max_price,
        min_rating=args.min_rating,
        in_stock_only=args.in_stock_only,
    )
    rows = run_query(corpus, query)

    if args.json:
        print(json.dumps([row.model_dump(mode="json") for row in rows[:args.limit]], ensure_ascii=False, indent=2))
        return 0

    for line in _format_table(rows, args.limit):
        print(line)

    summary = summarize_rows(rows)
    print(
        f"{summary.count} of {len(corpus)} gifts · avg price {summary.avg_price:.0f} · "
        f"avg score {summary.avg_score:.3f} · avg value {summary.avg_value:.4f}"
    )
    return 0


def run_tag(args) -> int:
    corpus = load_corpus(args.path)
    tagged = tag_items(corpus.items)

    output = args.output or args.path
    _write_json(output, [item.model_dump(mode="json", exclude_none=True) for item in tagged])

    untagged = sum(1 for item in tagged if not item.tags)
    print(f"Tagged: {len(tagged) - untagged} | Untagged: {untagged}")
    print(f"Wrote {len(tagged)} items to {output}")
    return 0


def run_clean(args) -> int:
    records = _read_json(args.path)
    if not isinstance(records, list):
        raise CorpusLoadError("Scraped data must be a JSON array", path=args.path)

    cleaned = clean_records(records)
    _write_json(args.output, cleaned)

    print(f"Before: {len(records)} | After: {len(cleaned)} | Removed: {len(records) - len(cleaned)}")
    return 0


def run_check(args) -> int:
    corpus = load_corpus(args.path)
    report = summarize_catalogue(corpus.items)
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0


COMMANDS = {
    "rank": run_rank,
    "tag": run_tag,
    "clean": run_clean,
    "check": run_check,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "limit", 1) <= 0:
        parser.error("--limit must be greater than 0")

    setup_logging(log_level=args.log_level, stream=sys.stderr)

    try:
        return COMMANDS[args.command](args)
    except (CorpusLoadError, OSError, json.JSONDecodeError) as e:
        print(f"Load failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
