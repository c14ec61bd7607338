"""
Command-line interface.

    cheapswap analyze deck.txt --threshold 5 --csv swaps.csv
    cheapswap card "Rhystic Study" --max-price 10
    cheapswap import https://archidekt.com/decks/123456 > deck.txt
    cheapswap serve --port 8000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn

from cheapswap.config import DEFAULT_MAX_PRICE, DEFAULT_MAX_RESULTS, settings
from cheapswap.models.failure import KnownError
from cheapswap.models.substitute import DeckAnalysis, ScoredCandidate
from cheapswap.services.csv_export import analysis_to_csv
from cheapswap.services.deck_analyzer import AnalysisOptions, analyze_deck, search_card
from cheapswap.services.deck_import import import_deck

logger = logging.getLogger(__name__)


def _format_price(price: float | None) -> str:
    return "N/A" if price is None else f"${price:.2f}"


def _print_candidates(candidates: list[ScoredCandidate]) -> None:
    if not candidates:
        print("    No substitutes found. Try raising the price cap or threshold.")
        return
    for c in candidates:
        print(f"    ~{_format_price(c.price):>8}  {c.card.name}  (similarity {round(c.score)})")


def _print_analysis(analysis: DeckAnalysis) -> None:
    for row in analysis.rows:
        if row.error:
            print(f"{row.quantity}x {row.name}: {row.error}")
            continue

        badge = ""
        if row.is_expensive:
            badge = " • expensive"
        elif row.single_mode:
            badge = " • single-card mode"
        print(f"{row.quantity}x {row.name}  {_format_price(row.price)}{badge}")

        if row.search_error:
            print(f"    {row.search_error}")
        elif row.candidates or row.is_expensive or row.single_mode:
            _print_candidates(row.candidates)


def _read_decklist(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


async def _run_analyze(args: argparse.Namespace) -> None:
    options = AnalysisOptions(
        price_threshold=args.threshold,
        max_candidates=args.max_candidates,
        exclude_reserved=not args.include_reserved,
        single_card_max_price=args.max_price,
    )
    analysis = await analyze_deck(_read_decklist(args.decklist), options)
    _print_analysis(analysis)

    if args.csv:
        args.csv.write_text(analysis_to_csv(analysis.rows), encoding="utf-8")
        print(f"Exported {args.csv}")


async def _run_card(args: argparse.Namespace) -> None:
    result = await search_card(args.name, max_price=args.max_price, max_results=args.max_results)
    print(f"{result.card.name}  {_format_price(result.price)}")
    print(f"Substitutes <= ${result.max_price:.2f}:")
    _print_candidates(result.candidates)


async def _run_import(args: argparse.Namespace) -> None:
    print(await import_deck(args.url))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cheapswap",
        description="Find cheaper functional substitutes for expensive cards",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a decklist")
    analyze.add_argument("decklist", help="Decklist file, or - for stdin")
    analyze.add_argument(
        "--threshold",
        type=float,
        default=0.0,
        help="Find substitutes for cards priced at or above this (default: 0)",
    )
    analyze.add_argument(
        "--max-candidates",
        type=int,
        default=8,
        help="Substitutes per card (default: 8)",
    )
    analyze.add_argument(
        "--max-price",
        type=float,
        default=DEFAULT_MAX_PRICE,
        help="Price cap when the decklist has a single card (default: 10)",
    )
    analyze.add_argument(
        "--include-reserved",
        action="store_true",
        help="Allow Reserved List cards as substitutes",
    )
    analyze.add_argument("--csv", type=Path, help="Write results to this CSV file")

    card = subparsers.add_parser("card", help="Find substitutes for one card")
    card.add_argument("name", help="Card name (fuzzy matched)")
    card.add_argument("--max-price", type=float, default=DEFAULT_MAX_PRICE)
    card.add_argument("--max-results", type=int, default=DEFAULT_MAX_RESULTS)

    deck_import = subparsers.add_parser("import", help="Import an Archidekt/Moxfield deck")
    deck_import.add_argument("url", help="Deck URL or bare deck id")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def _serve(args: argparse.Namespace) -> None:
    uvicorn.run(
        "cheapswap.main:app",
        host=args.host,
        port=args.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


_COMMANDS = {
    "analyze": _run_analyze,
    "card": _run_card,
    "import": _run_import,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "serve":
        _serve(args)
        return 0

    try:
        asyncio.run(_COMMANDS[args.command](args))
    except KnownError as e:
        logger.error("%s", e.message)
        if e.suggestion:
            print(e.suggestion, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
