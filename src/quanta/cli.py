"""Command-line interface for the quanta terminal."""

from __future__ import annotations

import argparse
import sys

from quanta.config import Settings, parse_symbols
from quanta.data.timeframes import available_timeframes
from quanta.logging.logger import setup_logging
from quanta.runtime import manage_favorites, manual_advice, run, show_favorites


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(description="Live market-data terminal with advisory scoring")
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols")
    parser.add_argument(
        "--timeframe",
        choices=[frame.id.value for frame in available_timeframes()],
        help="Chart timeframe",
    )
    parser.add_argument("--chart-out", type=str, help="Write a candlestick HTML chart here")
    parser.add_argument("--price", type=float, help="Score a manually entered price and exit")
    parser.add_argument(
        "--change-pct",
        type=float,
        default=0.0,
        help="Percent change used with --price",
    )
    parser.add_argument("--favorites", action="store_true", help="List favorites, then exit")
    parser.add_argument("--add-favorite", type=str, help="Add a symbol to favorites, then exit")
    parser.add_argument(
        "--remove-favorite",
        type=str,
        help="Remove a symbol from favorites, then exit",
    )
    parser.add_argument(
        "--use-favorites",
        action="store_true",
        help="Resolve every favorite symbol",
    )
    parser.add_argument("--state-db", type=str, help="SQLite state database path")
    parser.add_argument("--log-level", type=str, help="Logging level")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.symbols:
        overrides["symbols"] = parse_symbols(args.symbols, settings.symbols)
    if args.timeframe:
        overrides["timeframe"] = args.timeframe
    if args.state_db:
        overrides["state_db_path"] = args.state_db
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()

    merged = settings.with_overrides(**overrides)
    actions = [
        bool(args.favorites),
        bool(args.add_favorite),
        bool(args.remove_favorite),
        args.price is not None,
    ]
    if sum(actions) > 1:
        raise ValueError(
            "Use only one action: --favorites, --add-favorite, --remove-favorite or --price"
        )
    if args.use_favorites and args.symbols:
        raise ValueError("--use-favorites cannot be combined with --symbols")
    return merged


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    setup_logging(settings.log_level)

    if args.favorites or args.add_favorite or args.remove_favorite:
        return show_favorites(settings, add=args.add_favorite, remove=args.remove_favorite)
    if args.price is not None:
        symbol = settings.symbols[0]
        return manual_advice(settings, symbol, args.price, change_pct=args.change_pct)
    if args.use_favorites:
        favorites = manage_favorites(settings)
        if not favorites:
            print("Configuration error: favorites list is empty")
            return 2
        settings = settings.with_overrides(symbols=favorites)
    return run(settings, chart_out=args.chart_out)


if __name__ == "__main__":
    sys.exit(main())
