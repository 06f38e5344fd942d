from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from gaphist.analyzer import DEFAULT_QUANTILES, Analyzer
from gaphist.histogram import DEFAULT_MAX_BINS, Histogram
from gaphist.reporters import RichReporter
from gaphist.sources import DistributionSource, TextFileSource
from gaphist.sources.distribution import DISTRIBUTIONS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gaphist", description="Streaming approximate histogram CLI"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser(
        "demo", help="Compare approximate and exact quantiles on random data"
    )
    demo.add_argument(
        "--bins", type=int, default=1000, help="Maximum number of bins (default: 1000)"
    )
    demo.add_argument(
        "--samples",
        type=int,
        default=1_000_000,
        help="Number of random observations (default: 1000000)",
    )
    demo.add_argument(
        "--distribution",
        type=str,
        choices=list(DISTRIBUTIONS),
        default="normal",
        help="Sampling distribution (default: normal)",
    )
    demo.add_argument("--seed", type=int, default=None, help="Random seed")
    demo.add_argument(
        "--quantiles",
        type=float,
        nargs="+",
        default=list(DEFAULT_QUANTILES),
        help="Ascending quantiles to report",
    )

    summarize = subparsers.add_parser(
        "summarize", help="Summarize numbers read from a file or stdin"
    )
    summarize.add_argument(
        "path", type=str, help="Text file of whitespace-separated numbers, or '-'"
    )
    summarize.add_argument(
        "--bins",
        type=int,
        default=DEFAULT_MAX_BINS,
        help=f"Maximum number of bins (default: {DEFAULT_MAX_BINS})",
    )
    summarize.add_argument(
        "--quantiles",
        type=float,
        nargs="+",
        default=[0.0, 0.25, 0.5, 0.75, 1.0],
        help="Ascending quantiles to report",
    )
    summarize.add_argument(
        "--show-bins", action="store_true", help="Also print every bin"
    )
    return parser


def _run_demo(args: argparse.Namespace, *, console: Console) -> int:
    try:
        histogram = Histogram(args.bins)
        source = DistributionSource(
            args.distribution, size=args.samples, seed=args.seed
        )
    except ValueError as exc:
        console.print(str(exc))
        return 2

    analyzer = Analyzer(
        source=source,
        histogram=histogram,
        quantiles=args.quantiles,
        keep_exact=True,
    )
    try:
        report = analyzer.analyze()
    except ValueError as exc:
        console.print(f"Demo aborted: {exc}")
        return 1

    RichReporter(console).render(
        report, f"{args.samples:,} {args.distribution} samples"
    )
    return 0


def _run_summarize(args: argparse.Namespace, *, console: Console) -> int:
    try:
        histogram = Histogram(args.bins)
    except ValueError as exc:
        console.print(str(exc))
        return 2

    analyzer = Analyzer(
        source=TextFileSource(args.path),
        histogram=histogram,
        quantiles=args.quantiles,
    )
    try:
        report = analyzer.analyze()
    except FileNotFoundError as exc:
        console.print(str(exc))
        return 2
    except ValueError as exc:
        console.print(f"Summary aborted: {exc}")
        return 1

    title = "stdin" if args.path == "-" else Path(args.path).name
    RichReporter(console, show_bins=args.show_bins).render(report, title)
    return 0


def run_cli(
    argv: Sequence[str] | None = None, *, console: Console | None = None
) -> int:
    logging.getLogger().setLevel(logging.ERROR)
    parser = _build_parser()
    args = parser.parse_args(argv)
    out_console = console or Console()
    if args.command == "demo":
        return _run_demo(args, console=out_console)
    if args.command == "summarize":
        return _run_summarize(args, console=out_console)
    parser.error("Unknown command.")
    return 2


def main() -> None:
    raise SystemExit(run_cli())
