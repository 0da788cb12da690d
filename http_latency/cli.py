"""CLI entry point for HTTP latency measurement."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from http_latency.config import load_settings
from http_latency.dispatcher import Dispatcher
from http_latency.errors import LatencyRunError
from http_latency.report import ReportFormat, log_results_summary, write_report
from http_latency.targets import read_targets

DEFAULT_OUTPUT = "output.txt"


async def run(
    input_path: Path | str,
    output: Path | str = DEFAULT_OUTPUT,
    fmt: ReportFormat = "text",
    concurrency: int | None = None,
    timeout: float | None = None,
) -> int:
    """Measure every target listed in ``input_path`` and write the report.

    Returns:
        0 when the run completed, whatever the per-target outcomes, and 1 when
        it could not start or the report could not be written

    """
    log = logging.getLogger("http_latency")

    try:
        settings = load_settings(concurrency=concurrency, timeout=timeout)
        targets = read_targets(input_path)
        async with Dispatcher.from_config(settings) as dispatcher:
            results = await dispatcher.run(
                targets, settings.concurrency, settings.timeout
            )
    except LatencyRunError as exc:
        log.error("%s", exc)
        return 1

    log_results_summary(log, results)

    try:
        write_report(results, output, fmt)
    except OSError as exc:
        log.error("Unable to write report to %s: %s", output, exc)
        return 1

    log.info("Report written to %s", output)
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Measure HTTP GET latency for a list of URLs"
    )
    parser.add_argument(
        "input",
        help="File with one URL per line ('-' for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT,
        help=f"Report destination, overwritten if present ('-' for stdout, "
        f"default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report format",
    )
    parser.add_argument(
        "-c",
        "--concurrency",
        type=int,
        default=None,
        help="Maximum requests in flight (default: HTTP_LATENCY_CONCURRENCY or 10)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: HTTP_LATENCY_TIMEOUT or 10)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            input_path=args.input,
            output=args.output,
            fmt=args.format,
            concurrency=args.concurrency,
            timeout=args.timeout,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
