"""Command-line entry point: reliability report for block-format data."""

import argparse
import logging
import sys
from typing import List, Optional

from .analysis import analyze_matrix
from .bootstrap import DEFAULT_RESAMPLES
from .config import AnalysisConfig
from .data_transformer import iter_matrices
from .errors import BootstrapInvariantError, DataFormatError
from .report import format_analysis, results_frame

logger = logging.getLogger("irr")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="irr",
        description="Inter-rater reliability: Krippendorff's alpha, Fleiss' and Cohen's kappa.",
    )
    parser.add_argument(
        "files", nargs="*",
        help="Block-format data files (standard input when omitted)",
    )
    parser.add_argument(
        "--resamples", type=int, default=DEFAULT_RESAMPLES,
        help="Bootstrap resamples for alpha, 0 disables (default: %(default)s)",
    )
    parser.add_argument(
        "--confidence", type=float, action="append",
        help="Confidence level, repeatable (default: 0.95 and 0.99)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Bootstrap random seed")
    parser.add_argument(
        "--no-fleiss-variance", action="store_true",
        help="Report Fleiss' kappa without intervals and significance tests",
    )
    parser.add_argument(
        "--csv-summary", metavar="PATH",
        help="Also write a one-row-per-statistic CSV summary",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity on standard error (default: %(default)s)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = AnalysisConfig.from_args(args)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    analyses = []
    failed = False
    streams = args.files or ["-"]
    for name in streams:
        try:
            handle = sys.stdin if name == "-" else open(name, encoding="utf-8", newline="")
        except OSError as e:
            logger.error("Cannot open %s: %s", name, e)
            failed = True
            continue
        try:
            matrices = iter_matrices(handle)
            while True:
                try:
                    matrix = next(matrices)
                except StopIteration:
                    break
                except DataFormatError as e:
                    logger.error("Cannot read %s: %s", name, e)
                    failed = True
                    break

                try:
                    analysis = analyze_matrix(matrix, config)
                except BootstrapInvariantError as e:
                    logger.error("Analysis of '%s' failed: %s", matrix.variable, e)
                    sys.stdout.write(f"======= {matrix.variable} =======\nAnalysis failed: {e}\n\n")
                    failed = True
                    continue

                analyses.append(analysis)
                sys.stdout.write(format_analysis(analysis, config.confidence_levels))
                sys.stdout.write("\n")
        finally:
            if handle is not sys.stdin:
                handle.close()

    if args.csv_summary:
        results_frame(analyses, config.confidence_levels).to_csv(args.csv_summary, index=False)
        logger.info("Summary written to %s", args.csv_summary)

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
