"""Command-line interface for facemetric."""

import argparse
import logging
import sys


def build_parser():
    parser = argparse.ArgumentParser(
        prog="facemetric",
        description="facemetric - Quality-gated facial measurement tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  facemetric info                                   # Metrics and active config
  facemetric baseline history.json                  # Baseline over past captures
  facemetric baseline history.json --current now.json
  facemetric describe canthalTilt 4.2               # Neutral description
  facemetric lint "a crooked, uneven line"          # Check and sanitize text
  facemetric quality frame1.jpg frame2.jpg          # Image quality and capture hints
""",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    parser.add_argument(
        "--config", type=str, metavar="PATH", default=None,
        help="YAML config file (default: $FACEMETRIC_CONFIG or built-in defaults)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # info command
    info_parser = subparsers.add_parser(
        "info",
        help="Show metric registry and configuration",
    )
    info_parser.add_argument(
        "-d", "--details", action="store_true",
        help="Show metric descriptions and factors",
    )

    # baseline command
    baseline_parser = subparsers.add_parser(
        "baseline",
        help="Compute a confidence-weighted baseline from measurement history",
        description="HISTORY is a JSON list of {metricId: {value, uncertainty, confidence}} maps.",
    )
    baseline_parser.add_argument("history", help="Path to history JSON file")
    baseline_parser.add_argument(
        "--current", type=str, metavar="PATH",
        help="Measurement map JSON to compare against the baseline",
    )
    baseline_parser.add_argument("--json", action="store_true", help="Print JSON output")

    # describe command
    describe_parser = subparsers.add_parser(
        "describe",
        help="Describe a metric value in neutral language",
    )
    describe_parser.add_argument("metric", help="Metric id (e.g. facialSymmetry)")
    describe_parser.add_argument("value", type=float, help="Measured value")

    # lint command
    lint_parser = subparsers.add_parser(
        "lint",
        help="Report banned terms and print sanitized text",
    )
    lint_parser.add_argument("text", nargs="+", help="Text to check")

    # quality command
    quality_parser = subparsers.add_parser(
        "quality",
        help="Score image brightness, contrast and sharpness",
    )
    quality_parser.add_argument("images", nargs="+", help="Image files to score")
    quality_parser.add_argument("--json", action="store_true", help="Print JSON output")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    from facemetric.cli import commands

    if args.command == "info":
        return commands.run_info(args) or 0

    elif args.command == "baseline":
        return commands.run_baseline(args)

    elif args.command == "describe":
        return commands.run_describe(args)

    elif args.command == "lint":
        return commands.run_lint(args)

    elif args.command == "quality":
        return commands.run_quality(args)

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
