"""CLI entrypoints for srclayout commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import REPORT_FORMATS, ConfigError, load_config
from .errors import TargetsError
from .logging import configure_logging, get_logger
from .report import RENDERERS
from .targets import analyze_targets, load_targets


def _logging_options(*, inherited: bool) -> argparse.ArgumentParser:
    """Logging flags, accepted both before and after the subcommand.

    The subcommand copy leaves unset flags out of the namespace so it does not
    reset values given before the subcommand.
    """
    options = argparse.ArgumentParser(add_help=False)
    group = options.add_argument_group("logging")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if inherited else False,
        help="Log package detection and split-package checks at debug level.",
    )
    group.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if inherited else None,
        help="Also write log output to this file.",
    )
    return options


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srclayout",
        description="Infer IDE source folders from build target source declarations.",
        parents=[_logging_options(inherited=False)],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze declared target sources and report source roots.",
        parents=[_logging_options(inherited=True)],
    )
    analyze_parser.add_argument(
        "targets",
        nargs="?",
        default="targets.yml",
        help="Path to the target declaration file (defaults to targets.yml).",
    )
    analyze_parser.add_argument(
        "--config",
        default=None,
        help="Path to .srclayout.yml (defaults to the declaration file's directory).",
    )
    analyze_parser.add_argument(
        "--format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format; overrides the configured report.format.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for srclayout commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    logger = get_logger("cli")

    if args.command == "analyze":
        targets_path = Path(args.targets)
        config_path = Path(args.config) if args.config else targets_path.parent
        try:
            config = load_config(config_path)
            declarations = load_targets(targets_path)
        except (ConfigError, TargetsError) as exc:
            parser.exit(1, f"{exc}\n")

        logger.debug("Loaded %d target declarations from %s", len(declarations), targets_path)
        reports = analyze_targets(declarations, settings=config.analysis)
        renderer = RENDERERS[args.format or config.report.format]
        sys.stdout.write(renderer(reports))
        if any(report.failed for report in reports):
            parser.exit(1)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
