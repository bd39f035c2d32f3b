"""CLI entrypoint for seocheck."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .project import ProjectLayoutError
from .report import ReportRenderer


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seocheck",
        description="Score the SEO implementation of a Nuxt/Vue project.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .seocheck.yml file (defaults to the one in the project root).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of text.",
    )
    parser.add_argument(
        "--no-sandbox",
        action="store_true",
        help="Skip dynamic evaluation of generateSEO and analyze pages statically.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of pages analyzed concurrently.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run a check and print the report; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    root = Path(args.path).expanduser().resolve()
    try:
        config = load_config(args.config or root)
        report = Orchestrator().run(
            root,
            config=config,
            use_sandbox=False if args.no_sandbox else None,
            workers=args.workers,
        )
    except (ProjectLayoutError, ConfigError) as exc:
        parser.exit(1, f"seocheck failed: {exc}\n")

    renderer = ReportRenderer()
    if args.json:
        print(renderer.render_json(report))
    else:
        print(renderer.render(report), end="")

    # CI runs fail the build when the score falls below the configured threshold.
    if os.environ.get("CI") and report.overall_percentage < config.ci.fail_under:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
