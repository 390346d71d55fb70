"""
Command line entry point.

Usage:
    site-forge --dir ./dist
    site-forge --dir ./dist --baseline ./baseline --threshold 8
"""

from __future__ import annotations

import argparse
import shlex
from collections.abc import Callable
from pathlib import Path

from site_forge.config import (
    DEFAULT_LIGHTHOUSE_CMD,
    DEFAULT_REPORT_PATH,
    DEFAULT_SCREENSHOTS_DIR,
    DEFAULT_VISION_MODEL,
    VerifyConfig,
)
from site_forge.models import Thresholds
from site_forge.pipeline import Toolkit, run_pipeline


def bounded_int(low: int, high: int) -> Callable[[str], int]:
    def parse(raw: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from None
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"must be between {low} and {high}, got {value}")
        return value

    return parse


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="site-forge", description="Verify a built static site before it ships.")
    p.add_argument("--dir", default="./dist", help="Directory to verify")
    p.add_argument("--baseline", default="", help="Baseline directory for vision comparison")
    p.add_argument("--threshold", type=bounded_int(1, 10), default=7, help="Vision score threshold (1-10)")
    p.add_argument("--lighthouse-perf", type=bounded_int(0, 100), default=90, help="Lighthouse performance threshold")
    p.add_argument("--lighthouse-a11y", type=bounded_int(0, 100), default=90, help="Lighthouse accessibility threshold")
    p.add_argument("--lighthouse-seo", type=bounded_int(0, 100), default=90, help="Lighthouse SEO threshold")
    p.add_argument("--report", default=DEFAULT_REPORT_PATH, help="Where to write the JSON report")
    p.add_argument("--screenshots-dir", default=DEFAULT_SCREENSHOTS_DIR, help="Where to write captured screenshots")
    p.add_argument(
        "--lighthouse-cmd",
        default=" ".join(DEFAULT_LIGHTHOUSE_CMD),
        help="Command used to run lighthouse",
    )
    p.add_argument("--vision-model", default=DEFAULT_VISION_MODEL, help="Model id for the vision comparison")
    return p


def config_from_args(args: argparse.Namespace) -> VerifyConfig:
    return VerifyConfig(
        site_dir=Path(args.dir).resolve(),
        baseline_dir=Path(args.baseline).resolve() if args.baseline else None,
        vision_threshold=args.threshold,
        thresholds=Thresholds(
            performance=args.lighthouse_perf,
            accessibility=args.lighthouse_a11y,
            seo=args.lighthouse_seo,
        ),
        report_path=Path(args.report),
        screenshots_dir=Path(args.screenshots_dir),
        lighthouse_cmd=tuple(shlex.split(args.lighthouse_cmd)),
        vision_model=args.vision_model,
    )


def main(argv: list[str] | None = None, toolkit: Toolkit | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.dir.strip():
        parser.error("--dir is required")
    if not shlex.split(args.lighthouse_cmd):
        parser.error("--lighthouse-cmd must not be empty")

    config = config_from_args(args)
    outcome = run_pipeline(config, toolkit)
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
