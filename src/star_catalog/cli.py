from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable

from star_catalog.config import CatalogConfig
from star_catalog.errors import CatalogBuildError, error_summary
from star_catalog.pipeline import run
from star_catalog.sources import SourceProvider


def make_logger(verbosity: int) -> Callable[[int, str], None]:
    def _log(level: int, message: str) -> None:
        if verbosity >= level:
            print(message, file=sys.stderr, flush=True)

    return _log


def build_parser() -> argparse.ArgumentParser:
    defaults = CatalogConfig()
    parser = argparse.ArgumentParser(
        prog="star-catalog-builder",
        description="Build the compact binary star and deep-sky catalog from FK5, BSC, Hipparcos and NGC sources.",
    )
    parser.add_argument(
        "--output",
        default=str(defaults.output_path),
        help=f"Binary catalog path (default: {defaults.output_path}).",
    )
    parser.add_argument(
        "--cache-dir",
        default=str(defaults.cache_dir),
        help="Directory holding cached source text.",
    )
    parser.add_argument(
        "--double-precision",
        action="store_true",
        help="Store right ascension and declination as 8-byte doubles.",
    )
    parser.add_argument(
        "--bright-star-mag-limit",
        type=float,
        default=defaults.bright_star_magnitude_limit,
        help="Include Bright Star Catalog stars at or below this V magnitude.",
    )
    parser.add_argument(
        "--hipparcos-mag-limit",
        type=float,
        default=defaults.hipparcos_magnitude_limit,
        help="Add unmatched Hipparcos stars at or below this V magnitude.",
    )
    parser.add_argument(
        "--deep-sky-mag-limit",
        type=float,
        default=defaults.deep_sky_magnitude_limit,
        help="Include unnamed NGC/IC objects at or below this magnitude.",
    )
    parser.add_argument(
        "--registry-csv",
        default=None,
        help="Optional CSV listing of the reconciled registry.",
    )
    parser.add_argument(
        "--timeout-s",
        type=float,
        default=defaults.timeout_s,
        help="HTTP timeout seconds per source request.",
    )
    parser.add_argument(
        "--verbosity",
        type=int,
        default=1,
        help="Logging verbosity (0=quiet, 1=milestones, 2=stage statistics, 3=per-record detail).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    log = make_logger(max(0, int(args.verbosity)))

    config = CatalogConfig(
        bright_star_magnitude_limit=args.bright_star_mag_limit,
        hipparcos_magnitude_limit=args.hipparcos_mag_limit,
        deep_sky_magnitude_limit=args.deep_sky_mag_limit,
        double_precision=args.double_precision,
        output_path=Path(args.output),
        cache_dir=Path(args.cache_dir),
        registry_csv_path=Path(args.registry_csv) if args.registry_csv else None,
        timeout_s=args.timeout_s,
    )
    provider = SourceProvider(
        config.cache_dir,
        timeout_s=config.timeout_s,
        hipparcos_max_age_days=config.hipparcos_max_age_days,
        log=log,
    )

    try:
        summary = run(config, provider, log)
    except CatalogBuildError as error:
        print(f"Catalog build failed: {error_summary(error)}", file=sys.stderr, flush=True)
        return 1

    print(json.dumps(summary, ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
