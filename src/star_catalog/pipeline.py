from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from star_catalog.bright_notes import annotate_bright_star_names
from star_catalog.bright_stars import merge_bright_stars
from star_catalog.config import CatalogConfig
from star_catalog.context import CatalogContext, LogFn, silent_log
from star_catalog.deep_sky import merge_deep_sky
from star_catalog.fk5 import load_fk5_cross_index
from star_catalog.hipparcos import merge_hipparcos
from star_catalog.report import block_counts, export_registry_csv, registry_frame
from star_catalog.writer import write_catalog


class CatalogSource(Protocol):
    def fetch(self, name: str) -> str: ...


@dataclass(frozen=True)
class CatalogStage:
    name: str
    sources: tuple[str, ...]
    apply: Callable[..., None]


# Later stages read cross references that only earlier stages populate.
STAGES: tuple[CatalogStage, ...] = (
    CatalogStage("fk5", ("fk5_cross_index",), load_fk5_cross_index),
    CatalogStage("bright-stars", ("bright_stars",), merge_bright_stars),
    CatalogStage("bright-notes", ("bright_notes",), annotate_bright_star_names),
    CatalogStage("hipparcos", ("hipparcos",), merge_hipparcos),
    CatalogStage("deep-sky", ("ngc_names", "ngc_positions"), merge_deep_sky),
)


def build_registry(provider: CatalogSource, config: CatalogConfig, log: LogFn = silent_log) -> CatalogContext:
    context = CatalogContext(config=config, log=log)
    for stage in STAGES:
        texts = [provider.fetch(source) for source in stage.sources]
        log(1, f"[{stage.name}] running")
        stage.apply(context, *texts)
    return context


def run(config: CatalogConfig, provider: CatalogSource, log: LogFn = silent_log) -> dict[str, Any]:
    """Build the registry from scratch and write the binary catalog.

    Nothing is written unless every stage completes.
    """
    context = build_registry(provider, config, log)
    frame = registry_frame(context)

    # The binary catalog is written last.
    if config.registry_csv_path is not None:
        export_registry_csv(frame, config.registry_csv_path)
        log(1, f"[writer] registry listing written to {config.registry_csv_path}")

    bytes_written = write_catalog(context, config.output_path)
    log(1, f"[writer] wrote {bytes_written} bytes to {config.output_path}")

    return {
        "output_path": str(config.output_path),
        "bytes_written": bytes_written,
        "record_count": len(context.registry),
        "highest_key": context.registry.highest_key,
        "highest_fk5": context.highest_fk5,
        "highest_bsc": context.highest_bsc,
        "highest_hip": context.highest_hip,
        "block_counts": block_counts(frame),
        "stage_stats": dict(context.stats),
        "double_precision": config.double_precision,
        "built_at_utc": datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
    }
