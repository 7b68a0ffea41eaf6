from __future__ import annotations

from pathlib import Path

import pandas as pd

from star_catalog.context import CatalogContext
from star_catalog.errors import CatalogWriteError, error_summary

REGISTRY_COLUMNS = [
    "key",
    "block",
    "fk5_number",
    "bsc_number",
    "hip_number",
    "hd_number",
    "deep_sky_id",
    "messier_number",
    "flamsteed",
    "bayer_rank",
    "sub_index",
    "constellation",
    "name",
    "ra_hours",
    "dec_deg",
    "pm_ra",
    "pm_dec",
    "magnitude",
]


def registry_frame(context: CatalogContext) -> pd.DataFrame:
    records = []
    for key, star in context.registry.items():
        records.append(
            {
                "key": key,
                "block": context.block_of(key).name,
                "fk5_number": star.fk5_number,
                "bsc_number": star.bsc_number,
                "hip_number": star.hip_number,
                "hd_number": star.hd_number,
                "deep_sky_id": str(star.deep_sky_id) if star.deep_sky_id else "",
                "messier_number": star.messier_number,
                "flamsteed": star.flamsteed,
                "bayer_rank": star.bayer_rank,
                "sub_index": star.sub_index,
                "constellation": star.constellation,
                "name": star.name or "",
                "ra_hours": star.ra,
                "dec_deg": star.dec,
                "pm_ra": star.pm_ra,
                "pm_dec": star.pm_dec,
                "magnitude": star.magnitude,
            }
        )
    return pd.DataFrame.from_records(records, columns=REGISTRY_COLUMNS)


def block_counts(frame: pd.DataFrame) -> dict[str, int]:
    if frame.empty:
        return {}
    return {str(key): int(value) for key, value in frame["block"].value_counts().sort_index().items()}


def export_registry_csv(frame: pd.DataFrame, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path, index=False)
    except OSError as error:
        raise CatalogWriteError(f"Failed writing registry listing {path}: {error_summary(error)}") from error
