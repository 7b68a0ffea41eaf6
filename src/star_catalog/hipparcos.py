from __future__ import annotations

from typing import Any, Iterator

import astropy.units as u
from astropy.coordinates import Angle

from star_catalog.config import CLUSTER_MAGNITUDE, CLUSTER_MESSIER_NUMBER, CLUSTER_NAME
from star_catalog.context import CatalogContext
from star_catalog.model import UNKNOWN_MAGNITUDE, StarRecord
from star_catalog.normalization import to_int
from star_catalog.units import proper_motion_dec, proper_motion_ra

DEFAULT_COLUMNS = ("name", "hip_number", "ra_deg", "dec_deg", "pm_ra", "pm_dec", "vmag", "hd_id")
HIPPARCOS_PROPER_MOTION_UNIT = u.mas / u.yr


def _split_fields(line: str) -> list[str]:
    return [field.strip() for field in line.rstrip().strip("|").split("|")]


def _safe_float(value: Any) -> float | None:
    text = str(value or "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _parse_angle(value: Any, sexagesimal_unit: u.UnitBase = u.deg) -> Angle | None:
    """Decimal values are degrees; "hh mm ss" or "dd:mm:ss" use ``sexagesimal_unit``."""
    text = str(value or "").strip()
    if not text:
        return None
    unit = sexagesimal_unit if (" " in text or ":" in text) else u.deg
    try:
        return Angle(text, unit=unit)
    except (ValueError, u.UnitsError):
        return None


def parse_hipparcos_row(row: dict[str, str]) -> StarRecord | None:
    ra = _parse_angle(row.get("ra_deg"), u.hourangle)
    dec = _parse_angle(row.get("dec_deg"))
    hip_number = to_int(row.get("hip_number"))
    if ra is None or dec is None or hip_number <= 0:
        return None

    magnitude = _safe_float(row.get("vmag"))
    star = StarRecord(
        hip_number=hip_number,
        hd_number=max(0, to_int(row.get("hd_id"))),
        ra=float(ra.wrap_at(360 * u.deg).hour),
        dec=float(dec.deg),
        magnitude=magnitude if magnitude is not None else UNKNOWN_MAGNITUDE,
    )
    star.pm_ra = proper_motion_ra(_safe_float(row.get("pm_ra")) or 0.0, HIPPARCOS_PROPER_MOTION_UNIT, star.dec)
    star.pm_dec = proper_motion_dec(_safe_float(row.get("pm_dec")) or 0.0, HIPPARCOS_PROPER_MOTION_UNIT)
    return star


def iter_hipparcos_rows(text: str) -> Iterator[dict[str, str]]:
    """Yield column-name -> value dicts for the data rows of a text display.

    Rows start with a pipe; a pipe followed by a lowercase letter is the
    column header, which replaces the default column order.
    """
    columns: tuple[str, ...] = DEFAULT_COLUMNS
    for line in text.splitlines():
        if len(line) < 2 or line[0] != "|":
            continue
        if line[1].islower():
            columns = tuple(_split_fields(line))
            continue
        yield dict(zip(columns, _split_fields(line)))


def _resolve_key(context: CatalogContext, hd_number: int) -> int | None:
    if hd_number <= 0:
        return None
    key = context.hd_to_fk5.resolve(hd_number) or context.hd_to_bsc.resolve(hd_number)
    if key is None or key not in context.registry:
        return None
    return key


def _append_cluster(context: CatalogContext) -> None:
    anchor = context.registry.get(context.cluster_anchor) if context.cluster_anchor else None
    if anchor is None:
        return

    cluster = StarRecord(
        messier_number=CLUSTER_MESSIER_NUMBER,
        name=CLUSTER_NAME,
        ra=anchor.ra,
        dec=anchor.dec,
        pm_ra=anchor.pm_ra,
        pm_dec=anchor.pm_dec,
        magnitude=CLUSTER_MAGNITUDE,
    )
    key = context.registry.append(cluster)
    context.log(2, f"[hipparcos] appended {CLUSTER_NAME} at key={key}")


def merge_hipparcos(context: CatalogContext, text: str) -> None:
    """Refine astrometry from Hipparcos and add the stars it alone provides.

    Rows arrive sorted by V magnitude, so the first unmatched row fainter than
    the configured limit ends the stage.
    """
    registry = context.registry
    limit = context.config.hipparcos_magnitude_limit
    updated = 0
    added = 0

    for row in iter_hipparcos_rows(text):
        incoming = parse_hipparcos_row(row)
        if incoming is None:
            continue

        key = _resolve_key(context, incoming.hd_number)
        if key is not None:
            star = registry[key]
            star.magnitude = min(star.magnitude, incoming.magnitude)
            star.ra = incoming.ra
            star.dec = incoming.dec
            star.pm_ra = incoming.pm_ra
            star.pm_dec = incoming.pm_dec
            star.hip_number = incoming.hip_number
            updated += 1
            continue

        if incoming.magnitude > limit:
            context.log(3, f"[hipparcos] stopping at HIP {incoming.hip_number} vmag={incoming.magnitude}")
            break

        registry.append(incoming)
        added += 1

    context.highest_hip = registry.highest_key
    context.stats["hipparcos_updated"] = updated
    context.stats["hipparcos_added"] = added
    context.log(2, f"[hipparcos] updated={updated} added={added} highest={context.highest_hip}")

    _append_cluster(context)
