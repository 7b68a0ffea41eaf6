from __future__ import annotations

from dataclasses import dataclass

import astropy.units as u

from star_catalog.config import CatalogConfig
from star_catalog.context import CatalogContext
from star_catalog.model import StarRecord
from star_catalog.normalization import (
    bayer_rank,
    constellation_code,
    degrees_from_sexagesimal,
    hours_from_sexagesimal,
    to_int,
    to_number,
)
from star_catalog.units import proper_motion_dec, proper_motion_ra

BSC_PROPER_MOTION_UNIT = u.arcsec / u.yr


@dataclass
class BrightStarLine:
    bsc_number: int
    name_field: str
    fk5_number: int
    magnitude: float | None
    line: str


def _parse_line(line: str, highest_fk5: int) -> BrightStarLine | None:
    if not line.strip():
        return None

    fk5_text = line[37:41].strip()
    fk5_number = to_int(fk5_text) if fk5_text else 0
    if fk5_number > highest_fk5:
        fk5_number = 0

    magnitude_text = line[102:107].strip()
    return BrightStarLine(
        bsc_number=to_int(line[0:4]),
        name_field=line[4:14],
        fk5_number=fk5_number,
        magnitude=to_number(magnitude_text) if magnitude_text else None,
        line=line,
    )


def _mark_duplicates(context: CatalogContext, entries: list[BrightStarLine]) -> int:
    """First pass: collapse adjacent rows that share a name field.

    The catalog lists both components of a few stars back to back, so only
    neighbouring rows are compared. The brighter row survives (the first one
    on a tie) and carries the larger FK5 number of the pair; the dimmer row
    is removed from ``bsc_xref`` entirely.
    """
    xref = context.bsc_xref
    duplicates = 0
    last_bsc = -1
    last_fk5 = -1
    last_name = ""
    last_magnitude = 999.9

    for entry in entries:
        xref.mark_seen(entry.bsc_number)
        if entry.magnitude is None:
            continue

        current_fk5 = entry.fk5_number
        if entry.name_field == last_name and entry.name_field.strip():
            current_fk5 = max(last_fk5, current_fk5)
            xref.link(last_bsc, current_fk5)
            xref.link(entry.bsc_number, current_fk5)
            duplicates += 1

            if entry.magnitude >= last_magnitude:
                xref.discard(entry.bsc_number)
                last_fk5 = current_fk5
                continue
            xref.discard(last_bsc)

        last_bsc = entry.bsc_number
        last_fk5 = current_fk5
        last_name = entry.name_field
        last_magnitude = entry.magnitude

    return duplicates


def is_bright_star_included(config: CatalogConfig, bsc_number: int, rank: int, magnitude: float) -> bool:
    if magnitude <= config.bright_star_magnitude_limit:
        return True
    if bsc_number in config.legacy_bright_stars:
        return True
    return any(tier.admits(rank, magnitude) for tier in config.bayer_tiers)


def _new_star(line: str, magnitude: float) -> StarRecord:
    star = StarRecord(magnitude=magnitude)
    star.ra = hours_from_sexagesimal(line[75:77], line[77:79], line[79:83])
    star.dec = degrees_from_sexagesimal(line[83:84], line[84:86], line[86:88], line[88:90])
    star.pm_ra = proper_motion_ra(to_number(line[148:154]), BSC_PROPER_MOTION_UNIT, star.dec)
    star.pm_dec = proper_motion_dec(to_number(line[154:160]), BSC_PROPER_MOTION_UNIT)
    return star


def _apply_bright_star_fields(star: StarRecord, entry: BrightStarLine, rank: int) -> None:
    star.bsc_number = entry.bsc_number
    name_field = entry.name_field
    if not name_field.strip():
        return

    star.flamsteed = to_int(name_field[0:3])
    star.bayer_rank = rank
    star.sub_index = to_int(name_field[6:7])
    star.constellation = constellation_code(name_field[7:10])
    if star.flamsteed and star.bayer_rank:
        # Bayer designation takes precedence over Flamsteed.
        star.flamsteed = 0
    if not star.constellation:
        star.clear_designation()


def merge_bright_stars(context: CatalogContext, text: str) -> None:
    """Merge the Yale Bright Star Catalog into the registry.

    Precondition: rows describing the same star twice are adjacent, which
    holds for the published catalog ordering.
    """
    entries = [entry for entry in (_parse_line(line, context.highest_fk5) for line in text.splitlines()) if entry]
    duplicates = _mark_duplicates(context, entries)
    context.log(2, f"[bright-stars] first pass complete duplicates={duplicates}")

    registry = context.registry
    xref = context.bsc_xref
    added = 0
    matched = 0
    dangling = 0

    for entry in entries:
        if entry.bsc_number not in xref or entry.magnitude is None:
            continue

        fk5_number = entry.fk5_number if entry.fk5_number else (xref.get(entry.bsc_number) or 0)
        rank = bayer_rank(entry.name_field[3:6])
        accepted = is_bright_star_included(context.config, entry.bsc_number, rank, entry.magnitude)

        if fk5_number and fk5_number in registry:
            key = fk5_number
            star = registry[key]
            matched += 1
        elif fk5_number and fk5_number <= context.highest_fk5:
            dangling += 1
            context.log(3, f"[bright-stars] HR {entry.bsc_number} references missing FK5 {fk5_number}")
            continue
        elif accepted:
            star = _new_star(entry.line, entry.magnitude)
            key = registry.append(star)
            added += 1
        else:
            continue

        _apply_bright_star_fields(star, entry, rank)
        xref.link(entry.bsc_number, key)
        hd_number = to_int(entry.line[25:31])
        if hd_number > 0:
            star.hd_number = star.hd_number or hd_number
            context.hd_to_bsc.link(hd_number, key)

    xref.drop_unmatched()
    context.highest_bsc = context.highest_hip = registry.highest_key
    context.stats["bright_star_duplicates"] = duplicates
    context.stats["bright_star_added"] = added
    context.stats["bright_star_matched"] = matched
    context.stats["bright_star_dangling"] = dangling
    context.log(
        2,
        f"[bright-stars] added={added} matched={matched} dangling={dangling} highest={context.highest_bsc}",
    )
