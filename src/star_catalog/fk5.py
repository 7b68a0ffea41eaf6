from __future__ import annotations

from star_catalog.config import CLUSTER_ANCHOR_FK5
from star_catalog.context import CatalogContext
from star_catalog.model import UNKNOWN_MAGNITUDE, StarRecord
from star_catalog.normalization import (
    accept_fk5_name,
    bayer_rank,
    constellation_code,
    degrees_from_sexagesimal,
    hours_from_sexagesimal,
    mixed_case,
    to_int,
    to_number,
)

HD_COLUMN_MIN_LENGTH = 92


def _parse_fk5_name(raw_name: str) -> str | None:
    name = raw_name.split(";", 1)[0].strip()
    if not accept_fk5_name(name):
        return None
    return mixed_case(name)


def parse_fk5_line(line: str) -> StarRecord | None:
    """Parse one row of the FK5/SAO/HD cross index; None for blank lines."""
    if not line.strip():
        return None

    star = StarRecord()
    star.fk5_number = to_int(line[0:4])
    star.ra = hours_from_sexagesimal(line[6:8], line[9:11], line[12:18])
    star.pm_ra = to_number(line[19:26])
    star.dec = degrees_from_sexagesimal(line[27:28], line[28:30], line[31:33], line[34:39])
    star.pm_dec = to_number(line[40:47])
    magnitude_text = line[59:64].strip()
    star.magnitude = to_number(magnitude_text) if magnitude_text else UNKNOWN_MAGNITUDE

    if len(line) >= HD_COLUMN_MIN_LENGTH:
        star.hd_number = max(0, to_int(line[86:92]))

    designation = line[93:96].strip().lower()
    if designation:
        star.flamsteed = to_int(designation)
        if star.flamsteed == 0:
            star.bayer_rank = bayer_rank(designation)
            if star.bayer_rank:
                star.sub_index = to_int(line[96:97])

    if star.flamsteed or star.bayer_rank:
        star.constellation = constellation_code(line[98:101])
        if not star.constellation:
            star.clear_designation()

    if len(line) > 103:
        star.name = _parse_fk5_name(line[103:])

    return star


def load_fk5_cross_index(context: CatalogContext, text: str) -> None:
    """Seed the registry from the FK5 cross index.

    Each star is stored under its FK5 number, so numbers the source skips
    remain gaps in the primary block.
    """
    loaded = 0
    for line in text.splitlines():
        star = parse_fk5_line(line)
        if star is None or star.fk5_number <= 0:
            continue

        key = star.fk5_number
        if key in context.registry:
            context.log(3, f"[fk5] FK5 {key} listed again; later row replaces earlier")
        else:
            loaded += 1
        context.registry.put(key, star)
        context.highest_fk5 = max(context.highest_fk5, key)

        if star.hd_number > 0:
            context.hd_to_fk5.link(star.hd_number, key)
        if key == CLUSTER_ANCHOR_FK5:
            context.cluster_anchor = key

    context.highest_bsc = context.highest_hip = context.highest_fk5
    context.stats["fk5_loaded"] = loaded
    context.stats["highest_fk5"] = context.highest_fk5
    context.log(2, f"[fk5] loaded={loaded} highest={context.highest_fk5} anchor={context.cluster_anchor}")
