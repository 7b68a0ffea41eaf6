from __future__ import annotations

import re

from star_catalog.context import CatalogContext
from star_catalog.model import UNKNOWN_MAGNITUDE, DeepSkyId, DeepSkyNameInfo, StarRecord
from star_catalog.normalization import (
    constellation_code,
    degrees_from_sexagesimal,
    hours_from_sexagesimal,
    to_number,
)

_MESSIER_RE = re.compile(r"^M\s*0*([0-9]+)$", re.IGNORECASE)


def _add_name(info: DeepSkyNameInfo, name: str) -> None:
    names = info.name.split("/") if info.name else []
    if name not in names:
        names.append(name)
    info.name = "/".join(names)


def parse_ngc_names(context: CatalogContext, text: str) -> None:
    """Collect proper names and Messier numbers per NGC/IC object."""
    names = context.deep_sky_names
    messier_owners: dict[int, DeepSkyId] = {}
    conflicts = 0

    for line in text.splitlines():
        name = line[0:35].strip()
        object_id = DeepSkyId.parse(line[36:41])
        if not name or object_id is None:
            continue

        messier = _MESSIER_RE.match(name)
        if not messier:
            _add_name(names.setdefault(object_id, DeepSkyNameInfo()), name)
            continue

        messier_number = int(messier.group(1))
        owner = messier_owners.get(messier_number)
        if owner is not None and owner != object_id:
            conflicts += 1
            context.log(1, f"[deep-sky] M{messier_number} claimed by {owner} and {object_id}; keeping {owner}")
            continue
        info = names.setdefault(object_id, DeepSkyNameInfo())
        if info.messier_number and info.messier_number != messier_number:
            conflicts += 1
            context.log(
                1,
                f"[deep-sky] {object_id} claimed by M{info.messier_number} and M{messier_number}; "
                f"keeping M{info.messier_number}",
            )
            continue
        info.messier_number = messier_number
        messier_owners[messier_number] = object_id

    context.stats["deep_sky_named"] = len(names)
    context.stats["deep_sky_messier_conflicts"] = conflicts
    context.log(2, f"[deep-sky] named objects={len(names)} messier conflicts={conflicts}")


def parse_ngc_line(line: str) -> StarRecord | None:
    object_id = DeepSkyId.parse(line[0:5])
    if object_id is None:
        return None

    magnitude_text = line[40:44].strip()
    return StarRecord(
        deep_sky_id=object_id,
        constellation=constellation_code(line[29:32]),
        ra=hours_from_sexagesimal(line[10:12], line[13:17]),
        dec=degrees_from_sexagesimal(line[19:20], line[20:22], line[23:25]),
        magnitude=to_number(magnitude_text) if magnitude_text else UNKNOWN_MAGNITUDE,
    )


def merge_ngc_positions(context: CatalogContext, text: str) -> None:
    """Append named or naked-eye NGC/IC objects after all stellar entries."""
    names = context.deep_sky_names
    limit = context.config.deep_sky_magnitude_limit
    added = 0

    for line in text.splitlines():
        record = parse_ngc_line(line)
        if record is None:
            continue

        info = names.get(record.deep_sky_id)
        if info is None and record.magnitude > limit:
            continue

        if info is not None:
            record.name = info.name or None
            record.messier_number = info.messier_number
        context.registry.append(record)
        added += 1

    context.deep_sky_names = {}
    context.stats["deep_sky_added"] = added
    context.log(2, f"[deep-sky] added={added} highest={context.registry.highest_key}")


def merge_deep_sky(context: CatalogContext, names_text: str, positions_text: str) -> None:
    parse_ngc_names(context, names_text)
    merge_ngc_positions(context, positions_text)
