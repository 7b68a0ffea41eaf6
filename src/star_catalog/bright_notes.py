from __future__ import annotations

import re

from star_catalog.context import CatalogContext
from star_catalog.normalization import mixed_case, to_int

NAME_NOTE_CATEGORY = "N:"
_NOTE_NAME_RE = re.compile(r"^\s*([A-Z][A-Z ]*?)\s*(?:[;,.(]|$)")


def extract_note_name(remark: str) -> str | None:
    match = _NOTE_NAME_RE.match(remark.rstrip())
    if not match:
        return None
    return mixed_case(match.group(1))


def annotate_bright_star_names(context: CatalogContext, text: str) -> None:
    """Overwrite names of merged bright stars from the catalog's 'N:' notes."""
    named = 0
    for line in text.splitlines():
        if not line.strip() or line[7:11].strip() != NAME_NOTE_CATEGORY:
            continue

        key = context.bsc_xref.resolve(to_int(line[1:5]))
        star = context.registry.get(key) if key else None
        if star is None:
            continue

        name = extract_note_name(line[12:])
        if name:
            star.name = name
            named += 1
            context.log(3, f"[bright-notes] key={key} name={name}")

    context.stats["bright_star_names"] = named
    context.log(2, f"[bright-notes] named={named}")
