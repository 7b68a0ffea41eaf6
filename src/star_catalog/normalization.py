from __future__ import annotations

import math
import re
from typing import Any

BAYER_RANKS = (
    "alp", "bet", "gam", "del", "eps", "zet", "eta", "the", "iot", "kap", "lam", "mu",
    "nu", "xi", "omi", "pi", "rho", "sig", "tau", "ups", "phi", "chi", "psi", "ome",
)

CONSTELLATION_CODES = (
    "and", "ant", "aps", "aql", "aqr", "ara", "ari", "aur", "boo", "cae", "cam", "cap",
    "car", "cas", "cen", "cep", "cet", "cha", "cir", "cma", "cmi", "cnc", "col", "com",
    "cra", "crb", "crt", "cru", "crv", "cvn", "cyg", "del", "dor", "dra", "equ", "eri",
    "for", "gem", "gru", "her", "hor", "hya", "hyi", "ind", "lac", "leo", "lep", "lib",
    "lmi", "lup", "lyn", "lyr", "men", "mic", "mon", "mus", "nor", "oct", "oph", "ori",
    "pav", "peg", "per", "phe", "pic", "psa", "psc", "pup", "pyx", "ret", "scl", "sco",
    "sct", "ser", "sex", "sge", "sgr", "tau", "tel", "tra", "tri", "tuc", "uma", "umi",
    "vel", "vir", "vol", "vul",
)

_BAYER_LOOKUP = {abbr: rank for rank, abbr in enumerate(BAYER_RANKS, start=1)}
_CONSTELLATION_LOOKUP = {abbr: code for code, abbr in enumerate(CONSTELLATION_CODES, start=1)}

# Lowercase one- or two-letter prefixes are designation fragments, not names.
_FK5_NAME_REJECT_RE = re.compile(r"\d|^[a-z][a-km-z]? ")
_WORD_RE = re.compile(r"[^\s\-/]+")


def to_number(value: Any) -> float:
    text = str(value).strip() if value is not None else ""
    if not text:
        return 0.0
    try:
        number = float(text)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_int(value: Any) -> int:
    return int(to_number(value))


def bayer_rank(abbreviation: str) -> int:
    """1-based Greek letter rank, or 0 for anything unrecognized."""
    return _BAYER_LOOKUP.get(str(abbreviation).strip().lower(), 0)


def constellation_code(abbreviation: str) -> int:
    return _CONSTELLATION_LOOKUP.get(str(abbreviation).strip().lower(), 0)


def hours_from_sexagesimal(hours: Any, minutes: Any, seconds: Any = 0.0) -> float:
    return to_number(hours) + to_number(minutes) / 60.0 + to_number(seconds) / 3600.0


def degrees_from_sexagesimal(sign: str, degrees: Any, minutes: Any, seconds: Any = 0.0) -> float:
    magnitude = to_number(degrees) + to_number(minutes) / 60.0 + to_number(seconds) / 3600.0
    return -magnitude if sign == "-" else magnitude


def mixed_case(value: str) -> str:
    """Capitalize each word: 'ALPHA CENTAURI' -> 'Alpha Centauri'."""
    lowered = " ".join(str(value).split()).lower()
    return _WORD_RE.sub(lambda match: match.group(0)[:1].upper() + match.group(0)[1:], lowered)


def accept_fk5_name(name: str) -> bool:
    return bool(name) and not _FK5_NAME_REJECT_RE.search(name)
