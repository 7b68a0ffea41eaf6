from __future__ import annotations

import math

import astropy.units as u

# Registry proper motions use FK5 units: seconds of time per century in RA
# (already divided by cos(Dec)) and arcseconds per century in Dec.
CENTURY = u.def_unit("century", 100 * u.yr)
TIME_SECOND = u.def_unit("time_second", u.hourangle / 3600)
PM_RA_UNIT = TIME_SECOND / CENTURY
PM_DEC_UNIT = u.arcsec / CENTURY


def proper_motion_ra(value: float, unit: u.UnitBase, dec_deg: float) -> float:
    """Convert an on-sky RA proper motion (mu_alpha * cos(Dec)) to registry units."""
    cos_dec = math.cos(math.radians(dec_deg))
    if cos_dec <= 0.0:
        return 0.0
    return (value * unit).to_value(PM_RA_UNIT) / cos_dec


def proper_motion_dec(value: float, unit: u.UnitBase) -> float:
    return (value * unit).to_value(PM_DEC_UNIT)
