from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# HR numbers always included regardless of magnitude.
LEGACY_BRIGHT_STARS = (8, 87, 340, 1643, 1751, 3732, 4030, 4067, 4531, 5223, 5473, 5714, 5888, 6970, 8076)

CLUSTER_ANCHOR_FK5 = 139  # Alcyone
CLUSTER_MESSIER_NUMBER = 45
CLUSTER_NAME = "Pleiades"
CLUSTER_MAGNITUDE = 1.6


@dataclass(frozen=True)
class BayerTier:
    rank_below: int
    magnitude_limit: float

    def admits(self, rank: int, magnitude: float) -> bool:
        return 0 < rank < self.rank_below and magnitude <= self.magnitude_limit


DEFAULT_BAYER_TIERS = (BayerTier(12, 5.5), BayerTier(6, 6.0))


@dataclass
class CatalogConfig:
    bright_star_magnitude_limit: float = 6.0
    bayer_tiers: tuple[BayerTier, ...] = DEFAULT_BAYER_TIERS
    legacy_bright_stars: tuple[int, ...] = LEGACY_BRIGHT_STARS
    hipparcos_magnitude_limit: float = 7.25
    deep_sky_magnitude_limit: float = 6.0
    double_precision: bool = False
    output_path: Path = Path("output/stars.dat")
    cache_dir: Path = Path("cache")
    registry_csv_path: Path | None = None
    timeout_s: float = 45.0
    hipparcos_max_age_days: int = 90
