from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from star_catalog.config import CatalogConfig
from star_catalog.model import (
    CatalogBlock,
    DeepSkyId,
    DeepSkyNameInfo,
    IdentifierCrossReference,
    StarRegistry,
)

LogFn = Callable[[int, str], None]


def silent_log(level: int, message: str) -> None:
    return None


@dataclass
class CatalogContext:
    """Mutable state shared by the pipeline stages.

    Stage 1 fills ``registry``, ``hd_to_fk5``, ``highest_fk5`` and
    ``cluster_anchor``. Stage 2 appends bright stars and fills ``bsc_xref``
    and ``hd_to_bsc``. Stage 3 only rewrites names. Stage 4 overwrites
    astrometry and appends Hipparcos stars up to ``highest_hip``. Stage 5
    appends deep-sky objects, using ``deep_sky_names`` as scratch space.
    """

    config: CatalogConfig = field(default_factory=CatalogConfig)
    registry: StarRegistry = field(default_factory=StarRegistry)
    hd_to_fk5: IdentifierCrossReference = field(default_factory=IdentifierCrossReference)
    bsc_xref: IdentifierCrossReference = field(default_factory=IdentifierCrossReference)
    hd_to_bsc: IdentifierCrossReference = field(default_factory=IdentifierCrossReference)
    highest_fk5: int = 0
    highest_bsc: int = 0
    highest_hip: int = 0
    cluster_anchor: int | None = None
    deep_sky_names: dict[DeepSkyId, DeepSkyNameInfo] = field(default_factory=dict)
    stats: dict[str, Any] = field(default_factory=dict)
    log: LogFn = silent_log

    def block_of(self, key: int) -> CatalogBlock:
        if key <= self.highest_fk5:
            return CatalogBlock.FK5
        if key <= self.highest_bsc:
            return CatalogBlock.BRIGHT_STAR
        if key <= self.highest_hip:
            return CatalogBlock.HIPPARCOS
        return CatalogBlock.DEEP_SKY
