from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterator

UNKNOWN_MAGNITUDE = 1000.0


class CatalogBlock(IntEnum):
    FK5 = 0
    BRIGHT_STAR = 1
    HIPPARCOS = 2
    DEEP_SKY = 3


class DeepSkyFamily(Enum):
    NGC = "NGC"
    IC = "IC"


@dataclass(frozen=True)
class DeepSkyId:
    family: DeepSkyFamily
    number: int

    @classmethod
    def parse(cls, designation: str) -> DeepSkyId | None:
        """Read an NGC 2000.0 designation such as ' 224' or 'I1613'."""
        text = str(designation).rstrip()
        if not text.strip():
            return None

        family = DeepSkyFamily.NGC
        if text[0] == "I":
            family = DeepSkyFamily.IC
            text = text[1:]
        elif text[0] == "N":
            text = text[1:]

        try:
            number = int(text.strip())
        except ValueError:
            return None
        if number <= 0:
            return None
        return cls(family, number)

    @property
    def signed_number(self) -> int:
        return self.number if self.family is DeepSkyFamily.NGC else -self.number

    def __str__(self) -> str:
        return f"{self.family.value} {self.number}"


@dataclass
class StarRecord:
    fk5_number: int = 0
    bsc_number: int = 0
    hip_number: int = 0
    hd_number: int = 0
    deep_sky_id: DeepSkyId | None = None
    flamsteed: int = 0
    bayer_rank: int = 0
    sub_index: int = 0
    constellation: int = 0
    messier_number: int = 0
    name: str | None = None
    ra: float = 0.0
    dec: float = 0.0
    pm_ra: float = 0.0
    pm_dec: float = 0.0
    magnitude: float = UNKNOWN_MAGNITUDE

    def clear_designation(self) -> None:
        self.flamsteed = 0
        self.bayer_rank = 0
        self.sub_index = 0
        self.constellation = 0


@dataclass
class DeepSkyNameInfo:
    name: str = ""
    messier_number: int = 0


class StarRegistry:
    """Records keyed by 1-based registry key; a missing key is a gap."""

    def __init__(self) -> None:
        self._records: dict[int, StarRecord] = {}
        self._highest_key = 0

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __getitem__(self, key: int) -> StarRecord:
        return self._records[key]

    def __len__(self) -> int:
        return len(self._records)

    def get(self, key: int) -> StarRecord | None:
        return self._records.get(key)

    @property
    def highest_key(self) -> int:
        return self._highest_key

    def put(self, key: int, record: StarRecord) -> None:
        if key < 1:
            raise ValueError(f"Registry keys start at 1, got {key}")
        self._records[key] = record
        self._highest_key = max(self._highest_key, key)

    def append(self, record: StarRecord) -> int:
        key = self._highest_key + 1
        self.put(key, record)
        return key

    def keys(self) -> range:
        return range(1, self._highest_key + 1)

    def items(self) -> Iterator[tuple[int, StarRecord]]:
        for key in self.keys():
            record = self._records.get(key)
            if record is not None:
                yield key, record


class IdentifierCrossReference:
    """Catalog id -> registry key, where 0 marks an id seen but not matched."""

    def __init__(self) -> None:
        self._keys: dict[int, int] = {}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def get(self, identifier: int) -> int | None:
        return self._keys.get(identifier)

    def mark_seen(self, identifier: int) -> None:
        self._keys[identifier] = 0

    def link(self, identifier: int, key: int) -> None:
        self._keys[identifier] = key

    def discard(self, identifier: int) -> None:
        self._keys.pop(identifier, None)

    def resolve(self, identifier: int) -> int | None:
        key = self._keys.get(identifier, 0)
        return key if key > 0 else None

    def drop_unmatched(self) -> int:
        unmatched = [identifier for identifier, key in self._keys.items() if key == 0]
        for identifier in unmatched:
            del self._keys[identifier]
        return len(unmatched)
