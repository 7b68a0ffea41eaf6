from __future__ import annotations

import gzip
import zlib
from datetime import datetime, timedelta, timezone
from email.utils import formatdate
from pathlib import Path

import requests

from star_catalog.context import LogFn, silent_log
from star_catalog.errors import SourceUnavailableError, error_summary

SOURCE_URLS = {
    "fk5_cross_index": "http://cdsarc.u-strasbg.fr/ftp/IV/22/index.dat.gz",
    "bright_stars": "http://tdc-www.harvard.edu/catalogs/bsc5.dat.gz",
    "bright_notes": "http://tdc-www.harvard.edu/catalogs/bsc5.notes.gz",
    "ngc_names": "https://cdsarc.cds.unistra.fr/ftp/VII/118/names.dat",
    "ngc_positions": "https://cdsarc.cds.unistra.fr/ftp/VII/118/ngc2000.dat",
}

HIPPARCOS_SOURCE = "hipparcos"
HIPPARCOS_URL = "https://heasarc.gsfc.nasa.gov/db-perl/W3Browse/w3query.pl"
HIPPARCOS_QUERY = {
    "tablehead": "name=heasarc_hipparcos&description=Hipparcos Main Catalog",
    "table": "heasarc_hipparcos",
    "Action": "Start Search",
    "displaymode": "PureTextDisplay",
    "ResultMax": "0",
    "Coordinates": "J2000",
    "sortvar": "vmag",
    "varon": ["hip_number", "ra_deg", "dec_deg", "pm_ra", "pm_dec", "vmag", "hd_id"],
    "bparam_vmag": "<=12",
    "bparam_ra_deg::format": "char12",
    "bparam_dec_deg::format": "char12",
    "bparam_pm_ra::unit": "mas/yr",
    "bparam_pm_dec::unit": "mas/yr",
}
USER_AGENT = "star-catalog-builder/0.1"


class SourceProvider:
    """Raw catalog text by logical source name, cached on disk.

    Plain catalogs are re-requested with If-Modified-Since and served from
    the cache on 304. The Hipparcos query is only repeated once the cached
    copy is older than ``hipparcos_max_age_days``.
    """

    def __init__(
        self,
        cache_dir: Path,
        timeout_s: float = 45.0,
        hipparcos_max_age_days: int = 90,
        log: LogFn = silent_log,
    ) -> None:
        self.cache_dir = cache_dir
        self.timeout_s = timeout_s
        self.hipparcos_max_age = timedelta(days=hipparcos_max_age_days)
        self.log = log
        self._headers = {"User-Agent": USER_AGENT}

    def fetch(self, name: str) -> str:
        if name == HIPPARCOS_SOURCE:
            return self._fetch_hipparcos()
        if name not in SOURCE_URLS:
            raise SourceUnavailableError(f"Unknown catalog source: {name}")
        return self._fetch_conditional(name, SOURCE_URLS[name])

    def _cache_path(self, name: str) -> Path:
        return self.cache_dir / f"{name}.txt"

    def _read_cache(self, name: str) -> str:
        path = self._cache_path(name)
        try:
            return path.read_text(encoding="latin-1")
        except OSError as error:
            raise SourceUnavailableError(f"Cannot read cached {name}: {error_summary(error)}") from error

    def _write_cache(self, name: str, text: str) -> None:
        path = self._cache_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="latin-1")

    def _fall_back_to_cache(self, name: str, error: Exception) -> str:
        if not self._cache_path(name).exists():
            raise SourceUnavailableError(f"Cannot retrieve {name}: {error_summary(error)}") from error
        self.log(1, f"[sources] retrieval of {name} failed ({error_summary(error)}); using cached copy")
        return self._read_cache(name)

    def _fetch_conditional(self, name: str, url: str) -> str:
        cache_path = self._cache_path(name)
        headers = dict(self._headers)
        if cache_path.exists():
            headers["If-Modified-Since"] = formatdate(cache_path.stat().st_mtime, usegmt=True)
        else:
            self.log(1, f"[sources] retrieving {name}")

        try:
            response = requests.get(url, headers=headers, timeout=self.timeout_s)
            if response.status_code == 304:
                self.log(1, f"[sources] using cached {name}")
                return self._read_cache(name)
            response.raise_for_status()
        except requests.RequestException as error:
            return self._fall_back_to_cache(name, error)

        text = decode_payload(response.content, url)
        self.log(1, f"[sources] updating {name}")
        self._write_cache(name, text)
        return text

    def _fetch_hipparcos(self) -> str:
        cache_path = self._cache_path(HIPPARCOS_SOURCE)
        if cache_path.exists():
            modified_at = datetime.fromtimestamp(cache_path.stat().st_mtime, tz=timezone.utc)
            if datetime.now(timezone.utc) - modified_at <= self.hipparcos_max_age:
                self.log(1, "[sources] using cached hipparcos")
                return self._read_cache(HIPPARCOS_SOURCE)
        else:
            self.log(1, "[sources] retrieving hipparcos")

        try:
            response = requests.post(HIPPARCOS_URL, data=HIPPARCOS_QUERY, headers=self._headers, timeout=self.timeout_s)
            response.raise_for_status()
        except requests.RequestException as error:
            return self._fall_back_to_cache(HIPPARCOS_SOURCE, error)

        text = decode_payload(response.content, HIPPARCOS_URL)
        self.log(1, "[sources] updating hipparcos")
        self._write_cache(HIPPARCOS_SOURCE, text)
        return text


def decode_payload(content: bytes, url: str) -> str:
    if url.endswith(".gz") and content[:2] == b"\x1f\x8b":
        try:
            content = gzip.decompress(content)
        except (OSError, EOFError, zlib.error) as error:
            raise SourceUnavailableError(f"Corrupt payload from {url}: {error_summary(error)}") from error
    return content.decode("latin-1")


class TextSourceProvider:
    """In-memory sources, for offline runs and tests."""

    def __init__(self, sources: dict[str, str]) -> None:
        self.sources = dict(sources)

    def fetch(self, name: str) -> str:
        if name not in self.sources:
            raise SourceUnavailableError(f"Catalog source not provided: {name}")
        return self.sources[name]
