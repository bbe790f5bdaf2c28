"""Monitoring-site observations placed on the EKMA diagram."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Iterable, Mapping, Optional

from ekmagrid.config import COLUMN_STATION, COLUMN_X, COLUMN_Y, COLUMN_YEAR, DEFAULT_SITES_PATH
from ekmagrid.pre.loader import read_rows

logger = logging.getLogger(__name__)

STATION_LABELS: dict[str, str] = {
    "CAUSEWAY_BAY": "Causeway Bay",
    "CENTRAL": "Central",
    "CENTRAL_WESTERN": "Central Western",
    "KWAI_CHUNG": "Kwai Chung",
    "KWUN_TONG": "Kwun Tong",
    "MONG_KOK": "Mong Kok",
    "NORTH": "North",
    "SHAM_SHUI_PO": "Sham Shui Po",
    "SHATIN": "Shatin",
    "SOUTHERN": "Southern",
    "TAI_PO": "Tai Po",
    "TAP_MUN": "Tap Mun",
    "TSEUNG_KWAN_O": "Tseung Kwan O",
    "TSUEN_WAN": "Tsuen Wan",
    "TUEN_MUN": "Tuen Mun",
    "TUNG_CHUNG": "Tung Chung",
    "YUEN_LONG": "Yuen Long",
    "HK_AVE": "HK S.A.R.",
}

STATION_ALIASES: dict[str, str] = {
    "Hong Kong (AVE)": "HK_AVE",
}


def normalize_station(name: Any) -> Optional[str]:
    """Station code for a raw station name; None for an empty name."""
    if name is None:
        return None
    text = str(name).strip()
    if not text:
        return None
    return STATION_ALIASES.get(text, text)


def station_label(code: str) -> str:
    return STATION_LABELS.get(code, code.replace("_", " "))


def _as_year(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        if not math.isfinite(value) or value != int(value):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class SitePoint:
    """One yearly observation of a station in response space."""
    site: str
    year: int
    x: float
    y: float

    @property
    def label(self) -> str:
        return f"{station_label(self.site)} ({self.year})"


@dataclass
class SiteObservations:
    """Yearly response-space observations per station: station -> year -> (x, y)."""
    records: dict[str, dict[int, tuple[float, float]]] = field(default_factory=dict)

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> SiteObservations:
        obs = cls()
        skipped = 0
        for row in rows:
            site = normalize_station(row.get(COLUMN_STATION))
            year = _as_year(row.get(COLUMN_YEAR))
            x, y = row.get(COLUMN_X), row.get(COLUMN_Y)
            if site is None or year is None or not _is_number(x) or not _is_number(y):
                skipped += 1
                continue
            obs.records.setdefault(site, {})[year] = (float(x), float(y))
        logger.info(f"Loaded observations for {len(obs.records)} stations ({skipped} rows skipped).")
        return obs

    @classmethod
    def from_csv(cls, filepath: str = DEFAULT_SITES_PATH) -> SiteObservations:
        return cls.from_rows(read_rows(filepath))

    @property
    def stations(self) -> list[str]:
        return sorted(self.records)

    def get_point(self, site: str, year: int) -> Optional[SitePoint]:
        rec = self.records.get(site, {}).get(year)
        if rec is None:
            return None
        return SitePoint(site=site, year=year, x=rec[0], y=rec[1])

    def get_series(self, site: str, year_min: int, year_max: int) -> list[SitePoint]:
        """Observations of `site` with year_min <= year <= year_max, by year."""
        years = self.records.get(site, {})
        return [
            SitePoint(site=site, year=yr, x=xy[0], y=xy[1])
            for yr, xy in sorted(years.items())
            if year_min <= yr <= year_max
        ]
