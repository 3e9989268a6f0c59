# airwatch/aqi.py
# US EPA AQI for PM2.5, PM10 (µg/m³), CO (ppm), NO2, SO2, O3 (ppb).
# Pure functions only: no I/O, no shared mutable state.

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NamedTuple, Sequence, Tuple


class InvalidConcentrationError(ValueError):
    """Raised for negative or non-finite concentrations."""


class Pollutant(str, Enum):
    # Definition order is the evaluation order used for tie-breaks.
    PM25 = "pm25"
    PM10 = "pm10"
    CO = "co"
    NO2 = "no2"
    SO2 = "so2"
    O3 = "o3"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def unit(self) -> str:
        return _UNITS[self]


_LABELS = {
    Pollutant.PM25: "PM2.5",
    Pollutant.PM10: "PM10",
    Pollutant.CO: "CO",
    Pollutant.NO2: "NO₂",
    Pollutant.SO2: "SO₂",
    Pollutant.O3: "O₃",
}

_UNITS = {
    Pollutant.PM25: "µg/m³",
    Pollutant.PM10: "µg/m³",
    Pollutant.CO: "ppm",
    Pollutant.NO2: "ppb",
    Pollutant.SO2: "ppb",
    Pollutant.O3: "ppb",
}


class SeverityLevel(str, Enum):
    GOOD = "good"
    MODERATE = "moderate"
    UNHEALTHY = "unhealthy"
    VERY_UNHEALTHY = "very-unhealthy"
    HAZARDOUS = "hazardous"

    @property
    def rank(self) -> int:
        return list(SeverityLevel).index(self)

    # Compare by severity, not by the string value.
    def __lt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank >= other.rank


class Breakpoint(NamedTuple):
    concentration_low: float
    concentration_high: float
    index_low: int
    index_high: int


MAX_AQI = 500

PM25 = (
    Breakpoint(0.0,    12.0,   0,  50),
    Breakpoint(12.1,   35.4,  51, 100),
    Breakpoint(35.5,   55.4, 101, 150),
    Breakpoint(55.5,  150.4, 151, 200),
    Breakpoint(150.5, 250.4, 201, 300),
    Breakpoint(250.5, 500.4, 301, 500),
)

PM10 = (
    Breakpoint(0,    54,   0,  50),
    Breakpoint(55,  154,  51, 100),
    Breakpoint(155, 254, 101, 150),
    Breakpoint(255, 354, 151, 200),
    Breakpoint(355, 424, 201, 300),
    Breakpoint(425, 604, 301, 500),
)

CO = (
    Breakpoint(0.0,   4.4,   0,  50),
    Breakpoint(4.5,   9.4,  51, 100),
    Breakpoint(9.5,  12.4, 101, 150),
    Breakpoint(12.5, 15.4, 151, 200),
    Breakpoint(15.5, 30.4, 201, 300),
    Breakpoint(30.5, 50.4, 301, 500),
)

NO2 = (
    Breakpoint(0,      53,   0,  50),
    Breakpoint(54,    100,  51, 100),
    Breakpoint(101,   360, 101, 150),
    Breakpoint(361,   649, 151, 200),
    Breakpoint(650,  1249, 201, 300),
    Breakpoint(1250, 2049, 301, 500),
)

SO2 = (
    Breakpoint(0,     35,   0,  50),
    Breakpoint(36,    75,  51, 100),
    Breakpoint(76,   185, 101, 150),
    Breakpoint(186,  304, 151, 200),
    Breakpoint(305,  604, 201, 300),
    Breakpoint(605, 1004, 301, 500),
)

O3 = (
    Breakpoint(0,    54,   0,  50),
    Breakpoint(55,   70,  51, 100),
    Breakpoint(71,   85, 101, 150),
    Breakpoint(86,  105, 151, 200),
    Breakpoint(106, 200, 201, 300),
    Breakpoint(201, 504, 301, 500),
)

TABLES: Dict[Pollutant, Tuple[Breakpoint, ...]] = {
    Pollutant.PM25: PM25,
    Pollutant.PM10: PM10,
    Pollutant.CO:   CO,
    Pollutant.NO2:  NO2,
    Pollutant.SO2:  SO2,
    Pollutant.O3:   O3,
}

# Upper bounds (inclusive) for good, moderate, unhealthy, very-unhealthy.
# Anything above the last one is hazardous. Kept separate from TABLES.
CONCENTRATION_THRESHOLDS: Dict[Pollutant, Tuple[float, float, float, float]] = {
    Pollutant.PM25: (12, 35.4, 55.4, 150.4),
    Pollutant.PM10: (54, 154, 254, 354),
    Pollutant.CO:   (4.4, 9.4, 12.4, 15.4),
    Pollutant.NO2:  (53, 100, 360, 649),
    Pollutant.SO2:  (35, 75, 185, 304),
    Pollutant.O3:   (54, 70, 85, 105),
}

# Upper bounds (inclusive) of the AQI bands, same order as SeverityLevel.
AQI_BANDS = (
    (50, SeverityLevel.GOOD),
    (100, SeverityLevel.MODERATE),
    (150, SeverityLevel.UNHEALTHY),
    (200, SeverityLevel.VERY_UNHEALTHY),
)


@dataclass(frozen=True)
class AggregateResult:
    aqi: int
    level: SeverityLevel
    dominant_pollutant: Pollutant
    sub_indices: Dict[Pollutant, int]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _check_concentration(value: float) -> float:
    c = float(value)
    if not math.isfinite(c) or c < 0:
        raise InvalidConcentrationError(f"concentration must be a finite, non-negative number, got {value!r}")
    return c


def _interp(bp: Breakpoint, c: float) -> int:
    # Linear interpolation per EPA formula, rounded half-up
    slope = (bp.index_high - bp.index_low) / (bp.concentration_high - bp.concentration_low)
    return round_half_up(slope * (c - bp.concentration_low) + bp.index_low)


def sub_index(concentration: float, table: Sequence[Breakpoint]) -> int:
    """
    Interpolate one pollutant's sub-index from its breakpoint table.

    Values inside a segment use that segment. Values in the small gap between
    two segments (e.g. PM2.5 12.05) get the lower segment's top index, the
    same result EPA truncation of the reading would give. Values above the
    last segment saturate at 500.
    """
    if not table:
        raise ValueError("breakpoint table is empty")
    c = _check_concentration(concentration)

    prev = None
    for bp in table:
        # gap between segments: a bare first-match scan would fall through to 500
        # here; use the lower segment's top index instead so the result stays monotonic
        if c < bp.concentration_low:
            return prev.index_high if prev else bp.index_low
        if c <= bp.concentration_high:
            return _interp(bp, c)
        prev = bp
    return MAX_AQI


def classify_aqi(aqi: int) -> SeverityLevel:
    for upper, level in AQI_BANDS:
        if aqi <= upper:
            return level
    return SeverityLevel.HAZARDOUS


def calculate_aqi(pm25: float, pm10: float, co: float, no2: float, so2: float, o3: float) -> AggregateResult:
    """
    Overall AQI is the highest sub-index. Ties go to the pollutant that comes
    first in Pollutant order (PM2.5, PM10, CO, NO2, SO2, O3).
    """
    values = (pm25, pm10, co, no2, so2, o3)
    sub_indices = {p: sub_index(v, TABLES[p]) for p, v in zip(Pollutant, values)}

    dominant = Pollutant.PM25
    for p in Pollutant:
        if sub_indices[p] > sub_indices[dominant]:
            dominant = p

    aqi = sub_indices[dominant]
    return AggregateResult(aqi=aqi, level=classify_aqi(aqi), dominant_pollutant=dominant, sub_indices=sub_indices)


def calculate_aqi_from_mapping(concentrations) -> AggregateResult:
    """Same as calculate_aqi, keyed by Pollutant or its string key. Missing keys default to 0.0."""
    normalized = {Pollutant(k): v for k, v in concentrations.items()}
    return calculate_aqi(*(normalized.get(p, 0.0) for p in Pollutant))


def level_for_concentration(pollutant, value: float) -> SeverityLevel:
    """Per-metric level straight from concentration cut-points (no interpolation)."""
    c = _check_concentration(value)
    good, moderate, unhealthy, very_unhealthy = CONCENTRATION_THRESHOLDS[Pollutant(pollutant)]
    if c <= good:
        return SeverityLevel.GOOD
    if c <= moderate:
        return SeverityLevel.MODERATE
    if c <= unhealthy:
        return SeverityLevel.UNHEALTHY
    if c <= very_unhealthy:
        return SeverityLevel.VERY_UNHEALTHY
    return SeverityLevel.HAZARDOUS


def pm25_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.PM25, value)


def pm10_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.PM10, value)


def co_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.CO, value)


def no2_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.NO2, value)


def so2_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.SO2, value)


def o3_level(value: float) -> SeverityLevel:
    return level_for_concentration(Pollutant.O3, value)
