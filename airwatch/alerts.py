# airwatch/alerts.py
# Which pollutants in a snapshot are bad enough to alert on.
# Uses the per-metric concentration levels, not the interpolated sub-index.
# Cooldowns/toast scheduling belong to the client.

from typing import List, Mapping, NamedTuple

from .aqi import Pollutant, SeverityLevel, level_for_concentration

ALERT_LEVELS = frozenset({
    SeverityLevel.UNHEALTHY,
    SeverityLevel.VERY_UNHEALTHY,
    SeverityLevel.HAZARDOUS,
})


class Alert(NamedTuple):
    pollutant: Pollutant
    level: SeverityLevel
    value: float
    message: str


def should_alert(level: SeverityLevel) -> bool:
    return SeverityLevel(level) in ALERT_LEVELS


def _message(pollutant: Pollutant, level: SeverityLevel, value: float) -> str:
    return f"{pollutant.label} levels are {level.value.replace('-', ' ')} ({value:.1f} {pollutant.unit})"


def evaluate_alerts(concentrations: Mapping) -> List[Alert]:
    """
    Returns alerts in fixed pollutant order. Keys may be Pollutant members or
    their string keys ("pm25", ...). Missing or None values are skipped.
    """
    normalized = {Pollutant(k): v for k, v in concentrations.items() if v is not None}

    alerts = []
    for p in Pollutant:
        if p not in normalized:
            continue
        value = float(normalized[p])
        level = level_for_concentration(p, value)
        if should_alert(level):
            alerts.append(Alert(p, level, value, _message(p, level, value)))
    return alerts


def alert_flag(alerts: List[Alert]) -> int:
    # 0 = none, 1 = warn (unhealthy), 2 = danger (very unhealthy or worse)
    if not alerts:
        return 0
    if any(a.level >= SeverityLevel.VERY_UNHEALTHY for a in alerts):
        return 2
    return 1
