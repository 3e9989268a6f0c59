# airwatch/health.py
# Human-facing guidance keyed by severity level.

from typing import Iterable, List, NamedTuple

from .aqi import SeverityLevel


class Recommendation(NamedTuple):
    group: str
    advice: str


LABELS = {
    SeverityLevel.GOOD: "Good",
    SeverityLevel.MODERATE: "Moderate",
    SeverityLevel.UNHEALTHY: "Unhealthy",
    SeverityLevel.VERY_UNHEALTHY: "Very Unhealthy",
    SeverityLevel.HAZARDOUS: "Hazardous",
}

# (upper bound inclusive, description); above the last bound is hazardous
_DESCRIPTIONS = [
    (50, "Air quality is satisfactory"),
    (100, "Acceptable for most people"),
    (150, "Unhealthy for sensitive groups"),
    (200, "Unhealthy for everyone"),
    (300, "Very unhealthy - health alert"),
]

RECOMMENDATIONS = {
    SeverityLevel.GOOD: [
        Recommendation("General Public", "Air quality is satisfactory. Enjoy outdoor activities!"),
        Recommendation("Sensitive Groups", "No special precautions needed."),
    ],
    SeverityLevel.MODERATE: [
        Recommendation(
            "General Public",
            "Air quality is acceptable. Unusually sensitive people should consider reducing prolonged outdoor exertion.",
        ),
        Recommendation(
            "Sensitive Groups",
            "Consider reducing prolonged or heavy outdoor activities if you experience symptoms.",
        ),
    ],
    SeverityLevel.UNHEALTHY: [
        Recommendation(
            "General Public",
            "Reduce prolonged or heavy outdoor exertion. Take more breaks during outdoor activities.",
        ),
        Recommendation(
            "Sensitive Groups",
            "Avoid prolonged or heavy outdoor activities. Keep outdoor activities short. Consider moving activities indoors.",
        ),
        Recommendation("Children & Elderly", "Limit time outdoors. Use air purifiers indoors if available."),
    ],
    SeverityLevel.VERY_UNHEALTHY: [
        Recommendation(
            "General Public",
            "Avoid prolonged or heavy outdoor activities. Move activities indoors or reschedule.",
        ),
        Recommendation(
            "Sensitive Groups",
            "Avoid all outdoor physical activities. Stay indoors and keep activity levels low.",
        ),
        Recommendation("Everyone", "Wear N95 masks if you must go outside. Use air purifiers indoors."),
    ],
    SeverityLevel.HAZARDOUS: [
        Recommendation("Everyone", "Remain indoors and keep activity levels low. Run air purifiers if available."),
        Recommendation("Everyone", "Avoid all outdoor activities. Wear N95 masks if you must go outside."),
        Recommendation(
            "Emergency",
            "This is a health emergency. Follow local advisories. Seek medical attention if experiencing symptoms.",
        ),
    ],
}

GENERAL_TIPS = [
    "Monitor symptoms like coughing, shortness of breath, or eye irritation",
    "Keep windows closed during poor air quality",
    "Use HEPA air purifiers indoors when possible",
    "Stay hydrated to help your body process pollutants",
]


def describe_aqi(aqi: int) -> str:
    for upper, text in _DESCRIPTIONS:
        if aqi <= upper:
            return text
    return "Hazardous - emergency conditions"


def level_label(level: SeverityLevel) -> str:
    return LABELS[SeverityLevel(level)]


def recommendations(level: SeverityLevel) -> List[Recommendation]:
    return list(RECOMMENDATIONS[SeverityLevel(level)])


def overall_level(levels: Iterable[SeverityLevel]) -> SeverityLevel:
    """Most severe of the given levels; good when there are none."""
    return max((SeverityLevel(lv) for lv in levels), default=SeverityLevel.GOOD)
