from __future__ import annotations

from enum import Enum
from typing import Optional

from ..schemas import ScanStats
from .theme import NEUTRAL_COLOR, WARNING_COLOR, Theme


class SeverityLevel(str, Enum):
    UNKNOWN = "Unknown"
    CLEAN = "Clean"
    LOW = "Low Risk"
    MODERATE = "Moderate Risk"
    HIGH = "High Risk"
    CRITICAL = "Critical Risk"


# (верхняя граница malicious + suspicious, уровень), по возрастанию
THRESHOLDS = (
    (0, SeverityLevel.CLEAN),
    (2, SeverityLevel.LOW),
    (5, SeverityLevel.MODERATE),
    (10, SeverityLevel.HIGH),
)


def classify(stats: Optional[ScanStats]) -> SeverityLevel:
    if stats is None:
        return SeverityLevel.UNKNOWN

    total_bad = stats.malicious + stats.suspicious
    for upper, level in THRESHOLDS:
        if total_bad <= upper:
            return level
    return SeverityLevel.CRITICAL


def severity_color(level: SeverityLevel, theme: Theme) -> str:
    return {
        SeverityLevel.CLEAN: theme.success,
        SeverityLevel.LOW: WARNING_COLOR,
        SeverityLevel.MODERATE: "#FF9800",
        SeverityLevel.HIGH: theme.danger,
        SeverityLevel.CRITICAL: "#B71C1C",
    }.get(level, NEUTRAL_COLOR)
