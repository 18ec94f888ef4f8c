import pytest

from hashscan.schemas import ScanStats
from hashscan.services.severity import SeverityLevel, classify, severity_color
from hashscan.services.theme import THEMES


def _stats(malicious, suspicious=0):
    return ScanStats(malicious=malicious, suspicious=suspicious, undetected=50, harmless=20)


@pytest.mark.parametrize(
    "malicious,suspicious,expected",
    [
        (0, 0, SeverityLevel.CLEAN),
        (1, 0, SeverityLevel.LOW),
        (1, 1, SeverityLevel.LOW),
        (2, 1, SeverityLevel.MODERATE),
        (0, 5, SeverityLevel.MODERATE),
        (6, 0, SeverityLevel.HIGH),
        (4, 6, SeverityLevel.HIGH),
        (11, 0, SeverityLevel.CRITICAL),
        (40, 25, SeverityLevel.CRITICAL),
    ],
)
def test_classify_thresholds(malicious, suspicious, expected):
    assert classify(_stats(malicious, suspicious)) == expected


def test_clean_ignores_undetected_and_harmless():
    stats = ScanStats(malicious=0, suspicious=0, undetected=1000, harmless=1000)
    assert classify(stats) is SeverityLevel.CLEAN


def test_missing_result_is_unknown():
    assert classify(None) is SeverityLevel.UNKNOWN


def test_level_labels():
    assert SeverityLevel.MODERATE.value == "Moderate Risk"
    assert SeverityLevel.CRITICAL.value == "Critical Risk"


def test_severity_color_follows_theme():
    light, dark = THEMES["light"], THEMES["dark"]
    assert severity_color(SeverityLevel.CLEAN, light) == light.success
    assert severity_color(SeverityLevel.HIGH, dark) == dark.danger
    assert severity_color(SeverityLevel.LOW, dark) == "#FFC107"
    assert severity_color(SeverityLevel.CRITICAL, light) == "#B71C1C"
    assert severity_color(SeverityLevel.UNKNOWN, light) == "#999"
