"""
Круговая диаграмма статистики сканирования.

Углы в градусах: 0° — «12 часов», рост угла — по часовой стрелке.
Каждый сектор начинается там, где закончился предыдущий; ``progress``
масштабирует только конечный угол сектора, так что анимация выглядит как
заполнение круга по часовой стрелке.
"""
from __future__ import annotations

import math
from typing import List, Sequence

from ..schemas import ArcSlice, ChartPayload, ScanStats, SliceData
from .theme import NEUTRAL_COLOR, WARNING_COLOR, Theme


FULL_CIRCLE = 360.0
# полный круг в SVG одной дугой не нарисовать: начало и конец совпадают
MAX_ARC = 359.99
SWEEP_DURATION_MS = 1500
SWEEP_FPS = 30

# Easing.ease == cubic-bezier(0.42, 0, 1, 1)
EASE_CONTROL_POINTS = (0.42, 0.0, 1.0, 1.0)


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def polar_to_cartesian(cx: float, cy: float, radius: float, angle: float) -> tuple[float, float]:
    rad = math.radians(angle - 90)
    return cx + radius * math.cos(rad), cy + radius * math.sin(rad)


def describe_arc(cx: float, cy: float, radius: float, start_angle: float, end_angle: float) -> str:
    if end_angle - start_angle >= FULL_CIRCLE:
        end_angle = start_angle + MAX_ARC

    start_x, start_y = polar_to_cartesian(cx, cy, radius, end_angle)
    end_x, end_y = polar_to_cartesian(cx, cy, radius, start_angle)
    large_arc = "0" if end_angle - start_angle <= 180 else "1"
    return " ".join(
        [
            "M", _fmt(start_x), _fmt(start_y),
            "A", _fmt(radius), _fmt(radius), "0", large_arc, "0", _fmt(end_x), _fmt(end_y),
            "L", _fmt(cx), _fmt(cy),
            "Z",
        ]
    )


def cubic_bezier(x1: float, y1: float, x2: float, y2: float, t: float) -> float:
    """CSS-кривая: находит параметр по x бисекцией и возвращает y."""
    if t <= 0:
        return 0.0
    if t >= 1:
        return 1.0

    def coord(a: float, b: float, s: float) -> float:
        return 3 * (1 - s) ** 2 * s * a + 3 * (1 - s) * s ** 2 * b + s ** 3

    lo, hi = 0.0, 1.0
    s = t
    for _ in range(40):
        s = (lo + hi) / 2
        if coord(x1, x2, s) < t:
            lo = s
        else:
            hi = s
    return coord(y1, y2, s)


def ease(t: float) -> float:
    return cubic_bezier(*EASE_CONTROL_POINTS, t)


def ease_out(t: float) -> float:
    return 1.0 - ease(1.0 - t)


def sweep_progress(elapsed_ms: float, duration_ms: float = SWEEP_DURATION_MS) -> float:
    if duration_ms <= 0:
        return 1.0
    return ease_out(min(1.0, max(0.0, elapsed_ms / duration_ms)))


def pie_slices(
    data: Sequence[SliceData],
    progress: float = 1.0,
    width: float = 200,
    height: float = 200,
    outer_radius: float = 90,
) -> List[ArcSlice]:
    if not 0.0 <= progress <= 1.0:
        raise ValueError(f"progress must be within [0, 1], got {progress}")

    total = sum(item.value for item in data)
    cx, cy = width / 2, height / 2

    slices: List[ArcSlice] = []
    cumulative = 0.0
    for item in data:
        span = (item.value / total) * FULL_CIRCLE if total > 0 else 0.0
        end = cumulative + span * progress
        slices.append(
            ArcSlice(
                value=item.value,
                color=item.color,
                start_angle=cumulative,
                end_angle=end,
                path=describe_arc(cx, cy, outer_radius, cumulative, end),
            )
        )
        cumulative += span
    return slices


def sweep_frames(
    data: Sequence[SliceData],
    duration_ms: int = SWEEP_DURATION_MS,
    fps: int = SWEEP_FPS,
    width: float = 200,
    height: float = 200,
    outer_radius: float = 90,
) -> List[List[str]]:
    """Кадры анимации: от нулевых секторов до полной диаграммы."""
    count = max(1, round(duration_ms / 1000 * fps))
    frames = []
    for i in range(count + 1):
        progress = sweep_progress(duration_ms * i / count, duration_ms)
        frames.append([s.path for s in pie_slices(data, progress, width, height, outer_radius)])
    return frames


def pie_data(stats: ScanStats, theme: Theme) -> List[SliceData]:
    return [
        SliceData(value=stats.malicious, color=theme.danger),
        SliceData(value=stats.suspicious, color=WARNING_COLOR),
        SliceData(value=stats.harmless, color=theme.success),
        SliceData(value=stats.undetected, color=NEUTRAL_COLOR),
    ]


def build_chart(
    data: Sequence[SliceData],
    width: int = 200,
    height: int = 200,
    outer_radius: float = 90,
    duration_ms: int = SWEEP_DURATION_MS,
    fps: int = SWEEP_FPS,
) -> ChartPayload:
    return ChartPayload(
        width=width,
        height=height,
        duration_ms=duration_ms,
        slices=pie_slices(data, 1.0, width, height, outer_radius),
        frames=sweep_frames(data, duration_ms, fps, width, height, outer_radius),
    )


def render_svg(
    data: Sequence[SliceData],
    progress: float = 1.0,
    width: int = 200,
    height: int = 200,
    outer_radius: float = 90,
) -> str:
    paths = [
        f'<path d="{s.path}" fill="{s.color}"/>'
        for s in pie_slices(data, progress, width, height, outer_radius)
        if s.span > 0
    ]
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        + "".join(paths)
        + "</svg>"
    )
