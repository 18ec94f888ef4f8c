from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel


class Theme(BaseModel):
    name: str
    background: str
    text: str
    primary: str
    card: str
    danger: str
    success: str


THEMES: Dict[str, Theme] = {
    "light": Theme(
        name="light",
        background="#FFFFFF",
        text="#2D3436",
        primary="#6C5CE7",
        card="#F8F9FA",
        danger="#D63031",
        success="#00B894",
    ),
    "dark": Theme(
        name="dark",
        background="#2D3436",
        text="#FFFFFF",
        primary="#A8A4FF",
        card="#404040",
        danger="#FF7675",
        success="#55EFC4",
    ),
}

WARNING_COLOR = "#FFC107"
NEUTRAL_COLOR = "#999"


def get_theme(name: Any, default: str = "light") -> Theme:
    # неизвестное имя темы -> тема по умолчанию
    key = name.lower() if isinstance(name, str) else ""
    return THEMES.get(key) or THEMES[default]
