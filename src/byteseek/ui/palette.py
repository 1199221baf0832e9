from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    status_bg: str
    status_fg: str
    accent: str
    offset_fg: str
    dim_fg: str
    line_label_fg: str
    error_fg: str
    # Search roles
    search_banner_bg: str
    search_banner_fg: str
    search_hit_fg: str
    search_hit_bg: str


DEFAULT = Palette(
    status_bg="#1f2430",
    status_fg="#d8dee9",
    accent="#5ea1ff",
    offset_fg="#8892a0",
    dim_fg="#6b7280",
    line_label_fg="#4c75c6",
    error_fg="#ff5555",
    search_banner_bg="#10b981",
    search_banner_fg="#ffffff",
    search_hit_fg="#ffffff",
    search_hit_bg="#b36b00",
)

# Selected palette for now
PALETTE = DEFAULT
