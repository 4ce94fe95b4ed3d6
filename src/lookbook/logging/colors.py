"""Lookbook terminal palette.

Shared by the log renderer and the CLI so both speak the same colors.
"""

from __future__ import annotations

# Hex colors (Rich)
PURSUIT_BLUE = "#4242ea"
SOFT_INDIGO = "#6366f1"
SKY = "#7dd3fc"
AMBER = "#fbbf24"
MINT = "#34d399"
ROSE = "#f87171"
SLATE = "#94a3b8"

# ANSI 24-bit escape codes (log renderer)
ANSI_PURSUIT_BLUE = "\033[38;2;66;66;234m"
ANSI_SOFT_INDIGO = "\033[38;2;99;102;241m"
ANSI_SKY = "\033[38;2;125;211;252m"
ANSI_AMBER = "\033[38;2;251;191;36m"
ANSI_MINT = "\033[38;2;52;211;153m"
ANSI_ROSE = "\033[38;2;248;113;113m"
ANSI_SLATE = "\033[38;2;148;163;184m"
ANSI_RESET = "\033[0m"
ANSI_BOLD = "\033[1m"

LEVEL_COLORS: dict[str, str] = {
    "debug": ANSI_SLATE,
    "info": ANSI_SKY,
    "warning": ANSI_AMBER,
    "warn": ANSI_AMBER,
    "error": ANSI_ROSE,
    "critical": ANSI_SOFT_INDIGO,
}
