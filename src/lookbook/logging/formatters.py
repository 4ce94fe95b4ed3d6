"""structlog renderer for Lookbook console output.

Line format: ``service | HH:MM:SS | level | event key=value ...``
"""

from __future__ import annotations

import sys
import traceback
from datetime import datetime
from typing import TYPE_CHECKING, Any

from lookbook.logging.colors import (
    ANSI_AMBER,
    ANSI_MINT,
    ANSI_PURSUIT_BLUE,
    ANSI_RESET,
    ANSI_ROSE,
    ANSI_SKY,
    ANSI_SLATE,
    LEVEL_COLORS,
)

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

SERVICE_COLORS: dict[str, str] = {
    "cli": ANSI_PURSUIT_BLUE,
    "lookbook": ANSI_SKY,
}


class LookbookRenderer:
    """Render structlog events as a single themed line.

    Example:
        cli     | 14:02:11 | info  | profile_viewed slug=ada-lovelace skills=3
    """

    def __init__(
        self,
        service_name: str = "lookbook",
        service_width: int = 8,
        colors: bool = False,
        max_exception_frames: int = 5,
    ) -> None:
        self.service_name = service_name
        self.service_width = service_width
        self.colors = colors
        self.max_exception_frames = max_exception_frames

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        timestamp = event_dict.pop("timestamp", datetime.now().strftime("%H:%M:%S"))
        level = str(event_dict.pop("level", method_name)).lower()
        event = str(event_dict.pop("event", ""))

        exc_info = event_dict.pop("exc_info", None)
        exception = self._format_exception(exc_info) if exc_info else ""

        kv = self._format_kv_pairs(event_dict)

        if self.colors:
            svc_color = SERVICE_COLORS.get(self.service_name, ANSI_PURSUIT_BLUE)
            service = f"{svc_color}{self.service_name:<{self.service_width}}{ANSI_RESET}"
            ts = f"{ANSI_SLATE}{timestamp}{ANSI_RESET}"
            lvl = f"{LEVEL_COLORS.get(level, ANSI_SKY)}{level:<5}{ANSI_RESET}"
            kv = f"{ANSI_SLATE}{kv}{ANSI_RESET}" if kv else ""
        else:
            service = f"{self.service_name:<{self.service_width}}"
            ts = timestamp
            lvl = f"{level:<5}"

        line = f"{service} | {ts} | {lvl} | {event}"
        if kv:
            line += f" {kv}"
        if exception:
            line += f"\n{exception}"
        return line

    def _format_kv_pairs(self, event_dict: EventDict) -> str:
        pairs = []
        for key, value in event_dict.items():
            if key.startswith("_"):
                continue
            if self.colors and isinstance(value, bool):
                color = ANSI_MINT if value else ANSI_ROSE
                pairs.append(f"{key}={color}{value}{ANSI_RESET}")
            elif self.colors and isinstance(value, (int, float)):
                pairs.append(f"{key}={ANSI_AMBER}{value}{ANSI_RESET}")
            else:
                pairs.append(f"{key}={value}")
        return " ".join(pairs)

    def _format_exception(self, exc_info: tuple[Any, ...] | bool) -> str:
        """Most recent frames only, indented under the message column."""
        if exc_info is True:
            exc_info = sys.exc_info()
        if not exc_info or exc_info[0] is None:
            return ""

        exc_type, exc_value, exc_tb = exc_info
        tb_lines = traceback.format_tb(exc_tb)
        if len(tb_lines) > self.max_exception_frames:
            tb_lines = ["  ... (truncated)\n", *tb_lines[-self.max_exception_frames :]]

        indent = "         "
        body = "\n".join(indent + line for line in "".join(tb_lines).rstrip().split("\n"))
        header = f"{indent}{exc_type.__name__}: {exc_value}"
        if self.colors:
            return f"{ANSI_ROSE}{header}{ANSI_RESET}\n{ANSI_SLATE}{body}{ANSI_RESET}"
        return f"{header}\n{body}"
