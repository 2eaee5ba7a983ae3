"""Operator-facing status lines.

Structured events go to stderr through `cubeboot.logging.log_event`; this module
prints the short coloured lines an operator watches while a plan runs.
"""

from __future__ import annotations

import os
import re
import sys
from typing import TextIO

ANSI = {
    "reset": "\x1b[0m",
    "red": "\x1b[0;31m",
    "green": "\x1b[0;32m",
    "yellow": "\x1b[1;33m",
    "blue": "\x1b[0;34m",
}
ANSI_REGEX = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

LEVEL_STYLE = {
    "info": ("INFO", "blue"),
    "success": ("SUCCESS", "green"),
    "warning": ("WARNING", "yellow"),
    "error": ("ERROR", "red"),
}

RULE = "=" * 78


def strip_ansi(text: str) -> str:
    return ANSI_REGEX.sub("", text)


def color_enabled(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Console:
    def __init__(self, stream: TextIO | None = None, quiet: bool = False) -> None:
        self._stream = stream
        self.quiet = quiet

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def paint(self, text: str, color: str) -> str:
        if not color_enabled(self.stream):
            return text
        return f"{ANSI[color]}{text}{ANSI['reset']}"

    def status(self, level: str, message: str) -> None:
        label, color = LEVEL_STYLE[level]
        if self.quiet and level != "error":
            return
        self.stream.write(f"{self.paint(f'[{label}]', color)} {message}\n")

    def info(self, message: str) -> None:
        self.status("info", message)

    def success(self, message: str) -> None:
        self.status("success", message)

    def warning(self, message: str) -> None:
        self.status("warning", message)

    def error(self, message: str) -> None:
        self.status("error", message)

    def line(self, text: str = "", color: str | None = None) -> None:
        if self.quiet:
            return
        self.stream.write((self.paint(text, color) if color else text) + "\n")

    def header(self, title: str) -> None:
        self.line()
        self.line(RULE)
        self.line(f"  {title}")
        self.line(RULE)
        self.line()
