"""Targeted in-place rewrites of configuration files.

Each rewrite touches only the value of one recognisable field. Files are read
and written with `newline=""` and `errors="surrogateescape"` so line endings and
every other byte survive, whatever the file's encoding. A file whose content
would not change is left untouched.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable


@dataclass(frozen=True)
class RewriteResult:
    path: Path
    matches: int
    changed: bool


def _python_field_re(field: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<lead>[ \t]*{re.escape(field)}[ \t]*=[ \t]*)(?P<q>['\"])(?P<value>.*?)(?P=q)", re.MULTILINE)


def _env_field_re(key: str) -> re.Pattern[str]:
    return re.compile(rf"(?P<lead>\b{re.escape(key)}=)(?P<value>[^\r\n]*)")


def replace_python_string_field(text: str, field: str, value: str) -> tuple[str, int]:
    """Replace the quoted value of `FIELD = '...'` assignments, keeping quotes and trailing text."""
    return _python_field_re(field).subn(lambda m: f"{m['lead']}{m['q']}{value}{m['q']}", text)


def read_python_string_field(text: str, field: str) -> str | None:
    match = _python_field_re(field).search(text)
    return match["value"] if match else None


def replace_env_field(text: str, key: str, value: str) -> tuple[str, int]:
    """Replace everything after `KEY=` up to the end of the line, on every line that has it."""
    return _env_field_re(key).subn(lambda m: f"{m['lead']}{value}", text)


def read_text_exact(path: Path) -> str:
    with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def write_text_exact(path: Path, text: str) -> None:
    with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(text)


def rewrite_file(path: Path, transform: Callable[[str], tuple[str, int]]) -> RewriteResult:
    original = read_text_exact(path)
    updated, matches = transform(original)
    if updated == original:
        return RewriteResult(path=path, matches=matches, changed=False)
    write_text_exact(path, updated)
    return RewriteResult(path=path, matches=matches, changed=True)


def set_python_string_field(path: Path, field: str, value: str) -> RewriteResult:
    return rewrite_file(path, lambda text: replace_python_string_field(text, field, value))


def set_env_fields(path: Path, values: dict[str, str]) -> RewriteResult:
    def _transform(text: str) -> tuple[str, int]:
        total = 0
        for key, value in values.items():
            text, count = replace_env_field(text, key, value)
            total += count
        return text, total

    return rewrite_file(path, _transform)


def strip_carriage_returns(path: Path) -> RewriteResult:
    return rewrite_file(path, lambda text: re.subn(r"\r$", "", text, flags=re.MULTILINE))


def backup_file(path: Path, suffix: str = ".bak") -> Path:
    target = path.with_name(path.name + suffix)
    shutil.copy2(path, target)
    return target
