from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

DIR_MODE = 0o700
FILE_MODE = 0o600

# Characters that are unsafe in a single path component on common platforms.
_UNSAFE_CHARS_RE = re.compile(r'[/?<>\\:*|" ]')
_DOTS_RE = re.compile(r"\.+")


def _parse_mode(value: Any, default: int) -> int:
    """Permission bits from an int or an octal string such as ``"0700"``."""
    if not value:
        return default
    if isinstance(value, str):
        return int(value, 8)
    return int(value)


def sanitize_identifier(identifier: str) -> str:
    """Turn an application id into a safe directory name.

    Unsafe characters become ``.`` first, then every run of periods is
    collapsed into one::

        >>> sanitize_identifier("a:b c")
        'a.b.c'
    """

    return _DOTS_RE.sub(".", _UNSAFE_CHARS_RE.sub(".", identifier))


@dataclass(frozen=True)
class ConfigOptions:
    """Construction options for :class:`xcfg.store.ConfigStore`."""

    confdir: str = ".config"
    dir_mode: int = DIR_MODE
    file_mode: int = FILE_MODE
    filename: str = "config.json"
    minify: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "ConfigOptions":
        # Falsy values fall back to the defaults; unknown keys are ignored.
        return ConfigOptions(
            confdir=str(d.get("confdir") or ".config"),
            dir_mode=_parse_mode(d.get("dir_mode"), DIR_MODE),
            file_mode=_parse_mode(d.get("file_mode"), FILE_MODE),
            filename=str(d.get("filename") or "config.json"),
            minify=bool(d.get("minify")),
        )
