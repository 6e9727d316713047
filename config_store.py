"""INI-style configuration loader.

Turns a text file of ``[section]`` headers and ``key=value`` lines into a
read-only two-level mapping: section name -> key -> string value.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Union

logger = logging.getLogger(__name__)

ConfigMapping = Mapping[str, Mapping[str, str]]

_COMMENT_PREFIXES = (";", "#")
_INLINE_COMMENT_PREFIX = ";"
_BOM = "\ufeff"


class ConfigError(Exception):
    """Base class for every configuration failure."""


class ConfigNotFound(ConfigError):
    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot load configuration file {self.path}: {reason}")


class ConfigParseError(ConfigError):
    def __init__(self, source: str, line_no: int, line: str, reason: str):
        self.source = source
        self.line_no = line_no
        self.line = line
        self.reason = reason
        super().__init__(f"{source}:{line_no}: {reason}: {line!r}")


def _strip_inline_comment(value: str) -> str:
    # Only ";" starts an inline comment, and only after whitespace, so "a;b" and "a #b" stay intact
    for idx, char in enumerate(value):
        if char == _INLINE_COMMENT_PREFIX and idx > 0 and value[idx - 1].isspace():
            return value[:idx].rstrip()
    return value


def _split_pair(line: str):
    positions = [pos for pos in (line.find("="), line.find(":")) if pos >= 0]
    if not positions:
        return None
    split_at = min(positions)
    return line[:split_at].strip(), _strip_inline_comment(line[split_at + 1:]).strip()


def parse_lines(lines: Iterable[str], source: str = "<string>") -> ConfigMapping:
    """Parse INI text lines into a read-only section -> key -> value mapping.

    Keys seen before any header land in the empty-name section. Repeated
    headers merge into one section and repeated keys keep the last value.
    """
    sections: Dict[str, Dict[str, str]] = {}
    current = ""

    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if line_no == 1 and line.startswith(_BOM):
            line = line[len(_BOM):]
        line = line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue

        if line.startswith("["):
            end = line.find("]")
            if end < 0:
                raise ConfigParseError(source, line_no, raw.rstrip("\r\n"), "section header missing ']'")
            current = line[1:end].strip()
            sections.setdefault(current, {})
            continue

        pair = _split_pair(line)
        if pair is None:
            raise ConfigParseError(source, line_no, raw.rstrip("\r\n"), "expected 'key=value'")
        key, value = pair
        if not key:
            raise ConfigParseError(source, line_no, raw.rstrip("\r\n"), "empty key")
        sections.setdefault(current, {})[key] = value

    return MappingProxyType({name: MappingProxyType(entries) for name, entries in sections.items()})


def load(path: Union[str, Path]) -> ConfigMapping:
    """Load an INI file from ``path``.

    Raises ConfigNotFound when the file cannot be opened or decoded and
    ConfigParseError when a line is malformed.
    """
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as stream:
            text = stream.read()
    except FileNotFoundError:
        raise ConfigNotFound(config_path, "file does not exist") from None
    except IsADirectoryError:
        raise ConfigNotFound(config_path, "path is a directory") from None
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigNotFound(config_path, str(e)) from e

    mapping = parse_lines(text.splitlines(), source=str(config_path))
    logger.info(f"Loaded {len(mapping)} sections from {config_path}")
    return mapping
