"""A simple "key = value" configuration reader."""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, TypeVar, Union

_T = TypeVar("_T")

_INT_PREFIX = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)", re.IGNORECASE
)


def parse_key_value(line: str) -> Optional[tuple[str, str]]:
    """Split "key = value" into stripped parts.

    Returns None unless the line holds exactly one "=" and both parts are
    non-empty after stripping.
    """
    if line.count("=") != 1:
        return None
    key, value = (part.strip() for part in line.split("="))
    if not key or not value:
        return None
    return key, value


def _convert_prefix(text: str, convert: Callable[[str], _T]) -> Optional[_T]:
    """Convert the leading number of text, as a stream extraction would."""
    pattern = {int: _INT_PREFIX, float: _FLOAT_PREFIX}.get(convert)
    try:
        if pattern is None:
            return convert(text)
        match = pattern.match(text.lstrip())
        if match is None:
            return None
        return convert(match.group(0))
    except ValueError:
        return None


class ConfigParser:
    """Holds key/value pairs read from configuration text.

    Empty lines, lines starting with "#" and malformed lines are ignored.
    A key that appears again replaces the earlier value.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def populate(self, stream: Union[str, Iterable[str]]) -> None:
        """Read lines from a text stream, an iterable of lines or a string."""
        lines = stream.splitlines() if isinstance(stream, str) else stream
        for raw in lines:
            line = raw.rstrip("\r\n")
            if not line or line.startswith("#"):
                continue
            pair = parse_key_value(line)
            if pair is not None:
                key, value = pair
                self._values[key] = value

    def parse(self, key: str, convert: Callable[[str], _T] = str) -> Optional[_T]:
        """Return the value for key, converted, or None if absent or not convertible.

        For int and float, the leading number of the value is used.
        """
        value = self._values.get(key)
        if value is None:
            return None
        if convert is str:
            return value
        return _convert_prefix(value, convert)

    def __contains__(self, key: object) -> bool:
        return key in self._values