"""Commit identities."""

import re
import time
from dataclasses import dataclass
from typing import Optional


_IDENTITY_RE = re.compile(r'^\s*(?P<name>.*?)\s*<(?P<email>[^<>]*)>\s*$')


def format_timezone(offset_seconds: int) -> str:
    """
    Format a UTC offset as ``+HHMM`` / ``-HHMM``.

    Args:
        offset_seconds: Seconds east of UTC

    Returns:
        str: Offset text used in author and committer lines
    """
    sign = '-' if offset_seconds < 0 else '+'
    minutes = abs(offset_seconds) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def local_timezone(timestamp: Optional[int] = None) -> str:
    """UTC offset of the local zone at ``timestamp`` (defaults to now)."""
    if timestamp is None:
        timestamp = int(time.time())
    return format_timezone(time.localtime(timestamp).tm_gmtoff)


@dataclass(frozen=True)
class Identity:
    """Name and email of the person making a commit."""
    name: str
    email: str

    @classmethod
    def from_string(cls, text: str) -> 'Identity':
        """
        Parse ``"Name <email>"``.

        Raises:
            ValueError: If the text has no ``<email>`` part
        """
        match = _IDENTITY_RE.match(text)
        if not match:
            raise ValueError(f"Invalid identity (expected 'Name <email>'): {text!r}")
        return cls(match.group('name'), match.group('email'))

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
