from __future__ import annotations

import uuid

from .constants import Character as Char


def new_uid() -> str:
    return str(uuid.uuid4())


def strip_quotes(s: str) -> str:
    """Remove one layer of surrounding double quotes."""
    if len(s) >= 2 and s[0] == Char.DQUOTE and s[-1] == Char.DQUOTE:
        return s[1:-1]
    return s


def split_list(value: str, sep: str = ",") -> list[str]:
    """Split a comma list, trimming entries and dropping empty ones."""
    return [part.strip() for part in value.split(sep) if part.strip()] if value else []
