from __future__ import annotations

from functools import lru_cache


def to_unicode(value: str | bytes):
    """Converts a string argument to a unicode string.

    If the argument is already a unicode string, it is returned
    unchanged.  Otherwise it must be a byte string and is decoded as utf8.
    Byte order marks left by Windows editors are dropped.
    """
    value = value.decode("utf-8-sig") if isinstance(value, bytes) else value
    return value.lstrip("\ufeff")


@lru_cache(64)
def to_vname(name: str) -> str:
    """
    Turn a Python attribute name into an iCalendar style property key.
    """
    return name.replace("_", "-").lower()


def num_to_digits(num: int, places: int) -> str:
    """
    Helper, for converting numbers to textual digits.
    """
    return str(num).rjust(places, "0")[-places:]
