"""DATE and DATE-TIME values, durations, and their text forms."""

from __future__ import annotations

import datetime as dt
import re
from functools import total_ordering

import pytz

from .helper import logger, num_to_digits
from .helper.diagnostics import UNRESOLVED_TIMEZONE
from .patterns import patterns
from .properties import unescape_text
from .timezones import ZoneIdentifier, localize_wall, normalize_wall_parts

date_re = re.compile(patterns["date"])
date_prefix_re = re.compile(patterns["date_prefix"])
date_time_re = re.compile(patterns["date_time"])
duration_part_re = re.compile(patterns["duration_part"])

DURATION_UNITS = {"W": "weeks", "D": "days", "H": "hours", "M": "minutes", "S": "seconds"}

zero_delta = dt.timedelta(0)
one_day = dt.timedelta(days=1)


@total_ordering
class TimeValue:
    """
    A point in time as read from a calendar.

    @ivar instant:
        Aware datetime in UTC.
    @ivar zone:
        ZoneIdentifier of the value, None for floating and date-only values.
    @ivar date_only:
        True for VALUE=DATE values. Their instant is local midnight, and the
        calendar day they were written with is kept separately.
    """

    __slots__ = ("instant", "zone", "date_only", "_tzinfo", "_day")

    def __init__(self, instant: dt.datetime, zone=None, date_only=False, tzinfo=None, day=None):
        if instant.tzinfo is None:
            raise ValueError("TimeValue needs an aware instant")
        self.instant = instant.astimezone(pytz.utc)
        self.zone = zone
        self.date_only = date_only
        self._tzinfo = tzinfo or pytz.utc
        self._day = day

    @classmethod
    def for_day(cls, day: dt.date, tzinfo) -> TimeValue:
        """Local midnight of day in tzinfo, marked as date-only."""
        instant = localize_wall(dt.datetime.combine(day, dt.time()), tzinfo)
        return cls(instant, None, True, tzinfo, day)

    @property
    def tzinfo(self):
        return self._tzinfo

    def local(self) -> dt.datetime:
        return self.instant.astimezone(self._tzinfo)

    def date(self) -> dt.date:
        if self.date_only and self._day is not None:
            return self._day
        return self.local().date()

    def date_key(self) -> str:
        return self.date().isoformat()

    def instant_key(self) -> str:
        return self.instant.strftime("%Y-%m-%dT%H:%M:%SZ")

    def shift(self, delta: dt.timedelta) -> TimeValue:
        """
        Move by delta. Date-only values moved by whole days stay date-only, so
        they keep local midnight across daylight saving changes.
        """
        if self.date_only and not (delta.seconds or delta.microseconds):
            return TimeValue.for_day(self.date() + dt.timedelta(days=delta.days), self._tzinfo)
        return TimeValue(self.instant + delta, self.zone, False, self._tzinfo)

    def isoformat(self) -> str:
        return self.date().isoformat() if self.date_only else self.local().isoformat()

    def __eq__(self, other):
        if not isinstance(other, TimeValue):
            return NotImplemented
        return self.instant == other.instant and self.date_only == other.date_only

    def __lt__(self, other):
        if not isinstance(other, TimeValue):
            return NotImplemented
        return self.instant < other.instant

    def __hash__(self):
        return hash((self.instant, self.date_only))

    def __repr__(self):
        zone = f" {self.zone.label}" if self.zone is not None else ""
        return f"<TimeValue {self.isoformat()}{zone}>"


# ----------------------------- Parsing functions ------------------------------
def fix_vendor_tzid(params: dict, value: str) -> tuple[dict, str]:
    """
    Reassemble "TZID=tzone://Microsoft/Custom:20240101T100000", which the
    line grammar splits at the first colon.
    """
    if str(params.get("TZID", "")) == "tzone" and ":" in value:
        prefix, value = value.split(":", 1)
        params = {**params, "TZID": f"tzone:{prefix}"}
    return params, value


def string_to_date(s: str) -> dt.date | None:
    match = date_prefix_re.match(s)
    if match is None:
        return None
    try:
        return dt.date(*map(int, match.groups()))
    except ValueError:
        return None


def parse_time_value(value: str, params: dict, resolver, stack_tzid=None, diagnostics=None, line_number=None):
    """
    Parse a DATE or DATE-TIME value.

    Returns a TimeValue, or the unescaped text when value is neither. Zoned
    values take TZID from params, else from the enclosing VTIMEZONE
    (stack_tzid), else they float in the resolver's local zone.
    """
    params, value = fix_vendor_tzid(params, value)
    text = value.strip()
    value_type = str(params.get("VALUE", "")).upper()

    if date_re.match(text) or value_type == "DATE":
        day = string_to_date(text)
        if day is None:
            return unescape_text(value)
        return TimeValue.for_day(day, resolver.local_tzinfo)

    match = date_time_re.match(text)
    if match is None:
        return unescape_text(value)
    year, month, day, hour, minute, second, utc = match.groups()
    try:
        wall = normalize_wall_parts(int(year), int(month), int(day), int(hour), int(minute), int(second))
    except ValueError:
        return unescape_text(value)

    if utc:
        return TimeValue(pytz.utc.localize(wall), ZoneIdentifier.utc(), False, pytz.utc)

    tzid = params.get("TZID", stack_tzid)
    if tzid is None or str(tzid) == "":
        tzinfo = resolver.local_tzinfo
        return TimeValue(localize_wall(wall, tzinfo), None, False, tzinfo)

    tzid = str(tzid)
    resolved = resolver.resolve(tzid)
    if resolved.is_resolved:
        zone = resolved.zone_identifier()
        tzinfo = resolver.tzinfo_for(zone)
    else:
        zone = ZoneIdentifier.unresolved(tzid)
        tzinfo = resolver.local_tzinfo
        if diagnostics is not None:
            diagnostics.warn(UNRESOLVED_TIMEZONE, f"unknown TZID {tzid!r}, using local time", line_number)
        else:
            logger.warning(f"unknown TZID {tzid!r}, using local time")
    return TimeValue(localize_wall(wall, tzinfo), zone, False, tzinfo)


def parse_duration(text: str) -> dt.timedelta | None:
    """
    Parse an RFC 5545 DURATION, or return None when it is malformed.

    >>> parse_duration("-P1DT2H")
    datetime.timedelta(days=-2, seconds=79200)
    >>> parse_duration("P") is None
    True
    """
    s = (text or "").strip().upper()
    sign = -1 if s.startswith("-") else 1
    s = s.lstrip("+-")
    if not s.startswith("P"):
        return None

    body = s[1:]
    if "T" in body:
        date_part, _, time_part = body.partition("T")
        if not time_part or "T" in time_part or re.search("[HMS]", date_part):
            return None
        body = date_part + time_part
    parts = duration_part_re.findall(body)
    if not parts or "".join(parts) != body:
        return None

    delta = zero_delta
    for part in parts:
        delta += dt.timedelta(**{DURATION_UNITS[part[-1]]: int(part[:-1])})
    return sign * delta


# ---------------------------- Formatting functions ----------------------------
def timedelta_to_string(delta: dt.timedelta) -> str:
    """
    Convert timedelta to an ical DURATION.
    """
    sign = -1 if delta < zero_delta else 1
    delta = abs(delta)
    days = delta.days
    hours = delta.seconds // 3600
    minutes = (delta.seconds % 3600) // 60
    seconds = delta.seconds % 60

    output = "-P" if sign == -1 else "P"
    if days:
        output += f"{days}D"
    if hours or minutes or seconds:
        output += "T"
    elif not days:  # Deal with zero duration
        output += "T0S"
    if hours:
        output += f"{hours}H"
    if minutes:
        output += f"{minutes}M"
    if seconds:
        output += f"{seconds}S"
    return output


def date_to_string(date: dt.date) -> str:
    return num_to_digits(date.year, 4) + num_to_digits(date.month, 2) + num_to_digits(date.day, 2)


def datetime_to_string(date_time: dt.datetime, convert_to_utc=False) -> str:
    """
    Ignore tzinfo unless convert_to_utc.  Output string.
    """
    if date_time.tzinfo and convert_to_utc:
        date_time = date_time.astimezone(pytz.utc)

    datestr = date_time.strftime("%Y%m%dT%H%M%S")
    if date_time.tzinfo is not None and date_time.utcoffset() == zero_delta and convert_to_utc:
        datestr += "Z"
    return datestr


def delta_to_offset(delta: dt.timedelta) -> str:
    abs_delta = abs(delta)
    hours = abs_delta.seconds // 3600
    minutes = (abs_delta.seconds // 60) % 60
    sign_string = "+" if abs_delta == delta else "-"
    return sign_string + num_to_digits(hours, 2) + num_to_digits(minutes, 2)


def time_value_to_string(value: TimeValue) -> str:
    """The iCalendar text of a TimeValue, in UTC for zoned values."""
    if value.date_only:
        return date_to_string(value.date())
    return datetime_to_string(value.instant, convert_to_utc=True)
