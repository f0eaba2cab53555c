"""
Timezone resolution: turns the TZID labels found in the wild (IANA names,
Windows zone IDs, Outlook display labels, bare offsets and vendor
placeholders) into zones that date arithmetic can use.
"""

from __future__ import annotations

import datetime as dt
import os
import re
from dataclasses import dataclass
from functools import lru_cache

import pytz
from dateutil import tz

from .helper import logger, num_to_digits, strip_quotes
from .helper.constants import UTC_ALIASES, UTC_ZONE, VENDOR_PLACEHOLDERS, VENDOR_PREFIXES
from .patterns import patterns
from .windows_zones import DEFAULT_ALIAS_TABLE, LegacyAliasTable

offset_label_re = re.compile(patterns["offset_label"])
embedded_offset_re = re.compile(patterns["embedded_offset"])
offset_prefix_re = re.compile(patterns["offset_prefix"], re.IGNORECASE)

WALL_FORMAT = "%Y%m%dT%H%M%S"


# ------------------------------- Offset helpers -------------------------------
def offset_label_to_minutes(label: str) -> int | None:
    """
    Parse "+05:30", "-0400", "UTC-4" or "(UTC+02:00) ..." into signed minutes.

    >>> offset_label_to_minutes("(UTC+05:30) Chennai")
    330
    >>> offset_label_to_minutes("UTC-4")
    -240
    """
    text = label.strip()
    if text.startswith("("):
        text = text[1:].split(")")[0].strip()
    stripped = offset_prefix_re.sub("", text)
    if not stripped:
        # a bare "UTC" or "(GMT)"
        return 0 if stripped != text else None

    match = offset_label_re.match(stripped)
    if match is None:
        return None
    sign, hours, minutes = match.groups()
    hours, minutes = int(hours), int(minutes or 0)
    if hours > 23 or minutes > 59:
        return None
    total = hours * 60 + minutes
    return -total if sign == "-" else total


def minutes_to_offset(minutes: int) -> str:
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{num_to_digits(hours, 2)}:{num_to_digits(minutes, 2)}"


def minutes_to_etc_zone(minutes: int) -> str | None:
    """
    The Etc/GMT zone for a whole-hour offset. Etc names invert the sign, so
    UTC+2 is Etc/GMT-2.
    """
    if minutes == 0:
        return "Etc/GMT"
    if minutes % 60:
        return None
    hours = minutes // 60
    if not -12 <= hours <= 14:
        return None
    return f"Etc/GMT{'-' if hours > 0 else '+'}{abs(hours)}"


def is_utc_zone(name: str | None) -> bool:
    return bool(name) and name.strip() in UTC_ALIASES


def normalize_wall_parts(year, month, day, hour=0, minute=0, second=0) -> dt.datetime:
    """
    Build a naive wall time, rolling hour 24 over to midnight of the next day
    and clamping leap seconds.
    """
    rollover = hour == 24
    wall = dt.datetime(year, month, day, 0 if rollover else hour, minute, min(second, 59))
    return wall + dt.timedelta(days=1) if rollover else wall


def localize_wall(wall: dt.datetime, tzinfo: dt.tzinfo) -> dt.datetime:
    """
    Attach tzinfo to a naive wall time.

    Times skipped by a spring-forward transition keep the pre-transition
    offset, which moves them forward on the clock. Times repeated by a
    fall-back transition take the first (daylight) occurrence.
    """
    if not hasattr(tzinfo, "localize"):
        return wall.replace(tzinfo=tzinfo)
    try:
        return tzinfo.localize(wall, is_dst=None)
    except pytz.AmbiguousTimeError:
        return tzinfo.localize(wall, is_dst=True)
    except pytz.NonExistentTimeError:
        return tzinfo.normalize(tzinfo.localize(wall, is_dst=False))


# ------------------------------- Identifiers ----------------------------------
@dataclass(frozen=True)
class ZoneIdentifier:
    """
    A zone tag carried by parsed values.

    @ivar kind:
        "iana", "offset" or "unresolved".
    @ivar name:
        The IANA name, or the original label when unresolved.
    @ivar offset_minutes:
        Signed minutes east of UTC for fixed offsets.
    """

    kind: str
    name: str | None = None
    offset_minutes: int | None = None

    @classmethod
    def iana(cls, name: str) -> ZoneIdentifier:
        return cls("iana", UTC_ZONE if is_utc_zone(name) else name)

    @classmethod
    def offset(cls, minutes: int) -> ZoneIdentifier:
        return cls("offset", offset_minutes=minutes)

    @classmethod
    def unresolved(cls, label: str) -> ZoneIdentifier:
        return cls("unresolved", label)

    @classmethod
    def utc(cls) -> ZoneIdentifier:
        return cls("iana", UTC_ZONE)

    @property
    def label(self) -> str:
        if self.kind == "offset":
            return minutes_to_offset(self.offset_minutes)
        return self.name

    @property
    def is_utc(self) -> bool:
        if self.kind == "offset":
            return self.offset_minutes == 0
        return self.kind == "iana" and is_utc_zone(self.name)

    def __str__(self):
        return self.label


@dataclass(frozen=True)
class ResolvedZone:
    """Outcome of resolving one TZID label."""

    original: str
    iana: str | None = None
    offset_minutes: int | None = None
    etc_label: str | None = None

    @property
    def offset(self) -> str | None:
        return None if self.offset_minutes is None else minutes_to_offset(self.offset_minutes)

    @property
    def is_resolved(self) -> bool:
        return self.iana is not None or self.offset_minutes is not None

    def zone_identifier(self) -> ZoneIdentifier:
        if self.iana is not None:
            return ZoneIdentifier.iana(self.iana)
        if self.offset_minutes is not None:
            return ZoneIdentifier.offset(self.offset_minutes)
        return ZoneIdentifier.unresolved(self.original)


# ------------------------------- Database -------------------------------------
@lru_cache(256)
def _pytz_zone(name: str):
    try:
        return pytz.timezone(name)
    except (pytz.UnknownTimeZoneError, ValueError):
        return None


class TimezoneDatabase:
    """
    The IANA database, as seen by the resolver. Backed by pytz.
    """

    def get_zone(self, name: str):
        if not name:
            return None
        if is_utc_zone(name):
            return pytz.utc
        return _pytz_zone(name)

    def is_valid(self, name: str | None) -> bool:
        return bool(name) and self.get_zone(name) is not None

    def zone_names(self) -> frozenset:
        return frozenset(pytz.all_timezones_set)

    def local_to_instant(self, wall: dt.datetime, tzinfo) -> dt.datetime:
        return localize_wall(wall, tzinfo).astimezone(pytz.utc)

    def instant_to_wall(self, instant: dt.datetime, tzinfo) -> dt.datetime:
        return instant.astimezone(tzinfo).replace(tzinfo=None)

    def guess_host_local_zone(self, environ=None) -> str | None:
        """
        Guess the IANA name of the machine's zone: TZ, /etc/timezone, the
        /etc/localtime symlink, then the abbreviation dateutil reports.
        """
        environ = os.environ if environ is None else environ
        candidates = [environ.get("TZ", "").lstrip(":")]
        try:
            with open("/etc/timezone", encoding="utf-8") as f:
                candidates.append(f.read().strip())
        except OSError:
            pass
        localtime = os.path.realpath("/etc/localtime")
        if "zoneinfo/" in localtime:
            candidates.append(localtime.split("zoneinfo/", 1)[1])
        candidates.append(tz.tzlocal().tzname(dt.datetime.now()))

        for name in candidates:
            if self.is_valid(name):
                return name
        return None


# ------------------------------- Resolver -------------------------------------
class TimezoneResolver:
    """
    Map TZID labels to zones.

    Resolution order is exact IANA name, legacy alias, numeric offset, and
    finally unresolved. Nothing here raises on a bad label: the caller gets
    an unresolved ResolvedZone and decides what to report.

    @ivar alias_table:
        The LegacyAliasTable consulted for Windows names and display labels.
    @ivar database:
        The TimezoneDatabase used for validation and conversion.
    """

    def __init__(
        self,
        alias_table: LegacyAliasTable | None = None,
        database: TimezoneDatabase | None = None,
        local_zone: str | None = None,
    ):
        self.alias_table = DEFAULT_ALIAS_TABLE if alias_table is None else alias_table
        self.database = TimezoneDatabase() if database is None else database
        self._local_name = local_zone
        self._local_zone = self._pick_local_zone(local_zone)
        self._cache = {}

    def __repr__(self):
        return f"<TimezoneResolver local={self._local_zone.label}>"

    # ---------------------------------------------------------------- local zone
    def _pick_local_zone(self, name: str | None) -> ZoneIdentifier:
        if name:
            name = self.alias_table.links.get(name, name)
            if self.database.is_valid(name):
                return ZoneIdentifier.iana(name)
            minutes = offset_label_to_minutes(name)
            if minutes is not None:
                return ZoneIdentifier.offset(minutes)
            logger.warning(f"Unknown local zone {name!r}, guessing the host zone")
        return self.guess_host_local_zone()

    @property
    def local_zone(self) -> ZoneIdentifier:
        return self._local_zone

    @property
    def local_tzinfo(self):
        return self.tzinfo_for(self._local_zone)

    def guess_host_local_zone(self) -> ZoneIdentifier:
        name = self.database.guess_host_local_zone()
        if name:
            return ZoneIdentifier.iana(name)
        offset = tz.tzlocal().utcoffset(dt.datetime.now())
        minutes = int(offset.total_seconds() // 60) if offset else 0
        return ZoneIdentifier.offset(minutes) if minutes else ZoneIdentifier.utc()

    # ---------------------------------------------------------------- resolving
    def is_valid_zone_identifier(self, name: str) -> bool:
        return self.database.is_valid(self.alias_table.links.get(name, name))

    def map_legacy_label(self, label: str) -> str | None:
        mapped = self.alias_table.lookup(label)
        if mapped is None:
            return None
        mapped = self.alias_table.links.get(mapped, mapped)
        return mapped if self.database.is_valid(mapped) else None

    def resolve(self, identifier: str) -> ResolvedZone:
        identifier = "" if identifier is None else str(identifier)
        try:
            return self._cache[identifier]
        except KeyError:
            resolved = self._cache[identifier] = self._resolve(identifier)
            return resolved

    def _resolve(self, original: str) -> ResolvedZone:
        label = strip_quotes(original.strip())
        if not label:
            return ResolvedZone(original)

        if label in VENDOR_PLACEHOLDERS or label.startswith(VENDOR_PREFIXES):
            return self._from_identifier(original, self._local_zone)

        name = self.alias_table.links.get(label, label)
        if self.database.is_valid(name):
            return ResolvedZone(original, iana=UTC_ZONE if is_utc_zone(name) else name)

        if " " in label or "," in label:
            mapped = self.map_legacy_label(label)
            if mapped is not None:
                return ResolvedZone(original, iana=mapped)

        if label.startswith("("):
            match = embedded_offset_re.search(label)
            minutes = offset_label_to_minutes(match.group(1)) if match else offset_label_to_minutes(label)
        else:
            minutes = offset_label_to_minutes(label)
        if minutes is not None:
            return ResolvedZone(original, offset_minutes=minutes, etc_label=minutes_to_etc_zone(minutes))

        logger.debug(f"Could not resolve timezone {original!r}")
        return ResolvedZone(original)

    @staticmethod
    def _from_identifier(original: str, zone: ZoneIdentifier) -> ResolvedZone:
        if zone.kind == "offset":
            minutes = zone.offset_minutes
            return ResolvedZone(original, offset_minutes=minutes, etc_label=minutes_to_etc_zone(minutes))
        return ResolvedZone(original, iana=zone.name)

    def link_alias(self, alias: str, target: str) -> TimezoneResolver:
        """A new resolver whose alias table also maps alias to target."""
        return TimezoneResolver(self.alias_table.link(alias, target), self.database, self._local_name)

    # ---------------------------------------------------------------- conversion
    def tzinfo_for(self, zone):
        """
        A tzinfo for a ZoneIdentifier, ResolvedZone, label or tzinfo. Unknown
        and unresolved zones fall back to the local zone.
        """
        if zone is None:
            zone = self._local_zone
        if isinstance(zone, dt.tzinfo):
            return zone
        if isinstance(zone, str):
            zone = self.resolve(zone)
        if isinstance(zone, ResolvedZone):
            zone = zone.zone_identifier()

        if zone.kind == "offset":
            return pytz.utc if zone.offset_minutes == 0 else pytz.FixedOffset(zone.offset_minutes)
        if zone.kind == "iana":
            tzinfo = self.database.get_zone(zone.name)
            if tzinfo is not None:
                return tzinfo
        if zone is self._local_zone:
            return pytz.utc
        return self.tzinfo_for(self._local_zone)

    def parse_local_time_as_instant(self, wall, zone=None) -> dt.datetime:
        """
        The UTC instant of a wall time in zone.

        >>> r = TimezoneResolver(local_zone="Europe/Berlin")
        >>> r.parse_local_time_as_instant(dt.datetime(2024, 3, 31, 2, 30), "Europe/Berlin").isoformat()
        '2024-03-31T01:30:00+00:00'
        """
        if isinstance(wall, str):
            wall = dt.datetime.strptime(wall[:15], WALL_FORMAT)
        if wall.tzinfo is not None:
            return wall.astimezone(pytz.utc)
        return self.database.local_to_instant(wall, self.tzinfo_for(zone))

    def format_instant_as_local_wall_time(self, instant: dt.datetime, zone=None) -> str:
        wall = self.database.instant_to_wall(instant, self.tzinfo_for(zone))
        wall = normalize_wall_parts(wall.year, wall.month, wall.day, wall.hour, wall.minute, wall.second)
        return wall.strftime(WALL_FORMAT)


@lru_cache(16)
def get_resolver(alias_table: LegacyAliasTable | None = None, local_zone: str | None = None) -> TimezoneResolver:
    """Shared resolver per configuration, so its cache outlives one parse."""
    return TimezoneResolver(alias_table=alias_table, local_zone=local_zone)
