"""
Recurrence rules: RRULE text plus a start value, normalized and evaluated
with dateutil.

dateutil iterates over naive wall-clock times in the start's zone, and each
result is converted back to an instant. A weekly 10:00 meeting therefore
stays at 10:00 across daylight saving changes.
"""

from __future__ import annotations

import datetime as dt
import re
from itertools import islice

import pytz
from dateutil import rrule

from .datetimes import (
    TimeValue,
    date_time_re,
    date_to_string,
    datetime_to_string,
    parse_time_value,
    string_to_date,
)
from .exceptions import RecurrenceError
from .helper import logger
from .helper.constants import FREQUENCIES, WEEKDAYS
from .timezones import ZoneIdentifier, localize_wall, minutes_to_etc_zone, normalize_wall_parts

RFC_RECUR = "RFC 5545 section 3.3.10"
RFC_DTSTART = "RFC 5545 section 3.8.2.4"

inline_dtstart_re = re.compile(r";?DTSTART(?:;TZID=([^:;]+))?[:=](\d{8}(?:T\d{6}Z?)?)", re.IGNORECASE)
byday_re = re.compile(r"^([+-]?\d{1,2})?(MO|TU|WE|TH|FR|SA|SU)$")

one_day = dt.timedelta(days=1)
end_of_day = dt.time(23, 59, 59)

INT_LIST_PARTS = ("BYMONTH", "BYMONTHDAY", "BYYEARDAY", "BYWEEKNO", "BYHOUR", "BYMINUTE", "BYSECOND", "BYSETPOS")


def _wall(start: TimeValue) -> dt.datetime:
    if start.date_only:
        return dt.datetime.combine(start.date(), dt.time())
    return start.local().replace(tzinfo=None)


def _to_instant(value) -> dt.datetime:
    if isinstance(value, TimeValue):
        return value.instant
    if isinstance(value, dt.datetime) and value.tzinfo is not None:
        return value.astimezone(pytz.utc)
    raise TypeError(f"expected a TimeValue or an aware datetime, got {value!r}")


def split_rule(body: str) -> list[tuple[str, str]]:
    """FREQ=WEEKLY;BYDAY=TU -> [("FREQ", "WEEKLY"), ("BYDAY", "TU")]"""
    parts = []
    for part in body.split(";"):
        name, sep, value = part.partition("=")
        if sep and name.strip():
            parts.append((name.strip().upper(), value.strip()))
    return parts


class RecurrenceRule:
    """
    An RRULE bound to its start.

    @ivar start:
        The TimeValue the rule counts from.
    @ivar options:
        The decoded rule parts, see parse_options.
    """

    def __init__(self, parts: list[tuple[str, str]], start: TimeValue, until: TimeValue | None, resolver):
        self.start = start
        self.until = until
        self._parts = parts
        self._resolver = resolver
        self._tzinfo = start.tzinfo
        self.options = self.parse_options(parts, start, until)
        try:
            self._rule = rrule.rrulestr(f"RRULE:{self._engine_body()}", dtstart=_wall(start))
        except (ValueError, TypeError) as e:
            raise RecurrenceError(f"invalid recurrence rule {self.rule_body!r}: {e}", rfc_rule=RFC_RECUR) from e

    # -------------------------------------------------------------- text forms
    @property
    def rule_body(self) -> str:
        return ";".join(f"{name}={self._until_text() if name == 'UNTIL' else value}" for name, value in self._parts)

    def _until_text(self) -> str:
        if self.until.date_only:
            return date_to_string(self.until.date())
        return datetime_to_string(self.until.instant, convert_to_utc=True)

    def _engine_body(self) -> str:
        parts = []
        for name, value in self._parts:
            if name == "UNTIL":
                if self.until.date_only:
                    value = date_to_string(self.until.date())
                else:
                    value = self.until.instant.astimezone(self._tzinfo).strftime("%Y%m%dT%H%M%S")
            parts.append(f"{name}={value}")
        return ";".join(parts)

    def dtstart_line(self) -> str:
        start = self.start
        if start.date_only:
            return f"DTSTART;VALUE=DATE:{date_to_string(start.date())}"
        zone = start.zone
        if zone is not None and zone.is_utc:
            return f"DTSTART:{datetime_to_string(start.instant, convert_to_utc=True)}"

        wall = self._resolver.format_instant_as_local_wall_time(start.instant, self._tzinfo)
        label = None
        if zone is not None and zone.kind == "iana":
            label = zone.name
        elif zone is not None and zone.kind == "offset":
            label = minutes_to_etc_zone(zone.offset_minutes)
        if label:
            return f"DTSTART;TZID={label}:{wall}"
        return f"DTSTART:{wall}"

    def __str__(self):
        return f"{self.dtstart_line()}\nRRULE:{self.rule_body}"

    def __repr__(self):
        return f"<RecurrenceRule {self.rule_body}>"

    # -------------------------------------------------------------- options
    @staticmethod
    def parse_options(parts, start, until) -> dict:
        values = dict(parts)
        freq = values.get("FREQ", "").upper()
        if freq not in FREQUENCIES:
            raise RecurrenceError(f"unknown FREQ {freq!r}", rfc_rule=RFC_RECUR)

        def int_value(name, default=None):
            if name not in values:
                return default
            try:
                return int(values[name])
            except ValueError as e:
                raise RecurrenceError(f"{name} must be an integer, got {values[name]!r}", rfc_rule=RFC_RECUR) from e

        def int_list(name):
            try:
                return [int(v) for v in values[name].split(",") if v] if name in values else []
            except ValueError as e:
                raise RecurrenceError(f"{name} must list integers, got {values[name]!r}", rfc_rule=RFC_RECUR) from e

        options = {
            "freq": freq,
            "interval": int_value("INTERVAL", 1),
            "count": int_value("COUNT"),
            "until": until,
            "byday": [v.upper() for v in values.get("BYDAY", "").split(",") if v],
            "wkst": values.get("WKST", "").upper() or None,
            "dtstart": start,
        }
        for name in INT_LIST_PARTS:
            options[name.lower()] = int_list(name)
        return options

    # -------------------------------------------------------------- evaluation
    def _from_wall(self, wall: dt.datetime) -> TimeValue:
        if self.start.date_only:
            return TimeValue.for_day(wall.date(), self._tzinfo)
        return TimeValue(localize_wall(wall, self._tzinfo), self.start.zone, False, self._tzinfo)

    def _wall_of(self, instant: dt.datetime) -> dt.datetime:
        return instant.astimezone(self._tzinfo).replace(tzinfo=None)

    @property
    def is_bounded(self) -> bool:
        return self.options["count"] is not None or self.until is not None

    def __iter__(self):
        return (self._from_wall(wall) for wall in self._rule)

    def all(self, limit: int | None = None) -> list[TimeValue]:
        """
        Every occurrence. Rules without COUNT or UNTIL need a limit.
        """
        if limit is None and not self.is_bounded:
            raise RecurrenceError("rule has neither COUNT nor UNTIL, pass a limit", rfc_rule=RFC_RECUR)
        return list(islice(iter(self), limit))

    def between(self, after, before, inc=False) -> list[TimeValue]:
        """
        Occurrences strictly between two instants, or including them when
        inc is True.
        """
        low, high = _to_instant(after), _to_instant(before)
        walls = self._rule.between(self._wall_of(low) - one_day, self._wall_of(high) + one_day, inc=True)
        out = []
        for wall in walls:
            value = self._from_wall(wall)
            if (low <= value.instant <= high) if inc else (low < value.instant < high):
                out.append(value)
        return out

    def before(self, when, inc=False) -> TimeValue | None:
        instant = _to_instant(when)
        wall = self._rule.before(self._wall_of(instant) + one_day, inc=True)
        while wall is not None:
            value = self._from_wall(wall)
            if value.instant < instant or (inc and value.instant == instant):
                return value
            wall = self._rule.before(wall)
        return None

    def after(self, when, inc=False) -> TimeValue | None:
        instant = _to_instant(when)
        for wall in self._rule.xafter(self._wall_of(instant) - one_day, inc=True):
            value = self._from_wall(wall)
            if value.instant > instant or (inc and value.instant == instant):
                return value
        return None

    def describe(self, locale: str = "en") -> str:
        return describe(self, locale)


# ------------------------------- Building -------------------------------------
def _normalize_until(raw: str, start: TimeValue, resolver) -> TimeValue:
    raw = raw.strip().upper()
    day = string_to_date(raw)
    if day is None:
        raise RecurrenceError(f"UNTIL {raw!r} is not a date", rfc_rule=RFC_RECUR)
    if start.date_only:
        return TimeValue.for_day(day, start.tzinfo)

    if len(raw) == 8:
        wall = dt.datetime.combine(day, end_of_day)
        instant = resolver.parse_local_time_as_instant(wall, start.tzinfo)
    else:
        match = date_time_re.match(raw)
        if match is None:
            raise RecurrenceError(f"UNTIL {raw!r} is not a date", rfc_rule=RFC_RECUR)
        year, month, day_, hour, minute, second, utc = match.groups()
        wall = normalize_wall_parts(int(year), int(month), int(day_), int(hour), int(minute), int(second))
        if utc:
            instant = pytz.utc.localize(wall)
        else:
            instant = resolver.parse_local_time_as_instant(wall, start.tzinfo)
    return TimeValue(instant, ZoneIdentifier.utc(), False, pytz.utc)


def build_rule(rrule_text: str, start, resolver) -> RecurrenceRule:
    """
    Build a RecurrenceRule from RRULE text and the component's start.

    UNTIL is brought in line with the start: date-only for date-only starts,
    a UTC instant otherwise. A date-only UNTIL on a timed start means the end
    of that day in the start's zone.
    """
    text = str(rrule_text).replace("\\", "").strip()
    if text.upper().startswith("RRULE:"):
        text = text[6:]
    position = text.upper().rfind("FREQ=")
    if position < 0:
        raise RecurrenceError(f"recurrence rule {rrule_text!r} has no FREQ", rfc_rule=RFC_RECUR)
    body = text[position:]

    inline = inline_dtstart_re.search(body)
    if inline is not None:
        tzid, value = inline.groups()
        body = body[: inline.start()] + body[inline.end() :]
        start = parse_time_value(value, {"TZID": tzid} if tzid else {}, resolver)
        logger.debug(f"Using DTSTART {value} given inside the rule")

    if not isinstance(start, TimeValue):
        raise RecurrenceError(f"recurrence needs a DTSTART date, got {start!r}", rfc_rule=RFC_DTSTART)

    parts = [(name, value.upper() if name in ("FREQ", "BYDAY", "WKST") else value) for name, value in split_rule(body)]
    values = dict(parts)
    until = _normalize_until(values["UNTIL"], start, resolver) if "UNTIL" in values else None
    return RecurrenceRule(parts, start, until, resolver)


# ------------------------------- Describing -----------------------------------
LOCALES = {
    "en": {
        "units": {
            "YEARLY": ("year", "years"),
            "MONTHLY": ("month", "months"),
            "WEEKLY": ("week", "weeks"),
            "DAILY": ("day", "days"),
            "HOURLY": ("hour", "hours"),
            "MINUTELY": ("minute", "minutes"),
            "SECONDLY": ("second", "seconds"),
        },
        "every": lambda unit: f"every {unit}",
        "every_n": lambda n, units: f"every {n} {units}",
        "days": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
        "months": (
            "January",
            "February",
            "March",
            "April",
            "May",
            "June",
            "July",
            "August",
            "September",
            "October",
            "November",
            "December",
        ),
        "ordinals": {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth", -1: "last"},
        "on": " on ",
        "the": "the ",
        "in": " in ",
        "monthday": lambda days: f" on day {days}",
        "count": lambda n: f" for {n} {'time' if n == 1 else 'times'}",
        "until": lambda d, months: f" until {months[d.month - 1]} {d.day}, {d.year}",
        "and": " and ",
    },
    "de": {
        "units": {
            "YEARLY": ("jedes Jahr", "Jahre"),
            "MONTHLY": ("jeden Monat", "Monate"),
            "WEEKLY": ("jede Woche", "Wochen"),
            "DAILY": ("jeden Tag", "Tage"),
            "HOURLY": ("jede Stunde", "Stunden"),
            "MINUTELY": ("jede Minute", "Minuten"),
            "SECONDLY": ("jede Sekunde", "Sekunden"),
        },
        "every": lambda unit: unit,
        "every_n": lambda n, units: f"alle {n} {units}",
        "days": ("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"),
        "months": (
            "Januar",
            "Februar",
            "März",
            "April",
            "Mai",
            "Juni",
            "Juli",
            "August",
            "September",
            "Oktober",
            "November",
            "Dezember",
        ),
        "ordinals": {1: "ersten", 2: "zweiten", 3: "dritten", 4: "vierten", 5: "fünften", -1: "letzten"},
        "on": " am ",
        "the": "",
        "in": " im ",
        "monthday": lambda days: f" am {days}. Tag des Monats",
        "count": lambda n: f", {n} Mal",
        "until": lambda d, months: f" bis {d.day}. {months[d.month - 1]} {d.year}",
        "and": " und ",
    },
}


def _join(items, words) -> str:
    items = list(items)
    if len(items) < 2:
        return "".join(items)
    return ", ".join(items[:-1]) + words["and"] + items[-1]


def describe(rule: RecurrenceRule, locale: str = "en") -> str:
    """
    A short human readable text for rule, in English or German.
    """
    words = LOCALES.get((locale or "en").split("-")[0].split("_")[0].lower())
    if words is None:
        logger.warning(f"No rule texts for locale {locale!r}, using English")
        words = LOCALES["en"]

    options = rule.options
    single, plural = words["units"][options["freq"]]
    interval = options["interval"]
    text = words["every"](single) if interval == 1 else words["every_n"](interval, plural)

    if options["byday"]:
        names = []
        for entry in options["byday"]:
            match = byday_re.match(entry)
            if match is None:
                continue
            ordinal, day = match.groups()
            name = words["days"][WEEKDAYS.index(day)]
            if ordinal:
                number = int(ordinal)
                name = f"{words['the']}{words['ordinals'].get(number, f'{number}.')} {name}"
            names.append(name)
        text += words["on"] + _join(names, words)
    if options["bymonthday"]:
        text += words["monthday"](_join(map(str, options["bymonthday"]), words))
    if options["bymonth"]:
        text += words["in"] + _join((words["months"][m - 1] for m in options["bymonth"] if 1 <= m <= 12), words)
    if options["count"] is not None:
        text += words["count"](options["count"])
    if rule.until is not None:
        until = rule.until.date() if rule.until.date_only else rule.until.instant.astimezone(rule.start.tzinfo)
        text += words["until"](until, words["months"])
    return text
