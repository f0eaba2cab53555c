"""Expansion of one component into the occurrences inside a time range."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

from .datetimes import TimeValue
from .exceptions import ExpansionRangeError, ExpansionTypeError
from .timezones import get_resolver, localize_wall

one_day = dt.timedelta(days=1)
zero_delta = dt.timedelta(0)


@dataclass(frozen=True)
class Occurrence:
    """
    One concrete instance of a component.

    @ivar component:
        The record the instance was built from: the override when one
        applied, the base component otherwise.
    """

    start: TimeValue
    end: TimeValue
    summary: str
    is_full_day: bool
    is_recurring: bool
    is_override: bool
    component: object


def to_time_value(value, resolver, name="value") -> TimeValue:
    """
    Coerce a range bound. Naive datetimes are local wall time, dates are
    local midnight.
    """
    if isinstance(value, TimeValue):
        return value
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            return TimeValue(value, None, False, value.tzinfo)
        tzinfo = resolver.local_tzinfo
        return TimeValue(localize_wall(value, tzinfo), None, False, tzinfo)
    if isinstance(value, dt.date):
        return TimeValue.for_day(value, resolver.local_tzinfo)
    raise ExpansionTypeError(f"{name} must be a datetime, date or TimeValue, got {type(value).__name__}")


def is_full_day(component) -> bool:
    start = component.start
    return component.datetype == "date" or (isinstance(start, TimeValue) and start.date_only)


def event_duration(component, full_day: bool) -> dt.timedelta | None:
    """The length of component, or None when it has no usable start and end."""
    start, end = component.start, component.end
    if not (isinstance(start, TimeValue) and isinstance(end, TimeValue)):
        return None
    if full_day and start.date_only and end.date_only:
        return dt.timedelta(days=(end.date() - start.date()).days)
    return end.instant - start.instant


def base_duration(component, full_day: bool) -> dt.timedelta:
    duration = event_duration(component, full_day)
    if duration is not None:
        return duration
    return one_day if full_day else zero_delta


def as_calendar_day(value: TimeValue) -> TimeValue:
    if value.date_only:
        return value
    return TimeValue.for_day(value.date(), value.tzinfo)


def in_range(occurrence: Occurrence, from_: TimeValue, to: TimeValue, expand_ongoing: bool) -> bool:
    if occurrence.is_full_day:
        # full-day instances compare by calendar day
        start, end = occurrence.start.date(), occurrence.end.date()
        low, high = from_.date(), to.date()
    else:
        start, end = occurrence.start.instant, occurrence.end.instant
        low, high = from_.instant, to.instant
    if expand_ongoing:
        return end >= low and start <= high
    return low <= start <= high


def _summary(*components) -> str:
    for component in components:
        summary = component.summary_text
        if summary:
            return summary
    return ""


def expand_single(component, from_, to, expand_ongoing=False) -> list[Occurrence]:
    full_day = is_full_day(component)
    start = component.start
    if not isinstance(start, TimeValue):
        return []
    if full_day:
        start = as_calendar_day(start)
    occurrence = Occurrence(
        start,
        start.shift(base_duration(component, full_day)),
        _summary(component),
        full_day,
        False,
        False,
        component,
    )
    return [occurrence] if in_range(occurrence, from_, to, expand_ongoing) else []


def expand_instance(date: TimeValue, component, duration, include_overrides, exclude_exdates) -> Occurrence | None:
    """
    Build the occurrence for one generated date, or None when it is
    excluded.
    """
    full_day = is_full_day(component)
    prefer_instant = not full_day

    if exclude_exdates and component.exceptions is not None:
        if component.exceptions.lookup(date, prefer_instant) is not None:
            return None

    record, override = component, False
    if include_overrides and component.overrides is not None:
        found = component.overrides.lookup(date, prefer_instant)
        if found is not None:
            record, override = found, True

    start = date
    if override and isinstance(record.start, TimeValue):
        start = record.start
    if full_day:
        start = as_calendar_day(start)

    own_duration = event_duration(record, full_day) if override else None
    end = start.shift(own_duration if own_duration is not None else duration)
    return Occurrence(start, end, _summary(record, component), full_day, True, override, record)


def expand(
    component,
    from_,
    to,
    include_overrides=True,
    exclude_exdates=True,
    expand_ongoing=False,
    resolver=None,
) -> list[Occurrence]:
    """
    Expand component into its occurrences between from_ and to, both
    inclusive.

    EXDATE entries are skipped and RECURRENCE-ID overrides replace the
    generated instance. With expand_ongoing, instances that started before
    from_ but are still running at from_ are included too.

    Date and naive bounds are read in resolver's local zone. Without
    resolver that is the guessed host zone; CalendarDocument.expand passes
    the resolver the document was parsed with.
    """
    resolver = resolver or get_resolver()
    from_ = to_time_value(from_, resolver, "from_")
    to = to_time_value(to, resolver, "to")
    if from_.instant > to.instant:
        raise ExpansionRangeError("from_ must not be after to")

    if component.rrule is None:
        return expand_single(component, from_, to, expand_ongoing)

    full_day = is_full_day(component)
    duration = base_duration(component, full_day)

    search_to = to
    if full_day and to.local().time() == dt.time():
        search_to = TimeValue(to.instant + one_day - dt.timedelta(seconds=1), None, False, to.tzinfo)
    search_from = TimeValue(from_.instant - duration, None, False, from_.tzinfo) if expand_ongoing else from_

    occurrences = []
    for date in component.rrule.between(search_from, search_to, inc=True):
        occurrence = expand_instance(date, component, duration, include_overrides, exclude_exdates)
        if occurrence is not None and in_range(occurrence, from_, to, expand_ongoing):
            occurrences.append(occurrence)
    return sorted(occurrences, key=lambda o: o.start.instant)
