"""Print a calendar file as JSON, or the occurrences of its events in a range."""

import json
import sys
from argparse import ArgumentParser

from dateutil import parser as date_parser

import icalx as ix
from icalx.components import Component, DualKeyIndex, FreeBusyPeriod, Geo
from icalx.datetimes import TimeValue, delta_to_offset, time_value_to_string, timedelta_to_string
from icalx.exceptions import IcalError
from icalx.expander import event_duration, is_full_day
from icalx.helper import ParserConfig
from icalx.helper.constants import RECURRING_TYPES
from icalx.properties import ParameterizedValue
from icalx.recurrence import RecurrenceRule


def to_json(value):
    """Turn parsed values into plain JSON data."""
    if isinstance(value, TimeValue):
        return value.isoformat()
    if isinstance(value, ParameterizedValue):
        return {"params": to_json(value.params), "value": value.value}
    if isinstance(value, RecurrenceRule):
        return str(value)
    if isinstance(value, Geo):
        return {"lat": value.lat, "lon": value.lon}
    if isinstance(value, FreeBusyPeriod):
        return {"type": value.type, "start": to_json(value.start), "end": to_json(value.end)}
    if isinstance(value, DualKeyIndex):
        return {key: to_json(value[key]) for key in sorted(value.keys())}
    if isinstance(value, Component):
        return component_to_json(value)
    if isinstance(value, dict):
        return {str(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def component_to_json(component: Component) -> dict:
    out = {"type": component.name}
    for attr in (
        "uid",
        "sequence",
        "method",
        "datetype",
        "start",
        "end",
        "due",
        "completed",
        "dtstamp",
        "created",
        "last_modified",
        "recurrence_id",
        "rrule",
        "exceptions",
        "overrides",
        "geo",
    ):
        value = getattr(component, attr)
        if value is not None:
            out[attr] = to_json(value)
    duration = event_duration(component, is_full_day(component))
    if duration is not None:
        out["duration"] = timedelta_to_string(duration)
    for attr in ("categories", "freebusy", "alarms", "children"):
        value = getattr(component, attr)
        if value:
            out[attr] = to_json(value)
    out.update(to_json(component.properties))
    if component.custom:
        out["custom"] = to_json(component.custom)
    return out


def document_to_json(document) -> dict:
    meta = document.calendar_metadata
    return {
        "calendar": {
            "prodid": meta.prodid,
            "version": meta.version,
            "calscale": meta.calscale,
            "method": meta.method,
            "name": meta.name,
            "description": meta.description,
            "timezone": meta.timezone,
            "extra": to_json(meta.extra),
        },
        "components": {key: component_to_json(component) for key, component in document.items()},
        "diagnostics": [str(d) for d in document.diagnostics],
    }


def expand_document(document, from_, to) -> list:
    occurrences = []
    for key, component in document.items():
        if component.name not in RECURRING_TYPES or not isinstance(component.start, TimeValue):
            continue
        for occurrence in document.expand(key, from_, to):
            occurrences.append((key, occurrence))
    occurrences.sort(key=lambda item: item[1].start.instant)
    return [occurrence_to_json(key, o) for key, o in occurrences]


def occurrence_to_json(key: str, occurrence) -> dict:
    start, end = occurrence.start, occurrence.end
    if occurrence.is_full_day:
        duration = end.date() - start.date()
    else:
        duration = end.instant - start.instant
    out = {
        "id": key,
        "summary": occurrence.summary,
        "start": to_json(start),
        "end": to_json(end),
        "ical_start": time_value_to_string(start),
        "duration": timedelta_to_string(duration),
        "full_day": occurrence.is_full_day,
        "recurring": occurrence.is_recurring,
        "override": occurrence.is_override,
    }
    if not occurrence.is_full_day:
        out["utc_offset"] = delta_to_offset(start.local().utcoffset())
    return out


def main(argv=None):
    args = get_arguments(argv)
    config = ParserConfig.from_env()
    if args.local_zone:
        config = ParserConfig(chunk_size=config.chunk_size, local_zone=args.local_zone)

    try:
        document = ix.parse_file(args.ics_file, config)
        if args.expand:
            start, end = (date_parser.isoparse(value) for value in args.expand)
            output = expand_document(document, start, end)
        else:
            output = document_to_json(document)
    except (IcalError, OSError) as e:
        print(f"icalx: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(output, indent=args.indent, ensure_ascii=False))


def get_arguments(argv=None):
    parser = ArgumentParser(description="icalx reads an ics file and prints it as JSON.")
    parser.add_argument("-V", "--version", action="version", version=ix.VERSION)

    parser.add_argument("ics_file", help="The ics file to read")
    parser.add_argument(
        "-e",
        "--expand",
        nargs=2,
        metavar=("FROM", "TO"),
        help="Print the occurrences between two ISO 8601 dates instead of the document",
    )
    parser.add_argument("-z", "--local-zone", dest="local_zone", help="IANA zone for floating and all-day values")
    parser.add_argument("-i", "--indent", type=int, default=2, help="JSON indentation")

    args = parser.parse_args(argv)
    if args.expand:
        for value in args.expand:
            try:
                date_parser.isoparse(value)
            except ValueError:
                parser.error(f"not an ISO 8601 date: {value}")
    return args


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("Aborted")
