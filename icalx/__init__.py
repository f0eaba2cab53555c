"""
icalx: a tolerant iCalendar reader with recurrence expansion.

Parsing
-------
    >>> import icalx
    >>> doc = icalx.parse(text)                  # CalendarDocument
    >>> event = doc["some-uid"]
    >>> event.summary, event.start, event.end

Calendar text from mail servers, calendar services and older desktop suites
is read leniently: Windows zone names and Outlook display labels in TZID are
mapped to IANA zones, malformed lines are dropped, and anomalies are
reported in doc.diagnostics instead of raising.

Recurrence
----------
    >>> icalx.expand(event, from_, to)           # list of Occurrence

expand applies EXDATE exclusions and RECURRENCE-ID overrides. Rules are
evaluated in the wall clock of the event's zone, so instances keep their
local time across daylight saving changes.

Chunked parsing
---------------
parse_async and ChunkedParser parse a bounded number of lines at a time.
parse(text, callback=cb) reports through cb(error, document).
"""

from .base import Assembler, ChunkedParser, parse, parse_async, parse_file, read_document
from .components import CalendarDocument, Component
from .datetimes import TimeValue
from .exceptions import (
    DuplicatePropertyError,
    ExpansionRangeError,
    ExpansionTypeError,
    IcalError,
    ParseError,
    RecurrenceError,
)
from .expander import Occurrence, expand
from .helper import Diagnostic, ParserConfig
from .recurrence import RecurrenceRule, build_rule
from .timezones import TimezoneResolver, ZoneIdentifier, get_resolver
from .windows_zones import DEFAULT_ALIAS_TABLE, LegacyAliasTable

VERSION = "0.9.0"
