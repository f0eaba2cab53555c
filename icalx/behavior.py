"""Property handlers, one Behavior class per kind of property."""

from __future__ import annotations

from .components import ExceptionIndex, FreeBusyPeriod, Geo
from .datetimes import TimeValue, fix_vendor_tzid, parse_duration
from .exceptions import DuplicatePropertyError, IcalError, ParseError
from .helper import split_list
from .helper.diagnostics import INVALID_RECURRENCE_ID
from .properties import text_value, unescape_text


# ------------------------ Abstract class for behavior --------------------------
class Behavior:
    """
    How one property is decoded and stored on its component.

    Behavior subclasses are not meant to be instantiated, all methods should
    be classmethods. The context passed to apply is the running Assembler,
    which provides resolver, diagnostics and stack_tzid().

    @cvar name:
        The uppercase name of the property described by the class, or a
        generic name if the class handles many properties.
    @cvar key:
        Storage key in Component.properties, when it differs from the
        lower-cased property name.
    """

    name = ""
    key = None

    def __init__(self):
        err = "Behavior subclasses are not meant to be instantiated"
        raise IcalError(err)

    @classmethod
    def store_key(cls, prop) -> str:
        return cls.key or prop.name.lower()

    @classmethod
    def apply(cls, component, prop, context):
        raise NotImplementedError


class TextBehavior(Behavior):
    """Unescaped text, with parameters when they carry meaning."""

    @classmethod
    def apply(cls, component, prop, context):
        component.add_property(cls.store_key(prop), text_value(prop))


class RenamedTextBehavior(TextBehavior):
    pass


class Transparency(RenamedTextBehavior):
    name = "TRANSP"
    key = "transparency"


class Completion(RenamedTextBehavior):
    name = "PERCENT-COMPLETE"
    key = "completion"


class UID(TextBehavior):
    name = "UID"

    @classmethod
    def apply(cls, component, prop, context):
        super().apply(component, prop, context)
        component.uid = unescape_text(prop.value).strip() or None


class TZID(TextBehavior):
    name = "TZID"

    @classmethod
    def apply(cls, component, prop, context):
        super().apply(component, prop, context)
        component.tzid = unescape_text(prop.value)


class Custom(Behavior):
    """X- properties, kept under the part after the prefix."""

    @classmethod
    def apply(cls, component, prop, context):
        component.add_custom(prop.name[2:], text_value(prop))


# ---------------------------------- Dates -------------------------------------
class DateBehavior(Behavior):
    """
    DATE or DATE-TIME properties, stored as TimeValue on an attribute.
    Unparseable values are kept as text.

    @cvar attr:
        The Component attribute receiving the value.
    @cvar unique:
        Whether a second occurrence in one component is an error.
    """

    attr = None
    unique = False

    @classmethod
    def apply(cls, component, prop, context):
        if cls.unique and getattr(component, cls.attr) is not None:
            raise DuplicatePropertyError(f"duplicate {prop.name} encountered, line={prop.line}", prop.line_number)
        value = context.time_value(prop.value, prop.params, prop.line_number)
        setattr(component, cls.attr, value)
        return value


class DateTimeStart(DateBehavior):
    name = "DTSTART"
    attr = "start"
    unique = True

    @classmethod
    def apply(cls, component, prop, context):
        value = super().apply(component, prop, context)
        if isinstance(value, TimeValue):
            component.datetype = "date" if value.date_only else "date-time"


class DateTimeEnd(DateBehavior):
    name = "DTEND"
    attr = "end"
    unique = True


class Due(DateBehavior):
    name = "DUE"
    attr = "due"
    unique = True


class Completed(DateBehavior):
    name = "COMPLETED"
    attr = "completed"


class DateTimeStamp(DateBehavior):
    name = "DTSTAMP"
    attr = "dtstamp"


class Created(DateBehavior):
    name = "CREATED"
    attr = "created"


class LastModified(DateBehavior):
    name = "LAST-MODIFIED"
    attr = "last_modified"


class ExDate(Behavior):
    """
    Comma separated exclusions. Empty entries are skipped, anything else
    that is not a date aborts the parse.
    """

    name = "EXDATE"

    @classmethod
    def apply(cls, component, prop, context):
        params, value = fix_vendor_tzid(prop.params, prop.value)
        if component.exceptions is None:
            component.exceptions = ExceptionIndex()
        for entry in split_list(value):
            when = context.time_value(entry, params, prop.line_number)
            if not isinstance(when, TimeValue):
                raise ParseError(f"EXDATE value {entry!r} is not a date", prop.line_number)
            component.exceptions.add(when)


class RecurrenceId(Behavior):
    name = "RECURRENCE-ID"

    @classmethod
    def apply(cls, component, prop, context):
        if not prop.value.strip():
            context.diagnostics.warn(INVALID_RECURRENCE_ID, "empty RECURRENCE-ID ignored", prop.line_number)
            return
        when = context.time_value(prop.value, prop.params, prop.line_number)
        if not isinstance(when, TimeValue):
            raise ParseError(f"RECURRENCE-ID value {prop.value!r} is not a date", prop.line_number)
        component.recurrence_id = when


# --------------------------------- Others -------------------------------------
class RRule(Behavior):
    """The rule text is kept until the component is finalized."""

    name = "RRULE"

    @classmethod
    def apply(cls, component, prop, context):
        component.rrule = prop.value


class Sequence(Behavior):
    name = "SEQUENCE"

    @classmethod
    def apply(cls, component, prop, context):
        try:
            component.sequence = int(prop.value.strip())
        except ValueError:
            component.add_property("sequence", prop.value)


class Duration(Behavior):
    """Raw DURATION text, applied to the end at finalization."""

    name = "DURATION"

    @classmethod
    def apply(cls, component, prop, context):
        component.duration = prop.value.strip()


class GeoBehavior(Behavior):
    name = "GEO"

    @classmethod
    def apply(cls, component, prop, context):
        try:
            lat, lon = prop.value.split(";")
            component.geo = Geo(float(lat), float(lon))
        except ValueError:
            component.add_property("geo", prop.value)


class Categories(Behavior):
    """Comma separated; repeated CATEGORIES lines accumulate."""

    name = "CATEGORIES"

    @classmethod
    def apply(cls, component, prop, context):
        component.categories.extend(unescape_text(part) for part in split_list(prop.value))


class FreeBusyTimes(Behavior):
    """
    FREEBUSY periods, start/end or start/duration, typed by FBTYPE.
    """

    name = "FREEBUSY"

    @classmethod
    def apply(cls, component, prop, context):
        fb_type = str(prop.params.get("FBTYPE", "BUSY")).upper()
        params = {k: v for k, v in prop.params.items() if k != "FBTYPE"}
        for period in split_list(prop.value):
            start_text, _, end_text = period.partition("/")
            start = context.time_value(start_text, params, prop.line_number)
            if not isinstance(start, TimeValue):
                continue
            if end_text.lstrip("+-").upper().startswith("P"):
                delta = parse_duration(end_text)
                end = start.shift(delta) if delta is not None else None
            else:
                end = context.time_value(end_text, params, prop.line_number)
            if isinstance(end, TimeValue):
                component.freebusy.append(FreeBusyPeriod(fb_type, start, end))


# --------------------------- behavior registry --------------------------------
__behavior_registry = {}


def register_behavior(behavior, name=None):
    """
    Register the given behavior under name, or under behavior.name.
    """
    __behavior_registry[(name or behavior.name).upper()] = behavior


def get_behavior(name: str):
    """
    Return the behavior for a property name. X- properties get Custom, and
    anything unknown is treated as text.
    """
    name = name.upper()
    if name in __behavior_registry:
        return __behavior_registry[name]
    if name.startswith("X-"):
        return Custom
    return TextBehavior


text_list = [
    "SUMMARY",
    "DESCRIPTION",
    "LOCATION",
    "URL",
    "CLASS",
    "STATUS",
    "ORGANIZER",
    "ATTENDEE",
    "CONTACT",
    "COMMENT",
    "PRIORITY",
    "RESOURCES",
    "RELATED-TO",
    "PRODID",
    "VERSION",
    "CALSCALE",
    "METHOD",
    "TZNAME",
    "TZOFFSETFROM",
    "TZOFFSETTO",
    "ACTION",
    "TRIGGER",
    "REPEAT",
]
list(map(lambda x: register_behavior(TextBehavior, x), text_list))

for _behavior in (
    Transparency,
    Completion,
    UID,
    TZID,
    DateTimeStart,
    DateTimeEnd,
    Due,
    Completed,
    DateTimeStamp,
    Created,
    LastModified,
    ExDate,
    RecurrenceId,
    RRule,
    Sequence,
    Duration,
    GeoBehavior,
    Categories,
    FreeBusyTimes,
):
    register_behavior(_behavior)
