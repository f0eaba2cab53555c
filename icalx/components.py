"""Parsed calendar objects and the document that holds them."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

from .expander import expand
from .helper import Diagnostics, new_uid, to_vname
from .helper.diagnostics import STALE_SEQUENCE

# fields copied by a same-UID merge when the newer record has them
MERGED_FIELDS = (
    "start",
    "end",
    "due",
    "completed",
    "dtstamp",
    "created",
    "last_modified",
    "datetype",
    "rrule",
    "duration",
    "geo",
    "method",
    "line_number",
)


class Geo(NamedTuple):
    lat: float
    lon: float


class FreeBusyPeriod(NamedTuple):
    type: str
    start: object
    end: object


# ------------------------------- Components -----------------------------------
class Component:
    """
    One BEGIN/END block.

    @ivar name:
        The uppercased type tag, VEVENT for instance.
    @ivar properties:
        Lower-cased property name -> stored value. Repeated properties hold a
        list of values in order of appearance.
    @ivar custom:
        X- properties, keyed by the part after "X-".
    @ivar children:
        Nested components that have no place of their own, STANDARD and
        DAYLIGHT blocks of a VTIMEZONE for instance.
    """

    name = ""

    def __init__(self, name=None):
        self.name = (name or type(self).name).upper()
        self.properties = {}
        self.custom = {}
        self.children = []
        self.alarms = []
        self.categories = []
        self.freebusy = []
        self.uid = None
        self.sequence = 0
        self.method = None
        self.start = None
        self.end = None
        self.due = None
        self.completed = None
        self.dtstamp = None
        self.created = None
        self.last_modified = None
        self.datetype = None
        self.duration = None
        self.rrule = None
        self.exceptions = None
        self.overrides = None
        self.recurrence_id = None
        self.geo = None
        self.tzid = None
        self.line_number = None

    def __getattr__(self, name):
        """
        For convenience, make properties and custom directly accessible.

        Underscores, legal in python variable names, are converted to dashes,
        which are legal in IANA tokens.
        """
        # copy and pickle look for special methods before __init__ ran
        if name in ("properties", "custom") or name.startswith("__"):
            raise AttributeError(name)
        key = to_vname(name)
        if key in self.properties:
            return self.properties[key]
        if key.upper() in self.custom:
            return self.custom[key.upper()]
        raise AttributeError(name)

    def __repr__(self):
        label = self.uid or self.properties.get("tzid") or ""
        return f"<{self.name or '*unnamed*'}| {label}>"

    @property
    def summary_text(self) -> str | None:
        summary = self.properties.get("summary")
        if isinstance(summary, list):
            summary = summary[0]
        return None if summary is None else str(summary)

    @property
    def is_recurring(self) -> bool:
        return self.rrule is not None

    @property
    def is_override(self) -> bool:
        return self.recurrence_id is not None and self.rrule is None

    def add_property(self, key: str, value):
        """Store value under key, turning repeats into a list."""
        if key in self.properties:
            current = self.properties[key]
            if isinstance(current, list):
                current.append(value)
            else:
                self.properties[key] = [current, value]
        else:
            self.properties[key] = value

    def add_custom(self, key: str, value):
        if key in self.custom:
            current = self.custom[key]
            self.custom[key] = current + [value] if isinstance(current, list) else [current, value]
        else:
            self.custom[key] = value

    def merge(self, other: Component):
        """
        Take every field other has over this record. Indexes and alarms are
        extended, never cleared.
        """
        for attr in MERGED_FIELDS:
            value = getattr(other, attr)
            if value is not None:
                setattr(self, attr, value)
        self.sequence = other.sequence
        self.properties.update(other.properties)
        self.custom.update(other.custom)
        if other.categories:
            self.categories = list(other.categories)
        if other.freebusy:
            self.freebusy = list(other.freebusy)
        if other.alarms:
            self.alarms = list(other.alarms)
        if other.children:
            self.children.extend(other.children)
        if other.exceptions is not None:
            if self.exceptions is None:
                self.exceptions = ExceptionIndex()
            self.exceptions.update(other.exceptions)
        if other.overrides is not None:
            if self.overrides is None:
                self.overrides = OverrideIndex()
            self.overrides.update(other.overrides)

    def override_copy(self) -> Component:
        """A shallow copy for storage in an OverrideIndex."""
        record = copy.copy(self)
        record.overrides = None
        record.properties = dict(self.properties)
        record.custom = dict(self.custom)
        record.children = list(self.children)
        record.alarms = list(self.alarms)
        record.categories = list(self.categories)
        record.freebusy = list(self.freebusy)
        return record


class Calendar(Component):
    name = "VCALENDAR"


class Event(Component):
    name = "VEVENT"


class Todo(Component):
    name = "VTODO"


class Journal(Component):
    name = "VJOURNAL"


class FreeBusy(Component):
    name = "VFREEBUSY"


class Timezone(Component):
    name = "VTIMEZONE"

    def __repr__(self):
        return f"<VTIMEZONE | {self.tzid or 'No TZID'}>"


class Alarm(Component):
    name = "VALARM"


# --------------------------- component registry -------------------------------
__component_registry = {}


def register_component(component_class, name=None):
    __component_registry[(name or component_class.name).upper()] = component_class


def new_component(name: str) -> Component:
    """Instantiate the registered class for name, or a plain Component."""
    name = name.strip().upper()
    return __component_registry.get(name, Component)(name)


for _component_class in (Calendar, Event, Todo, Journal, FreeBusy, Timezone, Alarm):
    register_component(_component_class)


# ------------------------------- Indexes --------------------------------------
class DualKeyIndex:
    """
    Entries keyed by date (YYYY-MM-DD, the local day of the value) and, for
    timed values, also by the full UTC instant. Both keys share one entry.
    """

    def __init__(self):
        self._entries = {}

    @staticmethod
    def keys_for(when) -> list[str]:
        keys = [when.date_key()]
        if not when.date_only:
            keys.append(when.instant_key())
        return keys

    @staticmethod
    def primary_key(when) -> str:
        return when.date_key() if when.date_only else when.instant_key()

    def _put(self, when, item):
        for key in self.keys_for(when):
            self._entries[key] = item

    def lookup(self, when, prefer_instant=True):
        """
        The entry for when: by instant first (timed values only), then by
        day.
        """
        if prefer_instant and not when.date_only:
            item = self._entries.get(when.instant_key())
            if item is not None:
                return item
        return self._entries.get(when.date_key())

    def get(self, key: str, default=None):
        return self._entries.get(key, default)

    def __getitem__(self, key: str):
        return self._entries[key]

    def __contains__(self, key):
        if isinstance(key, str):
            return key in self._entries
        return self.lookup(key) is not None

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def keys(self):
        return self._entries.keys()

    def values(self) -> list:
        """Distinct entries, in insertion order."""
        seen = {}
        for item in self._entries.values():
            seen.setdefault(id(item), item)
        return list(seen.values())

    def update(self, other: DualKeyIndex):
        self._entries.update(other._entries)

    def __repr__(self):
        return f"<{type(self).__name__} {sorted(self._entries)}>"


class ExceptionIndex(DualKeyIndex):
    """EXDATE entries of one component."""

    def add(self, when):
        self._put(when, when)


class OverrideIndex(DualKeyIndex):
    """RECURRENCE-ID records of one component."""

    def add(self, record: Component, diagnostics: Diagnostics | None = None) -> bool:
        """
        Insert record under its RECURRENCE-ID. The higher SEQUENCE wins, and
        the later record wins a tie. Returns False when record lost.
        """
        when = record.recurrence_id
        current = self._entries.get(self.primary_key(when))
        if current is not None and current.sequence > record.sequence:
            if diagnostics is not None:
                diagnostics.warn(
                    STALE_SEQUENCE,
                    f"override {record.uid} {self.primary_key(when)} has SEQUENCE {record.sequence}, "
                    f"keeping SEQUENCE {current.sequence}",
                    record.line_number,
                )
            return False
        self._put(when, record)
        return True


# ------------------------------- Document -------------------------------------
@dataclass
class CalendarMetadata:
    """Top-level VCALENDAR properties. The first value seen wins."""

    prodid: str | None = None
    version: str | None = None
    calscale: str | None = None
    method: str | None = None
    name: str | None = None
    description: str | None = None
    timezone: str | None = None
    extra: dict = field(default_factory=dict)

    # property key -> field
    fields = {
        "prodid": "prodid",
        "version": "version",
        "calscale": "calscale",
        "method": "method",
    }
    custom_fields = {
        "WR-CALNAME": "name",
        "WR-CALDESC": "description",
        "WR-TIMEZONE": "timezone",
    }

    def absorb(self, calendar: Component):
        for key, value in calendar.properties.items():
            attr = self.fields.get(key)
            if attr is None:
                self.extra.setdefault(key, value)
            elif getattr(self, attr) is None:
                setattr(self, attr, _text(value))
        for key, value in calendar.custom.items():
            attr = self.custom_fields.get(key)
            if attr is None:
                self.extra.setdefault(f"x-{key.lower()}", value)
            elif getattr(self, attr) is None:
                setattr(self, attr, _text(value))


def _text(value) -> str:
    if isinstance(value, list):
        value = value[0]
    return str(value)


class CalendarDocument(Mapping):
    """
    Read-only mapping of UID (or a generated id for UID-less components) to
    Component.

    @ivar calendar_metadata:
        CalendarMetadata of the VCALENDAR block(s).
    @ivar diagnostics:
        Diagnostics reported while the document was built.
    @ivar resolver:
        The TimezoneResolver the values were parsed with, or None.
    """

    def __init__(self, diagnostics: Diagnostics | None = None, resolver=None):
        self._components = {}
        self.calendar_metadata = CalendarMetadata()
        self.diagnostics = Diagnostics() if diagnostics is None else diagnostics
        self.resolver = resolver

    def __getitem__(self, key):
        return self._components[key]

    def __iter__(self):
        return iter(self._components)

    def __len__(self):
        return len(self._components)

    def __repr__(self):
        return f"<CalendarDocument {list(self._components.values())!r}>"

    def components(self, name: str | None = None) -> list[Component]:
        name = name.upper() if name else None
        return [c for c in self._components.values() if name is None or c.name == name]

    @property
    def events(self) -> list[Component]:
        return self.components("VEVENT")

    def expand(self, key, from_, to, **kwargs) -> list:
        """
        Expand the component stored under key, reading date and naive bounds
        in the local zone the document was parsed with.
        """
        kwargs.setdefault("resolver", self.resolver)
        return expand(self[key], from_, to, **kwargs)

    # ----------------------------------------------- building, used by the parser
    def _store(self, component: Component, method=None) -> str:
        """Store a component that has no UID under a generated id."""
        key = new_uid()
        self._components[key] = component
        if method:
            component.method = method
        return key

    def _fold(self, component: Component, method=None):
        """
        Fold a component with a UID into the document.
        """
        uid = component.uid
        if method:
            component.method = method
        canonical = self._components.get(uid)

        if canonical is None:
            if component.recurrence_id is not None:
                # the override came first, it stands in for the master until
                # the master shows up
                canonical = component.override_copy()
                canonical.overrides = OverrideIndex()
                canonical.overrides.add(component.override_copy(), self.diagnostics)
            else:
                canonical = component
            self._components[uid] = canonical
        elif component.recurrence_id is None:
            if component.sequence >= canonical.sequence or canonical.recurrence_id is not None:
                canonical.merge(component)
            else:
                self.diagnostics.warn(
                    STALE_SEQUENCE,
                    f"{uid} has SEQUENCE {component.sequence}, keeping SEQUENCE {canonical.sequence}",
                    component.line_number,
                )
        else:
            if canonical.overrides is None:
                canonical.overrides = OverrideIndex()
            canonical.overrides.add(component.override_copy(), self.diagnostics)

        if canonical.rrule is not None and canonical.recurrence_id is not None:
            canonical.recurrence_id = None
