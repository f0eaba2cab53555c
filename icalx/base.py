"""Reading calendar text into a CalendarDocument."""

from __future__ import annotations

import asyncio
import datetime as dt
from functools import partial
from itertools import islice

from .behavior import get_behavior
from .components import CalendarDocument, Component, new_component
from .datetimes import TimeValue, parse_duration, parse_time_value
from .exceptions import IcalError, ParseError, RecurrenceError
from .helper import Diagnostics, ParserConfig, logger
from .helper.constants import ALARM_PARENTS, RECURRING_TYPES
from .helper.diagnostics import INVALID_RECURRENCE_ID, MALFORMED_DURATION, MISMATCHED_END
from .properties import decode_line, get_logical_lines
from .recurrence import build_rule

one_day = dt.timedelta(days=1)


class Stack:
    def __init__(self):
        self.stack = []

    def __len__(self):
        return len(self.stack)

    def __iter__(self):
        return reversed(self.stack)

    def top(self):
        return self.stack[-1] if self.stack else None

    def top_name(self):
        return self.stack[-1].name if self.stack else None

    def push(self, obj):
        self.stack.append(obj)

    def pop(self):
        return self.stack.pop()


class Assembler:
    """
    BEGIN/END state machine building one CalendarDocument.

    Properties outside any component land on a root scope whose values end
    up in the calendar metadata.
    """

    def __init__(self, resolver, diagnostics: Diagnostics | None = None):
        self.resolver = resolver
        self.diagnostics = Diagnostics() if diagnostics is None else diagnostics
        self.document = CalendarDocument(self.diagnostics, resolver)
        self.stack = Stack()
        self.root = Component("ROOT")
        # id(component) -> TZID of the last VTIMEZONE closed inside it
        self.declared_tzids = {}

    # ------------------------------------------------------------ context for behaviors
    def stack_tzid(self):
        """
        The TZID floating values fall back to: an open VTIMEZONE, else the
        last VTIMEZONE declared by the innermost enclosing component.
        """
        for component in self.stack:
            if component.name == "VTIMEZONE":
                return component.tzid
        for component in self.stack:
            tzid = self.declared_tzids.get(id(component))
            if tzid:
                return tzid
        return self.declared_tzids.get(id(self.root))

    def time_value(self, value: str, params: dict, line_number=None):
        return parse_time_value(value, params, self.resolver, self.stack_tzid(), self.diagnostics, line_number)

    # ------------------------------------------------------------ state machine
    def feed(self, prop):
        if prop.name == "BEGIN":
            component = new_component(prop.value)
            component.line_number = prop.line_number
            self.stack.push(component)
        elif prop.name == "END":
            self.end(prop.value, prop.line_number)
        else:
            target = self.stack.top() or self.root
            get_behavior(prop.name).apply(target, prop, self)

    def end(self, name: str, line_number=None):
        if len(self.stack) == 0:
            err = "Attempted to end the {0} component but it was never opened"
            raise ParseError(err.format(name), line_number)

        name = name.strip().upper()
        if name != self.stack.top_name():
            self.diagnostics.warn(MISMATCHED_END, f"END:{name} closes {self.stack.top_name()}", line_number)

        component = self.stack.pop()
        self.finalize(component)
        self.fold(component, self.stack.top())

    def close(self) -> CalendarDocument:
        """Close what the text left open and return the document."""
        while len(self.stack):
            top_name = self.stack.top_name()
            self.diagnostics.warn(MISMATCHED_END, f"{top_name} was never closed")
            self.end(top_name)
        if self.root.properties or self.root.custom:
            self.document.calendar_metadata.absorb(self.root)
        return self.document

    # ------------------------------------------------------------ folding
    def finalize(self, component: Component):
        if component.name == "VCALENDAR":
            self.document.calendar_metadata.absorb(component)
            return

        start = component.start
        if component.end is None and isinstance(start, TimeValue):
            if component.duration is not None:
                delta = parse_duration(component.duration)
                if delta is None:
                    self.diagnostics.warn(
                        MALFORMED_DURATION,
                        f"DURATION {component.duration!r} of {component.uid or component.name}, using zero",
                        component.line_number,
                    )
                    delta = dt.timedelta(0)
                component.end = start.shift(delta)
            elif component.datetype == "date-time":
                component.end = start
            else:
                component.end = start.shift(one_day)

        if isinstance(component.rrule, str):
            if component.name in RECURRING_TYPES:
                try:
                    component.rrule = build_rule(component.rrule, start, self.resolver)
                except RecurrenceError as e:
                    if e.line_number is None:
                        e.line_number = component.line_number
                    raise
            else:
                # STANDARD/DAYLIGHT rules describe zone transitions, not occurrences
                component.properties["rrule"] = component.rrule
                component.rrule = None

    def fold(self, component: Component, parent: Component | None):
        if component.name == "VCALENDAR":
            self.declared_tzids.pop(id(component), None)
            return
        if component.name == "VTIMEZONE" and component.tzid:
            self.declared_tzids[id(parent or self.root)] = component.tzid
        if component.name == "VALARM" and parent is not None and parent.name in ALARM_PARENTS:
            parent.alarms.append(component)
            return

        at_top = parent is None or parent.name == "VCALENDAR"
        method = parent.properties.get("method") if parent is not None else None
        if isinstance(method, list):
            method = method[0]
        method = str(method) if method is not None else None

        if component.recurrence_id is not None and not component.uid:
            self.diagnostics.warn(
                INVALID_RECURRENCE_ID,
                f"{component.name} has a RECURRENCE-ID but no UID",
                component.line_number,
            )

        if component.uid and at_top:
            self.document._fold(component, method)
        elif at_top:
            self.document._store(component, method)
        else:
            parent.children.append(component)


# ----------------------------- Parsing entry points ---------------------------
def _feed_lines(assembler: Assembler, lines):
    count = 0
    for line, n in lines:
        count += 1
        prop = decode_line(line, n)
        if prop is not None:
            assembler.feed(prop)
    return count


def read_document(text: str | bytes, config: ParserConfig | None = None) -> CalendarDocument:
    """
    Parse calendar text in one pass.
    """
    config = config or ParserConfig()
    assembler = Assembler(config.resolver())
    try:
        _feed_lines(assembler, get_logical_lines(text))
        return assembler.close()
    except ParseError as e:
        e.inputs = text
        raise


class ChunkedParser:
    """
    Parse calendar text a bounded number of logical lines at a time.

    The document only becomes available from result() once every line has
    been read.
    """

    def __init__(self, text: str | bytes, config: ParserConfig | None = None):
        self.config = config or ParserConfig()
        self.text = text
        self._lines = get_logical_lines(text)
        self._assembler = Assembler(self.config.resolver())
        self._document = None

    @property
    def done(self) -> bool:
        return self._document is not None

    def step(self) -> bool:
        """Read the next chunk. Returns True once the text is exhausted."""
        if self.done:
            return True
        try:
            count = _feed_lines(self._assembler, islice(self._lines, self.config.chunk_size))
            if count < self.config.chunk_size:
                self._document = self._assembler.close()
        except ParseError as e:
            e.inputs = self.text
            raise
        return self.done

    def result(self) -> CalendarDocument:
        if not self.done:
            raise IcalError("parsing has not finished")
        return self._document


async def parse_async(text: str | bytes, config: ParserConfig | None = None) -> CalendarDocument:
    """
    Parse in chunks, yielding to the event loop between them.
    """
    parser = ChunkedParser(text, config)
    while not parser.step():
        await asyncio.sleep(0)
    return parser.result()


def _deliver(callback, task: asyncio.Task):
    if task.cancelled():
        logger.debug("Parse task cancelled, callback not called")
        return
    error = task.exception()
    if error is not None:
        callback(error, None)
    else:
        callback(None, task.result())


def parse(text: str | bytes, config: ParserConfig | None = None, callback=None):
    """
    Parse calendar text into a CalendarDocument.

    Without callback the document is returned. With callback,
    callback(error, document) is called exactly once; inside a running event
    loop the parse is scheduled as a task, which is returned.
    """
    if callback is None:
        return read_document(text, config)

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        task = loop.create_task(parse_async(text, config))
        task.add_done_callback(partial(_deliver, callback))
        return task

    try:
        document = asyncio.run(parse_async(text, config))
    except Exception as e:
        callback(e, None)
        return None
    callback(None, document)
    return document


def parse_file(path, config: ParserConfig | None = None, callback=None):
    """
    Read a UTF-8 calendar file and parse it.
    """
    with open(path, "rb") as f:
        data = f.read()
    return parse(data, config, callback)
