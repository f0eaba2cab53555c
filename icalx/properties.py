"""Decoding of single content lines: unfolding, parameters and escaped text."""

from __future__ import annotations

import re
from typing import Generator, NamedTuple

from .helper import Character as Char
from .helper import logger, strip_quotes, to_unicode
from .helper.constants import ESCAPABLE_CHAR_LIST
from .patterns import patterns

line_re = re.compile(patterns["line"], re.DOTALL | re.VERBOSE)
params_re = re.compile(patterns["params_grouped"], re.VERBOSE)
wrap_re = re.compile(patterns["wraporend"], re.VERBOSE)
logical_lines_re = re.compile(patterns["logicallines"], re.VERBOSE)
integer_re = re.compile(patterns["integer"])
decimal_re = re.compile(patterns["decimal"])

# parameters which, alone on a line, do not turn a text value into a
# ParameterizedValue
TRIVIAL_PARAMETERS = ("CHARSET=utf-8", "VALUE=TEXT")


class Property(NamedTuple):
    """One decoded content line."""

    name: str
    params: dict
    raw_params: list
    value: str
    line_number: int | None = None

    @property
    def line(self) -> str:
        params = "".join(f";{p}" for p in self.raw_params)
        return f"{self.name}{params}:{self.value}"


class ParameterizedValue(NamedTuple):
    """A text value stored together with the parameters of its line."""

    params: dict
    value: str

    def __str__(self):
        return self.value


def get_logical_lines(text: str) -> Generator:
    """
    Iterate through calendar text, yielding one unfolded logical line at a
    time together with the number of its first physical line.

    >>> for line, n in get_logical_lines("SUMMARY:Line 0 text\\n , continued\\nUID:1\\n"):
    ...     print(n, line)
    1 SUMMARY:Line 0 text, continued
    3 UID:1
    """
    line_number = 1
    for match in logical_lines_re.finditer(to_unicode(text)):
        line, n = wrap_re.subn("", match.group())
        if line.strip() != "":
            yield line, line_number
        line_number += n


def unescape_text(s: str, char_list: str = ESCAPABLE_CHAR_LIST) -> str:
    """
    Undo RFC 5545 TEXT escaping and drop one layer of surrounding quotes.
    """
    # vars which control state machine
    char_iterator = iter(s)
    state = "read normal"
    current = []

    while True:
        char = next(char_iterator, None)

        if state == "read normal":
            if char is None:
                break
            elif char == Char.BACKSLASH:
                state = "read escaped char"
            else:
                current.append(char)

        elif state == "read escaped char":
            state = "read normal"
            if char is None:
                current.append(Char.BACKSLASH)
                break
            elif char in "nN":
                current.append(Char.LF)
            elif char in char_list:
                current.append(char)
            else:
                # leave unrecognized escaped characters untouched
                current.append(Char.BACKSLASH + char)

    return strip_quotes("".join(current))


def parse_value(value: str):
    """
    Coerce a parameter value to bool or number when that is unambiguous.
    """
    if value == "TRUE":
        return True
    if value == "FALSE":
        return False
    if integer_re.match(value):
        return int(value)
    if decimal_re.match(value):
        return float(value)
    return strip_quotes(value)


def split_parameters(string: str) -> list[str]:
    """
    Split the parameter section of a line into raw NAME=VALUE strings.
    """
    return [f"{name}={value}" for name, value in params_re.findall(string)]


def parse_parameters(raw_params: list[str]) -> dict:
    out = {}
    for element in raw_params:
        if "=" in element:
            name, value = element.split("=", 1)
            out[name.upper()] = parse_value(value)
    return out


def decode_line(line: str, line_number: int | None = None) -> Property | None:
    """
    Split one logical line into name, parameters and value.

    Returns None for lines that do not follow the content line grammar; the
    caller drops them.
    """
    # Exchange quotes Windows zone names in TZID, keep quotes only around
    # "(UTC+hh:mm) ..." display labels
    if "TZID=" in line and '"(' not in line:
        line = line.replace(Char.DQUOTE, "")

    match = line_re.match(line)
    if match is None:
        logger.debug(f"Dropped line {line_number}: {line!r}")
        return None

    raw_params = split_parameters(match.group("params"))
    return Property(
        match.group("name").upper(),
        parse_parameters(raw_params),
        raw_params,
        match.group("value"),
        line_number,
    )


def text_value(prop: Property):
    """
    The stored form of a text property: plain text, or a ParameterizedValue
    when the line carries meaningful parameters.
    """
    text = unescape_text(prop.value)
    raw = prop.raw_params
    if raw and not (len(raw) == 1 and raw[0] in TRIVIAL_PARAMETERS):
        return ParameterizedValue(prop.params, text)
    return text
