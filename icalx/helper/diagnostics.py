"""Non-fatal anomalies found while parsing, kept apart from exceptions."""

from __future__ import annotations

from dataclasses import dataclass

from .config import logger

UNRESOLVED_TIMEZONE = "unresolved-timezone"
MALFORMED_DURATION = "malformed-duration"
STALE_SEQUENCE = "stale-sequence"
INVALID_RECURRENCE_ID = "invalid-recurrence-id"
MISMATCHED_END = "mismatched-end"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    line_number: int | None = None

    def __str__(self):
        if self.line_number is None:
            return f"{self.code}: {self.message}"
        return f"{self.code} at line {self.line_number}: {self.message}"


class Diagnostics:
    """
    Collector for warnings raised during one parse.

    Every warning is logged as well, so callers that never look at the
    collector still see it.
    """

    def __init__(self):
        self.items = []

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __repr__(self):
        return f"<Diagnostics {self.items!r}>"

    def warn(self, code: str, message: str, line_number: int | None = None) -> Diagnostic:
        item = Diagnostic(code, message, line_number)
        self.items.append(item)
        logger.warning(str(item))
        return item

    def codes(self) -> list[str]:
        return [item.code for item in self.items]
