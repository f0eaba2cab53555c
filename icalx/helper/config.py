from __future__ import annotations

import logging
import os
from dataclasses import dataclass

# ------------------------------------ Logging ---------------------------------
logger = logging.getLogger(__name__)
if not logging.getLogger().handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(filename)s:%(lineno)d %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
logger.setLevel(logging.INFO)  # modify log levels here

DEFAULT_CHUNK_SIZE = 2000


# ------------------------------------ Parser ----------------------------------
@dataclass(frozen=True)
class ParserConfig:
    """
    Settings shared by one parse call.

    @ivar chunk_size:
        Number of logical lines handled per step by the chunked parser.
    @ivar local_zone:
        IANA name used for floating and date-only values. None means guess
        the host zone.
    @ivar alias_table:
        A LegacyAliasTable, or None for the bundled Windows zone table.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    local_zone: str | None = None
    alias_table: object = None

    def __post_init__(self):
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

    @classmethod
    def from_env(cls, environ=None) -> ParserConfig:
        environ = os.environ if environ is None else environ
        chunk_size = environ.get("ICALX_CHUNK_SIZE")
        return cls(
            chunk_size=int(chunk_size) if chunk_size else DEFAULT_CHUNK_SIZE,
            local_zone=environ.get("ICALX_LOCAL_ZONE") or None,
        )

    def resolver(self):
        from ..timezones import get_resolver

        return get_resolver(alias_table=self.alias_table, local_zone=self.local_zone)
