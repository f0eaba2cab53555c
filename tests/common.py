import datetime as dt
import os

import pytz

from icalx import ParserConfig

TEST_FILE_DIR = os.path.join(os.path.dirname(__file__), "test_files")

berlin = pytz.timezone("Europe/Berlin")
berlin_config = ParserConfig(local_zone="Europe/Berlin")
one_hour = dt.timedelta(hours=1)


def get_test_file(file_name: str) -> str:
    """Helper function to open and read test files."""
    filepath = os.path.join(TEST_FILE_DIR, file_name)
    with open(filepath, "r", encoding="utf-8") as f:
        text = f.read()
    return text


def utc(*args) -> dt.datetime:
    return dt.datetime(*args, tzinfo=pytz.utc)


def calendar(*lines: str) -> str:
    """Wrap content lines in a VCALENDAR block."""
    body = "\r\n".join(lines)
    return f"BEGIN:VCALENDAR\r\nVERSION:2.0\r\nPRODID:-//icalx//tests//EN\r\n{body}\r\nEND:VCALENDAR\r\n"
