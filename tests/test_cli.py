import json
import os
import subprocess

import pytest

import icalx as ix
from icalx.cli import main, to_json

from .common import TEST_FILE_DIR


def run_cli_tool(toolname: str, args: list[str]):
    return subprocess.run([toolname] + args, capture_output=True, text=True, check=False)


def test_icalx():
    # Test --version argument
    result = run_cli_tool("icalx", ["--version"])
    assert result.returncode == 0
    assert result.stdout.strip() == ix.VERSION

    # Test missing required arguments
    result = run_cli_tool("icalx", [])
    assert result.returncode == 2
    assert "the following arguments are required: ics_file" in result.stderr


def test_print_document(capsys):
    main([os.path.join(TEST_FILE_DIR, "exdate_override.ics"), "-z", "Europe/Berlin"])
    output = json.loads(capsys.readouterr().out)
    assert output["calendar"]["name"] == "Team"
    assert output["calendar"]["method"] == "PUBLISH"
    event = output["components"]["weekly-2015@example.com"]
    assert event["type"] == "VEVENT"
    assert event["start"] == "2015-06-30T10:00:00+02:00"
    assert event["rrule"] == "DTSTART;TZID=Europe/Berlin:20150630T100000\nRRULE:FREQ=WEEKLY;BYDAY=TU,WE;COUNT=6"
    assert event["exceptions"]["2015-07-08"] == "2015-07-08T10:00:00+02:00"
    assert event["duration"] == "PT1H"
    assert event["overrides"]["2015-07-07"]["summary"] == "Weekly sync (moved)"
    assert output["diagnostics"] == []


def test_expand(capsys):
    path = os.path.join(TEST_FILE_DIR, "exdate_override.ics")
    main([path, "--expand", "2015-06-29T00:00:00Z", "2015-07-20T00:00:00Z", "--local-zone", "Europe/Berlin"])
    output = json.loads(capsys.readouterr().out)
    assert [o["start"] for o in output] == [
        "2015-06-30T10:00:00+02:00",
        "2015-07-01T10:00:00+02:00",
        "2015-07-07T12:00:00+02:00",
        "2015-07-14T10:00:00+02:00",
        "2015-07-15T10:00:00+02:00",
    ]
    assert [o["override"] for o in output] == [False, False, True, False, False]
    assert {o["id"] for o in output} == {"weekly-2015@example.com"}

    first = output[0]
    assert first["ical_start"] == "20150630T080000Z"
    assert first["utc_offset"] == "+0200"
    assert {o["duration"] for o in output} == {"PT1H"}


def test_expand_full_day(capsys):
    path = os.path.join(TEST_FILE_DIR, "birthday.ics")
    main([path, "--expand", "2016-01-01", "2017-12-31", "-z", "Europe/Berlin"])
    output = json.loads(capsys.readouterr().out)
    assert [o["ical_start"] for o in output] == ["20160313", "20170313"]
    assert [o["duration"] for o in output] == ["P1D", "P1D"]
    assert all(o["full_day"] and "utc_offset" not in o for o in output)


def test_parse_error(tmp_path, capsys):
    path = tmp_path / "broken.ics"
    path.write_text("END:VEVENT\r\n", encoding="utf-8")
    with pytest.raises(SystemExit) as e:
        main([str(path)])
    assert e.value.code == 1
    assert "never opened" in capsys.readouterr().err


def test_missing_file(tmp_path):
    with pytest.raises(SystemExit) as e:
        main([str(tmp_path / "missing.ics")])
    assert e.value.code == 1


def test_bad_expand_dates(capsys):
    with pytest.raises(SystemExit) as e:
        main([os.path.join(TEST_FILE_DIR, "birthday.ics"), "--expand", "yesterday", "2020-01-01"])
    assert e.value.code == 2
    assert "not an ISO 8601 date: yesterday" in capsys.readouterr().err


def test_to_json():
    assert to_json({"a": [1, ("b", None)]}) == {"a": [1, ["b", None]]}
