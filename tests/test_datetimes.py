import datetime as dt

import pytest
import pytz

from icalx import TimeValue, ZoneIdentifier
from icalx.datetimes import (
    date_to_string,
    datetime_to_string,
    delta_to_offset,
    fix_vendor_tzid,
    parse_duration,
    parse_time_value,
    string_to_date,
    time_value_to_string,
    timedelta_to_string,
)
from icalx.helper import Diagnostics

from .common import berlin, berlin_config, utc

resolver = berlin_config.resolver()


def test_parse_utc():
    value = parse_time_value("20240115T090000Z", {}, resolver)
    assert value.instant == utc(2024, 1, 15, 9)
    assert value.zone == ZoneIdentifier.utc()
    assert not value.date_only


def test_parse_zoned():
    value = parse_time_value("20240715T100000", {"TZID": "Europe/Berlin"}, resolver)
    assert value.instant == utc(2024, 7, 15, 8)
    assert value.zone == ZoneIdentifier.iana("Europe/Berlin")
    assert value.local().replace(tzinfo=None) == dt.datetime(2024, 7, 15, 10)

    value = parse_time_value("20240715T100000", {"TZID": "Tokyo Standard Time"}, resolver)
    assert value.instant == utc(2024, 7, 15, 1)
    assert value.zone == ZoneIdentifier.iana("Asia/Tokyo")


def test_parse_floating():
    value = parse_time_value("20240115T100000", {}, resolver)
    assert value.instant == utc(2024, 1, 15, 9)
    assert value.zone is None


def test_parse_enclosing_tzid():
    value = parse_time_value("20240115T100000", {}, resolver, stack_tzid="Asia/Tokyo")
    assert value.instant == utc(2024, 1, 15, 1)


def test_parse_date():
    value = parse_time_value("20240115", {}, resolver)
    assert value.date_only
    assert value.date() == dt.date(2024, 1, 15)
    assert value.instant == utc(2024, 1, 14, 23)
    assert value.date_key() == "2024-01-15"

    value = parse_time_value("20240115T000000", {"VALUE": "DATE"}, resolver)
    assert value.date_only
    assert value.date() == dt.date(2024, 1, 15)


def test_parse_hour_24():
    value = parse_time_value("20241231T240000Z", {}, resolver)
    assert value.instant == utc(2025, 1, 1)


def test_parse_not_a_date():
    assert parse_time_value("tomorrow", {}, resolver) == "tomorrow"
    assert parse_time_value("20240230T100000", {}, resolver) == "20240230T100000"
    assert parse_time_value("20241301", {}, resolver) == "20241301"


def test_parse_unresolved_tzid():
    diagnostics = Diagnostics()
    value = parse_time_value("20240115T100000", {"TZID": "Mars/Olympus Mons"}, resolver, None, diagnostics, 12)
    assert value.instant == utc(2024, 1, 15, 9)
    assert value.zone == ZoneIdentifier.unresolved("Mars/Olympus Mons")
    assert diagnostics.codes() == ["unresolved-timezone"]
    assert diagnostics.items[0].line_number == 12


def test_vendor_tzid():
    assert fix_vendor_tzid({"TZID": "tzone"}, "//Microsoft/Custom:20240101T100000") == (
        {"TZID": "tzone://Microsoft/Custom"},
        "20240101T100000",
    )
    assert fix_vendor_tzid({"TZID": "Europe/Berlin"}, "20240101T100000") == (
        {"TZID": "Europe/Berlin"},
        "20240101T100000",
    )

    value = parse_time_value("//Microsoft/Custom:20240101T100000", {"TZID": "tzone"}, resolver)
    assert value.instant == utc(2024, 1, 1, 9)
    assert value.zone == ZoneIdentifier.iana("Europe/Berlin")


def test_string_to_date():
    assert string_to_date("20240115") == dt.date(2024, 1, 15)
    assert string_to_date("20240115T100000Z") == dt.date(2024, 1, 15)
    assert string_to_date("2024-01-15") is None
    assert string_to_date("20240230") is None


def test_keys_use_the_values_own_zone():
    late_evening = parse_time_value("20240115T233000", {"TZID": "Europe/Berlin"}, resolver)
    assert late_evening.date_key() == "2024-01-15"
    assert late_evening.instant_key() == "2024-01-15T22:30:00Z"

    early_morning = parse_time_value("20240116T070000", {"TZID": "Asia/Tokyo"}, resolver)
    assert early_morning.date_key() == "2024-01-16"
    assert early_morning.instant_key() == "2024-01-15T22:00:00Z"


def test_time_value_equality():
    tokyo = pytz.timezone("Asia/Tokyo")
    a = TimeValue(utc(2024, 1, 15, 9))
    b = TimeValue(tokyo.localize(dt.datetime(2024, 1, 15, 18)), ZoneIdentifier.iana("Asia/Tokyo"), False, tokyo)
    assert a == b
    assert hash(a) == hash(b)
    assert a < TimeValue(utc(2024, 1, 15, 10))

    day = TimeValue.for_day(dt.date(2024, 1, 15), pytz.utc)
    assert day != TimeValue(utc(2024, 1, 15))

    with pytest.raises(ValueError):
        TimeValue(dt.datetime(2024, 1, 15))


def test_shift_date_only_across_dst():
    day = TimeValue.for_day(dt.date(2024, 3, 30), berlin)
    next_day = day.shift(dt.timedelta(days=1))
    assert next_day.date_only
    assert next_day.date() == dt.date(2024, 3, 31)
    assert next_day.local().time() == dt.time()
    assert next_day.instant - day.instant == dt.timedelta(hours=23)

    assert not day.shift(dt.timedelta(hours=12)).date_only


def test_isoformat():
    assert TimeValue.for_day(dt.date(2024, 1, 15), berlin).isoformat() == "2024-01-15"
    value = parse_time_value("20240715T100000", {"TZID": "Europe/Berlin"}, resolver)
    assert value.isoformat() == "2024-07-15T10:00:00+02:00"
    assert repr(value) == "<TimeValue 2024-07-15T10:00:00+02:00 Europe/Berlin>"


def test_parse_duration():
    assert parse_duration("PT1H") == dt.timedelta(hours=1)
    assert parse_duration("P1W") == dt.timedelta(weeks=1)
    assert parse_duration("P1DT2H30M") == dt.timedelta(days=1, hours=2, minutes=30)
    assert parse_duration("-PT15M") == dt.timedelta(minutes=-15)
    assert parse_duration("+P2D") == dt.timedelta(days=2)
    assert parse_duration("pt30s") == dt.timedelta(seconds=30)


def test_parse_malformed_duration():
    assert parse_duration("P") is None
    assert parse_duration("PT") is None
    assert parse_duration("") is None
    assert parse_duration(None) is None
    assert parse_duration("1H") is None
    assert parse_duration("P1HT2M") is None
    assert parse_duration("PT1X") is None


def test_timedelta_to_string():
    assert timedelta_to_string(dt.timedelta(days=1, hours=2)) == "P1DT2H"
    assert timedelta_to_string(dt.timedelta(minutes=-15)) == "-PT15M"
    assert timedelta_to_string(dt.timedelta(0)) == "PT0S"
    assert timedelta_to_string(dt.timedelta(days=3)) == "P3D"


def test_text_forms():
    assert date_to_string(dt.date(2024, 1, 5)) == "20240105"
    assert datetime_to_string(dt.datetime(2024, 1, 5, 9, 30)) == "20240105T093000"
    assert datetime_to_string(berlin.localize(dt.datetime(2024, 1, 5, 10)), convert_to_utc=True) == "20240105T090000Z"
    assert delta_to_offset(dt.timedelta(hours=-5)) == "-0500"
    assert delta_to_offset(dt.timedelta(hours=5, minutes=30)) == "+0530"

    assert time_value_to_string(TimeValue.for_day(dt.date(2024, 1, 5), berlin)) == "20240105"
    assert time_value_to_string(parse_time_value("20240105T100000", {}, resolver)) == "20240105T090000Z"
