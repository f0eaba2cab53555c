import datetime as dt

import pytest
import pytz

from icalx import DEFAULT_ALIAS_TABLE, LegacyAliasTable, ParserConfig, TimezoneResolver, ZoneIdentifier, get_resolver
from icalx.timezones import (
    TimezoneDatabase,
    localize_wall,
    minutes_to_etc_zone,
    minutes_to_offset,
    normalize_wall_parts,
    offset_label_to_minutes,
)

from .common import one_hour, utc


@pytest.fixture
def resolver():
    return TimezoneResolver(local_zone="Europe/Berlin")


def test_offset_label_to_minutes():
    assert offset_label_to_minutes("+05:30") == 330
    assert offset_label_to_minutes("-0400") == -240
    assert offset_label_to_minutes("UTC+2") == 120
    assert offset_label_to_minutes("GMT-03:30") == -210
    assert offset_label_to_minutes("(UTC+01:00) Amsterdam, Berlin") == 60
    assert offset_label_to_minutes("(GMT)") == 0
    assert offset_label_to_minutes("UTC") == 0
    assert offset_label_to_minutes("+25:00") is None
    assert offset_label_to_minutes("Europe/Berlin") is None


def test_offset_formatting():
    assert minutes_to_offset(330) == "+05:30"
    assert minutes_to_offset(-240) == "-04:00"
    assert minutes_to_offset(0) == "+00:00"

    # Etc names count the other way round
    assert minutes_to_etc_zone(120) == "Etc/GMT-2"
    assert minutes_to_etc_zone(-300) == "Etc/GMT+5"
    assert minutes_to_etc_zone(0) == "Etc/GMT"
    assert minutes_to_etc_zone(330) is None


def test_normalize_wall_parts():
    assert normalize_wall_parts(2024, 12, 31, 24, 0, 0) == dt.datetime(2025, 1, 1)
    assert normalize_wall_parts(2016, 12, 31, 23, 59, 60) == dt.datetime(2016, 12, 31, 23, 59, 59)
    with pytest.raises(ValueError):
        normalize_wall_parts(2024, 2, 30)


def test_localize_wall():
    berlin = pytz.timezone("Europe/Berlin")
    # spring forward: 02:30 does not exist and moves to 03:30 CEST
    assert localize_wall(dt.datetime(2024, 3, 31, 2, 30), berlin) == utc(2024, 3, 31, 1, 30)
    # fall back: 02:30 happens twice, the first one is taken
    assert localize_wall(dt.datetime(2024, 10, 27, 2, 30), berlin) == utc(2024, 10, 27, 0, 30)
    assert localize_wall(dt.datetime(2024, 1, 1, 12), pytz.FixedOffset(330)) == utc(2024, 1, 1, 6, 30)


def test_resolve_iana(resolver):
    assert resolver.resolve("Europe/Berlin").iana == "Europe/Berlin"
    assert resolver.resolve('"America/New_York"').iana == "America/New_York"
    assert resolver.resolve("UTC").iana == "Etc/UTC"
    assert resolver.resolve("Asia/Yangon").iana == "Asia/Rangoon"


def test_resolve_windows_names(resolver):
    assert resolver.resolve("W. Europe Standard Time").iana == "Europe/Berlin"
    assert resolver.resolve("Pacific Standard Time").iana == "America/Los_Angeles"
    assert resolver.resolve("Tokyo Standard Time").iana == "Asia/Tokyo"


def test_resolve_display_labels(resolver):
    label = "(UTC+01:00) Amsterdam, Berlin, Bern, Rome, Stockholm, Vienna"
    assert resolver.resolve(label).iana == "Europe/Berlin"
    assert resolver.resolve("(GMT+01:00) Amsterdam, Berlin, Bern, Rome, Stockholm, Vienna").iana == "Europe/Berlin"
    # localized labels are matched on their first segment
    assert resolver.resolve("(UTC+01:00) Amsterdam, Berlijn, Bern, Rome, Stockholm, Wenen").iana == "Europe/Berlin"


def test_resolve_offsets(resolver):
    resolved = resolver.resolve("(UTC+05:30) Some Unknown City")
    assert resolved.iana is None
    assert resolved.offset_minutes == 330
    assert resolved.offset == "+05:30"
    assert resolved.etc_label is None
    assert resolved.zone_identifier() == ZoneIdentifier.offset(330)

    resolved = resolver.resolve("+02:00")
    assert resolved.offset_minutes == 120
    assert resolved.etc_label == "Etc/GMT-2"

    assert resolver.resolve("UTC-4").etc_label == "Etc/GMT+4"


def test_resolve_vendor_placeholders(resolver):
    assert resolver.resolve("tzone://Microsoft/Custom").iana == "Europe/Berlin"
    assert resolver.resolve("Customized Time Zone 1").iana == "Europe/Berlin"
    assert resolver.resolve("(no TZ description)").iana == "Europe/Berlin"

    offset_resolver = TimezoneResolver(local_zone="+05:30")
    assert offset_resolver.resolve("tzone://Microsoft/Custom").offset_minutes == 330


def test_resolve_unresolved(resolver):
    resolved = resolver.resolve("Mars/Olympus Mons")
    assert not resolved.is_resolved
    assert resolved.zone_identifier() == ZoneIdentifier.unresolved("Mars/Olympus Mons")
    assert not resolver.resolve("").is_resolved
    assert not resolver.resolve(None).is_resolved


def test_resolve_idempotent(resolver):
    labels = [
        "Europe/Berlin",
        "W. Europe Standard Time",
        "(UTC+01:00) Amsterdam, Berlin, Bern, Rome, Stockholm, Vienna",
        "tzone://Microsoft/Custom",
        "Etc/GMT+5",
    ]
    for label in labels:
        first = resolver.resolve(label)
        assert resolver.resolve(first.original) == first
        assert resolver.resolve(first.iana).iana == first.iana

    assert resolver.resolve("W. Europe Standard Time") is resolver.resolve("W. Europe Standard Time")


def test_zone_identifier():
    assert ZoneIdentifier.iana("UTC") == ZoneIdentifier.utc()
    assert ZoneIdentifier.utc().is_utc
    assert ZoneIdentifier.offset(0).is_utc
    assert not ZoneIdentifier.iana("Europe/Berlin").is_utc
    assert ZoneIdentifier.offset(-210).label == "-03:30"
    assert str(ZoneIdentifier.iana("Europe/Berlin")) == "Europe/Berlin"


def test_local_zone():
    assert TimezoneResolver(local_zone="Asia/Tokyo").local_zone == ZoneIdentifier.iana("Asia/Tokyo")
    assert TimezoneResolver(local_zone="+05:30").local_zone == ZoneIdentifier.offset(330)
    assert TimezoneResolver(local_zone="UTC").local_tzinfo is pytz.utc

    guessed = TimezoneResolver().local_zone
    assert guessed.kind in ("iana", "offset")


def test_tzinfo_for(resolver):
    assert resolver.tzinfo_for("Asia/Tokyo") is pytz.timezone("Asia/Tokyo")
    assert resolver.tzinfo_for(ZoneIdentifier.offset(330)).utcoffset(None) == dt.timedelta(minutes=330)
    # unresolved labels fall back to the local zone
    assert resolver.tzinfo_for("Mars/Olympus Mons") is pytz.timezone("Europe/Berlin")
    assert resolver.tzinfo_for(None) is pytz.timezone("Europe/Berlin")


def test_legacy_labels(resolver):
    assert resolver.is_valid_zone_identifier("Europe/Berlin")
    assert resolver.is_valid_zone_identifier("America/Nuuk")
    assert not resolver.is_valid_zone_identifier("W. Europe Standard Time")
    assert resolver.map_legacy_label("W. Europe Standard Time") == "Europe/Berlin"
    assert resolver.map_legacy_label("Nowhere Standard Time") is None


def test_custom_alias_table():
    table = LegacyAliasTable({"Head Office": "Asia/Tokyo"}, {"(UTC+09:00) Head Office": "Head Office"})
    resolver = TimezoneResolver(alias_table=table, local_zone="UTC")
    assert resolver.resolve("Head Office").iana == "Asia/Tokyo"
    assert resolver.resolve("(UTC+09:00) Head Office").iana == "Asia/Tokyo"
    # the bundled table is not consulted
    assert resolver.resolve("W. Europe Standard Time").iana is None

    with pytest.raises(TypeError):
        table.windows_zones["Other"] = "Europe/Paris"

    broken = LegacyAliasTable({}, {"(UTC+09:00) Head Office": "Head Office"})
    assert broken.unresolved_labels() == ["(UTC+09:00) Head Office"]
    assert DEFAULT_ALIAS_TABLE.unresolved_labels() == []


def test_link_alias(resolver):
    linked = resolver.link_alias("Office/Main", "Europe/Paris")
    assert linked.resolve("Office/Main").iana == "Europe/Paris"
    assert not resolver.resolve("Office/Main").is_resolved
    assert linked.local_zone == resolver.local_zone


def test_parse_local_time_as_instant(resolver):
    assert resolver.parse_local_time_as_instant(dt.datetime(2024, 7, 1, 10), "Europe/Berlin") == utc(2024, 7, 1, 8)
    assert resolver.parse_local_time_as_instant("20240101T100000", "Asia/Tokyo") == utc(2024, 1, 1, 1)
    # floating times use the local zone
    assert resolver.parse_local_time_as_instant(dt.datetime(2024, 1, 1, 10)) == utc(2024, 1, 1, 9)


def test_dst_gap_and_overlap(resolver):
    gap = resolver.parse_local_time_as_instant(dt.datetime(2024, 3, 31, 2, 30), "Europe/Berlin")
    assert gap == utc(2024, 3, 31, 1, 30)
    # after the gap on the wall clock
    assert gap.astimezone(pytz.timezone("Europe/Berlin")).hour == 3

    overlap = resolver.parse_local_time_as_instant(dt.datetime(2024, 10, 27, 2, 30), "Europe/Berlin")
    assert overlap == utc(2024, 10, 27, 0, 30)
    second = pytz.timezone("Europe/Berlin").localize(dt.datetime(2024, 10, 27, 2, 30), is_dst=False)
    assert overlap + one_hour == second


def test_format_instant_as_local_wall_time(resolver):
    assert resolver.format_instant_as_local_wall_time(utc(2024, 7, 1, 8), "Europe/Berlin") == "20240701T100000"
    assert resolver.format_instant_as_local_wall_time(utc(2024, 1, 1, 8), "+05:30") == "20240101T133000"
    assert resolver.format_instant_as_local_wall_time(utc(2024, 1, 1, 8)) == "20240101T090000"


def test_get_resolver_is_shared():
    assert get_resolver(local_zone="Europe/Berlin") is get_resolver(local_zone="Europe/Berlin")
    assert ParserConfig(local_zone="Europe/Berlin").resolver() is ParserConfig(local_zone="Europe/Berlin").resolver()
    assert get_resolver(local_zone="Asia/Tokyo") is not get_resolver(local_zone="Europe/Berlin")


def test_parser_config():
    config = ParserConfig.from_env({"ICALX_CHUNK_SIZE": "10", "ICALX_LOCAL_ZONE": "Asia/Tokyo"})
    assert config.chunk_size == 10
    assert config.local_zone == "Asia/Tokyo"
    assert ParserConfig.from_env({}) == ParserConfig()
    with pytest.raises(ValueError):
        ParserConfig(chunk_size=0)


def test_timezone_database():
    database = TimezoneDatabase()
    assert "Europe/Berlin" in database.zone_names()
    assert database.is_valid("UTC")
    assert not database.is_valid("")
    assert not database.is_valid("Mars/Olympus")
    assert database.get_zone("Etc/UTC") is pytz.utc
    assert database.instant_to_wall(utc(2024, 7, 1, 8), pytz.timezone("Europe/Berlin")) == dt.datetime(2024, 7, 1, 10)
    assert database.local_to_instant(dt.datetime(2024, 7, 1, 10), pytz.timezone("Europe/Berlin")) == utc(2024, 7, 1, 8)
    assert database.guess_host_local_zone({"TZ": ":Asia/Tokyo"}) == "Asia/Tokyo"
