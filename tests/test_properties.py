from icalx.properties import (
    ParameterizedValue,
    decode_line,
    get_logical_lines,
    parse_value,
    split_parameters,
    text_value,
    unescape_text,
)


def test_get_logical_lines():
    text = "SUMMARY:Line 0 text\r\n , continued\r\n\tand more\r\nUID:1\r\n\r\nLOCATION:here"
    assert list(get_logical_lines(text)) == [
        ("SUMMARY:Line 0 text, continuedand more", 1),
        ("UID:1", 4),
        ("LOCATION:here", 6),
    ]


def test_get_logical_lines_bytes():
    assert list(get_logical_lines("SUMMARY:Grüße\n".encode("utf-8"))) == [("SUMMARY:Grüße", 1)]


def test_unescape_text():
    assert unescape_text("a\\,b\\;c\\nd\\\\e") == "a,b;c\nd\\e"
    assert unescape_text("keep \\x as is") == "keep \\x as is"
    assert unescape_text('"quoted"') == "quoted"
    assert unescape_text("trailing\\") == "trailing\\"


def test_parse_value():
    assert parse_value("TRUE") is True
    assert parse_value("FALSE") is False
    assert parse_value("5") == 5
    assert parse_value("-1.5") == -1.5
    assert parse_value('"Doe, Jane"') == "Doe, Jane"
    assert parse_value("Europe/Berlin") == "Europe/Berlin"


def test_split_parameters():
    assert split_parameters(';CN="Doe, Jane";ROLE=CHAIR') == ['CN="Doe, Jane"', "ROLE=CHAIR"]


def test_decode_line():
    prop = decode_line("attendee;CN=\"Doe, Jane\";ROLE=CHAIR:mailto:jane@example.com", 7)
    assert prop.name == "ATTENDEE"
    assert prop.params == {"CN": "Doe, Jane", "ROLE": "CHAIR"}
    assert prop.value == "mailto:jane@example.com"
    assert prop.line_number == 7


def test_decode_line_quoted_tzid():
    prop = decode_line('DTSTART;TZID="W. Europe Standard Time":20240101T100000')
    assert prop.params == {"TZID": "W. Europe Standard Time"}
    assert prop.value == "20240101T100000"

    # the quotes protect the colon of display labels
    prop = decode_line('DTSTART;TZID="(UTC+01:00) Amsterdam, Berlin":20240101T100000')
    assert prop.params == {"TZID": "(UTC+01:00) Amsterdam, Berlin"}
    assert prop.value == "20240101T100000"


def test_decode_line_invalid():
    assert decode_line("this is not a content line") is None
    assert decode_line(";NAME:value") is None


def test_text_value():
    assert text_value(decode_line("SUMMARY:a\\, b")) == "a, b"
    assert text_value(decode_line("SUMMARY;CHARSET=utf-8:plain")) == "plain"

    value = text_value(decode_line("SUMMARY;LANGUAGE=de:Treffen"))
    assert isinstance(value, ParameterizedValue)
    assert value.params == {"LANGUAGE": "de"}
    assert str(value) == "Treffen"
