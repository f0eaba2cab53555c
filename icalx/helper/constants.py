class Character:
    """Space and Line-break characters"""

    CR = "\r"
    LF = "\n"
    CRLF = CR + LF
    SPACE = " "
    TAB = "\t"
    SPACEORTAB = SPACE + TAB
    DQUOTE = '"'
    BACKSLASH = "\\"


# DQUOTE included to work around iCal's penchant for backslash escaping it,
# although it isn't actually supposed to be escaped according to rfc5545 TEXT
ESCAPABLE_CHAR_LIST = '\\;,Nn"'

WEEKDAYS = "MO", "TU", "WE", "TH", "FR", "SA", "SU"
FREQUENCIES = ("YEARLY", "MONTHLY", "WEEKLY", "DAILY", "HOURLY", "MINUTELY", "SECONDLY")

UTC_ZONE = "Etc/UTC"
UTC_ALIASES = frozenset(("UTC", "Etc/UTC", "Etc/GMT", "GMT", "Etc/Universal", "Universal", "Etc/Zulu", "Zulu", "Z"))

# TZID values written by Exchange/Outlook that name no real zone
VENDOR_PLACEHOLDERS = ("tzone://Microsoft/Custom", "(no TZ description)")
VENDOR_PREFIXES = ("Customized Time Zone", "tzone://Microsoft/")

RECURRING_TYPES = ("VEVENT", "VTODO", "VJOURNAL")
ALARM_PARENTS = ("VEVENT", "VTODO")
