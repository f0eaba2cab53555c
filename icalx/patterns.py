# Note that underscore is legal in names, Lotus Notes and some Google exports
# use it
patterns = {"name": r"[\w-]+", "safe_char": '[^";:]', "qsafe_char": '[^"]'}
# the combined Python string replacement and regex syntax is a little confusing;
# remember that {foobar} is replaced with patterns['foobar'], so for instance
# param_value is any number of qsafe_chars surrounded by double quotes or one
# or more safe_chars.

patterns["param_value"] = ' "{qsafe_char!s} * " | {safe_char!s} + '.format(**patterns)

# get a parameter, saving groups for name and value (value still needs parsing)
patterns["params_grouped"] = r"""
; ( {name!s} )
= ( {param_value!s} )
""".format(
    **patterns
)

# get a parameter and its value, without any saved groups
patterns["param"] = r"""
; (?: {name!s} ) = (?: {param_value!s} )
""".format(
    **patterns
)

# get a full content line, break it up into name, parameters, and value
patterns["line"] = r"""
^ (?P<name> {name!s})                     # name group
  (?P<params> (?: {param!s} )* )          # params group (may be empty)
: (?P<value> .* )$                        # value group
""".format(
    **patterns
)

# logical line regular expressions
patterns["lineend"] = r"(?:\r\n|\r|\n|$)"
patterns["wrap"] = rf"{patterns['lineend']!s} [\t ]"
patterns["logicallines"] = r"""
(
   (?: [^\r\n] | {wrap!s} )*
   {lineend!s}
)
""".format(
    **patterns
)

patterns["wraporend"] = r"({wrap!s} | {lineend!s} )".format(**patterns)

# values
patterns["date"] = r"^(\d{4})(\d{2})(\d{2})$"
patterns["date_prefix"] = r"^(\d{4})(\d{2})(\d{2})"
patterns["date_time"] = r"^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z)?$"
patterns["duration_part"] = r"-?\d{1,10}[WDHMS]"
patterns["integer"] = r"^-?(?:0|[1-9]\d*)$"
patterns["decimal"] = r"^-?(?:0|[1-9]\d*)?\.\d+$"

# offsets: "+05:30", "-0400", "UTC+2"; parentheses are removed first
patterns["offset_label"] = r"^([+-])(\d{1,2})(?::?(\d{2}))?$"
patterns["embedded_offset"] = r"([+-]\d{1,2}:\d{2})"
patterns["offset_prefix"] = r"^(?:utc|gmt)\s*"
