class IcalError(Exception):
    def __init__(self, msg, line_number=None):
        super().__init__(msg)
        self.msg = msg
        self.line_number = line_number

    def __str__(self):
        if self.line_number is None:
            return repr(self.msg)
        return f"At line {self.line_number!s}: {self.msg!s}"


class ParseError(IcalError):
    def __init__(self, msg, line_number=None, *, inputs=None):
        super().__init__(msg, line_number)
        self.inputs = inputs


class DuplicatePropertyError(ParseError):
    pass


class RecurrenceError(IcalError):
    def __init__(self, msg, line_number=None, *, rfc_rule=None):
        super().__init__(msg, line_number)
        self.rfc_rule = rfc_rule

    def __str__(self):
        text = super().__str__()
        return text if self.rfc_rule is None else f"{text} ({self.rfc_rule})"


class ExpansionTypeError(IcalError, TypeError):
    pass


class ExpansionRangeError(IcalError, ValueError):
    pass
