from .config import ParserConfig, logger
from .constants import Character
from .converter import num_to_digits, to_unicode, to_vname
from .diagnostics import Diagnostic, Diagnostics
from .funcs import new_uid, split_list, strip_quotes
