from .model import CompileOptions, NumericCoercion, SkipPolicy, DEFAULT_OPTIONS
from .load import OPTIONS_FILE, options_from_dict, load_options, find_options, resolve_options
from .typed import load_typed

__all__ = [
    "CompileOptions",
    "NumericCoercion",
    "SkipPolicy",
    "DEFAULT_OPTIONS",
    "OPTIONS_FILE",
    "options_from_dict",
    "load_options",
    "find_options",
    "resolve_options",
    "load_typed",
]
