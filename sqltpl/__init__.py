"""
sqltpl — компилятор параметризованных SQL-фрагментов.

Подставляет аргументы в типизированные плейсхолдеры шаблона
(?, ?d, ?f, ?#, ?a) и опускает условные блоки { ... }, в которые
передан маркер skip().
"""

from .builder import QueryBuilder, compile, skip
from .config import CompileOptions, NumericCoercion, SkipPolicy, DEFAULT_OPTIONS, load_options
from .errors import (
    SqlTplError,
    ValidationError,
    TemplateSyntaxError,
    ArgumentTypeError,
    ArgumentValueError,
    ConfigLoadError,
)
from .values import SKIP, SkipMarker

__all__ = [
    # Основной API
    "compile",
    "skip",
    "QueryBuilder",
    "SKIP",
    "SkipMarker",

    # Опции
    "CompileOptions",
    "NumericCoercion",
    "SkipPolicy",
    "DEFAULT_OPTIONS",
    "load_options",

    # Исключения
    "SqlTplError",
    "ValidationError",
    "TemplateSyntaxError",
    "ArgumentTypeError",
    "ArgumentValueError",
    "ConfigLoadError",
]
