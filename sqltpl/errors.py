"""
Exception hierarchy for the SQL template compiler.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from SqlTplError.

Programming errors and bugs should NOT inherit from SqlTplError —
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class SqlTplError(Exception):
    """
    Base class for all user-facing errors in sqltpl.

    These errors indicate problems that the caller can fix:
    malformed templates, wrong arguments, broken options files.
    """
    pass


class ValidationError(SqlTplError, ValueError):
    """Число плейсхолдеров в шаблоне не совпадает с числом аргументов."""

    def __init__(self, template: str, expected: int, actual: int):
        self.template = template
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Placeholder/argument count mismatch in query '{template}': "
            f"{expected} placeholder(s), {actual} argument(s)"
        )


class TemplateSyntaxError(ValidationError):
    """Нарушена структура условных блоков (вложенный или лишний '{' / '}')."""

    def __init__(self, message: str, template: str, position: int):
        self.message = message
        self.template = template
        self.position = position
        # Счётчики здесь не применимы
        self.expected = self.actual = -1
        SqlTplError.__init__(self, f"{message} at position {position} in query '{template}'")


class ArgumentTypeError(SqlTplError, TypeError):
    """Аргумент недопустимого вида для плейсхолдера."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"argument #{index}: {message}"
        super().__init__(message)


class ArgumentValueError(SqlTplError, ValueError):
    """Аргумент допустимого вида, который нельзя отрендерить в SQL."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"argument #{index}: {message}"
        super().__init__(message)


class ConfigLoadError(SqlTplError, ValueError):
    """Ошибка типизированной загрузки опций с указанием пути поля."""
    pass


__all__ = [
    "SqlTplError",
    "ValidationError",
    "TemplateSyntaxError",
    "ArgumentTypeError",
    "ArgumentValueError",
    "ConfigLoadError",
]
