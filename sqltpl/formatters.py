"""
Форматтеры значений для плейсхолдеров.

Каждому виду плейсхолдера соответствует свой форматтер; выбор делается
только по объявленному виду, а допустимость аргумента проверяется по его
ValueKind.

Экранирование строк — ручная вставка обратных слэшей, а не проверенное
драйвером SQL-экранирование. Для защиты от инъекций передавайте escaper
драйвера или используйте связывание параметров.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, List, Optional

from .config.model import CompileOptions, DEFAULT_OPTIONS, NumericCoercion
from .errors import ArgumentTypeError, ArgumentValueError
from .tokens import PlaceholderKind
from .values import ValueKind, classify, describe, list_items

NULL = "NULL"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# Числовой префикс строки (как у intval/floatval)
_NUMERIC_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_PREFIX = re.compile(r"\s*[+-]?\d+")
_STRICT_INTEGER = re.compile(r"\s*[+-]?\d+\s*")
_STRICT_FLOAT = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*")

# Обратная кавычка и управляющие символы в идентификаторах
_IDENT_FORBIDDEN = re.compile(r"[`\x00-\x1f\x7f]")

Escaper = Callable[[str], str]


def escape_string(text: str) -> str:
    """Экранирует обратные слэши и одинарные кавычки вставкой обратного слэша."""
    return text.replace("\\", "\\\\").replace("'", "\\'")


def int_text(value: int) -> str:
    """Десятичная запись int; слишком длинные числа — ArgumentValueError."""
    try:
        return str(value)
    except ValueError as e:
        raise ArgumentValueError("integer is too large to render") from e


def float_text(value: float) -> str:
    """Кратчайшее десятичное представление float."""
    if not math.isfinite(value):
        raise ArgumentValueError(f"non-finite float {value!r} cannot be rendered")
    return repr(value)


class ValueFormatter:
    """
    Набор форматтеров для пяти видов плейсхолдеров.

    Объект не хранит состояния между вызовами и может разделяться потоками.
    """

    def __init__(self, options: CompileOptions = DEFAULT_OPTIONS, escaper: Optional[Escaper] = None):
        self.options = options
        self.escaper = escaper or escape_string

    def format(self, kind: PlaceholderKind, value: Any) -> str:
        """
        Форматирует аргумент согласно объявленному виду плейсхолдера.

        Raises:
            ArgumentTypeError: Вид аргумента не допускается плейсхолдером
            ArgumentValueError: Значение нельзя отрендерить
        """
        if kind is PlaceholderKind.GENERIC:
            return self.format_generic(value)
        elif kind is PlaceholderKind.INTEGER:
            return self.format_integer(value)
        elif kind is PlaceholderKind.FLOAT:
            return self.format_float(value)
        elif kind is PlaceholderKind.IDENTIFIER:
            return self.format_identifier(value)
        elif kind is PlaceholderKind.ARRAY:
            return self.format_array(value)
        else:
            raise ValueError(f"Unknown placeholder kind: {kind}")

    # ---- ? ----

    def format_generic(self, value: Any) -> str:
        kind = classify(value)

        if kind is ValueKind.NULL:
            return NULL
        if kind is ValueKind.BOOL:
            return "1" if value else "0"
        if kind is ValueKind.INT:
            return int_text(value)
        if kind is ValueKind.FLOAT:
            return float_text(value)
        if kind is ValueKind.STRING:
            return self.quote_string(value)

        raise ArgumentTypeError(f"{describe(value)} is not allowed for a generic placeholder")

    def quote_string(self, value: str) -> str:
        return "'" + self.escaper(value) + "'"

    # ---- ?d ----

    def format_integer(self, value: Any) -> str:
        kind = classify(value)

        if kind is ValueKind.NULL:
            return NULL
        if kind is ValueKind.BOOL:
            return "1" if value else "0"
        if kind is ValueKind.INT:
            return str(self._fit_int64(value))
        if kind is ValueKind.FLOAT:
            if not math.isfinite(value):
                raise ArgumentValueError(f"non-finite float {value!r} cannot be converted to integer")
            return str(self._fit_int64(int(value)))
        if kind is ValueKind.STRING:
            return str(self._fit_int64(self._parse_int(value)))

        raise ArgumentTypeError(f"{describe(value)} is not allowed for an integer placeholder")

    def _parse_int(self, text: str) -> int:
        if self.options.numeric_coercion is NumericCoercion.STRICT:
            if not _STRICT_INTEGER.fullmatch(text):
                raise ArgumentValueError(f"{text!r} is not an integer")
            return self._digits_to_int(text)

        match = _NUMERIC_PREFIX.match(text)
        if match is None:
            return 0
        number = match.group(0)
        if _INTEGER_PREFIX.fullmatch(number):
            return self._digits_to_int(number)
        parsed = float(number)
        if not math.isfinite(parsed):
            return INT64_MAX if parsed > 0 else INT64_MIN
        return int(parsed)

    @staticmethod
    def _digits_to_int(text: str) -> int:
        # больше 19 значащих цифр заведомо вне int64; int() на них не вызываем
        body = text.strip()
        negative = body.startswith("-")
        digits = body.lstrip("+-").lstrip("0")
        if len(digits) > 19:
            return INT64_MIN - 1 if negative else INT64_MAX + 1
        number = int(digits or "0")
        return -number if negative else number

    def _fit_int64(self, number: int) -> int:
        if INT64_MIN <= number <= INT64_MAX:
            return number
        if self.options.numeric_coercion is NumericCoercion.STRICT:
            raise ArgumentValueError("integer is out of 64-bit integer range")
        return INT64_MAX if number > 0 else INT64_MIN

    # ---- ?f ----

    def format_float(self, value: Any) -> str:
        kind = classify(value)

        if kind is ValueKind.NULL:
            return NULL
        if kind in (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT):
            try:
                number = float(value)
            except OverflowError as e:
                raise ArgumentValueError("integer is out of float range") from e
            return float_text(number)
        if kind is ValueKind.STRING:
            return float_text(self._parse_float(value))

        raise ArgumentTypeError(f"{describe(value)} is not allowed for a float placeholder")

    def _parse_float(self, text: str) -> float:
        if self.options.numeric_coercion is NumericCoercion.STRICT:
            if not _STRICT_FLOAT.fullmatch(text):
                raise ArgumentValueError(f"{text!r} is not a number")
            return float(text)

        match = _NUMERIC_PREFIX.match(text)
        return float(match.group(0)) if match else 0.0

    # ---- ?# ----

    def format_identifier(self, value: Any) -> str:
        kind = classify(value)

        if kind is ValueKind.STRING:
            return self.quote_identifier(value)
        if kind is ValueKind.LIST:
            names: List[str] = []
            for item in list_items(value):
                if classify(item) is not ValueKind.STRING:
                    raise ArgumentTypeError(f"identifier list may contain only strings, got {describe(item)}")
                names.append(self.quote_identifier(item))
            return ", ".join(names)

        raise ArgumentTypeError(f"{describe(value)} is not allowed for an identifier placeholder")

    def quote_identifier(self, name: str) -> str:
        if self.options.validate_identifiers:
            if not name:
                raise ArgumentValueError("empty identifier")
            if _IDENT_FORBIDDEN.search(name):
                raise ArgumentValueError(f"identifier {name!r} contains a backtick or control character")
        return f"`{name}`"

    # ---- ?a ----

    def format_array(self, value: Any) -> str:
        kind = classify(value)

        if kind is ValueKind.LIST:
            return ", ".join(self.format_generic(item) for item in list_items(value))
        if kind is ValueKind.ASSOC:
            pairs = [
                f"{self.quote_identifier(str(key))} = {self.format_generic(item)}"
                for key, item in value.items()
            ]
            return ", ".join(pairs)

        raise ArgumentTypeError(f"only a list or a mapping is allowed for an array placeholder, got {describe(value)}")


__all__ = ["ValueFormatter", "escape_string", "float_text", "NULL", "INT64_MIN", "INT64_MAX"]
