"""
Проверка соответствия плейсхолдеров шаблона и переданных аргументов.

Выполняется до токенизации, чтобы не делать частичной работы
над заведомо некорректным вызовом.
"""

from __future__ import annotations

from typing import Sequence

from .errors import ValidationError
from .lexer import iter_chunks, match_placeholder


def count_placeholders(template: str) -> int:
    """
    Считает плейсхолдеры в шаблоне теми же правилами, что и лексер.

    Скобки блоков не считаются.
    """
    count = 0
    for _, chunk in iter_chunks(template):
        pos = 0
        while pos < len(chunk):
            match = match_placeholder(chunk, pos)
            if match is None:
                pos += 1
                continue
            count += 1
            pos = match[1]
    return count


def validate_arguments(template: str, args: Sequence) -> int:
    """
    Проверяет, что аргументов ровно столько, сколько плейсхолдеров.

    Returns:
        Число плейсхолдеров

    Raises:
        ValidationError: При несовпадении количества
    """
    expected = count_placeholders(template)
    if expected != len(args):
        raise ValidationError(template, expected, len(args))
    return expected


__all__ = ["count_placeholders", "validate_arguments"]
