from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class NumericCoercion(str, Enum):
    """Как приводить строки к числу для ?d / ?f."""
    LOOSE = "loose"    # числовой префикс, нечисловой текст → 0
    STRICT = "strict"  # строка целиком должна быть числом


class SkipPolicy(str, Enum):
    """Что делать с маркером пропуска вне условного блока."""
    ERROR = "error"
    OMIT = "omit"      # плейсхолдер выводится пустой строкой


@dataclass(frozen=True)
class CompileOptions:
    """
    Настройки компиляции шаблонов.

    Загружаются из sqltpl.yaml или передаются напрямую в QueryBuilder.
    """
    numeric_coercion: NumericCoercion = NumericCoercion.LOOSE
    skip_outside_block: SkipPolicy = SkipPolicy.ERROR
    # Отклонять идентификаторы с обратными кавычками и управляющими символами
    validate_identifiers: bool = True


DEFAULT_OPTIONS = CompileOptions()

__all__ = ["NumericCoercion", "SkipPolicy", "CompileOptions", "DEFAULT_OPTIONS"]
