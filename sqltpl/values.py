"""
Модель значений аргументов.

Аргументы компилятора — обычные Python-объекты. Модуль сопоставляет им
явный тег ValueKind, по которому форматтеры выбирают способ вывода,
и определяет маркер пропуска условного блока.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Вид аргумента."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    LIST = "list"      # упорядоченный список значений
    ASSOC = "assoc"    # список пар ключ/значение
    SKIP = "skip"      # маркер пропуска блока
    UNSUPPORTED = "unsupported"


# Виды, допустимые для обобщённого плейсхолдера `?` и элементов `?a`
SCALAR_KINDS = frozenset({
    ValueKind.NULL,
    ValueKind.BOOL,
    ValueKind.INT,
    ValueKind.FLOAT,
    ValueKind.STRING,
})

CONTAINER_KINDS = frozenset({ValueKind.LIST, ValueKind.ASSOC})


class SkipMarker:
    """
    Маркер пропуска условного блока.

    Существует ровно один экземпляр (SKIP); сравнение только по идентичности.
    """

    _instance: "SkipMarker | None" = None

    def __new__(cls) -> "SkipMarker":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SKIP"

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __reduce__(self):
        return (SkipMarker, ())

    def __copy__(self) -> "SkipMarker":
        return self

    def __deepcopy__(self, memo) -> "SkipMarker":
        return self


SKIP = SkipMarker()


def skip() -> SkipMarker:
    """Возвращает маркер пропуска; блок с таким аргументом не попадёт в запрос."""
    return SKIP


def is_skip(value: Any) -> bool:
    return value is SKIP


def is_associative(value: Mapping) -> bool:
    """
    Проверяет, является ли отображение ассоциативным.

    Отображение считается обычным списком, только если его ключи в порядке
    вставки образуют ряд 0, 1, ..., n-1.
    """
    for expected, key in enumerate(value.keys()):
        # bool — подкласс int, но ключ True не равен позиции 1 по смыслу
        if isinstance(key, bool) or not isinstance(key, int) or key != expected:
            return True
    return False


def classify(value: Any) -> ValueKind:
    """
    Определяет вид аргумента.

    bool проверяется раньше int, так как является его подклассом.
    """
    if value is None:
        return ValueKind.NULL
    if value is SKIP:
        return ValueKind.SKIP
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.ASSOC if is_associative(value) else ValueKind.LIST
    return ValueKind.UNSUPPORTED


def list_items(value: Any) -> list:
    """Элементы значения вида LIST в порядке следования."""
    if isinstance(value, Mapping):
        return list(value.values())
    return list(value)


def describe(value: Any) -> str:
    """Короткое имя вида аргумента для сообщений об ошибках."""
    kind = classify(value)
    if kind is ValueKind.UNSUPPORTED:
        return type(value).__name__
    return kind.value


__all__ = [
    "ValueKind",
    "SCALAR_KINDS",
    "CONTAINER_KINDS",
    "SkipMarker",
    "SKIP",
    "skip",
    "is_skip",
    "is_associative",
    "classify",
    "list_items",
    "describe",
]
