"""
Лексические типы шаблона запроса.

Определяет виды плейсхолдеров, типы токенов и сам токен.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional


class PlaceholderKind(enum.Enum):
    """Объявленный тип плейсхолдера. Значение совпадает с его записью в шаблоне."""

    GENERIC = "?"        # скаляр: null/bool/int/float/string
    INTEGER = "?d"
    FLOAT = "?f"
    IDENTIFIER = "?#"    # идентификатор или список идентификаторов
    ARRAY = "?a"         # список значений или пары ключ/значение


# Суффикс после '?' → вид типизированного плейсхолдера
TYPED_SUFFIXES: Dict[str, PlaceholderKind] = {
    "d": PlaceholderKind.INTEGER,
    "f": PlaceholderKind.FLOAT,
    "a": PlaceholderKind.ARRAY,
    "#": PlaceholderKind.IDENTIFIER,
}

PLACEHOLDER_FORMS: Dict[str, PlaceholderKind] = {kind.value: kind for kind in PlaceholderKind}

BLOCK_OPEN = "{"
BLOCK_CLOSE = "}"
SEPARATOR = " "


class TokenType(enum.Enum):
    LITERAL = "LITERAL"
    PLACEHOLDER = "PLACEHOLDER"
    BLOCK_OPEN = "BLOCK_OPEN"
    BLOCK_CLOSE = "BLOCK_CLOSE"


@dataclass(frozen=True)
class Token:
    """
    Токен шаблона с позицией для диагностики ошибок.

    Attributes:
        type: Тип токена
        value: Исходный текст токена (для разделителя — пробел)
        position: Смещение в исходном шаблоне
        kind: Вид плейсхолдера (только для PLACEHOLDER)
    """
    type: TokenType
    value: str
    position: int
    kind: Optional[PlaceholderKind] = None

    @classmethod
    def literal(cls, text: str, position: int) -> "Token":
        return cls(TokenType.LITERAL, text, position)

    @classmethod
    def placeholder(cls, kind: PlaceholderKind, position: int) -> "Token":
        return cls(TokenType.PLACEHOLDER, kind.value, position, kind)

    @classmethod
    def brace(cls, char: str, position: int) -> "Token":
        token_type = TokenType.BLOCK_OPEN if char == BLOCK_OPEN else TokenType.BLOCK_CLOSE
        return cls(token_type, char, position)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, pos={self.position})"


__all__ = [
    "PlaceholderKind",
    "TYPED_SUFFIXES",
    "PLACEHOLDER_FORMS",
    "BLOCK_OPEN",
    "BLOCK_CLOSE",
    "SEPARATOR",
    "TokenType",
    "Token",
]
