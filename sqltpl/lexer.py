"""
Лексический анализатор шаблонов запросов.

Разбивает шаблон на фрагменты по пробельным символам и каждый фрагмент
превращает в последовательность токенов:
- Литералы (обычный текст SQL)
- Плейсхолдеры (?, ?d, ?f, ?#, ?a)
- Границы условных блоков ({ и })
После каждого фрагмента добавляется одиночный разделитель-пробел.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, List, Optional, Tuple

from .tokens import (
    BLOCK_CLOSE,
    BLOCK_OPEN,
    PLACEHOLDER_FORMS,
    SEPARATOR,
    TYPED_SUFFIXES,
    PlaceholderKind,
    Token,
)

logger = logging.getLogger(__name__)

_CHUNK_RE = re.compile(r"\S+")

_BRACES = (BLOCK_OPEN, BLOCK_CLOSE)


def match_placeholder(chunk: str, pos: int) -> Optional[Tuple[PlaceholderKind, int]]:
    """
    Пытается распознать плейсхолдер в позиции pos фрагмента.

    Фрагмент не содержит пробелов, поэтому «перед пробелом» для голого '?'
    означает «в конце фрагмента». '?' перед любым другим символом — литерал.

    Returns:
        Пара (вид плейсхолдера, позиция после него) или None
    """
    if chunk[pos] != "?":
        return None
    nxt = pos + 1
    if nxt == len(chunk):
        return PlaceholderKind.GENERIC, nxt
    kind = TYPED_SUFFIXES.get(chunk[nxt])
    if kind is not None:
        return kind, nxt + 1
    return None


def iter_chunks(template: str) -> Iterator[Tuple[int, str]]:
    """Фрагменты шаблона между пробельными символами вместе с их смещениями."""
    for match in _CHUNK_RE.finditer(template):
        yield match.start(), match.group(0)


class TemplateLexer:
    """
    Лексер шаблона запроса.

    Целые фрагменты, совпадающие с плейсхолдером или скобкой, выдаются
    напрямую; остальные сканируются посимвольно, что позволяет распознавать
    плейсхолдеры, приклеенные к пунктуации, например `(?d,?d)`.
    """

    def tokenize(self, template: str) -> List[Token]:
        """
        Разбивает шаблон на токены.

        Args:
            template: Исходный шаблон запроса

        Returns:
            Упорядоченный список токенов (без EOF)
        """
        tokens: List[Token] = []

        for start, chunk in iter_chunks(template):
            kind = PLACEHOLDER_FORMS.get(chunk)
            if kind is not None:
                tokens.append(Token.placeholder(kind, start))
            elif chunk in _BRACES:
                tokens.append(Token.brace(chunk, start))
            else:
                tokens.extend(self._scan_chunk(chunk, start))

            tokens.append(Token.literal(SEPARATOR, start + len(chunk)))

        logger.debug("Tokenized template of length %d into %d tokens", len(template), len(tokens))
        return tokens

    def _scan_chunk(self, chunk: str, offset: int) -> List[Token]:
        """Посимвольный разбор фрагмента со встроенными плейсхолдерами или скобками."""
        tokens: List[Token] = []
        literal_start = 0
        pos = 0

        def flush(end: int) -> None:
            if end > literal_start:
                tokens.append(Token.literal(chunk[literal_start:end], offset + literal_start))

        while pos < len(chunk):
            char = chunk[pos]

            if char in _BRACES:
                flush(pos)
                tokens.append(Token.brace(char, offset + pos))
                pos += 1
                literal_start = pos
                continue

            match = match_placeholder(chunk, pos)
            if match is not None:
                kind, end = match
                flush(pos)
                tokens.append(Token.placeholder(kind, offset + pos))
                pos = end
                literal_start = pos
                continue

            pos += 1

        flush(pos)
        return tokens


def tokenize_template(template: str) -> List[Token]:
    """
    Удобная функция для токенизации шаблона.

    Args:
        template: Исходный шаблон запроса

    Returns:
        Список токенов
    """
    return TemplateLexer().tokenize(template)


__all__ = [
    "TemplateLexer",
    "match_placeholder",
    "iter_chunks",
    "tokenize_template",
]
