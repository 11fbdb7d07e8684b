"""
Сборщик запроса из токенов.

Конечный автомат с двумя состояниями:
- Outside: текст пишется в основной результат
- Inside(buffer, suppressed): текст копится в буфере условного блока

Блок выводится при закрытии, только если ни один его плейсхолдер
не получил маркер пропуска. Аргументы потребляются строго слева направо,
в том числе внутри подавленного блока.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from .config.model import CompileOptions, DEFAULT_OPTIONS, SkipPolicy
from .errors import ArgumentTypeError, ArgumentValueError, TemplateSyntaxError
from .formatters import ValueFormatter
from .tokens import Token, TokenType
from .values import is_skip

logger = logging.getLogger(__name__)


@dataclass
class Outside:
    """Вне условного блока."""
    pass


@dataclass
class Inside:
    """Внутри условного блока."""
    start: int                       # позиция '{' в шаблоне
    buffer: List[str] = field(default_factory=list)
    suppressed: bool = False


State = Union[Outside, Inside]


@dataclass
class AssemblyStats:
    """Сводка по одной сборке."""
    placeholders: int = 0
    blocks_emitted: int = 0
    blocks_suppressed: int = 0


class BlockAssembler:
    """
    Проходит по токенам, подставляет аргументы и опускает подавленные блоки.

    Экземпляр рассчитан на одну сборку: состояние живёт только в assemble().
    """

    def __init__(
        self,
        formatter: ValueFormatter,
        options: CompileOptions = DEFAULT_OPTIONS,
        template: str = "",
    ):
        self.formatter = formatter
        self.options = options
        self.template = template
        self.stats = AssemblyStats()

    def assemble(self, tokens: Sequence[Token], args: Sequence[Any]) -> str:
        """
        Собирает итоговый текст.

        Args:
            tokens: Токены шаблона
            args: Аргументы в порядке плейсхолдеров (число уже проверено)

        Returns:
            Текст запроса без завершающего разделителя

        Raises:
            TemplateSyntaxError: Вложенный блок или '}' без открывающей скобки
            ArgumentTypeError, ArgumentValueError: Из форматтеров
        """
        result: List[str] = []
        state: State = Outside()
        arg_index = 0

        for token in tokens:
            if token.type is TokenType.BLOCK_OPEN:
                if isinstance(state, Inside):
                    raise TemplateSyntaxError("Nested conditional block", self.template, token.position)
                state = Inside(start=token.position)
                continue

            if token.type is TokenType.BLOCK_CLOSE:
                if isinstance(state, Outside):
                    raise TemplateSyntaxError("Unmatched '}'", self.template, token.position)
                self._close_block(state, result)
                state = Outside()
                continue

            if token.type is TokenType.LITERAL:
                text: Optional[str] = token.value
            else:
                text = self._substitute(token, args[arg_index], arg_index, state)
                arg_index += 1

            target = state.buffer if isinstance(state, Inside) else result
            if text:
                target.append(text)

        if isinstance(state, Inside):
            # Незакрытый блок закрывается в конце шаблона
            logger.debug("Implicitly closing block opened at %d", state.start)
            self._close_block(state, result)

        return "".join(result).rstrip()

    def _substitute(self, token: Token, value: Any, index: int, state: State) -> Optional[str]:
        """Текст для плейсхолдера; None — ничего не выводить."""
        self.stats.placeholders += 1

        if is_skip(value):
            if isinstance(state, Inside):
                state.suppressed = True
                return None
            if self.options.skip_outside_block is SkipPolicy.OMIT:
                return None
            raise ArgumentTypeError("skip marker used outside of a conditional block", index)

        if token.kind is None:
            raise ValueError(f"Placeholder token without kind at position {token.position}")
        try:
            return self.formatter.format(token.kind, value)
        except (ArgumentTypeError, ArgumentValueError) as e:
            if e.index is not None:
                raise
            raise type(e)(str(e), index) from e

    def _close_block(self, state: Inside, result: List[str]) -> None:
        if state.suppressed:
            self.stats.blocks_suppressed += 1
            logger.debug("Block at %d suppressed", state.start)
            return
        self.stats.blocks_emitted += 1
        result.extend(state.buffer)


__all__ = ["BlockAssembler", "AssemblyStats", "Outside", "Inside"]
