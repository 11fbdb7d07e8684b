"""
Фасад компилятора шаблонов.

Объединяет валидатор, лексер, сборщик блоков и форматтеры в один вызов:
compile(template, args) → Validator → Lexer → BlockAssembler → текст запроса.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, List, Optional, Sequence

from .assembler import BlockAssembler
from .config.model import CompileOptions, DEFAULT_OPTIONS
from .formatters import Escaper, ValueFormatter
from .lexer import TemplateLexer
from .report import CompileReport, TokenInfo, TokensReport
from .tokens import Token
from .validator import validate_arguments
from .values import SkipMarker, skip as _skip

logger = logging.getLogger(__name__)


class QueryBuilder:
    """
    Компилятор шаблонов запросов с фиксированными опциями.

    Неизменяем после создания; один экземпляр можно использовать
    из нескольких потоков.
    """

    def __init__(self, options: Optional[CompileOptions] = None, escaper: Optional[Escaper] = None):
        """
        Args:
            options: Опции компиляции (по умолчанию DEFAULT_OPTIONS)
            escaper: Функция экранирования тела строкового литерала,
                например escape_string драйвера БД
        """
        self.options = options or DEFAULT_OPTIONS
        self.escaper = escaper
        self._formatter = ValueFormatter(self.options, escaper)
        self._lexer = TemplateLexer()

    def build_query(self, template: str, args: Sequence[Any] = ()) -> str:
        """
        Компилирует шаблон с аргументами в текст SQL.

        Raises:
            ValidationError: Число плейсхолдеров не равно числу аргументов
            TemplateSyntaxError: Некорректная структура блоков
            ArgumentTypeError: Недопустимый вид аргумента
            ArgumentValueError: Значение нельзя отрендерить
        """
        sql, _ = self._compile(template, args)
        return sql

    def compile_with_report(self, template: str, args: Sequence[Any] = ()) -> CompileReport:
        """Компилирует шаблон и возвращает отчёт со статистикой подстановок."""
        sql, assembler = self._compile(template, args)
        return CompileReport(
            sql=sql,
            template=template,
            placeholders=assembler.stats.placeholders,
            arguments=len(args),
            blocks_emitted=assembler.stats.blocks_emitted,
            blocks_suppressed=assembler.stats.blocks_suppressed,
            options={k: getattr(v, "value", v) for k, v in dataclasses.asdict(self.options).items()},
        )

    def tokenize(self, template: str) -> List[Token]:
        return self._lexer.tokenize(template)

    def tokens_report(self, template: str) -> TokensReport:
        return TokensReport(
            template=template,
            tokens=[
                TokenInfo(
                    type=t.type.value,
                    value=t.value,
                    position=t.position,
                    kind=t.kind.value if t.kind else None,
                )
                for t in self.tokenize(template)
            ],
        )

    def skip(self) -> SkipMarker:
        return _skip()

    def _compile(self, template: str, args: Sequence[Any]):
        args = list(args)
        validate_arguments(template, args)
        tokens = self._lexer.tokenize(template)
        assembler = BlockAssembler(self._formatter, self.options, template)
        sql = assembler.assemble(tokens, args)
        logger.debug("Compiled query with %d argument(s): %s", len(args), sql)
        return sql, assembler


_DEFAULT_BUILDER = QueryBuilder()


def compile(template: str, args: Sequence[Any] = (), options: Optional[CompileOptions] = None) -> str:
    """
    Компилирует шаблон с аргументами в текст SQL.

    Args:
        template: Шаблон с плейсхолдерами ?, ?d, ?f, ?#, ?a и блоками { }
        args: Аргументы в порядке плейсхолдеров
        options: Опции компиляции (по умолчанию DEFAULT_OPTIONS)
    """
    builder = _DEFAULT_BUILDER if options is None else QueryBuilder(options)
    return builder.build_query(template, args)


def skip() -> SkipMarker:
    """Маркер пропуска условного блока."""
    return _skip()


__all__ = ["QueryBuilder", "compile", "skip"]
