from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, List, Optional

from .builder import QueryBuilder
from .config import resolve_options
from .errors import SqlTplError
from .values import SKIP
from .version import tool_version

# Объект аргументов JSON, обозначающий маркер пропуска
SKIP_JSON = {"$skip": True}


def _setup_logging() -> None:
    level = logging.DEBUG if os.environ.get("SQLTPL_DEBUG") else logging.WARNING
    log = logging.getLogger("sqltpl")
    log.setLevel(level)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sqltpl",
        description="SQL template compiler (typed placeholders and conditional blocks)",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_template(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "template",
            metavar="TEXT|@FILE|-",
            help="шаблон запроса: прямая строка, @file для чтения из файла или - для stdin",
        )

    # Общие аргументы для compile/report
    def add_common(sp: argparse.ArgumentParser) -> None:
        add_template(sp)
        sp.add_argument(
            "--args",
            metavar="JSON|@FILE|-",
            help='JSON-массив аргументов; {"$skip": true} означает skip()',
        )
        sp.add_argument(
            "--config",
            type=Path,
            help="файл опций (по умолчанию ./sqltpl.yaml, если есть)",
        )

    sp_compile = sub.add_parser("compile", help="Скомпилированный SQL (не JSON)")
    add_common(sp_compile)

    sp_report = sub.add_parser("report", help="JSON-отчёт: SQL и статистика подстановок")
    add_common(sp_report)

    sp_tokens = sub.add_parser("tokens", help="Токены шаблона (JSON)")
    add_template(sp_tokens)

    return p


def _read_text_arg(arg: str) -> str:
    """
    Читает значение аргумента CLI.

    Поддерживает три формата:
    - Прямая строка
    - Из файла: @path/to/file
    - Из stdin: -
    """
    if arg == "-":
        return sys.stdin.read()

    if arg.startswith("@"):
        file_path = Path(arg[1:])
        if not file_path.is_file():
            raise ValueError(f"File not found: {file_path}")
        return file_path.read_text(encoding="utf-8")

    return arg


def _skip_hook(obj: dict) -> Any:
    return SKIP if obj == SKIP_JSON else obj


def _parse_args_json(raw: Optional[str]) -> List[Any]:
    """Разбирает JSON-массив аргументов."""
    if raw is None:
        return []
    text = _read_text_arg(raw)
    try:
        data = json.loads(text, object_hook=_skip_hook)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in --args: {e}")
    if not isinstance(data, list):
        raise ValueError("--args must be a JSON array")
    return data


def _jdumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


def main(argv: list[str] | None = None) -> int:
    _setup_logging()
    ns = _build_parser().parse_args(argv)

    try:
        template = _read_text_arg(ns.template)

        if ns.cmd == "tokens":
            report = QueryBuilder().tokens_report(template)
            sys.stdout.write(_jdumps(report.model_dump(mode="json")))
            return 0

        builder = QueryBuilder(resolve_options(Path.cwd(), ns.config))
        args = _parse_args_json(ns.args)

        if ns.cmd == "compile":
            sys.stdout.write(builder.build_query(template, args) + "\n")
            return 0

        # report
        result = builder.compile_with_report(template, args)
        sys.stdout.write(_jdumps(result.model_dump(mode="json")))
        return 0

    except (SqlTplError, ValueError) as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
