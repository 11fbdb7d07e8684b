"""
Загрузчик опций компиляции из YAML.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigLoadError
from .model import CompileOptions, DEFAULT_OPTIONS
from .typed import load_typed

# Single source of truth for the options file name.
OPTIONS_FILE = "sqltpl.yaml"

_yaml = YAML(typ="safe")

logger = logging.getLogger(__name__)


def _read_yaml_map(path: Path) -> dict:
    """Читает YAML файл и возвращает словарь."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except YAMLError as e:
        raise ConfigLoadError(f"{path}: invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigLoadError(f"{path}: YAML must be a mapping")
    return raw


def options_from_dict(raw: dict) -> CompileOptions:
    """Строит CompileOptions из словаря (например, из YAML или JSON)."""
    return load_typed(CompileOptions, raw)


def load_options(path: Path) -> CompileOptions:
    """
    Загружает опции из файла.

    Raises:
        ConfigLoadError: Файл не найден, не является YAML-словарём
            или содержит неизвестные/некорректные поля
    """
    if not path.is_file():
        raise ConfigLoadError(f"Options file not found: {path}")
    raw = _read_yaml_map(path)
    try:
        options = options_from_dict(raw)
    except ConfigLoadError as e:
        raise ConfigLoadError(f"{path}: {e}") from e
    logger.debug("Loaded options from %s: %r", path, options)
    return options


def find_options(root: Path) -> Optional[Path]:
    """Путь к sqltpl.yaml в каталоге root, если файл существует."""
    candidate = root / OPTIONS_FILE
    return candidate if candidate.is_file() else None


def resolve_options(root: Path, explicit: Optional[Path] = None) -> CompileOptions:
    """
    Опции для запуска: явный файл, иначе sqltpl.yaml в root, иначе умолчания.
    """
    if explicit is not None:
        return load_options(explicit)
    found = find_options(root)
    if found is None:
        return DEFAULT_OPTIONS
    return load_options(found)


__all__ = ["OPTIONS_FILE", "options_from_dict", "load_options", "find_options", "resolve_options"]
