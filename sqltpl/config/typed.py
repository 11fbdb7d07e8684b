from __future__ import annotations

import dataclasses
import logging
import sys
import typing as t
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from ..errors import ConfigLoadError

_LOG = logging.getLogger("sqltpl.config.typed")


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", str(tp))

def _err(path: str, msg: str) -> ConfigLoadError:
    _LOG.debug("RAISE at %s: %s", path, msg)
    return ConfigLoadError(f"{path}: {msg}")

def _coerce_enum(val: Any, tp: Any, path: str) -> Any:
    if isinstance(val, tp):
        return val
    # по значению ("loose"), затем по имени ("LOOSE")
    try:
        return tp(val)
    except ValueError:
        pass
    if isinstance(val, str) and val in tp.__members__:
        return tp[val]
    allowed = ", ".join(repr(m.value) for m in tp)
    raise _err(path, f"expected one of {allowed}, got {val!r}")

def _coerce_dataclass(val: Any, tp: Any, path: str) -> Any:
    _LOG.debug("Dataclass at %s: %s, val-type=%s", path, _type_name(tp), type(val).__name__)
    if not isinstance(val, dict):
        raise _err(path, f"expected mapping for {_type_name(tp)}, got {type(val).__name__}")
    mod = sys.modules.get(tp.__module__)
    type_hints = t.get_type_hints(tp, globalns=dict(vars(mod)) if mod else {})
    fld_map = {f.name: f for f in fields(tp)}
    extras = set(val.keys()) - set(fld_map.keys())
    if extras:
        raise _err(path, f"unknown key(s): {sorted(map(str, extras))}")
    kwargs: dict[str, Any] = {}
    for name, f in fld_map.items():
        sub_path = f"{path}.{name}"
        if name in val:
            kwargs[name] = load_typed(type_hints.get(name, f.type), val[name], path=sub_path)
        elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
            raise _err(sub_path, "required field missing")
    return tp(**kwargs)


def load_typed(tp: Any, val: Any, *, path: str = "$") -> Any:
    """
    Приведение raw→typed по аннотациям tp.

    Поддерживает dataclass, Enum и примитивы. Лишние ключи — ошибка.
    """
    if isinstance(tp, type) and is_dataclass(tp):
        return _coerce_dataclass(val, tp, path)

    if isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(val, tp, path)

    # Примитивы; bool не подменяет int и наоборот
    if tp in (str, int, float, bool):
        if tp is float and isinstance(val, int) and not isinstance(val, bool):
            return float(val)
        if not isinstance(val, tp) or (tp is int and isinstance(val, bool)):
            raise _err(path, f"expected {_type_name(tp)}, got {type(val).__name__}")
        return val

    raise _err(path, f"unsupported annotation {_type_name(tp)}")


__all__ = ["load_typed"]
