import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from sqltpl import CompileOptions, NumericCoercion, QueryBuilder, SkipPolicy

REPO_ROOT = Path(__file__).resolve().parents[1]


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def jload(s: str):
    return json.loads(s)


def run_cli(root: Path, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "sqltpl.cli", *args],
        cwd=root, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8"
    )


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder()


@pytest.fixture
def strict_builder() -> QueryBuilder:
    return QueryBuilder(CompileOptions(numeric_coercion=NumericCoercion.STRICT))


@pytest.fixture
def omit_builder() -> QueryBuilder:
    return QueryBuilder(CompileOptions(skip_outside_block=SkipPolicy.OMIT))
