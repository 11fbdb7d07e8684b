from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    value: str
    position: int
    kind: Optional[str] = None


class CompileReport(BaseModel):
    """JSON-отчёт команды `sqltpl report`."""
    model_config = ConfigDict(frozen=True)

    sql: str
    template: str
    placeholders: int = Field(ge=0)
    arguments: int = Field(ge=0)
    blocks_emitted: int = Field(default=0, ge=0)
    blocks_suppressed: int = Field(default=0, ge=0)
    options: dict = Field(default_factory=dict)


class TokensReport(BaseModel):
    """JSON-вывод команды `sqltpl tokens`."""
    template: str
    tokens: List[TokenInfo]


__all__ = ["TokenInfo", "CompileReport", "TokensReport"]
