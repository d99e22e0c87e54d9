"""Executive board models: agent roles and the CEO overview digest."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class AgentType(str, Enum):
    ceo = "CEO"
    cpo = "CPO"
    cmo = "CMO"
    sales = "SALES"
    cfo = "CFO"
    fundraising = "FUNDRAISING"


class CEOSummary(BaseModel):
    stage: str
    objective: str
    risk: str
    decision: str
    do_not_do: list[str] = Field(alias="doNotDo")
    focus_next: str = Field(alias="focusNext")

    model_config = {"populate_by_name": True}


class SummaryResult(BaseModel):
    summary: CEOSummary | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.summary is not None
