"""
Pydantic models for the startup profile collected by the intake form.

A ``StartupContext`` is created once per session and anchors every prompt
sent to the model.  It is frozen: nothing downstream edits it in place.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Domain(str, Enum):
    web2_ai = "Web2/AI"
    web3_blockchain = "Web3/Blockchain"


class StartupStage(str, Enum):
    idea = "Idea"
    mvp = "MVP"
    early_users = "Early Users"
    revenue = "Revenue"
    scaling = "Scaling"


class UrgencyLevel(str, Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    critical = "Critical"


class TeamSetup(str, Enum):
    solo_founder = "Solo Founder"
    co_founders = "Co-Founders"
    small_team = "Small Team"
    scaling_team = "Scaling Team"


class RevenueModel(str, Enum):
    subscription = "Subscription"
    transactional = "Transactional"
    marketplace = "Marketplace"
    usage_based = "Usage-Based"
    advertising = "Advertising"
    enterprise_licensing = "Enterprise Licensing"
    token_economics = "Token Economics"
    undecided = "Undecided"


class StartupContext(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    domain: Domain = Domain.web2_ai
    stage: StartupStage = StartupStage.idea
    target_customer: str = Field(alias="targetCustomers")
    urgency: UrgencyLevel = UrgencyLevel.medium
    metrics: str = ""
    founder_advantage: str = Field("", alias="founderAdvantage")
    team_setup: TeamSetup = Field(TeamSetup.solo_founder, alias="teamSetup")
    constraints: str | None = None
    revenue_model: RevenueModel = Field(RevenueModel.undecided, alias="revenueModel")
    goal: str
    region: str | None = None

    @field_validator("name", "target_customer", "goal")
    @classmethod
    def _required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    def to_prompt_block(self) -> str:
        """Render the profile as the ``STARTUP CONTEXT`` block every prompt starts with."""
        lines = [
            "STARTUP CONTEXT:",
            f"Name: {self.name}",
            f"Domain: {self.domain.value}",
            f"Stage: {self.stage.value}",
            f"Customers: {self.target_customer}",
            f"Urgency: {self.urgency.value}",
            f"Goal (next 90 days): {self.goal}",
            f"Metrics: {self.metrics or 'None reported'}",
            f"Founder advantage: {self.founder_advantage or 'Not stated'}",
            f"Team: {self.team_setup.value}",
            f"Revenue model: {self.revenue_model.value}",
        ]
        if self.constraints:
            lines.append(f"Constraints: {self.constraints}")
        if self.region:
            lines.append(f"Region: {self.region}")
        return "\n".join(lines)
