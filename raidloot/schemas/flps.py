"""
FLPS report schemas.

POST /guilds/{guild_id}/flps/report → FlpsReportRequest → FlpsReportResponse

Candidates carry the raw performance inputs; bans, award history and the
scoring configuration are loaded from the guild's stored data.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from raidloot.services.report import FlpsReport, ReportRow

NonNegative = Annotated[float, Field(ge=0.0)]


class BehavioralActionIn(BaseModel):
    action_type: str = Field(description='"DEDUCTION" | "RESTORATION"')
    amount: Annotated[float, Field(ge=0.0, le=1.0)]
    reason: str = ""
    applied_at: datetime
    expires_at: Optional[datetime] = None


class CandidateIn(BaseModel):
    raider_id: Annotated[str, Field(min_length=1, max_length=64)]
    name: Optional[str] = None
    role: str = Field(description='"TANK" | "HEALER" | "DPS"', examples=["DPS"])
    attendance: Annotated[float, Field(ge=0.0, le=1.0, description="Fraction of raids attended.")]
    deaths_per_attempt: NonNegative = 0.0
    spec_avg_deaths_per_attempt: NonNegative = 0.0
    avoidable_damage_pct: NonNegative = 0.0
    spec_avg_avoidable_damage_pct: NonNegative = 0.0
    vault_slots: Annotated[int, Field(ge=0)] = 0
    crest_usage_ratio: Annotated[float, Field(ge=0.0, le=1.0)] = 0.0
    heroic_kills: Annotated[int, Field(ge=0)] = 0
    simulated_gain: NonNegative = 0.0
    spec_baseline_output: NonNegative = 0.0
    tier_pieces_owned: Annotated[int, Field(ge=0)] = 0
    behavioral_actions: list[BehavioralActionIn] = Field(default_factory=list)


class FlpsReportRequest(BaseModel):
    item_id: Annotated[str, Field(min_length=1, max_length=64)]
    candidates: list[CandidateIn]
    as_of: Optional[datetime] = Field(
        default=None,
        description="Evaluation instant. Defaults to now (UTC).",
    )


class ReportRowOut(BaseModel):
    rank: int
    raider_id: str
    name: Optional[str] = None
    role: str
    acs: float
    mas: float
    eps: float
    rms: float
    uv: float
    tb: float
    rm: float
    ipi: float
    rdf: float
    flps: float
    eligible: bool
    reasons: list[str]
    behavioral_score: float
    effective_flps: float

    @classmethod
    def from_row(cls, row: ReportRow) -> "ReportRowOut":
        b = row.breakdown
        return cls(
            rank=row.rank,
            raider_id=row.raider_id,
            name=row.name,
            role=b.role.value,
            acs=b.acs.value,
            mas=b.mas.value,
            eps=b.eps.value,
            rms=b.rms.value,
            uv=b.uv.value,
            tb=b.tb.value,
            rm=b.rm.value,
            ipi=b.ipi.value,
            rdf=b.rdf.value,
            flps=b.flps.value,
            eligible=row.eligible,
            reasons=row.reasons,
            behavioral_score=row.behavioral_score,
            effective_flps=row.effective_flps,
        )


class FlpsReportResponse(BaseModel):
    guild_id: str
    item_id: str
    generated_at: datetime
    rows: list[ReportRowOut]

    @classmethod
    def from_report(cls, report: FlpsReport) -> "FlpsReportResponse":
        return cls(
            guild_id=report.guild_id,
            item_id=report.item_id,
            generated_at=report.generated_at,
            rows=[ReportRowOut.from_row(row) for row in report.rows],
        )
