"""
Loot award and ban schemas.

POST /guilds/{guild_id}/loot/awards                 → AwardRequest  → AwardResponse
POST /guilds/{guild_id}/loot/awards/{id}/revoke     → RevokeRequest → AwardResponse
POST /guilds/{guild_id}/loot/bans                   → BanRequest    → BanResponse
POST /guilds/{guild_id}/loot/bans/{id}/lift                         → BanResponse
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from raidloot.domain.loot import LootAward, LootBan


class AwardRequest(BaseModel):
    raider_id: Annotated[str, Field(min_length=1, max_length=64)]
    item_id: Annotated[str, Field(min_length=1, max_length=64)]
    flps_score: float = Field(description="Final priority score at award time.")
    tier: str = Field(description='"A" | "B" | "C"', examples=["A"])


class RevokeRequest(BaseModel):
    reason: Annotated[str, Field(min_length=1)]


class BanRequest(BaseModel):
    raider_id: Annotated[str, Field(min_length=1, max_length=64)]
    reason: str
    expires_at: Optional[datetime] = Field(default=None, description="Omit for a permanent ban.")


class AwardResponse(BaseModel):
    id: str
    guild_id: str
    raider_id: str
    item_id: str
    awarded_at: datetime
    flps_score: float
    tier: str
    status: str
    revoke_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, award: LootAward) -> "AwardResponse":
        return cls(
            id=award.id,
            guild_id=award.guild_id,
            raider_id=award.raider_id,
            item_id=award.item_id,
            awarded_at=award.awarded_at,
            flps_score=award.flps_score.value,
            tier=award.tier.value,
            status=award.status.value,
            revoke_reason=award.revoke_reason,
        )


class AwardListResponse(BaseModel):
    total: int
    recency_decay_due: bool
    items: list[AwardResponse]


class BanResponse(BaseModel):
    id: str
    guild_id: str
    raider_id: str
    reason: str
    banned_at: datetime
    expires_at: Optional[datetime] = None
    lifted: bool
    active: bool

    @classmethod
    def from_domain(cls, ban: LootBan, as_of: datetime) -> "BanResponse":
        return cls(
            id=ban.id,
            guild_id=ban.guild_id,
            raider_id=ban.raider_id,
            reason=ban.reason,
            banned_at=ban.banned_at,
            expires_at=ban.expires_at,
            lifted=ban.lifted,
            active=ban.is_active(as_of),
        )


class BanListResponse(BaseModel):
    total: int
    items: list[BanResponse]
