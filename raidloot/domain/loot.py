"""
Loot administration entities: bans, awards and behavioral actions.

All three are immutable. Activity is always evaluated against an explicit
`as_of` instant at query time; nothing expires silently in storage.
"""
from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from raidloot.core.errors import AwardAlreadyRevokedError, InvalidInputError
from raidloot.domain.scores import FlpsScore

IdFactory = Callable[[], str]


def new_id() -> str:
    return str(uuid.uuid4())


class LootTier(str, enum.Enum):
    A = "A"
    B = "B"
    C = "C"

    @classmethod
    def parse(cls, value: str | None) -> "LootTier":
        for tier in cls:
            if value is not None and value.strip().upper() == tier.value:
                return tier
        raise InvalidInputError("tier", value)


class LootAwardStatus(str, enum.Enum):
    active = "ACTIVE"
    revoked = "REVOKED"


class BehavioralActionType(str, enum.Enum):
    deduction = "DEDUCTION"
    restoration = "RESTORATION"

    @classmethod
    def parse(cls, value: str | None) -> "BehavioralActionType":
        for action_type in cls:
            if value is not None and value.strip().upper() == action_type.value:
                return action_type
        raise InvalidInputError("action_type", value)


# ---------------------------------------------------------------------------
# LootBan
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LootBan:
    id: str
    raider_id: str
    guild_id: str
    reason: str
    banned_at: datetime
    expires_at: Optional[datetime] = None   # None = permanent
    lifted: bool = False                    # explicit inactive flag

    @classmethod
    def create(
        cls,
        raider_id: str,
        guild_id: str,
        reason: str,
        banned_at: datetime,
        expires_at: Optional[datetime] = None,
        id_factory: IdFactory = new_id,
    ) -> "LootBan":
        return cls(
            id=id_factory(),
            raider_id=raider_id,
            guild_id=guild_id,
            reason=reason,
            banned_at=banned_at,
            expires_at=expires_at,
        )

    @property
    def is_permanent(self) -> bool:
        return self.expires_at is None

    def is_active(self, as_of: datetime) -> bool:
        """Active iff not lifted and expires_at is absent or strictly after as_of."""
        if self.lifted:
            return False
        return self.expires_at is None or self.expires_at > as_of

    def lift(self) -> "LootBan":
        return replace(self, lifted=True)


# ---------------------------------------------------------------------------
# LootAward
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LootAward:
    id: str
    item_id: str
    raider_id: str
    guild_id: str
    awarded_at: datetime
    flps_score: FlpsScore
    tier: LootTier
    status: LootAwardStatus = LootAwardStatus.active
    revoke_reason: Optional[str] = None

    @classmethod
    def create(
        cls,
        item_id: str,
        raider_id: str,
        guild_id: str,
        awarded_at: datetime,
        flps_score: FlpsScore,
        tier: LootTier,
        id_factory: IdFactory = new_id,
    ) -> "LootAward":
        return cls(
            id=id_factory(),
            item_id=item_id,
            raider_id=raider_id,
            guild_id=guild_id,
            awarded_at=awarded_at,
            flps_score=flps_score,
            tier=tier,
        )

    def is_active(self) -> bool:
        return self.status == LootAwardStatus.active

    def revoke(self, reason: str) -> "LootAward":
        if not self.is_active():
            raise AwardAlreadyRevokedError(self.id)
        return replace(self, status=LootAwardStatus.revoked, revoke_reason=reason)


# ---------------------------------------------------------------------------
# BehavioralAction
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BehavioralAction:
    raider_id: str
    guild_id: str
    action_type: BehavioralActionType
    amount: float
    reason: str
    applied_at: datetime
    expires_at: Optional[datetime] = None

    def is_active(self, as_of: datetime) -> bool:
        if self.applied_at > as_of:
            return False
        return self.expires_at is None or self.expires_at > as_of
