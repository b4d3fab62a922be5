"""
Loot administration use cases: awards, revocations and bans.

Same contract as the raid use cases: every command returns Ok(value) or
Err(RaidLootError), and lookups under another guild are reported as not
found.

Public API
----------
LootUseCases(loot, now, max_revocation_days, recency_threshold_days)
  .award(cmd)                               -> Result[LootAward]
  .revoke(guild_id, award_id, reason)       -> Result[LootAward]
  .ban(cmd)                                 -> Result[LootBan]
  .lift_ban(guild_id, ban_id)               -> Result[LootBan]
  .active_bans(guild_id, raider_id)         -> Result[list[LootBan]]
  .award_history(guild_id, raider_id)       -> Result[list[LootAward]]
  .needs_recency_decay(guild_id, raider_id) -> Result[bool]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol, TypeVar

from raidloot.core.errors import (
    AwardNotFoundError,
    BanNotFoundError,
    InvalidInputError,
    LootBanActiveError,
    RaidLootError,
    RevocationWindowClosedError,
)
from raidloot.core.result import Err, Ok, Result
from raidloot.db.base import as_utc
from raidloot.domain.loot import IdFactory, LootAward, LootBan, LootTier, new_id
from raidloot.domain.scores import FlpsScore
from raidloot.services.eligibility import (
    active_bans_for,
    can_revoke_award,
    should_apply_recency_decay,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LootRepository(Protocol):
    def find_award(self, award_id: str) -> Optional[LootAward]: ...

    def find_awards(self, guild_id: str, raider_id: str) -> list[LootAward]: ...

    def save_award(self, award: LootAward) -> LootAward: ...

    def find_ban(self, ban_id: str) -> Optional[LootBan]: ...

    def find_bans(self, guild_id: str, raider_id: str) -> list[LootBan]: ...

    def save_ban(self, ban: LootBan) -> LootBan: ...


@dataclass(frozen=True)
class AwardLootCommand:
    guild_id: str
    raider_id: str
    item_id: str
    flps_score: float
    tier: str


@dataclass(frozen=True)
class BanRaiderCommand:
    guild_id: str
    raider_id: str
    reason: str
    expires_at: Optional[datetime] = None     # None = permanent


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class LootUseCases:
    def __init__(
        self,
        loot: LootRepository,
        now: Callable[[], datetime] = _utc_now,
        max_revocation_days: int = 7,
        recency_threshold_days: int = 14,
        id_factory: IdFactory = new_id,
    ):
        self._loot = loot
        self._now = now
        self._max_revocation_days = max_revocation_days
        self._recency_threshold_days = recency_threshold_days
        self._new_id = id_factory

    def _run(self, action: str, fn: Callable[[], T]) -> Result[T]:
        try:
            return Ok(fn())
        except RaidLootError as exc:
            logger.warning("%s rejected: %s %s", action, exc.code, exc.message)
            return Err(exc)

    # --- queries ------------------------------------------------------------

    def _active_bans(self, guild_id: str, raider_id: str) -> list[LootBan]:
        return active_bans_for(raider_id, self._loot.find_bans(guild_id, raider_id), self._now())

    def active_bans(self, guild_id: str, raider_id: str) -> Result[list[LootBan]]:
        return self._run("list active bans", lambda: self._active_bans(guild_id, raider_id))

    def award_history(self, guild_id: str, raider_id: str) -> Result[list[LootAward]]:
        return self._run("list awards", lambda: self._loot.find_awards(guild_id, raider_id))

    def needs_recency_decay(self, guild_id: str, raider_id: str) -> Result[bool]:
        def check() -> bool:
            awards = [a for a in self._loot.find_awards(guild_id, raider_id) if a.is_active()]
            return should_apply_recency_decay(awards, self._recency_threshold_days, self._now())
        return self._run("check recency decay", check)

    # --- awards -------------------------------------------------------------

    def award(self, cmd: AwardLootCommand) -> Result[LootAward]:
        def award() -> LootAward:
            bans = self._active_bans(cmd.guild_id, cmd.raider_id)
            if bans:
                raise LootBanActiveError(cmd.raider_id, [b.id for b in bans])
            saved = self._loot.save_award(LootAward.create(
                item_id=cmd.item_id,
                raider_id=cmd.raider_id,
                guild_id=cmd.guild_id,
                awarded_at=self._now(),
                flps_score=FlpsScore.of(cmd.flps_score),
                tier=LootTier.parse(cmd.tier),
                id_factory=self._new_id,
            ))
            logger.info("item %s awarded to raider %s (guild %s)", saved.item_id, saved.raider_id, saved.guild_id)
            return saved
        return self._run("award loot", award)

    def revoke(self, guild_id: str, award_id: str, reason: str) -> Result[LootAward]:
        def revoke() -> LootAward:
            award = self._loot.find_award(award_id)
            if award is None or award.guild_id != guild_id:
                raise AwardNotFoundError(award_id)
            if award.is_active() and not can_revoke_award(award, self._max_revocation_days, self._now()):
                raise RevocationWindowClosedError(award_id, self._max_revocation_days)
            saved = self._loot.save_award(award.revoke(reason))
            logger.info("award %s revoked: %s", award_id, reason)
            return saved
        return self._run("revoke award", revoke)

    # --- bans ---------------------------------------------------------------

    def ban(self, cmd: BanRaiderCommand) -> Result[LootBan]:
        def ban() -> LootBan:
            if not cmd.reason or not cmd.reason.strip():
                raise InvalidInputError("reason", cmd.reason)
            now = self._now()
            expires_at = as_utc(cmd.expires_at)
            if expires_at is not None and expires_at <= now:
                raise InvalidInputError("expires_at", expires_at.isoformat())
            saved = self._loot.save_ban(LootBan.create(
                raider_id=cmd.raider_id,
                guild_id=cmd.guild_id,
                reason=cmd.reason,
                banned_at=now,
                expires_at=expires_at,
                id_factory=self._new_id,
            ))
            logger.info("raider %s banned from loot in guild %s", saved.raider_id, saved.guild_id)
            return saved
        return self._run("ban raider", ban)

    def lift_ban(self, guild_id: str, ban_id: str) -> Result[LootBan]:
        def lift() -> LootBan:
            ban = self._loot.find_ban(ban_id)
            if ban is None or ban.guild_id != guild_id:
                raise BanNotFoundError(ban_id)
            saved = self._loot.save_ban(ban.lift())
            logger.info("loot ban %s lifted", ban_id)
            return saved
        return self._run("lift ban", lift)
