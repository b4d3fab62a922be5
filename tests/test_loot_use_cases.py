"""
Tests for loot awards, revocations and bans through LootUseCases.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from raidloot.core.errors import (
    AwardAlreadyRevokedError,
    AwardNotFoundError,
    BanNotFoundError,
    InvalidInputError,
    InvalidRangeError,
    LootBanActiveError,
    RevocationWindowClosedError,
)
from raidloot.domain.loot import LootAwardStatus, LootTier
from raidloot.repositories.loot import SqlLootRepository
from raidloot.services.loot import AwardLootCommand, BanRaiderCommand, LootUseCases

_NOW = datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)


class InMemoryLoot:
    def __init__(self):
        self.awards = {}
        self.bans = {}

    def find_award(self, award_id):
        return self.awards.get(award_id)

    def find_awards(self, guild_id, raider_id):
        return [a for a in self.awards.values() if a.guild_id == guild_id and a.raider_id == raider_id]

    def save_award(self, award):
        self.awards[award.id] = award
        return award

    def find_ban(self, ban_id):
        return self.bans.get(ban_id)

    def find_bans(self, guild_id, raider_id):
        return [b for b in self.bans.values() if b.guild_id == guild_id and b.raider_id == raider_id]

    def save_ban(self, ban):
        self.bans[ban.id] = ban
        return ban


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def _award_cmd(raider_id: str = "r1", tier: str = "A", score: float = 0.7) -> AwardLootCommand:
    return AwardLootCommand(guild_id="g1", raider_id=raider_id, item_id="item-1", flps_score=score, tier=tier)


@pytest.fixture()
def clock():
    return Clock(_NOW)


@pytest.fixture()
def loot(clock):
    return LootUseCases(InMemoryLoot(), now=clock)


class TestAwards:
    def test_award(self, loot):
        award = loot.award(_award_cmd()).unwrap()
        assert award.awarded_at == _NOW
        assert award.tier == LootTier.A
        assert award.status == LootAwardStatus.active
        assert loot.award_history("g1", "r1").unwrap() == [award]

    def test_bad_tier(self, loot):
        assert isinstance(loot.award(_award_cmd(tier="S")).error, InvalidInputError)

    def test_score_out_of_range(self, loot):
        assert isinstance(loot.award(_award_cmd(score=1.5)).error, InvalidRangeError)

    def test_banned_raider_cannot_receive_loot(self, loot):
        ban = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="ninja looting")).unwrap()
        result = loot.award(_award_cmd())
        assert isinstance(result.error, LootBanActiveError)
        assert result.error.details["ban_ids"] == [ban.id]
        assert loot.award_history("g1", "r1").unwrap() == []

    def test_ban_in_other_guild_does_not_block(self, loot):
        loot.ban(BanRaiderCommand(guild_id="g2", raider_id="r1", reason="ninja looting")).unwrap()
        assert loot.award(_award_cmd()).is_ok()

    def test_needs_recency_decay(self, loot, clock):
        assert loot.needs_recency_decay("g1", "r1").unwrap() is False
        loot.award(_award_cmd()).unwrap()
        assert loot.needs_recency_decay("g1", "r1").unwrap() is True
        clock.advance(days=15)
        assert loot.needs_recency_decay("g1", "r1").unwrap() is False


class TestRevocation:
    def test_revoke_inside_window(self, loot, clock):
        award = loot.award(_award_cmd()).unwrap()
        clock.advance(days=6)
        revoked = loot.revoke("g1", award.id, "given to the wrong raider").unwrap()
        assert revoked.status == LootAwardStatus.revoked
        assert revoked.revoke_reason == "given to the wrong raider"
        assert loot.needs_recency_decay("g1", "r1").unwrap() is False

    def test_window_closed(self, loot, clock):
        award = loot.award(_award_cmd()).unwrap()
        clock.advance(days=8)
        assert isinstance(loot.revoke("g1", award.id, "late").error, RevocationWindowClosedError)

    def test_already_revoked(self, loot):
        award = loot.award(_award_cmd()).unwrap()
        loot.revoke("g1", award.id, "mistake").unwrap()
        assert isinstance(loot.revoke("g1", award.id, "again").error, AwardAlreadyRevokedError)

    def test_already_revoked_wins_over_closed_window(self, loot, clock):
        award = loot.award(_award_cmd()).unwrap()
        loot.revoke("g1", award.id, "mistake").unwrap()
        clock.advance(days=30)
        assert isinstance(loot.revoke("g1", award.id, "again").error, AwardAlreadyRevokedError)

    def test_unknown_or_foreign_award(self, loot):
        award = loot.award(_award_cmd()).unwrap()
        assert isinstance(loot.revoke("g1", "missing", "x").error, AwardNotFoundError)
        assert isinstance(loot.revoke("g2", award.id, "x").error, AwardNotFoundError)


class TestBans:
    def test_temporary_ban_expires(self, loot, clock):
        loot.ban(BanRaiderCommand(
            guild_id="g1", raider_id="r1", reason="afk", expires_at=_NOW + timedelta(days=2),
        )).unwrap()
        assert len(loot.active_bans("g1", "r1").unwrap()) == 1
        clock.advance(days=2)
        assert loot.active_bans("g1", "r1").unwrap() == []

    def test_blank_reason_rejected(self, loot):
        result = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="  "))
        assert isinstance(result.error, InvalidInputError)

    def test_expiry_in_the_past_rejected(self, loot):
        result = loot.ban(BanRaiderCommand(
            guild_id="g1", raider_id="r1", reason="afk", expires_at=_NOW - timedelta(minutes=1),
        ))
        assert isinstance(result.error, InvalidInputError)

    def test_naive_expiry_is_read_as_utc(self, loot, clock):
        naive = (_NOW + timedelta(days=1)).replace(tzinfo=None)
        ban = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="afk", expires_at=naive)).unwrap()
        assert ban.expires_at == _NOW + timedelta(days=1)
        clock.advance(days=1)
        assert loot.active_bans("g1", "r1").unwrap() == []

    def test_naive_expiry_in_the_past_rejected(self, loot):
        naive = (_NOW - timedelta(hours=1)).replace(tzinfo=None)
        result = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="afk", expires_at=naive))
        assert isinstance(result.error, InvalidInputError)

    def test_queries_return_results(self, loot):
        assert loot.active_bans("g1", "r1").is_ok()
        assert loot.award_history("g1", "r1").is_ok()
        assert loot.needs_recency_decay("g1", "r1").is_ok()

    def test_lift(self, loot):
        ban = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="afk")).unwrap()
        lifted = loot.lift_ban("g1", ban.id).unwrap()
        assert lifted.lifted is True
        assert loot.active_bans("g1", "r1").unwrap() == []
        assert loot.award(_award_cmd()).is_ok()

    def test_lift_unknown_or_foreign_ban(self, loot):
        ban = loot.ban(BanRaiderCommand(guild_id="g1", raider_id="r1", reason="afk")).unwrap()
        assert isinstance(loot.lift_ban("g1", "missing").error, BanNotFoundError)
        assert isinstance(loot.lift_ban("g2", ban.id).error, BanNotFoundError)


class TestSqlRepository:
    def test_award_ban_and_revoke_round_trip(self, db):
        guild_id = f"guild-{uuid.uuid4()}"
        clock = Clock(_NOW)
        loot = LootUseCases(SqlLootRepository(db), now=clock)

        award = loot.award(AwardLootCommand(
            guild_id=guild_id, raider_id="r1", item_id="item-9", flps_score=0.42, tier="B",
        )).unwrap()
        assert award.awarded_at == _NOW
        assert award.flps_score.value == pytest.approx(0.42)

        clock.advance(days=1)
        revoked = loot.revoke(guild_id, award.id, "duplicate").unwrap()
        assert revoked.status == LootAwardStatus.revoked
        assert loot.award_history(guild_id, "r1").unwrap() == [revoked]

        ban = loot.ban(BanRaiderCommand(
            guild_id=guild_id, raider_id="r1", reason="afk", expires_at=_NOW + timedelta(days=7),
        )).unwrap()
        assert ban.expires_at == _NOW + timedelta(days=7)
        assert [b.id for b in loot.active_bans(guild_id, "r1").unwrap()] == [ban.id]

        loot.lift_ban(guild_id, ban.id).unwrap()
        assert loot.active_bans(guild_id, "r1").unwrap() == []
