"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
import uuid
from datetime import date, timedelta

import pytest

from raidloot.core.errors import (
    AttendanceNotRecordedError,
    AwardAlreadyRevokedError,
    DuplicateSignupError,
    EncounterNotFoundError,
    InvalidRangeError,
    InvalidStateTransitionError,
    InvalidWeightConfigurationError,
    LootBanActiveError,
    RaidNotFoundError,
    ScheduleRejectedError,
    SignupNotFoundError,
)


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_invalid_range_error(self):
        err = InvalidRangeError("Upgrade Value", 1.5, 0.0, 1.0)
        assert err.http_status == 422
        assert err.code == "INVALID_RANGE"
        assert "1.5" in err.message
        d = err.to_dict()
        assert d["details"]["min"] == 0.0
        assert d["details"]["max"] == 1.0

    def test_invalid_weight_configuration_error(self):
        err = InvalidWeightConfigurationError("bad", field="tier_a")
        assert err.http_status == 422
        assert err.code == "INVALID_WEIGHT_CONFIGURATION"
        assert err.details == {"field": "tier_a"}

    def test_invalid_state_transition_error(self):
        err = InvalidStateTransitionError("start", "COMPLETED")
        assert err.http_status == 409
        assert err.code == "INVALID_STATE_TRANSITION"
        assert "COMPLETED" in err.message

    def test_schedule_rejected_error(self):
        err = ScheduleRejectedError(date(2026, 2, 20), "date is in the past")
        assert err.http_status == 409
        d = err.to_dict()
        assert d["code"] == "SCHEDULE_REJECTED"
        assert d["details"]["scheduled_date"] == "2026-02-20"

    def test_lookup_misses_are_404(self):
        assert RaidNotFoundError("x").http_status == 404
        assert SignupNotFoundError("x").http_status == 404
        assert EncounterNotFoundError("x").http_status == 404

    def test_conflicts_are_409(self):
        assert DuplicateSignupError("r1").http_status == 409
        assert AwardAlreadyRevokedError("a1").http_status == 409
        assert LootBanActiveError("r1", ["b1"]).details["ban_ids"] == ["b1"]

    def test_attendance_not_recorded_is_500(self):
        err = AttendanceNotRecordedError("raid-1")
        assert err.http_status == 500
        assert err.code == "ATTENDANCE_NOT_RECORDED"
        assert err.details == {"raid_id": "raid-1"}

    def test_to_dict_without_details(self):
        err = InvalidWeightConfigurationError("Sum must be positive.")
        d = err.to_dict()
        assert "code" in d
        assert "message" in d
        # details should not be in dict when empty
        assert "details" not in d


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

def _guild() -> str:
    return f"guild-{uuid.uuid4()}"


def _future(days: int = 10) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


class TestValidationErrors:
    def test_missing_date_returns_validation_error(self, client):
        r = client.post(f"/guilds/{_guild()}/raids", json={})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "errors" in body["details"]
        assert isinstance(body["details"]["errors"], list)
        assert body["details"]["errors"][0]["field"] == "scheduled_date"

    def test_attendance_out_of_range(self, client):
        r = client.post(f"/guilds/{_guild()}/flps/report", json={
            "item_id": "item-1",
            "candidates": [{"raider_id": "r1", "role": "DPS", "attendance": 1.5}],
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_role_is_domain_validation_error(self, client):
        guild = _guild()
        raid = client.post(f"/guilds/{guild}/raids", json={"scheduled_date": _future()}).json()
        r = client.post(f"/guilds/{guild}/raids/{raid['id']}/signups", json={"raider_id": "r1", "role": "BARD"})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "INVALID_INPUT"
        assert body["details"]["field"] == "role"

    def test_zero_weight_sum(self, client):
        r = client.put(f"/guilds/{_guild()}/config", json={
            "merit_weights": {"attendance": 0, "mechanical": 0, "preparation": 0},
        })
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_WEIGHT_CONFIGURATION"


class TestStateErrors:
    def test_past_date(self, client):
        r = client.post(f"/guilds/{_guild()}/raids", json={"scheduled_date": "2001-01-01"})
        assert r.status_code == 409
        body = r.json()
        assert body["code"] == "SCHEDULE_REJECTED"
        assert body["details"]["reason"] == "date is in the past"

    def test_start_without_signups(self, client):
        guild = _guild()
        raid = client.post(f"/guilds/{guild}/raids", json={"scheduled_date": _future()}).json()
        r = client.post(f"/guilds/{guild}/raids/{raid['id']}/start")
        assert r.status_code == 409
        assert r.json()["code"] == "RAID_HAS_NO_SIGNUPS"

    def test_duplicate_signup(self, client):
        guild = _guild()
        raid = client.post(f"/guilds/{guild}/raids", json={"scheduled_date": _future()}).json()
        url = f"/guilds/{guild}/raids/{raid['id']}/signups"
        assert client.post(url, json={"raider_id": "r1", "role": "DPS"}).status_code == 200
        r = client.post(url, json={"raider_id": "r1", "role": "TANK"})
        assert r.status_code == 409
        assert r.json()["code"] == "DUPLICATE_SIGNUP"


class TestNotFound:
    def test_unknown_raid(self, client):
        r = client.get(f"/guilds/{_guild()}/raids/does-not-exist")
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "RAID_NOT_FOUND"
        assert body["details"]["raid_id"] == "does-not-exist"

    def test_raid_of_other_guild(self, client):
        raid = client.post(f"/guilds/{_guild()}/raids", json={"scheduled_date": _future()}).json()
        r = client.get(f"/guilds/{_guild()}/raids/{raid['id']}")
        assert r.status_code == 404

    def test_unknown_signup(self, client):
        guild = _guild()
        raid = client.post(f"/guilds/{guild}/raids", json={"scheduled_date": _future()}).json()
        r = client.delete(f"/guilds/{guild}/raids/{raid['id']}/signups/nobody")
        assert r.status_code == 404
        assert r.json()["code"] == "SIGNUP_NOT_FOUND"

    @pytest.mark.parametrize("path", [
        "/loot/awards/missing/revoke",
        "/loot/bans/missing/lift",
    ])
    def test_unknown_award_or_ban(self, client, path):
        body = {"reason": "mistake"} if path.endswith("revoke") else None
        r = client.post(f"/guilds/{_guild()}{path}", json=body)
        assert r.status_code == 404
