"""
Exception hierarchy for the RaidLoot service.

Rule: every error has a machine-readable `code` string so callers can
branch on it without parsing English messages.

Categories
----------
  ValidationError  - bad input detected at construction time (422)
  StateError       - operation illegal in the current aggregate state (409)
  NotFoundError    - aggregate lookup missed (404)
  PersistenceError - a port failed to store a consistent change (500)
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base classes
# ---------------------------------------------------------------------------

class RaidLootError(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(RaidLootError):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class StateError(RaidLootError):
    http_status = status.HTTP_409_CONFLICT
    code = "INVALID_STATE"


class NotFoundError(RaidLootError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class PersistenceError(RaidLootError):
    code = "PERSISTENCE_ERROR"


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------

class InvalidRangeError(ValidationError):
    code = "INVALID_RANGE"

    def __init__(self, kind: str, value: Any, lower: float, upper: float):
        super().__init__(
            message=f"{kind} must be between {lower} and {upper}, got {value}.",
            details={"kind": kind, "value": str(value), "min": lower, "max": upper},
        )


class InvalidWeightConfigurationError(ValidationError):
    code = "INVALID_WEIGHT_CONFIGURATION"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )


class InvalidAttendanceError(ValidationError):
    code = "INVALID_ATTENDANCE"

    def __init__(self, message: str, attended: int | None = None, total: int | None = None):
        details: dict[str, Any] = {}
        if attended is not None:
            details["attended"] = attended
        if total is not None:
            details["total"] = total
        super().__init__(message=message, details=details)


class InvalidInputError(ValidationError):
    code = "INVALID_INPUT"

    def __init__(self, field: str, value: Any):
        super().__init__(
            message=f"Invalid {field}: {value!r}.",
            details={"field": field, "value": str(value)},
        )


# ---------------------------------------------------------------------------
# State errors
# ---------------------------------------------------------------------------

class InvalidStateTransitionError(StateError):
    code = "INVALID_STATE_TRANSITION"

    def __init__(self, action: str, current_status: str):
        super().__init__(
            message=f"Cannot {action} a raid that is {current_status}.",
            details={"action": action, "status": current_status},
        )


class RaidHasNoSignupsError(StateError):
    code = "RAID_HAS_NO_SIGNUPS"

    def __init__(self, raid_id: str):
        super().__init__(
            message=f"Raid {raid_id} needs at least one signup to start.",
            details={"raid_id": raid_id},
        )


class DuplicateSignupError(StateError):
    code = "DUPLICATE_SIGNUP"

    def __init__(self, raider_id: str):
        super().__init__(
            message=f"Raider {raider_id} is already signed up.",
            details={"raider_id": raider_id},
        )


class SignupNotSelectableError(StateError):
    code = "SIGNUP_NOT_SELECTABLE"

    def __init__(self, raider_id: str, signup_status: str):
        super().__init__(
            message=f"Only confirmed signups can be selected; {raider_id} is {signup_status}.",
            details={"raider_id": raider_id, "status": signup_status},
        )


class SignupNotFoundError(StateError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "SIGNUP_NOT_FOUND"

    def __init__(self, raider_id: str):
        super().__init__(
            message=f"No signup found for raider {raider_id}.",
            details={"raider_id": raider_id},
        )


class EncounterNotFoundError(StateError):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ENCOUNTER_NOT_FOUND"

    def __init__(self, encounter_id: str):
        super().__init__(
            message=f"No encounter found with id {encounter_id}.",
            details={"encounter_id": encounter_id},
        )


class AwardAlreadyRevokedError(StateError):
    code = "AWARD_ALREADY_REVOKED"

    def __init__(self, award_id: str):
        super().__init__(
            message=f"Loot award {award_id} has already been revoked.",
            details={"award_id": award_id},
        )


class ScheduleRejectedError(StateError):
    code = "SCHEDULE_REJECTED"

    def __init__(self, scheduled_date: Any, reason: str):
        super().__init__(
            message=f"Cannot schedule raid on {scheduled_date}: {reason}.",
            details={"scheduled_date": str(scheduled_date), "reason": reason},
        )


class LootBanActiveError(StateError):
    code = "LOOT_BAN_ACTIVE"

    def __init__(self, raider_id: str, ban_ids: list[str]):
        super().__init__(
            message=f"Raider {raider_id} has an active loot ban.",
            details={"raider_id": raider_id, "ban_ids": ban_ids},
        )


class RevocationWindowClosedError(StateError):
    code = "REVOCATION_WINDOW_CLOSED"

    def __init__(self, award_id: str, max_revocation_days: int):
        super().__init__(
            message=(
                f"Loot award {award_id} is older than {max_revocation_days} days "
                "and can no longer be revoked."
            ),
            details={"award_id": award_id, "max_revocation_days": max_revocation_days},
        )


# ---------------------------------------------------------------------------
# Not-found errors
# ---------------------------------------------------------------------------

class RaidNotFoundError(NotFoundError):
    code = "RAID_NOT_FOUND"

    def __init__(self, raid_id: str):
        super().__init__(
            message=f"Raid {raid_id} not found.",
            details={"raid_id": raid_id},
        )


class AwardNotFoundError(NotFoundError):
    code = "AWARD_NOT_FOUND"

    def __init__(self, award_id: str):
        super().__init__(
            message=f"Loot award {award_id} not found.",
            details={"award_id": award_id},
        )


class BanNotFoundError(NotFoundError):
    code = "BAN_NOT_FOUND"

    def __init__(self, ban_id: str):
        super().__init__(
            message=f"Loot ban {ban_id} not found.",
            details={"ban_id": ban_id},
        )


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class AttendanceNotRecordedError(PersistenceError):
    code = "ATTENDANCE_NOT_RECORDED"

    def __init__(self, raid_id: str):
        super().__init__(
            message=f"Attendance for raid {raid_id} could not be recorded; the raid was not completed.",
            details={"raid_id": raid_id},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def raidloot_exception_handler(request: Request, exc: RaidLootError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
