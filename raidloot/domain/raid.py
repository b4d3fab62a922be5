"""
RaidEvent aggregate.

State machine
-------------
    SCHEDULED ──start()──► IN_PROGRESS ──complete()──► COMPLETED
        │
        └──cancel()──► CANCELLED

COMPLETED and CANCELLED are terminal. Nothing moves backwards.

Invariants
----------
  - encounters and signups change only while SCHEDULED
  - one signup per raider
  - start() needs at least one signup
  - only CONFIRMED signups can be selected

The aggregate is immutable: encounters and signups are tuples, and every
command returns a new RaidEvent. Before/after snapshots compare with ==.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Optional

from raidloot.core.errors import (
    DuplicateSignupError,
    EncounterNotFoundError,
    InvalidInputError,
    InvalidStateTransitionError,
    RaidHasNoSignupsError,
    SignupNotFoundError,
    SignupNotSelectableError,
)
from raidloot.domain.loot import IdFactory, new_id
from raidloot.domain.roles import Role


class RaidStatus(str, enum.Enum):
    scheduled = "SCHEDULED"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (RaidStatus.completed, RaidStatus.cancelled)


class RaidDifficulty(str, enum.Enum):
    lfr = "LFR"
    normal = "NORMAL"
    heroic = "HEROIC"
    mythic = "MYTHIC"

    @classmethod
    def parse(cls, value: str | None) -> "RaidDifficulty":
        for difficulty in cls:
            if value is not None and value.strip().upper() == difficulty.value:
                return difficulty
        raise InvalidInputError("difficulty", value)


class SignupStatus(str, enum.Enum):
    confirmed = "CONFIRMED"
    tentative = "TENTATIVE"
    declined = "DECLINED"
    late = "LATE"

    @classmethod
    def parse(cls, value: str | None) -> "SignupStatus":
        for status in cls:
            if value is not None and value.strip().upper() == status.value:
                return status
        raise InvalidInputError("signup status", value)


# ---------------------------------------------------------------------------
# Child entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Encounter:
    id: str
    name: str
    encounter_ref: Optional[int] = None     # external boss id
    enabled: bool = True
    extra: bool = False
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidInputError("encounter name", self.name)

    @classmethod
    def create(
        cls,
        name: str,
        encounter_ref: Optional[int] = None,
        enabled: bool = True,
        extra: bool = False,
        notes: Optional[str] = None,
        id_factory: IdFactory = new_id,
    ) -> "Encounter":
        return cls(
            id=id_factory(),
            name=name,
            encounter_ref=encounter_ref,
            enabled=enabled,
            extra=extra,
            notes=notes,
        )


@dataclass(frozen=True)
class Signup:
    raider_id: str
    role: Role
    status: SignupStatus = SignupStatus.confirmed
    comment: Optional[str] = None
    selected: bool = False

    @property
    def is_confirmed(self) -> bool:
        return self.status == SignupStatus.confirmed

    def select(self) -> "Signup":
        if not self.is_confirmed:
            raise SignupNotSelectableError(self.raider_id, self.status.value)
        return replace(self, selected=True)

    def deselect(self) -> "Signup":
        return replace(self, selected=False)

    def with_status(self, status: SignupStatus) -> "Signup":
        # Changing status leaves `selected` untouched.
        return replace(self, status=status)


# ---------------------------------------------------------------------------
# Aggregate root
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RaidEvent:
    id: str
    guild_id: str
    scheduled_date: date
    status: RaidStatus = RaidStatus.scheduled
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    instance: Optional[str] = None
    difficulty: Optional[RaidDifficulty] = None
    optional: bool = False
    notes: Optional[str] = None
    encounters: tuple[Encounter, ...] = field(default=())
    signups: tuple[Signup, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.guild_id or not self.guild_id.strip():
            raise InvalidInputError("guild_id", self.guild_id)
        object.__setattr__(self, "encounters", tuple(self.encounters))
        object.__setattr__(self, "signups", tuple(self.signups))

    @classmethod
    def schedule(
        cls,
        guild_id: str,
        scheduled_date: date,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        instance: Optional[str] = None,
        difficulty: Optional[RaidDifficulty] = None,
        optional: bool = False,
        notes: Optional[str] = None,
        id_factory: IdFactory = new_id,
    ) -> "RaidEvent":
        return cls(
            id=id_factory(),
            guild_id=guild_id,
            scheduled_date=scheduled_date,
            start_time=start_time,
            end_time=end_time,
            instance=instance,
            difficulty=difficulty,
            optional=optional,
            notes=notes,
        )

    # --- guards -------------------------------------------------------------

    def _require_scheduled(self, action: str) -> None:
        if self.status != RaidStatus.scheduled:
            raise InvalidStateTransitionError(action, self.status.value)

    def _signup_index(self, raider_id: str) -> int:
        for index, signup in enumerate(self.signups):
            if signup.raider_id == raider_id:
                return index
        raise SignupNotFoundError(raider_id)

    def _replace_signup(self, index: int, signup: Signup) -> "RaidEvent":
        signups = self.signups[:index] + (signup,) + self.signups[index + 1:]
        return replace(self, signups=signups)

    # --- encounters ---------------------------------------------------------

    def add_encounter(self, encounter: Encounter) -> "RaidEvent":
        self._require_scheduled("add encounters to")
        return replace(self, encounters=self.encounters + (encounter,))

    def remove_encounter(self, encounter_id: str) -> "RaidEvent":
        self._require_scheduled("remove encounters from")
        remaining = tuple(e for e in self.encounters if e.id != encounter_id)
        if len(remaining) == len(self.encounters):
            raise EncounterNotFoundError(encounter_id)
        return replace(self, encounters=remaining)

    def set_encounter_enabled(self, encounter_id: str, enabled: bool) -> "RaidEvent":
        self._require_scheduled("change encounters of")
        for index, encounter in enumerate(self.encounters):
            if encounter.id == encounter_id:
                updated = replace(encounter, enabled=enabled)
                encounters = self.encounters[:index] + (updated,) + self.encounters[index + 1:]
                return replace(self, encounters=encounters)
        raise EncounterNotFoundError(encounter_id)

    # --- signups ------------------------------------------------------------

    def add_signup(
        self,
        raider_id: str,
        role: Role,
        comment: Optional[str] = None,
        status: SignupStatus = SignupStatus.confirmed,
    ) -> "RaidEvent":
        self._require_scheduled("sign up for")
        if any(s.raider_id == raider_id for s in self.signups):
            raise DuplicateSignupError(raider_id)
        signup = Signup(raider_id=raider_id, role=role, status=status, comment=comment)
        return replace(self, signups=self.signups + (signup,))

    def remove_signup(self, raider_id: str) -> "RaidEvent":
        self._require_scheduled("remove signups from")
        index = self._signup_index(raider_id)
        return replace(self, signups=self.signups[:index] + self.signups[index + 1:])

    def update_signup_status(self, raider_id: str, status: SignupStatus) -> "RaidEvent":
        index = self._signup_index(raider_id)
        return self._replace_signup(index, self.signups[index].with_status(status))

    def select_signup(self, raider_id: str) -> "RaidEvent":
        index = self._signup_index(raider_id)
        return self._replace_signup(index, self.signups[index].select())

    def deselect_signup(self, raider_id: str) -> "RaidEvent":
        index = self._signup_index(raider_id)
        return self._replace_signup(index, self.signups[index].deselect())

    def signup_for(self, raider_id: str) -> Optional[Signup]:
        return next((s for s in self.signups if s.raider_id == raider_id), None)

    # --- lifecycle ----------------------------------------------------------

    def start(self) -> "RaidEvent":
        self._require_scheduled("start")
        if not self.signups:
            raise RaidHasNoSignupsError(self.id)
        return replace(self, status=RaidStatus.in_progress)

    def complete(self) -> "RaidEvent":
        if self.status != RaidStatus.in_progress:
            raise InvalidStateTransitionError("complete", self.status.value)
        return replace(self, status=RaidStatus.completed)

    def cancel(self) -> "RaidEvent":
        self._require_scheduled("cancel")
        return replace(self, status=RaidStatus.cancelled)

    # --- queries ------------------------------------------------------------

    @property
    def confirmed_signups(self) -> list[Signup]:
        return [s for s in self.signups if s.is_confirmed]

    @property
    def selected_signups(self) -> list[Signup]:
        return [s for s in self.signups if s.selected]

    @property
    def enabled_encounters(self) -> list[Encounter]:
        return [e for e in self.encounters if e.enabled]

    @property
    def is_scheduled(self) -> bool:
        return self.status == RaidStatus.scheduled

    @property
    def is_in_progress(self) -> bool:
        return self.status == RaidStatus.in_progress

    @property
    def is_completed(self) -> bool:
        return self.status == RaidStatus.completed

    @property
    def is_cancelled(self) -> bool:
        return self.status == RaidStatus.cancelled

    @property
    def is_active(self) -> bool:
        """Scheduled or running; blocks another raid on the same date."""
        return not self.status.is_terminal
