from __future__ import annotations

import enum

from raidloot.core.errors import InvalidInputError


class Role(str, enum.Enum):
    tank = "TANK"
    healer = "HEALER"
    dps = "DPS"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        for role in cls:
            if value is not None and value.strip().upper() == role.value:
                return role
        raise InvalidInputError("role", value)
