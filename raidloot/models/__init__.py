from .raid import RaidEventRow, RaidEncounterRow, RaidSignupRow
from .loot import LootAwardRow, LootBanRow
from .config import GuildScoringConfigRow
from .attendance import AttendanceRecordRow

__all__ = [
    "RaidEventRow",
    "RaidEncounterRow",
    "RaidSignupRow",
    "LootAwardRow",
    "LootBanRow",
    "GuildScoringConfigRow",
    "AttendanceRecordRow",
]
