"""
Guild scoring configuration use cases.

Configuration lives behind the ConfigurationProvider port. A guild without
a stored configuration scores with ScoringConfiguration.default(guild_id).
Updates replace the whole configuration; the value objects in
domain.weights validate themselves, so a malformed update is rejected
here, before anything is saved, and never at calculation time.

Public API
----------
load_configuration(provider, guild_id)  -> ScoringConfiguration
update_configuration(provider, command) -> Result[ScoringConfiguration]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Optional, Protocol

from raidloot.core.errors import InvalidWeightConfigurationError, RaidLootError
from raidloot.core.result import Err, Ok, Result
from raidloot.domain.weights import (
    EligibilityThresholds,
    MeritWeights,
    PriorityWeights,
    RecencyParams,
    RoleMultipliers,
    ScoringConfiguration,
)

logger = logging.getLogger(__name__)


class ConfigurationProvider(Protocol):
    def find_by_guild(self, guild_id: str) -> Optional[ScoringConfiguration]: ...

    def save(self, config: ScoringConfiguration) -> ScoringConfiguration: ...


@dataclass(frozen=True)
class UpdateConfigurationCommand:
    """Raw field maps; any section left empty takes its defaults."""
    guild_id: str
    merit_weights: dict[str, Any] = field(default_factory=dict)
    priority_weights: dict[str, Any] = field(default_factory=dict)
    role_multipliers: dict[str, Any] = field(default_factory=dict)
    thresholds: dict[str, Any] = field(default_factory=dict)
    recency: dict[str, Any] = field(default_factory=dict)


def load_configuration(provider: ConfigurationProvider, guild_id: str) -> ScoringConfiguration:
    config = provider.find_by_guild(guild_id)
    if config is None:
        logger.debug("no stored configuration for guild %s, using defaults", guild_id)
        return ScoringConfiguration.default(guild_id)
    return config


def _section(cls: type, section: str, values: dict[str, Any]):
    known = {f.name for f in fields(cls)}
    for name in values:
        if name not in known:
            raise InvalidWeightConfigurationError(
                f"Unknown {section} field {name!r}; expected one of {sorted(known)}.",
                field=f"{section}.{name}",
            )
    return cls(**values)


def build_configuration(cmd: UpdateConfigurationCommand) -> ScoringConfiguration:
    """Construct (and thereby validate) the full configuration."""
    return ScoringConfiguration(
        guild_id=cmd.guild_id,
        merit_weights=_section(MeritWeights, "merit_weights", cmd.merit_weights),
        priority_weights=_section(PriorityWeights, "priority_weights", cmd.priority_weights),
        role_multipliers=_section(RoleMultipliers, "role_multipliers", cmd.role_multipliers),
        thresholds=_section(EligibilityThresholds, "thresholds", cmd.thresholds),
        recency=_section(RecencyParams, "recency", cmd.recency),
    )


def update_configuration(
    provider: ConfigurationProvider,
    cmd: UpdateConfigurationCommand,
) -> Result[ScoringConfiguration]:
    try:
        config = build_configuration(cmd)
    except RaidLootError as exc:
        logger.warning("configuration update for guild %s rejected: %s %s",
                       cmd.guild_id, exc.code, exc.message)
        return Err(exc)

    saved = provider.save(config)
    logger.info("scoring configuration updated for guild %s", saved.guild_id)
    return Ok(saved)
