"""initial raidloot schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Raid aggregate (raid_events + owned raid_encounters / raid_signups),
loot administration (loot_awards, loot_bans), per-guild scoring
configuration and attendance records.

raid_events.guild_id is NOT NULL: every raid belongs to exactly one guild.
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

RAID_STATUS = sa.Enum("SCHEDULED", "IN_PROGRESS", "COMPLETED", "CANCELLED", name="raid_status_enum")
RAID_ROLE = sa.Enum("TANK", "HEALER", "DPS", name="raid_role_enum")
SIGNUP_STATUS = sa.Enum("CONFIRMED", "TENTATIVE", "DECLINED", "LATE", name="signup_status_enum")
LOOT_TIER = sa.Enum("A", "B", "C", name="loot_tier_enum")
AWARD_STATUS = sa.Enum("ACTIVE", "REVOKED", name="loot_award_status_enum")


def upgrade() -> None:
    # --- raids ---
    op.create_table(
        "raid_events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("guild_id", sa.String(64), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("instance", sa.String(128), nullable=True),
        sa.Column("difficulty", sa.String(16), nullable=True),
        sa.Column("optional", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", RAID_STATUS, nullable=False, server_default="SCHEDULED"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_raid_events_guild_id", "raid_events", ["guild_id"])
    op.create_index("ix_raid_events_scheduled_date", "raid_events", ["scheduled_date"])

    op.create_table(
        "raid_encounters",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("raid_id", sa.String(36), sa.ForeignKey("raid_events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("encounter_ref", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("extra", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_raid_encounters_raid_id", "raid_encounters", ["raid_id"])

    op.create_table(
        "raid_signups",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("raid_id", sa.String(36), sa.ForeignKey("raid_events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("raider_id", sa.String(64), nullable=False),
        sa.Column("role", RAID_ROLE, nullable=False),
        sa.Column("status", SIGNUP_STATUS, nullable=False, server_default="CONFIRMED"),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("selected", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("raid_id", "raider_id", name="uq_signup_raid_raider"),
    )
    op.create_index("ix_raid_signups_id", "raid_signups", ["id"])
    op.create_index("ix_raid_signups_raid_id", "raid_signups", ["raid_id"])

    # --- loot ---
    op.create_table(
        "loot_awards",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("guild_id", sa.String(64), nullable=False),
        sa.Column("raider_id", sa.String(64), nullable=False),
        sa.Column("item_id", sa.String(64), nullable=False),
        sa.Column("awarded_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("flps_score", sa.Float(), nullable=False),
        sa.Column("tier", LOOT_TIER, nullable=False),
        sa.Column("status", AWARD_STATUS, nullable=False, server_default="ACTIVE"),
        sa.Column("revoke_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_loot_awards_guild_id", "loot_awards", ["guild_id"])
    op.create_index("ix_loot_awards_raider_id", "loot_awards", ["raider_id"])
    op.create_index("ix_loot_awards_awarded_at", "loot_awards", ["awarded_at"])

    op.create_table(
        "loot_bans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("guild_id", sa.String(64), nullable=False),
        sa.Column("raider_id", sa.String(64), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("banned_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True, comment="NULL = permanent ban"),
        sa.Column("lifted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_loot_bans_guild_id", "loot_bans", ["guild_id"])
    op.create_index("ix_loot_bans_raider_id", "loot_bans", ["raider_id"])

    # --- configuration ---
    op.create_table(
        "guild_scoring_config",
        sa.Column("guild_id", sa.String(64), primary_key=True),
        sa.Column("merit_attendance", sa.Float(), nullable=False),
        sa.Column("merit_mechanical", sa.Float(), nullable=False),
        sa.Column("merit_preparation", sa.Float(), nullable=False),
        sa.Column("priority_upgrade_value", sa.Float(), nullable=False),
        sa.Column("priority_tier_bonus", sa.Float(), nullable=False),
        sa.Column("priority_role_multiplier", sa.Float(), nullable=False),
        sa.Column("role_dps", sa.Float(), nullable=False),
        sa.Column("role_tank", sa.Float(), nullable=False),
        sa.Column("role_healer", sa.Float(), nullable=False),
        sa.Column("threshold_attendance", sa.Float(), nullable=False),
        sa.Column("threshold_activity", sa.Float(), nullable=False),
        sa.Column("recency_tier_a", sa.Float(), nullable=False),
        sa.Column("recency_tier_b", sa.Float(), nullable=False),
        sa.Column("recency_tier_c", sa.Float(), nullable=False),
        sa.Column("recency_recovery_rate", sa.Float(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # --- attendance ---
    op.create_table(
        "attendance_records",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("guild_id", sa.String(64), nullable=False),
        sa.Column("raider_id", sa.String(64), nullable=False),
        sa.Column("instance", sa.String(128), nullable=False),
        sa.Column("encounter", sa.String(128), nullable=True, comment="NULL = whole-instance attendance"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("attended_raids", sa.Integer(), nullable=False),
        sa.Column("total_raids", sa.Integer(), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_attendance_guild_raider_dates",
        "attendance_records",
        ["guild_id", "raider_id", "start_date", "end_date"],
    )


def downgrade() -> None:
    op.drop_index("ix_attendance_guild_raider_dates", table_name="attendance_records")
    op.drop_table("attendance_records")
    op.drop_table("guild_scoring_config")
    op.drop_index("ix_loot_bans_raider_id", table_name="loot_bans")
    op.drop_index("ix_loot_bans_guild_id", table_name="loot_bans")
    op.drop_table("loot_bans")
    op.drop_index("ix_loot_awards_awarded_at", table_name="loot_awards")
    op.drop_index("ix_loot_awards_raider_id", table_name="loot_awards")
    op.drop_index("ix_loot_awards_guild_id", table_name="loot_awards")
    op.drop_table("loot_awards")
    op.drop_index("ix_raid_signups_raid_id", table_name="raid_signups")
    op.drop_index("ix_raid_signups_id", table_name="raid_signups")
    op.drop_table("raid_signups")
    op.drop_index("ix_raid_encounters_raid_id", table_name="raid_encounters")
    op.drop_table("raid_encounters")
    op.drop_index("ix_raid_events_scheduled_date", table_name="raid_events")
    op.drop_index("ix_raid_events_guild_id", table_name="raid_events")
    op.drop_table("raid_events")

    bind = op.get_bind()
    for enum_type in (AWARD_STATUS, LOOT_TIER, SIGNUP_STATUS, RAID_ROLE, RAID_STATUS):
        enum_type.drop(bind, checkfirst=True)
