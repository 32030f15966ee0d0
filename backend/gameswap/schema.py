from sqlalchemy import Column, Index, Integer, String, Table, func
from sqlalchemy.orm import declarative_base  # type: ignore[attr-defined]
from sqlalchemy.sql.sqltypes import Boolean, DateTime, Enum, Text

Base = declarative_base()
metadata = Base.metadata
DateTimeTZ = DateTime(timezone=True)

memberships = Table(
    "memberships",
    metadata,
    Column("user_id", String, primary_key=True),
    Column("league_id", String, primary_key=True, index=True),
    Column("role", String, nullable=False, server_default=""),
    Column("created", DateTimeTZ, nullable=True, server_default=func.now()),
)

fields = Table(
    "fields",
    metadata,
    Column("league_id", String, primary_key=True),
    Column("park_code", String, primary_key=True),
    Column("field_code", String, primary_key=True),
    Column("park_name", String, nullable=False, server_default=""),
    Column("field_name", String, nullable=False, server_default=""),
    Column("display_name", String, nullable=False, server_default=""),
    Column("address", String, nullable=False, server_default=""),
    Column("notes", Text, nullable=False, server_default=""),
    Column("is_active", Boolean, nullable=False, server_default="t"),
    Column("updated", DateTimeTZ, nullable=False, server_default=func.now()),
)

slots = Table(
    "slots",
    metadata,
    Column("id", String, primary_key=True),
    Column("league_id", String, nullable=False, index=True),
    Column("division", String, nullable=False, index=True),
    Column("offering_team_id", String, nullable=False),
    Column("offering_email", String, nullable=False, server_default=""),
    Column("game_date", String, nullable=False, index=True),
    Column("start_time", String, nullable=False),
    Column("end_time", String, nullable=False),
    Column("start_minutes", Integer, nullable=False),
    Column("end_minutes", Integer, nullable=False),
    Column("field_key_raw", String, nullable=False),
    Column("park_code", String, nullable=False),
    Column("field_code", String, nullable=False),
    Column("game_type", String, nullable=False, server_default="Swap"),
    Column(
        "status",
        Enum(
            "Open",
            "Cancelled",
            "Confirmed",
            name="slot_status",
        ),
        nullable=False,
        server_default="Open",
        index=True,
    ),
    Column("notes", Text, nullable=False, server_default=""),
    Column("created_by", String, nullable=False, server_default=""),
    Column("created", DateTimeTZ, nullable=False, server_default=func.now()),
    Index("ix_slots_league_division_date", "league_id", "division", "game_date"),
)
