import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid.uuid4().hex


class PlayerRegistration(SQLModel, table=True):
    __tablename__ = "player_registrations"

    id: str = Field(default_factory=_new_id, primary_key=True)
    player_name: str = Field(nullable=False)
    th_level: str = Field(nullable=False)
    registered_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False, index=True)


class Clan(SQLModel, table=True):
    __tablename__ = "clans"

    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str = Field(nullable=False)
    participants: int = Field(nullable=False)
    league: str = Field(nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False)


class CwlMessage(SQLModel, table=True):
    __tablename__ = "cwl_messages"

    id: str = Field(default_factory=_new_id, primary_key=True)
    content: str  # rendered roster message
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), nullable=False)
