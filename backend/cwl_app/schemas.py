from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from cwl_roster.models import LEAGUES, TOWN_HALL_LEVELS


class RegistrationCreate(BaseModel):
    player_name: str = Field(min_length=1, description="In-game player name")
    th_level: str = Field(description="Town hall level, th1 .. th17")

    @field_validator("player_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Player name must not be blank")
        return value

    @field_validator("th_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in TOWN_HALL_LEVELS:
            raise ValueError(f"Unknown town hall level {value!r}")
        return value


class Registration(BaseModel):
    id: str
    player_name: str
    th_level: str
    registered_at: Optional[datetime] = None


class RegistrationsFileResponse(BaseModel):
    content: str
    is_empty: bool
    count: int
    storage: str


class ClanCreate(BaseModel):
    name: str = Field(min_length=1)
    participants: int = Field(ge=1)
    league: str

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Clan name must not be blank")
        return value

    @field_validator("league")
    @classmethod
    def _known_league(cls, value: str) -> str:
        if value not in LEAGUES:
            raise ValueError(f"Unknown league {value!r}")
        return value


class Clan(BaseModel):
    id: str
    name: str
    participants: int
    league: str
    created_at: datetime


class ClanConfiguration(BaseModel):
    clan_name: str = Field(min_length=1)
    clan_description: str = Field(min_length=1)
    league: str = Field(min_length=1)
    active_members: int = Field(ge=1, le=50)
    max_members: int = Field(ge=1, le=50)
    win_rate: float = Field(ge=0, le=100)
    requirements: str = Field(min_length=1)
    next_cwl_info: str = Field(min_length=1)


class RosterSessionCreate(BaseModel):
    clans: List[ClanCreate] = Field(min_length=1)


class ClanRoster(BaseModel):
    id: str
    name: str
    participants: int
    league: str
    missing: int
    players: List[Registration]


class RosterSession(BaseModel):
    id: str
    clans: List[ClanRoster]


class MoveRequest(BaseModel):
    player_id: str
    from_clan_id: str
    to_clan_id: str


class ReorderRequest(BaseModel):
    clan_id: str
    from_index: int = Field(ge=0)
    to_index: int


class MessageResponse(BaseModel):
    message: str


class ExportPdfRequest(BaseModel):
    message: str


class LoginRequest(BaseModel):
    password: str


class LoginResponse(BaseModel):
    authenticated: bool


class StatusMessage(BaseModel):
    message: str


class ClashPlayer(BaseModel):
    name: str
    tag: str
    town_hall_level: int
    war_stars: int = 0
    trophies: int = 0
    best_trophies: int = 0
    legend_statistics: Optional[Any] = None
