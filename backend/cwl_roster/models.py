from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

LEAGUE_TIERS: tuple[str, ...] = (
    "Bronze League",
    "Silver League",
    "Gold League",
    "Crystal League",
    "Master League",
    "Champion League",
    "Titan League",
)

# Bare tier names (clan form) plus the I/II/III divisions (clan configuration).
LEAGUES: tuple[str, ...] = (
    LEAGUE_TIERS
    + tuple(f"{tier} {division}" for tier in LEAGUE_TIERS for division in ("I", "II", "III"))
    + ("Legend League",)
)

TOWN_HALL_LEVELS: tuple[str, ...] = tuple(f"th{level}" for level in range(1, 18))


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class RegisteredPlayer:
    name: str
    th_level: str
    id: str = field(default_factory=new_id)
    registered_at: Optional[datetime] = None


@dataclass(frozen=True)
class ClanDefinition:
    name: str
    participants: int
    league: str
    id: str = field(default_factory=new_id)


@dataclass
class ClanRoster:
    clan: ClanDefinition
    players: List[RegisteredPlayer] = field(default_factory=list)

    @property
    def missing(self) -> int:
        return max(0, self.clan.participants - len(self.players))

    def index_of(self, player_id: str) -> int:
        for idx, player in enumerate(self.players):
            if player.id == player_id:
                return idx
        return -1


@dataclass(frozen=True)
class RosterMessage:
    text: str
