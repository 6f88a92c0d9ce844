"""
Roster building operations.

A `RosterSession` is owned by whoever drives the administrator workflow; the
functions here take it explicitly and mutate it in memory only. Every
operation validates before touching the session, so a failed call leaves the
rosters exactly as they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

from .errors import InvalidInputError, NotFoundError
from .models import LEAGUES, ClanDefinition, ClanRoster, RegisteredPlayer, new_id

log = logging.getLogger("cwl-roster")


@dataclass
class RosterSession:
    id: str = field(default_factory=new_id)
    clans: List[ClanDefinition] = field(default_factory=list)
    rosters: Dict[str, ClanRoster] = field(default_factory=dict)


def validate_clan(clan: ClanDefinition) -> None:
    """Raise InvalidInputError when a clan definition cannot be used."""
    if not clan.name or not clan.name.strip():
        raise InvalidInputError("Clan name must not be empty")
    # bool is an int subclass; a checkbox value is not a capacity
    if isinstance(clan.participants, bool) or not isinstance(clan.participants, int):
        raise InvalidInputError(f"Clan {clan.name!r}: participants must be an integer")
    if clan.participants < 1:
        raise InvalidInputError(f"Clan {clan.name!r}: participants must be at least 1")
    if clan.league not in LEAGUES:
        raise InvalidInputError(f"Clan {clan.name!r}: unknown league {clan.league!r}")


def _validated(clans: Iterable[ClanDefinition]) -> List[ClanDefinition]:
    checked = list(clans)
    for clan in checked:
        validate_clan(clan)
    return checked


def define_plans(session: RosterSession, clans: Sequence[ClanDefinition]) -> None:
    """Replace the session's clan definitions; existing rosters are dropped."""
    checked = _validated(clans)
    session.clans = checked
    session.rosters = {}
    log.debug("Session %s: %d clan(s) defined", session.id, len(checked))


def auto_assign(
    players: Sequence[RegisteredPlayer],
    clans: Sequence[ClanDefinition],
) -> Dict[str, ClanRoster]:
    """
    Distribute players round-robin over the clans by input position.

    The player at index i lands in clans[i % len(clans)]. Capacity is not
    considered: a roster may end up over or under its participant count.
    Returns a mapping of clan id -> roster in clan definition order.
    """
    checked = _validated(clans)
    if not checked:
        raise InvalidInputError("At least one clan is required to assign players")

    rosters: Dict[str, ClanRoster] = {clan.id: ClanRoster(clan=clan) for clan in checked}
    if len(rosters) != len(checked):
        raise InvalidInputError("Clan ids must be unique")

    for idx, player in enumerate(players):
        rosters[checked[idx % len(checked)].id].players.append(player)
    return rosters


def assign_players(session: RosterSession, players: Sequence[RegisteredPlayer]) -> Dict[str, ClanRoster]:
    """Auto-assign players to the session's clans, replacing previous rosters."""
    rosters = auto_assign(players, session.clans)
    session.rosters = rosters
    log.info("Session %s: assigned %d player(s) to %d clan(s)", session.id, len(players), len(rosters))
    return rosters


def _roster(session: RosterSession, clan_id: str) -> ClanRoster:
    roster = session.rosters.get(clan_id)
    if roster is None:
        raise NotFoundError(f"Clan {clan_id!r} not found")
    return roster


def move_player(session: RosterSession, player_id: str, from_clan_id: str, to_clan_id: str) -> None:
    """Move a player to the end of another clan's roster."""
    source = _roster(session, from_clan_id)
    target = _roster(session, to_clan_id)
    idx = source.index_of(player_id)
    if idx == -1:
        raise NotFoundError(f"Player {player_id!r} not found in clan {from_clan_id!r}")

    player = source.players.pop(idx)
    target.players.append(player)


def reorder_player(session: RosterSession, clan_id: str, from_index: int, to_index: int) -> None:
    """
    Swap the player at from_index with its neighbour at to_index.

    Moving the first player up or the last player down (to_index outside the
    roster) does nothing.
    """
    roster = _roster(session, clan_id)
    size = len(roster.players)
    if not 0 <= from_index < size:
        raise NotFoundError(f"No player at position {from_index} in clan {clan_id!r}")
    if abs(from_index - to_index) != 1:
        raise InvalidInputError("Players can only be swapped with an adjacent position")
    if not 0 <= to_index < size:
        return

    players = roster.players
    players[from_index], players[to_index] = players[to_index], players[from_index]


def move_player_up(session: RosterSession, clan_id: str, index: int) -> None:
    reorder_player(session, clan_id, index, index - 1)


def move_player_down(session: RosterSession, clan_id: str, index: int) -> None:
    reorder_player(session, clan_id, index, index + 1)


def current_rosters(session: RosterSession) -> Mapping[str, ClanRoster]:
    """Read-only snapshot; later mutations of the session do not show through."""
    snapshot = {
        clan_id: ClanRoster(clan=roster.clan, players=list(roster.players))
        for clan_id, roster in session.rosters.items()
    }
    return MappingProxyType(snapshot)


def ordered_rosters(session: RosterSession) -> List[ClanRoster]:
    """Rosters in clan definition order, ready for rendering."""
    return [session.rosters[clan.id] for clan in session.clans if clan.id in session.rosters]
