from __future__ import annotations

from typing import Iterable, List

from .models import ClanRoster, RosterMessage

SEPARATOR = "---"


def _render_roster(roster: ClanRoster) -> str:
    clan = roster.clan
    lines: List[str] = [
        f"{clan.league}\n\n",
        f"{clan.name} {clan.participants} partecipanti\n\n",
    ]
    for idx, player in enumerate(roster.players, start=1):
        lines.append(f"{idx}) {player.name} {player.th_level}\n")

    missing = clan.participants - len(roster.players)
    if missing > 0:
        lines.append(f"\nMancano ancora {missing} player\n")

    lines.append(f"\n{SEPARATOR}\n\n")
    return "".join(lines)


def render_roster_message(rosters: Iterable[ClanRoster]) -> str:
    """
    Render the roster message shared with the clan.

    Output depends only on the rosters given, in the order given; nothing is
    validated here.
    """
    return "".join(_render_roster(roster) for roster in rosters)


def build_roster_message(rosters: Iterable[ClanRoster]) -> RosterMessage:
    return RosterMessage(text=render_roster_message(rosters))
