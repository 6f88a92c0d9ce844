"""
CWL roster core.

Distributes registered players across clans, supports manual adjustments and
renders the roster message shared with the clan.
"""

from .builder import (  # noqa: F401
    RosterSession,
    assign_players,
    auto_assign,
    current_rosters,
    define_plans,
    move_player,
    move_player_down,
    move_player_up,
    ordered_rosters,
    reorder_player,
)
from .errors import InvalidInputError, NotFoundError, RosterError  # noqa: F401
from .models import LEAGUES, TOWN_HALL_LEVELS, ClanDefinition, ClanRoster, RegisteredPlayer, RosterMessage  # noqa: F401
from .render import build_roster_message, render_roster_message  # noqa: F401
