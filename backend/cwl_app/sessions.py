import logging
from collections import OrderedDict
from typing import Optional

from fastapi import Request

from cwl_roster.builder import RosterSession

log = logging.getLogger("cwl-app")


class RosterSessionRegistry:
    """
    In-memory roster sessions keyed by id; nothing survives a restart.

    At most `max_sessions` are kept. Adding past the limit drops the session
    that was least recently created or looked up.
    """

    def __init__(self, max_sessions: int = 50) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, RosterSession]" = OrderedDict()

    def add(self, roster_session: RosterSession) -> RosterSession:
        self._sessions[roster_session.id] = roster_session
        self._sessions.move_to_end(roster_session.id)
        log.info("Roster session %s created", roster_session.id)
        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            log.info("Roster session %s dropped (limit %d)", evicted_id, self.max_sessions)
        return roster_session

    def get(self, session_id: str) -> Optional[RosterSession]:
        roster_session = self._sessions.get(session_id)
        if roster_session is not None:
            self._sessions.move_to_end(session_id)
        return roster_session

    def discard(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            log.info("Roster session %s discarded", session_id)
        return removed is not None

    def __len__(self) -> int:
        return len(self._sessions)


def get_roster_sessions(request: Request) -> RosterSessionRegistry:
    return request.app.state.roster_sessions
