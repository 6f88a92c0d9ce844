"""
Minimal Clash of Clans API client for listing a clan's members.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List
from urllib.parse import quote

import requests

log = logging.getLogger("cwl-app")


class ClashApiError(Exception):
    def __init__(self, status_code: int, message: str, details: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


def clean_tag(clan_tag: str) -> str:
    """Drop the leading '#' and upper-case the tag."""
    return clan_tag.strip().lstrip("#").upper()


def _player_from_member(member: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": member.get("name"),
        "tag": member.get("tag"),
        "town_hall_level": member.get("townHallLevel"),
        "war_stars": member.get("warStars") or 0,
        "trophies": member.get("trophies") or 0,
        "best_trophies": member.get("bestTrophies") or 0,
        "legend_statistics": member.get("legendStatistics"),
    }


def fetch_clan_members(
    clan_tag: str,
    *,
    api_key: str,
    base_url: str = "https://api.clashofclans.com/v1",
    timeout: float = 10,
) -> List[Dict[str, Any]]:
    """
    Return the members of a clan as plain dicts.

    Raises ClashApiError carrying an HTTP status suitable for the API layer.
    """
    if not api_key:
        raise ClashApiError(500, "Clash of Clans API key not configured", "Set CLASH_API_KEY in the environment")

    tag = clean_tag(clan_tag)
    if not tag:
        raise ClashApiError(400, "Missing clan tag")

    url = f"{base_url.rstrip('/')}/clans/{quote('#' + tag, safe='')}/members"
    try:
        resp = requests.get(
            url,
            headers={"Authorization": f"Bearer {api_key}", "Accept": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        log.warning("Clash API request for %s failed: %s", tag, exc)
        raise ClashApiError(502, "Could not reach the Clash of Clans API", str(exc)) from exc

    if resp.status_code == 404:
        raise ClashApiError(404, "Clan not found", f'Clan tag "{clan_tag}" does not exist or is invalid')
    if resp.status_code == 403:
        raise ClashApiError(403, "Clash of Clans API key invalid or not authorized", "Check the key and its allowed IPs")
    if not resp.ok:
        log.warning("Clash API returned %s for %s: %s", resp.status_code, tag, resp.text)
        raise ClashApiError(resp.status_code, "Clash of Clans API error", resp.text)

    try:
        data = resp.json()
    except ValueError as exc:
        raise ClashApiError(502, "Invalid response from the Clash of Clans API", resp.text) from exc

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        raise ClashApiError(502, "Unexpected Clash of Clans API payload", "Response has no member list")
    players = []
    for member in items:
        if not isinstance(member, dict):
            continue
        if not member.get("name") or not member.get("tag") or member.get("townHallLevel") is None:
            log.warning("Skipping incomplete clan member in %s: %s", tag, member)
            continue
        players.append(_player_from_member(member))
    return players
