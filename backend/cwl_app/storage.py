"""
Registration store backed by SQLModel, with a plain-text mirror of the
registrations kept in the data directory for the clan's older tooling.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List

from sqlmodel import Session, select

from cwl_app import models
from cwl_app.core.config import Settings
from cwl_app.schemas import ClanConfiguration
from cwl_roster.models import RegisteredPlayer

log = logging.getLogger("cwl-app")

DEFAULT_CLAN_CONFIGURATION = ClanConfiguration(
    clan_name="Eclipse Clan",
    clan_description=(
        "Clan competitivo italiano specializzato in Clan War League. "
        "Cerchiamo sempre nuovi membri attivi e determinati a migliorare."
    ),
    league="Crystal League I",
    active_members=45,
    max_members=50,
    win_rate=85,
    requirements="Town Hall 12+ preferito, attacco consistente nelle war",
    next_cwl_info="Registrazioni aperte fino al 28 del mese",
)


def _data_file(settings: Settings, filename: str) -> Path:
    settings.data_path.mkdir(parents=True, exist_ok=True)
    return settings.data_path / filename


def _mirror_line(registration: models.PlayerRegistration) -> str:
    return f"{registration.player_name} {registration.th_level}\n"


def read_mirror(settings: Settings) -> str:
    path = _data_file(settings, settings.registrations_file)
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8")


def write_mirror(settings: Settings, registrations: List[models.PlayerRegistration]) -> None:
    path = _data_file(settings, settings.registrations_file)
    path.write_text("".join(_mirror_line(r) for r in registrations), encoding="utf-8")


def list_registrations(session: Session) -> List[models.PlayerRegistration]:
    statement = select(models.PlayerRegistration).order_by(models.PlayerRegistration.registered_at)
    return list(session.exec(statement).all())


def add_registration(
    session: Session,
    settings: Settings,
    *,
    player_name: str,
    th_level: str,
) -> models.PlayerRegistration:
    registration = models.PlayerRegistration(player_name=player_name.strip(), th_level=th_level)
    session.add(registration)
    session.commit()
    session.refresh(registration)

    with _data_file(settings, settings.registrations_file).open("a", encoding="utf-8") as handle:
        handle.write(_mirror_line(registration))

    log.info("Registration saved: %s (%s)", registration.player_name, registration.th_level)
    return registration


def delete_registration(session: Session, settings: Settings, registration_id: str) -> bool:
    registration = session.get(models.PlayerRegistration, registration_id)
    if registration is None:
        return False
    session.delete(registration)
    session.commit()
    write_mirror(settings, list_registrations(session))
    log.info("Registration deleted: %s", registration_id)
    return True


def clear_registrations(session: Session, settings: Settings) -> None:
    for registration in list_registrations(session):
        session.delete(registration)
    session.commit()
    write_mirror(settings, [])
    log.info("All registrations cleared")


def to_registered_player(registration: models.PlayerRegistration) -> RegisteredPlayer:
    return RegisteredPlayer(
        id=registration.id,
        name=registration.player_name,
        th_level=registration.th_level,
        registered_at=registration.registered_at,
    )


def list_clans(session: Session) -> List[models.Clan]:
    return list(session.exec(select(models.Clan).order_by(models.Clan.created_at)).all())


def add_clan(session: Session, *, name: str, participants: int, league: str) -> models.Clan:
    clan = models.Clan(name=name, participants=participants, league=league)
    session.add(clan)
    session.commit()
    session.refresh(clan)
    return clan


def save_message(session: Session, content: str) -> models.CwlMessage:
    message = models.CwlMessage(content=content)
    session.add(message)
    session.commit()
    session.refresh(message)
    return message


def save_clan_configuration(settings: Settings, config: ClanConfiguration) -> ClanConfiguration:
    path = _data_file(settings, settings.clan_config_file)
    path.write_text(json.dumps(config.model_dump(), indent=2), encoding="utf-8")
    return config


def load_clan_configuration(settings: Settings) -> ClanConfiguration:
    """Return the stored configuration, writing the defaults on first use."""
    path = _data_file(settings, settings.clan_config_file)
    try:
        return ClanConfiguration.model_validate_json(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return save_clan_configuration(settings, DEFAULT_CLAN_CONFIGURATION)
