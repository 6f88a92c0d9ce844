import json
import logging
from typing import Iterable, List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from cwl_app import models, storage
from cwl_app.auth import check_password, require_admin
from cwl_app.clash_api import ClashApiError, fetch_clan_members
from cwl_app.core.config import Settings, get_settings
from cwl_app.db import get_session
from cwl_app.pdf.message import render_message_pdf
from cwl_app.schemas import (
    Clan,
    ClanConfiguration,
    ClanCreate,
    ClanRoster,
    ClashPlayer,
    ExportPdfRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    MoveRequest,
    Registration,
    RegistrationCreate,
    RegistrationsFileResponse,
    ReorderRequest,
    RosterSession,
    RosterSessionCreate,
    StatusMessage,
)
from cwl_app.sessions import RosterSessionRegistry, get_roster_sessions
from cwl_roster import builder
from cwl_roster.errors import NotFoundError, RosterError
from cwl_roster.models import LEAGUES, ClanDefinition
from cwl_roster.render import render_roster_message

log = logging.getLogger("cwl-app")

router = APIRouter()
admin = [Depends(require_admin)]


def _serialize_registration(model: models.PlayerRegistration) -> Registration:
    return Registration(
        id=model.id,
        player_name=model.player_name,
        th_level=model.th_level,
        registered_at=model.registered_at,
    )


def _serialize_clan(model: models.Clan) -> Clan:
    return Clan(
        id=model.id,
        name=model.name,
        participants=model.participants,
        league=model.league,
        created_at=model.created_at,
    )


def _serialize_roster_session(roster_session: builder.RosterSession) -> RosterSession:
    clans: List[ClanRoster] = []
    for roster in builder.ordered_rosters(roster_session):
        clans.append(
            ClanRoster(
                id=roster.clan.id,
                name=roster.clan.name,
                participants=roster.clan.participants,
                league=roster.clan.league,
                missing=roster.missing,
                players=[
                    Registration(
                        id=player.id,
                        player_name=player.name,
                        th_level=player.th_level,
                        registered_at=player.registered_at,
                    )
                    for player in roster.players
                ],
            )
        )
    return RosterSession(id=roster_session.id, clans=clans)


def _clan_definitions(clans: Iterable[ClanCreate]) -> List[ClanDefinition]:
    return [ClanDefinition(name=c.name, participants=c.participants, league=c.league) for c in clans]


def _roster_http_error(exc: RosterError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _get_roster_session(registry: RosterSessionRegistry, session_id: str) -> builder.RosterSession:
    roster_session = registry.get(session_id)
    if roster_session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Roster session not found")
    return roster_session


@router.post("/login", response_model=LoginResponse, tags=["auth"])
def login(request: LoginRequest, settings: Settings = Depends(get_settings)) -> LoginResponse:
    if not check_password(request.password, settings):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Wrong password")
    return LoginResponse(authenticated=True)


@router.get("/player-registrations", response_model=List[Registration], tags=["registrations"])
def list_registrations(session: Session = Depends(get_session)) -> List[Registration]:
    return [_serialize_registration(r) for r in storage.list_registrations(session)]


@router.post("/player-registrations", response_model=Registration, tags=["registrations"])
def add_registration(
    request: RegistrationCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Registration:
    registration = storage.add_registration(
        session,
        settings,
        player_name=request.player_name,
        th_level=request.th_level,
    )
    return _serialize_registration(registration)


@router.delete("/player-registrations", response_model=StatusMessage, tags=["registrations"], dependencies=admin)
def clear_registrations(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> StatusMessage:
    storage.clear_registrations(session, settings)
    return StatusMessage(message="Registrations cleared")


@router.delete(
    "/player-registrations/{registration_id}",
    response_model=StatusMessage,
    tags=["registrations"],
    dependencies=admin,
)
def delete_registration(
    registration_id: str,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> StatusMessage:
    if not storage.delete_registration(session, settings, registration_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Registration not found")
    return StatusMessage(message="Registration deleted")


@router.get("/registrations-file", response_model=RegistrationsFileResponse, tags=["registrations"])
def registrations_file(session: Session = Depends(get_session)) -> RegistrationsFileResponse:
    registrations = [_serialize_registration(r) for r in storage.list_registrations(session)]
    content = json.dumps([r.model_dump(mode="json") for r in registrations], indent=2)
    return RegistrationsFileResponse(
        content=content,
        is_empty=not registrations,
        count=len(registrations),
        storage="SQLite Database",
    )


@router.get("/leagues", response_model=List[str], tags=["clans"])
def list_leagues() -> List[str]:
    return list(LEAGUES)


@router.get("/clans", response_model=List[Clan], tags=["clans"])
def list_clans(session: Session = Depends(get_session)) -> List[Clan]:
    return [_serialize_clan(c) for c in storage.list_clans(session)]


@router.post("/clans", response_model=Clan, tags=["clans"], dependencies=admin)
def add_clan(request: ClanCreate, session: Session = Depends(get_session)) -> Clan:
    clan = storage.add_clan(session, name=request.name, participants=request.participants, league=request.league)
    return _serialize_clan(clan)


@router.get("/clan-configuration", response_model=ClanConfiguration, tags=["clans"])
def get_clan_configuration(settings: Settings = Depends(get_settings)) -> ClanConfiguration:
    return storage.load_clan_configuration(settings)


@router.post("/clan-configuration", response_model=ClanConfiguration, tags=["clans"], dependencies=admin)
def save_clan_configuration(
    request: ClanConfiguration,
    settings: Settings = Depends(get_settings),
) -> ClanConfiguration:
    return storage.save_clan_configuration(settings, request)


@router.post("/roster-sessions", response_model=RosterSession, tags=["rosters"], dependencies=admin)
def create_roster_session(
    request: RosterSessionCreate,
    session: Session = Depends(get_session),
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> RosterSession:
    """Define the clans and distribute the current registrations across them."""
    players = [storage.to_registered_player(r) for r in storage.list_registrations(session)]
    roster_session = builder.RosterSession()
    try:
        builder.define_plans(roster_session, _clan_definitions(request.clans))
        builder.assign_players(roster_session, players)
    except RosterError as exc:
        raise _roster_http_error(exc) from exc
    registry.add(roster_session)
    return _serialize_roster_session(roster_session)


@router.get("/roster-sessions/{session_id}", response_model=RosterSession, tags=["rosters"], dependencies=admin)
def get_roster_session(
    session_id: str,
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> RosterSession:
    return _serialize_roster_session(_get_roster_session(registry, session_id))


@router.delete("/roster-sessions/{session_id}", response_model=StatusMessage, tags=["rosters"], dependencies=admin)
def delete_roster_session(
    session_id: str,
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> StatusMessage:
    if not registry.discard(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Roster session not found")
    return StatusMessage(message="Roster session discarded")


@router.post("/roster-sessions/{session_id}/move", response_model=RosterSession, tags=["rosters"], dependencies=admin)
def move_player(
    session_id: str,
    request: MoveRequest,
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> RosterSession:
    roster_session = _get_roster_session(registry, session_id)
    try:
        builder.move_player(roster_session, request.player_id, request.from_clan_id, request.to_clan_id)
    except RosterError as exc:
        raise _roster_http_error(exc) from exc
    return _serialize_roster_session(roster_session)


@router.post(
    "/roster-sessions/{session_id}/reorder",
    response_model=RosterSession,
    tags=["rosters"],
    dependencies=admin,
)
def reorder_player(
    session_id: str,
    request: ReorderRequest,
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> RosterSession:
    roster_session = _get_roster_session(registry, session_id)
    try:
        builder.reorder_player(roster_session, request.clan_id, request.from_index, request.to_index)
    except RosterError as exc:
        raise _roster_http_error(exc) from exc
    return _serialize_roster_session(roster_session)


@router.post(
    "/roster-sessions/{session_id}/message",
    response_model=MessageResponse,
    tags=["rosters"],
    dependencies=admin,
)
def roster_session_message(
    session_id: str,
    session: Session = Depends(get_session),
    registry: RosterSessionRegistry = Depends(get_roster_sessions),
) -> MessageResponse:
    roster_session = _get_roster_session(registry, session_id)
    message = render_roster_message(builder.ordered_rosters(roster_session))
    storage.save_message(session, message)
    log.info("Roster message generated for session %s", session_id)
    return MessageResponse(message=message)


@router.post("/generate-message", response_model=MessageResponse, tags=["rosters"], dependencies=admin)
def generate_message(request: RosterSessionCreate, session: Session = Depends(get_session)) -> MessageResponse:
    """One-shot: auto-assign the current registrations and render the message."""
    players = [storage.to_registered_player(r) for r in storage.list_registrations(session)]
    try:
        rosters = builder.auto_assign(players, _clan_definitions(request.clans))
    except RosterError as exc:
        raise _roster_http_error(exc) from exc
    message = render_roster_message(rosters.values())
    storage.save_message(session, message)
    log.info("Roster message generated for %d clan(s)", len(rosters))
    return MessageResponse(message=message)


@router.post("/export-pdf", tags=["rosters"], dependencies=admin)
def export_pdf(request: ExportPdfRequest, settings: Settings = Depends(get_settings)):
    """Return the roster message as a PDF attachment."""
    if not request.message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Generate a message before exporting")
    try:
        pdf_bytes = render_message_pdf(request.message, font_path=settings.pdf_font_path)
    except Exception as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to build PDF: {exc}") from exc

    return StreamingResponse(
        iter([pdf_bytes]),
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="cwl-message.pdf"'},
    )


@router.get("/clash-players/", tags=["clash"])
def clash_players_missing_tag():
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing clan tag")


@router.get("/clash-players/{clan_tag}", response_model=List[ClashPlayer], tags=["clash"])
def clash_players(clan_tag: str, settings: Settings = Depends(get_settings)) -> List[ClashPlayer]:
    if not settings.allow_network:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Network access is disabled")
    try:
        members = fetch_clan_members(clan_tag, api_key=settings.clash_api_key, base_url=settings.clash_api_url)
    except ClashApiError as exc:
        detail = exc.message if not exc.details else f"{exc.message}: {exc.details}"
        raise HTTPException(status_code=exc.status_code, detail=detail) from exc
    return [ClashPlayer(**member) for member in members]
