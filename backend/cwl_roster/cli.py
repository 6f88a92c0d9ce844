import json
from pathlib import Path
from typing import List, Optional

import typer

from .builder import auto_assign
from .errors import RosterError
from .models import LEAGUES, ClanDefinition, RegisteredPlayer
from .render import render_roster_message

app = typer.Typer(help="CWL roster builder.")


def _load_json_list(path: Path, label: str) -> List[dict]:
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Could not read {label} file {path}: {exc}") from exc
    if not isinstance(parsed, list):
        raise typer.BadParameter(f"{label.capitalize()} file must contain a JSON list")
    return [item for item in parsed if isinstance(item, dict)]


def load_players(path: Path) -> List[RegisteredPlayer]:
    players = []
    for position, item in enumerate(_load_json_list(path, "players"), start=1):
        name = str(item.get("name") or "").strip()
        th_level = str(item.get("th_level") or "").strip()
        if not name:
            raise typer.BadParameter(f"Players entry {position} in {path} has no name")
        if not th_level:
            raise typer.BadParameter(f"Players entry {position} ({name}) in {path} has no th_level")
        kwargs = {"name": name, "th_level": th_level}
        if item.get("id"):
            kwargs["id"] = str(item["id"])
        players.append(RegisteredPlayer(**kwargs))
    return players


def load_clans(path: Path) -> List[ClanDefinition]:
    return [
        ClanDefinition(
            name=str(item.get("name") or ""),
            participants=item.get("participants", 0),
            league=str(item.get("league") or ""),
        )
        for item in _load_json_list(path, "clans")
    ]


@app.command()
def generate(
    players: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON list of {name, th_level}"),
    clans: Path = typer.Option(..., exists=True, dir_okay=False, help="JSON list of {name, participants, league}"),
    output: Optional[Path] = typer.Option(None, help="Write the message here instead of stdout"),
):
    """Assign players round-robin to the clans and print the roster message."""
    try:
        rosters = auto_assign(load_players(players), load_clans(clans))
    except RosterError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    message = render_roster_message(rosters.values())
    if output is None:
        typer.echo(message, nl=False)
    else:
        output.write_text(message, encoding="utf-8")
        typer.echo(f"Wrote roster message to {output}")


@app.command()
def leagues():
    """List the accepted league names."""
    for league in LEAGUES:
        typer.echo(league)


def main():
    app()


if __name__ == "__main__":
    main()
