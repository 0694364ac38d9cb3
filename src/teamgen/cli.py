"""Command-line interface for managing the roster and generating teams."""

from __future__ import annotations

import argparse
import csv
import random
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence
from uuid import uuid4

from teamgen.config import load_settings
from teamgen.errors import TeamgenError
from teamgen.generator import Team, generate_teams, team_to_snapshot
from teamgen.models import Player
from teamgen.persistence import RosterStore
from teamgen.roster_file import RosterFile


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Manage players and generate random teams")
    parser.add_argument(
        "--db",
        default=settings.db_path,
        help="SQLite database path or file: URI (default from TEAMGEN_DB_PATH)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default=settings.host, help="Interface to bind")
    serve.add_argument("--port", type=int, default=settings.port, help="Port to listen on")

    generate = commands.add_parser("generate", help="Split the roster into random teams")
    generate.add_argument("--teams", type=int, required=True, help="Number of teams to create")
    generate.add_argument(
        "--roster",
        type=Path,
        default=None,
        help="Roster JSON file to use instead of the stored players",
    )
    generate.add_argument("--seed", type=int, default=None, help="Seed for a repeatable shuffle")
    generate.add_argument("--save", action="store_true", help="Store the generated teams")
    generate.add_argument("--output", type=Path, default=None, help="Write team assignments to CSV")

    import_cmd = commands.add_parser("import", help="Add players from a roster JSON file")
    import_cmd.add_argument("path", type=Path, help="Roster JSON file")

    export_cmd = commands.add_parser("export", help="Write stored players to a roster JSON file")
    export_cmd.add_argument("path", type=Path, help="Destination JSON file")

    commands.add_parser("saved", help="List saved team sets, newest first")
    return parser.parse_args(argv)


def _players_from_file(path: Path) -> list[Player]:
    now = datetime.now(timezone.utc)
    return [
        Player(id=uuid4().hex, name=entry.name, stats=entry.stats, photo=entry.photo, created_at=now)
        for entry in RosterFile.load(path).entries
    ]


def _print_teams(teams: list[Team]) -> None:
    for team in teams:
        print(f"{team.name} (average {team.average_rating}, {len(team.members)} players)")
        for member in team.members:
            print(f"  {member.name} OVR {member.overall}")


def _write_csv(path: Path, teams: list[Team]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["team", "average_rating", "player_id", "name", "overall"])
        for team in teams:
            for member in team.members:
                writer.writerow([team.name, team.average_rating, member.id, member.name, member.overall])


def _run_generate(args: argparse.Namespace, store: RosterStore) -> None:
    players = _players_from_file(args.roster) if args.roster else store.list_players()
    rng = random.Random(args.seed) if args.seed is not None else None
    teams = generate_teams(players, args.teams, rng=rng)
    _print_teams(teams)
    if args.output:
        _write_csv(args.output, teams)
        print(f"Wrote team assignments to {args.output}")
    if args.save:
        saved = store.create_saved_team_set([team_to_snapshot(team) for team in teams])
        print(f"Saved team set {saved.set_id}")


def _run_import(args: argparse.Namespace, store: RosterStore) -> None:
    roster = RosterFile.load(args.path)
    for entry in roster.entries:
        store.create_player(name=entry.name, stats=entry.stats, photo=entry.photo)
    print(f"Imported {len(roster.entries)} players from {args.path}")


def _run_export(args: argparse.Namespace, store: RosterStore) -> None:
    players = store.list_players()
    RosterFile.from_players(players).save(args.path)
    print(f"Exported {len(players)} players to {args.path}")


def _run_saved(store: RosterStore) -> None:
    saved_sets = store.list_saved_team_sets()
    if not saved_sets:
        print("No saved teams yet.")
        return
    for saved in saved_sets:
        summary = ", ".join(
            f"{team.get('name', '?')}: {len(team.get('members', []))} players" for team in saved.teams
        )
        print(f"{saved.set_id}  {saved.created_at.astimezone().strftime('%Y-%m-%d %H:%M')}  {summary}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    if args.command == "serve":
        import uvicorn

        from teamgen.api import create_app

        settings = replace(load_settings(), db_path=args.db, host=args.host, port=args.port)
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
        return

    store = RosterStore(args.db)
    try:
        if args.command == "generate":
            _run_generate(args, store)
        elif args.command == "import":
            _run_import(args, store)
        elif args.command == "export":
            _run_export(args, store)
        elif args.command == "saved":
            _run_saved(store)
    except TeamgenError as exc:
        raise SystemExit(f"error: {exc}") from exc
    finally:
        store.close()


if __name__ == "__main__":
    main()
