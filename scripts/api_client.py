"""Lightweight REST client for the teamgen API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


STAT_NAMES = ("pace", "shooting", "passing", "dribbling", "defending", "physical")


def build_stats(values: list[int]) -> str:
    if len(values) != len(STAT_NAMES):
        raise SystemExit(f"--stats needs {len(STAT_NAMES)} values: {' '.join(STAT_NAMES)}")
    return json.dumps(dict(zip(STAT_NAMES, values)))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the teamgen REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:3000")
    parser.add_argument("--list-players", action="store_true", help="List stored players and exit")
    parser.add_argument("--add-player", metavar="NAME", help="Create a player with --stats")
    parser.add_argument("--stats", type=int, nargs="*", default=None, help="Six ratings for --add-player")
    parser.add_argument("--photo", type=Path, help="Optional photo for --add-player")
    parser.add_argument("--generate", type=int, metavar="TEAMS", help="Generate this many teams")
    parser.add_argument("--save", action="store_true", help="Save the teams from --generate")
    parser.add_argument("--list-saved", action="store_true", help="List saved team sets")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.list_players:
            resp = client.get("/api/persons")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))

        if args.add_player:
            if args.stats is None:
                raise SystemExit("--add-player requires --stats")
            files = None
            if args.photo:
                suffix = args.photo.suffix.lower().lstrip(".")
                content_type = "image/jpeg" if suffix in {"jpg", "jpeg"} else f"image/{suffix}"
                files = {"photo": (args.photo.name, args.photo.read_bytes(), content_type)}
            resp = client.post(
                "/api/persons",
                data={"name": args.add_player, "stats": build_stats(args.stats)},
                files=files,
            )
            if resp.status_code == 400:
                raise SystemExit(f"rejected: {resp.json().get('detail')}")
            resp.raise_for_status()
            print(f"Created player {resp.json()['id']}")

        if args.generate:
            resp = client.post("/api/teams/generate", json={"teamCount": args.generate})
            if resp.status_code == 400:
                raise SystemExit(resp.json().get("detail"))
            resp.raise_for_status()
            teams = resp.json()["teams"]
            for team in teams:
                names = ", ".join(member["name"] for member in team["members"])
                print(f"{team['name']} (avg {team['averageRating']}): {names}")
            if args.save:
                resp = client.post("/api/teams", json={"teams": teams})
                resp.raise_for_status()
                print(f"Saved team set {resp.json()['id']}")

        if args.list_saved:
            resp = client.get("/api/teams")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))


if __name__ == "__main__":
    main()
