import csv
import json
from pathlib import Path

import pytest

from teamgen.cli import main
from teamgen.persistence import RosterStore


def _write_roster(path: Path, count: int) -> None:
    players = [
        {
            "name": f"Player {index}",
            "stats": {
                "pace": 50 + index,
                "shooting": 50,
                "passing": 50,
                "dribbling": 50,
                "defending": 50,
                "physical": 50,
            },
        }
        for index in range(count)
    ]
    path.write_text(json.dumps({"players": players}), encoding="utf-8")


def test_import_generate_and_save(tmp_path: Path, capsys):
    db = str(tmp_path / "teamgen.sqlite")
    roster = tmp_path / "roster.json"
    _write_roster(roster, 6)

    main(["--db", db, "import", str(roster)])
    output = tmp_path / "teams.csv"
    main(["--db", db, "generate", "--teams", "3", "--seed", "1", "--save", "--output", str(output)])

    printed = capsys.readouterr().out
    assert "Imported 6 players" in printed
    assert "Team 3" in printed

    with output.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 6
    assert {row["team"] for row in rows} == {"Team 1", "Team 2", "Team 3"}

    store = RosterStore(db)
    saved = store.list_saved_team_sets()
    store.close()
    assert len(saved) == 1
    assert [len(team["members"]) for team in saved[0].teams] == [2, 2, 2]


def test_generate_from_roster_file_without_store_writes(tmp_path: Path, capsys):
    db = str(tmp_path / "teamgen.sqlite")
    roster = tmp_path / "roster.json"
    _write_roster(roster, 3)

    main(["--db", db, "generate", "--teams", "2", "--roster", str(roster)])
    assert "Team 2" in capsys.readouterr().out

    main(["--db", db, "saved"])
    assert "No saved teams yet." in capsys.readouterr().out


def test_generate_with_too_few_players_exits(tmp_path: Path):
    db = str(tmp_path / "teamgen.sqlite")
    with pytest.raises(SystemExit, match="at least 2 players"):
        main(["--db", db, "generate", "--teams", "2"])


def test_export_writes_roster(tmp_path: Path):
    db = str(tmp_path / "teamgen.sqlite")
    roster = tmp_path / "roster.json"
    _write_roster(roster, 2)
    main(["--db", db, "import", str(roster)])

    exported = tmp_path / "export.json"
    main(["--db", db, "export", str(exported)])
    names = [entry["name"] for entry in json.loads(exported.read_text(encoding="utf-8"))["players"]]
    assert names == ["Player 0", "Player 1"]
