from datetime import datetime, timedelta, timezone

import pytest

from teamgen.errors import InvalidInputError, RecordNotFound, StoreUnavailable
from teamgen.persistence import RosterStore


STATS = {"pace": 80, "shooting": 70, "passing": 60, "dribbling": 90, "defending": 50, "physical": 40}


@pytest.fixture
def store():
    roster_store = RosterStore(":memory:")
    yield roster_store
    roster_store.close()


def test_connection_is_lazy(store: RosterStore):
    assert not store.connected
    store.list_players()
    assert store.connected


def test_unreachable_database_raises_and_retries(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = RosterStore(blocker / "nested" / "teamgen.sqlite")

    with pytest.raises(StoreUnavailable):
        store.list_players()
    assert not store.connected

    blocker.unlink()
    assert store.list_players() == []


def test_create_and_list_players(store: RosterStore):
    created = store.create_player(name="Ada", stats=STATS)
    assert created.id
    assert created.created_at.tzinfo is not None
    assert created.updated_at is None

    players = store.list_players()
    assert [player.id for player in players] == [created.id]
    assert players[0].stats.dribbling == 90


def test_create_player_accepts_json_stats(store: RosterStore):
    created = store.create_player(
        name="Ada",
        stats='{"pace": 1, "shooting": 2, "passing": 3, "dribbling": 4, "defending": 5, "physical": 6}',
        photo="memory:120",
    )
    assert store.get_player(created.id).photo == "memory:120"


def test_create_player_without_stats_leaves_store_unchanged(store: RosterStore):
    store.create_player(name="Ada", stats=STATS)
    before = len(store.list_players())

    with pytest.raises(InvalidInputError):
        store.create_player(name="Bob", stats=None)
    with pytest.raises(InvalidInputError):
        store.create_player(name="   ", stats=STATS)

    assert len(store.list_players()) == before


def test_update_player_keeps_photo_when_omitted(store: RosterStore):
    created = store.create_player(name="Ada", stats=STATS, photo="memory:100")

    store.update_player(created.id, name="Ada L.", stats={**STATS, "pace": 99})
    updated = store.get_player(created.id)
    assert updated.name == "Ada L."
    assert updated.stats.pace == 99
    assert updated.photo == "memory:100"
    assert updated.updated_at is not None

    store.update_player(created.id, name="Ada L.", stats=STATS, photo="memory:200")
    assert store.get_player(created.id).photo == "memory:200"


def test_update_unknown_player_is_not_found(store: RosterStore):
    created = store.create_player(name="Ada", stats=STATS)

    with pytest.raises(RecordNotFound):
        store.update_player("missing", name="Ghost", stats=STATS)

    assert [player.name for player in store.list_players()] == ["Ada"]
    assert store.get_player(created.id).updated_at is None


def test_delete_player(store: RosterStore):
    created = store.create_player(name="Ada", stats=STATS)
    store.delete_player(created.id)
    assert store.list_players() == []
    with pytest.raises(RecordNotFound):
        store.delete_player(created.id)


def test_saved_sets_newest_first(store: RosterStore):
    base = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    middle = store.create_saved_team_set([{"name": "Team 1", "members": []}], created_at=base + timedelta(minutes=5))
    oldest = store.create_saved_team_set([{"name": "Team 1", "members": []}], created_at=base)
    newest = store.create_saved_team_set([{"name": "Team 1", "members": []}], created_at=base + timedelta(hours=1))

    listed = store.list_saved_team_sets()
    assert [saved.set_id for saved in listed] == [newest.set_id, middle.set_id, oldest.set_id]


def test_saved_set_is_a_snapshot(store: RosterStore):
    player = store.create_player(name="Ada", stats=STATS)
    teams = [{"name": "Team 1", "members": [{"id": player.id, "name": "Ada"}], "averageRating": 65}]
    saved = store.create_saved_team_set(teams)

    store.delete_player(player.id)

    fetched = store.get_saved_team_set(saved.set_id)
    assert fetched.teams == teams


def test_delete_saved_set_twice(store: RosterStore):
    saved = store.create_saved_team_set([])
    store.delete_saved_team_set(saved.set_id)
    with pytest.raises(RecordNotFound):
        store.delete_saved_team_set(saved.set_id)
