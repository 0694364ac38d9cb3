"""Shuffle-and-deal team generation."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
from typing import Any, List, Optional, Protocol, Sequence

from teamgen.errors import InvalidInputError
from teamgen.models import Player, round_half_up


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)


class ShuffleSource(Protocol):
    def shuffle(self, x: List[Any]) -> None: ...


@dataclass
class Team:
    name: str
    members: List[Player] = field(default_factory=list)

    @property
    def average_rating(self) -> int:
        return team_average_rating(self.members)


def team_average_rating(members: Sequence[Player]) -> int:
    """Mean of each member's six-stat average, rounded half-up; 0 when empty."""

    if not members:
        return 0
    total = sum(member.stats.average for member in members)
    return round_half_up(total / len(members))


def generate_teams(
    players: Sequence[Player],
    team_count: int,
    *,
    rng: Optional[ShuffleSource] = None,
) -> List[Team]:
    """Split ``players`` into ``team_count`` teams.

    The roster is shuffled and then dealt round-robin, so the player at
    shuffled index ``i`` joins team ``i % team_count`` and team sizes differ
    by at most one. ``players`` itself is left untouched.
    """

    if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 1:
        raise InvalidInputError("Team count must be a whole number of at least 1")
    if len(players) < team_count:
        raise InvalidInputError(
            f"You need at least {team_count} players to create {team_count} teams!"
        )

    shuffled = list(players)
    (rng or random.Random()).shuffle(shuffled)

    teams = [Team(name=f"Team {index + 1}") for index in range(team_count)]
    for index, player in enumerate(shuffled):
        teams[index % team_count].members.append(player)

    logger.info("Generated %s teams from %s players", team_count, len(shuffled))
    return teams


def team_to_snapshot(team: Team) -> dict[str, Any]:
    """Plain JSON-ready copy of ``team`` for storing in a saved set."""

    return {
        "name": team.name,
        "members": [member.model_dump(mode="json", by_alias=True) for member in team.members],
        "averageRating": team.average_rating,
    }
