"""Random team generation over a roster."""

from .service import Team, generate_teams, team_average_rating, team_to_snapshot

__all__ = ["Team", "generate_teams", "team_average_rating", "team_to_snapshot"]
