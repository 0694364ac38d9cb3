from __future__ import annotations

from datetime import datetime
from typing import Any, List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from teamgen.models import Player


class TeamResponse(BaseModel):
    name: str
    members: List[Player]
    average_rating: int = Field(..., alias="averageRating")

    model_config = ConfigDict(populate_by_name=True)


class GenerateTeamsRequest(BaseModel):
    team_count: int = Field(..., alias="teamCount")
    player_ids: List[str] | None = Field(default=None, alias="playerIds")

    model_config = ConfigDict(populate_by_name=True)


class GenerateTeamsResponse(BaseModel):
    teams: List[TeamResponse]


class SaveTeamsRequest(BaseModel):
    teams: List[dict[str, Any]]


class SavedTeamSetResponse(BaseModel):
    id: str
    teams: List[dict[str, Any]]
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)
