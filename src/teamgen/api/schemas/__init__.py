"""Pydantic models for API I/O."""

from .messages import MessageResponse
from .teams import (
    GenerateTeamsRequest,
    GenerateTeamsResponse,
    SavedTeamSetResponse,
    SaveTeamsRequest,
    TeamResponse,
)

__all__ = [
    "MessageResponse",
    "GenerateTeamsRequest",
    "GenerateTeamsResponse",
    "SavedTeamSetResponse",
    "SaveTeamsRequest",
    "TeamResponse",
]
