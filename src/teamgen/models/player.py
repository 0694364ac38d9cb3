"""Player models shared by the store, generator and API layers."""

from __future__ import annotations

import json
import math
from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from teamgen.errors import InvalidInputError

STAT_FIELDS = ("pace", "shooting", "passing", "dribbling", "defending", "physical")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class PlayerStats(BaseModel):
    """The six skill ratings. The 0-100 range is advisory and not enforced."""

    pace: int
    shooting: int
    passing: int
    dribbling: int
    defending: int
    physical: int

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def average(self) -> float:
        return sum(getattr(self, name) for name in STAT_FIELDS) / len(STAT_FIELDS)

    @property
    def overall(self) -> int:
        return round_half_up(self.average)


class Player(BaseModel):
    """A stored roster entry."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    stats: PlayerStats
    photo: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def overall(self) -> int:
        return self.stats.overall


def parse_stats(raw: str | Mapping[str, Any] | PlayerStats | None) -> PlayerStats:
    """Parse ``raw`` (a JSON string or mapping) into :class:`PlayerStats`.

    Raises :class:`InvalidInputError` when stats are missing, are not valid
    JSON, or do not form exactly the six-field record.
    """

    if isinstance(raw, PlayerStats):
        return raw
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidInputError("stats are required")
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid stats JSON: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise InvalidInputError("stats must be an object with " + ", ".join(STAT_FIELDS))
    try:
        return PlayerStats.model_validate(dict(raw))
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise InvalidInputError(f"Invalid stats: {', '.join(fields) or exc}") from exc


def require_name(name: str | None) -> str:
    """Return ``name`` stripped, raising :class:`InvalidInputError` when blank."""

    clean = (name or "").strip()
    if not clean:
        raise InvalidInputError("name is required")
    return clean
