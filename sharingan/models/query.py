"""Per-invocation query options."""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .. import config


class OutputMode(str, Enum):
    """How results are written out."""

    STRUCTURED = "structured"
    RAW = "raw"


class MatchFilters(BaseModel):
    """Filters for querying matches."""

    league: Optional[str] = None
    team: Optional[str] = None
    text: Optional[str] = None
    date: Optional[datetime.date] = None
    date_range_days: int = Field(default=1, ge=1)
    # Provider's current board: no dates parameter and no date predicate
    current_board: bool = False

    class Config:
        """Pydantic configuration."""

        frozen = True


class QueryOptions(BaseModel):
    """Everything one invocation needs, built once and passed down."""

    filters: MatchFilters = MatchFilters()
    output: OutputMode = OutputMode.STRUCTURED
    detailed: bool = False
    debug: bool = config.DEBUG
    sport: str = config.SPORT
    league_path: str = config.SCOREBOARD_LEAGUE
    team_league: str = config.TEAM_LEAGUE

    class Config:
        """Pydantic configuration."""

        frozen = True
