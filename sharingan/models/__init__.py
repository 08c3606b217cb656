"""Data models for the Sharingan scores tool."""

from sharingan.models.match import (
    Detail,
    League,
    Match,
    SCORE_PLACEHOLDER,
    Participant,
    Player,
    Side,
    Status,
    Team,
    TeamProfile,
    TeamRecord,
    TeamStanding,
    Venue,
)
from sharingan.models.query import MatchFilters, OutputMode, QueryOptions

__all__ = [
    "Detail",
    "League",
    "Match",
    "SCORE_PLACEHOLDER",
    "Participant",
    "Player",
    "Side",
    "Status",
    "Team",
    "TeamProfile",
    "TeamRecord",
    "TeamStanding",
    "Venue",
    "MatchFilters",
    "OutputMode",
    "QueryOptions",
]
