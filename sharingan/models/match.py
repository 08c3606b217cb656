"""Canonical match data model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

# Shown in place of a score the provider has not published yet
SCORE_PLACEHOLDER = "-"


class Status(str, Enum):
    """Match lifecycle state."""

    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"
    UNKNOWN = "unknown"

    @classmethod
    def from_state(cls, state: Optional[str]) -> "Status":
        """Map a provider state token ("pre", "in", "post") to a Status."""
        token = (state or "").strip().lower()
        return _STATE_TOKENS.get(token, cls.UNKNOWN)


_STATE_TOKENS = {
    "pre": Status.UPCOMING,
    "in": Status.LIVE,
    "post": Status.COMPLETED,
}


class Side(str, Enum):
    """Which side of a fixture a participant plays on."""

    HOME = "home"
    AWAY = "away"
    UNRESOLVED = "unresolved"


class Team(BaseModel):
    """Represents a team, embedded in a match or listed in a directory."""

    id: str = ""
    display_name: str = ""
    short_name: str = ""
    abbreviation: str = ""
    location: str = ""
    logo: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        frozen = True


class Participant(BaseModel):
    """One competitor of a match."""

    id: str = ""
    name: str = ""
    abbreviation: str = ""
    score: str = SCORE_PLACEHOLDER
    side: Side = Side.UNRESOLVED
    team: Team = Team()
    winner: Optional[bool] = None
    form: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        frozen = True


class Venue(BaseModel):
    """Match venue information."""

    full_name: str = ""
    city: Optional[str] = None
    country: Optional[str] = None

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def display(self) -> str:
        """Get formatted venue string."""
        parts = [p for p in [self.full_name, self.city] if p]
        return ", ".join(parts)


class League(BaseModel):
    """Represents a league or competition."""

    id: str = ""
    name: str = ""
    abbreviation: str = ""
    short_name: str = ""
    slug: str = ""

    class Config:
        """Pydantic configuration."""

        frozen = True


class Detail(BaseModel):
    """Sport-specific incident such as a goal or a card."""

    type: str = ""
    abbreviation: str = ""
    clock: str = ""

    class Config:
        """Pydantic configuration."""

        frozen = True


class Match(BaseModel):
    """Represents a single fixture in canonical form."""

    id: str
    name: str = ""
    short_name: str = ""
    scheduled: Optional[datetime] = None
    status: Status = Status.UNKNOWN
    status_detail: str = ""
    participants: tuple[Participant, ...] = ()
    venue: Optional[Venue] = None
    league: Optional[League] = None
    notes: Optional[str] = None
    details: tuple[Detail, ...] = ()

    class Config:
        """Pydantic configuration."""

        frozen = True

    def _side(self, side: Side) -> Optional[Participant]:
        for participant in self.participants:
            if participant.side == side:
                return participant
        return None

    @property
    def home(self) -> Optional[Participant]:
        """Home participant, or None when sides are unresolved."""
        return self._side(Side.HOME)

    @property
    def away(self) -> Optional[Participant]:
        """Away participant, or None when sides are unresolved."""
        return self._side(Side.AWAY)

    @property
    def is_resolved(self) -> bool:
        """True when exactly one home and one away participant exist."""
        return self.home is not None and self.away is not None

    @property
    def display_time(self) -> str:
        """Kick-off time, falling back to the provider's status text."""
        if self.scheduled is not None:
            return self.scheduled.strftime("%Y-%m-%d %H:%M %Z").strip()
        return self.status_detail


class TeamRecord(BaseModel):
    """Season record of a team."""

    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: Optional[int] = None
    goals_against: Optional[int] = None

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def display(self) -> str:
        """Get formatted record, e.g. "15W 5D 9L (GF 48, GA 40)"."""
        text = f"{self.wins}W {self.draws}D {self.losses}L"
        if self.goals_for is not None and self.goals_against is not None:
            text += f" (GF {self.goals_for}, GA {self.goals_against})"
        return text


class TeamStanding(BaseModel):
    """League table position of a team."""

    position: Optional[int] = None
    points: Optional[int] = None
    league: str = ""
    form: str = ""
    goal_diff: Optional[int] = None

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def display(self) -> str:
        parts = []
        if self.position is not None:
            parts.append(f"#{self.position}")
        if self.league:
            parts.append(f"in {self.league}")
        if self.points is not None:
            parts.append(f"{self.points} pts")
        if self.goal_diff is not None:
            parts.append(f"GD {self.goal_diff:+d}")
        if self.form:
            parts.append(f"form {self.form}")
        return ", ".join(parts)


class Player(BaseModel):
    """Roster entry."""

    id: str = ""
    name: str = ""
    jersey: str = ""
    position: str = ""
    age: Optional[int] = None
    nationality: str = ""

    class Config:
        """Pydantic configuration."""

        frozen = True


class TeamProfile(BaseModel):
    """Team header information from a schedule response."""

    team: Team
    record_summary: Optional[str] = None
    standing_summary: Optional[str] = None
    record: Optional[TeamRecord] = None
    standing: Optional[TeamStanding] = None
    roster: tuple[Player, ...] = ()

    class Config:
        """Pydantic configuration."""

        frozen = True
