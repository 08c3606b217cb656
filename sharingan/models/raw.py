"""
Intermediate models mirroring ESPN's JSON envelopes.

Every field is optional except the small mandatory core of an event (its id
and status state token). Null values are treated as absent so that per-field
defaults apply, and identifiers or scores that arrive as numbers on some
endpoints are coerced to text. An optional field whose value has an
unexpected type falls back to its default instead of rejecting the envelope.
"""

import logging
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    model_validator,
)

logger = logging.getLogger(__name__)


def _to_text(value: Any) -> Any:
    """Coerce numeric identifiers to text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _score_text(value: Any) -> Any:
    """Normalize a score that may be text, a number or a value object."""
    if isinstance(value, dict):
        display = value.get("displayValue")
        if display is not None:
            return str(display)
        return _to_text(value.get("value"))
    return _to_text(value)


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
    try:
        return handler(value)
    except ValidationError as e:
        logger.debug(f"Ignoring {info.field_name}={value!r}: {e.error_count()} error(s)")
        return None


def _or_empty(value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
    try:
        return handler(value)
    except ValidationError as e:
        logger.debug(f"Ignoring {info.field_name}: {e.error_count()} error(s)")
        return []


Text = Annotated[str, BeforeValidator(_to_text)]
ScoreText = Annotated[str, BeforeValidator(_score_text)]

# Optional enrichment: a badly typed value degrades to the default
OptText = Annotated[Optional[Text], WrapValidator(_or_none)]
OptScore = Annotated[Optional[ScoreText], WrapValidator(_or_none)]
OptBool = Annotated[Optional[bool], WrapValidator(_or_none)]
OptInt = Annotated[Optional[int], WrapValidator(_or_none)]
Lenient = WrapValidator(_or_none)
LenientList = WrapValidator(_or_empty)


class RawModel(BaseModel):
    """Base for permissive provider records."""

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "ignore"

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RawStatusType(RawModel):
    """Provider status token and its display strings."""

    state: str
    description: OptText = None
    detail: OptText = None
    short_detail: OptText = Field(None, alias="shortDetail")


class RawStatus(RawModel):
    type: RawStatusType


class RawLogo(RawModel):
    href: OptText = None


class RawTeam(RawModel):
    """Team as embedded in competitors, directories and schedules."""

    id: OptText = None
    location: OptText = None
    name: OptText = None
    abbreviation: OptText = None
    display_name: OptText = Field(None, alias="displayName")
    short_display_name: OptText = Field(None, alias="shortDisplayName")
    logo: OptText = None
    logos: Annotated[list[RawLogo], LenientList] = []


class RawCompetitor(RawModel):
    id: OptText = None
    home_away: OptText = Field(None, alias="homeAway")
    score: OptScore = None
    winner: OptBool = None
    form: OptText = None
    team: Annotated[Optional[RawTeam], Lenient] = None


class RawAddress(RawModel):
    city: OptText = None
    country: OptText = None


class RawVenue(RawModel):
    full_name: OptText = Field(None, alias="fullName")
    name: OptText = None
    address: Annotated[Optional[RawAddress], Lenient] = None


class RawDetailType(RawModel):
    abbreviation: OptText = None
    name: OptText = None


class RawClock(RawModel):
    display_value: OptText = Field(None, alias="displayValue")


class RawDetail(RawModel):
    """Sport-specific incident (goal, card, substitution...)."""

    type: Annotated[Optional[RawDetailType], Lenient] = None
    clock: Annotated[Optional[RawClock], Lenient] = None


class RawNote(RawModel):
    headline: OptText = None


class RawCompetition(RawModel):
    date: OptText = None
    status: Annotated[Optional[RawStatus], Lenient] = None
    venue: Annotated[Optional[RawVenue], Lenient] = None
    competitors: Annotated[list[RawCompetitor], LenientList] = []
    details: Annotated[list[RawDetail], LenientList] = []
    notes: Annotated[list[RawNote], LenientList] = []


class RawLeague(RawModel):
    id: OptText = None
    name: OptText = None
    abbreviation: OptText = None
    short_name: OptText = Field(None, alias="shortName")
    slug: OptText = None


class RawEvent(RawModel):
    """One scoreboard event. Only id and status state are mandatory."""

    id: Text
    status: RawStatus
    date: OptText = None
    name: OptText = None
    short_name: OptText = Field(None, alias="shortName")
    competitions: Annotated[list[RawCompetition], LenientList] = []
    league: Annotated[Optional[RawLeague], Lenient] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_competition_status(cls, data: Any) -> Any:
        # Schedule endpoints carry the status on the competition only
        if not isinstance(data, dict) or data.get("status") is not None:
            return data
        competitions = data.get("competitions") or []
        if competitions and isinstance(competitions[0], dict):
            status = competitions[0].get("status")
            if status is not None:
                return {**data, "status": status}
        return data


class RawScoreboard(RawModel):
    """Top-level scoreboard envelope."""

    events: list[RawEvent] = []
    leagues: Annotated[list[RawLeague], LenientList] = []


class RawTeamEntry(RawModel):
    team: Annotated[Optional[RawTeam], Lenient] = None


class RawDirectoryLeague(RawModel):
    teams: Annotated[list[RawTeamEntry], LenientList] = []


class RawSport(RawModel):
    leagues: Annotated[list[RawDirectoryLeague], LenientList] = []


class RawTeamDirectory(RawModel):
    """Team listing envelope: sports -> leagues -> teams -> team."""

    sports: Annotated[list[RawSport], LenientList] = []


class RawTeamSummary(RawTeam):
    """Team block of a schedule response, with season summaries."""

    record_summary: OptText = Field(None, alias="recordSummary")
    standing_summary: OptText = Field(None, alias="standingSummary")


class RawTeamRecord(RawModel):
    """Season record: wins, draws, losses and goals."""

    wins: OptInt = None
    draws: OptInt = None
    losses: OptInt = None
    goals_for: OptInt = Field(None, alias="goalsFor")
    goals_against: OptInt = Field(None, alias="goalsAgainst")


class RawTeamStanding(RawModel):
    """League table position."""

    position: OptInt = None
    points: OptInt = None
    league: OptText = None
    form: OptText = None
    goal_diff: OptInt = Field(None, alias="goalDiff")


class RawPlayer(RawModel):
    id: OptText = None
    full_name: OptText = Field(None, alias="fullName")
    display_name: OptText = Field(None, alias="displayName")
    jersey: OptText = None
    position: OptText = None
    age: OptInt = None
    nationality: OptText = None

    @model_validator(mode="before")
    @classmethod
    def _position_name(cls, data: Any) -> Any:
        # Roster entries nest the position as {"name": ..., "abbreviation": ...}
        if isinstance(data, dict) and isinstance(data.get("position"), dict):
            position = data["position"]
            return {**data, "position": position.get("name") or position.get("abbreviation")}
        return data


class RawTeamSchedule(RawModel):
    """Team schedule envelope, optionally with record, standing and roster."""

    team: Annotated[Optional[RawTeamSummary], Lenient] = None
    events: list[RawEvent] = []
    record: Annotated[Optional[RawTeamRecord], Lenient] = None
    standings: Annotated[Optional[RawTeamStanding], Lenient] = None
    roster: Annotated[list[RawPlayer], LenientList] = []


def present_fields(model: BaseModel) -> list[str]:
    """Return the provider keys that were present on a decoded record."""
    names = []
    for field_name in sorted(model.model_fields_set):
        field = type(model).model_fields[field_name]
        names.append(field.alias or field_name)
    return names
