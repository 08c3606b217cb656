"""
Canonical model builder.

Maps intermediate provider records onto the canonical Match, Team and
TeamProfile models. Records are never dropped because enrichment fields are
missing: a match whose sides cannot be established is kept with every
participant marked unresolved, and a timestamp that does not parse leaves
the provider's status text as the display fallback.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sharingan.models.match import (
    SCORE_PLACEHOLDER,
    Detail,
    League,
    Match,
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
from sharingan.models.raw import (
    RawClock,
    RawCompetition,
    RawCompetitor,
    RawDetailType,
    RawEvent,
    RawLeague,
    RawPlayer,
    RawScoreboard,
    RawTeam,
    RawTeamDirectory,
    RawTeamRecord,
    RawTeamSchedule,
    RawTeamStanding,
    RawVenue,
)

logger = logging.getLogger(__name__)

# Wire formats of event timestamps, always UTC
TIMESTAMP_FORMATS = ("%Y-%m-%dT%H:%MZ", "%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a provider timestamp into an aware UTC datetime.

    The usual minute or second precision "Z" forms are tried first, then any
    other RFC3339 form (numeric offset, fractional seconds). A value without
    an offset is taken as UTC.

    Returns None when the value is absent or in an unexpected format.
    """
    if not value:
        return None
    for fmt in TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def build_team(raw: Optional[RawTeam]) -> Team:
    """Build a Team from a raw team record."""
    if raw is None:
        return Team()

    logo = raw.logo
    if not logo:
        logo = next((entry.href for entry in raw.logos if entry.href), None)

    return Team(
        id=raw.id or "",
        display_name=raw.display_name or raw.name or "",
        short_name=raw.short_display_name or raw.name or "",
        abbreviation=raw.abbreviation or "",
        location=raw.location or "",
        logo=logo,
    )


def build_venue(raw: Optional[RawVenue]) -> Optional[Venue]:
    """Build a Venue, or None when the record names no place."""
    if raw is None:
        return None

    full_name = raw.full_name or raw.name or ""
    city = raw.address.city if raw.address else None
    country = raw.address.country if raw.address else None
    if not full_name and not city:
        return None

    return Venue(full_name=full_name, city=city or None, country=country or None)


def build_league(raw: Optional[RawLeague]) -> Optional[League]:
    """Build a League, or None when the record is empty."""
    if raw is None or not (raw.id or raw.name or raw.abbreviation):
        return None
    return League(
        id=raw.id or "",
        name=raw.name or "",
        abbreviation=raw.abbreviation or "",
        short_name=raw.short_name or "",
        slug=raw.slug or "",
    )


def _build_participant(raw: RawCompetitor, side: Side) -> Participant:
    team = build_team(raw.team)
    return Participant(
        id=raw.id or team.id,
        name=team.display_name,
        abbreviation=team.abbreviation,
        score=raw.score if raw.score else SCORE_PLACEHOLDER,
        side=side,
        team=team,
        winner=raw.winner,
        form=raw.form,
    )


def build_participants(competitors: list[RawCompetitor]) -> tuple[Participant, ...]:
    """Assign home/away sides to a competitor list.

    Sides are resolved only when at least two competitors are present and
    exactly one is tagged home and exactly one away. Otherwise every
    participant is returned unresolved, in provider order.
    """
    tags = [(c.home_away or "").strip().lower() for c in competitors]
    resolvable = (
        len(competitors) >= 2
        and tags.count(Side.HOME.value) == 1
        and tags.count(Side.AWAY.value) == 1
    )

    if not resolvable:
        if competitors:
            logger.debug(f"Unresolved sides for competitor tags {tags}")
        return tuple(_build_participant(c, Side.UNRESOLVED) for c in competitors)

    home = competitors[tags.index(Side.HOME.value)]
    away = competitors[tags.index(Side.AWAY.value)]
    others = [
        c for c, tag in zip(competitors, tags)
        if tag not in (Side.HOME.value, Side.AWAY.value)
    ]
    return (
        _build_participant(home, Side.HOME),
        _build_participant(away, Side.AWAY),
        *(_build_participant(c, Side.UNRESOLVED) for c in others),
    )


def _notes_text(competition: RawCompetition) -> Optional[str]:
    headlines = [n.headline for n in competition.notes if n.headline]
    return "; ".join(headlines) if headlines else None


def _build_details(competition: RawCompetition) -> tuple[Detail, ...]:
    details = []
    for raw in competition.details:
        detail_type = raw.type or RawDetailType()
        clock = raw.clock or RawClock()
        details.append(Detail(
            type=detail_type.name or "",
            abbreviation=detail_type.abbreviation or "",
            clock=clock.display_value or "",
        ))
    return tuple(details)


def build_match(event: RawEvent, default_league: Optional[League] = None) -> Match:
    """Build a canonical Match from one raw event.

    Args:
        event: Decoded provider event
        default_league: League to use when the event names none

    Returns:
        Match object
    """
    competition = event.competitions[0] if event.competitions else RawCompetition()

    status_type = event.status.type
    status_detail = (
        status_type.detail
        or status_type.short_detail
        or status_type.description
        or ""
    )

    timestamp = event.date or competition.date
    scheduled = parse_timestamp(timestamp)
    if scheduled is None and timestamp:
        logger.debug(f"Event {event.id}: unparseable date {timestamp!r}")

    return Match(
        id=event.id,
        name=event.name or "",
        short_name=event.short_name or "",
        scheduled=scheduled,
        status=Status.from_state(status_type.state),
        status_detail=status_detail,
        participants=build_participants(competition.competitors),
        venue=build_venue(competition.venue),
        league=build_league(event.league) or default_league,
        notes=_notes_text(competition),
        details=_build_details(competition),
    )


def build_matches(envelope: RawScoreboard) -> list[Match]:
    """Build every event of a scoreboard envelope, preserving order."""
    default_league = None
    if len(envelope.leagues) == 1:
        default_league = build_league(envelope.leagues[0])

    matches = [build_match(event, default_league) for event in envelope.events]
    logger.debug(f"Built {len(matches)} matches")
    return matches


def build_directory(directory: RawTeamDirectory) -> list[Team]:
    """Flatten a team directory into teams, in directory order."""
    teams = []
    for sport in directory.sports:
        for league in sport.leagues:
            for entry in league.teams:
                if entry.team is not None:
                    teams.append(build_team(entry.team))
    return teams


def build_record(raw: Optional[RawTeamRecord]) -> Optional[TeamRecord]:
    """Build a season record, or None when no counts were sent."""
    if raw is None or (raw.wins is None and raw.draws is None and raw.losses is None):
        return None
    return TeamRecord(
        wins=raw.wins or 0,
        draws=raw.draws or 0,
        losses=raw.losses or 0,
        goals_for=raw.goals_for,
        goals_against=raw.goals_against,
    )


def build_standing(raw: Optional[RawTeamStanding]) -> Optional[TeamStanding]:
    """Build a table position, or None when the record is empty."""
    if raw is None or all(value is None for value in raw.model_dump().values()):
        return None
    return TeamStanding(
        position=raw.position,
        points=raw.points,
        league=raw.league or "",
        form=raw.form or "",
        goal_diff=raw.goal_diff,
    )


def build_player(raw: RawPlayer) -> Player:
    return Player(
        id=raw.id or "",
        name=raw.full_name or raw.display_name or "",
        jersey=raw.jersey or "",
        position=raw.position or "",
        age=raw.age,
        nationality=raw.nationality or "",
    )


def build_team_profile(schedule: RawTeamSchedule, fallback: Optional[Team] = None) -> TeamProfile:
    """Build the team header of a schedule response.

    Args:
        schedule: Decoded schedule envelope
        fallback: Team to use when the response carries no team block

    Returns:
        TeamProfile object
    """
    team = build_team(schedule.team) if schedule.team is not None else fallback or Team()
    summary = schedule.team

    return TeamProfile(
        team=team,
        record_summary=summary.record_summary if summary else None,
        standing_summary=summary.standing_summary if summary else None,
        record=build_record(schedule.record),
        standing=build_standing(schedule.standings),
        roster=tuple(build_player(p) for p in schedule.roster),
    )


def build_schedule_matches(schedule: RawTeamSchedule) -> list[Match]:
    """Build the events of a team schedule response."""
    return [build_match(event) for event in schedule.events]
