"""
Shared test fixtures and configuration.

Provides reusable provider payloads (scoreboard, team directory, team
schedule) as dicts and as encoded response bytes, plus a mocked ESPN client.
"""

import json
from datetime import date
from typing import Any, Callable, Dict, List, Optional
from unittest.mock import Mock

import pytest

from sharingan.clients.espn import ESPNClient
from sharingan.models.query import MatchFilters, QueryOptions


MATCH_DAY = date(2024, 3, 20)


def encode(payload: Any) -> bytes:
    """Encode a payload the way the provider sends it."""
    return json.dumps(payload).encode("utf-8")


# =============================================================================
# PAYLOAD BUILDERS
# =============================================================================

def competitor(
    team_id: str,
    name: str,
    abbreviation: str,
    home_away: Optional[str] = None,
    score: Any = None,
) -> Dict[str, Any]:
    """Build a raw competitor record."""
    record: Dict[str, Any] = {
        "id": team_id,
        "type": "team",
        "team": {
            "id": team_id,
            "displayName": name,
            "shortDisplayName": name,
            "abbreviation": abbreviation,
            "logo": f"https://a.espncdn.com/i/teamlogos/soccer/500/{team_id}.png",
        },
    }
    if home_away is not None:
        record["homeAway"] = home_away
    if score is not None:
        record["score"] = score
    return record


def event(
    event_id: str,
    state: str,
    detail: str,
    competitors: List[Dict[str, Any]],
    when: Optional[str] = "2024-03-20T15:00Z",
    name: str = "",
    **competition: Any,
) -> Dict[str, Any]:
    """Build a raw scoreboard event."""
    record: Dict[str, Any] = {
        "id": event_id,
        "name": name,
        "shortName": name,
        "status": {"type": {"state": state, "detail": detail, "shortDetail": detail}},
        "competitions": [{"id": event_id, "competitors": competitors, **competition}],
    }
    if when is not None:
        record["date"] = when
    return record


# =============================================================================
# SCOREBOARD FIXTURES
# =============================================================================

@pytest.fixture
def live_event() -> Dict[str, Any]:
    """An in-play match at half time."""
    return event(
        "1001", "in", "45'",
        [
            competitor("359", "Arsenal", "ARS", "home", "2"),
            competitor("363", "Chelsea", "CHE", "away", "1"),
        ],
        name="Chelsea at Arsenal",
        venue={"fullName": "Emirates Stadium", "address": {"city": "London", "country": "England"}},
        details=[{"type": {"name": "Goal", "abbreviation": "G"}, "clock": {"value": 720.0, "displayValue": "12'"}}],
    )


@pytest.fixture
def upcoming_event() -> Dict[str, Any]:
    """A match that has not kicked off yet."""
    return event(
        "1002", "pre", "Wed, March 20th at 3:45 PM EDT",
        [
            competitor("368", "Everton", "EVE", "home"),
            competitor("364", "Liverpool", "LIV", "away"),
        ],
        when="2024-03-20T19:45Z",
        name="Liverpool at Everton",
    )


@pytest.fixture
def completed_event() -> Dict[str, Any]:
    """A finished match with scores sent as value objects."""
    return event(
        "1003", "post", "FT",
        [
            competitor("367", "Tottenham Hotspur", "TOT", "home", {"value": 3.0, "displayValue": "3"}),
            competitor("370", "Fulham", "FUL", "away", 0),
        ],
        when="2024-03-20T12:30Z",
        name="Fulham at Tottenham Hotspur",
        notes=[{"type": "event", "headline": "Matchday 29"}],
    )


@pytest.fixture
def scoreboard_payload(live_event, upcoming_event, completed_event) -> Dict[str, Any]:
    """A single-league scoreboard with one match per lifecycle state."""
    return {
        "leagues": [{
            "id": "700",
            "name": "English Premier League",
            "abbreviation": "EPL",
            "shortName": "Premier League",
            "slug": "eng.1",
        }],
        "events": [live_event, upcoming_event, completed_event],
    }


@pytest.fixture
def scoreboard_bytes(scoreboard_payload) -> bytes:
    return encode(scoreboard_payload)


@pytest.fixture
def empty_scoreboard_bytes() -> bytes:
    return encode({"leagues": [], "events": []})


# =============================================================================
# TEAM FIXTURES
# =============================================================================

@pytest.fixture
def directory_payload() -> Dict[str, Any]:
    """A team directory nested as sports -> leagues -> teams."""
    teams = [
        ("359", "Arsenal", "ARS"),
        ("382", "Manchester City", "MNC"),
        ("360", "Manchester United", "MUN"),
        ("363", "Chelsea", "CHE"),
    ]
    return {
        "sports": [{
            "id": "600",
            "name": "Soccer",
            "leagues": [{
                "id": "700",
                "name": "English Premier League",
                "abbreviation": "EPL",
                "teams": [
                    {"team": {"id": team_id, "displayName": name, "abbreviation": abbr,
                              "logos": [{"href": f"https://a.espncdn.com/{team_id}.png"}]}}
                    for team_id, name, abbr in teams
                ],
            }],
        }],
    }


@pytest.fixture
def directory_bytes(directory_payload) -> bytes:
    return encode(directory_payload)


@pytest.fixture
def schedule_payload() -> Dict[str, Any]:
    """A team schedule whose events carry status on the competition only."""

    def schedule_event(event_id, state, detail, when, home_score=None, away_score=None):
        record = event(
            event_id, state, detail,
            [
                competitor("360", "Manchester United", "MUN", "home", home_score),
                competitor("359", "Arsenal", "ARS", "away", away_score),
            ],
            when=when,
            name="Arsenal at Manchester United",
        )
        record["competitions"][0]["status"] = record.pop("status")
        return record

    return {
        "team": {
            "id": "360",
            "displayName": "Manchester United",
            "abbreviation": "MUN",
            "recordSummary": "15-5-9",
            "standingSummary": "6th in English Premier League",
        },
        "events": [
            schedule_event("2001", "post", "FT", "2024-03-02T12:30Z", "2", "1"),
            schedule_event("2002", "pre", "Sat, April 6th", "2024-04-06T14:00Z"),
        ],
    }


@pytest.fixture
def schedule_bytes(schedule_payload) -> bytes:
    return encode(schedule_payload)


@pytest.fixture
def profile_schedule_payload(schedule_payload) -> Dict[str, Any]:
    """A team schedule that also carries record, standing and roster blocks."""
    return {
        **schedule_payload,
        "record": {"wins": 15, "draws": 5, "losses": 9, "goalsFor": 48, "goalsAgainst": 40},
        "standings": {"position": 6, "points": 50, "league": "EPL", "form": "WWDLW", "goalDiff": 8},
        "roster": [
            {"id": "1", "fullName": "Andre Onana", "jersey": "24",
             "position": {"name": "Goalkeeper", "abbreviation": "G"}, "age": 28,
             "nationality": "Cameroon"},
            {"id": "2", "displayName": "Bruno Fernandes", "jersey": 8,
             "position": "Midfielder", "age": "unknown"},
        ],
    }


# =============================================================================
# CLIENT AND OPTIONS FIXTURES
# =============================================================================

@pytest.fixture
def mock_client(scoreboard_bytes, directory_bytes, schedule_bytes) -> Mock:
    """An ESPN client whose requests return the sample payloads."""
    client = Mock(spec=ESPNClient)
    client.get_scoreboard.return_value = scoreboard_bytes
    client.get_teams.return_value = directory_bytes
    client.get_team_schedule.return_value = schedule_bytes
    return client


@pytest.fixture
def match_day_options() -> QueryOptions:
    """Structured options pinned to the sample match day."""
    return QueryOptions(filters=MatchFilters(date=MATCH_DAY))


@pytest.fixture
def make_options() -> Callable[..., QueryOptions]:
    """Factory for options with custom filters."""

    def factory(output: str = "structured", detailed: bool = False, **filters) -> QueryOptions:
        filters.setdefault("date", MATCH_DAY)
        return QueryOptions(
            filters=MatchFilters(**filters),
            output=output,
            detailed=detailed,
        )

    return factory
