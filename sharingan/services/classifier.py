"""
Classification and filter engine.

Buckets canonical matches by lifecycle state and applies the user's filters.
Provider order is preserved inside every bucket, and every input match is
accounted for: it lands in one of the three lifecycle buckets, in the
unknown list, or in the filtered-out count.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from pydantic import BaseModel

from sharingan.models.match import Match, Status
from sharingan.models.query import MatchFilters

logger = logging.getLogger(__name__)


class ClassifiedMatches(BaseModel):
    """Matches grouped by lifecycle state."""

    upcoming: tuple[Match, ...] = ()
    live: tuple[Match, ...] = ()
    completed: tuple[Match, ...] = ()
    unknown: tuple[Match, ...] = ()
    filtered_out: int = 0

    class Config:
        """Pydantic configuration."""

        frozen = True

    @property
    def matched(self) -> int:
        """Number of matches in the three lifecycle buckets."""
        return len(self.upcoming) + len(self.live) + len(self.completed)

    @property
    def total(self) -> int:
        """Number of input matches, including unknown and filtered ones."""
        return self.matched + len(self.unknown) + self.filtered_out

    def is_empty(self) -> bool:
        """True when no match survived filtering in any lifecycle bucket."""
        return self.matched == 0


def today_utc() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def resolve_date_range(filters: MatchFilters, today: Optional[date] = None) -> tuple[date, date]:
    """Resolve the inclusive date window of a filter.

    Without an explicit date the window starts yesterday, since the tool is
    mostly queried for results.

    Args:
        filters: Match filters
        today: Reference date, defaults to the current UTC date

    Returns:
        (start, end) tuple, both inclusive
    """
    if filters.date is not None:
        start = filters.date
    else:
        start = (today or today_utc()) - timedelta(days=1)
    end = start + timedelta(days=filters.date_range_days - 1)
    return start, end


def days_in_range(filters: MatchFilters, today: Optional[date] = None) -> list[date]:
    """List every calendar date of a filter's window, in order."""
    start, _ = resolve_date_range(filters, today)
    return [start + timedelta(days=offset) for offset in range(filters.date_range_days)]


def matches_league(match: Match, league: Optional[str]) -> bool:
    """Check a match against a league filter.

    Passes when the filter text appears in the match name, or equals the
    league abbreviation or league name. All checks ignore case.
    """
    if not league:
        return True
    needle = league.lower()
    if needle in match.name.lower():
        return True
    if match.league is None:
        return False
    return (
        match.league.abbreviation.lower() == needle
        or match.league.name.lower() == needle
    )


def matches_team(match: Match, team: Optional[str]) -> bool:
    """Check whether any participant matches a team filter."""
    if not team:
        return True
    needle = team.lower()
    for participant in match.participants:
        if needle in participant.name.lower():
            return True
        if participant.abbreviation and participant.abbreviation.lower() == needle:
            return True
    return False


def matches_text(match: Match, text: Optional[str]) -> bool:
    """Free-text search over the match name, notes and venue."""
    if not text:
        return True
    needle = text.lower()
    haystack = [match.name, match.short_name, match.notes or ""]
    if match.venue is not None:
        haystack.append(match.venue.display)
    return any(needle in value.lower() for value in haystack)


def matches_date(match: Match, start: date, end: date) -> bool:
    """Check that a match falls inside an inclusive UTC date window.

    Matches without a parsed timestamp are kept.
    """
    if match.scheduled is None:
        return True
    day = match.scheduled.astimezone(timezone.utc).date()
    return start <= day <= end


def filter_matches(
    matches: Iterable[Match],
    filters: MatchFilters,
    today: Optional[date] = None,
) -> list[Match]:
    """Apply every filter to a sequence of matches, preserving order."""
    start, end = resolve_date_range(filters, today)
    return [
        match for match in matches
        if matches_league(match, filters.league)
        and matches_team(match, filters.team)
        and matches_text(match, filters.text)
        and (filters.current_board or matches_date(match, start, end))
    ]


def classify(matches: Iterable[Match], filtered_out: int = 0) -> ClassifiedMatches:
    """Bucket matches by status without filtering."""
    buckets: dict[Status, list[Match]] = {status: [] for status in Status}
    for match in matches:
        buckets[match.status].append(match)

    return ClassifiedMatches(
        upcoming=tuple(buckets[Status.UPCOMING]),
        live=tuple(buckets[Status.LIVE]),
        completed=tuple(buckets[Status.COMPLETED]),
        unknown=tuple(buckets[Status.UNKNOWN]),
        filtered_out=filtered_out,
    )


def classify_filtered(
    matches: Iterable[Match],
    filters: MatchFilters,
    today: Optional[date] = None,
) -> ClassifiedMatches:
    """Filter then bucket matches.

    Args:
        matches: Matches in provider order
        filters: Filters to apply
        today: Reference date for the default date window

    Returns:
        ClassifiedMatches whose total equals the number of input matches
    """
    matches = list(matches)
    kept = filter_matches(matches, filters, today)
    result = classify(kept, filtered_out=len(matches) - len(kept))
    logger.info(
        f"Classified {result.total} matches: {len(result.live)} live, "
        f"{len(result.upcoming)} upcoming, {len(result.completed)} completed, "
        f"{len(result.unknown)} unknown, {result.filtered_out} filtered out"
    )
    return result
