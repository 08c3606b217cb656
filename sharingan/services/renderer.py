"""
Renderer for classified matches.

Structured output groups matches under a header per lifecycle state and ends
with a count summary. Raw output echoes the provider bytes untouched.
"""

from typing import BinaryIO, Iterable, Optional, TextIO

from sharingan.models.match import Match, Status, TeamProfile
from sharingan.services.classifier import ClassifiedMatches

NO_MATCHES = "No matches found."

# Shown for a side the provider did not identify
UNKNOWN_SIDE = "TBD"


def render_raw(raw: bytes, out: BinaryIO) -> None:
    """Write the provider response verbatim."""
    out.write(raw)
    out.flush()


def format_teams(match: Match, with_score: bool) -> str:
    """Format the participants of a match on one line."""
    home, away = match.home, match.away
    if home is not None and away is not None:
        if with_score:
            return f"{home.name} {home.score} - {away.score} {away.name}"
        return f"{home.name} vs {away.name}"

    names = [p.name or UNKNOWN_SIDE for p in match.participants]
    if not names:
        return match.name or f"{UNKNOWN_SIDE} vs {UNKNOWN_SIDE}"
    if len(names) == 1:
        names.append(UNKNOWN_SIDE)
    if with_score:
        scores = " - ".join(p.score for p in match.participants)
        return f"{' vs '.join(names)} ({scores})"
    return " vs ".join(names)


def format_match(match: Match, detailed: bool = False) -> list[str]:
    """Format one match as output lines."""
    with_score = match.status in (Status.LIVE, Status.COMPLETED)
    when = match.status_detail if with_score else match.display_time
    line = f"  {format_teams(match, with_score)}"
    if when:
        line += f"  ({when})"
    lines = [line]

    if detailed:
        if match.league is not None and match.league.name:
            lines.append(f"      League: {match.league.name}")
        if match.venue is not None and match.venue.display:
            lines.append(f"      Venue: {match.venue.display}")
        if match.notes:
            lines.append(f"      Notes: {match.notes}")
        for detail in match.details:
            label = detail.type or detail.abbreviation
            lines.append(f"      {detail.clock} {label}".rstrip())
    return lines


def _summary(classified: ClassifiedMatches) -> str:
    parts = [
        f"{len(classified.live)} live",
        f"{len(classified.upcoming)} upcoming",
        f"{len(classified.completed)} completed",
    ]
    if classified.unknown:
        parts.append(f"{len(classified.unknown)} unknown")
    return f"Total: {classified.matched} matches ({', '.join(parts)})"


def render_classified(
    classified: ClassifiedMatches,
    out: TextIO,
    detailed: bool = False,
    title: Optional[str] = None,
) -> None:
    """Write matches grouped by lifecycle state.

    Args:
        classified: Bucketed matches
        out: Text stream to write to
        detailed: Include league, venue, notes and incidents
        title: Optional heading, e.g. the date of a crawled page
    """
    if title:
        print(f"=== {title} ===", file=out)

    if classified.is_empty():
        print(NO_MATCHES, file=out)
        if classified.unknown:
            print(f"\n{_summary(classified)}", file=out)
        return

    sections = [
        ("LIVE", classified.live),
        ("UPCOMING", classified.upcoming),
        ("COMPLETED", classified.completed),
    ]
    for header, matches in sections:
        if not matches:
            continue
        print(f"\n{header}", file=out)
        for match in matches:
            for line in format_match(match, detailed):
                print(line, file=out)

    print(f"\n{_summary(classified)}", file=out)


def render_matches(
    matches: Iterable[Match],
    out: TextIO,
    title: Optional[str] = None,
    detailed: bool = False,
) -> None:
    """Write a single ad-hoc sequence of matches, such as a team schedule."""
    matches = list(matches)
    if title:
        print(f"\n{title}", file=out)
    if not matches:
        print(NO_MATCHES, file=out)
        return
    for match in matches:
        for line in format_match(match, detailed):
            print(line, file=out)
    print(f"\nTotal: {len(matches)} matches", file=out)


def render_team_profile(profile: TeamProfile, out: TextIO, detailed: bool = False) -> None:
    """Write the team header: record, standing and squad.

    The structured record and standing are preferred over the provider's
    one-line summaries. The squad is listed in full only when detailed.
    """
    team = profile.team
    name = team.display_name or UNKNOWN_SIDE
    if team.abbreviation:
        name += f" ({team.abbreviation})"
    print(name, file=out)

    record = profile.record.display if profile.record else profile.record_summary
    if record:
        print(f"  Record: {record}", file=out)
    standing = profile.standing.display if profile.standing else ""
    standing = standing or profile.standing_summary
    if standing:
        print(f"  Standing: {standing}", file=out)

    if not profile.roster:
        return
    print(f"  Squad: {len(profile.roster)} players", file=out)
    if detailed:
        for player in profile.roster:
            jersey = f"#{player.jersey}" if player.jersey else "-"
            line = f"    {jersey:>3} {player.name}"
            if player.position:
                line += f" ({player.position})"
            print(line, file=out)
