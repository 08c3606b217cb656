"""Team directory search."""

import logging
from typing import Iterable

from sharingan.exceptions import TeamNotFound
from sharingan.models.match import Team

logger = logging.getLogger(__name__)


def team_matches(team: Team, identifier: str) -> bool:
    """Check one directory entry against a lowercase identifier.

    An entry matches when its display name contains the identifier, or its
    abbreviation equals it exactly.
    """
    if identifier in team.display_name.lower():
        return True
    return bool(team.abbreviation) and team.abbreviation.lower() == identifier


def resolve_team(identifier: str, directory: Iterable[Team]) -> Team:
    """Find the first directory entry matching a user-supplied identifier.

    Entries are checked in directory order and the first one matching either
    rule wins, so an exact abbreviation match further down the directory does
    not beat an earlier name match.

    Args:
        identifier: Team name fragment or abbreviation
        directory: Teams in directory order

    Returns:
        The matching Team

    Raises:
        TeamNotFound: If no entry matches
    """
    needle = identifier.strip().lower()
    size = 0
    for team in directory:
        size += 1
        if needle and team_matches(team, needle):
            logger.info(f"Resolved '{identifier}' to {team.display_name} ({team.id})")
            return team

    raise TeamNotFound(identifier, directory_size=size)
