"""
Command-line entry point.

Usage:
    sharingan live --league EPL
    sharingan past --date 2024-03-20 --range 3
    sharingan team "Manchester United" --past
"""

import argparse
import logging
import sys
from datetime import date
from typing import Optional, Sequence

from sharingan import __version__, config
from sharingan.clients.espn import ESPNClient
from sharingan.exceptions import DecodeError, TeamNotFound, TransportError
from sharingan.models.query import MatchFilters, OutputMode, QueryOptions
from sharingan.services.pipeline import ScoreboardPipeline, TeamPipeline

logger = logging.getLogger(__name__)

EXIT_ERROR = 1


def configure_logging(level: str) -> None:
    """Configure root logging once per process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--format', dest='output', default=OutputMode.STRUCTURED.value,
                        choices=[mode.value for mode in OutputMode],
                        help='Output grouped text or the raw provider JSON')
    parser.add_argument('--detailed', action='store_true',
                        help='Include league, venue, notes and incidents')


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--league', help='League name or abbreviation, e.g. EPL')
    parser.add_argument('--team', help='Only matches involving this team')
    parser.add_argument('--search', dest='text', help='Free-text search')


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog='sharingan',
        description='Live scores, past results and team schedules from ESPN.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--sport', default=config.SPORT,
                        help='Sport path segment (default: %(default)s)')
    parser.add_argument('--debug', action='store_true', default=config.DEBUG,
                        help=f'Also write raw responses to {config.DEBUG_DUMP_FILE}')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')

    subparsers = parser.add_subparsers(dest='command', required=True)

    live = subparsers.add_parser('live', help="The provider's current scoreboard")
    _add_filter_arguments(live)
    _add_output_arguments(live)

    past = subparsers.add_parser('past', help='Past match results')
    _add_filter_arguments(past)
    past.add_argument('--date', type=_parse_date,
                      help='First date to show (YYYY-MM-DD, default: yesterday)')
    past.add_argument('--range', dest='date_range', type=_positive_int, default=1,
                      help='Number of consecutive days to show (default: %(default)s)')
    _add_output_arguments(past)

    team = subparsers.add_parser('team', help='Team profile and schedule')
    team.add_argument('identifier', help='Team name or abbreviation, e.g. "MUN"')
    team.add_argument('--team-league', default=config.TEAM_LEAGUE,
                      help='League whose team directory is searched (default: %(default)s)')
    when = team.add_mutually_exclusive_group()
    when.add_argument('--past', action='store_true', help='Only show results')
    when.add_argument('--upcoming', action='store_true', help='Only show fixtures')
    _add_output_arguments(team)

    return parser


def build_options(args: argparse.Namespace) -> QueryOptions:
    """Turn parsed arguments into the per-invocation options record.

    `live` reads the provider's current board, so a match that kicked off
    before midnight UTC and is still in play is not dropped by a date window.
    """
    filters = MatchFilters()
    if args.command == 'live':
        filters = MatchFilters(
            league=args.league,
            team=args.team,
            text=args.text,
            current_board=True,
        )
    elif args.command == 'past':
        filters = MatchFilters(
            league=args.league,
            team=args.team,
            text=args.text,
            date=args.date,
            date_range_days=args.date_range,
        )

    return QueryOptions(
        filters=filters,
        output=OutputMode(args.output),
        detailed=args.detailed,
        debug=args.debug,
        sport=args.sport,
        team_league=getattr(args, 'team_league', config.TEAM_LEAGUE),
    )


def main(argv: Optional[Sequence[str]] = None, client: Optional[ESPNClient] = None) -> int:
    """Run the command line and return the exit status."""
    args = build_parser().parse_args(argv)
    configure_logging('DEBUG' if args.verbose else config.LOG_LEVEL)

    options = build_options(args)
    client = client or ESPNClient.from_options(options)

    try:
        if args.command == 'team':
            return TeamPipeline(client, options).run(
                args.identifier, past=args.past, upcoming=args.upcoming
            )
        return ScoreboardPipeline(client, options).run()
    except TeamNotFound as e:
        print(f"Error: {e}", file=sys.stderr)
        print(
            "Try a shorter part of the name, the team abbreviation (e.g. MUN), "
            "or another league with --team-league.",
            file=sys.stderr,
        )
        return EXIT_ERROR
    except DecodeError as e:
        logger.debug("Decode failure", exc_info=True)
        print(f"Error: could not read provider response: {e}", file=sys.stderr)
        return EXIT_ERROR
    except TransportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
