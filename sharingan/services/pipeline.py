"""
Fetch, normalize, classify and render: the one query flow behind every command.

Output format, detail level and sport are read from QueryOptions rather than
selected by separate code paths. In raw mode the response bytes are written
out untouched and normalization is skipped.
"""

import logging
import sys
from datetime import date
from typing import BinaryIO, Optional, TextIO

from sharingan.clients.espn import ESPNClient
from sharingan.models.match import Team
from sharingan.models.query import OutputMode, QueryOptions
from sharingan.scraper.crawler import Fragment, ScoreboardCrawler
from sharingan.services.builder import (
    build_directory,
    build_matches,
    build_schedule_matches,
    build_team_profile,
)
from sharingan.services.classifier import (
    ClassifiedMatches,
    classify,
    classify_filtered,
    days_in_range,
    resolve_date_range,
)
from sharingan.services.decoder import (
    decode_scoreboard,
    decode_team_directory,
    decode_team_schedule,
)
from sharingan.services.renderer import (
    render_classified,
    render_matches,
    render_raw,
    render_team_profile,
)
from sharingan.services.team_resolver import resolve_team

logger = logging.getLogger(__name__)


def byte_stream(out: TextIO, raw_out: Optional[BinaryIO] = None) -> BinaryIO:
    """Pick the byte stream raw output is written to.

    Raises:
        ValueError: If no byte stream was given and out has no underlying buffer
    """
    if raw_out is not None:
        return raw_out
    buffer = getattr(out, "buffer", None)
    if buffer is None:
        raise ValueError(
            f"Raw output needs a byte stream, and {type(out).__name__} has no buffer"
        )
    return buffer


class ScoreboardPipeline:
    """Scoreboard query: one request, or a crawl when the window spans several days."""

    def __init__(
        self,
        client: ESPNClient,
        options: QueryOptions,
        today: Optional[date] = None,
    ) -> None:
        self.client = client
        self.options = options
        self.today = today

    @property
    def raw_output(self) -> bool:
        return self.options.output == OutputMode.RAW

    def request_day(self) -> Optional[date]:
        """Date sent to the provider, or None for its current board."""
        if self.options.filters.current_board:
            return None
        start, _ = resolve_date_range(self.options.filters, self.today)
        return start

    def fetch_classified(self) -> ClassifiedMatches:
        """Fetch one scoreboard page and classify it."""
        filters = self.options.filters
        raw = self.client.get_scoreboard(self.request_day())
        matches = build_matches(decode_scoreboard(raw))
        return classify_filtered(matches, filters, self.today)

    def run(self, out: Optional[TextIO] = None, raw_out: Optional[BinaryIO] = None) -> int:
        """Run the query and write its output.

        Args:
            out: Stream for structured output
            raw_out: Byte stream for raw output, defaults to out's buffer

        Returns:
            Process exit status
        """
        out = out or sys.stdout
        if self.raw_output:
            raw_out = byte_stream(out, raw_out)
        if self.options.filters.date_range_days > 1:
            return self._run_crawl(out, raw_out)

        if self.raw_output:
            render_raw(self.client.get_scoreboard(self.request_day()), raw_out)
            return 0

        classified = self.fetch_classified()
        render_classified(classified, out, detailed=self.options.detailed)
        return 0

    def _run_crawl(self, out: TextIO, raw_out: BinaryIO) -> int:
        filters = self.options.filters
        days = days_in_range(filters, self.today)
        crawler = ScoreboardCrawler(self.client, build=not self.raw_output)

        def on_fragment(fragment: Fragment) -> None:
            if self.raw_output:
                render_raw(fragment.raw, raw_out)
                return
            day_filters = filters.model_copy(update={"date": fragment.day, "date_range_days": 1})
            classified = classify_filtered(fragment.matches or [], day_filters, self.today)
            render_classified(
                classified,
                out,
                detailed=self.options.detailed,
                title=fragment.day.isoformat(),
            )

        result = crawler.run(days, on_fragment)
        for failure in result.failed:
            print(f"Error: {failure.day}: {failure.error}", file=sys.stderr)
        return 0 if result.ok else 1


class TeamPipeline:
    """Team query: resolve a name against the directory, then fetch its schedule."""

    def __init__(self, client: ESPNClient, options: QueryOptions) -> None:
        self.client = client
        self.options = options

    def resolve(self, identifier: str) -> Team:
        """Fetch the team directory and resolve an identifier against it.

        Raises:
            TeamNotFound: If no directory entry matches
        """
        directory = build_directory(decode_team_directory(self.client.get_teams()))
        logger.info(f"Team directory has {len(directory)} entries")
        return resolve_team(identifier, directory)

    def run(
        self,
        identifier: str,
        out: Optional[TextIO] = None,
        raw_out: Optional[BinaryIO] = None,
        past: bool = False,
        upcoming: bool = False,
    ) -> int:
        """Resolve a team and write its profile and schedule.

        Args:
            identifier: Team name fragment or abbreviation
            out: Stream for structured output
            raw_out: Byte stream for raw output
            past: Only show results
            upcoming: Only show fixtures

        Returns:
            Process exit status
        """
        out = out or sys.stdout
        team = self.resolve(identifier)
        raw = self.client.get_team_schedule(team.id)

        if self.options.output == OutputMode.RAW:
            render_raw(raw, byte_stream(out, raw_out))
            return 0

        schedule = decode_team_schedule(raw)
        profile = build_team_profile(schedule, fallback=team)
        classified = classify(build_schedule_matches(schedule))

        render_team_profile(profile, out, detailed=self.options.detailed)
        detailed = self.options.detailed
        if classified.live and not past and not upcoming:
            render_matches(classified.live, out, title="Live", detailed=detailed)
        if not upcoming:
            render_matches(classified.completed, out, title="Results", detailed=detailed)
        if not past:
            render_matches(classified.upcoming, out, title="Fixtures", detailed=detailed)
        return 0
