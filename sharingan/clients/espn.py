"""ESPN site API client."""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import requests

from sharingan import config
from sharingan.exceptions import TransportError
from sharingan.models.query import QueryOptions

logger = logging.getLogger(__name__)

# Format of the `dates` query parameter
DATE_PARAM_FORMAT = "%Y-%m-%d"


def default_headers() -> dict[str, str]:
    """Headers sent with every provider request."""
    return {
        "Accept": "application/json",
        "User-Agent": config.USER_AGENT,
    }


def scoreboard_params(day: Optional[date]) -> dict[str, str]:
    """Query parameters of a scoreboard request."""
    if day is None:
        return {}
    return {"dates": day.strftime(DATE_PARAM_FORMAT)}


class ESPNClient:
    """
    Blocking client for ESPN's public site API.

    Every method performs exactly one GET and returns the raw response body;
    decoding is left to the caller so that raw output can bypass it. There is
    no retry: a failed request surfaces immediately as TransportError.
    """

    def __init__(
        self,
        sport: str = config.SPORT,
        league_path: str = config.SCOREBOARD_LEAGUE,
        team_league: str = config.TEAM_LEAGUE,
        timeout: float = config.REQUEST_TIMEOUT_SECONDS,
        debug: bool = config.DEBUG,
        base_url: str = config.ESPN_BASE_URL,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client.

        Args:
            sport: Sport path segment (e.g. "soccer")
            league_path: League path segment for scoreboards (e.g. "all", "eng.1")
            team_league: League path segment for the team directory
            timeout: Per-request timeout in seconds
            debug: Also write every response body to config.DEBUG_DUMP_FILE
            base_url: API root
            session: Optional requests session to reuse
        """
        self.sport = sport
        self.league_path = league_path
        self.team_league = team_league
        self.timeout = timeout
        self.debug = debug
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update(default_headers())

    @classmethod
    def from_options(cls, options: QueryOptions, **kwargs) -> "ESPNClient":
        """Create a client configured from per-invocation options."""
        return cls(
            sport=options.sport,
            league_path=options.league_path,
            team_league=options.team_league,
            debug=options.debug,
            **kwargs,
        )

    def scoreboard_url(self) -> str:
        return f"{self.base_url}/{self.sport}/{self.league_path}/scoreboard"

    def teams_url(self) -> str:
        return f"{self.base_url}/{self.sport}/{self.team_league}/teams"

    def team_schedule_url(self, team_id: str) -> str:
        return f"{self.teams_url()}/{team_id}/schedule"

    def _request(self, url: str, params: Optional[dict] = None) -> bytes:
        """
        Perform one GET request.

        Args:
            url: Full endpoint URL
            params: Query parameters

        Returns:
            Raw response body

        Raises:
            TransportError: On network failure, timeout or HTTP error status
        """
        logger.info(f"GET {url} params={params or {}}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as e:
            raise TransportError(
                f"Request timed out after {self.timeout}s: {url}", url=url
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed for {url}: {e}", url=url) from e

        if response.status_code >= 400:
            raise TransportError(
                f"HTTP {response.status_code} from {url}",
                url=url,
                status_code=response.status_code,
            )

        raw = response.content
        if self.debug:
            self.dump_debug(raw)
        return raw

    def dump_debug(self, raw: bytes) -> None:
        """Persist a response body for offline inspection."""
        path = Path(config.DEBUG_DUMP_FILE)
        try:
            path.write_bytes(raw)
            logger.debug(f"Wrote {len(raw)} bytes to {path}")
        except OSError as e:
            logger.warning(f"Could not write debug dump {path}: {e}")

    def get_scoreboard(self, day: Optional[date] = None) -> bytes:
        """Fetch the scoreboard, optionally for one calendar date."""
        return self._request(self.scoreboard_url(), scoreboard_params(day))

    def get_teams(self) -> bytes:
        """Fetch the team directory of the configured league."""
        return self._request(self.teams_url())

    def get_team_schedule(self, team_id: str) -> bytes:
        """Fetch a team's schedule and season summary."""
        return self._request(self.team_schedule_url(team_id))
