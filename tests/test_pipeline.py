"""
End-to-end tests for the query pipelines and the command line.

The ESPN client is mocked; the crawler runs against an httpx mock transport.
"""

import io
from datetime import date
from unittest.mock import Mock

import httpx
import pytest
import requests

from sharingan import cli
from sharingan.clients.espn import ESPNClient
from sharingan.exceptions import DecodeError, TeamNotFound, TransportError
from sharingan.scraper.crawler import ScoreboardCrawler
from sharingan.services import pipeline
from sharingan.services.pipeline import ScoreboardPipeline, TeamPipeline
from sharingan.services.renderer import NO_MATCHES

from conftest import MATCH_DAY, competitor, encode, event


class TestScoreboardPipeline:
    """Tests for ScoreboardPipeline."""

    def test_structured_output(self, mock_client, match_day_options):
        out = io.StringIO()

        status = ScoreboardPipeline(mock_client, match_day_options).run(out)

        assert status == 0
        mock_client.get_scoreboard.assert_called_once_with(MATCH_DAY)
        assert "Arsenal 2 - 1 Chelsea  (45')" in out.getvalue()

    def test_default_date_is_yesterday(self, mock_client, make_options):
        options = make_options(date=None)

        ScoreboardPipeline(mock_client, options, today=date(2024, 3, 21)).run(io.StringIO())

        mock_client.get_scoreboard.assert_called_once_with(MATCH_DAY)

    def test_empty_scoreboard(self, mock_client, match_day_options, empty_scoreboard_bytes):
        """Zero events is a normal outcome."""
        mock_client.get_scoreboard.return_value = empty_scoreboard_bytes
        out = io.StringIO()

        status = ScoreboardPipeline(mock_client, match_day_options).run(out)

        assert status == 0
        assert out.getvalue() == f"{NO_MATCHES}\n"

    def test_filters_applied(self, mock_client, make_options):
        out = io.StringIO()

        ScoreboardPipeline(mock_client, make_options(team="Fulham")).run(out)

        output = out.getvalue()
        assert "Fulham" in output
        assert "Arsenal" not in output

    def test_raw_output(self, mock_client, make_options, scoreboard_bytes):
        """Raw mode echoes the response bytes without decoding."""
        mock_client.get_scoreboard.return_value = b"not json at all"
        raw_out = io.BytesIO()

        status = ScoreboardPipeline(mock_client, make_options(output="raw")).run(io.StringIO(), raw_out)

        assert status == 0
        assert raw_out.getvalue() == b"not json at all"

    def test_raw_output_needs_byte_stream(self, mock_client, make_options):
        """A text-only stream is rejected before anything is fetched."""
        with pytest.raises(ValueError, match="StringIO has no buffer"):
            ScoreboardPipeline(mock_client, make_options(output="raw")).run(io.StringIO())

        mock_client.get_scoreboard.assert_not_called()

    def test_current_board(self, mock_client, make_options):
        """The current board is requested without a date and not date-filtered."""
        late = event(
            "3001", "in", "78'",
            [
                competitor("359", "Arsenal", "ARS", "home", "1"),
                competitor("363", "Chelsea", "CHE", "away", "1"),
            ],
            when="2024-03-19T23:30Z",
        )
        mock_client.get_scoreboard.return_value = encode({"events": [late]})
        out = io.StringIO()

        pipe = ScoreboardPipeline(mock_client, make_options(date=None, current_board=True), today=MATCH_DAY)
        status = pipe.run(out)

        assert status == 0
        mock_client.get_scoreboard.assert_called_once_with(None)
        assert "Arsenal 1 - 1 Chelsea  (78')" in out.getvalue()

    def test_dated_board_drops_previous_day(self, mock_client, make_options):
        late = event("3001", "in", "78'", [], when="2024-03-19T23:30Z", name="Chelsea at Arsenal")
        mock_client.get_scoreboard.return_value = encode({"events": [late]})
        out = io.StringIO()

        ScoreboardPipeline(mock_client, make_options()).run(out)

        mock_client.get_scoreboard.assert_called_once_with(MATCH_DAY)
        assert "Chelsea at Arsenal" not in out.getvalue()

    def test_malformed_response(self, mock_client, match_day_options):
        mock_client.get_scoreboard.return_value = b"<html>"

        with pytest.raises(DecodeError):
            ScoreboardPipeline(mock_client, match_day_options).run(io.StringIO())


class TestScoreboardRange:
    """Tests for multi-day queries, which go through the crawler."""

    @pytest.fixture
    def client(self):
        session = Mock(spec=requests.Session)
        session.headers = {}
        return ESPNClient(session=session)

    @pytest.fixture
    def use_transport(self, monkeypatch):
        """Route the pipeline's crawler through a mock transport."""

        def install(handler):
            def factory(client, build=True):
                return ScoreboardCrawler(client, build=build, transport=httpx.MockTransport(handler))

            monkeypatch.setattr(pipeline, "ScoreboardCrawler", factory)

        return install

    @staticmethod
    def page(request):
        day = request.url.params["dates"]
        return httpx.Response(200, content=encode({"events": [event(
            f"e-{day}", "post", "FT",
            [competitor("1", "Home FC", "HOM", "home", "2"), competitor("2", "Away FC", "AWA", "away", "2")],
            when=f"{day}T15:00Z",
        )]}))

    def test_one_section_per_day(self, client, make_options, use_transport):
        use_transport(self.page)
        out = io.StringIO()

        status = ScoreboardPipeline(client, make_options(date_range_days=3)).run(out)

        output = out.getvalue()
        assert status == 0
        for day in ("2024-03-20", "2024-03-21", "2024-03-22"):
            assert f"=== {day} ===" in output
        assert output.count("Home FC 2 - 2 Away FC  (FT)") == 3

    def test_failed_day_sets_exit_status(self, client, make_options, use_transport, capsys):
        def handler(request):
            if request.url.params["dates"] == "2024-03-21":
                return httpx.Response(502, content=b"bad gateway")
            return self.page(request)

        use_transport(handler)
        out = io.StringIO()

        status = ScoreboardPipeline(client, make_options(date_range_days=3)).run(out)

        assert status == 1
        assert "=== 2024-03-20 ===" in out.getvalue()
        assert "=== 2024-03-21 ===" not in out.getvalue()
        assert "2024-03-21" in capsys.readouterr().err

    def test_raw_range(self, client, make_options, use_transport):
        use_transport(lambda request: httpx.Response(200, content=b"{}"))
        raw_out = io.BytesIO()

        status = ScoreboardPipeline(client, make_options(output="raw", date_range_days=2)).run(
            io.StringIO(), raw_out
        )

        assert status == 0
        assert raw_out.getvalue() == b"{}{}"


class TestTeamPipeline:
    """Tests for TeamPipeline."""

    def test_resolves_and_fetches_schedule(self, mock_client, make_options):
        """'MUN' resolves Manchester United and its id drives the schedule fetch."""
        out = io.StringIO()

        status = TeamPipeline(mock_client, make_options()).run("MUN", out)

        assert status == 0
        mock_client.get_team_schedule.assert_called_once_with("360")
        output = out.getvalue()
        assert output.startswith("Manchester United (MUN)\n")
        assert "Record: 15-5-9" in output
        assert "Manchester United 2 - 1 Arsenal  (FT)" in output
        assert "\nFixtures\n" in output

    def test_past_only(self, mock_client, make_options):
        out = io.StringIO()

        TeamPipeline(mock_client, make_options()).run("MUN", out, past=True)

        assert "Results" in out.getvalue()
        assert "Fixtures" not in out.getvalue()

    def test_upcoming_only(self, mock_client, make_options):
        out = io.StringIO()

        TeamPipeline(mock_client, make_options()).run("MUN", out, upcoming=True)

        assert "Results" not in out.getvalue()
        assert "Fixtures" in out.getvalue()

    def test_unknown_team(self, mock_client, make_options):
        with pytest.raises(TeamNotFound):
            TeamPipeline(mock_client, make_options()).run("Barcelona", io.StringIO())

        mock_client.get_team_schedule.assert_not_called()

    def test_raw_schedule(self, mock_client, make_options, schedule_bytes):
        raw_out = io.BytesIO()

        TeamPipeline(mock_client, make_options(output="raw")).run("MUN", io.StringIO(), raw_out)

        assert raw_out.getvalue() == schedule_bytes

    def test_raw_schedule_needs_byte_stream(self, mock_client, make_options):
        with pytest.raises(ValueError, match="no buffer"):
            TeamPipeline(mock_client, make_options(output="raw")).run("MUN", io.StringIO())

    def test_profile_with_record_and_squad(self, mock_client, make_options, profile_schedule_payload):
        mock_client.get_team_schedule.return_value = encode(profile_schedule_payload)
        out = io.StringIO()

        TeamPipeline(mock_client, make_options(detailed=True)).run("MUN", out)

        output = out.getvalue()
        assert "  Record: 15W 5D 9L (GF 48, GA 40)\n" in output
        assert "  Standing: #6, in EPL, 50 pts, GD +8, form WWDLW\n" in output
        assert "  Squad: 2 players\n" in output
        assert "#24 Andre Onana (Goalkeeper)" in output


class TestByteStream:
    """Tests for picking the raw output stream."""

    def test_explicit_stream_wins(self):
        raw_out = io.BytesIO()

        assert pipeline.byte_stream(io.StringIO(), raw_out) is raw_out

    def test_text_wrapper_buffer(self):
        buffer = io.BytesIO()
        out = io.TextIOWrapper(buffer)

        assert pipeline.byte_stream(out) is buffer

    def test_no_buffer(self):
        with pytest.raises(ValueError):
            pipeline.byte_stream(io.StringIO())


class TestCommandLine:
    """Tests for the argparse entry point."""

    def test_past(self, mock_client, capsys):
        status = cli.main(["past", "--date", "2024-03-20"], client=mock_client)

        assert status == 0
        mock_client.get_scoreboard.assert_called_once_with(MATCH_DAY)
        assert "Total: 3 matches" in capsys.readouterr().out

    def test_live_reads_current_board(self, mock_client, capsys):
        """live sends no date to the provider."""
        status = cli.main(["live", "--league", "EPL"], client=mock_client)

        assert status == 0
        mock_client.get_scoreboard.assert_called_once_with(None)
        assert "LIVE" in capsys.readouterr().out

    def test_live_keeps_match_started_yesterday(self, mock_client, capsys):
        """A match kicked off at 23:30 UTC the day before and still in play is listed."""
        late = event(
            "3001", "in", "78'",
            [
                competitor("359", "Arsenal", "ARS", "home", "1"),
                competitor("363", "Chelsea", "CHE", "away", "1"),
            ],
            when="2024-03-19T23:30Z",
        )
        mock_client.get_scoreboard.return_value = encode({"events": [late]})

        status = cli.main(["live"], client=mock_client)

        output = capsys.readouterr().out
        assert status == 0
        assert "Arsenal 1 - 1 Chelsea  (78')" in output
        assert "Total: 1 matches (1 live" in output

    def test_empty_result_exits_zero(self, mock_client, empty_scoreboard_bytes, capsys):
        mock_client.get_scoreboard.return_value = empty_scoreboard_bytes

        assert cli.main(["past", "--date", "2024-03-20"], client=mock_client) == 0
        assert NO_MATCHES in capsys.readouterr().out

    def test_malformed_response_exits_nonzero(self, mock_client, capsys):
        mock_client.get_scoreboard.return_value = b"<html>oops</html>"

        status = cli.main(["past", "--date", "2024-03-20"], client=mock_client)

        assert status == 1
        err = capsys.readouterr().err
        assert "could not read provider response" in err
        assert "Traceback" not in err

    def test_transport_error_exits_nonzero(self, mock_client, capsys):
        mock_client.get_scoreboard.side_effect = TransportError("HTTP 503 from espn", status_code=503)

        assert cli.main(["past"], client=mock_client) == 1
        assert "HTTP 503" in capsys.readouterr().err

    def test_team(self, mock_client, capsys):
        status = cli.main(["team", "MUN", "--past"], client=mock_client)

        assert status == 0
        assert "Manchester United (MUN)" in capsys.readouterr().out

    def test_team_not_found_guidance(self, mock_client, capsys):
        status = cli.main(["team", "Barcelona"], client=mock_client)

        err = capsys.readouterr().err
        assert status == 1
        assert "No team matching 'Barcelona'" in err
        assert "--team-league" in err

    def test_invalid_date_is_usage_error(self, mock_client):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["past", "--date", "20/03/2024"], client=mock_client)

        assert exc_info.value.code == 2

    def test_range_must_be_positive(self, mock_client):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["past", "--range", "0"], client=mock_client)

        assert exc_info.value.code == 2

    def test_past_and_upcoming_exclusive(self, mock_client):
        with pytest.raises(SystemExit):
            cli.main(["team", "MUN", "--past", "--upcoming"], client=mock_client)


class TestBuildOptions:
    """Tests for argument to options mapping."""

    def test_past_options(self):
        args = cli.build_parser().parse_args([
            "--sport", "basketball", "--debug",
            "past", "--date", "2024-03-20", "--range", "3", "--team", "Lakers",
            "--format", "raw", "--detailed",
        ])

        options = cli.build_options(args)

        assert options.sport == "basketball"
        assert options.debug is True
        assert options.detailed is True
        assert options.output.value == "raw"
        assert options.filters.date == MATCH_DAY
        assert options.filters.date_range_days == 3
        assert options.filters.team == "Lakers"

    def test_live_options(self):
        args = cli.build_parser().parse_args(["live", "--search", "derby"])

        options = cli.build_options(args)

        assert options.filters.current_board is True
        assert options.filters.date is None
        assert options.filters.date_range_days == 1
        assert options.filters.text == "derby"

    def test_team_options(self):
        args = cli.build_parser().parse_args(["team", "Lakers", "--team-league", "nba"])

        options = cli.build_options(args)

        assert options.team_league == "nba"
        assert options.filters.date is None
        assert options.filters.current_board is False
