"""
Unit tests for console and Slack report rendering
"""

import pytest

from review_karma.config import ReportConfig
from review_karma.models import RankedEntry, ReportStatistics
from review_karma.output import ReportFormatter, CYAN, GREEN, RESET


@pytest.fixture
def config():
    return ReportConfig(access_token='t', org='acme', team_names=['web', 'api'], days_to_report=14)


@pytest.fixture
def entries():
    return [RankedEntry('alice', 150, 150), RankedEntry('bob', 50, 50)]


@pytest.fixture
def statistics():
    return ReportStatistics(
        pull_request_count=12,
        reviewers=['alice', 'bob', 'carol'],
        omitted_reviewers=['carol'],
        teams=['web', 'api']
    )


class TestFormatTable:
    """Test cases for the shared table layout."""

    def test_plain_table(self, config, entries):
        lines = ReportFormatter(config, use_color=False).format_table(entries)

        assert lines[1] == '| Reviewer     | Karma Score | % of Avg. |'
        assert lines[3] == '| alice        |         150 |       150 |'
        assert lines[4] == '| bob          |          50 |        50 |'
        # rules match the row width
        assert lines[0] == '-' * len(lines[1])
        assert lines[-1] == lines[0]

    def test_long_reviewer_names_widen_column(self, config):
        lines = ReportFormatter(config, use_color=False).format_table(
            [RankedEntry('a-very-long-reviewer-login', 10, 100)])

        assert lines[3].startswith('| a-very-long-reviewer-login |')
        assert len(lines[0]) == len(lines[3])

    def test_colored_table(self, config, entries):
        lines = ReportFormatter(config, use_color=True).format_table(entries, colored=True)

        assert f"{CYAN}Karma Score{RESET}" in lines[1]
        assert f"{GREEN}alice" in lines[3]

    def test_empty_table(self, config):
        lines = ReportFormatter(config, use_color=False).format_table([])
        assert len(lines) == 4


class TestConsoleReport:

    def test_print_console_report(self, config, entries, statistics, capsys):
        ReportFormatter(config, use_color=False).print_console_report(entries, statistics)

        out = capsys.readouterr().out
        assert 'Code Review Karma report for teams: web, api in the acme github org.' in out
        assert 'Report based on 12 reviewed pull requests over the past 14 days.' in out
        assert '| alice        |         150 |       150 |' in out
        assert 'Excluded from report due to no review activity: carol' in out

    def test_no_omitted_line_when_everyone_scored(self, config, entries, capsys):
        statistics = ReportStatistics(pull_request_count=1, reviewers=['alice', 'bob'], teams=['web'])

        ReportFormatter(config, use_color=False).print_console_report(entries, statistics)

        out = capsys.readouterr().out
        assert 'Excluded from report' not in out
        assert 'report for team: web in' in out


class TestSlackReport:

    def test_format_slack_report(self, config, entries, statistics):
        message = ReportFormatter(config).format_slack_report(entries, statistics)

        assert message.startswith('Code Review Karma report for teams:\n*web, api* in the *acme* github org.\n')
        assert 'Report based on *12* reviewed pull requests over the past *14* days:' in message
        assert '```\n---' in message
        assert '| bob          |          50 |        50 |' in message
        assert 'Excluded due to no review activity: carol' in message
        # Slack never gets ANSI colors
        assert '\033[' not in message
