"""
Tests for the code-review-karma.py launcher script
"""

import importlib.util
from pathlib import Path
from unittest.mock import patch

import pytest

from review_karma.errors import ComputationError, RateLimitedError
from review_karma.models import RankedEntry, ReportStatistics


SCRIPT = Path(__file__).resolve().parent.parent / 'code-review-karma.py'

# Import the launcher (note: filename has hyphens, not underscores)
spec = importlib.util.spec_from_file_location('code_review_karma', SCRIPT)
launcher = importlib.util.module_from_spec(spec)
spec.loader.exec_module(launcher)


@pytest.fixture
def env(monkeypatch):
    """Provide a complete environment and keep any local .env file out of the test."""
    monkeypatch.setenv('GITHUB_ACCESS_TOKEN', 'token123')
    monkeypatch.setenv('GITHUB_ORG', 'acme')
    monkeypatch.setenv('GITHUB_TEAMS', 'web')
    monkeypatch.setenv('NO_COLOR', '1')
    monkeypatch.setattr(launcher, 'load_dotenv', lambda: None)


class TestMain:
    """Test cases for main()."""

    def test_prints_report(self, env, capsys):
        entries = [RankedEntry('alice', 150, 150), RankedEntry('bob', 50, 50)]
        statistics = ReportStatistics(pull_request_count=4, reviewers=['alice', 'bob'], teams=['web'])

        with patch.object(launcher, 'build_report', return_value=(entries, statistics)) as mock_build:
            assert launcher.main() == 0

        config = mock_build.call_args.args[0]
        assert config.org == 'acme'
        assert config.team_names == ['web']

        out = capsys.readouterr().out
        assert '| alice        |         150 |       150 |' in out

    def test_rate_limit_exit_code(self, env, caplog):
        """Test that a fatal error is logged and turned into exit code 1."""
        with patch.object(launcher, 'build_report', side_effect=RateLimitedError()):
            assert launcher.main() == 1

        assert 'wait a few minutes' in caplog.text

    def test_no_activity_exit_code(self, env, caplog):
        with patch.object(launcher, 'build_report', side_effect=ComputationError('No review activity found')):
            assert launcher.main() == 1

        assert 'No karma report generated' in caplog.text

    def test_missing_configuration(self, env, monkeypatch, caplog):
        """Test that a missing org fails without touching GitHub."""
        monkeypatch.delenv('GITHUB_ORG')

        with patch('review_karma.builder.core.GitHubAPIClient') as mock_client:
            assert launcher.main() == 1

        mock_client.assert_not_called()
        assert 'GITHUB_ORG' in caplog.text
