"""
Unit tests for report configuration
"""

import pytest

from review_karma.config import ReportConfig, ThrottleSchedule, split_team_names
from review_karma.errors import ConfigurationError
from review_karma.file_filters import DEFAULT_EXCLUDED_FILE_PATTERNS


BASE_ENV = {
    'GITHUB_ACCESS_TOKEN': 'token123',
    'GITHUB_ORG': 'acme',
    'GITHUB_TEAMS': 'web,api',
}


class TestFromEnv:
    """Test cases for reading the environment."""

    def test_defaults(self):
        config = ReportConfig.from_env(BASE_ENV)

        assert config.access_token == 'token123'
        assert config.org == 'acme'
        assert config.team_names == ['web', 'api']
        assert config.days_to_report == 30
        assert config.karma_per_review == 50
        assert config.karma_percent_per_comment == 25
        assert config.excluded_author == 'optibot-cd'
        assert config.excluded_file_patterns == DEFAULT_EXCLUDED_FILE_PATTERNS
        assert config.max_workers == 10
        assert config.throttle == ThrottleSchedule(5, 10, 100)

    def test_github_token_fallback(self):
        env = {'GITHUB_TOKEN': 'fallback', 'GITHUB_ORG': 'acme', 'GITHUB_TEAMS': 'web'}
        assert ReportConfig.from_env(env).access_token == 'fallback'

    def test_overrides_from_env(self):
        env = dict(BASE_ENV, **{
            'DAYS_TO_REPORT': '7',
            'KARMA_PER_REVIEW': '20',
            'KARMA_PERCENT_PER_COMMENT': '10',
            'EXCLUDED_AUTHOR': 'renovate-bot',
            'EXCLUDED_FILE_PATTERNS': '*.snap, yarn.lock',
            'MAX_WORKERS': '3',
            'THROTTLE_BASE_DELAY_MS': '0',
            'THROTTLE_PER_PR_DELAY_MS': '25',
            'THROTTLE_PER_REPO_DELAY_MS': '250',
        })

        config = ReportConfig.from_env(env)

        assert config.days_to_report == 7
        assert config.karma_per_review == 20
        assert config.karma_percent_per_comment == 10
        assert config.excluded_author == 'renovate-bot'
        assert config.excluded_file_patterns == ['*.snap', 'yarn.lock']
        assert config.max_workers == 3
        assert config.throttle == ThrottleSchedule(0, 25, 250)

    def test_blank_excluded_author_disables_exclusion(self):
        config = ReportConfig.from_env(dict(BASE_ENV, EXCLUDED_AUTHOR=''))
        assert config.excluded_author is None

    def test_invalid_integer_uses_default(self, caplog):
        """Test that a malformed number logs a warning and keeps the default."""
        config = ReportConfig.from_env(dict(BASE_ENV, DAYS_TO_REPORT='a week'))

        assert config.days_to_report == 30
        assert "Invalid DAYS_TO_REPORT value 'a week'" in caplog.text

    def test_explicit_overrides_win(self):
        config = ReportConfig.from_env(BASE_ENV, overrides={'org': 'other', 'days_to_report': 3})

        assert config.org == 'other'
        assert config.days_to_report == 3

    def test_team_names_split(self):
        assert split_team_names(' web , api,,mobile ') == ['web', 'api', 'mobile']
        assert split_team_names('') == []
        assert split_team_names(None) == []


class TestValidate:
    """Test cases for validation."""

    def test_valid(self):
        ReportConfig.from_env(BASE_ENV).validate()

    @pytest.mark.parametrize('missing', ['GITHUB_ACCESS_TOKEN', 'GITHUB_ORG', 'GITHUB_TEAMS'])
    def test_missing_required_values(self, missing):
        env = {k: v for k, v in BASE_ENV.items() if k != missing}

        with pytest.raises(ConfigurationError) as excinfo:
            ReportConfig.from_env(env).validate()

        assert missing in str(excinfo.value)

    @pytest.mark.parametrize('field', ['days_to_report', 'karma_per_review', 'karma_percent_per_comment'])
    def test_negative_values(self, field):
        config = ReportConfig.from_env(BASE_ENV, overrides={field: -1})

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_max_workers_at_least_one(self):
        config = ReportConfig.from_env(BASE_ENV, overrides={'max_workers': 0})

        with pytest.raises(ConfigurationError):
            config.validate()
