"""Console and Slack rendering of karma reports."""

from typing import List

from .config import ReportConfig
from .models import RankedEntry, ReportStatistics


# ANSI color codes
GREEN = '\033[92m'
YELLOW = '\033[93m'
CYAN = '\033[96m'
RESET = '\033[0m'

MIN_REVIEWER_WIDTH = 12
SCORE_WIDTH = len('Karma Score')
PERCENT_WIDTH = len('% of Avg.')


class ReportFormatter:
    """Formats and prints karma reports."""

    def __init__(self, config: ReportConfig, use_color: bool = True):
        """Initialize the report formatter.

        Args:
            config: Configuration the report was built with (org, teams, day window)
            use_color: Whether console output uses ANSI colors
        """
        self.config = config
        self.use_color = use_color

    def _color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return f"{color}{text}{RESET}"

    def _team_label(self, statistics: ReportStatistics = None):
        teams = (statistics.teams if statistics and statistics.teams else self.config.team_names)
        plural = 's' if len(teams) > 1 else ''
        return f"team{plural}", ', '.join(teams)

    def format_table(self, entries: List[RankedEntry], colored: bool = False) -> List[str]:
        """Render the report table as a list of lines.

        Args:
            entries: Ranked report entries
            colored: Whether to wrap cells in ANSI colors

        Returns:
            Table lines without trailing newlines
        """
        def paint(text, color):
            return self._color(text, color) if colored else text

        width = max([MIN_REVIEWER_WIDTH] + [len(entry.reviewer) for entry in entries])
        horizontal_rule = '-' * (width + SCORE_WIDTH + PERCENT_WIDTH + 10)

        lines = [
            horizontal_rule,
            f"| {paint('Reviewer'.ljust(width), CYAN)} | {paint('Karma Score', CYAN)} | {paint('% of Avg.', CYAN)} |",
            horizontal_rule,
        ]
        for entry in entries:
            reviewer = paint(entry.reviewer.ljust(width), GREEN)
            score = paint(str(entry.score).rjust(SCORE_WIDTH), YELLOW)
            percent = paint(str(entry.percent_of_average).rjust(PERCENT_WIDTH), YELLOW)
            lines.append(f"| {reviewer} | {score} | {percent} |")
        lines.append(horizontal_rule)
        return lines

    def print_console_report(self, entries: List[RankedEntry], statistics: ReportStatistics):
        """Print the report to the terminal."""
        team_word, teams = self._team_label(statistics)
        print(f"\n{self._color('Code Review Karma', CYAN)} report for {team_word}: "
              f"{self._color(teams, CYAN)} in the {self._color(self.config.org, CYAN)} github org.")
        print(f"Report based on {self._color(str(statistics.pull_request_count), CYAN)} reviewed pull requests "
              f"over the past {self._color(str(self.config.days_to_report), CYAN)} days.")

        for line in self.format_table(entries, colored=self.use_color):
            print(line)

        if statistics.omitted_reviewers:
            omitted = ', '.join(self._color(user, CYAN) for user in statistics.omitted_reviewers)
            print(f"Excluded from report due to no review activity: {omitted}")

    def format_slack_report(self, entries: List[RankedEntry], statistics: ReportStatistics) -> str:
        """Render the report as a Slack message (markdown title + code block)."""
        team_word, teams = self._team_label(statistics)
        message = (
            f"Code Review Karma report for {team_word}:\n"
            f"*{teams}* in the *{self.config.org}* github org.\n"
            f"Report based on *{statistics.pull_request_count}* reviewed pull requests "
            f"over the past *{self.config.days_to_report}* days:\n"
            "```\n"
        )
        message += '\n'.join(self.format_table(entries)) + "\n```\n"

        if statistics.omitted_reviewers:
            message += f"Excluded due to no review activity: {', '.join(statistics.omitted_reviewers)}\n"
        return message
