#!/usr/bin/env python3
"""
Code Review Karma Report
Inspects recently merged and reviewed pull requests of one or more GitHub teams
and shows the code review karma score of each team member.

Usage:
    export GITHUB_ACCESS_TOKEN=xyz123
    export GITHUB_ORG=myOrg
    export GITHUB_TEAMS=team1,team2
    ./code-review-karma.py
"""

import os
import sys
import logging
from dotenv import load_dotenv

from review_karma.builder import build_report
from review_karma.config import ReportConfig
from review_karma.errors import ComputationError, KarmaReportError
from review_karma.output import ReportFormatter

# Configure logging (can be overridden by LOG_LEVEL environment variable)
log_level = os.environ.get('LOG_LEVEL', 'INFO').upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s %(levelname)s: %(message)s',
    datefmt='%m/%d/%Y %I:%M:%S %p'
)


def main() -> int:
    """Main entry point for the script.

    Returns:
        Process exit code
    """
    # Load environment variables from .env file if it exists
    load_dotenv()

    config = ReportConfig.from_env()
    use_color = os.environ.get('NO_COLOR') is None and sys.stdout.isatty()
    formatter = ReportFormatter(config, use_color=use_color)

    logging.info(f"Calculating Code Review Karma report for {', '.join(config.team_names) or '(no teams)'} "
                 f"in the {config.org or '(no org)'} github org over the past {config.days_to_report} days")

    try:
        entries, statistics = build_report(config)
    except ComputationError as e:
        logging.error(f"No karma report generated: {e}")
        return 1
    except KarmaReportError as e:
        logging.error(str(e))
        return 1

    formatter.print_console_report(entries, statistics)
    return 0


if __name__ == "__main__":
    sys.exit(main())
