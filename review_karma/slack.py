"""
Slack slash-command adapter.

Decodes the urlencoded slash-command body, runs the report and posts the
result (or the reason it failed) back to the command's response URL.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Mapping
from urllib.parse import parse_qsl

import requests

from .builder import build_report
from .config import ReportConfig, split_team_names
from .errors import KarmaReportError
from .output import ReportFormatter

UNEXPECTED_FAILURE_TEXT = "Could not build the code review karma report: unexpected error, see the server logs."


@dataclass
class SlackCommand:
    """A decoded `/karma` slash command."""
    response_url: str
    user_name: str
    config: ReportConfig


def parse_command_text(text: str) -> Dict[str, str]:
    """Parse ``--key:value`` options typed after the slash command.

    Example: ``--org:acme --teams:web,api --days:7``
    """
    options = {}
    for entry in (text or '').split('--')[1:]:
        key, _, value = entry.strip().partition(':')
        if key:
            options[key.strip()] = value.strip()
    return options


def parse_slack_payload(body: str, environ: Mapping[str, str] = None) -> SlackCommand:
    """Decode a slash-command request body into a report configuration.

    Options given in the command text override the environment defaults.

    Args:
        body: Raw ``application/x-www-form-urlencoded`` request body
        environ: Environment to take defaults from (defaults to ``os.environ``)

    Returns:
        The decoded command
    """
    fields = dict(parse_qsl(body or '', keep_blank_values=True))
    options = parse_command_text(fields.get('text', ''))

    overrides = {}
    if options.get('org'):
        overrides['org'] = options['org']
    if options.get('teams'):
        overrides['team_names'] = split_team_names(options['teams'])
    if options.get('days'):
        try:
            overrides['days_to_report'] = int(options['days'])
        except ValueError:
            logging.warning(f"Invalid days value '{options['days']}' in slash command, ignoring")

    return SlackCommand(
        response_url=fields.get('response_url', ''),
        user_name=fields.get('user_name', ''),
        config=ReportConfig.from_env(environ, overrides=overrides)
    )


def post_slack_message(response_url: str, text: str, timeout: int = 30) -> bool:
    """Post a message to a slash command's response URL.

    Returns:
        True if Slack accepted the message
    """
    try:
        response = requests.post(
            response_url,
            json={'response_type': 'in_channel', 'text': text},
            timeout=timeout
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logging.error(f"Error sending message to Slack: {e}")
        return False

    logging.info("Posted karma report to Slack")
    return True


def handle_report_command(body: str, environ: Mapping[str, str] = None,
                          report_builder: Callable = build_report) -> str:
    """Build the requested report and post it back to Slack.

    Args:
        body: Raw slash-command request body
        environ: Environment to take defaults from
        report_builder: Function building the report from a config

    Returns:
        The text that was posted

    Raises:
        Exception: Anything other than a KarmaReportError is re-raised after
            a generic failure message was posted
    """
    command = parse_slack_payload(body, environ)
    logging.info(f"Karma report requested by {command.user_name or 'unknown user'}")

    try:
        entries, statistics = report_builder(command.config)
        text = ReportFormatter(command.config, use_color=False).format_slack_report(entries, statistics)
    except KarmaReportError as e:
        logging.error(f"Karma report failed: {e}")
        text = f"Could not build the code review karma report: {e}"
    except Exception:
        logging.error("Karma report failed with an unexpected error", exc_info=True)
        if command.response_url:
            post_slack_message(command.response_url, UNEXPECTED_FAILURE_TEXT)
        raise

    if command.response_url:
        post_slack_message(command.response_url, text)
    else:
        logging.warning("Slash command had no response_url, report not posted")
    return text
