from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from rich.console import Console
from rich.markup import escape

from .config import load_config, parse_config
from .dispatcher import Dispatcher
from .errors import NotificationError, ValidationError
from .models import ChannelType, Notification, Priority
from .utils import load_yaml_file
from .validation import validate_config_data
from .validation_output import ValidationFormatter, format_result_table

LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="herald", description="Route notifications to email, SMS and push providers.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate-config", help="Validate a provider configuration file")
    validate.add_argument("config", type=Path, help="Path to the YAML configuration")

    send = subparsers.add_parser("send", help="Send a single notification")
    send.add_argument("config", type=Path, help="Path to the YAML configuration")
    send.add_argument("--to", dest="recipients", action="append", required=True, help="Recipient (repeatable)")
    send.add_argument("--content", default="", help="Message body")
    send.add_argument("--subject", default=None, help="Subject (email) or title (push)")
    send.add_argument("--channel", default=None, choices=[member.value for member in ChannelType])
    send.add_argument("--provider", default=None, help="Send through this provider, skipping channel selection")
    send.add_argument("--priority", default=Priority.NORMAL.value, choices=[member.value for member in Priority])
    send.add_argument("--json", action="store_true", help="Print the result as JSON")
    return parser


def run_validate(config_path: Path, console: Console) -> int:
    try:
        data = load_yaml_file(config_path)
    except (OSError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Unable to read {config_path}: {escape(str(exc))}[/bold red]")
        return 1
    report = validate_config_data(data)
    ValidationFormatter(console=console, config_data=data).format_report(report)
    if report.is_valid:
        # Builder-level checks only run once the schema passes.
        try:
            parse_config(data)
        except NotificationError as exc:
            console.print(f"[bold red]{escape(str(exc))}[/bold red]")
            return 1
    return 0 if report.is_valid else 1


def run_send(args: argparse.Namespace, console: Console) -> int:
    notification = Notification(
        recipients=tuple(args.recipients),
        content=args.content,
        subject=args.subject,
        priority=Priority.parse(args.priority),
        preferred_channel=ChannelType.parse(args.channel) if args.channel else None,
    )
    try:
        settings = load_config(args.config)
        with Dispatcher.from_settings(settings) as dispatcher:
            result = dispatcher.send(notification, args.provider)
    except ValidationError as exc:
        console.print("[bold red]Notification rejected:[/bold red]")
        for message in exc.errors:
            console.print(f"  - {escape(message)}")
        return 1
    except NotificationError as exc:
        console.print(f"[bold red]{escape(str(exc))}[/bold red]")
        return 1

    if args.json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        console.print(format_result_table([result]))
    return 0 if result.success else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    console = Console()

    if args.command == "validate-config":
        return run_validate(args.config, console)
    if args.command == "send":
        return run_send(args, console)
    parser.error(f"Unknown command {args.command}")
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
