# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from revtrack.app import (
    list_promotable_tags,
    promote_service_tag,
    record_deployment,
    resolve_pending_services,
    seed_service_revisions,
)
from revtrack.config import configure_logging
from revtrack.domain.deployment import parse_promotion_request
from revtrack.domain.model import Environment
from revtrack.domain.revision_log import DEFAULT_COMMIT_ID_LENGTH, ParserConfig
from revtrack.domain.tag_query import format_tag_list, parse_exclusion_list

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

SEED_FINISHED_MESSAGE = "Service entry initialization finished."


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Track changed services and their deployment state"
    )
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or a local SQLite file)",
    )
    parser.add_argument(
        "--db-host",
        type=str,
        help="Host substituted for {host} in the database URI",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including the parsed revision index",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("resolve", "Print the build descriptors of services that need a rebuild"),
        ("seed", "Record every service in the log as deployed at its latest revision"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("log_file", type=str, help="Revision log file to parse")
        command.add_argument(
            "--commit-id-length",
            type=int,
            default=DEFAULT_COMMIT_ID_LENGTH,
            help="Length of the short commit id (default: %(default)s)",
        )

    deployed = subparsers.add_parser(
        "deployed",
        help="Mark services deployed and record their image tag for UAT",
    )
    deployed.add_argument(
        "--deploy-list",
        type=str,
        required=True,
        help="Comma separated build descriptors (e.g. svc-a/pom.xml,svc-b/pom.xml)",
    )
    deployed.add_argument(
        "--services",
        type=str,
        required=True,
        help="Space separated image repositories that were pushed",
    )
    deployed.add_argument("--tag", type=str, required=True, help="Image tag that was pushed")

    promote = subparsers.add_parser("promote", help="Mark a service tag promoted")
    promote.add_argument("target", type=str, help="environment:service:tag")

    tags = subparsers.add_parser("tags", help="List tags awaiting promotion")
    tags.add_argument(
        "environment",
        type=str,
        choices=[environment.value for environment in Environment],
        help="Target environment",
    )
    tags.add_argument(
        "--exclude",
        type=str,
        default="",
        help="Pipe separated services to leave out",
    )

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.command in {"resolve", "seed"}:
        args.parser_config = ParserConfig(commit_id_length=args.commit_id_length)
    elif args.command == "promote":
        parse_promotion_request(args.target)
    elif args.command == "deployed" and not args.tag.strip():
        raise ValueError("Image tag must not be blank")


def _run_command(args: argparse.Namespace) -> str:
    """Execute the selected command and return the payload for stdout."""

    store = {"database_uri": args.database_uri, "db_host": args.db_host}

    if args.command == "resolve":
        result = resolve_pending_services(args.log_file, parser_config=args.parser_config, **store)
        return result.rebuild_list()
    if args.command == "seed":
        seed_service_revisions(args.log_file, parser_config=args.parser_config, **store)
        return SEED_FINISHED_MESSAGE
    if args.command == "deployed":
        deployment, _ = record_deployment(
            args.deploy_list.split(","),
            args.services.split(),
            args.tag.strip(),
            **store,
        )
        return deployment.joined_commit_ids
    if args.command == "promote":
        promoted = promote_service_tag(args.target, **store)
        log.info("Promotion %s: %s", args.target, "applied" if promoted else "no matching tag")
        return ""
    if args.command == "tags":
        entries = list_promotable_tags(
            args.environment,
            exclude=parse_exclusion_list(args.exclude),
            **store,
        )
        return format_tag_list(entries)
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        payload = _run_command(parsed_args)
    except Exception:
        log.exception("Fatal error while running %s", parsed_args.command)
        sys.exit(1)

    if payload:
        print(payload)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
