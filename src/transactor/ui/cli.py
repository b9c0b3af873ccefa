# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from transactor.adapters.payloads import parse_configuration
from transactor.app import (
    configure_transaction_type,
    create_bundle,
    create_record,
    create_transaction,
    create_transaction_type,
    describe_configuration,
    describe_transaction,
    execute_transaction,
)
from transactor.config import configure_logging
from transactor.domain.execution import Executed

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from transactor.domain.transactors import ConfigurationSchema, ConfigurationSubmission

log = logging.getLogger(__name__)

EXIT_REJECTED = 1
EXIT_INVALID = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Configure and execute transactions")
    subparsers = parser.add_subparsers(dest="command", required=True)

    bundle = subparsers.add_parser("bundle", help="Bundle management commands")
    bundle_sub = bundle.add_subparsers(dest="bundle_command", required=True)
    bundle_add = bundle_sub.add_parser("add", help="Create a bundle of a record type")
    bundle_add.add_argument("record_type", help="Record type the bundle belongs to")
    bundle_add.add_argument("name", help="Machine name of the bundle")
    bundle_add.add_argument("--label", type=str, help="Human-readable bundle label")

    record = subparsers.add_parser("record", help="Record management commands")
    record_sub = record.add_subparsers(dest="record_command", required=True)
    record_add = record_sub.add_parser("add", help="Create a target record")
    record_add.add_argument("record_type", help="Record type of the new record")
    record_add.add_argument("bundle", help="Bundle of the new record")
    record_add.add_argument("label", help="Label of the new record")
    record_add.add_argument(
        "--field",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Field value to set (repeatable; VALUE is parsed as JSON when possible)",
    )

    tx_type = subparsers.add_parser("type", help="Transaction type commands")
    type_sub = tx_type.add_subparsers(dest="type_command", required=True)
    type_add = type_sub.add_parser("add", help="Create a transaction type")
    type_add.add_argument("type_id", help="Machine name of the transaction type")
    type_add.add_argument("--label", type=str, required=True, help="Label of the type")
    type_add.add_argument(
        "--target-type",
        type=str,
        required=True,
        help="Record type targeted by transactions of this type",
    )
    type_add.add_argument(
        "--transactor",
        type=str,
        default="generic",
        help="Transactor id (default: %(default)s)",
    )
    type_add.add_argument(
        "--bundle",
        action="append",
        default=[],
        help="Applicable target bundle (repeatable; default: all bundles)",
    )
    type_schema = type_sub.add_parser("schema", help="Show the configuration schema of a type")
    type_schema.add_argument("type_id", help="Transaction type to describe")
    type_configure = type_sub.add_parser("configure", help="Configure the transactor of a type")
    type_configure.add_argument("type_id", help="Transaction type to configure")
    type_configure.add_argument(
        "--file",
        type=str,
        required=True,
        help="JSON configuration document ('-' reads standard input)",
    )

    transaction = subparsers.add_parser("transaction", help="Transaction commands")
    tx_sub = transaction.add_subparsers(dest="transaction_command", required=True)
    tx_add = tx_sub.add_parser("add", help="Create a pending transaction")
    tx_add.add_argument("type_id", help="Transaction type")
    tx_add.add_argument("target_id", type=int, help="Id of the target record")
    tx_add.add_argument(
        "--field",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Field value to set (repeatable; VALUE is parsed as JSON when possible)",
    )
    tx_execute = tx_sub.add_parser("execute", help="Execute a pending transaction")
    tx_execute.add_argument("transaction_id", type=int, help="Transaction to execute")
    tx_show = tx_sub.add_parser("show", help="Describe a transaction")
    tx_show.add_argument("transaction_id", type=int, help="Transaction to describe")
    tx_show.add_argument("--locale", type=str, help="Locale passed to the translator")

    return parser.parse_args(list(argv))


def _parse_field_values(items: Sequence[str]) -> dict[str, object]:
    values: dict[str, object] = {}
    for item in items:
        name, separator, raw = item.partition("=")
        if not separator or not name.strip():
            raise ValueError(f"Invalid field assignment: {item!r} (expected NAME=VALUE)")
        try:
            values[name.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            values[name.strip()] = raw
    return values


def _read_configuration(path: str) -> ConfigurationSubmission:
    raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    return parse_configuration(raw)


def _schema_document(schema: ConfigurationSchema) -> list[dict[str, object]]:
    return [
        {
            "key": str(group.key),
            "title": group.title,
            "bindings": [
                {
                    "name": binding.name,
                    "title": binding.descriptor.title,
                    "entity_type": binding.descriptor.entity_type,
                    "field_type": binding.descriptor.field_type,
                    "required": binding.descriptor.required,
                    "current": binding.current,
                    "options": dict(binding.options),
                    "can_create": binding.can_create,
                    "suggested_name": binding.suggested_name,
                    "max_name_length": binding.max_name_length,
                }
                for binding in group.bindings
            ],
            "options": [option.name for option in group.options],
        }
        for group in schema.groups
    ]


def _run(args: argparse.Namespace) -> int:
    if args.command == "bundle" and args.bundle_command == "add":
        create_bundle(args.record_type, args.name, label=args.label)
        return 0
    if args.command == "record" and args.record_command == "add":
        record = create_record(
            args.record_type,
            args.bundle,
            args.label,
            field_values=_parse_field_values(args.field),
        )
        print(record.id)
        return 0
    if args.command == "type":
        return _run_type(args)
    if args.command == "transaction":
        return _run_transaction(args)
    raise ValueError(f"Unsupported command: {args.command}")


def _run_type(args: argparse.Namespace) -> int:
    if args.type_command == "add":
        create_transaction_type(
            args.type_id,
            args.label,
            args.target_type,
            args.transactor,
            bundles=args.bundle,
        )
        return 0
    if args.type_command == "schema":
        schema = describe_configuration(args.type_id)
        print(json.dumps(_schema_document(schema), indent=2))
        return 0
    if args.type_command == "configure":
        issues = configure_transaction_type(args.type_id, _read_configuration(args.file))
        for issue in issues:
            print(f"{issue.element}: {issue.message}", file=sys.stderr)
        return EXIT_INVALID if issues else 0
    raise ValueError(f"Unsupported type command: {args.type_command}")


def _run_transaction(args: argparse.Namespace) -> int:
    if args.transaction_command == "add":
        transaction = create_transaction(
            args.type_id,
            args.target_id,
            field_values=_parse_field_values(args.field),
        )
        print(transaction.id)
        return 0
    if args.transaction_command == "execute":
        result = execute_transaction(args.transaction_id)
        if isinstance(result, Executed):
            last = result.last_executed.id if result.last_executed is not None else None
            log.info("Executed transaction %s (previous: %s)", result.transaction.id, last)
            return 0
        log.warning("Transaction %s rejected: %s", result.transaction.id, result.reason)
        return EXIT_REJECTED
    if args.transaction_command == "show":
        summary = describe_transaction(args.transaction_id, locale=args.locale)
        print(summary.description)
        for detail in summary.details:
            print(f"  {detail}")
        print(summary.indications)
        return 0
    raise ValueError(f"Unsupported transaction command: {args.transaction_command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        exit_code = _run(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(EXIT_INVALID)
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_REJECTED)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
