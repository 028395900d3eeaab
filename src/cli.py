"""Command-line interface for phpimpl-core."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from pathlib import Path
from typing import TYPE_CHECKING

from contract.models import Position
from parse.declarations import list_interface_anchors, list_method_anchors
from report.write import outcome_record, write_jsonl_record
from resolve.engine import ImplementationResolver
from resolve.errors import FileLoadFailure, ReferenceLookupUnavailable
from resolve.session import (
    ManyImplementations,
    NoImplementations,
    NoReferences,
    SingleImplementation,
)
from rules.config import ConfigError, load_config
from utils import is_valid_symbol, word_at
from workspace.loader import FileSystemLoader
from workspace.references import build_reference_supplier

if TYPE_CHECKING:
    from collections.abc import Callable

    from contract.models import CandidateMatch
    from resolve.session import Outcome, ResolutionSession

EXIT_CANCELLED = 130

logger = logging.getLogger(__name__)


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="PHP file, relative to the workspace root")
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root (default: .)",
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        msg = f"expected a 1-based number, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _add_position(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--line", type=_positive_int, required=True, help="1-based line"
    )
    parser.add_argument(
        "--column", type=_positive_int, required=True, help="1-based column"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phpimpl")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    impl_parser = subparsers.add_parser(
        "implementations",
        help="Find classes implementing the interface at a position",
    )
    _add_common_paths(impl_parser)
    _add_position(impl_parser)
    impl_parser.add_argument(
        "--method",
        default=None,
        help="Jump to this method inside each implementing class",
    )
    impl_parser.add_argument(
        "--json", action="store_true", help="Stream matches as JSON lines"
    )

    anchors_parser = subparsers.add_parser(
        "anchors", help="List interface and method anchors of a file"
    )
    _add_common_paths(anchors_parser)
    anchors_parser.add_argument(
        "--json", action="store_true", help="Emit anchors as JSON lines"
    )

    symbol_parser = subparsers.add_parser(
        "symbol", help="Show the symbol under a position"
    )
    _add_common_paths(symbol_parser)
    _add_position(symbol_parser)

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _stream_match(match: CandidateMatch) -> None:
    write_jsonl_record(sys.stdout, match)


def _format_match(match: CandidateMatch) -> str:
    return f"{match.file_id}:{match.line}"


def _report_outcome(outcome: Outcome, interface_name: str) -> int:
    if isinstance(outcome, NoReferences):
        sys.stdout.write(f"No references found for {interface_name}.\n")
        return 1
    if isinstance(outcome, NoImplementations):
        sys.stdout.write(f"No implementations found for {interface_name}.\n")
        return 1
    if isinstance(outcome, SingleImplementation):
        sys.stdout.write(f"{_format_match(outcome.match)}\n")
        return 0
    if isinstance(outcome, ManyImplementations):
        sys.stdout.write(f"Select implementation of {interface_name}\n")
        for match in outcome.matches:
            sys.stdout.write(f"{match.class_name}  {_format_match(match)}\n")
        return 0
    raise AssertionError


def _load_target(loader: FileSystemLoader, file_arg: str) -> tuple[str, str] | None:
    """Return the normalized file id and text of ``file_arg``, or None on error."""
    try:
        file_id = loader.file_id(loader.resolve(file_arg))
        return file_id, loader.load_text(file_id)
    except FileLoadFailure as exc:
        sys.stderr.write(f"error: {exc}\n")
        return None


def _drain(worker: threading.Thread) -> None:
    """Wait for a cancelled worker; repeated Ctrl-C only keeps waiting."""
    while worker.is_alive():
        try:
            worker.join(0.1)
        except KeyboardInterrupt:
            logger.debug("Still cancelling, waiting for the scan to stop")


def _run_cancellable(
    resolver: ImplementationResolver,
    session: ResolutionSession,
    file_id: str,
    position: Position,
    on_match_added: Callable[[CandidateMatch], None] | None,
) -> Outcome | None:
    """Scan on a worker thread so Ctrl-C can cancel the session.

    Returns None when the user cancelled.
    """
    result: dict[str, Outcome] = {}
    failure: list[Exception] = []

    def _scan() -> None:
        try:
            result["outcome"] = resolver.run(
                session, file_id, position, on_match_added=on_match_added
            )
        except Exception as exc:
            failure.append(exc)

    worker = threading.Thread(target=_scan, name="phpimpl-scan", daemon=True)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(0.1)
    except KeyboardInterrupt:
        session.dismiss()
        _drain(worker)
        return None

    if failure:
        raise failure[0]
    return result["outcome"]


def _handle_implementations(
    root: Path,
    file_arg: str,
    position: Position,
    method_name: str | None,
    as_json: bool,
) -> int:
    config = load_config(root)
    loader = FileSystemLoader(root, encoding=config.encoding)
    loaded = _load_target(loader, file_arg)
    if loaded is None:
        return 2
    file_id, text = loaded

    interface_name = word_at(text, position)
    if interface_name is None:
        sys.stdout.write("No interface selected.\n")
        return 2

    supplier = build_reference_supplier(loader, config)
    resolver = ImplementationResolver(supplier, loader)
    session = resolver.open_session(interface_name, method_name)
    sys.stderr.write(f"Searching for implementations of {interface_name}...\n")

    on_match_added = _stream_match if as_json else None

    try:
        outcome = _run_cancellable(
            resolver, session, file_id, position, on_match_added
        )
    except ReferenceLookupUnavailable as exc:
        logger.debug("Reference lookup failed: %s", exc)
        sys.stderr.write("Error finding implementations.\n")
        return 2

    if outcome is None:
        return EXIT_CANCELLED

    if as_json:
        write_jsonl_record(sys.stdout, outcome_record(outcome))
        found = isinstance(outcome, (SingleImplementation, ManyImplementations))
        return 0 if found else 1

    return _report_outcome(outcome, interface_name)


def _handle_anchors(root: Path, file_arg: str, as_json: bool) -> int:
    config = load_config(root)
    loader = FileSystemLoader(root, encoding=config.encoding)
    loaded = _load_target(loader, file_arg)
    if loaded is None:
        return 2
    file_id, text = loaded

    anchors = [
        *list_interface_anchors(text, file_id),
        *list_method_anchors(text, file_id),
    ]
    for anchor in anchors:
        if as_json:
            write_jsonl_record(sys.stdout, anchor)
            continue
        target = anchor.target
        line = (
            f"{anchor.kind} {anchor.name} -> "
            f"{target.file_id}:{target.position.line}"
        )
        if target.method_name:
            line += f" method={target.method_name}"
        sys.stdout.write(f"{line}\n")
    return 0


def _handle_symbol(root: Path, file_arg: str, position: Position) -> int:
    config = load_config(root)
    loader = FileSystemLoader(root, encoding=config.encoding)
    loaded = _load_target(loader, file_arg)
    if loaded is None:
        return 2
    _file_id, text = loaded

    word = word_at(text, position)
    if word is None:
        sys.stdout.write("No symbol at position.\n")
        return 1
    valid = is_valid_symbol(word)
    sys.stdout.write(f"{word} {'valid' if valid else 'invalid'}\n")
    return 0 if valid else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "implementations":
            return _handle_implementations(
                root,
                args.file,
                Position(line=args.line, column=args.column),
                args.method,
                args.json,
            )

        if args.command == "anchors":
            return _handle_anchors(root, args.file, args.json)

        if args.command == "symbol":
            return _handle_symbol(
                root, args.file, Position(line=args.line, column=args.column)
            )
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
