#!/usr/bin/env python3
import argparse
import json
import logging
import shlex
import sys

from pydantic import ValidationError

from querysift_data_model.data_models import FilterRequestModel
from querysift_engine.config import settings
from querysift_engine.core.reactive.cell import Cell
from querysift_engine.engine.search_engine import filter_items, use_search
from querysift_exception_model.exception import InvalidFilterStrategyException, InvalidQueryException, \
    ItemSourceLoadException

logger = logging.getLogger(__name__)


def load_items(path):
    """
    Load a JSON array of items from ``path``.

    Raises:
        ItemSourceLoadException: If the file cannot be read, is not JSON, or is not an array.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            items = json.load(f)
    except (OSError, ValueError) as e:
        raise ItemSourceLoadException("Failed to load items", path, e)
    if not isinstance(items, list):
        raise ItemSourceLoadException("Item file must contain a JSON array", path)
    logger.info(f"Loaded {len(items)} items from {path}")
    return items


def format_results(results, limit=None):
    shown = results if limit is None else results[:limit]
    text = json.dumps(shown, indent=2, default=str)
    if len(shown) < len(results):
        text += f"\n... {len(results) - len(shown)} more"
    return text


def _filter_by_from_names(names):
    if not names:
        return None
    if len(names) == 1:
        return names[0]
    return list(names)


def get_parser():
    parser = argparse.ArgumentParser(
        prog="querysift",
        description="querysift CLI: filter JSON collections by a case-insensitive search query"
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (DEBUG, INFO, WARNING, ...)"
    )
    subparsers = parser.add_subparsers(dest="command")

    items_file_string = "Path to a JSON file holding an array of items"
    c_filter = subparsers.add_parser("filter", help="Filter items once and print the matches")
    c_filter.add_argument("file", help=items_file_string)
    c_filter.add_argument("query", help="Search query")
    c_filter.add_argument("--by", nargs="+", default=None, metavar="NAME",
                          help="Property name(s) to match against; all properties when omitted")
    c_filter.add_argument("--strict", action=argparse.BooleanOptionalAction, default=settings.default_strict,
                          help="Only match string values")

    c_request = subparsers.add_parser("request", help="Filter items with a JSON filter request")
    c_request.add_argument("file", help=items_file_string)
    c_request.add_argument("request", help='Request as JSON, e.g. {"query": "an", "filter_by": "name"}')

    return parser


# Map command names to handler functions
_COMMAND_HANDLERS = {
    "filter":  "_handle_filter",
    "request": "_handle_request",
}


def execute_command(args):
    """Dispatch to handlers; errors are reported on stderr."""
    handler_name = _COMMAND_HANDLERS.get(args.command)
    if not handler_name:
        return False
    handler = globals().get(handler_name)
    try:
        handler(args)
    except (ItemSourceLoadException, InvalidFilterStrategyException, InvalidQueryException, ValidationError,
            ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
    return True


def _handle_filter(args):
    items = load_items(args.file)
    results = filter_items(args.query, items, _filter_by_from_names(args.by), args.strict)
    print(format_results(results))


def _handle_request(args):
    items = load_items(args.file)
    request = FilterRequestModel.model_validate_json(args.request)
    results = filter_items(request.query, items, request.to_strategy(), request.strict)
    print(format_results(results))


class LiveSearchSession:
    """
    Interactive search state: every input is a cell, results are printed on each change.

    Attributes:
        query: Current search query.
        items: Loaded item collection.
        filter_by: Current filter configuration.
        strict: Current strictness flag.
    """

    def __init__(self, items=None, limit=None):
        self.query = Cell("", name="query")
        self.items = Cell(items or [], name="items")
        self.filter_by = Cell(None, name="filter_by")
        self.strict = Cell(settings.default_strict, name="strict")
        self.limit = settings.max_display_results if limit is None else limit
        self.search = use_search(self.query, self.items, self.filter_by, self.strict)
        self.search.subscribe(self._print_results)

    def show(self):
        self._print_results(self.search.value)

    def _print_results(self, results):
        print(format_results(results, self.limit))
        print(f"[{len(results)} of {len(self.items.value)} items]")

    def handle_line(self, line):
        """Apply one line of interactive input: a ':' command or a new query."""
        command_line = line.strip()
        if not command_line.startswith(":"):
            self.query.set(line)
            return

        parts = shlex.split(command_line[1:])
        if not parts:
            print("Empty command. Type ':help' for commands.")
            return
        command, rest = parts[0].lower(), parts[1:]
        if command == "load" and len(rest) == 1:
            self.items.set(load_items(rest[0]))
        elif command == "by":
            self.filter_by.set(_filter_by_from_names(rest))
        elif command == "strict" and len(rest) == 1 and rest[0].lower() in ("on", "off"):
            self.strict.set(rest[0].lower() == "on")
        elif command == "show":
            self.show()
        else:
            print(f"Unknown command: {line}. Type ':help' for commands.")


_INTERACTIVE_HELP = """Type a query to filter the loaded items. Commands:
  :load FILE        load a JSON array of items
  :by [NAME ...]    match against the given properties (none = all properties)
  :strict on|off    only match string values when on
  :show             print the current results
  :help             show this help
  :exit             quit"""


def _configure_logging(level_name):
    level = getattr(logging, str(level_name).upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _has_direct_command_args() -> bool:
    return len(sys.argv) > 1 and not sys.argv[1].startswith('-')


def main():
    parser = get_parser()
    if _has_direct_command_args():
        _handle_direct(parser)
    else:
        _handle_interactive(parser)


def _handle_direct(parser):
    args = parser.parse_args()
    _configure_logging(args.log_level)
    if not args.command:
        parser.print_help()
        sys.exit(0)
    execute_command(args)


def _handle_interactive(parser):
    args = parser.parse_args()
    _configure_logging(args.log_level)
    session = LiveSearchSession()
    print("Entering interactive mode (type ':help' for commands, ':exit' to quit)")
    while True:
        try:
            raw = input(settings.prompt)
        except EOFError:
            break

        # only the command checks see stripped input; query text is kept verbatim
        line = raw.strip()
        if _is_exit_command(line):
            break

        if _is_help_command(line):
            print(_INTERACTIVE_HELP)
            continue

        _process_interactive_line(raw, session)

    print("Bye!")


def _process_interactive_line(line, session):
    try:
        session.handle_line(line)
    except (ItemSourceLoadException, InvalidFilterStrategyException, InvalidQueryException, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)


def _is_exit_command(line: str) -> bool:
    return line.lower() in (":exit", ":quit")


def _is_help_command(line: str) -> bool:
    return line.lower() in (":help", ":?", ":h")


def entry_point():
    main()


if __name__ == "__main__":
    main()
