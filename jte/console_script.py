import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from . import __version__
from .builtin_exceptions import BuiltinInvocationError
from .registry import build_context, describe_builtins, get_builtin

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="JTE: inspect and invoke JSON-e style template builtins.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level."
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Sub-command to execute")

    # --- 'list' Subcommand ---
    list_parser = subparsers.add_parser("list", help="List the available builtins and their signatures.")
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output the builtin descriptions as a JSON array."
    )

    # --- 'call' Subcommand ---
    call_parser = subparsers.add_parser("call", help="Invoke a builtin with JSON arguments.")
    call_parser.add_argument("name", type=str, help="Name of the builtin, e.g. 'max'.")
    call_parser.add_argument(
        "arguments",
        nargs="*",
        metavar="ARG",
        help="Arguments, each parsed as JSON. Text that is not valid JSON is passed as a string."
    )
    call_parser.add_argument(
        "--context",
        type=str,
        default=None,
        help="Evaluation context as a JSON object, e.g. '{\"x\": 1}'."
    )
    call_parser.add_argument(
        "--now",
        type=str,
        default=None,
        help="Reference time for fromNow, e.g. 2017-01-19T16:27:20.974Z. Overrides 'now' in --context."
    )

    args = parser.parse_args()

    logging.basicConfig(level=getattr(logging, args.log_level.upper()),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # --- Command Dispatch ---
    if args.command == "list":
        handle_list_command(args)
    elif args.command == "call":
        handle_call_command(args)
    else:
        parser.print_help()
        sys.exit(1)


def parse_argument(text: str) -> Any:
    """Parses a command line argument as JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def load_context(args) -> Dict[str, Any]:
    context: Dict[str, Any] = {}
    if args.context:
        try:
            context = json.loads(args.context)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON for --context: {e}")
            print(f"Error: --context is not valid JSON. {e}", file=sys.stderr)
            sys.exit(1)
        if not isinstance(context, dict):
            print("Error: --context must be a JSON object.", file=sys.stderr)
            sys.exit(1)
    if args.now:
        context["now"] = args.now
    return context


def handle_list_command(args):
    descriptions = describe_builtins()
    if args.json:
        print(json.dumps(descriptions, indent=2))
        return
    for entry in descriptions:
        marker = " [context]" if entry["needs_context"] else ""
        print(f"{entry['signature']}{marker}")


def handle_call_command(args):
    logger.debug(f"Call command with args: {args}")
    context = load_context(args)
    values: List[Any] = [parse_argument(a) for a in args.arguments]

    try:
        builtin = get_builtin(args.name)
        result = builtin(build_context(context), *values)
    except BuiltinInvocationError as e:
        logger.debug(f"Builtin call failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result))


if __name__ == "__main__":
    main()
