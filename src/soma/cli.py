"""Command-line interface for soma."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from soma import __version__
from soma.errors import ErrorList
from soma.scanner import Scanner
from soma.tokens import Token

logger = logging.getLogger(__name__)

CONFIG_NAME = "soma.toml"
EXPR_FILENAME = "<expr>"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Options for the tokens command."""

    expression: str
    positions: bool
    strict: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="soma",
        description=f"Social Machines v{__version__}",
        epilog='Use "soma <command> -h" for more information about the command',
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = p.add_subparsers(dest="command", metavar="command")

    t = commands.add_parser(
        "tokens",
        help="Prints the list of tokens for a provided string",
        description="Prints the tokens and literals of the expression.",
        epilog='Example:\n  $ soma tokens "True := Object new."',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    t.add_argument("expression", nargs="?", help="Source text to tokenize")
    t.set_defaults(print_usage=t.print_help)
    t.add_argument(
        "--positions",
        action="store_true",
        default=None,
        help="Prefix each token with its line:column",
    )
    t.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit with status 1 when the expression has lexical errors",
    )
    t.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    t.add_argument("--debug", action="store_true", help="Dump the token table to stderr")
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    logger.debug("loading config from %s", path)
    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_flag(section: dict[str, Any], key: str) -> bool:
    value = section.get(key, False)
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"[tokens] {key} must be true or false, got {value!r}")
    return value


def resolve_options(args: argparse.Namespace, search_dir: Path | None = None) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, search_dir if search_dir is not None else Path("."))

    section = config.get("tokens", {})
    if not isinstance(section, dict):
        raise argparse.ArgumentTypeError("[tokens] must be a table")

    positions = _config_flag(section, "positions")
    if args.positions is not None:
        positions = args.positions

    strict = _config_flag(section, "strict")
    if args.strict is not None:
        strict = args.strict

    return CliOptions(
        expression=args.expression,
        positions=positions,
        strict=strict,
        debug=args.debug,
    )


def format_tokens(scanner: Scanner, tokens: list[Token], positions: bool = False) -> str:
    """Render tokens as "<NAME> (<literal>)" lines."""
    lines = []
    for tok in tokens:
        line = f"{tok.type} ({tok.literal})"
        if positions:
            pos = scanner.position(tok.offset)
            line = f"{pos.line}:{pos.column}: {line}"
        lines.append(line)
    return "\n".join(lines)


def tokens_command(options: CliOptions) -> int:
    """Print the tokens of options.expression. Returns the exit code."""
    from soma.debug import dump_tokens

    errors = ErrorList(options.expression)
    scanner = Scanner.from_string(options.expression, EXPR_FILENAME, errors)
    tokens = list(scanner)

    if options.debug:
        dump_tokens(scanner, tokens, file=sys.stderr)

    if tokens:
        sys.stdout.write(format_tokens(scanner, tokens, options.positions) + "\n")

    for err in errors:
        print(err.format(), file=sys.stderr)

    if options.strict and scanner.error_count:
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print(parser.format_help(), file=sys.stderr)
        return 2

    if args.expression is None:
        args.print_usage(sys.stdout)
        return 0

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s")

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    return tokens_command(options)


def entry() -> None:
    sys.exit(main())
