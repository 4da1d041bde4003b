"""Command-line interface for dmlex."""

from __future__ import annotations

import argparse
import io
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dmlex.errors import LexError

FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    unit: str
    output_format: str
    comments: bool
    keywords: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="dmlex",
        description="DreamMaker lexer: print the token stream of a preprocessed source file",
    )
    p.add_argument("input", help="Input .dm file (C preprocessor output is fine)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument("--unit", help="Unit name used in positions (default: the input path)")
    p.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--no-comments",
        dest="comments",
        action="store_false",
        default=None,
        help="Drop COMMENT tokens from the output",
    )
    p.add_argument(
        "--keywords",
        action="store_true",
        default=None,
        help="Classify keywords instead of emitting them as IDENT",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover dmlex.toml)",
    )
    p.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        metavar="LEVEL",
        help="Logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)",
    )
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / "dmlex.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    cfg_lexer = config.get("lexer")
    if not isinstance(cfg_lexer, dict):
        cfg_lexer = {}

    comments = True
    if isinstance(cfg_lexer.get("comments"), bool):
        comments = cfg_lexer["comments"]
    if args.comments is not None:
        comments = args.comments

    keywords = False
    if isinstance(cfg_lexer.get("keywords"), bool):
        keywords = cfg_lexer["keywords"]
    if args.keywords is not None:
        keywords = args.keywords

    output_format = "text"
    cfg_format = cfg_lexer.get("format")
    if cfg_format is not None:
        if cfg_format not in FORMATS:
            raise argparse.ArgumentTypeError(
                f"invalid format in config (expected one of {', '.join(FORMATS)}): {cfg_format}"
            )
        output_format = cfg_format
    if args.format is not None:
        output_format = args.format

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        unit=args.unit or str(input_file),
        output_format=output_format,
        comments=comments,
        keywords=keywords,
    )


def lex_file(options: CliOptions) -> str:
    """Read and tokenize a file, returning the rendered token stream."""
    from dmlex.debug import dump_tokens
    from dmlex.lexer import lex_unit
    from dmlex.serialize import dumps

    tokens = lex_unit(
        options.input_file,
        options.unit,
        keywords=options.keywords,
        comments=options.comments,
    )

    if options.output_format == "json":
        return dumps(tokens, indent=2) + "\n"

    buf = io.StringIO()
    dump_tokens(tokens, file=buf)
    return buf.getvalue()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(name)s [%(levelname)s] %(message)s",
    )

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        output = lex_file(options)
    except LexError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
