"""Command-line interface for autodefault."""

from __future__ import annotations

import argparse
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from autodefault.context import DEFAULT_MARKER, DEFAULT_NAMESPACE
from autodefault.errors import LexError
from autodefault.expand import ExpandResult, expand

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "autodefault.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    namespace: str
    marker: str
    emit_errors: bool
    check: bool
    watch: bool
    debug: bool
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="autodefault",
        description="Add `= Default::default()` to struct and enum fields without a default value",
    )
    p.add_argument("input", help="Input .rs file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    p.add_argument(
        "--attribute",
        default=None,
        metavar="NAME",
        help=f"Attribute that marks items to rewrite (default: {DEFAULT_NAMESPACE})",
    )
    p.add_argument(
        "--marker",
        default=None,
        metavar="NAME",
        help=f"Opt-out marker inside the attribute (default: {DEFAULT_MARKER})",
    )
    p.add_argument(
        "--emit-errors",
        action="store_true",
        default=None,
        help="Embed diagnostics in the output as compile_error! invocations",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit 1 if the file would be rewritten",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and rewrite")
    p.add_argument("--debug", action="store_true", help="Dump token tree to stderr")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return p


def parse_name_arg(s: str) -> str:
    """Validate an attribute or marker name."""
    if not s.isidentifier():
        raise argparse.ArgumentTypeError(f"invalid name (expected an identifier): {s}")
    return s


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_FILENAME

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

    namespace = DEFAULT_NAMESPACE
    cfg_attribute = config.get("attribute")
    if isinstance(cfg_attribute, str):
        namespace = parse_name_arg(cfg_attribute)
    if args.attribute is not None:
        namespace = parse_name_arg(args.attribute)

    marker = DEFAULT_MARKER
    cfg_marker = config.get("marker")
    if isinstance(cfg_marker, str):
        marker = parse_name_arg(cfg_marker)
    if args.marker is not None:
        marker = parse_name_arg(args.marker)

    emit_errors = False
    cfg_emit = config.get("emit_errors")
    if isinstance(cfg_emit, bool):
        emit_errors = cfg_emit
    if args.emit_errors is not None:
        emit_errors = args.emit_errors

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        namespace=namespace,
        marker=marker,
        emit_errors=emit_errors,
        check=args.check,
        watch=args.watch,
        debug=args.debug,
        verbose=args.verbose,
    )


def expand_file(options: CliOptions) -> tuple[str, ExpandResult]:
    """Read and rewrite a source file. Returns the original source and the result."""
    from autodefault.debug import dump_tokens
    from autodefault.lexer import tokenize

    source = options.input_file.read_text(encoding="utf-8")
    filename = str(options.input_file)

    if options.debug:
        dump_tokens(tokenize(source, filename))

    result = expand(
        source,
        filename,
        namespace=options.namespace,
        marker=options.marker,
        emit_errors=options.emit_errors,
    )
    return source, result


def report(result: ExpandResult, source: str, filename: str) -> None:
    """Print every diagnostic to stderr."""
    for diagnostic in result.diagnostics:
        print(diagnostic.format(source, filename), file=sys.stderr)


def write_output(options: CliOptions, text: str) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, rewrite on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    source, result = expand_file(options)
                    report(result, source, str(options.input_file))
                    write_output(options, result.text)
                    if not options.output_file:
                        sys.stdout.flush()
                    print(f"Rewrote {options.input_file}", file=sys.stderr)
                except LexError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: cannot read {options.input_file}: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read config: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )

    if options.watch:
        watch_loop(options)
        return 0

    filename = str(options.input_file)
    try:
        source, result = expand_file(options)
    except LexError as exc:
        print(exc.format(filename), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {filename}: {exc}", file=sys.stderr)
        return 1

    report(result, source, filename)

    if options.check:
        changed = result.text != source
        if changed:
            print(f"{filename} would be rewritten", file=sys.stderr)
        return 1 if changed or result.diagnostics else 0

    write_output(options, result.text)
    logger.debug("%s: %d item(s), %d default value(s)", filename, result.items, result.injected)
    return 1 if result.diagnostics else 0
