# File: mappergen/cli.py
"""
mappergen - Command-Line Interface
====================================

CLI built with the standard-library ``argparse`` module.

Usage examples::

    # Everything from an options file
    python -m mappergen --config mappergen.yaml

    # Everything from flags
    python -m mappergen -s schema.json -o ./src/generated \\
        --connection-source ./src/db/connection.ts

    # Options file, with flag overrides and a table filter
    python -m mappergen -c mappergen.yaml -o ./out --include users --exclude audit_log

    # Log what would be written, write nothing
    python -m mappergen -c mappergen.yaml --dry-run -v

    # Validate only (no file output)
    python -m mappergen -s schema.yaml --validate-only

Exit codes:
    0 — success
    1 — validation error
    2 — generation error
    4 — input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, NoReturn, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

if TYPE_CHECKING:
    from mappergen.models import GeneratorOptions

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root mappergen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("mappergen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from mappergen import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="mappergen",
        description=(
            "mappergen — ts-sql-query table mapper generator.\n\n"
            "Reads a tbls schema document (JSON/YAML) and writes one "
            "TypeScript Table/View mapper class per relation."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -c mappergen.yaml\n"
            "  %(prog)s -s schema.json -o ./out --connection-source ./src/db.ts\n"
            "  %(prog)s -c mappergen.yaml --dry-run -v\n"
            "  %(prog)s -s schema.yaml --validate-only\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"mappergen v{__version__}",
    )

    # --- Inputs ---
    input_group = parser.add_argument_group("inputs")
    input_group.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="Options file (YAML or JSON). Flags below override its values.",
    )
    input_group.add_argument(
        "-s", "--schema",
        type=str,
        default=None,
        metavar="PATH",
        help="Path to the tbls schema document (JSON or YAML).",
    )
    input_group.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory receiving the generated modules.",
    )
    input_group.add_argument(
        "--connection-source",
        type=str,
        default=None,
        metavar="PATH",
        help="Module exporting the DBConnection type.",
    )

    # --- Table selection ---
    filter_group = parser.add_argument_group("table selection")
    filter_group.add_argument(
        "--include",
        action="append",
        default=None,
        metavar="NAME",
        help="Only generate tables matching NAME (dotted suffix). Repeatable.",
    )
    filter_group.add_argument(
        "--exclude",
        action="append",
        default=None,
        metavar="NAME",
        help="Skip tables matching NAME (dotted suffix). Repeatable.",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--validate-only",
        action="store_true",
        default=False,
        help="Only validate the schema (and options, if complete).",
    )
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Log what would be written; write nothing.",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Option assembly
# ---------------------------------------------------------------------------


def _build_option_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build an options override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.schema is not None:
        overrides["schema_path"] = args.schema

    if args.output is not None:
        overrides["output_dir_path"] = args.output

    if args.connection_source is not None:
        overrides["connection_source_path"] = args.connection_source

    if args.include or args.exclude:
        overrides["tables"] = {"include": args.include, "exclude": args.exclude}

    if args.dry_run:
        overrides["dry_run"] = True

    return overrides


def _load_options(args: argparse.Namespace) -> GeneratorOptions:
    """
    Merge the options file (if any) with flag overrides.

    Raises:
        SchemaLoadError: unreadable options file or invalid merged options.
    """
    from mappergen.errors import SchemaLoadError
    from mappergen.generator import load_options_file
    from mappergen.models import GeneratorOptions

    overrides: Dict[str, Any] = _build_option_overrides(args)
    if args.config is not None:
        return load_options_file(args.config, overrides)
    try:
        return GeneratorOptions.model_validate(overrides)
    except PydanticValidationError as exc:
        raise SchemaLoadError(
            "Incomplete options: pass -c/--config or all of "
            f"-s/--schema, -o/--output and --connection-source.\n{exc}"
        ) from exc


# ---------------------------------------------------------------------------
# Validate-only mode
# ---------------------------------------------------------------------------


def _run_validate_only(args: argparse.Namespace) -> int:
    """
    Run validation only (no code generation).

    Returns the appropriate exit code.
    """
    from mappergen.errors import SchemaLoadError
    from mappergen.generator import load_schema_file
    from mappergen.utils import Timer
    from mappergen.validators import ValidationResult, validate_full, validate_schema

    options = None
    try:
        options = _load_options(args)
    except SchemaLoadError as exc:
        if args.schema is None:
            logger.error("%s", exc)
            return EXIT_INPUT_ERROR
        logger.info("Options incomplete; validating the schema only.")

    schema_path: str = options.schema_path if options is not None else args.schema
    logger.info("Running validation-only mode for: %s", schema_path)

    try:
        schema = load_schema_file(schema_path)
    except SchemaLoadError as exc:
        logger.error("Failed to load schema: %s", exc)
        return EXIT_INPUT_ERROR

    with Timer("validation") as t:
        result: ValidationResult = (
            validate_full(schema, options) if options is not None else validate_schema(schema)
        )

    print(f"\n{'='*50}")
    print("  Schema Validation Report")
    print(f"{'='*50}")
    print(f"  File:     {Path(schema_path).name}")
    print(f"  Tables:   {len(schema.tables)}")
    print(f"  Time:     {t.elapsed:.3f}s")
    print(f"  Valid:    {'Yes' if result.is_valid else 'No'}")

    if result.errors:
        print(f"\n  Errors ({len(result.errors)}):")
        for err in result.errors:
            print(f"    ✗ {err}")

    if result.warnings:
        print(f"\n  Warnings ({len(result.warnings)}):")
        for warn in result.warnings:
            print(f"    ⚠ {warn}")

    if result.is_valid and not result.warnings:
        print("\n  ✅ All validations passed!")

    print(f"{'='*50}\n")

    return EXIT_SUCCESS if result.is_valid else EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Full generation mode
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace) -> int:
    """
    Run the full generation pipeline.

    Returns the appropriate exit code.
    """
    from mappergen.errors import GenerationFailedError, MapperGenError, SchemaLoadError
    from mappergen.generator import GenerationReport, Generator

    try:
        options = _load_options(args)
    except SchemaLoadError as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR

    logger.info("Schema:  %s", options.schema_path)
    logger.info("Output:  %s", options.output_dir_path)
    if options.dry_run:
        logger.info("Dry-run mode: files will not be written to disk.")

    generator: Generator = Generator(options)
    try:
        report: GenerationReport = generator.generate_sync()
    except SchemaLoadError as exc:
        logger.error("Failed to load schema: %s", exc)
        return EXIT_INPUT_ERROR
    except GenerationFailedError as exc:
        if exc.report is not None:
            print(exc.report.summary())
        logger.error("%s", exc)
        return EXIT_GENERATION_ERROR
    except MapperGenError as exc:
        logger.error("%s", exc)
        return EXIT_GENERATION_ERROR

    print(report.summary())
    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose

    _setup_logging(verbosity)

    if args.config is None and args.schema is None:
        logger.error("Nothing to do: pass -c/--config or -s/--schema.")
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    if args.validate_only:
        sys.exit(_run_validate_only(args))

    exit_code: int = _run_generation(args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_INPUT_ERROR",
]
