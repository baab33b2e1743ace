from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from blm.config.loader import DEFAULT_CONFIG, BLMConfig, ConfigError, load_config
from blm.logging.error_log import ErrorLogBuffer
from blm.logging.init import log_summary, setup_logging
from blm.models.document import ParserError
from blm.services.summary import render_summary_line
from blm.services.validator import ProcessingError, load_document, validate_files
from blm.tabular.frames import ConversionError, document_from_frame, document_to_frame, read_table, write_table

"""CLI entrypoint.

Subcommands:
- validate: parse one or more BLM files and report invalid rows
- inspect:  print header, definition and the first rows of a file
- convert:  csv/xlsx -> blm, or blm -> csv/xlsx

Config resolution: --config, then $BLM_CONFIG (a .env file in the working
directory is loaded first), then config/blm.yml if present, else defaults.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

DEFAULT_CONFIG_PATH = Path("config/blm.yml")


def _load_env_file(path: Path) -> None:
    """Load .env using python-dotenv; existing environment variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _resolve_config(explicit: str | None) -> BLMConfig:
    if explicit:
        return load_config(Path(explicit))
    env_path = os.getenv("BLM_CONFIG")
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return DEFAULT_CONFIG


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="blm", description="BLM document validator and converter")
    p.add_argument("--config", help="YAML config file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    v = sub.add_parser("validate", help="Validate BLM files")
    v.add_argument("files", nargs="+", type=Path)
    v.add_argument("--error-log", action="store_true", help="Write invalid rows as JSON Lines")

    i = sub.add_parser("inspect", help="Show the structure of a BLM file")
    i.add_argument("file", type=Path)
    i.add_argument("--rows", type=int, default=3, help="Number of rows to print")

    c = sub.add_parser("convert", help="Convert between BLM and csv/xlsx")
    c.add_argument("source", type=Path)
    c.add_argument("target", type=Path)
    c.add_argument("--international", action="store_true", default=None)
    c.add_argument("--eof", help="Field separator for generated BLM")
    c.add_argument("--eor", help="Record separator for generated BLM")
    return p.parse_args(argv)


def _validate(args: argparse.Namespace, cfg: BLMConfig) -> int:
    error_log = ErrorLogBuffer(Path(cfg.error_log_dir)) if args.error_log else None
    try:
        result = validate_files(args.files, cfg, error_log)
    except ProcessingError as e:
        setup_logging().error(f"validate: {e}")
        return EXIT_FATAL
    if error_log is not None:
        log_path = error_log.flush()
        if log_path is not None:
            setup_logging().info(f"error log written: {log_path}")
    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])
    if result.invalid_files or result.failed_files:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _inspect(args: argparse.Namespace, cfg: BLMConfig) -> int:
    document = load_document(args.file, cfg)
    print(document.describe())
    for key, value in document.header.items():
        print(f"  {key}: {value}")
    print(f"  definition={list(document.definition)}")
    for row in document.rows[: args.rows]:
        print(f"  row {row.index}: {row.attributes}")
    for message in document.errors[: args.rows]:
        print(f"  error: {message}")
    return EXIT_SUCCESS_ALL if document.is_valid else EXIT_PARTIAL_FAILURE


def _convert(args: argparse.Namespace, cfg: BLMConfig) -> int:
    logger = setup_logging()
    source, target = args.source, args.target
    if target.suffix.lower() == ".blm":
        options = {
            "international": cfg.international if args.international is None else args.international,
            "eof": args.eof or cfg.eof,
            "eor": args.eor or cfg.eor,
        }
        if options["eof"] == options["eor"]:
            logger.error("convert: eof and eor must differ")
            return EXIT_FATAL
        document = document_from_frame(read_table(source), name=target.name, **options)
        target.write_text(document.to_blm(), encoding=cfg.encoding)
    else:
        document = load_document(source, cfg)
        write_table(document_to_frame(document), target)
    logger.info(f"converted {source.name} -> {target.name} rows={len(document.rows)}")
    return EXIT_SUCCESS_ALL


COMMANDS = {
    "validate": _validate,
    "inspect": _inspect,
    "convert": _convert,
}


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        return COMMANDS[args.command](args, cfg)
    except ParserError as e:
        logger.error(f"{args.command}: {e.reason}")
    except (ProcessingError, ConversionError) as e:
        logger.error(f"{args.command}: {e}")
    return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
