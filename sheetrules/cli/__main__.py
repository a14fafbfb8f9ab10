from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from sheetrules.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from sheetrules.engine.errors import ConfigurationError, SessionCancelledError
from sheetrules.excel.reader import ReaderError, read_workbook
from sheetrules.logging.init import log_summary, setup_logging
from sheetrules.logging.message_log import MessageLogBuffer
from sheetrules.rules.factory import build_registry
from sheetrules.services.session import ValidationSession
from sheetrules.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load config (rules + settings)
- Build the validator registry
- Read the workbook
- Run the validation session, print messages and one SUMMARY line

Exit codes: 0 valid, 2 validation messages, 1 fatal.
"""

EXIT_VALID = 0
EXIT_FATAL = 1
EXIT_INVALID = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="sheetrules", description="Validate an Excel workbook against dependent rules")
    p.add_argument("workbook", type=Path, help="Path to the .xlsx file")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Rule configuration (YAML)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--workers", type=int, default=None, help="Evaluate rows on N worker threads")
    p.add_argument("--message-log", action="store_true", help="Write messages to logs/messages-*.log (JSON Lines)")
    p.add_argument("--no-progress", action="store_true", help="Disable progress display")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read process arguments when none are given (tests pass lists)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        setup_logging(debug=True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
        settings = cfg.settings
        if args.workers is not None:
            settings = replace(settings, workers=args.workers)
        if args.no_progress:
            settings = replace(settings, show_progress=False)
        registry = build_registry(cfg)
    except (ConfigError, ValueError) as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        workbook = read_workbook(
            args.workbook,
            header_row=cfg.excel.header_row,
            keep_na_strings=cfg.excel.keep_na_strings,
        )
    except ReaderError as e:
        logger.error(f"workbook: {e}")
        return EXIT_FATAL

    logger.info(f"Validating {workbook.name}: {len(workbook.sheets)} sheets")

    session = ValidationSession(registry, settings)
    try:
        passed = session.run(workbook)
    except ConfigurationError as e:
        logger.error(f"rules: {e}")
        return EXIT_FATAL
    except SessionCancelledError as e:
        logger.error(f"cancelled: {e}")
        return EXIT_FATAL
    except Exception as e:
        logger.error(f"validator error: {type(e).__name__}: {e}")
        return EXIT_FATAL

    for message in session.messages:
        logger.warning(f"{message.location()} key={message.key} {message.text}")

    if args.message_log and session.messages:
        buffer = MessageLogBuffer()
        buffer.extend(session.messages)
        path = buffer.flush()
        logger.info(f"message log: {path}")

    if session.result is not None:
        summary_line = render_summary_line(session.result)
        # log_summary adds the "SUMMARY " prefix itself
        log_summary(summary_line[len("SUMMARY "):])

    return EXIT_VALID if passed else EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
