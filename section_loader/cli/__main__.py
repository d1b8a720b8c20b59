from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from section_loader.browser.session import SessionError
from section_loader.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from section_loader.excel.reader import SpreadsheetError, read_rows
from section_loader.logging.init import enable_debug, log_summary, setup_logging
from section_loader.services.orchestrator import RunController
from section_loader.services.summary import render_summary_body

"""CLI entrypoint.

Flow:
- Load ``.env`` (overrides the process environment)
- Load config (``SECTION_LOADER_CONFIG`` or ``config/entry.yml``)
- Read the spreadsheet
- Run, print the SUMMARY line

Exit codes: 0 when the row loop completed (failed rows included), 1 when the
run could not start or the session was lost.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

ENV_CONFIG = "SECTION_LOADER_CONFIG"
ENV_DEBUG = "SECTION_LOADER_DEBUG"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; values in the file win over the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="section-loader",
        description="Bulk-enter pavement sections from a spreadsheet into StreetSaver",
        epilog=f"Environment: {ENV_CONFIG}=<config path>, {ENV_DEBUG}=1 for debug logging",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up the test runner's argv
    if argv is None:
        argv = sys.argv[1:]
    _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if os.getenv(ENV_DEBUG) == "1":
        enable_debug()

    config_path = Path(os.getenv(ENV_CONFIG) or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        rows = read_rows(Path(cfg.spreadsheet_path))
    except SpreadsheetError as e:
        logger.error(f"spreadsheet: {e}")
        return EXIT_FATAL

    logger.info(f"Entering sections from: {cfg.spreadsheet_path}")
    logger.info(f"Target database: {cfg.target_database_name}")

    try:
        result = RunController(cfg).run(rows)
    except SessionError as e:
        logger.error(f"session: {e}")
        return EXIT_FATAL

    log_summary(render_summary_body(result))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
