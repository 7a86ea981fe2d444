"""Command line entry point for launching the Textual UI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from loguru import logger

from .context import AppContext
from .logger import setup_logger
from .store.paths import database_path, log_path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cordkeeper",
        description="Track firewood burned during the heating season.",
    )
    parser.add_argument("--db", help="Path to the SQLite database (defaults to the user data dir)")
    parser.add_argument("--log-level", default="INFO", help="Logging level written to the log file")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Launch the Cordkeeper dashboard."""

    from .ui.app import CordkeeperApp

    args = _build_parser().parse_args(argv)
    setup_logger(level=args.log_level.upper(), log_file=log_path(), console=False)
    context = AppContext.bootstrap(args.db or database_path())
    try:
        CordkeeperApp(context).run()
    finally:
        context.close()
        logger.info("Cordkeeper closed")


if __name__ == "__main__":  # pragma: no cover - module entry point
    main()
