"""Entry point for the mdlive CLI."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from mdlive.config import LOG_LEVELS, load_config
from mdlive.errors import ConfigError, MdliveError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdlive", description="mdlive: live markdown editor for the terminal")
    parser.add_argument("--config", default=None, help="Config file (default: ~/.mdlive/config.json)")
    parser.add_argument("--log-file", default=None, help="Write logs to this file (default: no logging)")
    parser.add_argument("--log-level", default=None, choices=list(LOG_LEVELS))
    parser.add_argument("--width", type=int, default=None, help="Render width in columns (default: terminal width)")
    return parser


def configure_logging(log_file: str | None, log_level: str) -> None:
    """Send logs to *log_file*; stdout and stderr belong to the editor."""
    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
        config.apply_overrides(
            {
                "log_file": args.log_file,
                "log_level": args.log_level,
                "render_width": args.width,
            }
        )
    except ConfigError as e:
        print(f"mdlive: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_file, config.log_level)

    from mdlive.session import EditorSession
    from mdlive.terminal import ProcessTerminal

    session = EditorSession(ProcessTerminal(), config)
    try:
        asyncio.run(session.run())
    except MdliveError as e:
        logger.exception("session aborted")
        print(f"mdlive: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
