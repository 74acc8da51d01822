"""Entry point dispatch for the pwrtest CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from pwrtest.cli.parser import parse_args
from pwrtest.interfaces import PwrtestError

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``pwrtest`` CLI.

    Validates arguments, builds the session and runs every test.

    Args:
        argv: Argument list to parse.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 on success, 1 on a fatal session error.  Invalid
        arguments exit with status 2 before any device interaction.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = parse_args(argv)

    # Late import to allow tests to monkeypatch pwrtest.cli.helpers._build_driver
    from pwrtest.cli import helpers

    helpers._configure_logging(args.verbose)
    driver = helpers._build_driver(args)
    try:
        driver.run()
    except PwrtestError as e:
        logger.debug("session aborted", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0
