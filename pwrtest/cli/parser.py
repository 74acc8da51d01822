"""Argument parser for the pwrtest CLI."""

from __future__ import annotations

import argparse
import ipaddress
import os

from pwrtest import __version__


def _percent(value: str) -> int:
    """argparse type: integer battery level in 0..100."""
    try:
        pct = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid integer") from None
    if not 0 <= pct <= 100:
        raise argparse.ArgumentTypeError(f"{pct} must range from 0 to 100")
    return pct


def _existing_dir(value: str) -> str:
    """argparse type: path to an existing directory."""
    if not os.path.isdir(value):
        raise argparse.ArgumentTypeError(f"{value!r} is not an existing directory")
    return value


def _ip_address(value: str) -> str:
    """argparse type: IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a valid IP address") from None
    return value


def _test_list(value: str) -> list[str]:
    """argparse type: comma separated list of test names."""
    names = [name.strip() for name in value.split(",")]
    if any(not name for name in names):
        raise argparse.ArgumentTypeError(f"{value!r} contains an empty test name")
    return names


def _build_parser() -> argparse.ArgumentParser:
    """Build the pwrtest argument parser."""
    parser = argparse.ArgumentParser(
        prog="pwrtest",
        description="Tests power usage on chromebooks.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-f", "--charge-from",
        required=True,
        type=_percent,
        metavar="PCT",
        help="Charge the DUT before a test if its battery is below this level (0-100)",
    )
    parser.add_argument(
        "-t", "--charge-to",
        required=True,
        type=_percent,
        metavar="PCT",
        help="Level to charge to once charging starts (0-100, >= --charge-from)",
    )
    parser.add_argument(
        "-a", "--autotest-dir",
        required=True,
        type=_existing_dir,
        metavar="PATH",
        help="Autotest directory",
    )
    parser.add_argument(
        "--board",
        required=True,
        metavar="BOARD",
        help="Name of the tested board, e.g. caroline",
    )
    parser.add_argument(
        "--ip",
        required=True,
        type=_ip_address,
        metavar="DUT_IP",
        help="IP of the device under test",
    )
    parser.add_argument(
        "-o", "--out-dir",
        required=True,
        type=_existing_dir,
        metavar="PATH",
        help="Directory to save test logs in",
    )
    parser.add_argument(
        "--tests",
        required=True,
        type=_test_list,
        metavar="TESTS",
        help="Comma separated test names, e.g. 'power_Display,power_Idle'",
    )
    parser.add_argument(
        "--report-battery",
        action="store_true",
        help="Print the battery level after every test",
    )
    parser.add_argument(
        "--control-tool",
        default=None,
        help="Control tool executable (default: $PWRTEST_CONTROL_TOOL or dut-control)",
    )
    parser.add_argument(
        "--test-tool",
        default=None,
        help="Test tool executable (default: $PWRTEST_TEST_TOOL or test_that)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and cross-validate *argv*. Exits with status 2 on invalid input."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.charge_from > args.charge_to:
        parser.error(
            f"--charge-from ({args.charge_from}) must not exceed --charge-to ({args.charge_to})"
        )
    return args
