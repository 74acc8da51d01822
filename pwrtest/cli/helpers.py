"""Shared utilities for the pwrtest CLI."""

from __future__ import annotations

import argparse
import logging
import sys

from pwrtest.charge import ChargeManager, TextChargeProgress
from pwrtest.implementations import DutControlTool, RealClock, RealFileSystem, TestThatTool
from pwrtest.interfaces import SessionConfig
from pwrtest.power import PowerController
from pwrtest.runner import TestRunner
from pwrtest.session import SessionDriver
from pwrtest.telemetry import TelemetryClient

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _config_from_args(args: argparse.Namespace) -> SessionConfig:
    return SessionConfig(
        tests=tuple(args.tests),
        charge_from=args.charge_from,
        charge_to=args.charge_to,
        board=args.board,
        dut_address=args.ip,
        autotest_dir=args.autotest_dir,
        out_dir=args.out_dir,
        report_battery=args.report_battery,
    )


def _build_driver(args: argparse.Namespace) -> SessionDriver:
    """Wire the production collaborators into a SessionDriver."""
    config = _config_from_args(args)
    clock = RealClock()
    control = DutControlTool(args.control_tool)
    telemetry = TelemetryClient(control, clock)
    power = PowerController(control, telemetry, clock)
    charge = ChargeManager(telemetry, power, clock, progress=TextChargeProgress())
    runner = TestRunner(
        TestThatTool(args.test_tool),
        board=config.board,
        autotest_dir=config.autotest_dir,
        dut_address=config.dut_address,
    )
    return SessionDriver(config, charge, runner, RealFileSystem(), clock, telemetry=telemetry)
