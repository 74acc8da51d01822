"""Session driver: charge check, run, persist and report each test in turn."""

from __future__ import annotations

import logging
import os
from typing import Optional

from pwrtest.charge import ChargeManager
from pwrtest.interfaces import (
    ClockInterface,
    FileSystemInterface,
    PwrtestError,
    SessionConfig,
    TestResult,
)
from pwrtest.runner import TestRunner
from pwrtest.telemetry import TelemetryClient

logger = logging.getLogger(__name__)


class ResultWriteError(PwrtestError):
    """Raised when a test result cannot be saved."""


def format_elapsed(seconds: float) -> str:
    """Format a duration as seconds, minutes or hours depending on magnitude.

    >>> format_elapsed(45)
    '45.00s'
    >>> format_elapsed(125)
    '2.08m'
    >>> format_elapsed(7200)
    '2.00h'
    """
    if seconds < 60:
        return f"{seconds:.2f}s"
    if seconds < 3600:
        return f"{seconds / 60:.2f}m"
    return f"{seconds / 3600:.2f}h"


def result_filename(index: int, test_name: str, dut_address: str) -> str:
    """Name of the file holding the output of the *index*-th test (1-based)."""
    return f"test_no_{index}__{test_name}__{dut_address}"


class SessionDriver:
    """Runs every configured test strictly in order.

    Any fatal error aborts the session; results already written stay on disk.
    """

    def __init__(
        self,
        config: SessionConfig,
        charge: ChargeManager,
        runner: TestRunner,
        fs: FileSystemInterface,
        clock: ClockInterface,
        telemetry: Optional[TelemetryClient] = None,
    ):
        if config.report_battery and telemetry is None:
            raise ValueError("report_battery requires a telemetry client")
        self._config = config
        self._charge = charge
        self._runner = runner
        self._fs = fs
        self._clock = clock
        self._telemetry = telemetry
        self.total_elapsed: Optional[float] = None

    def run(self) -> list[TestResult]:
        """Run the whole session and return the results in test order."""
        results: list[TestResult] = []
        session_start = self._clock.monotonic()

        for index, name in enumerate(self._config.tests, start=1):
            results.append(self.run_one(index, name))

        self.total_elapsed = self._clock.monotonic() - session_start
        print(f"all {len(results)} tests done in {format_elapsed(self.total_elapsed)}")
        return results

    def run_one(self, index: int, name: str) -> TestResult:
        cfg = self._config
        self._charge.ensure_charged(cfg.charge_from, cfg.charge_to)

        print(f"running test {name}...")
        started = self._clock.monotonic()
        output = self._runner.run(name)
        result = TestResult(
            name=name,
            index=index,
            output=output,
            elapsed=self._clock.monotonic() - started,
        )

        result.path = self._persist(result)
        print(f"test {name} took {format_elapsed(result.elapsed)}")
        if cfg.report_battery:
            print(f"battery: {self._telemetry.battery_percent()}%")
        return result

    def _persist(self, result: TestResult) -> str:
        path = os.path.join(
            self._config.out_dir,
            result_filename(result.index, result.name, self._config.dut_address),
        )
        try:
            self._fs.write_file(path, result.output)
        except OSError as e:
            raise ResultWriteError(f"failed to save result of test {result.name} to {path}: {e}") from e
        logger.info("saved %s", path)
        return path
