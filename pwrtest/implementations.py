"""
Real implementations of interfaces for production use.

These classes wrap actual system resources (external tools, files, time)
and implement the abstract interfaces.
"""

from typing import List, Optional, Sequence
import logging
import os
import subprocess
import time

from .interfaces import (
    ControlToolInterface, TestToolInterface, FileSystemInterface, ClockInterface,
    PwrtestError,
)

logger = logging.getLogger(__name__)

DEFAULT_CONTROL_TOOL = "dut-control"
DEFAULT_TEST_TOOL = "test_that"


class ToolLaunchError(PwrtestError):
    """Raised when an external tool cannot be started."""


class ToolOutputError(PwrtestError):
    """Raised when external tool output cannot be decoded as text."""


def _control_tool_path() -> str:
    """Return the control tool executable.

    Uses PWRTEST_CONTROL_TOOL env var if set. Implemented as a function
    so tests can monkeypatch the environment after import.
    """
    return os.environ.get("PWRTEST_CONTROL_TOOL", DEFAULT_CONTROL_TOOL)


def _test_tool_path() -> str:
    """Return the test tool executable (PWRTEST_TEST_TOOL env var if set)."""
    return os.environ.get("PWRTEST_TEST_TOOL", DEFAULT_TEST_TOOL)


class DutControlTool(ControlToolInterface):
    """
    Control tool implementation that shells out to ``dut-control``.
    """

    def __init__(self, executable: Optional[str] = None):
        self._executable = executable or _control_tool_path()
        self._launched: List[subprocess.Popen] = []

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def pending_launches(self) -> int:
        """Number of launched commands not yet seen to exit."""
        self._reap()
        return len(self._launched)

    def query(self, command: str) -> str:
        cmd = [self._executable, command]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True)
        except OSError as e:
            raise ToolLaunchError(f"failed to run {self._executable} {command}: {e}") from e

        if result.returncode != 0:
            logger.warning(
                "%s %s exited with %d: %s",
                self._executable, command, result.returncode,
                result.stderr.decode("utf-8", errors="replace").strip()[:200],
            )
        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolOutputError(
                f"output of {self._executable} {command} is not valid UTF-8: {e}"
            ) from e

    def send(self, command: str) -> None:
        cmd = [self._executable, command]
        logger.debug("Launching: %s", " ".join(cmd))
        self._reap()
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ToolLaunchError(f"failed to launch {self._executable} {command}: {e}") from e
        # Not waited on; kept so a later poll() reaps it
        self._launched.append(proc)

    def _reap(self) -> None:
        self._launched = [p for p in self._launched if p.poll() is None]


class TestThatTool(TestToolInterface):
    """
    Test tool implementation that shells out to ``test_that``.
    """

    def __init__(self, executable: Optional[str] = None):
        self._executable = executable or _test_tool_path()

    @property
    def executable(self) -> str:
        return self._executable

    def run(self, args: Sequence[str]) -> bytes:
        cmd = [self._executable, *args]
        logger.debug("Running: %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True)
        except OSError as e:
            raise ToolLaunchError(f"failed to run {' '.join(cmd)}: {e}") from e

        if result.returncode != 0:
            logger.warning("%s exited with %d", self._executable, result.returncode)
        return result.stdout


class RealFileSystem(FileSystemInterface):
    """
    Real file system implementation.
    """

    def write_file(self, path: str, content: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())  # Ensure written to disk


class RealClock(ClockInterface):
    """
    Real clock implementation using system time.
    """

    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
