"""
Interfaces for pwrtest

Abstract base classes that define contracts for the external collaborators
(control tool, test tool, filesystem, clock) plus the shared data types.
This enables dependency injection and mock-based testing without hardware.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum


class PwrtestError(RuntimeError):
    """Base class for fatal pwrtest errors."""


class PowerState(Enum):
    """DUT power states as reported by ``ec_system_powerstate``."""
    ON = "on"
    OFF = "off"


@dataclass(frozen=True)
class SessionConfig:
    """Validated, immutable configuration for one test session."""
    tests: Tuple[str, ...]
    charge_from: int
    charge_to: int
    board: str
    dut_address: str
    autotest_dir: str
    out_dir: str
    report_battery: bool = False

    def __post_init__(self):
        if not self.tests:
            raise ValueError("at least one test name is required")
        if any(not name for name in self.tests):
            raise ValueError("test names must be non-empty")
        for name, value in (("charge_from", self.charge_from), ("charge_to", self.charge_to)):
            if not 0 <= value <= 100:
                raise ValueError(f"{name} must range from 0 to 100, got {value}")
        if self.charge_from > self.charge_to:
            raise ValueError(
                f"charge_from ({self.charge_from}) must not exceed charge_to ({self.charge_to})"
            )


@dataclass
class TestResult:
    """Outcome of a single test invocation."""
    __test__ = False  # not a pytest test class

    name: str
    index: int
    output: str
    elapsed: float
    path: Optional[str] = None


class ControlToolInterface(ABC):
    """
    Abstract interface for the DUT control tool (``dut-control``).

    Two call shapes:
    - query(): run the tool, wait for it, return its stdout
    - send(): launch the tool and return without waiting

    Implementations:
    - DutControlTool: Wraps the real executable via subprocess
    - MockControlTool: Scripted responses for unit testing
    """

    @abstractmethod
    def query(self, command: str) -> str:
        """Run a query command and return its decoded stdout."""
        pass

    @abstractmethod
    def send(self, command: str) -> None:
        """Launch a control command without waiting for it to complete."""
        pass


class TestToolInterface(ABC):
    """
    Abstract interface for the test execution tool (``test_that``).
    """
    __test__ = False

    @abstractmethod
    def run(self, args: Sequence[str]) -> bytes:
        """Run the tool with *args*, block until it exits, return raw stdout."""
        pass


class FileSystemInterface(ABC):
    """
    Abstract interface for file system operations.

    Implementations:
    - RealFileSystem: Actual file I/O
    - MockFileSystem: In-memory for testing
    """

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Write content to file, replacing any existing contents."""
        pass


class ClockInterface(ABC):
    """
    Abstract interface for time operations.

    Enables deterministic testing of time-dependent logic.
    """

    @abstractmethod
    def monotonic(self) -> float:
        """Get a monotonic timestamp in seconds."""
        pass

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified duration."""
        pass
