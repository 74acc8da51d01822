"""
Mock implementations for testing.

These classes implement the abstract interfaces with in-memory behavior
suitable for unit testing without a DUT, a servo board or autotest.
"""

from typing import Optional, List, Dict, Sequence, Tuple, Union
from collections import deque

from .interfaces import (
    ControlToolInterface, TestToolInterface, FileSystemInterface, ClockInterface,
)


class MockControlTool(ControlToolInterface):
    """
    Mock control tool for testing.

    Responses are queued per command with set_responses(). When a command's
    queue is down to its last response, that response is repeated.
    Every query and send is recorded in order and can be read back with
    get_calls(), get_sent() and get_queries().
    """

    def __init__(self):
        self._responses: Dict[str, deque] = {}
        self._calls: List[Tuple[str, str]] = []

    def query(self, command: str) -> str:
        self._calls.append(("query", command))
        queue = self._responses.get(command)
        if not queue:
            return ""
        if len(queue) > 1:
            return queue.popleft()
        return queue[0]

    def send(self, command: str) -> None:
        self._calls.append(("send", command))

    # Test helper methods

    def set_responses(self, command: str, *responses: str) -> None:
        """Queue raw responses for a query command."""
        self._responses[command] = deque(responses)

    def set_battery(self, *levels: int) -> None:
        """Queue well-formed ``battery_charge_percent`` responses."""
        self.set_responses(
            "battery_charge_percent",
            *(f"battery_charge_percent:{level}\n" for level in levels),
        )

    def set_power_state(self, *codes: str) -> None:
        """Queue ``ec_system_powerstate`` responses (e.g. "S0", "G3")."""
        self.set_responses(
            "ec_system_powerstate",
            *(f"ec_system_powerstate:{code}\n" for code in codes),
        )

    def get_calls(self) -> List[Tuple[str, str]]:
        """Get all (kind, command) pairs in call order."""
        return self._calls.copy()

    def get_sent(self) -> List[str]:
        """Get all fire-and-forget commands in call order."""
        return [cmd for kind, cmd in self._calls if kind == "send"]

    def get_queries(self) -> List[str]:
        """Get all query commands in call order."""
        return [cmd for kind, cmd in self._calls if kind == "query"]

    def clear_calls(self) -> None:
        self._calls.clear()


class MockTestTool(TestToolInterface):
    """
    Mock test tool that returns canned output per test name.

    The test name is the last positional argument, as with ``test_that``.
    If a clock is given, each run advances it by the configured duration.
    """

    def __init__(self, clock: Optional["MockClock"] = None):
        self._clock = clock
        self._outputs: Dict[str, bytes] = {}
        self._durations: Dict[str, float] = {}
        self._runs: List[List[str]] = []
        self._fail_with: Optional[Exception] = None

    def run(self, args: Sequence[str]) -> bytes:
        self._runs.append(list(args))
        if self._fail_with is not None:
            raise self._fail_with
        name = args[-1]
        if self._clock is not None:
            self._clock.advance(self._durations.get(name, 0.0))
        return self._outputs.get(name, b"")

    # Test helper methods

    def set_output(self, test_name: str, output: Union[str, bytes], duration: float = 0.0) -> None:
        if isinstance(output, str):
            output = output.encode("utf-8")
        self._outputs[test_name] = output
        self._durations[test_name] = duration

    def set_fail_with(self, exc: Optional[Exception]) -> None:
        """Make run() raise *exc* (for testing error handling)."""
        self._fail_with = exc

    def get_runs(self) -> List[List[str]]:
        return [list(r) for r in self._runs]


class MockFileSystem(FileSystemInterface):
    """
    In-memory file system for testing.

    All file operations are performed in memory without touching disk.
    """

    def __init__(self):
        self._files: Dict[str, str] = {}
        self._fail_on_write = False

    def write_file(self, path: str, content: str) -> None:
        if self._fail_on_write:
            raise PermissionError(f"Permission denied: {path}")
        self._files[path] = content

    # Test helper methods

    def get_all_files(self) -> Dict[str, str]:
        """Get dictionary of all files and contents."""
        return self._files.copy()

    def set_fail_on_write(self, fail: bool) -> None:
        """Make write_file() fail (for testing error handling)."""
        self._fail_on_write = fail


class MockClock(ClockInterface):
    """
    Controllable clock for testing.

    sleep() records the call and advances time instead of blocking.
    """

    def __init__(self, start: float = 1000.0):
        self._current = start
        self._sleep_calls: List[float] = []

    def monotonic(self) -> float:
        return self._current

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._current += seconds

    # Test helper methods

    def advance(self, seconds: float) -> None:
        """Advance time by specified seconds."""
        self._current += seconds

    def get_sleep_calls(self) -> List[float]:
        """Get list of all sleep durations."""
        return self._sleep_calls.copy()
