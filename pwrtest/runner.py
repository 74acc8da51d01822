"""Runs a single autotest test against the DUT."""

from __future__ import annotations

import logging

from pwrtest.implementations import ToolOutputError
from pwrtest.interfaces import TestToolInterface

logger = logging.getLogger(__name__)


class TestRunner:
    """Invokes the test tool for one test and returns its stdout as text.

    Failed tests are not retried; whatever the tool printed is returned.
    """
    __test__ = False

    def __init__(self, tool: TestToolInterface, board: str, autotest_dir: str, dut_address: str):
        self._tool = tool
        self._board = board
        self._autotest_dir = autotest_dir
        self._dut_address = dut_address

    def build_args(self, test_name: str) -> list[str]:
        return [
            f"--board={self._board}",
            f"--autotest_dir={self._autotest_dir}",
            self._dut_address,
            test_name,
        ]

    def run(self, test_name: str) -> str:
        """Run *test_name* and return the captured output.

        Raises:
            ToolLaunchError: If the test tool cannot be started.
            ToolOutputError: If the output is not valid UTF-8.
        """
        logger.debug("running %s on %s", test_name, self._dut_address)
        stdout = self._tool.run(self.build_args(test_name))
        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolOutputError(f"output of test {test_name} is not valid UTF-8: {e}") from e
