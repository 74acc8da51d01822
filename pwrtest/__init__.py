"""
pwrtest - unattended power testing of Chromebook DUTs

Keeps the DUT battery within a charge band between tests, runs each
autotest test through test_that and saves its output.
"""

__version__ = "1.0.0"

from .interfaces import (
    PwrtestError,
    PowerState,
    SessionConfig,
    TestResult,
    ControlToolInterface,
    TestToolInterface,
    FileSystemInterface,
    ClockInterface,
)

from .retry import RetryPolicy, TransientError, RetryExhaustedError
from .telemetry import TelemetryClient, TelemetryProtocolError
from .power import PowerController
from .charge import ChargeManager, ChargeProgress, TextChargeProgress, NullChargeProgress
from .runner import TestRunner
from .session import SessionDriver, ResultWriteError, format_elapsed, result_filename
from .implementations import ToolLaunchError, ToolOutputError

__all__ = [
    "__version__",
    "PwrtestError",
    "PowerState",
    "SessionConfig",
    "TestResult",
    "ControlToolInterface",
    "TestToolInterface",
    "FileSystemInterface",
    "ClockInterface",
    "RetryPolicy",
    "TransientError",
    "RetryExhaustedError",
    "TelemetryClient",
    "TelemetryProtocolError",
    "PowerController",
    "ChargeManager",
    "ChargeProgress",
    "TextChargeProgress",
    "NullChargeProgress",
    "TestRunner",
    "ToolOutputError",
    "SessionDriver",
    "ResultWriteError",
    "format_elapsed",
    "result_filename",
    "ToolLaunchError",
]
