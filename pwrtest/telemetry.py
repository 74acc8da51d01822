"""Battery and power-state telemetry read through the control tool.

Every call queries the device again. Battery level and power state change
outside this process, so nothing is cached.
"""

from __future__ import annotations

import logging
from typing import Optional

from pwrtest.interfaces import ClockInterface, ControlToolInterface, PowerState, PwrtestError
from pwrtest.retry import RetryPolicy, TransientError

logger = logging.getLogger(__name__)

BATTERY_COMMAND = "battery_charge_percent"
POWER_STATE_COMMAND = "ec_system_powerstate"

BATTERY_RETRY_DELAY_S = 30.0
POWER_STATE_RETRY_DELAY_S = 10.0

# First character of the ec_system_powerstate value
_POWER_STATE_CODES = {
    "S": PowerState.ON,
    "G": PowerState.OFF,
}


class TelemetryProtocolError(PwrtestError):
    """Raised when the control tool reports a value this tool does not understand."""


def parse_value(response: str) -> str:
    """Return the value of a ``key:value`` response line.

    Everything after the first colon is the value, minus the trailing
    line terminator.

    Raises:
        TransientError: If the response has no colon.
    """
    parts = response.split(":", 1)
    if len(parts) != 2:
        raise TransientError(f"malformed response {response!r}")
    return parts[1].rstrip("\r\n")


def parse_battery_percent(response: str) -> int:
    """Parse ``battery_charge_percent:<int>`` into an int in 0..100."""
    value = parse_value(response)
    try:
        percent = int(value)
    except ValueError:
        raise TransientError(f"battery level {value!r} is not an integer") from None
    if not 0 <= percent <= 100:
        raise TransientError(f"battery level {percent} is outside 0..100")
    return percent


def parse_power_state(response: str) -> PowerState:
    """Parse ``ec_system_powerstate:<code>`` into a PowerState.

    An empty value is transient; an unknown state code is not.
    """
    value = parse_value(response)
    if not value:
        raise TransientError(f"empty power state in {response!r}")
    state = _POWER_STATE_CODES.get(value[0])
    if state is None:
        raise TelemetryProtocolError(f"unknown power state code {value!r} from {POWER_STATE_COMMAND}")
    return state


class TelemetryClient:
    """Read-through accessors for battery level and power state.

    Malformed or missing responses are retried forever with a fixed delay;
    these calls only ever return a valid reading or raise a fatal error.
    """

    def __init__(
        self,
        control: ControlToolInterface,
        clock: ClockInterface,
        battery_retry: Optional[RetryPolicy] = None,
        power_state_retry: Optional[RetryPolicy] = None,
    ):
        self._control = control
        self._clock = clock
        self._battery_retry = battery_retry or RetryPolicy(delay=BATTERY_RETRY_DELAY_S)
        self._power_state_retry = power_state_retry or RetryPolicy(delay=POWER_STATE_RETRY_DELAY_S)

    def battery_percent(self) -> int:
        """Current battery charge in percent."""
        return self._battery_retry.call(
            lambda: parse_battery_percent(self._control.query(BATTERY_COMMAND)),
            self._clock,
            name=BATTERY_COMMAND,
            on_retry=self._retry_notice,
        )

    def power_state(self) -> PowerState:
        """Current DUT power state."""
        state = self._power_state_retry.call(
            lambda: parse_power_state(self._control.query(POWER_STATE_COMMAND)),
            self._clock,
            name=POWER_STATE_COMMAND,
            on_retry=self._retry_notice,
        )
        logger.debug("power state: %s", state.value)
        return state

    @staticmethod
    def _retry_notice(attempt: int, error: TransientError) -> None:
        print(f"telemetry query failed ({error}), retrying (attempt {attempt + 1})...")
