#!/usr/bin/env python3
"""
Power Control Module for pwrtest.

Provides:
- Power button press/release through the control tool
- State-gated power on/off of the DUT
- External (servo v4) power role switching
"""

import logging
from typing import Optional

from .interfaces import ClockInterface, ControlToolInterface, PowerState
from .telemetry import TelemetryClient

logger = logging.getLogger(__name__)

PWR_BUTTON_PRESS = "pwr_button:press"
PWR_BUTTON_RELEASE = "pwr_button:release"
EXTERNAL_POWER_SOURCE = "servo_v4_role:src"
EXTERNAL_POWER_SINK = "servo_v4_role:snk"

# Button hold times and post-transition settle delay (seconds)
POWER_OFF_HOLD_S = 3.0
POWER_ON_HOLD_S = 1.0
SETTLE_S = 10.0


class PowerController:
    """
    Drives the DUT power button and the external power supply.

    Control commands are fire-and-forget launches; only their ordering
    and the sleeps between them are guaranteed.
    """

    def __init__(
        self,
        control: ControlToolInterface,
        telemetry: TelemetryClient,
        clock: ClockInterface,
    ):
        self._control = control
        self._telemetry = telemetry
        self._clock = clock

    def press_power_button(self, hold: Optional[float] = None) -> None:
        """Press the power button; if *hold* is given, release it after *hold* seconds."""
        self._control.send(PWR_BUTTON_PRESS)
        if hold is not None:
            self._clock.sleep(hold)
            self._control.send(PWR_BUTTON_RELEASE)

    def power_off(self) -> bool:
        """Turn the DUT off if it is on. Returns True if a button press was issued."""
        if self._telemetry.power_state() is PowerState.OFF:
            logger.debug("DUT already off")
            return False
        logger.info("Powering DUT off")
        self.press_power_button(hold=POWER_OFF_HOLD_S)
        self._clock.sleep(SETTLE_S)
        return True

    def power_on(self) -> bool:
        """Turn the DUT on if it is off. Returns True if a button press was issued."""
        if self._telemetry.power_state() is PowerState.ON:
            logger.debug("DUT already on")
            return False
        logger.info("Powering DUT on")
        self.press_power_button(hold=POWER_ON_HOLD_S)
        self._clock.sleep(SETTLE_S)
        return True

    def set_external_power(self, enabled: bool) -> None:
        """Switch the servo to source (charge the DUT) or sink (no external power)."""
        self._control.send(EXTERNAL_POWER_SOURCE if enabled else EXTERNAL_POWER_SINK)
