"""Charge maintenance between test runs.

Before each test the battery must be at or above ``charge_from``. When it
is not, the DUT is switched off and fed external power until the battery
reaches ``charge_to``, then switched back on. External power is always
de-asserted when a charge check completes.

Progress is reported through a :class:`ChargeProgress` observer, so the
charge loop itself only makes control decisions.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO

from pwrtest.interfaces import ClockInterface
from pwrtest.power import PowerController
from pwrtest.telemetry import TelemetryClient

logger = logging.getLogger(__name__)

CHARGE_POLL_INTERVAL_S = 10.0


class ChargeProgress(ABC):
    """Observer for charge-loop progress."""

    @abstractmethod
    def start(self, current: int, target: int) -> None:
        pass

    @abstractmethod
    def update(self, current: int, target: int) -> None:
        pass

    @abstractmethod
    def finish(self) -> None:
        pass


class NullChargeProgress(ChargeProgress):
    def start(self, current: int, target: int) -> None:
        pass

    def update(self, current: int, target: int) -> None:
        pass

    def finish(self) -> None:
        pass


class TextChargeProgress(ChargeProgress):
    """Single-line text progress bar.

    The bar only moves forward: a reading lower than the best one seen so
    far leaves it where it is.
    """

    def __init__(self, stream: Optional[TextIO] = None, width: int = 40):
        self._stream = stream
        self._width = width
        self._origin = 0
        self._target = 0
        self._position = 0
        self._current = 0

    @property
    def position(self) -> int:
        """Percentage points charged so far, as shown by the bar."""
        return self._position

    def start(self, current: int, target: int) -> None:
        self._origin = current
        self._target = target
        self._position = 0
        self._current = current
        self._render()

    def update(self, current: int, target: int) -> None:
        self._target = target
        total = max(target - self._origin, 0)
        delta = current - self._origin
        if delta > self._position:
            self._position = min(delta, total)
            self._current = current
        self._render()

    def finish(self) -> None:
        self._position = max(self._target - self._origin, 0)
        self._current = max(self._current, self._target)
        self._render()
        self._out().write("\n")
        self._out().flush()

    def _out(self) -> TextIO:
        # Resolved lazily so pytest's capsys sees the writes
        return self._stream or sys.stdout

    def _render(self) -> None:
        total = max(self._target - self._origin, 0)
        filled = self._width if total == 0 else self._width * self._position // total
        bar = "#" * filled + "." * (self._width - filled)
        out = self._out()
        out.write(f"\r[{bar}] {self._current}% -> {self._target}%")
        out.flush()


class ChargeManager:
    """Keeps the DUT battery within the charge band between tests."""

    def __init__(
        self,
        telemetry: TelemetryClient,
        power: PowerController,
        clock: ClockInterface,
        progress: Optional[ChargeProgress] = None,
        poll_interval: float = CHARGE_POLL_INTERVAL_S,
    ):
        self._telemetry = telemetry
        self._power = power
        self._clock = clock
        self._progress = progress or NullChargeProgress()
        self._poll_interval = poll_interval

    def ensure_charged(self, charge_from: int, charge_to: int) -> bool:
        """Charge the DUT to *charge_to* if it is below *charge_from*.

        Args:
            charge_from: Lower bound; no charging happens at or above it.
            charge_to: Level to charge to once charging starts.

        Returns:
            True if a charge cycle ran, False if the battery was already
            high enough.
        """
        percent = self._telemetry.battery_percent()
        if percent >= charge_from:
            logger.debug("battery at %d%%, no charge needed (threshold %d%%)", percent, charge_from)
            self._power.set_external_power(False)
            return False

        self._power.set_external_power(True)
        self._power.power_off()

        print(f"below {charge_from}%! charging from {percent} to {charge_to}...")
        self._progress.start(percent, charge_to)
        while percent < charge_to:
            self._clock.sleep(self._poll_interval)
            percent = self._telemetry.battery_percent()
            self._progress.update(percent, charge_to)
        self._progress.finish()
        logger.info("battery charged to %d%%", percent)

        self._power.power_on()
        self._power.set_external_power(False)
        return True
