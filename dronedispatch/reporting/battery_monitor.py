"""Mini README: Periodic battery level report.

Structure:
    * BatteryMonitor - daemon thread logging a battery snapshot of the fleet
      every ``interval_seconds``.

The snapshot comes from ``FleetRegistry.battery_snapshot`` which holds one
drone lock at a time, so loading on other drones carries on while a report
is built. The monitor is best effort: a report that cannot be serialised is
logged and the loop keeps going.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Callable, Dict, List, Optional

from ..fleet import FleetRegistry
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class BatteryMonitor:
    """Log the battery level of every registered drone on a fixed interval."""

    def __init__(
        self,
        registry: FleetRegistry,
        interval_seconds: float = 60.0,
        serialiser: Optional[Callable[[List[Dict[str, Any]]], str]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.registry = registry
        self.interval_seconds = interval_seconds
        self._serialiser = serialiser or (lambda payload: json.dumps(payload, indent=2))
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="battery-monitor", daemon=True
        )
        self._thread.start()
        LOGGER.info("Battery monitor started, reporting every %.0f seconds", self.interval_seconds)

    def stop(self, timeout: float = 1.0) -> None:
        self._stop.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        self._thread = None
        LOGGER.debug("Battery monitor stopped")

    def report_once(self) -> Optional[str]:
        """Log one snapshot and return the text written, or ``None`` on failure."""

        payload = [view.dump() for view in self.registry.battery_snapshot()]
        try:
            report = self._serialiser(payload)
        except (TypeError, ValueError) as error:
            LOGGER.error("List of drones' battery levels could not be serialised: %s", error)
            return None
        LOGGER.info("Check of drones' battery levels:\n%s", report)
        return report

    def _run(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            self.report_once()
