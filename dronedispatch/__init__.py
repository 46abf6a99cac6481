"""Mini README: Core package initializer for the drone dispatch controller.

The package tracks a fleet of delivery drones and the medications they carry.
``fleet`` holds the domain core, ``controller`` the transport-independent
operations, ``interface`` the HTTP API and ``reporting`` the periodic battery
report. Convenience imports below keep callers away from the module layout.
"""

from .controller import DispatchController
from .fleet import FleetRegistry
from .logging_utils import get_logger

__all__ = ["DispatchController", "FleetRegistry", "get_logger"]
