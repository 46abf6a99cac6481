"""Mini README: Background reporting for the dispatch controller.

The ``battery_monitor`` module periodically writes every drone's battery
level to the log without blocking concurrent loading.
"""

from .battery_monitor import BatteryMonitor

__all__ = ["BatteryMonitor"]
