"""Output sinks for exporting debt data."""

from debt_manager.sinks.console import ConsoleSink
from debt_manager.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
