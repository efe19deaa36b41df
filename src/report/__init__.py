"""Result reporters."""

from report.reporters import JsonReporter, NullReporter, Reporter, TextReporter

__all__ = ["JsonReporter", "NullReporter", "Reporter", "TextReporter"]
