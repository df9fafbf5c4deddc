"""Diagnostics package.

- pretty_month, criteria_table: text output, core dependencies only
- visibility_map, deltat_plot, validate_events: need the `diagnostics` extra
"""

__all__ = ["pretty_month", "criteria_table", "visibility_map", "validate_events", "deltat_plot"]
