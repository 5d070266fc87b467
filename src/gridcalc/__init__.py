"""gridcalc -- spreadsheet formula evaluation and grid editing."""

__version__ = "0.1.0"
