"""Portfolio transaction tracking and daily return reconstruction."""

__version__ = "0.1.0"
