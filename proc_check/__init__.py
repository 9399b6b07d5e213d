"""Black-box process checker: run a command and compare what it did."""

__version__ = "0.1.0"
