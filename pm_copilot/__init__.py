"""PM Copilot - customer-signal triangulation for product planning."""

__version__ = "0.2.0"
