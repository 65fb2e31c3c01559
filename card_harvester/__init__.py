"""Harvest the card catalog of an interactive calculator into a CSV table."""

__version__ = "1.0.0"
