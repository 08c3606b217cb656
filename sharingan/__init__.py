"""Sharingan - live scores, past results and team schedules from ESPN."""

__version__ = "1.0.0"
