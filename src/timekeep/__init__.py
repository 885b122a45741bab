"""Timekeep: access-control and entry rules for the time-tracking app."""

__version__ = "0.1.0"
