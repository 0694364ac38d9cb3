"""Roster management and random team generation."""

__version__ = "0.1.0"
