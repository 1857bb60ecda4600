"""Commute Check - Manhattan/New Jersey crossing wait times."""

__version__ = "1.0.0"
