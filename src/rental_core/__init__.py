"""Booking lifecycle core for the gear rental marketplace."""

__version__ = "0.1.0"
