"""Ticket sales and session capacity management for Django."""

__version__ = "0.1.0"
