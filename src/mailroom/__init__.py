"""Mailroom: internal messaging model on top of SQLAlchemy."""

__version__ = "0.1.0"
