"""Core configuration for the Mailroom package."""
