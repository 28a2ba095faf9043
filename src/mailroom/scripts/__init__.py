"""Command line helpers for managing the Mailroom database."""
