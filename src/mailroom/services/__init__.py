"""Business logic services for the Mailroom package."""

from .messages import MessageService
from .recipients import RecipientService

__all__ = ["MessageService", "RecipientService"]
