"""
Services layer for business logic.

Validation of contact submissions and their delivery through the mail
provider, kept separate from the API routes.
"""

from .contact_service import ContactService
from .contact_validation import validate_submission
from .email_service import EmailProvider, ResendProvider, get_email_provider

__all__ = [
    "ContactService",
    "EmailProvider",
    "ResendProvider",
    "get_email_provider",
    "validate_submission",
]
