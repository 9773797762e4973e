"""
Contact submission validation.

Turns a decoded JSON body into a ContactSubmission. Required fields are
checked before the email syntax, since the syntax check needs the field.
"""

import re
from collections.abc import Mapping
from typing import Any

from models.exceptions import InvalidEmailFormatException, MissingFieldsException
from models.schemas import ContactSubmission

REQUIRED_FIELDS = ("name", "email", "phone", "subject", "message")

# local@domain.tld, no whitespace, a single "@", a dot in the domain
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_submission(payload: Any) -> ContactSubmission:
    """
    Validate a raw contact form payload.

    Args:
        payload: Decoded request body. Anything other than a JSON object is
            treated as an object with no fields.

    Returns:
        The validated submission, values passed through verbatim.

    Raises:
        MissingFieldsException: A required field is absent, empty or not a string.
        InvalidEmailFormatException: The email address is malformed.
    """
    fields: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    for field in REQUIRED_FIELDS:
        value = fields.get(field)
        if not isinstance(value, str) or not value:
            raise MissingFieldsException()

    if not is_valid_email(fields["email"]):
        raise InvalidEmailFormatException()

    return ContactSubmission(**{field: fields[field] for field in REQUIRED_FIELDS})
