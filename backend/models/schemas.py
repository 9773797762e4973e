from pydantic import BaseModel, ConfigDict, Field


# Contact Schemas
class ContactSubmission(BaseModel):
    """A contact form submission that passed validation.

    Values are kept exactly as submitted; nothing is trimmed or normalized.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
    subject: str
    message: str


class MessageResponse(BaseModel):
    """Body of every response from the contact endpoint."""

    message: str


# Email Schemas
class OutgoingEmail(BaseModel):
    """Email handed to the mail provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str = Field(alias="from")
    to: str
    subject: str
    html: str
