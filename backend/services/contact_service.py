"""Contact form service for relaying submissions to the operator's inbox."""

from loguru import logger

from models.config import Settings
from models.exceptions import EmailDeliveryException
from models.schemas import ContactSubmission, OutgoingEmail
from services.email_service import EmailProvider

SUBJECT_PREFIX = "New contact message: "


class ContactService:
    """Service for handling contact form submissions."""

    def __init__(self, settings: Settings, provider: EmailProvider) -> None:
        self.email_from = settings.EMAIL_FROM
        self.email_to = settings.EMAIL_TO
        self.provider = provider

    def build_email(self, submission: ContactSubmission) -> OutgoingEmail:
        """Build the notification email for a submission.

        User input is interpolated verbatim; the body is not HTML-escaped.
        """
        html_body = f"""<p><strong>Name:</strong> {submission.name}</p>
<p><strong>Email:</strong> {submission.email}</p>
<p><strong>Phone:</strong> {submission.phone}</p>
<p><strong>Subject:</strong> {submission.subject}</p>
<p><strong>Message:</strong></p>
<p>{submission.message}</p>"""

        return OutgoingEmail(
            from_address=self.email_from,
            to=self.email_to,
            subject=f"{SUBJECT_PREFIX}{submission.subject}",
            html=html_body,
        )

    async def submit(self, submission: ContactSubmission) -> None:
        """Process a contact form submission.

        Sends a single notification email; there is no retry or outbox.

        Args:
            submission: The validated contact form data

        Raises:
            EmailDeliveryException: If the provider did not accept the email
        """
        email = self.build_email(submission)

        if not await self.provider.send(email):
            logger.error(f"Failed to relay contact form to {self.email_to}")
            raise EmailDeliveryException()

        logger.info(
            f"Contact form relayed: from={submission.name!r} "
            f"subject={submission.subject!r}"
        )
