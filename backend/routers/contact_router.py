"""Contact form router: the relay's single public endpoint."""

import json

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter

from models.config import Settings
from models.schemas import MessageResponse
from services.contact_service import ContactService
from services.contact_validation import validate_submission

SUCCESS_MESSAGE = "Message sent successfully."


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


async def submit_contact_form(request: Request) -> JSONResponse:
    """Submit a contact form.

    Args:
        request: FastAPI request object (required for rate limiter)

    Returns:
        200 with the success message once the mail provider accepted the email

    Raises:
        MissingFieldsException: 400 when a required field is missing
        InvalidEmailFormatException: 400 when the email is malformed
        EmailDeliveryException: 500 when the provider rejects the email
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    submission = validate_submission(payload)
    logger.info(
        f"Contact form submitted: name={submission.name!r}, "
        f"subject={submission.subject!r}"
    )

    await get_contact_service(request).submit(submission)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=MessageResponse(message=SUCCESS_MESSAGE).model_dump(),
    )


def create_contact_router(limiter: Limiter, settings: Settings) -> APIRouter:
    """Mount the rate-limited POST / route."""
    router = APIRouter(tags=["contact"])
    router.add_api_route(
        "/",
        limiter.limit(settings.rate_limit)(submit_contact_form),
        methods=["POST"],
        response_model=MessageResponse,
    )
    return router
