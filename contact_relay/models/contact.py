from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from contact_relay.core.errors import SubmissionValidationError

REQUIRED_FIELDS = ("name", "email", "service", "message")


class ContactSubmission(BaseModel):
    """Contact form submission. Every field must be a non-empty string."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., min_length=1)
    email: StrictStr = Field(..., min_length=1)  # presence only, no syntax check
    service: StrictStr = Field(..., min_length=1)
    message: StrictStr = Field(..., min_length=1)


def parse_submission(data: Any) -> ContactSubmission:
    """
    Validate untrusted parsed JSON and build a ContactSubmission.

    Args:
        data: Decoded request body, expected to be a JSON object

    Returns:
        ContactSubmission: The validated submission

    Raises:
        SubmissionValidationError: If the body is not an object or any required
            field is absent, null, empty or not a string
    """
    if not isinstance(data, Mapping):
        raise SubmissionValidationError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return ContactSubmission.model_validate({field: data.get(field) for field in REQUIRED_FIELDS})
    except ValidationError as e:
        invalid = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise SubmissionValidationError(f"invalid fields: {', '.join(invalid)}") from e
