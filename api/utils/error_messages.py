"""
Error Message Utilities
Converts technical validation errors to user-friendly messages
"""

from pydantic import ValidationError

# Messages raised by the request schema validators, in priority order
KNOWN_MESSAGES = (
    "Video URL is required",
    "Invalid YouTube URL",
    "Comments are required",
    "Missing required fields",
)


def get_friendly_error_message(validation_error: ValidationError) -> str:
    """Convert a pydantic validation error to a user-friendly message"""
    error_str = str(validation_error)

    for message in KNOWN_MESSAGES:
        if message in error_str:
            return message

    for error in validation_error.errors():
        location = error.get("loc") or ()
        field = location[0] if location else None
        if error.get("type") == "missing":
            if field == "videoUrl":
                return "Video URL is required"
            if field == "comments":
                return "Comments are required"
            if field == "videoInfo":
                return "Video info is required"
            return "Missing required fields"
        if field == "comments":
            return "Comments must include text, author and like counts"
        if field == "videoInfo":
            return "Video info must include title and url"

    # Fallback for unknown errors
    return "Invalid request format"
