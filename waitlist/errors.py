"""Error taxonomy for the signup flow.

Every error carries the HTTP status it maps to and the message that is safe
to show the caller. Store errors keep their cause chained for logging but
always present the same generic message.
"""

from typing import Optional


class WaitlistError(Exception):
    """Base class for errors surfaced as a JSON failure response."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)

    def to_body(self) -> dict:
        """Render the response body for this error."""
        return {"success": False, "message": self.message}


# ==================== Validation (400) ====================


class ValidationError(WaitlistError):
    """The submitted email was rejected."""

    status_code = 400
    public_message = "Invalid email format"


class EmptyOrWrongTypeError(ValidationError):
    """Email is missing, not a string, or blank."""

    public_message = "Email is required and must be a non-empty string"


class BadFormatError(ValidationError):
    """Email does not look like local@domain.tld."""

    public_message = "Invalid email format"


# ==================== Method (405) ====================


class MethodNotAllowedError(WaitlistError):
    """Signup was attempted with something other than POST."""

    status_code = 405
    public_message = "Method not allowed. Use POST."


# ==================== Store (500) ====================


class StoreError(WaitlistError):
    """The waitlist store could not persist the entry.

    ``detail`` holds the internal reason for logs; ``message`` stays generic.
    """

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        return self.detail or self.message


class StoreUnavailableError(StoreError):
    """No connection to the store could be established."""


class WriteFailedError(StoreError):
    """The store was reachable but the insert failed."""
