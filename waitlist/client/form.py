"""
Signup form controller.

Mirrors the landing-page form: validate locally, disable the button while the
request is in flight, then either lock the form in its thank-you state or
re-enable it so the user can try again.
"""

import logging
from enum import Enum
from typing import Callable, Optional

import httpx

from waitlist.validation import is_valid_email

logger = logging.getLogger(__name__)

INVALID_EMAIL_ALERT = "Please enter a valid email address."
SUBMITTING_TEXT = "Submitting..."
JOINED_TEXT = "Thanks for joining!"
DEFAULT_BUTTON_TEXT = "Join Waitlist"
DEFAULT_ERROR = "Something went wrong"


class FormStatus(str, Enum):
    """Where the form is in its submit cycle."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    JOINED = "joined"
    ERROR = "error"


class FormResponseError(Exception):
    """The server answered with something that is not a JSON result."""

    pass


class WaitlistForm:
    """State of the email input and submit button around one endpoint."""

    def __init__(
        self,
        endpoint: str,
        client: Optional[httpx.AsyncClient] = None,
        alert: Optional[Callable[[str], None]] = None,
        button_text: str = DEFAULT_BUTTON_TEXT,
    ):
        self.endpoint = endpoint
        self.client = client
        self.alert = alert or (lambda message: logger.warning(message))

        self.email_enabled = True
        self.button_enabled = True
        self.button_text = button_text
        self.status = FormStatus.IDLE
        self.last_message: Optional[str] = None

    def _notify(self, message: str) -> None:
        self.last_message = message
        self.alert(message)

    def _reset_button(self, original_text: str) -> None:
        self.button_text = original_text
        self.button_enabled = True

    def _fail(self, error: Exception, original_text: str) -> FormStatus:
        self._notify(f"Error: {error}")
        self._reset_button(original_text)
        self.status = FormStatus.ERROR
        return self.status

    async def submit(self, email: str) -> FormStatus:
        """
        Submit an email and update the form state from the response.

        Args:
            email: Contents of the email input

        Returns:
            Form status after the submission settles
        """
        if self.status is FormStatus.JOINED or not self.button_enabled:
            return self.status

        if not is_valid_email(email):
            self._notify(INVALID_EMAIL_ALERT)
            return self.status

        original_text = self.button_text
        self.button_enabled = False
        self.button_text = SUBMITTING_TEXT
        self.status = FormStatus.SUBMITTING

        try:
            data = await self._post(email)
        except (httpx.HTTPError, FormResponseError) as e:
            logger.error(f"Signup request failed: {e}")
            return self._fail(e, original_text)
        except Exception as e:
            logger.exception(f"Unexpected error submitting signup: {e}")
            return self._fail(e, original_text)

        if data.get("success"):
            self.button_text = JOINED_TEXT
            self.button_enabled = False
            self.email_enabled = False
            self.last_message = data.get("message")
            self.status = FormStatus.JOINED
        else:
            self._notify(f"Error: {data.get('message') or DEFAULT_ERROR}")
            self._reset_button(original_text)
            self.status = FormStatus.ERROR

        return self.status

    async def _post(self, email: str) -> dict:
        """POST the email and return the decoded JSON result."""
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=30.0)

        response = await self.client.post(
            self.endpoint,
            json={"email": email},
            headers={"Accept": "application/json"},
        )

        try:
            data = response.json()
        except ValueError:
            if response.is_success:
                raise FormResponseError("Response was not valid JSON")
            raise FormResponseError(f"HTTP {response.status_code}: {response.text}")

        if not isinstance(data, dict):
            raise FormResponseError("Response was not a JSON object")
        return data

    async def close(self) -> None:
        """Close the HTTP client."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
