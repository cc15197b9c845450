"""Signup handler shared by every host.

The HTTP server and the serverless entry point both translate their native
request into a ``SignupRequest`` and send back whatever ``SignupResponse``
comes out of ``SignupHandler.handle``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from waitlist.errors import MethodNotAllowedError, StoreError, ValidationError
from waitlist.schemas import WaitlistEntry, utcnow
from waitlist.store import WaitlistStore, get_store
from waitlist.validation import mask_email, validate_email

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Email added to waitlist"


@dataclass
class SignupRequest:
    """A signup submission as delivered by the host."""

    method: str
    body: Any = None

    @property
    def email(self) -> Any:
        if isinstance(self.body, dict):
            return self.body.get("email")
        return None


@dataclass
class SignupResponse:
    """Status code and JSON body to send back."""

    status_code: int
    body: dict = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


class SignupHandler:
    """Validate a submission and write it to the waitlist store."""

    def __init__(
        self,
        store: WaitlistStore,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.now = now

    def handle(self, request: SignupRequest) -> SignupResponse:
        """
        Process one signup submission.

        Args:
            request: Method and decoded JSON body

        Returns:
            200 on insert, 400 on bad input, 405 on wrong method,
            500 when the store fails
        """
        if request.method.upper() != "POST":
            error = MethodNotAllowedError()
            logger.info(
                "Rejected %s request",
                request.method,
                extra={"event": "signup.method_not_allowed", "method": request.method},
            )
            return SignupResponse(error.status_code, error.to_body())

        try:
            email = validate_email(request.email)
        except ValidationError as e:
            logger.info(
                "Validation failed: %s",
                e.message,
                extra={"event": "signup.rejected", "status_code": e.status_code},
            )
            return SignupResponse(e.status_code, e.to_body())

        entry = WaitlistEntry(email=email, joined_at=self.now())
        try:
            inserted_id = self.store.insert(entry)
        except StoreError as e:
            logger.error(
                "Failed to add %s to waitlist: %s",
                mask_email(email),
                e,
                exc_info=True,
                extra={"event": "signup.failed", "error": type(e).__name__},
            )
            return SignupResponse(e.status_code, e.to_body())
        except Exception as e:
            logger.exception(
                "Unexpected store error for %s",
                mask_email(email),
                extra={"event": "signup.failed", "error": type(e).__name__},
            )
            error = StoreError(str(e))
            return SignupResponse(error.status_code, error.to_body())

        logger.info(
            "Email %s inserted successfully: %s",
            mask_email(email),
            inserted_id,
            extra={"event": "signup.stored", "inserted_id": inserted_id},
        )
        return SignupResponse(
            200,
            {"success": True, "message": SUCCESS_MESSAGE, "insertedId": inserted_id},
        )


def build_handler(store: Optional[WaitlistStore] = None) -> SignupHandler:
    """Handler over the given store, or the process-wide one."""
    if store is None:
        store = get_store()
    return SignupHandler(store)
