"""Client side of the signup form."""

from waitlist.client.form import FormStatus, WaitlistForm

__all__ = ["FormStatus", "WaitlistForm"]
