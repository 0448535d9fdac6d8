"""Port definition for OTP delivery."""

from typing import Protocol


class OtpNotifier(Protocol):
    def send(self, recipient: str, code: str) -> bool:
        """Deliver ``code`` to ``recipient``. Return False on failure."""
        ...
