"""SMTP implementation of OtpNotifier.

Sends the verification code as a multipart (plain text + HTML) message.
Delivery is best-effort: failures are logged and reported as False, never
raised to the caller.
"""

import logging
import smtplib
from email.message import EmailMessage

from utils.config import AppConfig

logger = logging.getLogger(__name__)

SUBJECT = "Your OTP for Notes App"

_TEXT_BODY = """Notes App - Verification Code

Your OTP code is: {code}

This code will expire in {minutes} minutes.
If you didn't request this code, please ignore this email.
"""

_HTML_BODY = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #3B82F6;">Notes App - Verification Code</h2>
  <p>Your OTP code is:</p>
  <div style="background: #f3f4f6; padding: 20px; text-align: center; border-radius: 8px; margin: 20px 0;">
    <h1 style="color: #1E40AF; font-size: 32px; margin: 0; letter-spacing: 4px;">{code}</h1>
  </div>
  <p>This code will expire in {minutes} minutes.</p>
  <p style="color: #6B7280; font-size: 14px;">If you didn't request this code, please ignore this email.</p>
</div>
"""


class SmtpOtpNotifier:
    def __init__(self, config: AppConfig):
        self.host = config.smtp_host
        self.port = config.smtp_port
        self.use_ssl = config.smtp_use_ssl
        self.username = config.smtp_username
        self._password = config.smtp_password
        self.sender = config.email_from
        self.ttl_minutes = int(config.otp_ttl.total_seconds() // 60)

    def build_message(self, recipient: str, code: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = SUBJECT
        message["From"] = self.sender
        message["To"] = recipient
        message.set_content(_TEXT_BODY.format(code=code, minutes=self.ttl_minutes))
        message.add_alternative(_HTML_BODY.format(code=code, minutes=self.ttl_minutes), subtype="html")
        return message

    def _connect(self) -> smtplib.SMTP:
        """SSL (commonly port 465) or plain + STARTTLS (commonly 587)."""
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=30)
        server = smtplib.SMTP(self.host, self.port, timeout=30)
        server.starttls()
        return server

    def send(self, recipient: str, code: str) -> bool:
        if not self.username or not self._password:
            logger.warning("SMTP credentials not configured, OTP email not sent", extra={"email": recipient})
            return False

        message = self.build_message(recipient, code)
        try:
            with self._connect() as server:
                server.login(self.username, self._password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email send error", extra={"email": recipient, "error": str(e)})
            return False

        logger.info("OTP email sent", extra={"email": recipient})
        return True
