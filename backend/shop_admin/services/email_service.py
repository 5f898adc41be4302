import asyncio
import logging
from typing import Any, Dict, Optional, Tuple

import resend

logger = logging.getLogger(__name__)


class EmailService:
    """
    Transactional mail through Resend.

    Every send returns ``(ok, error)`` instead of raising so that a mail outage
    never fails the request that triggered it.
    """

    def __init__(self, api_key: Optional[str], sender: str, frontend_url: str):
        self.api_key = (api_key or "").strip()
        self.sender = sender
        self.frontend_url = frontend_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _send_sync(self, payload: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
        previous_api_key = getattr(resend, "api_key", None)
        resend.api_key = self.api_key
        try:
            resend.Emails.send(payload)
        except Exception as exc:
            return False, str(exc)
        finally:
            resend.api_key = previous_api_key
        return True, None

    async def send(self, to: str, subject: str, text: str) -> Tuple[bool, Optional[str]]:
        if not self.configured:
            logger.warning("RESEND_API_KEY is not set; email '%s' to %s was not sent", subject, to)
            return False, "Resend API key is not configured."
        payload = {"from": self.sender, "to": [to], "subject": subject, "text": text}
        ok, error = await asyncio.to_thread(self._send_sync, payload)
        if ok:
            logger.info("Email '%s' sent to %s", subject, to)
        else:
            logger.error("Failed to send email '%s' to %s: %s", subject, to, error)
        return ok, error

    async def send_password_reset_email(
        self, to: str, name: str, token: str, expire_minutes: int = 60
    ) -> Tuple[bool, Optional[str]]:
        reset_link = f"{self.frontend_url}/reset-password?token={token}"
        text = (
            f"Hello {name},\n\n"
            "We received a request to reset the password of your admin account.\n"
            f"Open the link below to choose a new password:\n\n{reset_link}\n\n"
            f"The link expires in {expire_minutes} minutes. "
            "If you did not request a reset, you can ignore this email.\n"
        )
        return await self.send(to, "Password Reset Request", text)

    async def send_otp_email(
        self, to: str, name: str, otp: str, expire_minutes: int = 10
    ) -> Tuple[bool, Optional[str]]:
        text = (
            f"Hello {name},\n\n"
            f"Your verification code is: {otp}\n\n"
            f"The code expires in {expire_minutes} minutes. Do not share it with anyone.\n"
        )
        return await self.send(to, "Your Verification Code", text)

    async def test_config(self, to: str) -> Tuple[bool, Optional[str]]:
        return await self.send(to, "Email configuration test", "Email delivery is configured correctly.\n")
