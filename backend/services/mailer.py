"""
Outbound account e-mail.

Delivery is handled outside this service; LoggingMailer records that a code
was issued so operators can trace it. Codes themselves are never logged.
"""
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send_password_reset(self, email: str, code: str, ttl_minutes: int) -> None: ...

    async def send_delete_token(self, email: str, code: str, ttl_minutes: int) -> None: ...


class LoggingMailer:
    """Default mailer. Records the event only; the code is dropped."""

    async def send_password_reset(self, email: str, code: str, ttl_minutes: int) -> None:
        logger.info(f"  ✉️ Password reset code issued for {email} (valid {ttl_minutes} min)")

    async def send_delete_token(self, email: str, code: str, ttl_minutes: int) -> None:
        logger.info(f"  ✉️ Account deletion code issued for {email} (valid {ttl_minutes} min)")
