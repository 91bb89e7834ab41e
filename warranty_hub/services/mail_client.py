# warranty_hub/services/mail_client.py
import re

import requests

from warranty_hub.utils.retry import http_retry
from warranty_hub.utils.settings import (
    MAILJET_API_URL,
    MAILJET_API_KEY,
    MAILJET_API_SECRET,
    EMAIL_FROM,
    EMAIL_FROM_NAME,
)
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

_NAMED_ADDRESS = re.compile(r"^(.*)<(.+@.+)>$")


class MailError(Exception):
    pass


def to_recipient(address: str) -> dict:
    """'Jan Kowalski <jan@x.pl>' -> {"Email": "jan@x.pl", "Name": "Jan Kowalski"}"""
    m = _NAMED_ADDRESS.match(address)
    if m:
        return {"Email": m.group(2).strip(), "Name": m.group(1).strip()}
    return {"Email": address.strip()}


class MailClient:
    """Klient Mailjet v3.1 (POST /v3.1/send, basic auth)."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        timeout: int = 10,
    ):
        self.api_url = api_url or MAILJET_API_URL
        self.api_key = api_key or MAILJET_API_KEY
        self.api_secret = api_secret or MAILJET_API_SECRET
        self.timeout = timeout

    def build_payload(self, to: str, subject: str, html: str) -> dict:
        return {
            "Messages": [
                {
                    "From": {"Email": EMAIL_FROM, "Name": EMAIL_FROM_NAME},
                    "To": [to_recipient(to)],
                    "Subject": subject or "(no subject)",
                    "HTMLPart": html,
                }
            ]
        }

    @http_retry()
    def send(self, to: str, subject: str, html: str) -> dict:
        if not self.api_key or not self.api_secret:
            raise MailError("Mailjet credentials not set (MAILJET_API_KEY / MAILJET_API_SECRET)")

        logger.info(f"MailClient POST {self.api_url} to={to}")

        resp = requests.post(
            self.api_url,
            json=self.build_payload(to, subject, html),
            auth=(self.api_key, self.api_secret),
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
