"""
Client for DingTalk group robot webhooks.

Messages are posted as ``markdown`` messages. When the robot is
configured with a signing secret, the webhook URL is extended with a
millisecond ``timestamp`` and a ``sign`` parameter, the base64 encoded
HMAC-SHA256 of ``"{timestamp}\\n{secret}"`` keyed with the secret.

DingTalk reports application errors in the response body (``errcode``
other than 0). Those are logged and returned in the
:class:`DeliveryResult`; only transport failures raise
:class:`DeliveryError`.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class DeliveryError(Exception):
    """Raised when the webhook request itself fails."""

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome reported by the DingTalk endpoint."""

    ok: bool
    errcode: Optional[int]
    errmsg: str
    payload: Any = None


def generate_signature(timestamp: int, secret: str) -> str:
    """Return the base64 HMAC-SHA256 signature DingTalk expects."""
    string_to_sign = f"{timestamp}\n{secret}"
    digest = hmac.new(
        secret.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        digestmod=hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def sign_webhook_url(webhook: str, secret: str, timestamp: Optional[int] = None) -> str:
    """Append ``timestamp`` and ``sign`` query parameters to ``webhook``."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    sign = generate_signature(timestamp, secret)
    separator = "&" if "?" in webhook else "?"
    return f"{webhook}{separator}timestamp={timestamp}&sign={quote(sign, safe='')}"


def build_markdown_message(title: str, text: str) -> Dict[str, Any]:
    return {"msgtype": "markdown", "markdown": {"title": title, "text": text}}


@dataclass
class DingTalkClient:
    """Client posting messages to one DingTalk robot webhook.

    Parameters
    ----------
    webhook : str
        Robot webhook URL including its ``access_token``.
    secret : str, optional
        Signing secret; when set every request is signed.
    request_timeout : float, optional
        Timeout in seconds for HTTP requests. Defaults to 30 seconds.
    """

    webhook: str
    secret: Optional[str] = None
    request_timeout: float = 30.0

    def _url(self) -> str:
        if self.secret:
            return sign_webhook_url(self.webhook, self.secret)
        return self.webhook

    def send_markdown(self, title: str, text: str) -> DeliveryResult:
        """Post a markdown message and report DingTalk's verdict.

        Raises
        ------
        DeliveryError
            If the request cannot be completed or the body is not JSON.
        """
        message = build_markdown_message(title, text)
        logger.debug("Posting markdown message to DingTalk: %s", message)
        try:
            response = requests.post(self._url(), json=message, timeout=self.request_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to send DingTalk message: %s", exc)
            raise DeliveryError(str(exc)) from exc
        try:
            data = response.json()
        except ValueError as exc:
            logger.error(
                "DingTalk returned a non-JSON response (status %s): %s",
                response.status_code,
                response.text,
            )
            raise DeliveryError(
                f"DingTalk returned status {response.status_code}", payload=response.text
            ) from exc

        errcode = data.get("errcode") if isinstance(data, dict) else None
        errmsg = str(data.get("errmsg", "")) if isinstance(data, dict) else ""
        if errcode == 0:
            logger.info("Report sent to DingTalk")
            return DeliveryResult(True, errcode, errmsg, data)
        logger.error("DingTalk returned an error: %s", data)
        return DeliveryResult(False, errcode, errmsg, data)
