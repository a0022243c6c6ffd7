"""
Client for text-generation providers.

This client turns the report prompt into a provider request, posts it to
the configured URL with a bearer token and extracts the generated text.
The request and response shapes come from the provider's
:class:`~vc_daily_report.llm.providers.ProviderSpec`. There are no
retries and no fallback provider: any failure is raised as
:class:`GenerationRequestError`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from vc_daily_report.config.loader import ProviderConfig
from vc_daily_report.llm.providers import LLMError, Message, ProviderSpec, get_provider


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


SYSTEM_PROMPT = "你是一个专业的技术日报助手,擅长将代码提交记录转化为简洁的工作日报。"


class GenerationRequestError(LLMError):
    """Raised when the provider call fails.

    ``payload`` holds the provider's error body (parsed JSON when
    possible, raw text otherwise) and ``status_code`` the HTTP status,
    when a response was received.
    """

    def __init__(
        self,
        message: str,
        payload: Any = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


def build_messages(prompt: str) -> List[Message]:
    """Return the two-message conversation sent to every provider."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


class GenerationClient:
    """Generate report text with the provider selected by ``config``.

    Parameters
    ----------
    config : ProviderConfig
        Provider id, credentials, endpoint and optional model override.

    Raises
    ------
    UnsupportedProviderError
        If ``config.provider`` is not registered.
    """

    def __init__(self, config: ProviderConfig) -> None:
        self.config = config
        self.spec: ProviderSpec = get_provider(config.provider)

    @property
    def model(self) -> str:
        return self.config.model or self.spec.default_model

    def build_request(self, prompt: str) -> Dict[str, Any]:
        return self.spec.build_request(build_messages(prompt), self.model)

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` to the provider and return the generated text.

        Raises
        ------
        GenerationRequestError
            On transport errors, non-2xx responses, invalid JSON or a
            response body without the expected content field.
        """
        body = self.build_request(prompt)
        logger.info("Generating report with %s (%s)", self.config.provider, self.model)
        logger.debug("Sending request to %s with payload: %s", self.config.api_url, body)
        try:
            response = requests.post(
                self.config.api_url,
                json=body,
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("Failed to connect to %s: %s", self.config.provider, exc)
            raise GenerationRequestError(str(exc)) from exc

        if not 200 <= response.status_code < 300:
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            logger.error(
                "Provider returned status %s: %s", response.status_code, payload
            )
            raise GenerationRequestError(
                f"Provider returned status {response.status_code}",
                payload=payload,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except (ValueError, json.JSONDecodeError) as exc:
            logger.error("Failed to parse provider response: %s", exc)
            raise GenerationRequestError(
                "Failed to parse provider response",
                payload=response.text,
                status_code=response.status_code,
            ) from exc

        try:
            content = self.spec.extract_content(data)
        except (KeyError, IndexError, TypeError) as exc:
            logger.error("Unexpected response structure from %s: %s", self.config.provider, data)
            raise GenerationRequestError(
                "Unexpected response structure",
                payload=data,
                status_code=response.status_code,
            ) from exc
        if not isinstance(content, str):
            raise GenerationRequestError(
                "Unexpected response structure",
                payload=data,
                status_code=response.status_code,
            )
        return content.strip()

