"""
Text-generation provider capability sets.

Every provider is described by a :class:`ProviderSpec`: its default
model, a function building the request body from the provider-agnostic
message list, and a function extracting the generated text from the
response body. Two wire shapes are implemented:

* the OpenAI chat-completions shape, used by OpenAI and the compatible
  Zhipu and DeepSeek endpoints;
* the DashScope envelope used by Qianwen, which nests the messages under
  ``input`` and returns the text at ``output.text``.

Adding a provider means calling :func:`register_provider`; callers look
providers up by id with :func:`get_provider`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List


Message = Dict[str, str]


class LLMError(Exception):
    """Raised when text generation fails."""

    pass


class UnsupportedProviderError(LLMError):
    """Raised when the configured provider id is not registered."""

    def __init__(self, provider: str) -> None:
        super().__init__(
            f"Unsupported AI_PROVIDER: {provider!r} "
            f"(supported: {', '.join(sorted(PROVIDERS))})"
        )
        self.provider = provider


@dataclass(frozen=True)
class ProviderSpec:
    """Capability set of a text-generation backend."""

    default_model: str
    build_request: Callable[[List[Message], str], Dict[str, Any]]
    extract_content: Callable[[Dict[str, Any]], str]


def build_openai_request(messages: List[Message], model: str) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": messages,
        "temperature": 0.7,
        "max_tokens": 500,
    }


def extract_openai_content(data: Dict[str, Any]) -> str:
    return data["choices"][0]["message"]["content"]


def build_envelope_request(messages: List[Message], model: str) -> Dict[str, Any]:
    return {
        "model": model,
        "input": {"messages": messages},
    }


def extract_envelope_content(data: Dict[str, Any]) -> str:
    return data["output"]["text"]


def openai_compatible(default_model: str) -> ProviderSpec:
    return ProviderSpec(default_model, build_openai_request, extract_openai_content)


def vendor_envelope(default_model: str) -> ProviderSpec:
    return ProviderSpec(default_model, build_envelope_request, extract_envelope_content)


PROVIDERS: Dict[str, ProviderSpec] = {
    "openai": openai_compatible("gpt-3.5-turbo"),
    "zhipu": openai_compatible("glm-4"),
    "deepseek": openai_compatible("deepseek-chat"),
    "qianwen": vendor_envelope("qwen-turbo"),
    # Generic ids for endpoints that only share a wire shape.
    "openai-compatible": openai_compatible("gpt-3.5-turbo"),
    "vendor-envelope": vendor_envelope("qwen-turbo"),
}


def register_provider(name: str, spec: ProviderSpec) -> None:
    """Register (or replace) the capability set for provider ``name``."""
    PROVIDERS[name.lower()] = spec


def get_provider(name: str) -> ProviderSpec:
    """Return the capability set for ``name`` or raise :class:`UnsupportedProviderError`."""
    try:
        return PROVIDERS[(name or "").lower()]
    except KeyError:
        raise UnsupportedProviderError(name) from None
