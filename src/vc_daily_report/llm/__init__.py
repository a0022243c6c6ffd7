"""
Language model integration for vc_daily_report.

This package contains the prompt builder, the registry of provider
capability sets and the :class:`GenerationClient` which sends the prompt
to the configured provider.
"""

from .providers import LLMError, ProviderSpec, UnsupportedProviderError, register_provider  # noqa: F401
from .generation_client import GenerationClient, GenerationRequestError  # noqa: F401
from .prompt_builder import build_prompt  # noqa: F401
