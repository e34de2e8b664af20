"""Azure OpenAI chat-completions client."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional

from ..core.exceptions import UpstreamUnavailableError
from ..utils.logger import get_logger
from .transport import TransportConfig, post_json

LOGGER = get_logger(__name__)

API_VERSION = "2025-01-01-preview"


class AzureOpenAIClient:
    """Chat completions against an Azure OpenAI deployment.

    Endpoint, key and deployment come from ``AOAI_ENDPOINT``,
    ``AOAI_API_KEY`` and ``AOAI_DEPLOYMENT``.
    """

    def __init__(
        self,
        endpoint_env: str = "AOAI_ENDPOINT",
        api_key_env: str = "AOAI_API_KEY",
        deployment_env: str = "AOAI_DEPLOYMENT",
        transport: Optional[TransportConfig] = None,
    ) -> None:
        values = {}
        for env_name in (endpoint_env, api_key_env, deployment_env):
            value = os.environ.get(env_name)
            if not value:
                raise RuntimeError(f"{env_name} not set")
            values[env_name] = value
        self.endpoint = values[endpoint_env].rstrip("/")
        self.deployment = values[deployment_env]
        self._api_key = values[api_key_env]
        self.transport = transport or TransportConfig()

    def generate_text(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        url = f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions"
        data = post_json(
            url,
            {"messages": messages, "temperature": temperature, "top_p": 0.95},
            headers={"api-key": self._api_key},
            params={"api-version": API_VERSION},
            config=self.transport,
        )
        text = self._extract_text(data)
        if not text:
            LOGGER.warning("Azure OpenAI response missing choices: %s", data)
            raise UpstreamUnavailableError("Azure OpenAI response missing message content")
        return text

    @staticmethod
    def _extract_text(payload: Dict[str, Any]) -> Optional[str]:
        choices: List[Dict[str, Any]] = payload.get("choices") or []
        for choice in choices:
            content = (choice.get("message") or {}).get("content")
            if content:
                return content
        return None
