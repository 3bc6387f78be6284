"""Reasoning-service clients and JSON response extraction.

Two distinct backends are used as primary/fallback pairs:

- primary: an OpenAI-compatible chat completion endpoint (OpenAI itself,
  or OpenRouter/Groq via ``OPENAI_BASE_URL``)
- fallback: Anthropic Claude

Both return the parsed JSON object found in the model's reply.
"""

from __future__ import annotations

import json
import logging
import re

from .config import (
    ReasoningSettings,
    Settings,
    get_anthropic_api_key,
    get_openai_api_key,
    get_openai_base_url,
)

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json_object(text: str) -> dict:
    """Parse the JSON object embedded in a model reply.

    Tolerates markdown fences and prose around the object by matching the
    outermost ``{...}`` span.

    Raises:
        ValueError: If no JSON object can be parsed.
    """
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise ValueError(f"No JSON object in response: {(text or '')[:200]!r}")
    data = json.loads(match.group(0))
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


class ReasoningClient:
    """Thin wrapper over the two reasoning backends.

    Usage:
        client = ReasoningClient()
        data = client.complete_primary(system_prompt, user_prompt)
    """

    def __init__(self, config: ReasoningSettings | None = None) -> None:
        self.config = config or Settings.load().reasoning
        self._openai_client = None
        self._anthropic_client = None

    def _get_openai_client(self):
        """Lazy-initialize the OpenAI-compatible client."""
        if self._openai_client is None:
            import openai

            self._openai_client = openai.OpenAI(
                api_key=get_openai_api_key(),
                base_url=get_openai_base_url(),
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._openai_client

    def _get_anthropic_client(self):
        """Lazy-initialize the Anthropic client."""
        if self._anthropic_client is None:
            import anthropic

            self._anthropic_client = anthropic.Anthropic(
                api_key=get_anthropic_api_key(),
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._anthropic_client

    def complete_primary(self, system_prompt: str, user_prompt: str) -> dict:
        """Call the OpenAI-compatible backend in JSON mode."""
        client = self._get_openai_client()
        response = client.chat.completions.create(
            model=self.config.primary_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format={"type": "json_object"},
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        content = response.choices[0].message.content or ""
        return extract_json_object(content)

    def complete_fallback(self, system_prompt: str, user_prompt: str) -> dict:
        """Call the Anthropic backend."""
        client = self._get_anthropic_client()
        response = client.messages.create(
            model=self.config.fallback_model,
            max_tokens=self.config.max_tokens,
            system=system_prompt,
            messages=[
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.config.temperature,
        )
        content = response.content[0].text
        return extract_json_object(content)
