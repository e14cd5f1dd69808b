"""Topic expansion and concept details over a chat-completions API."""

import abc
import asyncio
import json
import logging
import re

import requests

from ontomap.config import AIConfig
from ontomap.errors import AIServiceError, ConfigurationError

logger = logging.getLogger(__name__)

DETAIL_UNAVAILABLE = "Details unavailable."
DETAIL_NO_KEY = "API key required for insights."

EXPAND_SYSTEM = "You are a helpful assistant that expands concepts. Output JSON only."
EXPAND_PROMPT = (
    'Given the concept "{label}", generate 3 to 5 direct sub-topics or related concepts '
    "to expand on it. Return JSON content only. The response must be a JSON object with "
    'a single key "steps" containing an array of strings.'
)

BRIDGE_SYSTEM = "You are a helpful assistant that generates logical concept bridges. Output JSON only."
BRIDGE_PROMPT = (
    'Given the starting concept "{start}" and the ending concept "{end}", generate 3 to 5 '
    "logical intermediate sub-topics or steps required to bridge the gap conceptually. "
    'Return JSON content only. The response must be a JSON object with a single key "steps" '
    'containing an array of strings. Example: {{"steps": ["Step 1", "Step 2"]}}'
)

DETAIL_SYSTEM = "You are a concise academic encyclopedia. Output plain text only."
DETAIL_PROMPT = (
    'Provide a concise, 1-2 sentence academic definition or context for the concept: '
    '"{label}". Return plain text only.'
)

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


def parse_steps(content: str) -> list[str]:
    """Read the "steps" list out of a model reply, tolerating markdown fences.

    A reply without a "steps" list yields []; a reply that is not JSON raises.
    """
    cleaned = _FENCE_RE.sub("", content).strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse AI response: %r", content)
        raise AIServiceError("Failed to parse AI response") from e
    if not isinstance(data, dict) or not isinstance(data.get("steps"), list):
        return []
    return [str(step) for step in data["steps"]]


class AIClient(abc.ABC):
    """Collaborator contract used by the interaction controller."""

    @abc.abstractmethod
    async def expand(self, label: str) -> list[str]:
        """Sub-topics for a concept, in display order. May be empty."""
        ...

    @abc.abstractmethod
    async def describe(self, label: str) -> str:
        """Short description of a concept. Never raises; degrades to a placeholder."""
        ...

    @abc.abstractmethod
    async def bridge(self, start: str, end: str) -> list[str]:
        """Intermediate steps leading from one concept to another."""
        ...


class ChatCompletionsClient(AIClient):
    """OpenAI-compatible `/chat/completions` client. Blocking calls run in a worker thread."""

    def __init__(self, config: AIConfig) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")

    def _require_key(self) -> str:
        api_key = self.config.resolved_api_key
        if not api_key:
            raise ConfigurationError(
                f"API key is missing. Set ai.api_key in config.yaml or ${self.config.api_key_env}."
            )
        return api_key

    def _chat(
        self,
        system: str,
        prompt: str,
        temperature: float,
        max_tokens: int | None = None,
    ) -> str:
        api_key = self._require_key()
        payload: dict[str, object] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
        }
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise AIServiceError(f"Request failed: {e}") from e

        if not response.ok:
            raise AIServiceError(_error_message(response))

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AIServiceError("Malformed response from AI") from e
        if not content:
            raise AIServiceError("No content received from AI")
        return content

    def expand_sync(self, label: str) -> list[str]:
        content = self._chat(
            EXPAND_SYSTEM,
            EXPAND_PROMPT.format(label=label),
            self.config.expand_temperature,
        )
        steps = parse_steps(content)
        logger.info("Expanded %r into %d topics", label, len(steps))
        return steps

    def bridge_sync(self, start: str, end: str) -> list[str]:
        content = self._chat(
            BRIDGE_SYSTEM,
            BRIDGE_PROMPT.format(start=start, end=end),
            self.config.expand_temperature,
        )
        return parse_steps(content)

    def describe_sync(self, label: str) -> str:
        try:
            return self._chat(
                DETAIL_SYSTEM,
                DETAIL_PROMPT.format(label=label),
                self.config.detail_temperature,
                max_tokens=self.config.detail_max_tokens,
            ).strip()
        except ConfigurationError:
            return DETAIL_NO_KEY
        except AIServiceError as e:
            logger.warning("AI details failed for %r: %s", label, e)
            return DETAIL_UNAVAILABLE

    async def expand(self, label: str) -> list[str]:
        return await asyncio.to_thread(self.expand_sync, label)

    async def describe(self, label: str) -> str:
        return await asyncio.to_thread(self.describe_sync, label)

    async def bridge(self, start: str, end: str) -> list[str]:
        return await asyncio.to_thread(self.bridge_sync, start, end)


def _error_message(response: requests.Response) -> str:
    """Provider error text if the body carries one, else the status code."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"API Error: {response.status_code}"


class DemoClient(AIClient):
    """Offline stand-in with canned answers and fake latency."""

    def __init__(self, latency: float = 0.8) -> None:
        self.latency = latency

    async def expand(self, label: str) -> list[str]:
        await asyncio.sleep(self.latency)
        return [
            f"{label} - Branch A",
            f"{label} - Branch B",
            f"{label} - Branch C",
            f"Why {label}?",
            f"History of {label}",
        ]

    async def describe(self, label: str) -> str:
        await asyncio.sleep(self.latency * 0.75)
        return (
            f'This is a simulated AI description for "{label}". It represents a key entity '
            "in the knowledge graph, connected to various sub-disciplines and historical contexts."
        )

    async def bridge(self, start: str, end: str) -> list[str]:
        return []


def build_ai_client(config: AIConfig) -> AIClient:
    if config.demo_mode:
        return DemoClient(latency=config.demo_latency)
    return ChatCompletionsClient(config)
