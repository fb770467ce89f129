import json
import logging
import re

from anthropic import APIError, AsyncAnthropic

logger = logging.getLogger(__name__)

MODEL = "claude-sonnet-4-20250514"

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


def _response_text(response) -> str:
    return "".join(
        getattr(block, "text", "") for block in response.content
        if getattr(block, "type", "text") == "text"
    )


def extract_json_object(text: str) -> dict | None:
    """First JSON object in a model reply: fenced block, bare body, or embedded span."""
    fenced = _FENCE_RE.search(text)
    candidates = [fenced.group(1).strip()] if fenced else []
    candidates.append(text.strip())

    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            obj = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(obj, dict):
            return obj
    return None


class ClaudeService:
    """Thin JSON-in/JSON-out wrapper used for review summaries and room counts."""

    def __init__(self, api_key: str, model: str = MODEL):
        self._client = AsyncAnthropic(api_key=api_key)
        self._model = model

    async def analyze(
        self, system_prompt: str, user_prompt: str, max_tokens: int = 1024
    ) -> dict | None:
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=max_tokens,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except APIError:
            logger.exception("Claude API call failed")
            return None

        parsed = extract_json_object(_response_text(response))
        if parsed is None:
            logger.warning("Claude reply for %s had no JSON object", self._model)
        return parsed
