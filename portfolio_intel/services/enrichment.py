"""Optional LLM enrichment for saved hotels: room count and review sentiment.

The rest of the app only sees the ``EnrichmentProvider`` protocol, so the
provider can be swapped, mocked, or disabled.
"""

import logging
from typing import Protocol

from portfolio_intel.mappers.tripadvisor_mapper import parse_int
from portfolio_intel.schemas.folders import ReviewSummary, Sentiment
from portfolio_intel.services.claude import ClaudeService

logger = logging.getLogger(__name__)

MAX_REVIEWS_IN_PROMPT = 40
MAX_REVIEW_CHARS = 600

_ROOMS_SYSTEM = (
    "You are a hotel industry research assistant. "
    "Return ONLY valid JSON, no markdown fences, no explanation."
)

_ROOMS_PROMPT = (
    'How many guest rooms does the hotel "{name}"{location} have? '
    'Return a JSON object {{"rooms": <integer or null>}}. '
    "Use null if you are not reasonably sure."
)

_SUMMARY_SYSTEM = (
    "You analyze hotel guest reviews for an asset manager. "
    "Return ONLY valid JSON, no markdown fences, no explanation."
)

_SUMMARY_PROMPT = (
    "Summarize the guest sentiment in these reviews.\n\n{reviews}\n\n"
    "Return a JSON object with exactly these fields: "
    '"sentiment" ("positive", "mixed" or "negative"), '
    '"score" (integer 0-100, 100 = entirely positive), '
    '"summary" (two sentences), '
    '"positives" (up to 3 short phrases), '
    '"negatives" (up to 3 short phrases).'
)


class EnrichmentProvider(Protocol):
    async def summarize(self, reviews: list[dict]) -> ReviewSummary | None: ...

    async def lookup_room_count(self, name: str, address: str | None = None) -> int | None: ...


class DisabledEnrichment:
    async def summarize(self, reviews: list[dict]) -> ReviewSummary | None:
        return None

    async def lookup_room_count(self, name: str, address: str | None = None) -> int | None:
        return None


def format_reviews(reviews: list[dict]) -> str:
    lines = []
    for review in reviews[:MAX_REVIEWS_IN_PROMPT]:
        text = (review.get("text") or "").strip()
        if not text:
            continue
        rating = review.get("rating")
        prefix = f"[{rating}/5] " if rating is not None else ""
        lines.append(f"- {prefix}{text[:MAX_REVIEW_CHARS]}")
    return "\n".join(lines)


def _phrases(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if str(v).strip()][:3]


def parse_summary(data: dict) -> ReviewSummary | None:
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        return None

    sentiment = str(data.get("sentiment", "")).lower()
    if sentiment not in Sentiment.__members__:
        sentiment = Sentiment.mixed

    score = parse_int(data.get("score"))
    if score is not None:
        score = max(0, min(100, score))

    return ReviewSummary(
        sentiment=sentiment,
        score=score,
        summary=summary.strip(),
        positives=_phrases(data.get("positives")),
        negatives=_phrases(data.get("negatives")),
    )


class ClaudeEnrichment:
    def __init__(self, claude: ClaudeService):
        self._claude = claude

    async def summarize(self, reviews: list[dict]) -> ReviewSummary | None:
        formatted = format_reviews(reviews)
        if not formatted:
            return None

        data = await self._claude.analyze(
            _SUMMARY_SYSTEM, _SUMMARY_PROMPT.format(reviews=formatted)
        )
        if not data:
            return None
        return parse_summary(data)

    async def lookup_room_count(self, name: str, address: str | None = None) -> int | None:
        location = f" at {address}" if address else ""
        data = await self._claude.analyze(
            _ROOMS_SYSTEM, _ROOMS_PROMPT.format(name=name, location=location), max_tokens=256
        )
        if not data:
            return None

        rooms = parse_int(data.get("rooms"))
        if rooms is None or rooms <= 0:
            logger.info("No room count found for %s", name)
            return None
        logger.info("Room count for %s: %d", name, rooms)
        return rooms
