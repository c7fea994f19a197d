"""
modules/narrative/narrative_generator.py
----------------------------------------
Narrative Generator Adapter — a short title and summary for an itinerary.

Contract: ``compose(context)`` always returns a Narrative.  One provider call
runs on a worker thread and is awaited for at most
NARRATIVE_TIMEOUT_SECONDS.  Timeout, provider exception, empty or malformed
output all produce the deterministic fallback built from ``context`` alone.
No retries.

The provider must answer with STRICT JSON:

    {"title": "<= 80 chars", "summary": "2-3 sentences"}

Markdown code fences around the JSON are tolerated.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Optional

from racetrip import config
from racetrip.llm import TextGenerator, get_text_generator
from racetrip.modules.observability.logger import EventLog

logger = logging.getLogger(__name__)
_events = EventLog("narrative")

FALLBACK_SOURCE = "fallback"
_MAX_TITLE_CHARS = 120
_MAX_SUMMARY_CHARS = 1000

_executor: ThreadPoolExecutor | None = None


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=config.NARRATIVE_MAX_WORKERS,
            thread_name_prefix="narrative",
        )
    return _executor


SYSTEM_PROMPT = """\
You are a travel editor writing for race fans visiting a Grand Prix weekend.

Write a catchy itinerary title (max 80 characters) and a 2-3 sentence summary.
Use only the facts provided. Do NOT invent places, times or prices.

Return STRICT JSON:

{
  "title": "<text>",
  "summary": "<text>"
}

Return JSON only."""


@dataclass(frozen=True)
class NarrativeContext:
    """Structured facts the narrative is written from."""
    race_name: str
    city: str
    day_count: int
    experience_titles: tuple[str, ...] = ()
    interests: tuple[str, ...] = ()
    arrival_day: str = ""
    departure_day: str = ""
    group_size: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class Narrative:
    title: str
    summary: str
    source: str = FALLBACK_SOURCE
    prompt_hash: str = field(default="", compare=False)

    @property
    def is_fallback(self) -> bool:
        return self.source == FALLBACK_SOURCE


# ── Prompt / parsing helpers ─────────────────────────────────────────────────

def build_user_prompt(ctx: NarrativeContext) -> str:
    lines = [
        f"Race: {ctx.race_name}",
        f"City: {ctx.city}",
        f"Trip: {ctx.day_count} day(s), {ctx.arrival_day} to {ctx.departure_day}",
        f"Interests: {', '.join(ctx.interests) if ctx.interests else 'anything'}",
    ]
    if ctx.group_size:
        lines.append(f"Group size: {ctx.group_size}")
    if ctx.experience_titles:
        lines.append("Planned experiences:")
        lines.extend(f"- {title}" for title in ctx.experience_titles)
    else:
        lines.append("Planned experiences: none, the plan follows the track schedule")
    if ctx.note:
        lines.append(f"Traveler note: {ctx.note}")
    return "\n".join(lines)


def prompt_hash(user_prompt: str) -> str:
    return hashlib.sha256(user_prompt.encode("utf-8")).hexdigest()


_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def parse_narrative(raw: str) -> tuple[str, str] | None:
    """Extract (title, summary) from a provider reply, or None if malformed."""
    if not raw:
        return None
    text = _FENCE_RE.sub("", raw.strip())
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    if not isinstance(data, dict):
        return None
    title, summary = data.get("title"), data.get("summary")
    if not isinstance(title, str) or not isinstance(summary, str):
        return None
    title, summary = title.strip(), summary.strip()
    if not title or not summary:
        return None
    if len(title) > _MAX_TITLE_CHARS or len(summary) > _MAX_SUMMARY_CHARS:
        return None
    return title, summary


def fallback_narrative(ctx: NarrativeContext) -> tuple[str, str]:
    """Deterministic title / summary from the structured context."""
    title = f"{ctx.city} Weekend Plan" if ctx.city else f"{ctx.race_name} Weekend Plan"
    days = f"{ctx.day_count}-day" if ctx.day_count != 1 else "One-day"
    top = list(ctx.experience_titles[:2])
    if len(top) == 2:
        summary = f"{days} {ctx.race_name} plan featuring {top[0]} and {top[1]}."
    elif top:
        summary = f"{days} {ctx.race_name} plan featuring {top[0]}."
    else:
        summary = f"{days} {ctx.race_name} plan built around the track schedule."
    return title, summary


# ── Adapter ──────────────────────────────────────────────────────────────────

class NarrativeGenerator:
    """Wraps one text-generation call with a timeout and a fallback."""

    def __init__(
        self,
        client: TextGenerator | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._client = client or get_text_generator()
        self._timeout = timeout_seconds

    def compose(self, ctx: NarrativeContext) -> Narrative:
        user_prompt = build_user_prompt(ctx)
        digest = prompt_hash(user_prompt)
        timeout = self._timeout if self._timeout is not None else config.NARRATIVE_TIMEOUT_SECONDS

        reason = ""
        try:
            future = _get_executor().submit(self._client.generate, SYSTEM_PROMPT, user_prompt)
        except RuntimeError as exc:  # executor shut down
            future, reason = None, f"executor unavailable: {exc}"

        if future is not None:
            try:
                raw = future.result(timeout=timeout)
            except FutureTimeout:
                future.cancel()
                reason = f"timed out after {timeout:.1f}s"
            except Exception as exc:  # noqa: BLE001
                reason = f"provider error: {exc.__class__.__name__}: {exc}"
            else:
                parsed = parse_narrative(raw)
                if parsed is not None:
                    title, summary = parsed
                    return Narrative(
                        title=title,
                        summary=summary,
                        source=getattr(self._client, "model_id", "llm"),
                        prompt_hash=digest,
                    )
                reason = "malformed response"

        logger.warning("Narrative generation fell back to template (%s)", reason)
        _events.emit("NARRATIVE_FALLBACK", {"race": ctx.race_name, "reason": reason})
        title, summary = fallback_narrative(ctx)
        return Narrative(title=title, summary=summary, source=FALLBACK_SOURCE, prompt_hash=digest)
