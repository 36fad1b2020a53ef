"""Profile service facade wrapping Gemini structured-output calls.

Provides async methods for name suggestions and full profile lookup.
The blocking genai SDK calls are wrapped in asyncio.to_thread() to avoid
blocking the event loop. No call is retried: every failure is reported
once and the user decides whether to search again.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import TypeAdapter, ValidationError

from starpulse.models import ProfileRecord

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_MODEL = "gemini-3-pro-preview"
DEFAULT_SUGGEST_MODEL = "gemini-3-flash-preview"

SYSTEM_INSTRUCTION = (
    "You are a cold, exacting global data analyst who ignores regional bias. "
    "Fame means absolute penetration across languages and cultures; regional "
    "fame is local data and does not count toward the global authority index. "
    "You grade artists with inefficient output harshly. Reply in JSON only."
)

PROFILE_PROMPT = """Run a strict data lookup and global authority index (TIER INDEX) rating for "{name}".

Rating scale, global standard:
1. 6.0 is the start of global fame: the subject must be recognised in several
   distinct cultural or language regions. Subjects whose reach is limited to one
   region may never score above 6.0, however dominant they are there.
2. 8.0 means extremely famous worldwide: most people in any major country would
   immediately recognise their work or image, backed by cross-generational global
   commercial data (world tours, global box office).
3. 9.0+ is reserved for legends who define an era (e.g. Michael Jackson,
   The Beatles, Tom Cruise).

Review rules:
- Discount every conventional success metric by 30%.
- Actors: count only lead roles; cameo numbers are zero.
- Singers: divide total plays by number of works; large volumes of weak output
  drag the score down.
- Regional acts are pressed below 6.0 without mercy.

Provide a detailed analysis and follow the JSON schema exactly."""

SUGGEST_PROMPT = (
    'Suggest {count} well-known singers or actors related to "{partial}". '
    "Return only a list of names."
)

GENERIC_FAILURE = "Search failed."
DECLINED_MESSAGE = "Subject is below the global recognition threshold."

_NAMES_ADAPTER = TypeAdapter(list[str])


class ProfileError(Exception):
    """Base class for profile lookup failures. ``str(exc)`` is user-facing."""


class ProfileTransportError(ProfileError):
    """The backend call itself failed (network, quota, SDK error)."""


class ProfileValidationError(ProfileError):
    """The backend returned a payload that is not a valid ProfileRecord."""


class ProfileDeclinedError(ProfileError):
    """The backend produced no rating for the subject."""


class ProfileService:
    """Async facade for Gemini-backed suggestions and profile lookup.

    Usage::

        svc = ProfileService(api_key="...")
        names = await svc.suggest("tay")
        record = await svc.fetch_profile("Taylor Swift")
    """

    def __init__(
        self,
        api_key: str | None = None,
        profile_model: str = DEFAULT_PROFILE_MODEL,
        suggest_model: str = DEFAULT_SUGGEST_MODEL,
        max_suggestions: int = 5,
        client: object | None = None,
    ) -> None:
        self._api_key = api_key
        self._profile_model = profile_model
        self._suggest_model = suggest_model
        self._max_suggestions = max_suggestions
        self._client = client  # genai.Client, lazily initialized

    def _ensure_client(self):
        """Lazily initialize the genai.Client."""
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def suggest(self, partial: str) -> list[str]:
        """Return up to ``max_suggestions`` candidate names for *partial*.

        Best effort: any failure is logged and yields an empty list.
        """
        partial = partial.strip()
        if not partial:
            return []
        try:
            return await asyncio.to_thread(self._suggest_sync, partial)
        except Exception as exc:
            logger.debug("Suggestion lookup failed partial=%r: %s", partial, exc)
            return []

    def _suggest_sync(self, partial: str) -> list[str]:
        from google.genai import types

        client = self._ensure_client()
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=list[str],
        )
        response = client.models.generate_content(
            model=self._suggest_model,
            contents=SUGGEST_PROMPT.format(count=self._max_suggestions, partial=partial),
            config=config,
        )
        names = _NAMES_ADAPTER.validate_json(response.text or "[]")
        return [n.strip() for n in names if n.strip()][: self._max_suggestions]

    async def fetch_profile(self, name: str) -> ProfileRecord:
        """Fetch and validate the profile for *name*.

        Raises:
            ProfileTransportError: The Gemini call raised.
            ProfileDeclinedError: The model returned no content.
            ProfileValidationError: The content failed schema validation.
        """
        try:
            text = await asyncio.to_thread(self._fetch_sync, name)
        except Exception as exc:
            logger.warning("Profile fetch failed name=%r: %s", name, exc)
            raise ProfileTransportError(str(exc) or GENERIC_FAILURE) from exc

        if not text or not text.strip():
            logger.info("Profile declined name=%r", name)
            raise ProfileDeclinedError(DECLINED_MESSAGE)

        try:
            record = ProfileRecord.model_validate_json(text)
        except ValidationError as exc:
            logger.warning(
                "Profile payload failed validation name=%r errors=%d",
                name,
                exc.error_count(),
            )
            raise ProfileValidationError(DECLINED_MESSAGE) from exc

        logger.info(
            "Profile fetched name=%r rating=%.1f", record.name, record.popularity_rating
        )
        return record

    def _fetch_sync(self, name: str) -> str:
        from google.genai import types

        client = self._ensure_client()
        config = types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
            system_instruction=SYSTEM_INSTRUCTION,
            response_mime_type="application/json",
            response_schema=ProfileRecord,
        )
        response = client.models.generate_content(
            model=self._profile_model,
            contents=PROFILE_PROMPT.format(name=name),
            config=config,
        )
        return response.text or ""
