"""
Adapter around the external generative-AI text completion endpoint.
"""
import logging
import time
from functools import lru_cache
from typing import Optional

import httpx

from careercoach.core.config import settings
from careercoach.core.errors import GenerationFailure

logger = logging.getLogger(__name__)


class GenerativeClient:
    """Single-attempt client for the Gemini ``generateContent`` REST call.

    One instance is built per process and shared by every request and job;
    the underlying ``httpx.Client`` pools connections and is thread-safe.
    Failures are raised as ``GenerationFailure``; retrying is the caller's call.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def invoke(self, prompt: str, timeout: Optional[float] = None) -> str:
        """Send ``prompt`` and return the model's raw text, untouched.

        Args:
            prompt: Full prompt text.
            timeout: Per-call deadline in seconds; defaults to the client timeout.

        Returns:
            Raw completion text (may still be wrapped in a markdown fence).
        """
        if not self.api_key:
            raise GenerationFailure("generative service is not configured", reason="not_configured")
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        t0 = time.monotonic()
        try:
            resp = self._http.post(
                f"/models/{self.model}:generateContent",
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=timeout if timeout is not None else self.timeout,
            )
            resp.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning("Generation timed out after %.1fs (%s)", time.monotonic() - t0, self.model)
            raise GenerationFailure(f"generation timed out: {e}", reason="timeout")
        except httpx.HTTPStatusError as e:
            logger.warning("Generation returned HTTP %s (%s)", e.response.status_code, self.model)
            raise GenerationFailure(f"generation returned HTTP {e.response.status_code}", reason="status",
                                    status_code=e.response.status_code)
        except httpx.HTTPError as e:
            logger.warning("Generation transport error: %s", e)
            raise GenerationFailure(f"generation transport error: {e}", reason="transport")

        text = _extract_text(resp)
        logger.info("Generation via %s finished in %.2fs (%d chars)", self.model, time.monotonic() - t0, len(text))
        return text

    def close(self) -> None:
        self._http.close()


def _extract_text(resp: httpx.Response) -> str:
    try:
        data = resp.json()
        parts = data["candidates"][0]["content"]["parts"]
    except (ValueError, KeyError, IndexError, TypeError):
        raise GenerationFailure("generation response carried no candidates", reason="empty_response")
    if not isinstance(parts, list):
        raise GenerationFailure("generation response parts are not a list", reason="empty_response")
    texts = [p.get("text") for p in parts if isinstance(p, dict)]
    if any(t is not None and not isinstance(t, str) for t in texts):
        raise GenerationFailure("generation response carried non-text parts", reason="empty_response")
    text = "".join(t for t in texts if t)
    if not text:
        raise GenerationFailure("generation response carried no text", reason="empty_response")
    return text


@lru_cache()
def get_generative_client() -> GenerativeClient:
    """Process-wide shared client."""
    key = settings.GEMINI_API_KEY.get_secret_value() if settings.GEMINI_API_KEY else None
    return GenerativeClient(
        api_key=key,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.GENERATION_TIMEOUT_SECONDS,
    )
